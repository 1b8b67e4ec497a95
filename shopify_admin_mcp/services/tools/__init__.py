from .base import BaseTool, ToolInput
from .registry import ToolRegistry, all_tools, build_registry

__all__ = ["BaseTool", "ToolInput", "ToolRegistry", "all_tools", "build_registry"]
