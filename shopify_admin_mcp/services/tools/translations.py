from typing import Any, Dict, List

from pydantic import Field

from .base import BaseTool, ToolInput


class TranslationInput(ToolInput):
    key: str = Field(
        min_length=1, description="The translatable field key (e.g., 'title', 'body_html')"
    )
    value: str = Field(description="The translated text")
    translatable_content_digest: str = Field(
        min_length=1,
        description="Digest of the original content, as returned by translatableResource",
    )


class RegisterTranslationsInput(ToolInput):
    resource_id: str = Field(
        min_length=1,
        description="The GID of the resource to translate (e.g., 'gid://shopify/Product/123')",
    )
    locale: str = Field(min_length=2, description="The target locale code (e.g., 'fr', 'de', 'pt-BR')")
    translations: List[TranslationInput] = Field(
        min_length=1, description="Translations to register for this resource"
    )


class RegisterTranslationsTool(BaseTool):
    input_model = RegisterTranslationsInput

    @property
    def name(self) -> str:
        return "register-translations"

    @property
    def description(self) -> str:
        return (
            "Register translations for a resource's translatable content in a given locale. "
            "Each translation needs the digest of the original content."
        )

    async def execute(self, params: RegisterTranslationsInput) -> Dict[str, Any]:
        mutation = """
        mutation translationsRegister($resourceId: ID!, $translations: [TranslationInput!]!) {
            translationsRegister(resourceId: $resourceId, translations: $translations) {
                translations {
                    key
                    value
                    locale
                    outdated
                }
                userErrors { field message code }
            }
        }
        """
        translations = [
            {**translation.to_variables(), "locale": params.locale}
            for translation in params.translations
        ]
        data = await self._request(
            mutation, {"resourceId": params.resource_id, "translations": translations}
        )
        registered = self._payload(
            data, "translationsRegister", "translations", "register translations"
        )
        return {
            "success": True,
            "resourceId": params.resource_id,
            "locale": params.locale,
            "translations": registered,
        }
