"""Alt text generation through a vision-capable chat completion endpoint."""

import logging
from typing import Any, Dict, Optional

import httpx

from microblog_publisher.core.config import PublisherConfig

logger = logging.getLogger(__name__)

ALT_TEXT_PROMPT = "Write a short, descriptive alt text for the image. Keep it concise and relevant."
MAX_TOKENS = 60


def build_alt_text_request(image_url: str, model: str) -> Dict[str, Any]:
    """Build the chat completion payload asking for alt text of one image."""
    return {
        'model': model,
        'messages': [
            {
                'role': 'user',
                'content': [
                    {'type': 'text', 'text': ALT_TEXT_PROMPT},
                    {'type': 'image_url', 'image_url': {'url': image_url}},
                ],
            }
        ],
        'max_tokens': MAX_TOKENS,
    }


class AltTextClient:
    """Asks a chat completion model to describe an uploaded image."""

    def __init__(self, config: PublisherConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)

    async def __aenter__(self) -> "AltTextClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def generate(self, image_url: str) -> str:
        """Return alt text for the image at image_url, or "" if the model gave none."""
        response = await self._http.post(
            self.config.alt_text_url,
            headers={'Authorization': f"Bearer {self.config.gpt_api_key}"},
            json=build_alt_text_request(image_url, self.config.alt_text_model),
        )
        response.raise_for_status()

        choices = response.json().get('choices') or []
        if not choices:
            return ""
        content = (choices[0].get('message') or {}).get('content')
        return content.strip() if isinstance(content, str) else ""
