import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.errors import ChatProxyError

logger = logging.getLogger(__name__)


class ChatService:
    """Forward chat-completion requests to the OpenAI API"""

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_url = api_url or settings.OPENAI_API_URL
        self.timeout = settings.OPENAI_TIMEOUT_SECONDS if timeout is None else timeout

    async def send(self, body: Dict[str, Any], api_key: str) -> Dict[str, Any]:
        """Send the request body verbatim and return the upstream JSON"""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    json=body,
                    headers={"Authorization": f"Bearer {api_key}"},
                )
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"OpenAI API request failed: {e}")
            raise ChatProxyError(str(e) or "Server error processing chat request") from e
        except ValueError as e:
            logger.error(f"OpenAI API returned an unreadable response: {e}")
            raise ChatProxyError("Invalid response from OpenAI API") from e

        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning(f"OpenAI API returned an error (HTTP {response.status_code})")
            raise ChatProxyError(message or "Error from OpenAI API")

        return data
