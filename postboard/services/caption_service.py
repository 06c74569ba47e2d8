"""Social-media caption enhancement via the OpenAI API."""

from typing import Optional

import openai
import structlog
from openai import AsyncOpenAI

from postboard.config import Settings
from postboard.services.errors import UpstreamError

logger = structlog.get_logger(__name__)

FALLBACK_CAPTION = "Could not enhance caption."

PROMPT_TEMPLATE = (
    'You are a clever and social assistant. Enhance this social media post caption: "{caption}". '
    "Make sure it is not more than {max_words} words. "
    "Do not describe what you did; return only the enhanced caption."
)


class CaptionService:
    """Rewrites a post caption with a chat-completion model."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-load OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.caption_timeout_seconds,
            )
        return self._client

    async def enhance(self, caption: str) -> str:
        """Return an improved caption, or a fallback text if the model is silent.

        Raises:
            UpstreamError: If the OpenAI call fails
        """
        prompt = PROMPT_TEMPLATE.format(
            caption=caption, max_words=self.settings.caption_max_words
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.settings.openai_model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.OpenAIError as e:
            logger.error(
                "caption_enhancement_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamError("could not enhance caption")

        content = (response.choices[0].message.content or "").strip()
        logger.debug(
            "caption_enhanced",
            model=self.settings.openai_model,
            input_length=len(caption),
            output_length=len(content),
        )
        return content or FALLBACK_CAPTION
