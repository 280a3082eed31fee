"""LLM client: one chat completion against an OpenAI-compatible endpoint (OpenRouter)."""

import logging

import openai
from openai import AsyncOpenAI

from app.errors import UpstreamGatewayError, UpstreamPayloadError

logger = logging.getLogger(__name__)


class LLMClient:
    """Async chat-completion client. Build once at startup and share."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        default_model: str,
        timeout: float = 60.0,
    ):
        if not api_key:
            raise RuntimeError("OPENROUTER_API_KEY is not set")

        self.default_model = default_model
        # No automatic retries: a failed call is reported, the caller may retry.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(
        self,
        system: str,
        user: str,
        *,
        model: str | None = None,
        json_mode: bool = True,
    ) -> str:
        """Get the top choice's text for a system + user prompt.

        Args:
            system: System instruction
            user: User content
            model: Model identifier; defaults to the configured one
            json_mode: If True, request a JSON object reply (response_format)

        Returns:
            Raw text content of the first choice.

        Raises:
            UpstreamGatewayError: transport failure or non-2xx status.
            UpstreamPayloadError: the reply carried no text content.
        """
        kwargs: dict = {
            "model": model or self.default_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            logger.error(f"Completion API returned {e.status_code} for model {kwargs['model']}: {e.message}")
            raise UpstreamGatewayError("Failed to get a response from the AI service.") from e
        except openai.APIError as e:
            logger.error(f"Completion API call failed for model {kwargs['model']}: {e}")
            raise UpstreamGatewayError("Failed to get a response from the AI service.") from e

        choices = response.choices or []
        content = choices[0].message.content if choices else None
        if not content:
            logger.error(f"Completion API returned an empty response for model {kwargs['model']}")
            raise UpstreamPayloadError(
                "AI returned an invalid or empty response.", kind="empty", raw_content=content
            )
        return content

    async def close(self) -> None:
        await self._client.close()
