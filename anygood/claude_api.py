"""
Claude API client for remote parsing.

Provides the LLM callback used by NaturalLanguageParser when remote parsing
is enabled.
"""

import asyncio
import os
from typing import Optional

from .logging import get_logger
from .parser import LLMCallback

log = get_logger("core", "claude_api")

DEFAULT_MODEL = "claude-3-5-haiku-20241022"


class ClaudeClient:
    """
    Claude API client.

    Uses the Anthropic Python SDK. A small, fast model is enough for
    structuring short notes.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_retries: int = 3,
    ):
        """
        Initialize the Claude client.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            model: Claude model to use
            max_retries: Attempts for connection/timeout errors
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model
        self.max_retries = max_retries
        self.client = None

    def _ensure_client(self):
        """Lazily initialize the Anthropic client."""
        if self.client is not None:
            return

        if not self.api_key:
            raise ValueError(
                "Claude API key not provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key to ClaudeClient."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic package not installed. Run: pip install anthropic"
            )

        self.client = anthropic.Anthropic(api_key=self.api_key)
        log.info("claude.client.initialized", model=self.model)

    async def send_message(self, prompt: str, max_tokens: int = 512) -> str:
        """
        Send a message to Claude and get the response text.

        Connection and timeout errors are retried with exponential backoff;
        other errors are raised immediately.
        """
        self._ensure_client()

        last_error = None
        for attempt in range(self.max_retries):
            try:
                response = await asyncio.to_thread(
                    self.client.messages.create,
                    model=self.model,
                    max_tokens=max_tokens,
                    messages=[{"role": "user", "content": prompt}],
                )

                text_content = ""
                for block in response.content:
                    if hasattr(block, "text"):
                        text_content += block.text

                log.debug("claude.message.received", chars=len(text_content), attempt=attempt + 1)
                return text_content

            except Exception as e:
                last_error = e
                error_str = str(e).lower()

                if "connection" in error_str or "timeout" in error_str:
                    wait_time = 2 ** attempt  # 1, 2, 4 seconds
                    log.warning(
                        "claude.message.retry",
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                        wait_seconds=wait_time,
                        error=str(e),
                    )
                    await asyncio.sleep(wait_time)
                else:
                    log.error("claude.message.error", error_type=type(e).__name__, error=str(e))
                    raise

        log.error("claude.message.exhausted", max_retries=self.max_retries, error=str(last_error))
        raise last_error

    def as_callback(self) -> LLMCallback:
        """Adapt this client to the parser's prompt -> text callback."""
        async def callback(prompt: str) -> str:
            return await self.send_message(prompt)
        return callback

    def is_available(self) -> bool:
        try:
            self._ensure_client()
            return True
        except (ValueError, ImportError) as e:
            log.warning("claude.unavailable", error=str(e))
            return False
