"""
Extraction adapters that turn feedback text into rejection records.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional
import requests
from langchain_core.language_models.chat_models import BaseChatModel

from ..errors import ExtractionError, ExtractionTimeoutError
from ..storage.models import RejectionRecord
from .parsing import parse_extraction
from .prompts import build_extraction_prompt

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1000
ANTHROPIC_VERSION = "2023-06-01"

class RejectionExtractor(ABC):
    """Base class for extraction backends.

    Subclasses only implement ``_complete``: send a prompt, return the
    model's reply text. Prompt building and parsing live here.
    """

    def __init__(self, timeout: Optional[float] = None):
        """Initialize extractor.

        Args:
            timeout: Optional number of seconds to wait for the service
        """
        self.timeout = timeout

    @abstractmethod
    async def _complete(self, prompt: str) -> str:
        """Send the prompt to the service and return the reply text."""

    async def extract(self, text: str) -> RejectionRecord:
        """Extract a structured rejection record from feedback text.

        Args:
            text: Non-empty feedback text

        Returns:
            RejectionRecord built from the service reply

        Raises:
            ExtractionError: If the service call fails or the reply is malformed
        """
        prompt = build_extraction_prompt(text)
        try:
            if self.timeout:
                reply = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout)
            else:
                reply = await self._complete(prompt)
        except asyncio.TimeoutError as e:
            raise ExtractionTimeoutError(
                f"The extraction service did not answer within {self.timeout:g} seconds."
            ) from e

        record = parse_extraction(reply, raw_text=text)
        logger.info("Extracted rejection %s at stage %s", record.id, record.stage.value)
        return record

class MessagesApiExtractor(RejectionExtractor):
    """Extractor that posts to a messages-style HTTP API."""

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None
    ):
        """Initialize HTTP extractor.

        Args:
            api_key: API key sent in the x-api-key header
            model_name: Model identifier put in the request body
            max_tokens: Token budget for the reply
            api_url: Messages endpoint
            timeout: Optional number of seconds to wait for the service
        """
        super().__init__(timeout=timeout)
        self.api_key = api_key
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.api_url = api_url

    def _headers(self) -> Dict[str, str]:
        headers = {
            "content-type": "application/json",
            "anthropic-version": ANTHROPIC_VERSION,
        }
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def _build_payload(self, prompt: str) -> Dict:
        return {
            "model": self.model_name,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _post(self, prompt: str) -> str:
        try:
            response = requests.post(
                self.api_url,
                headers=self._headers(),
                json=self._build_payload(prompt),
                timeout=self.timeout
            )
        except requests.Timeout as e:
            raise ExtractionTimeoutError("The extraction service timed out.") from e
        except requests.RequestException as e:
            raise ExtractionError(f"Could not reach the extraction service: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning("Extraction request failed with status %s", response.status_code)
            raise ExtractionError(f"The extraction service returned status {response.status_code}.")

        try:
            data = response.json()
        except ValueError as e:
            raise ExtractionError("The extraction service returned a body that is not JSON.") from e

        content = data.get("content") if isinstance(data, dict) else None
        for entry in content or []:
            if isinstance(entry, dict) and entry.get("type") == "text":
                return entry.get("text", "")
        raise ExtractionError("The extraction service reply has no text content.")

    async def _complete(self, prompt: str) -> str:
        return await asyncio.to_thread(self._post, prompt)

class ChatModelExtractor(RejectionExtractor):
    """Extractor backed by a langchain chat model."""

    def __init__(self, llm: BaseChatModel, timeout: Optional[float] = None):
        super().__init__(timeout=timeout)
        self.llm = llm

    async def _complete(self, prompt: str) -> str:
        try:
            message = await self.llm.ainvoke(prompt)
        except Exception as e:
            raise ExtractionError(f"The chat model call failed: {e}") from e

        content = message.content
        # Some chat models answer with a list of content blocks
        if isinstance(content, list):
            for block in content:
                if isinstance(block, str):
                    return block
                if isinstance(block, dict) and block.get("type") == "text":
                    return block.get("text", "")
            raise ExtractionError("The chat model reply has no text content.")
        return content
