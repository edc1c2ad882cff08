"""
Intelligence provider adapter.

The pipeline only needs ``complete(system_prompt, user_prompt, hint) -> str``.
The default implementation sends a chat completion to an OpenAI-compatible
endpoint (Perplexity by default) through LangChain, retrying transient
failures with tenacity. Any final failure surfaces as ProviderError.
"""

import logging
import threading
from typing import Any, Optional, Protocol, runtime_checkable

from langchain_core.messages import HumanMessage, SystemMessage
from tenacity import Retrying, stop_after_attempt, wait_exponential

from contact_finder.common.config import Config
from contact_finder.common.error_handling import ProviderError
from contact_finder.common.llm_factory import create_provider_llm

logger = logging.getLogger(__name__)

FORMAT_INSTRUCTION = "\n\nFormat your response as JSON:\n"


@runtime_checkable
class CompletionProvider(Protocol):
    """Anything that turns prompts into raw completion text."""

    def complete(self, system_prompt: str, user_prompt: str, response_format_hint: str) -> str:
        ...


class LangChainCompletionProvider:
    """
    CompletionProvider backed by a LangChain chat model.

    The chat model is built on first use, so a missing API key only fails
    the calls (as ProviderError), not construction.
    """

    def __init__(
        self,
        llm: Optional[Any] = None,
        max_attempts: Optional[int] = None,
        wait: Optional[Any] = None,
    ):
        """
        Args:
            llm: Pre-built chat model (anything with ``invoke(messages)``)
            max_attempts: Attempts per call including the first (default Config)
            wait: tenacity wait strategy (default exponential, 1-5s)
        """
        self.logger = logging.getLogger(__name__)
        self._llm = llm
        self._llm_lock = threading.Lock()
        self.max_attempts = max_attempts or Config.PROVIDER_MAX_ATTEMPTS
        self.wait = wait if wait is not None else wait_exponential(multiplier=1, min=1, max=5)

    def _get_llm(self) -> Any:
        with self._llm_lock:
            if self._llm is None:
                try:
                    self._llm = create_provider_llm()
                except ValueError as e:
                    raise ProviderError(str(e)) from e
            return self._llm

    def complete(self, system_prompt: str, user_prompt: str, response_format_hint: str) -> str:
        """
        Run one completion.

        Raises:
            ProviderError: On missing credentials or when every attempt failed
        """
        llm = self._get_llm()
        messages = [
            SystemMessage(content=system_prompt + FORMAT_INSTRUCTION + response_format_hint),
            HumanMessage(content=user_prompt),
        ]

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait,
            reraise=True,
        )
        try:
            response = retrying(llm.invoke, messages)
        except Exception as e:
            self.logger.warning(f"Provider call failed after {self.max_attempts} attempt(s): {e}")
            raise ProviderError(f"Provider call failed: {e}") from e

        content = response.content if hasattr(response, "content") else response
        if isinstance(content, list):
            # Content blocks: keep the text parts
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return str(content or "")
