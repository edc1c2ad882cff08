"""
LLM Factory Module.

Provides the factory used to build the chat model behind the intelligence
provider. Discovery code should use this factory instead of instantiating
ChatOpenAI directly, so endpoint, credentials and limits come from Config.

Usage:
    from contact_finder.common.llm_factory import create_provider_llm

    # Provider LLM with defaults from Config (Perplexity, sonar)
    llm = create_provider_llm()

    # With custom parameters
    llm = create_provider_llm(model="sonar-pro", temperature=0.1, max_tokens=1500)
"""

import logging
from typing import Any, List, Optional

from langchain_core.callbacks import BaseCallbackHandler
from langchain_openai import ChatOpenAI

from contact_finder.common.config import Config

logger = logging.getLogger(__name__)


def create_provider_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    timeout: Optional[int] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    callbacks: Optional[List[BaseCallbackHandler]] = None,
    **kwargs: Any,
) -> ChatOpenAI:
    """
    Create a ChatOpenAI instance pointed at the OpenAI-compatible provider.

    Retries are handled by the caller (tenacity), so the client's own retry
    loop is disabled.

    Args:
        model: Model name (defaults to Config.PROVIDER_MODEL)
        temperature: Temperature (defaults to Config.PROVIDER_TEMPERATURE)
        max_tokens: Completion limit (defaults to Config.PROVIDER_MAX_TOKENS)
        timeout: Request timeout in seconds (defaults to Config.PROVIDER_TIMEOUT_SECONDS)
        api_key: API key (defaults to Config.PERPLEXITY_API_KEY)
        base_url: Endpoint (defaults to Config.PROVIDER_BASE_URL)
        callbacks: Optional LangChain callbacks
        **kwargs: Additional ChatOpenAI parameters

    Returns:
        ChatOpenAI instance

    Raises:
        ValueError: If no API key is configured
    """
    effective_model = model or Config.PROVIDER_MODEL
    effective_temperature = temperature if temperature is not None else Config.PROVIDER_TEMPERATURE
    effective_key = api_key if api_key is not None else Config.PERPLEXITY_API_KEY
    effective_url = base_url or Config.PROVIDER_BASE_URL

    if not effective_key:
        raise ValueError("PERPLEXITY_API_KEY is not configured")

    llm = ChatOpenAI(
        model=effective_model,
        temperature=effective_temperature,
        max_tokens=max_tokens if max_tokens is not None else Config.PROVIDER_MAX_TOKENS,
        timeout=timeout if timeout is not None else Config.PROVIDER_TIMEOUT_SECONDS,
        max_retries=0,
        api_key=effective_key,
        base_url=effective_url,
        callbacks=callbacks,
        **kwargs,
    )

    logger.debug(f"Created provider LLM: model={effective_model}, base_url={effective_url}")

    return llm
