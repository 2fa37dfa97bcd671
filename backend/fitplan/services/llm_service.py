import json
import logging
import re
import time
from typing import Any, Callable, List, Optional

# LangChain Imports
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

import config
from fitplan.utils.errors import GenerationTransportError

logger = logging.getLogger(__name__)

# Determine Model Name based on Provider
# If LLM_MODEL is set in env, it overrides everything.
DEFAULT_MODELS = {
    "ollama": "gpt-oss:120b-cloud",
    "openrouter": "google/gemini-2.0-flash-001",  # Cost effective default
    "openai": "gpt-4o",
}

# Base URLs for paid providers
PROVIDER_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": None,  # Uses default OpenAI URL
}

_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def model_name(provider: Optional[str] = None) -> str:
    provider = provider or config.LLM_PROVIDER
    return config.LLM_MODEL or DEFAULT_MODELS.get(provider, "gpt-4o-mini")


def get_llm(
    api_key: str,
    temperature: float = 0.7,
    max_tokens: int = 8000,
    json_mode: bool = False,
    provider: Optional[str] = None,
):
    """
    Factory function to get a configured LangChain Chat Model instance.
    Supports: Ollama (Local / Cloud), OpenRouter, OpenAI
    Retries are handled by invoke_with_retry, so provider-level retries are off.
    """
    provider = (provider or config.LLM_PROVIDER).lower()
    timeout = config.LLM_TIMEOUT_SECONDS

    # 1. Ollama
    if provider == "ollama":
        return ChatOllama(
            base_url=config.OLLAMA_URL,
            model=model_name(provider),
            temperature=temperature,
            num_predict=max_tokens,
            format="json" if json_mode else "",
            client_kwargs={
                "timeout": timeout,
                "headers": {"Authorization": f"Bearer {api_key}"},
            },
        )

    # 2. OpenAI Compatible (OpenRouter, OpenAI)
    if provider in PROVIDER_URLS:
        model_kwargs = {}
        if json_mode:
            model_kwargs["response_format"] = {"type": "json_object"}

        return ChatOpenAI(
            model=model_name(provider),
            api_key=api_key,
            base_url=PROVIDER_URLS.get(provider),
            temperature=temperature,
            max_tokens=max_tokens,
            model_kwargs=model_kwargs,
            timeout=timeout,
            max_retries=0,
        )

    raise ValueError(f"Unknown LLM provider '{provider}'. Options: ollama, openrouter, openai")


def invoke_with_retry(
    llm,
    messages: List[BaseMessage],
    max_retries: Optional[int] = None,
    backoff_seconds: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Calls the model, retrying transport failures with exponential backoff.
    Raises GenerationTransportError once the retry budget is spent.
    """
    max_retries = config.LLM_MAX_RETRIES if max_retries is None else max_retries
    backoff_seconds = config.LLM_RETRY_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds

    attempt = 0
    while True:
        try:
            return llm.invoke(messages)
        except Exception as e:
            if attempt >= max_retries:
                logger.error(f"[LLM Service] Call failed after {attempt + 1} attempt(s): {e}")
                raise GenerationTransportError(str(e)) from e
            delay = backoff_seconds * (2 ** attempt)
            logger.warning(f"[LLM Service] Call failed ({e}); retrying in {delay:.1f}s")
            sleep(delay)
            attempt += 1


def _log_usage(response) -> None:
    metadata = getattr(response, "response_metadata", None) or {}

    # Ollama returns tokens directly in metadata, not in nested 'usage'
    input_tokens = metadata.get("prompt_eval_count") or 0
    output_tokens = metadata.get("eval_count") or 0

    # Fallback to nested usage dict (for OpenAI-compatible providers)
    if input_tokens == 0 and output_tokens == 0:
        usage = metadata.get("token_usage") or metadata.get("usage") or {}
        input_tokens = usage.get("prompt_tokens") or usage.get("input_tokens") or 0
        output_tokens = usage.get("completion_tokens") or usage.get("output_tokens") or 0

    if input_tokens or output_tokens:
        logger.info(f"[LLM Stats] Input: {input_tokens}, Output: {output_tokens}, Total: {input_tokens + output_tokens}")


def call_llm(llm, system_prompt: str, user_prompt: str) -> str:
    """
    Executes a chat request and returns the raw text content ("" when empty).
    """
    logger.info(f"[LLM Service] Calling Model: {model_name()}")
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_prompt),
    ]
    response = invoke_with_retry(llm, messages)
    _log_usage(response)

    content = response.content
    if not isinstance(content, str):
        content = json.dumps(content) if content else ""
    if not content:
        logger.warning("[LLM Service] Empty content received.")
    return content


def parse_json_response(text: str) -> Optional[Any]:
    """
    Decodes a model response that may be wrapped in a ```json fence.
    Returns None (never raises) when the payload is not valid JSON.
    """
    if text is None:
        return None

    json_str = text.strip()
    match = _FENCE_RE.match(json_str)
    if match and match.group(2):
        json_str = match.group(2).strip()

    try:
        return json.loads(json_str)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"[LLM Service] Failed to parse JSON response: {e}. Original text: {text[:500]}")
        return None
