from typing import Callable

import requests

from ..core.config import settings
from ..core.errors import InferenceError
from ..core.logging import get_logger

logger = get_logger(__name__)

# (system_prompt, user_prompt, model_id) -> raw response text
Completion = Callable[[str, str, str], str]

def ollama_generate(system_prompt: str, user_prompt: str, model_id: str) -> str:
    r = requests.post(
        f"{settings.OLLAMA_HOST}/api/generate",
        json={
            "model": model_id,
            "system": system_prompt,
            "prompt": user_prompt,
            "format": "json",
            "stream": False,
            "options": {"temperature": settings.LLM_TEMPERATURE, "num_predict": settings.LLM_MAX_TOKENS},
        },
        timeout=settings.LLM_TIMEOUT,
    )
    r.raise_for_status()
    return r.json().get("response", "")

def openai_chat(system_prompt: str, user_prompt: str, model_id: str) -> str:
    if not settings.OPENAI_API_KEY:
        raise InferenceError(
            "OpenAI API key is invalid or missing. Please check your configuration.",
            category="auth",
        )
    r = requests.post(
        f"{settings.OPENAI_BASE_URL}/chat/completions",
        headers={"Authorization": f"Bearer {settings.OPENAI_API_KEY}"},
        json={
            "model": model_id,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": settings.LLM_TEMPERATURE,
            "max_tokens": settings.LLM_MAX_TOKENS,
            "response_format": {"type": "json_object"},
        },
        timeout=settings.LLM_TIMEOUT,
    )
    r.raise_for_status()
    choices = r.json().get("choices") or [{}]
    return (choices[0].get("message") or {}).get("content") or ""

PROVIDERS = {"openai": openai_chat, "ollama": ollama_generate}

def classify_failure(exc: Exception, model_id: str) -> InferenceError:
    """Map a transport/HTTP failure to a user-facing InferenceError."""
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return InferenceError(
            f"Could not reach the AI provider: {exc}", category="network",
        )

    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    body = (getattr(response, "text", "") or str(exc)).lower()

    if status in (401, 403) or "api key" in body:
        return InferenceError(
            "OpenAI API key is invalid or missing. Please check your configuration.",
            category="auth", status_code=status,
        )
    if status == 429 or "quota" in body or "rate limit" in body:
        return InferenceError(
            "OpenAI API quota exceeded or rate limit reached. Please try again later.",
            category="quota", status_code=status,
        )
    if status == 404 or "model_not_found" in body:
        return InferenceError(
            f"Invalid model ID: {model_id}. Please check your configuration.",
            category="model", status_code=status,
        )
    return InferenceError(
        f"Failed to analyze document with AI: {exc}", category="generic", status_code=status,
    )

def complete(system_prompt: str, user_prompt: str, model_id: str) -> str:
    """Call the configured provider once. No retries."""
    call = PROVIDERS.get(settings.LLM_PROVIDER)
    if call is None:
        raise InferenceError(
            f"Unknown LLM provider: {settings.LLM_PROVIDER}", category="generic",
            hint=f"Set LLM_PROVIDER to one of {sorted(PROVIDERS)}",
        )

    logger.info("Calling %s with model %s", settings.LLM_PROVIDER, model_id)
    try:
        content = call(system_prompt, user_prompt, model_id)
    except InferenceError:
        raise
    except (requests.RequestException, ValueError) as e:
        err = classify_failure(e, model_id)
        logger.error("Inference failed (%s): %s", err.category, e)
        raise err from e

    if not content:
        raise InferenceError("AI response content is empty", category="empty")
    logger.info("Received %d characters from model", len(content))
    return content
