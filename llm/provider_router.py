"""
LLM Provider Router - builds the speech/summarization client for the configured provider
Supports OpenAI (default) and Groq, both through their OpenAI-compatible async SDKs
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import openai
from groq import AsyncGroq

logger = logging.getLogger(__name__)

# provider -> (transcription model, summary model)
DEFAULT_MODELS = {
    'openai': ('whisper-1', 'gpt-4o-mini'),
    'groq': ('whisper-large-v3', 'llama-3.3-70b-versatile'),
}


@dataclass
class ProviderSettings:
    client: Any
    provider: str
    transcription_model: str
    summary_model: str


def build_provider(
    provider: str,
    api_key: str,
    base_url: Optional[str] = None,
    transcription_model: Optional[str] = None,
    summary_model: Optional[str] = None,
    timeout: float = 120,
) -> ProviderSettings:
    """
    Create the async client and resolve model names

    Raises:
        ValueError: for an unknown provider
    """
    if provider not in DEFAULT_MODELS:
        raise ValueError(f"Unknown provider: {provider}")

    if provider == 'groq':
        client = AsyncGroq(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
    else:
        client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

    default_stt, default_llm = DEFAULT_MODELS[provider]
    settings = ProviderSettings(
        client=client,
        provider=provider,
        transcription_model=transcription_model or default_stt,
        summary_model=summary_model or default_llm,
    )
    logger.info(
        f"✅ {provider} client initialized: stt={settings.transcription_model}, llm={settings.summary_model}"
    )
    return settings
