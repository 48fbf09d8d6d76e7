"""
Completion Service Client

OpenAI-compatible chat completion wrapper used by the Material Engine.

Environment Variables:
    LLM_PROVIDER: "openai" | "deepseek" | "groq" | "mistral" | "ollama"
    LLM_PROVIDER_API_KEY: API key for the selected provider (falls back to provider-specific keys)
    OLLAMA_BASE_URL: base URL of a self-hosted Ollama server
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when the completion service fails or returns no content."""
    pass


class LLMProvider(str, Enum):
    """Supported OpenAI-compatible providers"""
    OPENAI = "openai"
    DEEPSEEK = "deepseek"
    GROQ = "groq"
    MISTRAL = "mistral"
    OLLAMA = "ollama"           # Self-hosted via Ollama


@dataclass
class ProviderConfig:
    """Configuration for an LLM provider"""
    name: str
    base_url: str
    api_key_env: str
    default_model: str


PROVIDER_CONFIGS: Dict[LLMProvider, ProviderConfig] = {
    LLMProvider.OPENAI: ProviderConfig(
        name="OpenAI",
        base_url="https://api.openai.com/v1",
        api_key_env="OPENAI_API_KEY",
        default_model="gpt-4o-mini",
    ),
    LLMProvider.DEEPSEEK: ProviderConfig(
        name="DeepSeek",
        base_url="https://api.deepseek.com",
        api_key_env="DEEPSEEK_API_KEY",
        default_model="deepseek-chat",
    ),
    LLMProvider.GROQ: ProviderConfig(
        name="Groq",
        base_url="https://api.groq.com/openai/v1",
        api_key_env="GROQ_API_KEY",
        default_model="llama-3.3-70b-versatile",
    ),
    LLMProvider.MISTRAL: ProviderConfig(
        name="Mistral",
        base_url="https://api.mistral.ai/v1",
        api_key_env="MISTRAL_API_KEY",
        default_model="mistral-small-latest",
    ),
    LLMProvider.OLLAMA: ProviderConfig(
        name="Ollama (Self-Hosted)",
        base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1"),
        api_key_env="OLLAMA_API_KEY",
        default_model="llama3.1:8b",
    ),
}


def resolve_provider(provider_name: Optional[str]) -> LLMProvider:
    """Map a provider name to LLMProvider, falling back to OpenAI."""
    try:
        return LLMProvider((provider_name or "openai").lower())
    except ValueError:
        logger.warning(f"[LLM] Unknown provider '{provider_name}', falling back to OpenAI")
        return LLMProvider.OPENAI


class CompletionClient:
    """
    Single-attempt chat completion client.

    The underlying AsyncOpenAI client is created on first use, so building
    a CompletionClient never requires an API key. Retries are disabled: a
    failed call raises CompletionError and the caller decides what to do.
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 30.0,
        api_key: Optional[str] = None,
    ):
        self.provider = resolve_provider(provider or os.getenv("LLM_PROVIDER"))
        self.config = PROVIDER_CONFIGS[self.provider]
        self.model = model or self.config.default_model
        self.timeout = timeout
        self._api_key = api_key
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = (
                self._api_key
                or os.getenv("LLM_PROVIDER_API_KEY")
                or os.getenv(self.config.api_key_env)
            )
            # Ollama accepts any key
            if self.provider == LLMProvider.OLLAMA and not api_key:
                api_key = "ollama"
            if not api_key:
                logger.warning(
                    f"[LLM] No API key found for {self.config.name}; "
                    f"set LLM_PROVIDER_API_KEY or {self.config.api_key_env}"
                )
            self._client = AsyncOpenAI(
                api_key=api_key or "missing",
                base_url=self.config.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
            logger.info(f"[LLM] Initialized {self.config.name} client, model={self.model}, timeout={self.timeout}s")
        return self._client

    async def complete(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        """
        Send one system+user exchange and return the reply text.

        Raises:
            CompletionError: on any transport/API failure or empty reply
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        if not response.choices:
            raise CompletionError("Completion response has no choices")
        content = response.choices[0].message.content
        if not content:
            raise CompletionError("Completion response has no content")
        return content
