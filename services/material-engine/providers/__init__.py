"""Material Engine Providers"""
from .llm_provider import (
    CompletionClient,
    CompletionError,
    LLMProvider,
    ProviderConfig,
    PROVIDER_CONFIGS,
    resolve_provider,
)

__all__ = [
    "CompletionClient",
    "CompletionError",
    "LLMProvider",
    "ProviderConfig",
    "PROVIDER_CONFIGS",
    "resolve_provider",
]
