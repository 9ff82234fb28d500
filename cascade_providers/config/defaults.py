"""cascade_providers.config.defaults
=================================

Central place for the small, stable constants used across the package: the
fixed generation parameters sent to every provider, the retry policy numbers,
and each provider's endpoint and model.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Generation parameters (identical for every provider) ----
MAX_OUTPUT_TOKENS = 32768
DEFAULT_TEMPERATURE = 0.7

# ---- Retry policy ----
# Total attempts per provider, i.e. up to two retries.
MAX_ATTEMPTS = 3
# Delay before retry i is INITIAL_BACKOFF_SECONDS * 2**i + U[0, MAX_JITTER_SECONDS).
INITIAL_BACKOFF_SECONDS = 2.0
MAX_JITTER_SECONDS = 1.0

# ---- HTTP ----
DEFAULT_HTTP_TIMEOUT_SECONDS = 60.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

# ---- Provider endpoints and models ----
CEREBRAS_BASE_URL = "https://api.cerebras.ai/v1"
CEREBRAS_DEFAULT_MODEL = "llama-3.1-70b-chat"

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
# Gemini selects the model in the endpoint path rather than in the body.
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash-lite"

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEEPSEEK_DEFAULT_MODEL = "deepseek-r1-0528"

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_DEFAULT_MODEL = "deepseek/deepseek-r1"

MISTRAL_BASE_URL = "https://api.mistral.ai/v1"
MISTRAL_DEFAULT_MODEL = "mistral-large-3"

TOGETHER_BASE_URL = "https://api.together.xyz/v1"
TOGETHER_DEFAULT_MODEL = "meta-llama/Llama-3.1-70b-instruct"

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_DEFAULT_MODEL = "llama-3.1-70b-versatile"

OPENAI_CHAT_ENDPOINT = "/chat/completions"


__all__ = [
    "MAX_OUTPUT_TOKENS",
    "DEFAULT_TEMPERATURE",
    "MAX_ATTEMPTS",
    "INITIAL_BACKOFF_SECONDS",
    "MAX_JITTER_SECONDS",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "CEREBRAS_BASE_URL",
    "CEREBRAS_DEFAULT_MODEL",
    "GEMINI_BASE_URL",
    "GEMINI_DEFAULT_MODEL",
    "DEEPSEEK_BASE_URL",
    "DEEPSEEK_DEFAULT_MODEL",
    "OPENROUTER_BASE_URL",
    "OPENROUTER_DEFAULT_MODEL",
    "MISTRAL_BASE_URL",
    "MISTRAL_DEFAULT_MODEL",
    "TOGETHER_BASE_URL",
    "TOGETHER_DEFAULT_MODEL",
    "GROQ_BASE_URL",
    "GROQ_DEFAULT_MODEL",
    "OPENAI_CHAT_ENDPOINT",
]
