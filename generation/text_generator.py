"""
Text generation with a primary/secondary provider fallback.

Providers share one small interface so the rest of the application does not
care which backend produced the text. ``FallbackTextGenerator`` tries the
primary provider first and moves to the secondary on an error or a blank
response, raising only when both fail.
"""

from __future__ import annotations

import os
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from dotenv import load_dotenv
from ollama import Client as OllamaClient
from openai import OpenAI

from config import load_config
from utils.error_handling import ConfigError, GenerationError

logger = logging.getLogger(__name__)

HEALTH_CHECK_PROMPT = "Say 'OK' in one word."


class TextProvider(ABC):
    """Abstract base class for LLM text providers."""

    name = "provider"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return generated text for ``prompt``."""


class OpenAIProvider(TextProvider):
    """OpenAI chat completions provider."""

    name = "openai"

    def __init__(self, api_key: str | None = None, model: str = "gpt-4o-mini",
                 temperature: float = 0.7, max_tokens: int = 8192):
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ConfigError("OpenAI API key is required. Set OPENAI_API_KEY environment variable or pass api_key parameter.")

        self.client = OpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""


class OllamaProvider(TextProvider):
    """Ollama chat provider."""

    name = "ollama"

    def __init__(self, model: str = "llama3.1", base_url: str = "http://localhost:11434"):
        self.client = OllamaClient(host=base_url)
        self.model = model

    def generate(self, prompt: str) -> str:
        response = self.client.chat(model=self.model, messages=[{"role": "user", "content": prompt}])
        return response.message.content or ""


class FallbackTextGenerator:
    """Tries the primary provider, then the secondary, raising only if both fail."""

    def __init__(self, primary: Optional[TextProvider], secondary: Optional[TextProvider] = None):
        self.providers = [p for p in (primary, secondary) if p is not None]
        if not self.providers:
            logger.warning("No text providers are configured, generation will fail")

    def generate(self, prompt: str) -> str:
        last_error: Optional[Exception] = None

        for index, provider in enumerate(self.providers):
            try:
                text = provider.generate(prompt)
            except Exception as e:
                last_error = e
                logger.warning(f"{provider.name} generation failed: {e}")
                continue

            if text and text.strip():
                if index > 0:
                    logger.info(f"Generated text with fallback provider {provider.name}")
                else:
                    logger.debug(f"Generated text with {provider.name}")
                return text
            logger.warning(f"{provider.name} returned an empty response")

        if last_error is not None:
            raise GenerationError(f"All text providers failed. Last error: {last_error}") from last_error
        if not self.providers:
            raise GenerationError("No text providers are configured")
        raise GenerationError("All text providers returned empty responses")

    def check_connections(self) -> Dict[str, Dict[str, object]]:
        """Send a tiny prompt to each provider and report availability."""
        results = {}
        for provider in self.providers:
            try:
                text = provider.generate(HEALTH_CHECK_PROMPT)
                results[provider.name] = {"available": True, "message": f"Connection successful: {text.strip()}"}
            except Exception as e:
                results[provider.name] = {"available": False, "message": f"Connection failed: {e}"}
        return results


def build_provider(name: Optional[str], settings: Dict) -> Optional[TextProvider]:
    """Create a provider by name; returns None when it is not configured."""
    if not name:
        return None
    name = name.lower()
    provider_settings = settings.get(name, {})

    try:
        if name == "openai":
            return OpenAIProvider(
                model=os.getenv("OPENAI_MODEL", provider_settings.get("model", "gpt-4o-mini")),
                temperature=provider_settings.get("temperature", 0.7),
                max_tokens=provider_settings.get("max_tokens", 8192),
            )
        if name == "ollama":
            return OllamaProvider(
                model=os.getenv("OLLAMA_MODEL", provider_settings.get("model", "llama3.1")),
                base_url=os.getenv("OLLAMA_BASE_URL", provider_settings.get("base_url", "http://localhost:11434")),
            )
    except ConfigError as e:
        logger.warning(f"Provider {name} is not configured: {e}")
        return None

    raise ConfigError(f"Unsupported LLM provider: {name}")


def get_text_generator(config: Optional[Dict] = None) -> FallbackTextGenerator:
    """Factory building the fallback generator from config and environment."""
    load_dotenv()
    if config is None:
        config = load_config().get("rendering", {}).get("generation", {})
    config = config or {}

    primary = os.getenv("LLM_PRIMARY_PROVIDER", config.get("primary_provider", "openai"))
    secondary = os.getenv("LLM_SECONDARY_PROVIDER", config.get("secondary_provider", "ollama"))
    return FallbackTextGenerator(build_provider(primary, config), build_provider(secondary, config))
