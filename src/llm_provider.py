"""
LLM Provider Abstraction Layer

Unified interface for multiple LLM providers using LiteLLM.
Supports Gemini, Claude (Anthropic) and Ollama.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
import os
from typing import Any

# Third-party imports
import litellm
from litellm import acompletion

# Local application imports
import constants as const
from db import Db
from system_settings import get_settings


# Get a logger instance
logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.set_verbose = False  # Set to True for debugging


class LLMProvider:
    """
    Unified LLM provider using LiteLLM for multi-model support.

    Handles:
    - Model selection from system settings (or explicit override)
    - API key management and provider configuration
    """

    def __init__(self, model: str | None = None, db: Db | None = None):
        """
        Initialize LLM provider.

        Args:
            model: LiteLLM model string override (e.g. 'gemini/gemini-2.5-flash-lite')
            db: Database instance used to read settings (only if model is None)
        """
        if model:
            self.litellm_model = model
        else:
            settings = get_settings(db)
            self.litellm_model = settings.effective(const.SETTING_DIGEST_MODEL)
        self.db = db

        # 'gemini/gemini-2.5-flash-lite' -> 'gemini'
        self.provider = self.litellm_model.split("/", 1)[0] if "/" in self.litellm_model else "openai"

        self._configure_provider()

        logger.info(f"LLM Provider initialized: litellm_model={self.litellm_model}, provider={self.provider}")

    def _configure_provider(self) -> None:
        """Configure provider-specific settings (API keys, base URLs)."""
        if self.provider == "gemini":
            if not const.GEMINI_API_KEY:
                raise ValueError("GEMINI_API_KEY not set in environment")
            os.environ["GEMINI_API_KEY"] = const.GEMINI_API_KEY

        elif self.provider == "anthropic":
            if not const.ANTHROPIC_API_KEY:
                raise ValueError("ANTHROPIC_API_KEY not set in environment")
            os.environ["ANTHROPIC_API_KEY"] = const.ANTHROPIC_API_KEY

        elif self.provider == "ollama":
            settings = get_settings(self.db)
            ollama_url = settings.effective(const.SETTING_OLLAMA_BASE_URL)
            os.environ["OLLAMA_API_BASE"] = ollama_url
            logger.info(f"Ollama configured: base_url={ollama_url}")

    def _build_params(
        self,
        messages: list[dict[str, Any]],
        system: str | None,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        if system:
            messages = [{"role": "system", "content": system}] + messages
        return {
            "model": self.litellm_model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

    async def acompletion(
        self,
        messages: list[dict[str, Any]],
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.7
    ) -> Any:
        """
        Async completion call using LiteLLM.

        Args:
            messages: Conversation messages in OpenAI format
            system: Optional system prompt
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (0.0-1.0)

        Returns:
            LiteLLM completion response
        """
        try:
            params = self._build_params(messages, system, max_tokens, temperature)
            logger.info(f"LLM request: model={self.litellm_model}, messages={len(params['messages'])}")

            response = await acompletion(**params)

            logger.info(f"LLM response received: finish_reason={response.choices[0].finish_reason}")
            return response

        except Exception as e:
            logger.error(f"Error in LLM completion: {e}", exc_info=True)
            raise

def response_text(response: Any) -> str | None:
    """Text of the first choice, or None when the model returned nothing."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError):
        return None
    return str(content) if content else None


def create_llm_provider(model: str | None = None, db: Db | None = None) -> LLMProvider:
    """
    Factory function to create LLMProvider instance.

    Args:
        model: LiteLLM model override (if None, uses the configured digest model)
        db: Database instance for settings lookup

    Returns:
        LLMProvider instance
    """
    return LLMProvider(model=model, db=db)
