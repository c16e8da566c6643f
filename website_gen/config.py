"""
Environment-driven settings for the generator.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


PROVIDER_DEFAULTS = {
    "groq": {
        "model": "llama-3.3-70b-versatile",
        "api_key_env": "GROQ_API_KEY",
        "base_url": "https://api.groq.com/openai/v1",
    },
    "openai": {
        "model": "gpt-4o-mini",
        "api_key_env": "OPENAI_API_KEY",
        "base_url": None,
    },
    "anthropic": {
        "model": "claude-3-5-sonnet-20241022",
        "api_key_env": "ANTHROPIC_API_KEY",
        "base_url": None,
    },
}

DEFAULT_TEMPERATURE = 0.4


class Settings(BaseModel):
    """Completion endpoint and output configuration."""
    provider: str = "groq"
    model_name: str = PROVIDER_DEFAULTS["groq"]["model"]
    api_key: Optional[str] = None
    base_url: Optional[str] = PROVIDER_DEFAULTS["groq"]["base_url"]
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = 4096
    output_dir: Path = Path("outputs")

    @classmethod
    def from_env(
        cls,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None,
    ) -> "Settings":
        """
        Build settings from environment variables (and a .env file).

        Explicit arguments win over the environment.

        Args:
            provider: LLM provider (groq, openai or anthropic).
            model_name: Model name (optional, uses provider default).
            temperature: Sampling temperature.
            api_key: API key (optional, uses the provider's environment variable).

        Returns:
            Settings object.
        """
        load_dotenv()

        provider = (provider or os.getenv("LLM_PROVIDER", "groq")).lower()
        if provider not in PROVIDER_DEFAULTS:
            raise ValueError(f"Unsupported provider: {provider}")
        defaults = PROVIDER_DEFAULTS[provider]

        if temperature is None:
            temperature = float(os.getenv("GENERATOR_TEMPERATURE", DEFAULT_TEMPERATURE))

        key = api_key or os.getenv(defaults["api_key_env"], "")
        # Keys pasted into .env with quotes around them
        key = key.strip().strip('"').strip("'") or None

        return cls(
            provider=provider,
            model_name=model_name or os.getenv("GENERATOR_MODEL") or defaults["model"],
            api_key=key,
            base_url=os.getenv("GENERATOR_BASE_URL") or defaults["base_url"],
            temperature=temperature,
            max_tokens=int(os.getenv("GENERATOR_MAX_TOKENS", "4096")),
            output_dir=Path(os.getenv("OUTPUT_DIR", "outputs")),
        )
