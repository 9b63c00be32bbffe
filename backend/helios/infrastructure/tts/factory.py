"""
TTS Provider Factory
"""
import logging
from typing import Dict, Optional, Type
from helios.core.config import ConfigManager
from helios.domain.interfaces.tts_provider import TTSProvider

logger = logging.getLogger(__name__)


class TTSFactory:
    """Factory for creating TTS provider instances"""

    _providers: Dict[str, Type[TTSProvider]] = {}

    @classmethod
    def create(cls, provider_name: str) -> TTSProvider:
        """Create TTS provider instance"""
        if provider_name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "None"
            raise ValueError(f"Unknown TTS provider: {provider_name}. Available: {available}")

        provider_class = cls._providers[provider_name]
        return provider_class()

    @classmethod
    def register(cls, name: str, provider_class: Type[TTSProvider]) -> None:
        """Register a provider"""
        cls._providers[name] = provider_class

    @classmethod
    def list_providers(cls) -> list[str]:
        """List available providers"""
        return list(cls._providers.keys())


async def create_configured_provider(config: ConfigManager) -> Optional[TTSProvider]:
    """
    Build and initialize the active TTS provider.

    Returns None when voice cues are disabled or the provider cannot be
    initialized; announcements then become no-ops.
    """
    active = config.get_active_provider("tts")
    if not active:
        logger.info("No TTS provider configured - voice cues disabled")
        return None

    try:
        provider = TTSFactory.create(active)
        await provider.initialize(config.get_provider_config("tts"))
    except (ValueError, RuntimeError) as e:
        logger.warning(f"TTS provider '{active}' unavailable, voice cues disabled: {e}")
        return None

    logger.info(f"TTS provider initialized: {provider!r}")
    return provider


# Auto-register Google TTS
from helios.infrastructure.tts.google_tts import GoogleTTSProvider  # noqa: E402

TTSFactory.register("google", GoogleTTSProvider)
