"""
Startup Validation Module
Validates the lead catalog and provider configuration on startup
"""
import logging
from typing import List, Optional, Tuple
from dataclasses import dataclass

from helios.core.config import ConfigManager

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""
    provider: str
    setting: str
    is_valid: bool
    message: str


class ProviderValidator:
    """
    Validates console configuration at startup.

    The lead catalog is required. Voice cues are optional: a missing TTS
    configuration is a warning unless running in strict mode.
    """

    # Settings each TTS provider needs in providers.yaml (or its env var)
    REQUIRED_TTS_SETTINGS = {
        "google": [("api_key", "Google Cloud TTS")],
    }

    def __init__(self, config: ConfigManager, strict: bool = False):
        """
        Initialize validator.

        Args:
            config: Loaded YAML configuration
            strict: If True, treat warnings as errors
        """
        self.config = config
        self.strict = strict
        self.results: List[ValidationResult] = []

    def validate_all(self) -> Tuple[bool, List[ValidationResult]]:
        """
        Validate catalog and provider configuration.

        Returns:
            Tuple of (all_valid, list of results)
        """
        self.results = []

        catalog_path = self.config.get_catalog_path()
        if catalog_path.exists():
            self._add_success("catalog", "catalog.path", f"Lead catalog found at {catalog_path}")
        else:
            self._add_error("catalog", "catalog.path", f"Lead catalog not found at {catalog_path}")

        active = self.config.get_active_provider("tts")
        if not active:
            self._add_warning("tts", "providers.tts.active", "No TTS provider configured (voice cues disabled)")
        elif active not in self.REQUIRED_TTS_SETTINGS:
            self._add_error("tts", "providers.tts.active", f"Unknown TTS provider '{active}'")
        else:
            provider_config = self.config.get_provider_config("tts")
            for setting, description in self.REQUIRED_TTS_SETTINGS[active]:
                if provider_config.get(setting):
                    self._add_success("tts", setting, f"{description} configured")
                else:
                    self._add_warning("tts", setting, f"{description} requires {setting} (voice cues disabled)")

        errors = [r for r in self.results if not r.is_valid]
        return len(errors) == 0, self.results

    def _add_success(self, provider: str, setting: str, message: str):
        """Add successful validation result."""
        self.results.append(ValidationResult(provider=provider, setting=setting, is_valid=True, message=message))

    def _add_error(self, provider: str, setting: str, message: str):
        """Add error validation result."""
        self.results.append(ValidationResult(provider=provider, setting=setting, is_valid=False, message=message))

    def _add_warning(self, provider: str, setting: str, message: str):
        """Add warning validation result."""
        self.results.append(ValidationResult(
            provider=provider,
            setting=setting,
            is_valid=not self.strict,  # Warnings become errors in strict mode
            message=f"WARNING: {message}"
        ))

    def log_results(self):
        """Log all validation results."""
        for r in self.results:
            if not r.is_valid:
                logger.error(f"  ✗ [{r.provider}] {r.message}")
            elif r.message.startswith("WARNING"):
                logger.warning(f"  ⚠ [{r.provider}] {r.message}")
            else:
                logger.info(f"  ✓ [{r.provider}] {r.message}")

    def get_error_summary(self) -> Optional[str]:
        """Get summary of errors for exception message."""
        errors = [r for r in self.results if not r.is_valid]
        if not errors:
            return None

        lines = ["Configuration errors:"]
        for r in errors:
            lines.append(f"  - {r.setting}: {r.message}")
        return "\n".join(lines)


def validate_on_startup(config: ConfigManager, strict: bool = False) -> None:
    """
    Validate configuration at startup.

    Raises:
        RuntimeError: If required configuration is missing
    """
    validator = ProviderValidator(config, strict=strict)
    all_valid, _ = validator.validate_all()
    validator.log_results()

    if not all_valid:
        raise RuntimeError(validator.get_error_summary())

    logger.info("Configuration validated successfully")
