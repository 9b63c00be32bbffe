"""
Configuration Management
Loads settings from YAML files and environment variables
"""
import yaml
import os
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API Settings
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:3000"]

    # YAML config location (default.yaml, {env}.yaml, providers.yaml, leads.yaml)
    config_dir: Path = DEFAULT_CONFIG_DIR


class SessionTiming(BaseModel):
    """Timer and view settings for the call console"""
    dial_settle_seconds: float = Field(default=1.4, gt=0, description="Dialing -> active delay")
    elapsed_tick_seconds: float = Field(default=1.0, gt=0, description="Call clock refresh interval")
    auto_advance_seconds: float = Field(default=6.0, gt=0, description="Auto-advance interval")
    journal_window: int = Field(default=14, ge=1, description="Entries shown in the journal view")
    lead_reply_offset_ms: int = Field(default=400, ge=0, description="Offset of synthesized lead replies")


class ConfigManager:
    """Manages loading and merging configuration from multiple sources"""

    def __init__(self, env: str = "development", config_dir: Optional[Path] = None):
        self.env = env
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration files in order of precedence"""
        # Load default config if exists
        default_path = self.config_dir / "default.yaml"
        if default_path.exists():
            self._config = self._load_yaml(default_path)

        # Load environment-specific config
        env_path = self.config_dir / f"{self.env}.yaml"
        if env_path.exists():
            env_config = self._load_yaml(env_path)
            self._deep_merge(self._config, env_config)

        # Load provider config
        providers_path = self.config_dir / "providers.yaml"
        if providers_path.exists():
            providers_config = self._load_yaml(providers_path)
            self._deep_merge(self._config, providers_config)

        # Substitute environment variables
        self._substitute_env_vars(self._config)

    def _load_yaml(self, path: Path) -> Dict:
        """Load YAML file"""
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}

    def _substitute_env_vars(self, config: Dict) -> None:
        """Replace ${VAR_NAME} with environment variable values"""
        for key, value in config.items():
            if isinstance(value, dict):
                self._substitute_env_vars(value)
            elif isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                env_var = value[2:-1]
                config[key] = os.getenv(env_var, "")

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Recursively merge override into base"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation
        Example: config.get("session.auto_advance_seconds") -> 6.0
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_active_provider(self, provider_type: str) -> Optional[str]:
        """Name of the active provider, or None when the capability is disabled"""
        return self.get(f"providers.{provider_type}.active") or None

    def get_provider_config(self, provider_type: str) -> Dict:
        """Get active provider configuration"""
        active = self.get_active_provider(provider_type)
        if not active:
            raise ValueError(f"No active {provider_type} provider configured")

        config = self.get(f"providers.{provider_type}.{active}", {})
        return config

    def get_session_timing(self) -> SessionTiming:
        """Build timer settings from the `session` section"""
        return SessionTiming(**(self.get("session", {}) or {}))

    def get_catalog_path(self) -> Path:
        """Path of the lead catalog file, relative paths resolved against config_dir"""
        path = Path(self.get("catalog.path", "leads.yaml"))
        if not path.is_absolute():
            path = self.config_dir / path
        return path


def get_settings() -> Settings:
    return Settings()
