"""Configuration management for the FX Converter."""
import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from dotenv import load_dotenv
from fxconverter.utils.errors import ConfigurationError
from fxconverter.utils.logging import setup_logging
import logging

logger = logging.getLogger(__name__)


class Config:
    """Application configuration."""

    REQUIRED_SECTIONS = ('app', 'quote_api')

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load configuration from YAML and environment."""
        load_dotenv()

        if not self.config_path.exists():
            raise ConfigurationError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = yaml.safe_load(f)

        if not self._config:
            raise ConfigurationError(f"Empty configuration file: {self.config_path}")

        self._validate()

        log_config = self._config.get('logging', {})
        setup_logging(
            level=os.getenv('LOG_LEVEL', log_config.get('level', 'INFO')),
            log_file=log_config.get('file'),
            format_type=log_config.get('format', 'json'),
            enabled=log_config.get('enabled', True)
        )

        logger.info("Configuration loaded successfully")

    def _validate(self) -> None:
        """Validate required configuration sections."""
        for section in self.REQUIRED_SECTIONS:
            if section not in self._config:
                raise ConfigurationError(f"Missing required config section: {section}")

        if 'base_url' not in self._config['quote_api'] and not os.getenv('QUOTE_API_BASE_URL'):
            raise ConfigurationError("Missing quote_api.base_url in config")

        debounce = self.get('converter.debounce_seconds', 0)
        if debounce < 0:
            raise ConfigurationError(f"converter.debounce_seconds must be >= 0, got {debounce}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "quote_api.base_url")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get environment variable."""
        return os.getenv(key, default)

    def require_env(self, key: str) -> str:
        """Get required environment variable or raise error."""
        value = os.getenv(key)
        if value is None:
            raise ConfigurationError(f"Required environment variable not set: {key}")
        return value

    @property
    def app_name(self) -> str:
        return self.get('app.name', 'FX Converter')

    @property
    def app_version(self) -> str:
        return self.get('app.version', '0.1.0')

    @property
    def debug(self) -> bool:
        return self.get('app.debug', False)

    @property
    def quote_api_base_url(self) -> str:
        """Quote API base URL; QUOTE_API_BASE_URL wins over the file."""
        return self.get_env('QUOTE_API_BASE_URL') or self.get('quote_api.base_url')

    @property
    def quote_api_timeout(self) -> float:
        return float(self.get('quote_api.timeout', 10))

    @property
    def quote_api_max_attempts(self) -> int:
        return int(self.get('quote_api.max_attempts', 2))

    @property
    def default_from(self) -> str:
        return self.get('converter.default_from', 'PLN')

    @property
    def default_to(self) -> str:
        return self.get('converter.default_to', 'UAH')

    @property
    def default_amount(self) -> str:
        return str(self.get('converter.default_amount', '300.00'))

    @property
    def debounce_seconds(self) -> float:
        return float(self.get('converter.debounce_seconds', 0.4))

    @property
    def connectivity(self) -> Dict[str, Any]:
        """Connectivity probe settings with defaults filled in."""
        section = self.get('connectivity', {}) or {}
        return {
            'probe_host': section.get('probe_host', '1.1.1.1'),
            'probe_port': int(section.get('probe_port', 53)),
            'interval_seconds': float(section.get('interval_seconds', 5.0)),
            'timeout_seconds': float(section.get('timeout_seconds', 2.0)),
            'losing_threshold_seconds': float(section.get('losing_threshold_seconds', 1.0)),
        }


_config: Optional[Config] = None


def resolve_config_path(config_path: str) -> Path:
    """Relative paths resolve against FXCONVERTER_ROOT when set, else the working directory."""
    path = Path(config_path).expanduser()
    if path.is_absolute():
        return path
    root = os.getenv('FXCONVERTER_ROOT')
    base = Path(root).expanduser() if root else Path.cwd()
    return (base / path).resolve()


def load_config(config_path: str = "config.yaml") -> Config:
    """Load global configuration."""
    global _config
    if _config is None:
        _config = Config(str(resolve_config_path(config_path)))
    return _config


def get_config() -> Config:
    """Get global configuration instance."""
    if _config is None:
        raise ConfigurationError("Configuration not loaded. Call load_config() first.")
    return _config


def reset_config() -> None:
    """Forget the loaded configuration (used by the CLI and tests)."""
    global _config
    _config = None
