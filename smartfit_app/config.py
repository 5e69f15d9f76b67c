"""Configuration for the SmartFit backend."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Dict, Optional

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
DEFAULT_PAGE_TIMEOUT = 10.0
DEFAULT_IMAGE_TIMEOUT = 5.0


@dataclass
class AppConfig:
    """Storage locations, scrape timeouts and log level.

    Retailer selectors are static data in ``tools.site_profiles`` and are not
    configurable.
    """

    wardrobe_db_path: str = "data/wardrobe.db"
    outfit_store_dir: str = "data/outfits"
    page_timeout: float = DEFAULT_PAGE_TIMEOUT
    image_timeout: float = DEFAULT_IMAGE_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    environment: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from an environment file overlaid with environment variables.

        The file is ``$APP_CONFIG_PATH`` if set, otherwise
        ``$SMARTFIT_CONFIG_DIR/<APP_ENV>.yaml`` (``config/environments`` by
        default). ``WARDROBE_DB_PATH`` style variables win over file keys; blank
        or unparseable values keep the default.
        """

        env_name = os.getenv("APP_ENV")
        file_values = cls._load_yaml_config(cls._config_file(env_name))

        values: Dict[str, object] = {}
        for spec in fields(cls):
            if spec.name == "environment":
                continue
            raw = os.getenv(spec.name.upper(), file_values.get(spec.name))
            if raw is None or not str(raw).strip():
                continue
            if isinstance(spec.default, float):
                try:
                    values[spec.name] = float(raw)
                except ValueError:
                    continue
            else:
                values[spec.name] = str(raw).strip()
        return cls(environment=env_name, **values)

    @staticmethod
    def _config_file(env_name: Optional[str]) -> Optional[Path]:
        explicit = os.getenv("APP_CONFIG_PATH")
        if explicit:
            return Path(explicit)
        if env_name:
            return Path(os.getenv("SMARTFIT_CONFIG_DIR", "config/environments")) / f"{env_name}.yaml"
        return None

    @staticmethod
    def _load_yaml_config(path: Optional[Path]) -> Dict[str, str]:
        """Read ``key: value`` lines, skipping blanks and comments."""

        if path is None or not path.exists():
            return {}
        config: Dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, value = (part.strip() for part in stripped.split(":", 1))
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            config[key] = value
        return config


__all__ = ["AppConfig", "DEFAULT_IMAGE_TIMEOUT", "DEFAULT_PAGE_TIMEOUT", "DEFAULT_USER_AGENT"]
