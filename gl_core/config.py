"""Environment configuration.

Reads settings from environment variables, loading a `.env` file at the
repository root first if one exists.

Variables:
- HERA_SMART_CODE_DOMAIN: Leading smart-code segment (default "HERA")
- HERA_SMART_CODE_VERSION: Smart-code version number (default 1)
- HERA_DEFAULT_CURRENCY: Currency stamped on GL lines (default "AED")
- HERA_LOG_LEVEL: Logging level name (default "INFO")
- HERA_LOG_JSON: "true" for JSON log lines (default "false")
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Load .env file if it exists
from dotenv import load_dotenv
env_path = Path(__file__).resolve().parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


_TRUE_VALUES = {"1", "true", "yes", "on"}

# Smart-code segments are uppercase letters, digits and underscores
_DOMAIN_PATTERN = re.compile(r"^[A-Z0-9_]+$")


@dataclass(frozen=True)
class Settings:
    """Engine settings resolved from the environment."""
    smart_code_domain: str = "HERA"
    smart_code_version: int = 1
    default_currency: str = "AED"
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ValueError: If HERA_SMART_CODE_VERSION is not a positive integer,
                or HERA_SMART_CODE_DOMAIN is not a single smart-code segment
        """
        domain = os.getenv("HERA_SMART_CODE_DOMAIN", "HERA").strip().upper()
        if not _DOMAIN_PATTERN.match(domain):
            raise ValueError(
                f"HERA_SMART_CODE_DOMAIN must be a single smart-code segment, got {domain!r}"
            )

        raw_version = os.getenv("HERA_SMART_CODE_VERSION", "1").strip()
        try:
            version = int(raw_version)
        except ValueError:
            raise ValueError(
                f"HERA_SMART_CODE_VERSION must be an integer, got {raw_version!r}"
            ) from None
        if version < 1:
            raise ValueError(
                f"HERA_SMART_CODE_VERSION must be >= 1, got {version}"
            )

        return cls(
            smart_code_domain=domain,
            smart_code_version=version,
            default_currency=os.getenv("HERA_DEFAULT_CURRENCY", "AED").strip().upper(),
            log_level=os.getenv("HERA_LOG_LEVEL", "INFO").strip().upper(),
            log_json=os.getenv("HERA_LOG_JSON", "false").strip().lower() in _TRUE_VALUES,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings, loading them from the environment on first use."""
    global _settings

    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
