"""Freshers Notifier — Configuration Loader.

Loads and validates application configuration from config/settings.yaml.
Resolves environment variables referenced via ${VAR_NAME} syntax after
loading .env, and exposes the result as frozen dataclasses.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

# ── Path Constants ────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
SETTINGS_PATH = CONFIG_DIR / "settings.yaml"

# ── Environment Variable Pattern ─────────────────────────
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)}")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


# ═══════════════════════════════════════════════════════════
# Configuration Dataclasses
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ScraperConfig:
    """Configuration for the listing scraper and poll schedule."""

    index_url: str
    posting_selector: str = ".entry-title > a"
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: int = 30
    poll_interval_minutes: int = 30
    recent_limit: int = 10


@dataclass(frozen=True)
class TelegramConfig:
    """Configuration for Telegram delivery."""

    bot_token: str
    channel_id: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration container."""

    scraper: ScraperConfig
    telegram: TelegramConfig
    state_path: str
    log_level: str = "INFO"


# ═══════════════════════════════════════════════════════════
# YAML Loading & Environment Variable Resolution
# ═══════════════════════════════════════════════════════════


def _resolve_env_vars(value: Any) -> Any:
    """Recursively resolve ${VAR_NAME} references in YAML values.

    Args:
        value: A string, dict, list, or primitive from parsed YAML.

    Returns:
        The same structure with placeholders replaced.

    Raises:
        ValueError: If a referenced environment variable is not set.
    """
    if isinstance(value, str):
        for var_name in ENV_VAR_PATTERN.findall(value):
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(
                    f"Environment variable '${{{var_name}}}' is required but not set. "
                    f"Add it to your .env file or export it in your shell."
                )
            value = value.replace(f"${{{var_name}}}", env_value)
        return value
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty.
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        raise ValueError(f"Configuration file is empty: {path}")

    logger.debug("Loaded configuration from %s", path)
    return data


def _validate_keys(data: dict[str, Any], required: list[str], section: str) -> None:
    """Raise ValueError listing any required keys missing from a section."""
    missing = [key for key in required if key not in data]
    if missing:
        raise ValueError(
            f"Missing required configuration keys in '{section}': {', '.join(missing)}"
        )


# ═══════════════════════════════════════════════════════════
# Dataclass Builders
# ═══════════════════════════════════════════════════════════


def _build_scraper_config(data: dict[str, Any]) -> ScraperConfig:
    """Build a ScraperConfig from the 'scraper' section of settings.yaml."""
    _validate_keys(data, ["index_url"], "scraper")

    recent_limit = int(data.get("recent_limit", 10))
    if recent_limit < 1:
        raise ValueError(f"scraper.recent_limit must be positive, got {recent_limit}")

    return ScraperConfig(
        index_url=data["index_url"],
        posting_selector=data.get("posting_selector", ".entry-title > a"),
        user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
        timeout_seconds=int(data.get("timeout_seconds", 30)),
        poll_interval_minutes=int(data.get("poll_interval_minutes", 30)),
        recent_limit=recent_limit,
    )


def _build_telegram_config(data: dict[str, Any]) -> TelegramConfig:
    """Build a TelegramConfig from the 'telegram' section of settings.yaml."""
    _validate_keys(data, ["bot_token", "channel_id"], "telegram")

    return TelegramConfig(
        bot_token=data["bot_token"],
        channel_id=str(data["channel_id"]),
    )


# ═══════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════


def load_config(
    settings_path: Path | None = None,
    env_path: Path | None = None,
) -> AppConfig:
    """Load the complete application configuration.

    Args:
        settings_path: Override path to settings.yaml. Defaults to config/settings.yaml.
        env_path: Override path to .env file. Defaults to project root .env.

    Returns:
        A fully validated AppConfig instance.

    Raises:
        FileNotFoundError: If the settings file is missing.
        ValueError: If required fields are missing or env vars are unset.
    """
    env_file = env_path or (PROJECT_ROOT / ".env")
    load_dotenv(env_file)
    logger.debug("Loaded environment from %s", env_file)

    settings = _resolve_env_vars(_load_yaml(settings_path or SETTINGS_PATH))

    _validate_keys(settings, ["scraper", "telegram", "storage"], "settings")
    _validate_keys(settings["storage"], ["state_path"], "storage")

    config = AppConfig(
        scraper=_build_scraper_config(settings["scraper"]),
        telegram=_build_telegram_config(settings["telegram"]),
        state_path=settings["storage"]["state_path"],
        log_level=settings.get("logging", {}).get("level", "INFO"),
    )

    logger.info("Configuration loaded successfully")
    logger.debug("Index URL: %s", config.scraper.index_url)
    logger.debug("State path: %s", config.state_path)
    logger.debug("Poll interval: %d minutes", config.scraper.poll_interval_minutes)

    return config
