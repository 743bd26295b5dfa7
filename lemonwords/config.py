"""Persisted configuration management."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .models import Config

APP_DIR = Path.home() / ".lemonwords"
CONFIG_PATH = (APP_DIR / "config.json").expanduser()


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded or saved."""


def load_config() -> Config:
    if not CONFIG_PATH.exists():
        return Config()
    try:
        payload = json.loads(CONFIG_PATH.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
    try:
        return Config(**payload)
    except TypeError as exc:
        raise ConfigError(f"Invalid configuration file: {exc}") from exc


def save_config(config: Config) -> None:
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    data = {k: v for k, v in asdict(config).items() if v is not None}
    CONFIG_PATH.write_text(json.dumps(data, indent=2))


def update_config(**kwargs: Any) -> Config:
    config = load_config()
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            raise ConfigError(f"Unknown configuration key: {key}")
    save_config(config)
    return config


def recordings_dir(config: Config) -> Path:
    if config.recordings_dir:
        return Path(config.recordings_dir).expanduser()
    return APP_DIR / "recordings"


def wordcloud_output(config: Config) -> Path:
    if config.wordcloud_output:
        return Path(config.wordcloud_output).expanduser()
    return APP_DIR / "wordcloud.png"


def configure_logging(config: Config, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.getLevelName(str(config.log_level).upper())
    if not isinstance(level, int):
        logging.warning("Unknown log level %s; using WARNING.", config.log_level)
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")
