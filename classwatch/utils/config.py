"""
Configuration - Checker settings from config.json and environment
Environment variables (and a .env file) take precedence over the JSON file
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import load_dotenv

from ..errors import ConfigError

logger = logging.getLogger(__name__)

NOTIFIERS = ('pushover', 'telegram')

# env var -> config field
ENV_VARS = {
    'START_URL': 'start_url',
    'SCHEDULE_URL': 'schedule_url',
    'MELODY_USERNAME': 'username',
    'MELODY_PASSWORD': 'password',
    'CLASS_NAME': 'class_name',
    'CLASS_DAY': 'class_day',
    'INSTRUCTOR': 'instructor',
    'LOCATION': 'location',
    'STATE_FILE': 'state_file',
    'ALERT_MODE': 'alert_mode',
    'DRY_RUN': 'dry_run',
    'DEBUG': 'debug',
    'NOTIFIER': 'notifier',
    'PUSHOVER_APP_TOKEN': 'pushover_token',
    'PUSHOVER_USER_KEY': 'pushover_user',
    'PUSHOVER_DEVICE': 'pushover_device',
    'TELEGRAM_BOT_TOKEN': 'telegram_bot_token',
    'TELEGRAM_CHAT_ID': 'telegram_chat_id',
    'CHECK_INTERVAL_MINUTES': 'check_interval_minutes',
}


@dataclass(frozen=True)
class CheckerConfig:
    """Read-only settings shared by every component"""
    username: str = ''
    password: str = ''
    start_url: str = 'https://melodymagicmusic.opus1.io'
    schedule_url: str = ''

    # Target class
    class_name: str = 'Level 1 Tuesdays 10:00'
    class_day: str = 'Tuesday'
    instructor: str = ''
    location: str = ''

    # Page markers
    credit_selector: str = '#credit-item-use-0'
    session_anchor: str = 'text=Select tags to filter sessions'
    full_marker_selector: str = '.session-tag-full'

    # Alerting
    state_file: str = './state.json'
    alert_mode: str = 'always'
    dry_run: bool = False
    debug: bool = False
    notifier: str = 'pushover'
    pushover_token: str = ''
    pushover_user: str = ''
    pushover_device: str = ''
    telegram_bot_token: str = ''
    telegram_chat_id: str = ''

    # Timing (milliseconds unless noted)
    detection_timeout_ms: int = 20000
    credit_timeout_ms: int = 15000
    popup_timeout_ms: int = 10000
    settle_delay_ms: int = 500
    poll_interval_ms: int = 250
    check_interval_minutes: int = 15


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == 'true'


def _coerce(name: str, value, default):
    """Convert a raw file/env value to the type of the field default"""
    if isinstance(default, bool):
        return _parse_bool(value)
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{name} must be an integer, got {value!r}")
    return '' if value is None else str(value)


def _read_file(config_path: Path) -> Dict:
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using environment only")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")
    return data


def validate_config(config: CheckerConfig):
    """
    Check that everything needed for a real run is present

    Raises:
        ConfigError: On the first problem found
    """
    if not config.username or not config.password:
        raise ConfigError("Missing MELODY_USERNAME or MELODY_PASSWORD")
    if not config.class_name:
        raise ConfigError("Missing CLASS_NAME")
    if config.notifier not in NOTIFIERS:
        raise ConfigError(f"Unknown notifier {config.notifier!r}, expected one of {', '.join(NOTIFIERS)}")

    if config.dry_run:
        return
    if config.notifier == 'pushover' and not (config.pushover_token and config.pushover_user):
        raise ConfigError("Missing PUSHOVER_APP_TOKEN or PUSHOVER_USER_KEY")
    if config.notifier == 'telegram' and not (config.telegram_bot_token and config.telegram_chat_id):
        raise ConfigError("Missing TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID")


def load_config(
    config_path: Union[str, Path] = 'config.json',
    environ: Optional[Dict[str, str]] = None,
    validate: bool = True
) -> CheckerConfig:
    """
    Build the checker configuration

    Args:
        config_path: Optional JSON file with field names as keys
        environ: Environment mapping, defaults to os.environ after loading .env
        validate: Run validate_config on the result

    Returns:
        CheckerConfig
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    raw = _read_file(Path(config_path))
    for env_name, field_name in ENV_VARS.items():
        # Empty values count as unset
        value = environ.get(env_name, "")
        if value.strip():
            raw[field_name] = value

    defaults = {f.name: f.default for f in fields(CheckerConfig)}
    unknown = sorted(set(raw) - set(defaults))
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

    values = {
        name: _coerce(name, raw[name], default)
        for name, default in defaults.items()
        if name in raw
    }
    config = CheckerConfig(**values)

    if validate:
        validate_config(config)

    logger.info(f"Configuration loaded (class={config.class_name!r}, mode={config.alert_mode})")
    return config
