"""
Configuration for midilink tools.

Settings come from an INI file and MIDILINK_* environment variables,
environment winning:

    [midi]
    backend = mido
    workers = 10
    input = keystation
    output = fluid
    channel = 0
    velocity = 100

The file is the path passed to load_config(), else $MIDILINK_CONFIG.
A missing file just means defaults.
"""

import configparser
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional, Union

from midilink.errors import ConfigurationError
from midilink.scheduler.pool import NUM_PLAYER_THREADS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MIDILINK_CONFIG"
ENV_PREFIX = "MIDILINK_"
SECTION = "midi"


@dataclass
class MidiConfig:
    """
    midilink settings.

    Attributes:
        backend: Device backend name ("mido" or "virtual")
        workers: Scheduler worker threads
        input: Default input device pattern
        output: Default output device pattern
        channel: Default MIDI channel (0-15)
        velocity: Default note velocity (0-127)
    """

    backend: str = "mido"
    workers: int = NUM_PLAYER_THREADS
    input: Optional[str] = None
    output: Optional[str] = None
    channel: int = 0
    velocity: int = 100

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if not 0 <= self.channel <= 15:
            raise ConfigurationError(f"channel must be 0-15, got {self.channel}")
        if not 0 <= self.velocity <= 127:
            raise ConfigurationError(f"velocity must be 0-127, got {self.velocity}")


def _apply(config: MidiConfig, values: Mapping[str, str], origin: str) -> None:
    for f in fields(MidiConfig):
        raw = values.get(f.name)
        if raw is None or raw == "":
            continue
        if f.name in ("workers", "channel", "velocity"):
            try:
                value = int(raw)
            except ValueError:
                raise ConfigurationError(f"{origin}: {f.name} must be an integer, got {raw!r}")
        else:
            value = raw.strip()
        setattr(config, f.name, value)


def load_config(
    path: Optional[Union[str, Path]] = None, environ: Optional[Mapping[str, str]] = None
) -> MidiConfig:
    """
    Load configuration.

    Args:
        path: INI file path (default: $MIDILINK_CONFIG)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file cannot be parsed or a value is invalid
    """
    environ = os.environ if environ is None else environ
    config = MidiConfig()

    path = path or environ.get(CONFIG_ENV_VAR)
    if path:
        path = Path(path)
        if path.exists():
            parser = configparser.ConfigParser()
            try:
                parser.read(path)
            except configparser.Error as e:
                raise ConfigurationError(f"Cannot parse {path}: {e}") from e
            if parser.has_section(SECTION):
                _apply(config, parser[SECTION], str(path))
            logger.info("Loaded config from: %s", path)
        else:
            logger.warning("Config file not found: %s, using defaults", path)

    env_values = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX) and key != CONFIG_ENV_VAR
    }
    _apply(config, env_values, "environment")

    config.validate()
    return config
