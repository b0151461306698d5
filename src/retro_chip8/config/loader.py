import logging
import re
from typing import Any, Dict

import yaml

from retro_chip8.core.errors import ConfigError
from retro_chip8.core.state import KEY_COUNT
from .models import EmulatorConfig, ClockConfig, DisplayConfig, default_keymap

logger = logging.getLogger(__name__)

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ConfigLoader:
    def load_from_file(self, path: str) -> EmulatorConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        logger.debug(f"Loaded config from {path}")
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> EmulatorConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")

        # Parse Clock
        clock_data = self._parse_section(data, "clock")
        clock = ClockConfig(
            cpu_hz=self._parse_frequency(clock_data.get("cpu_hz", ClockConfig.cpu_hz), "clock.cpu_hz"),
            timer_hz=self._parse_frequency(clock_data.get("timer_hz", ClockConfig.timer_hz), "clock.timer_hz"),
        )

        # Parse Display
        display_data = self._parse_section(data, "display")
        scale = self._parse_int(display_data.get("scale", DisplayConfig.scale))
        if scale <= 0:
            raise ConfigError(f"display.scale must be positive, got {scale}")
        display = DisplayConfig(
            scale=scale,
            foreground=self._parse_color(display_data.get("foreground", DisplayConfig.foreground)),
            background=self._parse_color(display_data.get("background", DisplayConfig.background)),
        )

        # Parse Keymap (物理キー名 -> 論理キー番号)
        keymap = default_keymap()
        if "keymap" in data:
            keymap = {}
            for name, value in self._parse_section(data, "keymap").items():
                index = self._parse_int(value)
                if not 0 <= index < KEY_COUNT:
                    raise ConfigError(f"Key index for '{name}' out of range: {index}")
                keymap[str(name)] = index

        return EmulatorConfig(clock=clock, display=display, keymap=keymap)

    def _parse_section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Section '{name}' must be a mapping, got {type(section).__name__}")
        return section

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")

    def _parse_frequency(self, value: Any, name: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{name} must be a number, got {value!r}")
        if value <= 0:
            raise ConfigError(f"{name} must be positive, got {value}")
        return float(value)

    def _parse_color(self, value: Any) -> str:
        if not isinstance(value, str) or not _COLOR_PATTERN.match(value):
            raise ConfigError(f"Invalid color format: {value!r} (expected #RRGGBB)")
        return value
