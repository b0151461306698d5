from dataclasses import dataclass, field
from typing import Dict


# @intent:constant 物理キー名から論理キー番号(0x0-0xF)への既定の対応表。
def default_keymap() -> Dict[str, int]:
    return {f"{i:X}": i for i in range(16)}


@dataclass
class ClockConfig:
    cpu_hz: float = 500.0
    timer_hz: float = 60.0


@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#FFFFFF"
    background: str = "#000000"


@dataclass
class EmulatorConfig:
    clock: ClockConfig = field(default_factory=ClockConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=default_keymap)
