"""
キーマップモジュール。

Qtのキーコードを16個の論理キー番号(0x0-0xF)に変換します。
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt

from retro_chip8.core.errors import ConfigError


def key_value(key) -> int:
    return key.value if hasattr(key, "value") else int(key)


# @intent:responsibility 設定ファイル上のキー名（例: "1", "Q", "Space"）をQtのキーコードに変換します。
def resolve_qt_key(name: str) -> int:
    attr = f"Key_{name.upper() if len(name) == 1 else name}"
    key = getattr(Qt.Key, attr, None)
    if key is None:
        raise ConfigError(f"Unknown key name in keymap: {name!r}")
    return key_value(key)


# @intent:responsibility 物理キーから論理キー番号への対応を保持します。
class KeyMapper:
    def __init__(self, keymap: Dict[str, int]):
        self._map: Dict[int, int] = {resolve_qt_key(name): index for name, index in keymap.items()}

    def translate(self, qt_key: int) -> Optional[int]:
        """
        対応する論理キー番号を返します。割り当てのないキーはNoneです。
        """
        return self._map.get(key_value(qt_key))

    def __len__(self) -> int:
        return len(self._map)
