# retro_chip8/core/errors.py
"""
エラー階層

インタプリタ全体で使用される例外を定義します。
全ての例外はChip8Errorを継承するため、呼び出し側は単一のexcept節で捕捉できます。

Chip8Error
├── LoadError            プログラムイメージのロード失敗
├── DecodeError          未知のオペコード
├── StackOverflowError   サブルーチン呼び出しの深さが16を超えた
├── StackUnderflowError  空のスタックでRETを実行した
├── MemoryAccessError    メモリ範囲外へのアクセス (IndexErrorでもある)
└── ConfigError          設定ファイルの不正 (ValueErrorでもある)
"""
from typing import Optional


class Chip8Error(Exception):
    """
    全てのインタプリタ例外の基底クラス。
    """


class LoadError(Chip8Error):
    """
    プログラムイメージが大きすぎる、読み込めない、または形式が不正な場合に送出されます。
    """


# @intent:responsibility 未知のオペコードを、生のオペコード値とフェッチ元アドレスと共に報告します。
class DecodeError(Chip8Error):
    def __init__(self, opcode: int, address: Optional[int] = None):
        self.opcode = opcode
        self.address = address
        location = f" at {address:#05x}" if address is not None else ""
        super().__init__(f"Unknown instruction {opcode:#06x}{location}")


class StackOverflowError(Chip8Error):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack overflow: call at {address:#05x} exceeds 16 levels")


class StackUnderflowError(Chip8Error):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack underflow: return at {address:#05x} with empty stack")


# @intent:rationale 既存のIndexErrorベースの範囲チェックと互換性を保つため、IndexErrorも継承します。
class MemoryAccessError(Chip8Error, IndexError):
    def __init__(self, address: int, size: int):
        self.address = address
        super().__init__(f"Address {address:#06x} out of bounds for memory of size {size}.")


class ConfigError(Chip8Error, ValueError):
    """
    設定値が不正な場合に送出されます。
    """
