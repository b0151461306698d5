# retro_chip8/core/memory.py
"""
Memory Layer

4KBのアドレス空間を保持し、範囲チェック付きの読み書きを提供します。
範囲外アクセスは未定義動作ではなくMemoryAccessErrorとして報告されます。
"""
from typing import Iterator

from retro_chip8.core.errors import MemoryAccessError

MEMORY_SIZE = 4096


# @intent:responsibility 固定長のバイト列として、インタプリタの全メモリ空間を管理します。
class Memory:
    """
    範囲チェック付きのRAM。
    """
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def _check(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise MemoryAccessError(address, self._size)

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    def read(self, address: int) -> int:
        self._check(address)
        return self._memory[address]

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition データは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:utility_function 16ビットワードをビッグエンディアン形式で読み込みます。
    def read_word(self, address: int) -> int:
        """Big-endian 16-bit read."""
        return (self.read(address) << 8) | self.read(address + 1)

    # @intent:responsibility 連続したバイト列を指定アドレスから一括で書き込みます。
    def load(self, address: int, data: bytes) -> None:
        """
        フォントやプログラムイメージの初期ロードに使用します。
        """
        data = bytes(data)
        if not data:
            return
        self._check(address)
        self._check(address + len(data) - 1)
        self._memory[address:address + len(data)] = data

    def dump(self, address: int, length: int) -> bytes:
        """
        指定範囲のコピーを返します。
        """
        if length <= 0:
            return b""
        self._check(address)
        self._check(address + length - 1)
        return bytes(self._memory[address:address + length])

    def clear(self) -> None:
        self._memory[:] = bytes(self._size)

    def get_size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[int]:
        return iter(self._memory)
