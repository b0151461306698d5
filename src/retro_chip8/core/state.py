# retro_chip8/core/state.py
"""
Core Layer (マシン状態)

このモジュールは、インタプリタの全状態（レジスタ群、メモリ、スタック、タイマー、
表示ビットマップ、キー状態）を保持するデータ構造を定義します。
状態は固定サイズの可変データの集合であり、実行中に要素が生成・破棄されることはありません。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.errors import LoadError, StackOverflowError, StackUnderflowError
from retro_chip8.core.memory import Memory, MEMORY_SIZE

PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
REGISTER_COUNT = 16
STACK_SIZE = 16
KEY_COUNT = 16
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_PIXELS = DISPLAY_WIDTH * DISPLAY_HEIGHT
FLAG_REGISTER = 0xF

# @intent:constant 16個の16進数グリフ(0-F)。各グリフは5バイトで、上位ニブルに4x5ピクセルを符号化します。
FONT_START = 0x000
GLYPH_SIZE = 5
FONT = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


# @intent:responsibility インタプリタの全てのレジスタ、メモリ、周辺状態を保持します。
@dataclass
class Chip8State:
    """
    マシン状態を保持するデータクラス。
    registersはV0-VFの16個の8bit値、VFはキャリー/ボロー/衝突フラグとして使用されます。
    """
    memory: Memory = field(default_factory=Memory)
    registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    index: int = 0x0000  # I
    pc: int = PROGRAM_START
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    sp: int = 0  # 次に書き込むスタックスロット (0-16)
    delay_timer: int = 0
    sound_timer: int = 0
    display: List[bool] = field(default_factory=lambda: [False] * DISPLAY_PIXELS)
    keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    halted: bool = False

    # @intent:responsibility フォントとプログラムイメージをロードした初期状態を生成します。
    # @intent:pre-condition programは0x200以降の空き領域(3584バイト)に収まる必要があります。
    @classmethod
    def from_program(cls, program: bytes) -> "Chip8State":
        program = bytes(program)
        if len(program) > MAX_PROGRAM_SIZE:
            raise LoadError(
                f"Program image too large: {len(program)} bytes, max {MAX_PROGRAM_SIZE}"
            )
        state = cls()
        state.memory.load(FONT_START, FONT)
        state.memory.load(PROGRAM_START, program)
        return state

    @property
    def flag(self) -> int:
        return self.registers[FLAG_REGISTER]

    @flag.setter
    def flag(self, value: int) -> None:
        self.registers[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility リターンアドレスをスタックに積みます。
    # @intent:rationale 17段目へのプッシュはメモリ破壊ではなく致命的エラーとして扱います。
    def push(self, address: int, origin: Optional[int] = None) -> None:
        if self.sp >= STACK_SIZE:
            raise StackOverflowError(self.pc if origin is None else origin)
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self, origin: Optional[int] = None) -> int:
        if self.sp <= 0:
            raise StackUnderflowError(self.pc if origin is None else origin)
        self.sp -= 1
        return self.stack[self.sp]

    def pixel(self, x: int, y: int) -> bool:
        return self.display[x + DISPLAY_WIDTH * y]
