# src/retro_chip8/instructions/base.py
"""
命令実装用の共通ユーティリティ。
"""
from retro_chip8.core.state import Chip8State

# @intent:constant 1命令のバイト長。スキップ命令は次の1命令分だけPCを進めます。
INSTRUCTION_LENGTH = 2


# @intent:utility_function 次の命令をスキップします。
def skip_next(state: Chip8State) -> None:
    state.pc = (state.pc + INSTRUCTION_LENGTH) & 0xFFFF


def skip_if(state: Chip8State, condition: bool) -> None:
    if condition:
        skip_next(state)


# @intent:utility_function 8ビットのラップアラウンドでレジスタに値を格納します。
def set_register(state: Chip8State, index: int, value: int) -> None:
    state.registers[index] = value & 0xFF


def key_index(state: Chip8State, register: int) -> int:
    """キー番号として解釈されるレジスタ値（下位4bit）を返します。"""
    return state.registers[register] & 0xF
