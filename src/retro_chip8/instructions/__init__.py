# src/retro_chip8/instructions/__init__.py
"""
命令セット実装パッケージ。

デコード（オペコード -> Operation）と実行（Operation -> 状態変更）を分離しているため、
各命令はデコーダを経由せずに単体でテストできます。
"""
from random import Random
from typing import Optional

from retro_chip8.core.errors import DecodeError
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State
from .maps import DECODE_TABLE, EXECUTE_MAP


# @intent:responsibility 16bitのオペコードをデコードし、Operationオブジェクトを返します。
# @intent:post-condition 一致するパターンがない場合はDecodeErrorを送出します。
def decode_opcode(opcode: int, address: Optional[int] = None) -> Operation:
    """
    オペコードをニブルのパターンで照合し、種類とオペランド表記を持つOperationを返します。
    """
    opcode &= 0xFFFF
    for mask, pattern, kind, mnemonic, operand_formats in DECODE_TABLE:
        if opcode & mask == pattern:
            fields = {
                "x": (opcode & 0x0F00) >> 8,
                "y": (opcode & 0x00F0) >> 4,
                "n": opcode & 0x000F,
                "nn": opcode & 0x00FF,
                "nnn": opcode & 0x0FFF,
            }
            operands = [fmt.format(**fields) for fmt in operand_formats]
            return Operation(opcode=opcode, kind=kind, mnemonic=mnemonic, operands=operands, address=address)
    raise DecodeError(opcode, address)


# @intent:responsibility デコードされた命令を実行し、マシン状態を変更します。
def execute_instruction(operation: Operation, state: Chip8State, rng: Optional[Random] = None) -> None:
    executor = EXECUTE_MAP[operation.kind]
    executor(state, operation, rng if rng is not None else Random())
