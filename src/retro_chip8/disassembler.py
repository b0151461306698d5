# src/retro_chip8/disassembler.py
"""
Disassembler

メモリ上のバイナリデータを解析し、ニーモニックに変換します。
Instruction Layerのデコードテーブルを再利用し、状態は一切変更しません。
"""
from typing import List, Tuple

from retro_chip8.core.errors import DecodeError
from retro_chip8.core.memory import Memory
from retro_chip8.instructions import decode_opcode
from retro_chip8.instructions.base import INSTRUCTION_LENGTH


# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    デコードできない命令語はデータ("DW")として表示します。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, memory.get_size() - 1)

    while current_addr < end_addr:
        opcode = memory.read_word(current_addr)
        try:
            text = decode_opcode(opcode, current_addr).text()
        except DecodeError:
            text = f"DW ${opcode:04X}"
        result.append((current_addr, f"{opcode:04X}", text))
        current_addr += INSTRUCTION_LENGTH

    return result


def format_listing(entries: List[Tuple[int, str, str]]) -> List[str]:
    return [f"{addr:03X}: {hex_word}  {text}" for addr, hex_word, text in entries]
