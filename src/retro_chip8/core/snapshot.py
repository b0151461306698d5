# retro_chip8/core/snapshot.py
"""
実行結果の不変スナップショット

デコードされた命令(Operation)と、1命令実行後の状態を記録するデータ構造を定義します。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_chip8.core.state import Chip8State


# @intent:responsibility デコード結果のタグ（命令の種類）を定義します。
# @intent:rationale ニブルのパターンマッチを一度だけ行い、以降は種類による単一のディスパッチで実行します。
class OpKind(Enum):
    HALT = "HALT"
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_IMM = "SE_IMM"
    SNE_IMM = "SNE_IMM"
    LD_IMM = "LD_IMM"
    ADD_IMM = "ADD_IMM"
    LD_REG = "LD_REG"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_REG = "ADD_REG"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_REG = "SNE_REG"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I = "ADD_I"
    LD_F = "LD_F"
    LD_B = "LD_B"
    LD_MEM_REGS = "LD_MEM_REGS"
    LD_REGS_MEM = "LD_REGS_MEM"


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令。opcodeは16bitの命令語、addressはフェッチ元アドレスです。
    オペランド(x, y, n, nn, nnn)は命令語から導出されます。
    """
    opcode: int
    kind: OpKind
    mnemonic: str  # 例: "ADD"
    operands: List[str] = field(default_factory=list)  # 例: ["V0", "$03"]
    address: Optional[int] = None
    length: int = 2

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    @property
    def x(self) -> int:
        return (self.opcode & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.opcode & 0x00F0) >> 4

    @property
    def n(self) -> int:
        return self.opcode & 0x000F

    @property
    def nn(self) -> int:
        return self.opcode & 0x00FF

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF

    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    cycle_count: int  # 累計実行命令数
    symbol_info: Optional[str] = None  # 例: "0x0200: LD V0, $02"


# @intent:responsibility 1命令実行直後の状態と実行された命令を記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    stateはコピーではなくマシンの状態そのものを参照します。
    ロック外で参照する場合は、呼び出し側で必要な値をロック中に取り出してください。
    """
    state: Chip8State
    operation: Operation
    metadata: Metadata

    @property
    def halted(self) -> bool:
        return self.operation.kind is OpKind.HALT
