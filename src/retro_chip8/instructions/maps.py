# src/retro_chip8/instructions/maps.py
"""
オペコードのパターンと命令実装のマッピング定義。
"""
from retro_chip8.core.snapshot import OpKind
from . import alu
from . import control
from . import display
from . import load

# @intent:map (マスク, パターン, 種類, ニーモニック, オペランド書式) のデコードテーブル。
# 上から順に評価し、最初に `opcode & mask == pattern` となった行が採用されます。
# オペランド書式は x, y, n, nn, nnn を埋め込むformat文字列です。
DECODE_TABLE = [
    # 0___
    (0xFFFF, 0x0000, OpKind.HALT, "HALT", []),
    (0xFFFF, 0x00E0, OpKind.CLS, "CLS", []),
    (0xFFFF, 0x00EE, OpKind.RET, "RET", []),

    # Jump/Call
    (0xF000, 0x1000, OpKind.JP, "JP", ["${nnn:03X}"]),
    (0xF000, 0x2000, OpKind.CALL, "CALL", ["${nnn:03X}"]),
    (0xF000, 0x3000, OpKind.SE_IMM, "SE", ["V{x:X}", "${nn:02X}"]),
    (0xF000, 0x4000, OpKind.SNE_IMM, "SNE", ["V{x:X}", "${nn:02X}"]),
    (0xF000, 0x6000, OpKind.LD_IMM, "LD", ["V{x:X}", "${nn:02X}"]),
    (0xF000, 0x7000, OpKind.ADD_IMM, "ADD", ["V{x:X}", "${nn:02X}"]),

    # ALU (8XY_)
    (0xF00F, 0x8000, OpKind.LD_REG, "LD", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x8001, OpKind.OR, "OR", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x8002, OpKind.AND, "AND", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x8003, OpKind.XOR, "XOR", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x8004, OpKind.ADD_REG, "ADD", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x8005, OpKind.SUB, "SUB", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x8006, OpKind.SHR, "SHR", ["V{x:X}"]),
    (0xF00F, 0x8007, OpKind.SUBN, "SUBN", ["V{x:X}", "V{y:X}"]),
    (0xF00F, 0x800E, OpKind.SHL, "SHL", ["V{x:X}"]),
    (0xF00F, 0x9000, OpKind.SNE_REG, "SNE", ["V{x:X}", "V{y:X}"]),

    # Index/Random/Draw
    (0xF000, 0xA000, OpKind.LD_I, "LD", ["I", "${nnn:03X}"]),
    (0xF000, 0xB000, OpKind.JP_V0, "JP", ["V0", "${nnn:03X}"]),
    (0xF000, 0xC000, OpKind.RND, "RND", ["V{x:X}", "${nn:02X}"]),
    (0xF000, 0xD000, OpKind.DRW, "DRW", ["V{x:X}", "V{y:X}", "{n}"]),

    # Keys
    (0xF0FF, 0xE09E, OpKind.SKP, "SKP", ["V{x:X}"]),
    (0xF0FF, 0xE0A1, OpKind.SKNP, "SKNP", ["V{x:X}"]),

    # F-series
    (0xF0FF, 0xF007, OpKind.LD_VX_DT, "LD", ["V{x:X}", "DT"]),
    (0xF0FF, 0xF00A, OpKind.LD_VX_K, "LD", ["V{x:X}", "K"]),
    (0xF0FF, 0xF015, OpKind.LD_DT_VX, "LD", ["DT", "V{x:X}"]),
    (0xF0FF, 0xF018, OpKind.LD_ST_VX, "LD", ["ST", "V{x:X}"]),
    (0xF0FF, 0xF01E, OpKind.ADD_I, "ADD", ["I", "V{x:X}"]),
    (0xF0FF, 0xF029, OpKind.LD_F, "LD", ["F", "V{x:X}"]),
    (0xF0FF, 0xF033, OpKind.LD_B, "LD", ["B", "V{x:X}"]),
    (0xF0FF, 0xF055, OpKind.LD_MEM_REGS, "LD", ["[I]", "V{x:X}"]),
    (0xF0FF, 0xF065, OpKind.LD_REGS_MEM, "LD", ["V{x:X}", "[I]"]),
]

# @intent:map 命令の種類から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    OpKind.HALT: control.execute_halt,
    OpKind.RET: control.execute_ret,
    OpKind.JP: control.execute_jp,
    OpKind.CALL: control.execute_call,
    OpKind.JP_V0: control.execute_jp_v0,
    OpKind.SE_IMM: control.execute_se_imm,
    OpKind.SNE_IMM: control.execute_sne_imm,
    OpKind.SNE_REG: control.execute_sne_reg,
    OpKind.SKP: control.execute_skp,
    OpKind.SKNP: control.execute_sknp,
    OpKind.LD_VX_K: control.execute_ld_vx_k,

    # ALU
    OpKind.LD_IMM: alu.execute_ld_imm,
    OpKind.ADD_IMM: alu.execute_add_imm,
    OpKind.LD_REG: alu.execute_ld_reg,
    OpKind.OR: alu.execute_or,
    OpKind.AND: alu.execute_and,
    OpKind.XOR: alu.execute_xor,
    OpKind.ADD_REG: alu.execute_add_reg,
    OpKind.SUB: alu.execute_sub,
    OpKind.SHR: alu.execute_shr,
    OpKind.SUBN: alu.execute_subn,
    OpKind.SHL: alu.execute_shl,
    OpKind.RND: alu.execute_rnd,

    # Display
    OpKind.CLS: display.execute_cls,
    OpKind.DRW: display.execute_drw,

    # Load/Store
    OpKind.LD_I: load.execute_ld_i,
    OpKind.ADD_I: load.execute_add_i,
    OpKind.LD_F: load.execute_ld_f,
    OpKind.LD_VX_DT: load.execute_ld_vx_dt,
    OpKind.LD_DT_VX: load.execute_ld_dt_vx,
    OpKind.LD_ST_VX: load.execute_ld_st_vx,
    OpKind.LD_B: load.execute_ld_b,
    OpKind.LD_MEM_REGS: load.execute_ld_mem_regs,
    OpKind.LD_REGS_MEM: load.execute_ld_regs_mem,
}
