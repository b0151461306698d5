# src/retro_chip8/instructions/load.py
"""
ロード/ストア命令（Iレジスタ、タイマー、メモリ転送）の実装。
"""
from random import Random

from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State, GLYPH_SIZE, FONT_START
from .base import set_register


# --- ANNN ---
def execute_ld_i(state: Chip8State, op: Operation, rng: Random) -> None:
    state.index = op.nnn


# --- FX1E ---
# @intent:responsibility I += VX。Iは16bitで折り返します。
def execute_add_i(state: Chip8State, op: Operation, rng: Random) -> None:
    state.index = (state.index + state.registers[op.x]) & 0xFFFF


# --- FX29 ---
# @intent:responsibility VXの値に対応するフォントグリフのアドレスをIに設定します。
def execute_ld_f(state: Chip8State, op: Operation, rng: Random) -> None:
    state.index = FONT_START + state.registers[op.x] * GLYPH_SIZE


# --- FX07 / FX15 / FX18 ---
def execute_ld_vx_dt(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, state.delay_timer)


def execute_ld_dt_vx(state: Chip8State, op: Operation, rng: Random) -> None:
    state.delay_timer = state.registers[op.x]


def execute_ld_st_vx(state: Chip8State, op: Operation, rng: Random) -> None:
    state.sound_timer = state.registers[op.x]


# --- FX33 ---
# @intent:responsibility VXの10進表現（百の位、十の位、一の位）をmemory[I..I+3]に格納します。
def execute_ld_b(state: Chip8State, op: Operation, rng: Random) -> None:
    value = state.registers[op.x]
    state.memory.write(state.index, value // 100)
    state.memory.write(state.index + 1, (value // 10) % 10)
    state.memory.write(state.index + 2, value % 10)


# --- FX55 / FX65 ---
# Iは変化しません。
def execute_ld_mem_regs(state: Chip8State, op: Operation, rng: Random) -> None:
    for reg in range(op.x + 1):
        state.memory.write(state.index + reg, state.registers[reg])


def execute_ld_regs_mem(state: Chip8State, op: Operation, rng: Random) -> None:
    for reg in range(op.x + 1):
        state.registers[reg] = state.memory.read(state.index + reg)
