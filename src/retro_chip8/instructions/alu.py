# src/retro_chip8/instructions/alu.py
"""
算術論理演算命令の実装。

8XY4/8XY5/8XY7は、書き込み前に読み出したオペランドから結果を計算し、
結果をVXに格納した後にVFを書き込みます（X == Fの場合はフラグが残ります）。
"""
from random import Random

from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State
from .base import set_register


# --- 6XNN / 7XNN ---
# @intent:responsibility VX = NN
def execute_ld_imm(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, op.nn)


# @intent:responsibility VX += NN。キャリーフラグは変化しません。
def execute_add_imm(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, state.registers[op.x] + op.nn)


# --- 8XY0 - 8XY3 ---
def execute_ld_reg(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, state.registers[op.y])


def execute_or(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, state.registers[op.x] | state.registers[op.y])


def execute_and(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, state.registers[op.x] & state.registers[op.y])


def execute_xor(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, state.registers[op.x] ^ state.registers[op.y])


# --- 8XY4 ---
# @intent:responsibility VX += VY。VFにキャリーを設定します。
def execute_add_reg(state: Chip8State, op: Operation, rng: Random) -> None:
    vx = state.registers[op.x]
    vy = state.registers[op.y]
    res = vx + vy
    set_register(state, op.x, res)
    state.flag = 1 if res > 0xFF else 0


# --- 8XY5 ---
# @intent:responsibility VX -= VY。VFにボローの否定（VX >= VY なら1）を設定します。
def execute_sub(state: Chip8State, op: Operation, rng: Random) -> None:
    vx = state.registers[op.x]
    vy = state.registers[op.y]
    set_register(state, op.x, vx - vy)
    state.flag = 1 if vx >= vy else 0


# --- 8XY7 ---
# @intent:responsibility VX = VY - VX。VFにボローの否定（VY >= VX なら1）を設定します。
def execute_subn(state: Chip8State, op: Operation, rng: Random) -> None:
    vx = state.registers[op.x]
    vy = state.registers[op.y]
    set_register(state, op.x, vy - vx)
    state.flag = 1 if vy >= vx else 0


# --- 8X_6 / 8X_E ---
# VFを先に書き込み、その後でVXをシフトします。
def execute_shr(state: Chip8State, op: Operation, rng: Random) -> None:
    state.flag = state.registers[op.x] & 0x01
    set_register(state, op.x, state.registers[op.x] >> 1)


def execute_shl(state: Chip8State, op: Operation, rng: Random) -> None:
    state.flag = (state.registers[op.x] >> 7) & 0x01
    set_register(state, op.x, state.registers[op.x] << 1)


# --- CXNN ---
# @intent:responsibility VX = 乱数バイト & NN
def execute_rnd(state: Chip8State, op: Operation, rng: Random) -> None:
    set_register(state, op.x, rng.getrandbits(8) & op.nn)
