# src/retro_chip8/instructions/control.py
"""
制御命令（停止、分岐、ジャンプ、サブルーチン、キー入力待ち）の実装。

実行時点でPCは既に次の命令を指しています。
"""
from random import Random

from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State, KEY_COUNT
from .base import INSTRUCTION_LENGTH, key_index, set_register, skip_if


# --- 0000 ---
# @intent:responsibility 実行を停止します。これはエラーではなく正常終了の合図です。
def execute_halt(state: Chip8State, op: Operation, rng: Random) -> None:
    state.halted = True


# --- 00EE ---
# @intent:responsibility サブルーチンから復帰します。空のスタックからの復帰は致命的エラーです。
def execute_ret(state: Chip8State, op: Operation, rng: Random) -> None:
    state.pc = state.pop(origin=op.address)


# --- 1NNN ---
def execute_jp(state: Chip8State, op: Operation, rng: Random) -> None:
    state.pc = op.nnn


# --- 2NNN ---
# @intent:responsibility 現在のPC（次の命令）をスタックに積み、NNNへジャンプします。
def execute_call(state: Chip8State, op: Operation, rng: Random) -> None:
    state.push(state.pc, origin=op.address)
    state.pc = op.nnn


# --- BNNN ---
# 結果がメモリ範囲外になった場合は、次のフェッチでMemoryAccessErrorになります。
def execute_jp_v0(state: Chip8State, op: Operation, rng: Random) -> None:
    state.pc = state.registers[0] + op.nnn


# --- 3XNN / 4XNN / 9XY0 ---
def execute_se_imm(state: Chip8State, op: Operation, rng: Random) -> None:
    skip_if(state, state.registers[op.x] == op.nn)


def execute_sne_imm(state: Chip8State, op: Operation, rng: Random) -> None:
    skip_if(state, state.registers[op.x] != op.nn)


def execute_sne_reg(state: Chip8State, op: Operation, rng: Random) -> None:
    skip_if(state, state.registers[op.x] != state.registers[op.y])


# --- EX9E / EXA1 ---
def execute_skp(state: Chip8State, op: Operation, rng: Random) -> None:
    skip_if(state, state.keys[key_index(state, op.x)])


def execute_sknp(state: Chip8State, op: Operation, rng: Random) -> None:
    skip_if(state, not state.keys[key_index(state, op.x)])


# --- FX0A ---
# @intent:responsibility キーが押されていれば最小番号のキーをVXに格納し、押されていなければPCを巻き戻します。
# @intent:rationale ロックを保持したまま待機せず、毎サイクル同じ命令を再実行させます。
def execute_ld_vx_k(state: Chip8State, op: Operation, rng: Random) -> None:
    for key in range(KEY_COUNT):
        if state.keys[key]:
            set_register(state, op.x, key)
            return
    state.pc = (state.pc - INSTRUCTION_LENGTH) & 0xFFFF
