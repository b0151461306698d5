# src/retro_chip8/instructions/display.py
"""
表示命令（画面消去、スプライト描画）の実装。
"""
from random import Random

from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State, DISPLAY_WIDTH, DISPLAY_HEIGHT, DISPLAY_PIXELS

SPRITE_WIDTH = 8


# --- 00E0 ---
def execute_cls(state: Chip8State, op: Operation, rng: Random) -> None:
    state.display[:] = [False] * DISPLAY_PIXELS


# --- DXYN ---
# @intent:responsibility memory[I]からNバイトのスプライトを(VX, VY)にXOR合成で描画します。
# @intent:post-condition 1つでも点灯ピクセルが消えた場合VF=1、それ以外はVF=0。
def execute_drw(state: Chip8State, op: Operation, rng: Random) -> None:
    """
    座標は画面端で折り返します（X mod 64, Y mod 32）。
    """
    origin_x = state.registers[op.x]
    origin_y = state.registers[op.y]
    collided = False

    for row in range(op.n):
        bits = state.memory.read(state.index + row)
        y = (origin_y + row) % DISPLAY_HEIGHT
        for col in range(SPRITE_WIDTH):
            if bits & (0x80 >> col):
                x = (origin_x + col) % DISPLAY_WIDTH
                idx = x + DISPLAY_WIDTH * y
                collided |= state.display[idx]
                state.display[idx] = not state.display[idx]

    state.flag = 1 if collided else 0
