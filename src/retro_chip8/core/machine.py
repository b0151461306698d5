# retro_chip8/core/machine.py
"""
Core Layer (マシン)

このモジュールは、マシン状態と単一の排他ロックを保持し、命令サイクルの駆動、
タイマーの減衰、および外部コラボレータ（描画・入力）向けの同期アクセスを提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
import threading
from random import Random
from typing import Dict, List, Optional, Tuple

from retro_chip8.core.snapshot import Metadata, OpKind, Operation, Snapshot
from retro_chip8.core.state import Chip8State, KEY_COUNT, REGISTER_COUNT
from retro_chip8.instructions import decode_opcode, execute_instruction
from retro_chip8.instructions.base import INSTRUCTION_LENGTH
from retro_chip8 import disassembler

logger = logging.getLogger(__name__)


# @intent:responsibility マシン状態への全てのアクセスを単一のロックで直列化し、命令サイクルを駆動します。
class Machine:
    """
    インタプリタ本体。

    命令タスク、タイマータスク、描画ループ、入力ハンドラは全て同じMachineインスタンスを共有します。
    状態を読み書きする全ての公開メソッドはロックを取得するため、1命令・1タイマーティックは
    外部から見て不可分に観測されます。
    """
    # @intent:responsibility プログラムイメージから初期状態を構築します。
    # @intent:pre-condition programは3584バイト以下である必要があります（超過時はLoadError）。
    def __init__(self, program: bytes = b"", rng: Optional[Random] = None):
        self._program = bytes(program)
        self._rng = rng if rng is not None else Random()
        self._lock = threading.RLock()
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`またはロックを取得した上で行う。
        self._state: Chip8State = Chip8State.from_program(self._program)
        self._cycle_count: int = 0
        self._halt_snapshot: Optional[Snapshot] = None
        logger.debug(f"Loaded program image: {len(self._program)} bytes")

    @property
    def lock(self) -> threading.RLock:
        """
        複数フィールドをまとめて読む場合など、外部コラボレータが明示的に取得するためのロック。
        """
        return self._lock

    @property
    def halted(self) -> bool:
        with self._lock:
            return self._state.halted

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 同じプログラムイメージで状態を初期化し直します。
    def reset(self) -> None:
        with self._lock:
            self._state = Chip8State.from_program(self._program)
            self._cycle_count = 0
            self._halt_snapshot = None

    def get_state(self) -> Chip8State:
        """
        現在の状態を返します。ロック外での読み書きは呼び出し側の責任です。
        """
        return self._state

    # @intent:responsibility 現在のPCからビッグエンディアンで命令語を読み出します。
    # @intent:post-condition PCがメモリ範囲外の場合はMemoryAccessErrorを送出します。
    def _fetch(self) -> int:
        return self._state.memory.read_word(self._state.pc)

    def _update_pc(self) -> None:
        self._state.pc = (self._state.pc + INSTRUCTION_LENGTH) & 0xFFFF

    def _decode(self, opcode: int, address: int) -> Operation:
        return decode_opcode(opcode, address)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._rng)

    # @intent:responsibility 1命令サイクル（フェッチ→PC更新→デコード→実行）を不可分に実行します。
    # @intent:post-condition 停止命令の実行後は`halted`がTrueになり、以降の呼び出しはフェッチを行いません。
    def step(self) -> Snapshot:
        """
        1命令を実行し、その結果のSnapshotを返します。
        DecodeError、StackOverflowError、StackUnderflowError、MemoryAccessErrorはそのまま伝播します。
        """
        with self._lock:
            if self._state.halted:
                return self._handle_halt()

            initial_pc = self._state.pc
            opcode = self._fetch()
            self._update_pc()
            operation = self._decode(opcode, initial_pc)
            self._execute(operation)

            snapshot = self._create_snapshot(initial_pc, operation)
            if operation.kind is OpKind.HALT:
                logger.info(f"Halt instruction at {initial_pc:#05x}")
                self._halt_snapshot = snapshot
            return snapshot

    # @intent:responsibility 停止状態で呼ばれた場合、直前の停止スナップショットを返します。
    def _handle_halt(self) -> Snapshot:
        if self._halt_snapshot is None:
            operation = Operation(opcode=0x0000, kind=OpKind.HALT, mnemonic="HALT", address=self._state.pc)
            self._halt_snapshot = self._create_snapshot(self._state.pc, operation)
        return self._halt_snapshot

    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        self._cycle_count += 1
        return Snapshot(
            state=self._state,
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=f"{initial_pc:#06x}: {operation.text()}"),
        )

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ減衰させます（0で下限）。
    # @intent:return サウンドタイマーが1から0に遷移した場合にTrue。
    def tick_timers(self) -> bool:
        with self._lock:
            state = self._state
            if state.delay_timer > 0:
                state.delay_timer -= 1
            sound_off = False
            if state.sound_timer > 0:
                sound_off = state.sound_timer == 1
                state.sound_timer -= 1
            return sound_off

    # --- 入力コラボレータ向けAPI ---
    def set_key_down(self, index: int) -> None:
        self._set_key(index, True)

    def set_key_up(self, index: int) -> None:
        self._set_key(index, False)

    def is_key_down(self, index: int) -> bool:
        self._check_key(index)
        with self._lock:
            return self._state.keys[index]

    def _set_key(self, index: int, pressed: bool) -> None:
        self._check_key(index)
        with self._lock:
            self._state.keys[index] = pressed

    @staticmethod
    def _check_key(index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"Key index {index} out of range 0-{KEY_COUNT - 1}.")

    # --- 描画コラボレータ向けAPI ---
    # @intent:responsibility 表示ビットマップの不変コピーを返します。
    def display_snapshot(self) -> Tuple[bool, ...]:
        with self._lock:
            return tuple(self._state.display)

    # @intent:responsibility 診断表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        with self._lock:
            s = self._state
            regs = {f"V{i:X}": s.registers[i] for i in range(REGISTER_COUNT)}
            regs.update({
                "I": s.index, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
            })
            return regs

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        with self._lock:
            return disassembler.disassemble(self._state.memory, start_addr, length)
