# tests/core/test_machine.py
"""
retro_chip8.core.machineモジュールの単体テスト。
命令サイクル、停止、エラー伝播、タイマー、入力、描画向けAPIを検証します。
"""
from random import Random

import pytest

from retro_chip8.core.errors import (
    DecodeError, MemoryAccessError, StackOverflowError, StackUnderflowError,
)
from retro_chip8.core.machine import Machine
from retro_chip8.core.snapshot import OpKind

# @intent:test_suite Machineのフェッチ・デコード・実行サイクルと同期APIの検証。


def program(*words: int) -> bytes:
    """16bit命令語のリストをビッグエンディアンのプログラムイメージに変換します。"""
    return b"".join(w.to_bytes(2, "big") for w in words)


class TestStep:
    def test_load_add_then_unknown_instruction(self):
        machine = Machine(program(0x6002, 0x7003, 0xF1FF))
        machine.step()
        machine.step()
        assert machine.get_state().registers[0] == 0x05

        with pytest.raises(DecodeError) as excinfo:
            machine.step()
        assert excinfo.value.opcode == 0xF1FF
        assert excinfo.value.address == 0x204

    def test_snapshot_describes_executed_instruction(self):
        machine = Machine(program(0x6002))
        snapshot = machine.step()
        assert snapshot.operation.kind is OpKind.LD_IMM
        assert snapshot.operation.address == 0x200
        assert snapshot.operation.text() == "LD V0, $02"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.state.pc == 0x202
        assert not snapshot.halted

    def test_pc_stays_even(self):
        machine = Machine(program(0x6005, 0x3005, 0x0000, 0x1208, 0x0000))
        for _ in range(3):
            machine.step()
            assert machine.get_state().pc % 2 == 0
        assert machine.get_state().pc == 0x208

    def test_clear_then_draw_glyph(self):
        # I=0 ("0"のグリフ), V0=0, V1=0, 5行を描画
        machine = Machine(program(0x00E0, 0xA000, 0x6000, 0x6100, 0xD015))
        for _ in range(5):
            machine.step()
        state = machine.get_state()
        assert [state.pixel(x, 0) for x in range(5)] == [True, True, True, True, False]
        assert state.pixel(0, 1) and not state.pixel(1, 1) and state.pixel(3, 1)
        assert sum(state.display) == 14
        assert state.registers[0xF] == 0

    def test_wait_for_key(self):
        machine = Machine(program(0xF00A, 0x0000))
        machine.step()
        state = machine.get_state()
        assert state.pc == 0x200
        assert state.registers[0] == 0

        machine.step()
        assert state.pc == 0x200

        machine.set_key_down(7)
        machine.step()
        assert state.registers[0] == 7
        assert state.pc == 0x202

    def test_random_uses_injected_generator(self):
        machine = Machine(program(0xC0FF, 0xC10F), rng=Random(1234))
        expected = Random(1234)
        machine.step()
        machine.step()
        regs = machine.get_state().registers
        assert regs[0] == expected.getrandbits(8)
        assert regs[1] == expected.getrandbits(8) & 0x0F


class TestHalt:
    def test_zero_instruction_halts(self):
        machine = Machine(program(0x6001, 0x0000, 0x6002))
        assert machine.step().halted is False
        snapshot = machine.step()
        assert snapshot.halted
        assert machine.halted
        assert machine.get_state().halted

    def test_step_after_halt_does_not_execute(self):
        machine = Machine(program(0x0000, 0x6002))
        first = machine.step()
        pc = machine.get_state().pc
        second = machine.step()
        assert second is first
        assert machine.get_state().pc == pc
        assert machine.get_state().registers[0] == 0
        assert machine.cycle_count == 1

    def test_empty_program_halts(self):
        machine = Machine()
        assert machine.step().halted


class TestSubroutines:
    def test_call_and_return(self):
        # 0x200: CALL 0x206 / 0x202: HALT / 0x206: RET
        machine = Machine(program(0x2206, 0x0000, 0x0000, 0x00EE))
        machine.step()
        state = machine.get_state()
        assert state.pc == 0x206
        assert state.sp == 1
        assert state.stack[0] == 0x202
        machine.step()
        assert state.pc == 0x202
        assert state.sp == 0
        assert machine.step().halted

    def test_sixteen_nested_calls_succeed(self):
        machine = Machine(program(0x2200))
        for _ in range(16):
            machine.step()
        assert machine.get_state().sp == 16

        with pytest.raises(StackOverflowError) as excinfo:
            machine.step()
        assert excinfo.value.address == 0x200

    def test_sixteen_level_call_chain_unwinds(self):
        # 0x200: CALL 0x204 / 0x202: HALT / 各レベル: CALL 次のレベル; RET / 最深部: RET
        words = [0x2204, 0x0000]
        for level in range(1, 16):
            words += [0x2000 | (0x204 + 4 * level), 0x00EE]
        words.append(0x00EE)
        machine = Machine(program(*words))
        state = machine.get_state()

        for _ in range(16):
            machine.step()
        assert state.sp == 16
        assert state.pc == 0x240

        for _ in range(16):
            machine.step()
        assert state.sp == 0
        assert state.pc == 0x202
        assert machine.step().halted

    def test_return_with_empty_stack(self):
        machine = Machine(program(0x00EE))
        with pytest.raises(StackUnderflowError) as excinfo:
            machine.step()
        assert excinfo.value.address == 0x200


class TestMemoryBounds:
    def test_fetch_at_end_of_memory(self):
        machine = Machine(program(0x1FFF))
        machine.step()
        assert machine.get_state().pc == 0xFFF
        with pytest.raises(MemoryAccessError):
            machine.step()

    def test_jump_with_offset_beyond_memory(self):
        machine = Machine(program(0x60FF, 0xBFFF))
        machine.step()
        machine.step()
        assert machine.get_state().pc == 0x10FE
        with pytest.raises(MemoryAccessError):
            machine.step()


class TestTimers:
    def test_timers_decrement_to_zero(self):
        machine = Machine()
        state = machine.get_state()
        state.delay_timer = 60
        state.sound_timer = 30
        for _ in range(60):
            machine.tick_timers()
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        machine.tick_timers()
        assert state.delay_timer == 0

    def test_sound_off_edge(self):
        machine = Machine()
        machine.get_state().sound_timer = 2
        assert machine.tick_timers() is False
        assert machine.tick_timers() is True
        assert machine.tick_timers() is False

    def test_delay_timer_via_instructions(self):
        # V0=3, DT=V0, V1=DT
        machine = Machine(program(0x6003, 0xF015, 0xF107))
        machine.step()
        machine.step()
        machine.tick_timers()
        machine.step()
        assert machine.get_state().registers[1] == 2


class TestCollaboratorApi:
    def test_key_state(self):
        machine = Machine()
        machine.set_key_down(0xA)
        assert machine.is_key_down(0xA)
        machine.set_key_up(0xA)
        assert not machine.is_key_down(0xA)

    @pytest.mark.parametrize("index", [-1, 16, 100])
    def test_key_out_of_range(self, index):
        machine = Machine()
        with pytest.raises(ValueError):
            machine.set_key_down(index)
        with pytest.raises(ValueError):
            machine.set_key_up(index)

    def test_display_snapshot_is_a_copy(self):
        machine = Machine(program(0xD011))
        frame = machine.display_snapshot()
        assert isinstance(frame, tuple)
        assert len(frame) == 64 * 32
        machine.step()
        assert frame[0] is False
        assert machine.display_snapshot()[0] is True

    def test_register_map(self):
        machine = Machine(program(0x6A42, 0xA123))
        machine.step()
        machine.step()
        regs = machine.get_register_map()
        assert regs["VA"] == 0x42
        assert regs["I"] == 0x123
        assert regs["PC"] == 0x204
        assert regs["SP"] == 0
        assert set(regs) == {f"V{i:X}" for i in range(16)} | {"I", "PC", "SP", "DT", "ST"}

    def test_reset(self):
        machine = Machine(program(0x6001, 0x0000))
        machine.step()
        machine.step()
        machine.set_key_down(1)
        machine.reset()
        state = machine.get_state()
        assert state.pc == 0x200
        assert state.registers[0] == 0
        assert not state.halted
        assert not machine.is_key_down(1)
        assert machine.cycle_count == 0
        assert state.memory.read_word(0x200) == 0x6001

    def test_disassemble(self):
        machine = Machine(program(0x00E0, 0xA22A, 0x5120))
        listing = machine.disassemble(0x200, 6)
        assert listing == [
            (0x200, "00E0", "CLS"),
            (0x202, "A22A", "LD I, $22A"),
            (0x204, "5120", "DW $5120"),
        ]
