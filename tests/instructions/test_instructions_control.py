import unittest
from random import Random
from retro_chip8.core.errors import StackOverflowError, StackUnderflowError
from retro_chip8.core.state import Chip8State
from retro_chip8.instructions import decode_opcode, execute_instruction

class TestChip8ControlInstructions(unittest.TestCase):
    def setUp(self):
        self.state = Chip8State.from_program(b"")
        self.rng = Random(0)

    def _execute(self, opcode, address=0x200):
        self.state.pc = address
        op = decode_opcode(opcode, address)
        self.state.pc += op.length
        execute_instruction(op, self.state, self.rng)

    def test_halt(self):
        self._execute(0x0000)
        self.assertTrue(self.state.halted)

    def test_jp(self):
        self._execute(0x1ABC)
        self.assertEqual(self.state.pc, 0xABC)

    def test_call_and_ret(self):
        self._execute(0x2400, address=0x300)
        self.assertEqual(self.state.pc, 0x400)
        self.assertEqual(self.state.sp, 1)
        self.assertEqual(self.state.stack[0], 0x302)

        self.state.pc = 0x400
        op = decode_opcode(0x00EE, 0x400)
        self.state.pc += op.length
        execute_instruction(op, self.state, self.rng)
        self.assertEqual(self.state.pc, 0x302)
        self.assertEqual(self.state.sp, 0)

    def test_call_overflow_reports_call_site(self):
        self.state.sp = 16
        with self.assertRaises(StackOverflowError) as ctx:
            self._execute(0x2400, address=0x246)
        self.assertEqual(ctx.exception.address, 0x246)

    def test_ret_underflow(self):
        with self.assertRaises(StackUnderflowError):
            self._execute(0x00EE)

    def test_jp_v0(self):
        self.state.registers[0] = 0x10
        self._execute(0xB300)
        self.assertEqual(self.state.pc, 0x310)

    def test_se_imm(self):
        self.state.registers[2] = 0x42
        self._execute(0x3242)
        self.assertEqual(self.state.pc, 0x204) # スキップ
        self._execute(0x3241)
        self.assertEqual(self.state.pc, 0x202)

    def test_sne_imm(self):
        self.state.registers[2] = 0x42
        self._execute(0x4241)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x4242)
        self.assertEqual(self.state.pc, 0x202)

    def test_sne_reg(self):
        self.state.registers[1] = 1
        self.state.registers[2] = 2
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x204)
        self.state.registers[2] = 1
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x202)

    def test_skp_sknp(self):
        self.state.registers[3] = 0x0B
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x202)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x204)

        self.state.keys[0xB] = True
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x202)

    def test_skp_uses_low_nibble(self):
        self.state.registers[3] = 0x17
        self.state.keys[7] = True
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)

    def test_wait_key_without_press_rewinds(self):
        self.state.registers[4] = 0x99
        self._execute(0xF40A)
        self.assertEqual(self.state.pc, 0x200)
        self.assertEqual(self.state.registers[4], 0x99)

    def test_wait_key_takes_lowest_pressed(self):
        self.state.keys[0xC] = True
        self.state.keys[0x5] = True
        self._execute(0xF40A)
        self.assertEqual(self.state.pc, 0x202)
        self.assertEqual(self.state.registers[4], 0x5)

if __name__ == '__main__':
    unittest.main()
