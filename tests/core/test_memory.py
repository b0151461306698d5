import unittest
from retro_chip8.core.errors import Chip8Error, MemoryAccessError
from retro_chip8.core.memory import Memory, MEMORY_SIZE

class TestMemory(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()

    def test_default_size(self):
        self.assertEqual(len(self.memory), MEMORY_SIZE)
        self.assertEqual(self.memory.get_size(), 4096)

    def test_read_write(self):
        self.memory.write(0x300, 0xAB)
        self.assertEqual(self.memory.read(0x300), 0xAB)

    def test_read_word_is_big_endian(self):
        self.memory.load(0x200, bytes([0x12, 0x34]))
        self.assertEqual(self.memory.read_word(0x200), 0x1234)

    def test_read_out_of_bounds(self):
        with self.assertRaises(MemoryAccessError):
            self.memory.read(0x1000)
        # MemoryAccessErrorはIndexErrorとしても捕捉できる
        with self.assertRaises(IndexError):
            self.memory.read(-1)

    def test_write_out_of_bounds(self):
        with self.assertRaises(MemoryAccessError) as ctx:
            self.memory.write(0x1000, 0xFF)
        self.assertIsInstance(ctx.exception, Chip8Error)
        self.assertEqual(ctx.exception.address, 0x1000)

    def test_read_word_at_last_byte(self):
        # 上位バイトは範囲内、下位バイトが範囲外
        with self.assertRaises(MemoryAccessError):
            self.memory.read_word(0xFFF)

    def test_write_invalid_value(self):
        with self.assertRaises(ValueError):
            self.memory.write(0x200, 0x100)
        with self.assertRaises(ValueError):
            self.memory.write(0x200, -1)

    def test_invalid_init(self):
        with self.assertRaises(ValueError):
            Memory(0)
        with self.assertRaises(ValueError):
            Memory(-1)

    def test_load_beyond_end(self):
        with self.assertRaises(MemoryAccessError):
            self.memory.load(0xFFE, bytes([1, 2, 3]))

    def test_dump_and_clear(self):
        self.memory.load(0x200, b"\x01\x02\x03")
        self.assertEqual(self.memory.dump(0x200, 3), b"\x01\x02\x03")
        self.assertEqual(self.memory.dump(0x200, 0), b"")
        self.memory.clear()
        self.assertEqual(self.memory.dump(0x200, 3), b"\x00\x00\x00")
        self.assertEqual(sum(self.memory), 0)

if __name__ == '__main__':
    unittest.main()
