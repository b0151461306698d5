import unittest
from PySide6.QtCore import Qt
from retro_chip8.config.models import default_keymap
from retro_chip8.core.errors import ConfigError
from retro_chip8.ui.keymap import KeyMapper, key_value, resolve_qt_key

class TestKeyMapper(unittest.TestCase):
    def test_resolve_key_names(self):
        self.assertEqual(resolve_qt_key("q"), key_value(Qt.Key.Key_Q))
        self.assertEqual(resolve_qt_key("1"), key_value(Qt.Key.Key_1))
        self.assertEqual(resolve_qt_key("Space"), key_value(Qt.Key.Key_Space))

    def test_unknown_key_name(self):
        with self.assertRaises(ConfigError):
            resolve_qt_key("NoSuchKey")

    def test_default_keymap(self):
        mapper = KeyMapper(default_keymap())
        self.assertEqual(len(mapper), 16)
        self.assertEqual(mapper.translate(Qt.Key.Key_0), 0x0)
        self.assertEqual(mapper.translate(Qt.Key.Key_A), 0xA)
        self.assertEqual(mapper.translate(Qt.Key.Key_F), 0xF)
        self.assertIsNone(mapper.translate(Qt.Key.Key_Z))

    def test_translate_accepts_int(self):
        mapper = KeyMapper({"Q": 4})
        self.assertEqual(mapper.translate(key_value(Qt.Key.Key_Q)), 4)

if __name__ == '__main__':
    unittest.main()
