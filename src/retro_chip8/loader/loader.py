# retro_chip8/loader/loader.py
"""
プログラムローダーモジュール。
生バイナリ(.ch8など)および Intel HEX 形式のプログラムイメージの読み込みをサポートします。
どちらのローダーも、0x200から配置されるプログラムイメージ(bytes)を返します。
"""
import logging
from pathlib import Path

from retro_chip8.core.errors import LoadError
from retro_chip8.core.memory import MEMORY_SIZE
from retro_chip8.core.state import PROGRAM_START, MAX_PROGRAM_SIZE

logger = logging.getLogger(__name__)


class RawImageLoader:
    """
    ファイルの内容をそのままプログラムイメージとして読み込むローダー。
    """
    def load_image(self, file_path: str) -> bytes:
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise LoadError(f"Cannot read program file {file_path}: {e}") from e
        if len(data) > MAX_PROGRAM_SIZE:
            raise LoadError(f"Program image too large: {len(data)} bytes, max {MAX_PROGRAM_SIZE}")
        return data


class IntelHexLoader:
    """
    Intel HEX形式のファイルを解析し、プログラムイメージを生成するローダー。
    アドレスはメモリ全体に対する絶対アドレスで、0x200-0xFFFの範囲に収まる必要があります。
    書き込まれなかった隙間は0で埋められます。
    """
    def load_image(self, file_path: str) -> bytes:
        try:
            with open(file_path, 'r', encoding='ascii') as f:
                lines = f.readlines()
        except OSError as e:
            raise LoadError(f"Cannot read program file {file_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise LoadError(f"Intel HEX file {file_path} is not ASCII text: {e}") from e
        return self.parse(lines)

    def parse(self, lines) -> bytes:
        image = bytearray(MAX_PROGRAM_SIZE)
        highest = 0
        current_extended_linear_address = 0x0000

        for line_num, line in enumerate(lines, 1):
            line = line.strip()
            comment_start = line.find(';')
            if comment_start != -1:
                line = line[:comment_start].strip()
            if not line or not line.startswith(':'):
                continue

            if len(line) < 11:
                raise LoadError(f"Invalid Intel HEX record format on line {line_num}: Too short - {line}")

            try:
                data_length = int(line[1:3], 16)
                address_field = int(line[3:7], 16)
                record_type = int(line[7:9], 16)
                data_part_str = line[9:-2]
                checksum_field = int(line[-2:], 16)
                data = bytes.fromhex(data_part_str)
            except ValueError as e:
                raise LoadError(f"Error parsing Intel HEX line {line_num}: {line} - {e}") from e

            if len(data) != data_length:
                raise LoadError(f"Data length mismatch on line {line_num}")

            checksum_sum = data_length + (address_field >> 8) + (address_field & 0xFF) + record_type + sum(data)
            calculated_checksum = (~checksum_sum + 1) & 0xFF
            if calculated_checksum != checksum_field:
                raise LoadError(
                    f"Checksum mismatch on line {line_num}: "
                    f"Calculated {calculated_checksum:02X}, Expected {checksum_field:02X}"
                )

            if record_type == 0x00:
                load_address = current_extended_linear_address + address_field
                if load_address < PROGRAM_START or load_address + data_length > MEMORY_SIZE:
                    raise LoadError(
                        f"Record on line {line_num} at {load_address:#06x} is outside program area "
                        f"{PROGRAM_START:#05x}-{MEMORY_SIZE - 1:#05x}"
                    )
                if data_length == 0:
                    continue
                offset = load_address - PROGRAM_START
                image[offset:offset + data_length] = data
                highest = max(highest, offset + data_length)
            elif record_type == 0x01:
                break
            elif record_type == 0x04:
                current_extended_linear_address = int.from_bytes(data, "big") << 16
            elif record_type == 0x02:
                current_extended_linear_address = int.from_bytes(data, "big") << 4
            elif record_type == 0x03 or record_type == 0x05:
                pass
            else:
                raise LoadError(f"Unknown Intel HEX record type {record_type:02X} on line {line_num}")

        return bytes(image[:highest])


# @intent:responsibility ファイルの拡張子に応じてローダーを選択し、プログラムイメージを返します。
def load_program(file_path: str) -> bytes:
    if Path(file_path).suffix.lower() in (".hex", ".ihx"):
        image = IntelHexLoader().load_image(file_path)
    else:
        image = RawImageLoader().load_image(file_path)
    logger.debug(f"Read {len(image)} bytes from {file_path}")
    return image
