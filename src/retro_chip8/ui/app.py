# src/retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。

    $ retro-chip8 game.ch8
    $ retro-chip8 game.ch8 --config chip8.yaml --scale 12
    $ retro-chip8 game.ch8 --disassemble
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import EmulatorConfig
from retro_chip8.core.errors import Chip8Error
from retro_chip8.core.machine import Machine
from retro_chip8.core.state import PROGRAM_START
from retro_chip8.disassembler import format_listing
from retro_chip8.loader.loader import load_program
from .main_window import MainWindow


# @intent:responsibility ウィンドウを表示してイベントループを実行し、終了コードを返します。
def run_gui(machine: Machine, config: EmulatorConfig) -> int:
    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = MainWindow(machine, config)
    window.show()
    window.start()
    app.exec()
    return 1 if window.exit_error is not None else 0


@click.command()
@click.argument(
    "program",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (clock rates, display, keymap)",
)
@click.option(
    "-s", "--scale",
    type=click.IntRange(min=1),
    default=None,
    help="Display scale factor (overrides config)",
)
@click.option(
    "-d", "--disassemble",
    is_flag=True,
    help="Print a disassembly listing of the program and exit",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(program: Path, config_path: Optional[Path], scale: Optional[int], disassemble: bool, verbose: bool):
    """Run the CHIP-8 PROGRAM image (raw binary or Intel HEX)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigLoader().load_from_file(str(config_path)) if config_path else EmulatorConfig()
        image = load_program(str(program))
        machine = Machine(image)
    except Chip8Error as e:
        raise click.ClickException(str(e)) from e

    if scale is not None:
        config.display.scale = scale

    if disassemble:
        for line in format_listing(machine.disassemble(PROGRAM_START, len(image))):
            click.echo(line)
        return

    try:
        exit_code = run_gui(machine, config)
    except Chip8Error as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
