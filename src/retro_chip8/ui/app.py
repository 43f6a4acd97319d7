# src/retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。

    retro-chip8 [options] <Scale> <Delay> <ROM>
    retro-chip8 [options] <ROM>

コマンドライン引数は設定ファイル（--config）の値を上書きします。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.arch.chip8.state import START_ADDRESS, MAX_ROM_SIZE

logger = logging.getLogger(__name__)

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 interpreter")
    parser.add_argument("args", nargs="+", metavar="[SCALE DELAY] ROM",
                        help="ROM file, optionally preceded by the video scale and the cycle delay in ms")
    parser.add_argument("--config", help="YAML machine configuration")
    parser.add_argument("--seed", type=int, help="seed for the RND instruction")
    parser.add_argument("--disassemble", action="store_true",
                        help="print a listing of the ROM and exit")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser

# @intent:responsibility 引数と設定ファイルを統合し、MachineConfigを生成します。
def resolve_config(options: argparse.Namespace, parser: argparse.ArgumentParser) -> MachineConfig:
    config = ConfigLoader().load_from_file(options.config) if options.config else MachineConfig()

    positional = options.args
    if len(positional) == 3:
        try:
            config.video_scale = int(positional[0])
            config.cycle_delay_ms = int(positional[1])
        except ValueError:
            parser.error("SCALE and DELAY must be integers")
        config.rom_path = positional[2]
    elif len(positional) == 1:
        config.rom_path = positional[0]
    else:
        parser.error("expected either ROM or SCALE DELAY ROM")

    if options.seed is not None:
        config.seed = options.seed
    return config

def print_listing(config: MachineConfig) -> None:
    cpu, _ = SystemBuilder().build_system(config)
    for address, hex_bytes, text in cpu.disassemble(START_ADDRESS, MAX_ROM_SIZE):
        print(f"{address:03X}  {hex_bytes:<5}  {text}")

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    options = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, options.log_level),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        config = resolve_config(options, parser)
        if options.disassemble:
            print_listing(config)
            return 0

        logger.info("Scale: %d, Delay: %d ms, ROM: %s", config.video_scale, config.cycle_delay_ms, config.rom_path)
        app = QApplication.instance() or QApplication(sys.argv[:1])
        from .main_window import MainWindow
        main_win = MainWindow(config)
    except Chip8Error as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    main_win.show()
    main_win.start()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())
