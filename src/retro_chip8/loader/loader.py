# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
ヘッダを持たない生バイナリのCHIP-8 ROMを 0x200 からメモリへロードします。
"""
import logging
from pathlib import Path
from typing import Union

from retro_chip8.transport.bus import Bus
from retro_chip8.common.errors import RomLoadError
from retro_chip8.arch.chip8.state import START_ADDRESS, MAX_ROM_SIZE

logger = logging.getLogger(__name__)

class RomLoader:
    """
    CHIP-8 ROM（生バイナリ）を解析せずにそのままバスへ書き込むローダー。
    読み込めない・大きすぎるROMは、メモリを一切変更せずに RomLoadError を送出します。
    """
    def __init__(self, start_address: int = START_ADDRESS, max_size: int = MAX_ROM_SIZE):
        self.start_address = start_address
        self.max_size = max_size

    # @intent:responsibility ROMファイルを読み込み、サイズを検証したバイト列を返します。バスには触れません。
    def read(self, file_path: Union[str, Path]) -> bytes:
        path = Path(file_path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise RomLoadError(f"Cannot read ROM file '{path}': {e}") from e
        logger.debug("Read %d bytes from %s", len(data), path)
        self._check(data)
        return data

    # @intent:responsibility ファイルからROMを読み込み、バスへロードします。
    # @post-condition ロードしたバイト数を返します。
    def load_rom(self, file_path: Union[str, Path], bus: Bus) -> int:
        return self.load_bytes(self.read(file_path), bus)

    def _check(self, data: bytes) -> None:
        if data is None:
            raise RomLoadError("ROM data is missing.")
        if len(data) > self.max_size:
            raise RomLoadError(
                f"ROM is {len(data)} bytes; at most {self.max_size} bytes fit at {self.start_address:#05x}."
            )

    # @intent:responsibility バイト列をそのまま start_address から書き込みます。
    def load_bytes(self, data: bytes, bus: Bus) -> int:
        self._check(data)
        if not data:
            logger.warning("Loaded an empty ROM; memory keeps only the font data.")

        bus.load(self.start_address, bytes(data))
        logger.debug("Loaded %d bytes at %03X", len(data), self.start_address)
        return len(data)
