from dataclasses import dataclass, field
from typing import Optional

from retro_chip8.common.types import KeyMap

# @intent:constant 元のSDL版と同じ、QWERTYキーボード左側4x4のキー配置。
#   1 2 3 4      1 2 3 C
#   Q W E R  ->  4 5 6 D
#   A S D F      7 8 9 E
#   Z X C V      A 0 B F
DEFAULT_KEYMAP: KeyMap = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class MachineConfig:
    video_scale: int = 10          # 1 CHIP-8ピクセルあたりの画面ピクセル数
    cycle_delay_ms: int = 2        # サイクル間隔。0はイベントループが許す限り速く
    seed: Optional[int] = None     # 乱数シード。Noneなら起動ごとに異なる
    rom_path: Optional[str] = None
    keymap: KeyMap = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
