# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field, replace
from typing import List

from retro_chip8.core.state import CpuState

# @intent:constant CHIP-8マシンの固定寸法。
MEMORY_SIZE = 4096
REGISTER_COUNT = 16
STACK_LEVELS = 16
KEY_COUNT = 16
VIDEO_WIDTH = 64
VIDEO_HEIGHT = 32

# @intent:constant メモリマップ上の固定アドレス。
START_ADDRESS = 0x200   # ROMのロード先・PC初期値
FONTSET_START_ADDRESS = 0x50
FONT_GLYPH_SIZE = 5
MAX_ROM_SIZE = MEMORY_SIZE - START_ADDRESS

VF = 0xF  # キャリー/ボロー/衝突フラグを兼ねるレジスタ番号

# @intent:constant 16進数字0-Fのフォントスプライト（1文字5バイト、上位4ビットのみ使用）。
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# @intent:responsibility CHIP-8の全レジスタ（V0-VF, I, PC, SP）、スタック、タイマーの状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    メモリはBus、フレームバッファとキーパッドはデバイスとして別に保持されます。
    """
    pc: int = START_ADDRESS
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0-VF
    i: int = 0x000     # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_LEVELS)
    delay_timer: int = 0
    sound_timer: int = 0
    opcode: int = 0x0000  # 直近にフェッチした命令語

    # @intent:accessor VFはフラグ出力先として頻繁に参照されるため別名を提供します。
    # @intent:rationale フラグ専用の記憶域は持たず、常にv[0xF]そのものを読み書きします。
    @property
    def vf(self) -> int:
        return self.v[VF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[VF] = value

    def copy(self) -> "Chip8CpuState":
        return replace(self, v=list(self.v), stack=list(self.stack))
