# src/retro_chip8/arch/chip8/devices.py
"""
CHIP-8の周辺デバイス（フレームバッファとキーパッド）。

どちらもメモリ空間にはマップされず、CPUが直接参照します。
フレームバッファはCPUのみが書き込み、描画側は読み出すだけです。
キーパッドは入力側のみが書き込み、CPUは読み出すだけです。
"""
from typing import List, Optional

from retro_chip8.arch.chip8.state import VIDEO_WIDTH, VIDEO_HEIGHT, KEY_COUNT

PIXEL_ON = 0xFFFFFFFF
PIXEL_OFF = 0x00000000

# @intent:responsibility 64x32のモノクロフレームバッファを保持します。
class Display:
    """
    各ピクセルは PIXEL_ON(0xFFFFFFFF) か PIXEL_OFF(0) のいずれかの値のみを取ります。
    """
    def __init__(self, width: int = VIDEO_WIDTH, height: int = VIDEO_HEIGHT):
        self.width = width
        self.height = height
        self.pixels: List[int] = [PIXEL_OFF] * (width * height)
        # @intent:rationale 描画側が前回描画以降の変更有無を判定できるようにします。
        self.dirty = True

    def clear(self) -> None:
        self.pixels = [PIXEL_OFF] * (self.width * self.height)
        self.dirty = True

    # @intent:pre-condition 0 <= x < width, 0 <= y < height
    def get_pixel(self, x: int, y: int) -> int:
        return self.pixels[y * self.width + x]

    def is_lit(self, x: int, y: int) -> bool:
        return self.get_pixel(x, y) == PIXEL_ON

    # @intent:responsibility 1ピクセルをXOR合成し、点灯→点灯（消灯への反転）が起きたかを返します。
    # @intent:pre-condition 座標は画面内であること。クリッピングは呼び出し元（DRW命令）の責務です。
    def xor_pixel(self, x: int, y: int) -> bool:
        index = y * self.width + x
        collided = self.pixels[index] == PIXEL_ON
        self.pixels[index] ^= PIXEL_ON
        self.dirty = True
        return collided

    # @intent:responsibility 描画側向けに、行ごとの0/1配列を返します。
    def rows(self) -> List[List[int]]:
        return [
            [1 if self.pixels[y * self.width + x] == PIXEL_ON else 0 for x in range(self.width)]
            for y in range(self.height)
        ]

# @intent:responsibility 16キーの16進キーパッドの押下状態を保持します。
class Keypad:
    def __init__(self, key_count: int = KEY_COUNT):
        self._keys: List[bool] = [False] * key_count

    def __len__(self) -> int:
        return len(self._keys)

    def set_state(self, key: int, pressed: bool) -> None:
        if not 0 <= key < len(self._keys):
            raise ValueError(f"Key {key} is not a valid CHIP-8 key (0x0-0xF).")
        self._keys[key] = bool(pressed)

    def press(self, key: int) -> None:
        self.set_state(key, True)

    def release(self, key: int) -> None:
        self.set_state(key, False)

    def release_all(self) -> None:
        self._keys = [False] * len(self._keys)

    def is_pressed(self, key: int) -> bool:
        return self._keys[key]

    # @intent:responsibility 押下中のキーのうち最小番号のものを返します（0→15の順で先勝ち）。
    def first_pressed(self) -> Optional[int]:
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def snapshot(self) -> List[bool]:
        return list(self._keys)
