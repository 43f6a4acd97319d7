# src/retro_chip8/ui/keymap.py
"""
キーボードイベントをCHIP-8キーパッドの押下状態へ変換するモジュール。
"""
import logging
from typing import Dict, Optional

from PySide6.QtCore import Qt

from retro_chip8.common.types import KeyMap
from retro_chip8.arch.chip8.devices import Keypad

logger = logging.getLogger(__name__)

# @intent:responsibility キー名 ("Q", "1" など) の対応表を Qt のキーコード対応表に変換します。
def build_qt_keymap(keymap: KeyMap) -> Dict[int, int]:
    result: Dict[int, int] = {}
    for name, chip8_key in keymap.items():
        qt_key = getattr(Qt.Key, f"Key_{name}", None)
        if qt_key is None:
            logger.warning("Ignoring keymap entry '%s': not a Qt key name", name)
            continue
        result[int(qt_key.value)] = chip8_key
    return result

# @intent:responsibility Qtのキーイベントを受けてKeypadを書き換えます。CPUは読み出すだけです。
class KeypadController:
    def __init__(self, keypad: Keypad, keymap: KeyMap):
        self._keypad = keypad
        self._qt_keymap = build_qt_keymap(keymap)

    def set_keypad(self, keypad: Keypad) -> None:
        self._keypad = keypad

    def chip8_key_for(self, qt_key: int) -> Optional[int]:
        return self._qt_keymap.get(qt_key)

    # @intent:post-condition 対応するキーであればTrueを返します（イベントを消費したことを示す）。
    def handle_key(self, qt_key: int, pressed: bool) -> bool:
        chip8_key = self.chip8_key_for(qt_key)
        if chip8_key is None:
            return False
        self._keypad.set_state(chip8_key, pressed)
        return True
