# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール（インタプリタコア）。

外部から意味を持つ操作は step()（1マシンサイクルの実行）のみです。
サイクルの頻度は呼び出し側が決定し、コア自身はクロックやスレッドを持ちません。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.errors import Chip8Error, MachineHaltedError
from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation, Snapshot
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.state import Chip8CpuState, FONTSET, FONTSET_START_ADDRESS, REGISTER_COUNT
from retro_chip8.arch.chip8.devices import Display, Keypad
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction
from retro_chip8.arch.chip8.instructions.base import Peripherals, read_word
from retro_chip8.arch.chip8 import disassembler

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行、タイマー）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    バスには 0x000-0xFFF の4KB全体がマップされている必要があります。
    構築時にフォントを 0x50 に書き込み、PCを 0x200 に設定します。
    致命的なサイクル（スタック不正・範囲外アクセス）の後は停止状態となり、
    reset() するまで step() は MachineHaltedError を送出します。
    """
    # @intent:pre-condition `bus`は4KBのメモリ全体をマップしている必要があります。
    # @intent:rationale rngを注入可能にし、テストや設定ファイルのseedで乱数列を再現できるようにします。
    def __init__(self, bus: Bus, rng: Optional[random.Random] = None,
                 display: Optional[Display] = None, keypad: Optional[Keypad] = None):
        self.display = display if display is not None else Display()
        self.keypad = keypad if keypad is not None else Keypad()
        # random.Random() はOSの乱数源（なければ時刻）でシードされる
        self._rng = rng if rng is not None else random.Random()
        self._io = Peripherals(self.display, self.keypad, self._rng)
        self._fault: Optional[Chip8Error] = None
        super().__init__(bus)
        self._load_fontset()

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    def _load_fontset(self) -> None:
        self._bus.load(FONTSET_START_ADDRESS, FONTSET)

    # @intent:responsibility CPUを構築直後の状態に戻します。メモリはゼロクリアされ、ROMは再ロードが必要です。
    def reset(self) -> None:
        super().reset()
        for device in self._bus.devices():
            if isinstance(device, RAM):
                device.clear()
        self._bus.get_and_clear_activity_log()
        self._load_fontset()
        self.display.clear()
        self._fault = None

    # @intent:responsibility ROMのバイト列を 0x200 から書き込みます。
    def load_rom(self, data: bytes) -> int:
        from retro_chip8.loader.loader import RomLoader
        return RomLoader().load_bytes(data, self._bus)

    def get_state(self) -> Chip8CpuState:
        return self._state

    @property
    def halted(self) -> bool:
        return self._fault is not None

    @property
    def fault(self) -> Optional[Chip8Error]:
        return self._fault

    @property
    def sound_active(self) -> bool:
        return self._state.sound_timer > 0

    # @intent:responsibility PCから2バイトを読み、16bitの命令語を組み立てます。
    def _fetch(self) -> int:
        opcode = read_word(self._bus, self._state.pc)
        self._state.opcode = opcode
        return opcode

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._io)

    # @intent:responsibility 命令の種類に関わらず、毎サイクル両タイマーを1ずつ減算します（0未満にはならない）。
    def _after_execute(self, operation: Operation) -> None:
        s = self._state
        if s.delay_timer > 0:
            s.delay_timer -= 1
        if s.sound_timer > 0:
            s.sound_timer -= 1

    # @intent:responsibility 1マシンサイクル（フェッチ→PC+2→実行→タイマー減算）を実行します。
    # @intent:post-condition 致命的エラーは握りつぶさず、CPUを停止状態にした上で呼び出し元へ再送出します。
    def step(self) -> Snapshot:
        if self._fault is not None:
            raise MachineHaltedError(self._fault)
        cycle_pc = self._state.pc
        try:
            return super().step()
        except Chip8Error as e:
            self._fault = e
            logger.error("Fatal cycle at PC=%03X (opcode %04X): %s", cycle_pc, self._state.opcode, e)
            raise

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
