# retro_chip8/core/cpu.py
"""
Core Layer (サイクル駆動の抽象CPU)

1回の step() が1マシンサイクルに対応します。サイクルの流れ
（フェッチ→デコード→PC前進→実行→サイクル後処理）はここで固定し、
命令語の組み立て方や命令の意味はアーキテクチャ側の実装に任せます。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState
from retro_chip8.common.types import RegisterLayoutInfo

# @intent:responsibility サイクルの実行順序と、UIへ公開する観測用インターフェースを定義します。
class AbstractCpu(ABC):
    """
    バスに接続されたCPUの基底クラス。

    状態オブジェクトは get_state() で参照できますが、書き換えは命令の実行を通じて行います。
    タイマー減算のような「命令に依らず毎サイクル行う処理」は _after_execute() で差し込みます。
    """
    # @intent:pre-condition `bus`にはプログラムを格納するメモリがマップ済みであること。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """電源投入直後のレジスタ状態を返します。"""

    # @intent:responsibility レジスタとサイクル数を電源投入直後の値に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    def get_bus(self) -> Bus:
        return self._bus

    # @intent:responsibility reset() 以降に実行したサイクル数。
    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:pre-condition PCは変更しないこと。PCの前進は _update_pc の責務です。
    @abstractmethod
    def _fetch(self) -> int:
        """PCの位置から命令語を読み出して返します。"""

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        """命令語を表示可能なOperationに変換します。状態は変更しません。"""

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        """Operationが表す命令を現在の状態に適用します。"""

    # @intent:responsibility 1マシンサイクルを実行し、サイクル終了時点のSnapshotを返します。
    # @intent:post-condition 実行時点のPCは命令の次を指しています。分岐命令はこれを上書きします。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        cycle_pc = self._state.pc

        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)
        self._after_execute(operation)

        return self._create_snapshot(cycle_pc, operation)

    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility 命令の種類に関わらずサイクルの最後に呼ばれるフック。
    def _after_execute(self, operation: Operation) -> None:
        pass

    def _create_snapshot(self, cycle_pc: int, operation: Operation) -> Snapshot:
        self._cycle_count += operation.cycle_count
        return Snapshot(
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count,
                              symbol_info=f"{cycle_pc:03X}: {operation.render()}"),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # @intent:responsibility レジスタ名と値の対応表を返します。UIはCPUの内部構造を知らずに表示できます。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:responsibility レジスタ表示のグループ分けとビット幅を返します。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    # @intent:responsibility メモリ範囲を (address, hex_bytes, text) の一覧として返します。
    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        pass
