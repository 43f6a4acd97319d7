# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CPUから見た 0x000-0xFFF のアドレス空間と、そこにマップされるデバイスを扱います。
命令実行中の read/write は1バイト単位でアクセスログに残り、サイクルのSnapshotに含まれます。
マップされていないアドレスへのアクセスは黙って丸めず、MemoryAccessError を送出します。
"""
from abc import ABC, abstractmethod
from typing import List, Tuple, Iterable
from dataclasses import dataclass
from enum import Enum

from retro_chip8.common.errors import MemoryAccessError

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:data_structure 1回のバスアクセス。dataは8bit値。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility バスに接続できるデバイスの読み書きインターフェース。
class Device(ABC):
    """
    アドレスはバス上の絶対アドレスではなく、デバイス先頭からのオフセットで渡されます。
    """
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    # @intent:pre-condition dataは0-255であること。
    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

# @intent:responsibility 読み書き可能なバイト配列としてのメモリ。
class RAM(Device):
    """
    CHIP-8のメインメモリ。予約領域・フォント・プログラム領域を区別せず、どこへでも書き込めます。
    """
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def _check(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise MemoryAccessError(address, f"Address {address:#06x} out of bounds for RAM of size {self._size}.")

    def read(self, address: int) -> int:
        self._check(address)
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    def clear(self) -> None:
        self._memory[:] = bytes(self._size)

    def get_size(self) -> int:
        return self._size

# @intent:responsibility アドレスをデバイスへ振り分け、命令実行中のアクセスを記録します。
class Bus:
    """
    デバイスを (開始, 終了, デバイス) の組で保持する単純なメモリマップ。

    アクセス経路は3種類あります。
      read / write : 命令実行用。アクセスログに記録されます。
      peek         : 逆アセンブラ・UI用の読み出し。記録しません。
      load         : フォントやROMの初期転送用の書き込み。記録しません。
    """
    def __init__(self):
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility 記録済みのアクセスを返し、ログを空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log, self._activity = self._activity, []
        return log

    # @intent:pre-condition 0 <= start_address <= end_address。RAMの場合は範囲の長さとサイズが一致すること。
    # @intent:rationale 範囲の重複は検査しません。先に登録したデバイスが優先されます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"RAM of {device.get_size()} bytes cannot be mapped to a {span}-byte range "
                f"{start_address:#06x}-{end_address:#06x}."
            )
        self._memory_map.append((start_address, end_address, device))

    def devices(self) -> Iterable[Device]:
        return [device for _, _, device in self._memory_map]

    # @intent:responsibility マップ済み領域の上端（最後の有効アドレス+1）を返します。
    def address_limit(self) -> int:
        return max((end + 1 for _, end, _ in self._memory_map), default=0)

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise MemoryAccessError(address)

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:post-condition 途中のアドレスがマップ外の場合、それ以前のバイトは書き込み済みです。
    def load(self, address: int, data: bytes) -> None:
        for offset, value in enumerate(data):
            device, device_offset = self._resolve(address + offset)
            device.write(device_offset, value)
