# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。

全ての命令は16bit固定長で、オペランドは以下の固定ビット位置から取り出します。
    x   = bits 8-11   (レジスタ番号)
    y   = bits 4-7    (レジスタ番号)
    kk  = bits 0-7    (即値バイト)
    nnn = bits 0-11   (アドレス)
    n   = bits 0-3    (ニブル)
"""
import random
from dataclasses import dataclass
from typing import Callable, List, NamedTuple

from retro_chip8.common.errors import MemoryAccessError
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.devices import Display, Keypad

# @intent:responsibility 命令実行時にCPU状態・バス以外に必要となる周辺装置をまとめます。
@dataclass
class Peripherals:
    display: Display
    keypad: Keypad
    rng: random.Random

    # @intent:responsibility 0-255の一様乱数を1バイト返します。
    def random_byte(self) -> int:
        return self.rng.randint(0, 0xFF)

# @intent:data_structure オペコードから取り出した全フィールド。
class Fields(NamedTuple):
    x: int
    y: int
    kk: int
    nnn: int
    n: int

# @intent:utility_function オペコードの各フィールドを固定ビット位置から取り出します。
def decode_fields(opcode: int) -> Fields:
    return Fields(
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
        n=opcode & 0x000F,
    )

# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)

# @intent:utility_function start から count バイトが全てマップ済みか、副作用の前に確認します。
# @intent:post-condition 範囲外があれば最初の範囲外アドレスで MemoryAccessError を送出します。
def check_range(bus, start: int, count: int) -> None:
    limit = bus.address_limit()
    if count > 0 and start + count > limit:
        raise MemoryAccessError(max(start, limit))

def reg(index: int) -> str:
    return f"V{index:X}"

def make_operation(opcode: int, mnemonic: str, operands: List[str] = None) -> Operation:
    return Operation(opcode_hex=f"{opcode:04X}", mnemonic=mnemonic,
                     operands=operands or [], opcode=opcode)

# --- デコーダ生成関数 ---
# 多くの命令はオペランドの書式だけが異なるため、書式ごとにデコーダを生成します。

Decoder = Callable[[int], Operation]

def decode_implied(mnemonic: str) -> Decoder:
    def decoder(opcode: int) -> Operation:
        return make_operation(opcode, mnemonic)
    return decoder

def decode_addr(mnemonic: str, prefix: List[str] = ()) -> Decoder:
    def decoder(opcode: int) -> Operation:
        return make_operation(opcode, mnemonic, list(prefix) + [f"${opcode & 0x0FFF:03X}"])
    return decoder

def decode_vx(mnemonic: str, before: List[str] = (), after: List[str] = ()) -> Decoder:
    def decoder(opcode: int) -> Operation:
        f = decode_fields(opcode)
        return make_operation(opcode, mnemonic, list(before) + [reg(f.x)] + list(after))
    return decoder

def decode_vx_byte(mnemonic: str) -> Decoder:
    def decoder(opcode: int) -> Operation:
        f = decode_fields(opcode)
        return make_operation(opcode, mnemonic, [reg(f.x), f"#${f.kk:02X}"])
    return decoder

def decode_vx_vy(mnemonic: str) -> Decoder:
    def decoder(opcode: int) -> Operation:
        f = decode_fields(opcode)
        return make_operation(opcode, mnemonic, [reg(f.x), reg(f.y)])
    return decoder

# @intent:responsibility 未定義のオペコードを表すOperationを生成します。
def decode_unknown(opcode: int) -> Operation:
    return make_operation(opcode, "UNKNOWN", [f"${opcode:04X}"])
