# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用しますが、バスアクセスログを汚さないように
bus.peek でのみ読み出します。
"""
from typing import List, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    limit = min(start_addr + length, bus.address_limit())
    current_addr = start_addr

    while current_addr < limit:
        # 末尾に1バイトだけ残った場合はデータとして表示
        if current_addr + 1 >= limit:
            value = bus.peek(current_addr)
            result.append((current_addr, f"{value:02X}", f"DB ${value:02X}"))
            break

        hi = bus.peek(current_addr)
        lo = bus.peek(current_addr + 1)
        operation = decode_opcode((hi << 8) | lo)
        result.append((current_addr, f"{hi:02X} {lo:02X}", operation.render()))
        current_addr += operation.length

    return result
