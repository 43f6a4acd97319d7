# src/retro_chip8/arch/chip8/instructions/graphics.py
"""
画面命令（CLS, DRW）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, VF
from .base import Peripherals, check_range, decode_fields, decode_implied, make_operation, reg

# --- CLS (00E0) ---
decode_cls = decode_implied("CLS")

def execute_cls(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    io.display.clear()

# --- DRW Vx, Vy, nibble (Dxyn) ---
def decode_drw(opcode: int) -> Operation:
    f = decode_fields(opcode)
    return make_operation(opcode, "DRW", [reg(f.x), reg(f.y), str(f.n)])

# @intent:responsibility I以降のnバイトのスプライトを(Vx, Vy)にXOR合成で描画し、衝突をVFに設定します。
# @intent:rationale 開始位置のみ画面サイズで折り返し、右端・下端をはみ出す部分はクリップします。
#                  はみ出した行のスプライトデータはメモリから読み出しません。
#                  スプライトが範囲外に掛かる場合は1ピクセルも描画しません。
def execute_drw(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    display = io.display
    x_pos = state.v[f.x] % display.width
    y_pos = state.v[f.y] % display.height
    visible_rows = min(f.n, display.height - y_pos)
    check_range(bus, state.i, visible_rows)
    collision = False

    for row in range(f.n):
        y = y_pos + row
        if y >= display.height:
            break
        sprite_byte = bus.read(state.i + row)
        for col in range(8):
            x = x_pos + col
            if x >= display.width:
                break
            if sprite_byte & (0x80 >> col):
                if display.xor_pixel(x, y):
                    collision = True

    state.v[VF] = 1 if collision else 0
