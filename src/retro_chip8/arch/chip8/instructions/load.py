# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, FONTSET_START_ADDRESS, FONT_GLYPH_SIZE
from .base import Peripherals, check_range, decode_fields, decode_addr, decode_vx, decode_vx_byte, decode_vx_vy

# --- LD Vx, byte (6xkk) ---
decode_ld_vx_byte = decode_vx_byte("LD")

def execute_ld_vx_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] = f.kk

# --- LD Vx, Vy (8xy0) ---
decode_ld_vx_vy = decode_vx_vy("LD")

def execute_ld_vx_vy(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] = state.v[f.y]

# --- LD I, addr (Annn) ---
decode_ld_i = decode_addr("LD", prefix=["I"])

def execute_ld_i(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.i = op.opcode & 0x0FFF

# --- タイマー転送 (Fx07, Fx15, Fx18) ---
decode_ld_vx_dt = decode_vx("LD", after=["DT"])
decode_ld_dt_vx = decode_vx("LD", before=["DT"])
decode_ld_st_vx = decode_vx("LD", before=["ST"])

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.v[decode_fields(op.opcode).x] = state.delay_timer

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.delay_timer = state.v[decode_fields(op.opcode).x]

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.sound_timer = state.v[decode_fields(op.opcode).x]

# --- LD F, Vx (Fx29) ---
decode_ld_f_vx = decode_vx("LD", before=["F"])

# @intent:responsibility Vxの値に対応するフォントグリフのアドレスをIに設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    digit = state.v[decode_fields(op.opcode).x]
    state.i = FONTSET_START_ADDRESS + FONT_GLYPH_SIZE * digit

# --- LD B, Vx (Fx33) ---
decode_ld_b_vx = decode_vx("LD", before=["B"])

# @intent:responsibility Vxの10進表現（百・十・一の位）をI, I+1, I+2に格納します。
def execute_ld_b_vx(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    value = state.v[decode_fields(op.opcode).x]
    check_range(bus, state.i, 3)
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- LD [I], Vx (Fx55) / LD Vx, [I] (Fx65) ---
decode_ld_mem_vx = decode_vx("LD", before=["[I]"])
decode_ld_vx_mem = decode_vx("LD", after=["[I]"])

# @intent:responsibility V0からVxまで（Vxを含む）をI以降のメモリへ格納します。Iは変化しません。
# @intent:post-condition 範囲外に掛かる場合は1バイトも書き込みません。
def execute_ld_mem_vx(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    last = decode_fields(op.opcode).x
    check_range(bus, state.i, last + 1)
    for r in range(last + 1):
        bus.write(state.i + r, state.v[r])

# @intent:responsibility I以降のメモリからV0からVxまで（Vxを含む）を読み込みます。Iは変化しません。
def execute_ld_vx_mem(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    last = decode_fields(op.opcode).x
    check_range(bus, state.i, last + 1)
    for r in range(last + 1):
        state.v[r] = bus.read(state.i + r)
