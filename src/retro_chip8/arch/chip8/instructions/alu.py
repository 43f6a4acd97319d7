# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグを出力する命令（8xy4/8xy5/8xy6/8xy7/8xyE）は、オペランドからVFを先に求めて書き込み、
その後で結果をVxに書き込みます。x == 0xF の場合は結果がフラグを上書きします。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, VF
from .base import Peripherals, decode_fields, decode_vx, decode_vx_byte, decode_vx_vy

# --- ADD Vx, byte (7xkk) ---
decode_add_vx_byte = decode_vx_byte("ADD")

# @intent:responsibility Vxに即値を加算します。256で循環し、フラグは変化しません。
def execute_add_vx_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] = (state.v[f.x] + f.kk) & 0xFF

# --- OR / AND / XOR (8xy1, 8xy2, 8xy3) ---
decode_or = decode_vx_vy("OR")
decode_and = decode_vx_vy("AND")
decode_xor = decode_vx_vy("XOR")

def execute_or(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] |= state.v[f.y]

def execute_and(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] &= state.v[f.y]

def execute_xor(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] ^= state.v[f.y]

# --- ADD Vx, Vy (8xy4) ---
decode_add_vx_vy = decode_vx_vy("ADD")

# @intent:responsibility Vx + Vy をVxに格納し、255を超えた場合VF=1とします。
def execute_add_vx_vy(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    total = state.v[f.x] + state.v[f.y]
    state.v[VF] = 1 if total > 0xFF else 0
    state.v[f.x] = total & 0xFF

# --- SUB Vx, Vy (8xy5) ---
decode_sub = decode_vx_vy("SUB")

# @intent:responsibility Vx - Vy をVxに格納します。Vx > Vy のときVF=1（ボローなし）。
def execute_sub(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    vx, vy = state.v[f.x], state.v[f.y]
    state.v[VF] = 1 if vx > vy else 0
    state.v[f.x] = (vx - vy) & 0xFF

# --- SHR Vx (8xy6) ---
decode_shr = decode_vx("SHR")

def execute_shr(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    vx = state.v[f.x]
    state.v[VF] = vx & 0x01
    state.v[f.x] = vx >> 1

# --- SUBN Vx, Vy (8xy7) ---
decode_subn = decode_vx_vy("SUBN")

# @intent:responsibility Vy - Vx をVxに格納します。Vy > Vx のときVF=1。
def execute_subn(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    vx, vy = state.v[f.x], state.v[f.y]
    state.v[VF] = 1 if vy > vx else 0
    state.v[f.x] = (vy - vx) & 0xFF

# --- SHL Vx (8xyE) ---
decode_shl = decode_vx("SHL")

def execute_shl(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    vx = state.v[f.x]
    state.v[VF] = (vx & 0x80) >> 7
    state.v[f.x] = (vx << 1) & 0xFF

# --- RND Vx, byte (Cxkk) ---
decode_rnd = decode_vx_byte("RND")

def execute_rnd(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    state.v[f.x] = io.random_byte() & f.kk

# --- ADD I, Vx (Fx1E) ---
decode_add_i_vx = decode_vx("ADD", before=["I"])

# @intent:responsibility IにVxを加算します。オーバーフローフラグは設定しません。
def execute_add_i_vx(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.i = (state.i + state.v[decode_fields(op.opcode).x]) & 0xFFFF
