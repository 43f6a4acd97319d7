# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー入力待ち）の実装。

PCは実行前に既に次の命令を指しているため、スキップは単に PC += 2 です。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.common.errors import StackOverflowError, StackUnderflowError
from retro_chip8.arch.chip8.state import Chip8CpuState, STACK_LEVELS
from .base import Peripherals, decode_fields, decode_implied, decode_addr, decode_vx, decode_vx_byte, decode_vx_vy

def _skip_if(state: Chip8CpuState, condition: bool) -> None:
    if condition:
        state.pc += 2

# --- NOP (未定義オペコード) ---
# @intent:responsibility 未定義オペコードは何もしません。エミュレーションは継続します。
def execute_nop(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    pass

# --- RET (00EE) ---
decode_ret = decode_implied("RET")

# @intent:responsibility サブルーチンから復帰します。
# @intent:pre-condition sp > 0。空のスタックからの復帰は致命的エラーです。
def execute_ret(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    if state.sp == 0:
        raise StackUnderflowError(f"RET with empty stack at {state.pc - 2:#05x}")
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- JP addr (1nnn) ---
decode_jp = decode_addr("JP")

def execute_jp(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.pc = op.opcode & 0x0FFF

# --- CALL addr (2nnn) ---
decode_call = decode_addr("CALL")

# @intent:responsibility 復帰先（CALLの次の命令）をスタックに積み、nnnへジャンプします。
# @intent:pre-condition sp < 16。満杯のスタックへのCALLは致命的エラーです。
def execute_call(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    if state.sp >= STACK_LEVELS:
        raise StackOverflowError(f"CALL with full stack ({STACK_LEVELS} levels) at {state.pc - 2:#05x}")
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.opcode & 0x0FFF

# --- SE Vx, byte (3xkk) / SNE Vx, byte (4xkk) ---
decode_se_vx_byte = decode_vx_byte("SE")
decode_sne_vx_byte = decode_vx_byte("SNE")

def execute_se_vx_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    _skip_if(state, state.v[f.x] == f.kk)

def execute_sne_vx_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    _skip_if(state, state.v[f.x] != f.kk)

# --- SE Vx, Vy (5xy0) / SNE Vx, Vy (9xy0) ---
decode_se_vx_vy = decode_vx_vy("SE")
decode_sne_vx_vy = decode_vx_vy("SNE")

def execute_se_vx_vy(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    _skip_if(state, state.v[f.x] == state.v[f.y])

def execute_sne_vx_vy(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    _skip_if(state, state.v[f.x] != state.v[f.y])

# --- JP V0, addr (Bnnn) ---
decode_jp_v0 = decode_addr("JP", prefix=["V0"])

# @intent:rationale 結果がメモリ範囲外でもここでは丸めず、次のフェッチでバスが検出します。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    state.pc = state.v[0] + (op.opcode & 0x0FFF)

# --- SKP Vx (Ex9E) / SKNP Vx (ExA1) ---
decode_skp = decode_vx("SKP")
decode_sknp = decode_vx("SKNP")

# キー番号は下位4ビットのみ有効
def execute_skp(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    _skip_if(state, io.keypad.is_pressed(state.v[f.x] & 0xF))

def execute_sknp(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    f = decode_fields(op.opcode)
    _skip_if(state, not io.keypad.is_pressed(state.v[f.x] & 0xF))

# --- LD Vx, K (Fx0A) ---
decode_ld_vx_key = decode_vx("LD", after=["K"])

# @intent:responsibility キー押下を待ちます。
# @intent:rationale 1サイクルを跨ぐ命令は存在しないため、押下がなければPCを戻して
#                  同じ命令を次サイクルで再フェッチさせます（ビジーポーリング）。
def execute_ld_vx_key(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> None:
    key = io.keypad.first_pressed()
    if key is None:
        state.pc -= 2
    else:
        state.v[decode_fields(op.opcode).x] = key
