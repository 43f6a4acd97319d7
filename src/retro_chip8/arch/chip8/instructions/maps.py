# src/retro_chip8/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。

上位ニブルで MAIN_TABLE を引きます。0x0/0x8/0xE は下位ニブル、0xF は下位バイトで
サブテーブルを再度引く二段構成です（同じ上位ニブルを無関係な命令が共有するため）。
"""
from typing import Callable, Dict, NamedTuple, Union

from . import load
from . import alu
from . import control
from . import graphics
from .base import decode_unknown

# @intent:data_structure デコード関数と実行関数の組。
class Handler(NamedTuple):
    decode: Callable
    execute: Callable

UNKNOWN = Handler(decode_unknown, control.execute_nop)

# @intent:map 0x0___ : 下位ニブルで分岐
TABLE_0: Dict[int, Handler] = {
    0x0: Handler(graphics.decode_cls, graphics.execute_cls),        # 00E0
    0xE: Handler(control.decode_ret, control.execute_ret),          # 00EE
}

# @intent:map 0x8___ : 下位ニブルで分岐
TABLE_8: Dict[int, Handler] = {
    0x0: Handler(load.decode_ld_vx_vy, load.execute_ld_vx_vy),
    0x1: Handler(alu.decode_or, alu.execute_or),
    0x2: Handler(alu.decode_and, alu.execute_and),
    0x3: Handler(alu.decode_xor, alu.execute_xor),
    0x4: Handler(alu.decode_add_vx_vy, alu.execute_add_vx_vy),
    0x5: Handler(alu.decode_sub, alu.execute_sub),
    0x6: Handler(alu.decode_shr, alu.execute_shr),
    0x7: Handler(alu.decode_subn, alu.execute_subn),
    0xE: Handler(alu.decode_shl, alu.execute_shl),
}

# @intent:map 0xE___ : 下位ニブルで分岐
TABLE_E: Dict[int, Handler] = {
    0xE: Handler(control.decode_skp, control.execute_skp),          # Ex9E
    0x1: Handler(control.decode_sknp, control.execute_sknp),        # ExA1
}

# @intent:map 0xF___ : 下位バイトで分岐
TABLE_F: Dict[int, Handler] = {
    0x07: Handler(load.decode_ld_vx_dt, load.execute_ld_vx_dt),
    0x0A: Handler(control.decode_ld_vx_key, control.execute_ld_vx_key),
    0x15: Handler(load.decode_ld_dt_vx, load.execute_ld_dt_vx),
    0x18: Handler(load.decode_ld_st_vx, load.execute_ld_st_vx),
    0x1E: Handler(alu.decode_add_i_vx, alu.execute_add_i_vx),
    0x29: Handler(load.decode_ld_f_vx, load.execute_ld_f_vx),
    0x33: Handler(load.decode_ld_b_vx, load.execute_ld_b_vx),
    0x55: Handler(load.decode_ld_mem_vx, load.execute_ld_mem_vx),
    0x65: Handler(load.decode_ld_vx_mem, load.execute_ld_vx_mem),
}

# @intent:map 上位ニブルから命令またはサブテーブルへのマッピング。
MAIN_TABLE: Dict[int, Union[Handler, Dict[int, Handler]]] = {
    0x0: TABLE_0,
    0x1: Handler(control.decode_jp, control.execute_jp),
    0x2: Handler(control.decode_call, control.execute_call),
    0x3: Handler(control.decode_se_vx_byte, control.execute_se_vx_byte),
    0x4: Handler(control.decode_sne_vx_byte, control.execute_sne_vx_byte),
    0x5: Handler(control.decode_se_vx_vy, control.execute_se_vx_vy),
    0x6: Handler(load.decode_ld_vx_byte, load.execute_ld_vx_byte),
    0x7: Handler(alu.decode_add_vx_byte, alu.execute_add_vx_byte),
    0x8: TABLE_8,
    0x9: Handler(control.decode_sne_vx_vy, control.execute_sne_vx_vy),
    0xA: Handler(load.decode_ld_i, load.execute_ld_i),
    0xB: Handler(control.decode_jp_v0, control.execute_jp_v0),
    0xC: Handler(alu.decode_rnd, alu.execute_rnd),
    0xD: Handler(graphics.decode_drw, graphics.execute_drw),
    0xE: TABLE_E,
    0xF: TABLE_F,
}

# @intent:map サブテーブルを引くためのキー抽出関数。
SUB_KEYS: Dict[int, Callable[[int], int]] = {
    0x0: lambda opcode: opcode & 0x000F,
    0x8: lambda opcode: opcode & 0x000F,
    0xE: lambda opcode: opcode & 0x000F,
    0xF: lambda opcode: opcode & 0x00FF,
}

# @intent:responsibility オペコードに対応するHandlerを返します。未定義の場合はUNKNOWNを返します。
def lookup(opcode: int) -> Handler:
    family = (opcode & 0xF000) >> 12
    entry = MAIN_TABLE.get(family, UNKNOWN)
    if isinstance(entry, dict):
        return entry.get(SUB_KEYS[family](opcode), UNKNOWN)
    return entry
