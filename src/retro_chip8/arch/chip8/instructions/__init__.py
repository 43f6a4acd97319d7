# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
import logging

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals
from .maps import lookup, UNKNOWN

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8のオペコードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    16bitオペコードをデコードし、Operationオブジェクトを返します。
    未定義のオペコードは mnemonic="UNKNOWN" のOperationになります。
    """
    return lookup(opcode).decode(opcode)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, io: Peripherals) -> None:
    """
    デコードされた命令を実行し、CPUの状態を変更します。
    未定義のオペコードは何もせずに戻ります。
    """
    handler = lookup(operation.opcode)
    if handler is UNKNOWN:
        logger.debug("Ignoring unknown opcode %04X at %03X", operation.opcode, state.pc - 2)
    handler.execute(state, bus, io, operation)
