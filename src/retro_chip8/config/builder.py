import random
from typing import Tuple

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import MEMORY_SIZE
from retro_chip8.loader.loader import RomLoader
from .models import MachineConfig

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、CPUを生成・接続し、ROMをロードします。
class SystemBuilder:
    def build_system(self, config: MachineConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        rng = random.Random(config.seed) if config.seed is not None else None
        cpu = Chip8Cpu(bus, rng=rng)

        if config.rom_path:
            RomLoader().load_rom(config.rom_path, bus)

        return cpu, bus
