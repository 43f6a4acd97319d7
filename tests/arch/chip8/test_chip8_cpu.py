# tests/arch/chip8/test_chip8_cpu.py
import logging
import random

import pytest

from retro_chip8.transport.bus import Bus, RAM, BusAccessType
from retro_chip8.common.errors import MemoryAccessError, MachineHaltedError, StackUnderflowError, RomLoadError
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import FONTSET, FONTSET_START_ADDRESS, START_ADDRESS, MAX_ROM_SIZE
from retro_chip8.arch.chip8.devices import PIXEL_OFF

@pytest.fixture
def bus():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return bus

@pytest.fixture
def cpu(bus):
    return Chip8Cpu(bus, rng=random.Random(1))

def fontset_in_memory(bus):
    return bytes(bus.peek(FONTSET_START_ADDRESS + n) for n in range(len(FONTSET)))

def test_initial_state(cpu, bus):
    state = cpu.get_state()
    assert state.pc == START_ADDRESS
    assert state.v == [0] * 16
    assert state.stack == [0] * 16
    assert (state.i, state.sp, state.delay_timer, state.sound_timer) == (0, 0, 0, 0)
    assert fontset_in_memory(bus) == FONTSET
    assert len(FONTSET) == 80
    assert bus.peek(START_ADDRESS) == 0
    assert all(p == PIXEL_OFF for p in cpu.display.pixels)
    assert not cpu.halted

def test_font_loading_is_not_logged(bus):
    Chip8Cpu(bus)
    assert bus.get_and_clear_activity_log() == []

def test_fetch_is_big_endian(cpu, bus):
    bus.load(START_ADDRESS, bytes([0x61, 0x2A]))
    snapshot = cpu.step()
    assert cpu.get_state().opcode == 0x612A
    assert cpu.get_state().v[1] == 0x2A
    assert snapshot.operation.opcode == 0x612A

def test_delay_timer_counts_down_and_stops(cpu, bus):
    bus.load(START_ADDRESS, bytes([0x00, 0x00] * 8))  # CLS で埋める
    cpu.get_state().delay_timer = 5
    for expected in (4, 3, 2, 1, 0, 0):
        cpu.step()
        assert cpu.get_state().delay_timer == expected

def test_sound_active_follows_sound_timer(cpu, bus):
    bus.load(START_ADDRESS, bytes([0x60, 0x02, 0xF0, 0x18, 0x00, 0xE0, 0x00, 0xE0]))
    cpu.step()
    assert not cpu.sound_active
    cpu.step()  # ST=2 の後、同じサイクルで1減る
    assert cpu.get_state().sound_timer == 1
    assert cpu.sound_active
    cpu.step()
    assert not cpu.sound_active

def test_fetch_past_end_of_memory_halts(cpu):
    cpu.get_state().pc = 0xFFF
    with pytest.raises(MemoryAccessError) as exc:
        cpu.step()
    assert exc.value.address == 0x1000
    assert cpu.halted
    assert isinstance(cpu.fault, MemoryAccessError)

def test_halted_cpu_refuses_to_step_until_reset(cpu, bus):
    bus.load(START_ADDRESS, bytes([0x00, 0xEE]))
    with pytest.raises(StackUnderflowError):
        cpu.step()
    with pytest.raises(MachineHaltedError) as exc:
        cpu.step()
    assert isinstance(exc.value.cause, StackUnderflowError)

    cpu.reset()
    assert not cpu.halted
    assert cpu.get_state().pc == START_ADDRESS

def test_reset_clears_memory_and_reloads_font(cpu, bus):
    cpu.load_rom(bytes([0x12, 0x00]))
    bus.write(FONTSET_START_ADDRESS, 0x00)
    state = cpu.get_state()
    state.v[3] = 7
    state.i = 0x123
    cpu.display.xor_pixel(0, 0)

    cpu.reset()

    state = cpu.get_state()
    assert state.v[3] == 0
    assert state.i == 0
    assert bus.peek(START_ADDRESS) == 0
    assert fontset_in_memory(bus) == FONTSET
    assert not cpu.display.is_lit(0, 0)
    assert cpu.cycle_count == 0

def test_load_rom_writes_at_start_address(cpu, bus):
    assert cpu.load_rom(bytes([0xA2, 0x2A, 0x60, 0x0C])) == 4
    assert [bus.peek(START_ADDRESS + n) for n in range(4)] == [0xA2, 0x2A, 0x60, 0x0C]

def test_load_rom_rejects_oversized_data(cpu, bus):
    with pytest.raises(RomLoadError):
        cpu.load_rom(bytes(MAX_ROM_SIZE + 1))
    assert bus.peek(START_ADDRESS) == 0

def test_snapshot_contents(cpu, bus):
    cpu.get_state().i = 0x300
    cpu.get_state().v[0] = 123
    bus.load(START_ADDRESS, bytes([0xF0, 0x33]))
    snapshot = cpu.step()

    assert snapshot.operation.render() == "LD B, V0"
    assert snapshot.metadata.symbol_info == "200: LD B, V0"
    assert snapshot.metadata.cycle_count == 1
    assert snapshot.state.pc == 0x202
    assert snapshot.written_addresses() == [0x300, 0x301, 0x302]
    reads = [a.address for a in snapshot.bus_activity if a.access_type == BusAccessType.READ]
    assert reads == [0x200, 0x201]

def test_snapshot_is_isolated_from_later_cycles(cpu, bus):
    bus.load(START_ADDRESS, bytes([0x60, 0x01, 0x70, 0x01]))
    first = cpu.step()
    cpu.step()
    assert first.state.v[0] == 1
    assert cpu.get_state().v[0] == 2

def test_cycle_counter(cpu, bus):
    bus.load(START_ADDRESS, bytes([0x12, 0x00]))  # 自分自身へのジャンプ
    for _ in range(10):
        cpu.step()
    assert cpu.cycle_count == 10
    assert cpu.get_state().pc == START_ADDRESS

def test_register_map(cpu):
    state = cpu.get_state()
    state.v[0xA] = 0x42
    state.i = 0x345
    registers = cpu.get_register_map()
    assert registers["VA"] == 0x42
    assert registers["I"] == 0x345
    assert registers["PC"] == START_ADDRESS
    assert {"SP", "DT", "ST", "V0", "VF"} <= set(registers)

def test_register_layout_covers_register_map(cpu):
    names = [r.name for group in cpu.get_register_layout() for r in group.registers]
    assert sorted(names) == sorted(cpu.get_register_map())

def test_seeded_rng_is_reproducible(bus):
    program = bytes([0xC0, 0xFF, 0xC1, 0xFF, 0xC2, 0xFF])

    def run_with(seed):
        b = Bus()
        b.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(b, rng=random.Random(seed))
        cpu.load_rom(program)
        for _ in range(3):
            cpu.step()
        return cpu.get_state().v[:3]

    assert run_with(42) == run_with(42)

def test_disassemble_through_cpu(cpu):
    cpu.load_rom(bytes([0x00, 0xE0, 0x12, 0x00]))
    listing = cpu.disassemble(START_ADDRESS, 4)
    assert [text for _, _, text in listing] == ["CLS", "JP $200"]

def test_fatal_cycle_log_reports_faulting_instruction(cpu, bus, caplog):
    bus.load(0x300, bytes([0x00, 0xEE]))
    cpu.get_state().pc = 0x300
    with caplog.at_level(logging.ERROR, logger="retro_chip8.arch.chip8.cpu"):
        with pytest.raises(StackUnderflowError):
            cpu.step()
    assert "PC=300" in caplog.text
    assert "opcode 00EE" in caplog.text
