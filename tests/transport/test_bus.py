# tests/transport/test_bus.py
"""
retro_chip8.transport.busモジュールの単体テスト。
"""
import pytest

from retro_chip8.transport.bus import Bus, RAM, BusAccessType
from retro_chip8.common.errors import MemoryAccessError

@pytest.fixture
def bus():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return bus

class TestRAM:
    def test_read_write(self):
        ram = RAM(16)
        ram.write(3, 0xAB)
        assert ram.read(3) == 0xAB

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            RAM(0)
        with pytest.raises(ValueError):
            RAM(-1)

    def test_out_of_bounds_is_memory_access_error(self):
        ram = RAM(16)
        with pytest.raises(MemoryAccessError):
            ram.read(16)
        # IndexError としても捕捉できる
        with pytest.raises(IndexError):
            ram.write(-1, 0)

    def test_write_rejects_non_byte(self):
        with pytest.raises(ValueError):
            RAM(16).write(0, 0x100)

    def test_clear(self):
        ram = RAM(4)
        ram.write(2, 0x55)
        ram.clear()
        assert [ram.read(a) for a in range(4)] == [0, 0, 0, 0]

class TestBus:
    def test_unmapped_address(self, bus):
        with pytest.raises(MemoryAccessError) as excinfo:
            bus.read(0x1000)
        assert excinfo.value.address == 0x1000
        with pytest.raises(MemoryAccessError):
            bus.write(0x1000, 0xFF)

    def test_register_device_invalid_range(self):
        with pytest.raises(ValueError):
            Bus().register_device(0x200, 0x100, RAM(0x100))
        with pytest.raises(ValueError):
            Bus().register_device(-1, 0x100, RAM(0x100))

    def test_register_device_size_mismatch(self):
        with pytest.raises(ValueError):
            Bus().register_device(0x000, 0x0FF, RAM(0x200))

    def test_register_non_device(self):
        with pytest.raises(TypeError):
            Bus().register_device(0x000, 0x0FF, bytearray(0x100))

    def test_activity_log(self, bus):
        bus.write(0x300, 0x12)
        assert bus.read(0x300) == 0x12
        log = bus.get_and_clear_activity_log()
        assert [(a.address, a.data, a.access_type) for a in log] == [
            (0x300, 0x12, BusAccessType.WRITE),
            (0x300, 0x12, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    def test_peek_and_load_are_not_logged(self, bus):
        bus.load(0x200, b"\x01\x02\x03")
        assert bus.peek(0x201) == 0x02
        assert bus.get_and_clear_activity_log() == []

    def test_load_past_end_raises(self, bus):
        with pytest.raises(MemoryAccessError):
            bus.load(0xFFE, b"\x01\x02\x03")

    def test_address_limit(self, bus):
        assert bus.address_limit() == 0x1000
        assert Bus().address_limit() == 0
