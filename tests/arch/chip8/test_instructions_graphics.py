# tests/arch/chip8/test_instructions_graphics.py
import pytest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.devices import PIXEL_ON, PIXEL_OFF
from retro_chip8.common.errors import MemoryAccessError

SPRITE = bytes([0b11110000, 0b10010000, 0b11110000])

@pytest.fixture
def cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    cpu = Chip8Cpu(bus)
    bus.load(0x300, SPRITE)
    cpu.get_state().i = 0x300
    return cpu

def run(cpu, opcode):
    cpu.get_bus().load(0x200, bytes([opcode >> 8, opcode & 0xFF]))
    cpu.get_state().pc = 0x200
    return cpu.step()

def lit_pixels(display):
    return {(x, y) for y in range(display.height) for x in range(display.width) if display.is_lit(x, y)}

def expected_pixels(x0, y0, sprite=SPRITE):
    return {(x0 + col, y0 + row)
            for row, byte in enumerate(sprite)
            for col in range(8) if byte & (0x80 >> col)}

def test_cls_clears_video(cpu):
    run(cpu, 0xD013)
    assert lit_pixels(cpu.display)
    run(cpu, 0x00E0)
    assert all(p == PIXEL_OFF for p in cpu.display.pixels)

def test_draw_at_origin(cpu):
    run(cpu, 0x00E0)
    run(cpu, 0xD013)
    assert lit_pixels(cpu.display) == expected_pixels(0, 0)
    assert cpu.get_state().vf == 0
    # 値は常に 0 か 0xFFFFFFFF のどちらか
    assert set(cpu.display.pixels) == {PIXEL_ON, PIXEL_OFF}

def test_draw_twice_collides_and_erases(cpu):
    run(cpu, 0xD013)
    run(cpu, 0xD013)
    assert cpu.get_state().vf == 1
    assert lit_pixels(cpu.display) == set()

def test_draw_reads_position_from_registers(cpu):
    state = cpu.get_state()
    state.v[1] = 10
    state.v[2] = 5
    run(cpu, 0xD123)
    assert lit_pixels(cpu.display) == expected_pixels(10, 5)

def test_draw_start_position_wraps(cpu):
    state = cpu.get_state()
    state.v[1] = 64 + 3
    state.v[2] = 32 + 1
    run(cpu, 0xD123)
    assert lit_pixels(cpu.display) == expected_pixels(3, 1)

def test_draw_clips_at_right_and_bottom_edges(cpu):
    state = cpu.get_state()
    state.v[1] = 62
    state.v[2] = 31
    run(cpu, 0xD123)
    # 1行目の左2ピクセルだけが画面内に残る
    assert lit_pixels(cpu.display) == {(62, 31), (63, 31)}

def test_draw_vf_cleared_without_collision(cpu):
    cpu.get_state().vf = 1
    run(cpu, 0xD011)
    assert cpu.get_state().vf == 0

def test_draw_partial_overlap_collides(cpu):
    state = cpu.get_state()
    run(cpu, 0xD011) # 上段 11110000 at (0,0)
    state.v[1] = 3
    run(cpu, 0xD101) # (3,0) から描くと (3,0) が重なる
    assert state.vf == 1
    assert not cpu.display.is_lit(3, 0)
    assert cpu.display.is_lit(4, 0)

def test_draw_font_glyph(cpu):
    state = cpu.get_state()
    state.v[0] = 0x0
    run(cpu, 0xF029) # LD F, V0
    run(cpu, 0xD005)
    rows = cpu.display.rows()
    assert rows[0][:4] == [1, 1, 1, 1]
    assert rows[1][:4] == [1, 0, 0, 1]
    assert rows[4][:4] == [1, 1, 1, 1]

def test_display_dirty_flag(cpu):
    cpu.display.dirty = False
    run(cpu, 0x6000)
    assert not cpu.display.dirty
    run(cpu, 0xD011)
    assert cpu.display.dirty

def test_draw_sprite_past_end_of_memory_draws_nothing(cpu):
    cpu.get_state().i = 0xFFE
    with pytest.raises(MemoryAccessError):
        run(cpu, 0xD013)
    assert lit_pixels(cpu.display) == set()
    assert cpu.halted

def test_draw_only_reads_visible_rows(cpu):
    state = cpu.get_state()
    cpu.get_bus().write(0xFFF, 0x80)
    state.i = 0xFFF
    state.v[2] = 31
    # 2行目以降は画面外なので 0x1000 以降は読まない
    run(cpu, 0xD023)
    assert lit_pixels(cpu.display) == {(0, 31)}
