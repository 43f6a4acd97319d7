import random
import unittest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.cpu = Chip8Cpu(self.bus, rng=random.Random(0))
        self.state = self.cpu.get_state()

    def _execute(self, opcode):
        self.bus.load(0x200, bytes([opcode >> 8, opcode & 0xFF]))
        self.state.pc = 0x200
        return self.cpu.step()

    def test_add_vx_byte_wraps_without_flag(self):
        self.state.v[1] = 0xFF
        self.state.vf = 0x05
        self._execute(0x7101)
        self.assertEqual(self.state.v[1], 0x00)
        self.assertEqual(self.state.vf, 0x05)

    def test_add_vx_byte(self):
        self.state.v[3] = 0x10
        self._execute(0x7322)
        self.assertEqual(self.state.v[3], 0x32)

    def test_or_and_xor(self):
        self.state.v[1] = 0b1100
        self.state.v[2] = 0b1010
        self._execute(0x8121) # OR
        self.assertEqual(self.state.v[1], 0b1110)

        self.state.v[1] = 0b1100
        self._execute(0x8122) # AND
        self.assertEqual(self.state.v[1], 0b1000)

        self.state.v[1] = 0b1100
        self._execute(0x8123) # XOR
        self.assertEqual(self.state.v[1], 0b0110)

    def test_add_vx_vy_carry(self):
        self.state.v[1] = 0xFF
        self.state.v[2] = 0x01
        self._execute(0x8124)
        self.assertEqual(self.state.v[1], 0x00)
        self.assertEqual(self.state.vf, 1)

    def test_add_vx_vy_no_carry(self):
        self.state.v[1] = 0x01
        self.state.v[2] = 0x01
        self.state.vf = 1
        self._execute(0x8124)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 0)

    def test_sub_borrow(self):
        self.state.v[1] = 0x01
        self.state.v[2] = 0x02
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0xFF)
        self.assertEqual(self.state.vf, 0)

    def test_sub_no_borrow(self):
        self.state.v[1] = 0x02
        self.state.v[2] = 0x01
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0x01)
        self.assertEqual(self.state.vf, 1)

    def test_sub_equal_operands_clears_flag(self):
        self.state.v[1] = 0x40
        self.state.v[2] = 0x40
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0x00)
        self.assertEqual(self.state.vf, 0)

    def test_shr(self):
        self.state.v[1] = 0x05
        self._execute(0x8106)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 1)

    def test_subn(self):
        self.state.v[1] = 0x01
        self.state.v[2] = 0x03
        self._execute(0x8127)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 1)

        self.state.v[1] = 0x02
        self.state.v[2] = 0x01
        self._execute(0x8127)
        self.assertEqual(self.state.v[1], 0xFF)
        self.assertEqual(self.state.vf, 0)

    def test_shl_wraps(self):
        self.state.v[1] = 0x81
        self._execute(0x810E)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 1)

    def test_vf_as_destination_keeps_result(self):
        # フラグの後に結果が書き込まれるため、VF自身が演算先なら結果が残る
        self.state.vf = 0xFF
        self.state.v[1] = 0x01
        self._execute(0x8F14)
        self.assertEqual(self.state.vf, 0x00)

        self.state.vf = 0x02
        self._execute(0x8F06)
        self.assertEqual(self.state.vf, 0x01)

    def test_rnd_masks_random_byte(self):
        expected = random.Random(0).randint(0, 0xFF) & 0x0F
        self._execute(0xC40F)
        self.assertEqual(self.state.v[4], expected)

    def test_rnd_zero_mask(self):
        self._execute(0xC400)
        self.assertEqual(self.state.v[4], 0)

    def test_add_i_vx_sets_no_flag(self):
        self.state.i = 0x0FFF
        self.state.v[1] = 0x02
        self.state.vf = 0
        self._execute(0xF11E)
        self.assertEqual(self.state.i, 0x1001)
        self.assertEqual(self.state.vf, 0)

if __name__ == '__main__':
    unittest.main()
