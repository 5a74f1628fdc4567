"""
Tests for the APU register model.
"""

from chipnotes.apu.hardware import MiniApu


class TestSquareChannel:
    def test_register_decoding(self):
        apu = MiniApu()
        apu.write(0x4015, 0x01)
        apu.write(0x4000, 0b10_1_1_0111)
        apu.write(0x4001, 0b1_010_1_011)
        apu.write(0x4002, 0x34)
        apu.write(0x4003, 0b00001_010)
        sq = apu.squares[0]
        assert sq.duty() == 2
        assert sq.length_halt()
        assert sq.constant_volume()
        assert sq.volume() == 7
        assert sq.sweep_enabled()
        assert sq.sweep_period() == 2
        assert sq.sweep_negate()
        assert sq.sweep_shift() == 3
        assert sq.timer_whole() == 0x234
        assert sq.out_volume() == 7
        state = sq.state()
        assert state.timer == 0x234
        assert state.duty == 2
        assert state.sweep_period == 2
        assert not state.timed_out

    def test_silent_until_length_loaded(self):
        """Length counters start at zero and only load while enabled"""
        apu = MiniApu()
        apu.write(0x4004, 0x3F)
        apu.write(0x4006, 0x80)
        apu.write(0x4007, 0x00)
        assert apu.squares[1].out_volume() == 0
        apu.write(0x4015, 0x02)
        apu.write(0x4007, 0x00)
        assert apu.squares[1].out_volume() == 15

    def test_disable_times_out(self):
        apu = MiniApu()
        apu.write(0x4015, 0x01)
        apu.write(0x4000, 0x3A)
        apu.write(0x4002, 0x80)
        apu.write(0x4003, 0x00)
        assert apu.squares[0].out_volume() == 10
        apu.write(0x4015, 0x00)
        assert apu.squares[0].timed_out
        assert apu.squares[0].out_volume() == 0

    def test_envelope_mode_reports_full_volume(self):
        apu = MiniApu()
        apu.write(0x4015, 0x01)
        apu.write(0x4000, 0x03)
        apu.write(0x4002, 0x80)
        apu.write(0x4003, 0x00)
        assert apu.squares[0].out_volume() == 15

    def test_low_timer_is_muted(self):
        apu = MiniApu()
        apu.write(0x4015, 0x01)
        apu.write(0x4000, 0x3F)
        apu.write(0x4002, 0x07)
        apu.write(0x4003, 0x00)
        assert apu.squares[0].out_volume() == 0


class TestTriangleChannel:
    def test_linear_counter_latch(self):
        apu = MiniApu()
        apu.write(0x4015, 0x04)
        apu.write(0x4008, 0x81)
        apu.write(0x400A, 0xFD)
        apu.write(0x400B, 0x01)
        tri = apu.triangle
        assert tri.control()
        assert tri.linear_reload() == 1
        assert tri.timer_whole() == 0x1FD
        assert tri.out_volume() == 15
        tri.timed_out_linear = True
        assert tri.out_volume() == 0
        assert tri.state().timed_out_linear

    def test_length_write_reloads_linear_counter(self):
        """A new note on $400B clears both the length and linear timeouts"""
        apu = MiniApu()
        apu.write(0x4015, 0x04)
        apu.write(0x4008, 0x81)
        apu.write(0x400A, 0xFD)
        apu.write(0x400B, 0x01)
        tri = apu.triangle
        tri.timed_out_linear = True
        apu.write(0x400B, 0x01)
        assert tri.timed_out_linear is False
        assert tri.out_volume() == 15

    def test_zero_linear_reload_is_silent(self):
        apu = MiniApu()
        apu.write(0x4015, 0x04)
        apu.write(0x4008, 0x00)
        apu.write(0x400A, 0xFD)
        apu.write(0x400B, 0x01)
        assert apu.triangle.out_volume() == 0
        assert apu.triangle.state().out_volume == 0

    def test_other_addresses_ignored(self):
        apu = MiniApu()
        apu.write(0x400C, 0xFF)
        apu.write(0x4010, 0xFF)
        apu.write(0x4017, 0xFF)
        assert apu.squares[0].regs == [0, 0, 0, 0]
        assert apu.triangle.regs == [0, 0, 0, 0]
