from __future__ import annotations

from dataclasses import dataclass
from typing import List

SQUARE1_BASE = 0x4000
SQUARE2_BASE = 0x4004
TRIANGLE_BASE = 0x4008
STATUS = 0x4015

MAX_VOLUME = 15


@dataclass(frozen=True)
class ChannelHardwareState:
    timer: int
    duty: int
    out_volume: int
    sweep_enabled: bool
    sweep_period: int
    sweep_negate: bool
    sweep_shift: int
    timed_out: bool
    timed_out_linear: bool = False


class SquareChannel:
    """
    Register view of one pulse channel ($4000-$4003 / $4004-$4007).

      reg0  DDLC VVVV  duty, length halt, constant volume, volume/envelope period
      reg1  EPPP NSSS  sweep enable, period, negate, shift
      reg2  TTTT TTTT  timer low
      reg3  LLLL LTTT  length load, timer high
    """

    def __init__(self) -> None:
        self.regs: List[int] = [0, 0, 0, 0]
        self.enabled = False
        # length counters are zero at power-on
        self.timed_out = True

    def write(self, reg: int, data: int) -> None:
        self.regs[reg] = data & 0xFF
        if reg == 3 and self.enabled:
            self.timed_out = False

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if not enabled:
            self.timed_out = True

    def duty(self) -> int:
        return self.regs[0] >> 6

    def length_halt(self) -> bool:
        return bool(self.regs[0] & 0x20)

    def constant_volume(self) -> bool:
        return bool(self.regs[0] & 0x10)

    def volume(self) -> int:
        return self.regs[0] & 0x0F

    def sweep_enabled(self) -> bool:
        return bool(self.regs[1] & 0x80)

    def sweep_period(self) -> int:
        return (self.regs[1] >> 4) & 0x07

    def sweep_negate(self) -> bool:
        return bool(self.regs[1] & 0x08)

    def sweep_shift(self) -> int:
        return self.regs[1] & 0x07

    def timer_whole(self) -> int:
        return ((self.regs[3] & 0x07) << 8) | self.regs[2]

    def out_volume(self) -> int:
        if self.timed_out or self.timer_whole() < 8:
            return 0
        if self.constant_volume():
            return self.volume()
        # envelope decay is not in the log; report the level it restarts at
        return MAX_VOLUME

    def state(self) -> ChannelHardwareState:
        return ChannelHardwareState(
            timer=self.timer_whole(),
            duty=self.duty(),
            out_volume=self.out_volume(),
            sweep_enabled=self.sweep_enabled(),
            sweep_period=self.sweep_period(),
            sweep_negate=self.sweep_negate(),
            sweep_shift=self.sweep_shift(),
            timed_out=self.timed_out,
        )


class TriangleChannel:
    """
    Register view of the triangle channel ($4008-$400B).

      reg0  CRRR RRRR  length halt / linear control, linear counter reload
      reg2  TTTT TTTT  timer low
      reg3  LLLL LTTT  length load, timer high
    """

    def __init__(self) -> None:
        self.regs: List[int] = [0, 0, 0, 0]
        self.enabled = False
        self.timed_out = True
        self.timed_out_linear = False

    def write(self, reg: int, data: int) -> None:
        self.regs[reg] = data & 0xFF
        if reg == 3:
            # a length write also sets the linear reload flag
            self.timed_out_linear = False
            if self.enabled:
                self.timed_out = False

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if not enabled:
            self.timed_out = True

    def control(self) -> bool:
        return bool(self.regs[0] & 0x80)

    def linear_reload(self) -> int:
        return self.regs[0] & 0x7F

    def timer_whole(self) -> int:
        return ((self.regs[3] & 0x07) << 8) | self.regs[2]

    def out_volume(self) -> int:
        if self.timed_out or self.timed_out_linear or self.linear_reload() == 0:
            return 0
        return MAX_VOLUME

    def state(self) -> ChannelHardwareState:
        return ChannelHardwareState(
            timer=self.timer_whole(),
            duty=0,
            out_volume=self.out_volume(),
            sweep_enabled=False,
            sweep_period=0,
            sweep_negate=False,
            sweep_shift=0,
            timed_out=self.timed_out,
            timed_out_linear=self.timed_out_linear,
        )


class MiniApu:
    """Just enough of the 2A03 register file to follow the melodic channels."""

    def __init__(self) -> None:
        self.squares = [SquareChannel(), SquareChannel()]
        self.triangle = TriangleChannel()

    def write(self, address: int, data: int) -> None:
        if SQUARE1_BASE <= address < SQUARE2_BASE:
            self.squares[0].write(address - SQUARE1_BASE, data)
        elif SQUARE2_BASE <= address < TRIANGLE_BASE:
            self.squares[1].write(address - SQUARE2_BASE, data)
        elif TRIANGLE_BASE <= address < TRIANGLE_BASE + 4:
            self.triangle.write(address - TRIANGLE_BASE, data)
        elif address == STATUS:
            self.squares[0].set_enabled(bool(data & 0x01))
            self.squares[1].set_enabled(bool(data & 0x02))
            self.triangle.set_enabled(bool(data & 0x04))
        # noise, DMC and frame counter writes are not tracked

    def channel(self, index: int):
        if index < 2:
            return self.squares[index]
        return self.triangle
