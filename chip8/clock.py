"""Instruction and timer scheduling.

Two periodic events run off the same elapsed time: instruction issue at
``cpu_hz`` and timer decrement at ``timer_hz`` (60Hz).  The timers never
depend on how many instructions ran, so changing the CPU speed does not
change how fast DT and ST count down.

Event times are derived from integer counts (k / rate) rather than summed
intervals, so one simulated second is exactly ``timer_hz`` timer ticks.
Both events mutate the machine from the caller's thread, one at a time, in
time order.
"""

import logging

from .constants import CPU_HZ, TIMER_HZ
from .errors import Chip8Error

logger = logging.getLogger(__name__)

# absorbs float error when dt is a sum of 1/60 slices
_EPSILON = 1e-9


class Clock:
    def __init__(self, machine, cpu_hz=CPU_HZ, timer_hz=TIMER_HZ):
        if cpu_hz <= 0 or timer_hz <= 0:
            raise ValueError("clock rates must be positive")
        self.machine = machine
        self.cpu_hz = cpu_hz
        self.timer_hz = timer_hz
        self.reset()

    def reset(self):
        """Restart both schedules and clear any fault."""
        self.time = 0.0
        self.cycles = 0
        self._cycle_origin = 0.0
        self._cycle_index = 0
        self.timer_ticks = 0
        self.fault = None

    @property
    def halted(self):
        return self.fault is not None

    def set_cpu_hz(self, cpu_hz):
        if cpu_hz <= 0:
            raise ValueError("cpu_hz must be positive")
        # the new rate counts from now
        self._cycle_origin = self.time
        self._cycle_index = 0
        self.cpu_hz = cpu_hz

    def _next_cycle(self):
        return self._cycle_origin + (self._cycle_index + 1) / self.cpu_hz

    def _next_timer(self):
        return (self.timer_ticks + 1) / self.timer_hz

    def advance(self, dt):
        """Move simulated time forward by ``dt`` seconds.

        Runs every instruction and timer tick that falls due, interleaved in
        time order.  Returns the fault that halted the CPU, or None.  After a
        fault no further instructions are issued until ``reset``; the timers
        keep counting down.
        """
        if dt < 0:
            raise ValueError("dt must not be negative")
        target = self.time + dt
        while True:
            next_timer = self._next_timer()
            next_cycle = float("inf") if self.halted else self._next_cycle()
            if min(next_timer, next_cycle) > target + _EPSILON:
                break
            if next_timer <= next_cycle:
                self.timer_ticks += 1
                self.machine.tick_timers()
            else:
                self._cycle_index += 1
                self.cycles += 1
                try:
                    self.machine.step()
                except Chip8Error as e:
                    logger.error("Emulation halted: %s", e)
                    self.fault = e
        self.time = target
        return self.fault
