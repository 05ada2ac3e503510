"""One CHIP-8 machine: state plus the fetch / decode / execute cycle."""

import logging
import random

from .config import Quirks
from .decoder import decode, mnemonic
from .errors import Chip8Error
from .executor import Effect, Executor
from .state import State

logger = logging.getLogger(__name__)


class Machine:
    def __init__(self, quirks=None, seed=None):
        self.quirks = quirks or Quirks()
        self.state = State(font_base=self.quirks.font_base)
        self.executor = Executor(self.quirks, random.Random(seed))
        self.rom = b""
        self.cycle_count = 0

    # ---- Load ROM ----
    def load_rom(self, data):
        """Reset everything and load ``data`` at 0x200.

        Raises ``RomTooLarge`` without touching the running machine.
        """
        self.state.load_rom(data)
        self.rom = bytes(data)
        self.cycle_count = 0

    def load_rom_file(self, path):
        logger.info("Loading ROM: %s", path)
        with open(path, "rb") as f:
            data = f.read()
        self.load_rom(data)

    def reset(self):
        """Reload the current ROM from scratch."""
        logger.info("Reset")
        self.load_rom(self.rom)

    # ---- Input ----
    def set_keys(self, keys):
        self.state.set_keys(keys)

    def press(self, key):
        self.state.set_key(key, True)

    def release(self, key):
        self.state.set_key(key, False)

    # ---- Cycle ----
    def step(self):
        """Run exactly one instruction and return its ``Effect``.

        Key state is latched before the fetch so it cannot change while the
        instruction runs.  On a fault pc is left on the faulting instruction.
        """
        s = self.state
        s.latch_keys()
        start = s.pc
        opcode = None
        try:
            opcode = s.fetch()
            s.pc += 2
            ins = decode(opcode)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%03X: %04X  %s", start, opcode, mnemonic(ins))
            effect = self.executor.execute(s, ins)
        except Chip8Error as e:
            s.pc = start
            e.pc, e.opcode = start, opcode
            raise
        self.cycle_count += 1
        return effect

    def run(self, cycles):
        """Run ``cycles`` instructions; True if any of them touched the display."""
        dirty = False
        for _ in range(cycles):
            dirty |= self.step() is Effect.DISPLAY_DIRTY
        return dirty

    # ---- timers ----
    def tick_timers(self):
        self.state.decrement_timers()

    @property
    def sound_active(self):
        return self.state.sound_timer > 0

    # ---- Display ----
    def take_frame(self):
        return self.state.take_frame()
