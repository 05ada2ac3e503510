# CHIP8 machine state:
# Input - key states latched once per cycle.
# Output - 64x32 display (array of pixels in the on or off state (0 || 1)).
# Memory - 4096 bytes: interpreter area, fonts, and the loaded ROM.
# Registers - 16 8-bit registers, a 16-bit index, a program counter and
# a 16 level call stack. Two timers count down at 60Hz.

import logging

from .constants import (FONTSET, GLYPH_SIZE, HEIGHT, KEY_COUNT, MAX_ROM_SIZE, MEMORY_SIZE,
                        REGISTER_COUNT, STACK_LEVELS, START_ADDRESS, WIDTH)
from .errors import InvalidKeyIndex, OutOfBoundsAccess, RomTooLarge, StackOverflow, StackUnderflow

logger = logging.getLogger(__name__)


class State:
    """All architectural state of one CHIP-8 machine.

    Only the executor and the host-facing calls (``load_rom``, ``set_keys``)
    mutate it.  ``reset`` replaces everything at once; there is no partial reset.
    """

    def __init__(self, font_base=0x050):
        self.font_base = font_base
        self.reset()

    def reset(self):
        self.memory = bytearray(MEMORY_SIZE)
        self.V = bytearray(REGISTER_COUNT)
        self.I = 0
        self.pc = START_ADDRESS
        self.stack = []
        self.delay_timer = 0
        self.sound_timer = 0
        self.keys = [False] * KEY_COUNT          # snapshot seen by the running instruction
        self.pending_keys = [False] * KEY_COUNT  # written by the host between cycles
        self.display_buffer = bytearray(WIDTH * HEIGHT)
        self.should_draw = True

        # Load fontset into memory
        self.memory[self.font_base:self.font_base + len(FONTSET)] = FONTSET

    # ---- ROM ----
    def load_rom(self, data):
        """Reset the machine and copy ``data`` to 0x200.

        Oversized images are rejected before anything is touched.
        """
        data = bytes(data)
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLarge("ROM is %d bytes, at most %d fit above 0x%03X"
                              % (len(data), MAX_ROM_SIZE, START_ADDRESS))
        self.reset()
        self.memory[START_ADDRESS:START_ADDRESS + len(data)] = data
        logger.info("Loaded %d byte ROM at 0x%03X", len(data), START_ADDRESS)

    # ---- Memory ----
    def _check(self, address, length=1):
        if address < 0 or address + length > MEMORY_SIZE:
            raise OutOfBoundsAccess("Memory access at 0x%X (%d bytes) is outside 0x000-0xFFF"
                                    % (address, length))

    def read(self, address):
        self._check(address)
        return self.memory[address]

    def read_block(self, address, length):
        self._check(address, length)
        return bytes(self.memory[address:address + length])

    def write(self, address, values):
        values = bytes(values)
        self._check(address, len(values))
        font_end = self.font_base + len(FONTSET)
        if address < font_end and address + len(values) > self.font_base:
            raise OutOfBoundsAccess("Write at 0x%03X would overwrite the font table" % address)
        self.memory[address:address + len(values)] = values

    def fetch(self):
        """Big-endian instruction word at pc."""
        self._check(self.pc, 2)
        return (self.memory[self.pc] << 8) | self.memory[self.pc + 1]

    def font_address(self, digit):
        return self.font_base + digit * GLYPH_SIZE

    # ---- Stack ----
    def push(self, address):
        if len(self.stack) >= STACK_LEVELS:
            raise StackOverflow("Stack overflow on CALL")
        self.stack.append(address)

    def pop(self):
        if not self.stack:
            raise StackUnderflow("Stack underflow on RET")
        return self.stack.pop()

    @property
    def sp(self):
        return len(self.stack)

    # ---- Input ----
    def set_keys(self, keys):
        keys = [bool(k) for k in keys]
        if len(keys) != KEY_COUNT:
            raise ValueError("expected %d key states, got %d" % (KEY_COUNT, len(keys)))
        self.pending_keys = keys

    def set_key(self, key, pressed):
        if not 0 <= key < KEY_COUNT:
            raise InvalidKeyIndex("Key index %d is outside 0-F" % key)
        self.pending_keys[key] = bool(pressed)

    def latch_keys(self):
        self.keys = list(self.pending_keys)

    # ---- Timers ----
    def decrement_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    # ---- Display ----
    def pixel(self, x, y):
        return self.display_buffer[y * WIDTH + x]

    def take_frame(self):
        """Return ``(dirty, frame)`` and clear the dirty flag.

        ``frame`` is a copy, so the host may keep it while the CPU runs on.
        """
        dirty = self.should_draw
        self.should_draw = False
        return dirty, bytes(self.display_buffer)
