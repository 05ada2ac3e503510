"""Faults raised by the CHIP-8 core.

Every fault derives from :class:`Chip8Error` so the host can catch them all
in one place and decide whether to halt, reset or keep a frozen display.
"""


class Chip8Error(Exception):
    """Base class for all machine faults."""

    def __init__(self, message, pc=None, opcode=None):
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode

    def __str__(self):
        text = super().__str__()
        if self.opcode is not None and self.pc is not None:
            return "%s (opcode %04X at 0x%03X)" % (text, self.opcode, self.pc)
        return text


class UnknownOpcode(Chip8Error):
    pass


class StackOverflow(Chip8Error):
    pass


class StackUnderflow(Chip8Error):
    pass


class OutOfBoundsAccess(Chip8Error):
    pass


class RomTooLarge(Chip8Error):
    pass


class InvalidKeyIndex(Chip8Error):
    pass


class InvalidDigit(Chip8Error):
    """Fx29 asked for a font glyph outside 0-F."""
