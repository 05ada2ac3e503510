"""CHIP-8 virtual machine with a pyglet front end."""

from .clock import Clock
from .config import EmulatorConfig, Quirks
from .decoder import Instruction, Op, decode
from .errors import (Chip8Error, InvalidDigit, InvalidKeyIndex, OutOfBoundsAccess, RomTooLarge,
                     StackOverflow, StackUnderflow, UnknownOpcode)
from .executor import Effect, Executor
from .machine import Machine
from .state import State

__version__ = "0.1.0"
