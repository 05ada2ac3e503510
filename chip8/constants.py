# CHIP-8 machine layout.
# Cowgod's CHIP-8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes, which includes: the interpreter area, fonts, and the loaded ROM.

MEMORY_SIZE = 4096
REGISTER_COUNT = 16
STACK_LEVELS = 16
KEY_COUNT = 16

WIDTH, HEIGHT = 64, 32

START_ADDRESS = 0x200                       # ROMs are loaded here
MAX_ROM_SIZE = MEMORY_SIZE - START_ADDRESS  # 3584 bytes

FLAG = 0xF  # VF doubles as carry / borrow / collision output

FONT_BASE = 0x050
GLYPH_SIZE = 5

# Standard CHIP-8 fontset (binary pixel patterns, 8 columns wide)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])  # notice 80 bytes

# Default speeds
CPU_HZ = 500
TIMER_HZ = 60.0
