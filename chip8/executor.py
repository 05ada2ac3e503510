"""Opcode semantics.

``Executor.execute`` applies one decoded instruction to a ``State``.  By the
time it runs, the program counter already points at the following
instruction; jumps overwrite it and skips add another 2.

Handlers check everything that can fault before they mutate anything, so a
faulting instruction leaves the registers, memory and display untouched.

VF (register 15) is both a general register and the flag output of 8xy4,
8xy5, 8xy6, 8xy7, 8xyE, Dxyn and (with ``index_overflow_flag``) Fx1E.  These
compute their result from the operands first and write VF last.
"""

import logging
import random
from enum import Enum

from .config import Quirks
from .constants import FLAG, HEIGHT, KEY_COUNT, WIDTH
from .decoder import Op
from .errors import InvalidDigit, InvalidKeyIndex, UnknownOpcode

logger = logging.getLogger(__name__)


class Effect(Enum):
    NONE = 0
    DISPLAY_DIRTY = 1


class Executor:
    def __init__(self, quirks=None, rng=None):
        self.quirks = quirks or Quirks()
        self.rng = rng or random.Random()
        self.setup_funcmap()

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            Op.SYS: self._0nnn,        # 0nnn - SYS call, ignored
            Op.CLS: self._00E0,        # 00E0 - Clear the screen
            Op.RET: self._00EE,        # 00EE - Return from a subroutine
            Op.JP: self._1nnn,         # 1nnn - Jump to address nnn
            Op.CALL: self._2nnn,       # 2nnn - Call subroutine at nnn
            Op.SE_BYTE: self._3xkk,    # 3xkk - Skip if Vx == kk
            Op.SNE_BYTE: self._4xkk,   # 4xkk - Skip if Vx != kk
            Op.SE_REG: self._5xy0,     # 5xy0 - Skip if Vx == Vy
            Op.LD_BYTE: self._6xkk,    # 6xkk - Vx = kk
            Op.ADD_BYTE: self._7xkk,   # 7xkk - Vx += kk, no carry
            Op.LD_REG: self._8xy0,     # 8xy0 - Vx = Vy
            Op.OR: self._8xy1,         # 8xy1 - Vx |= Vy
            Op.AND: self._8xy2,        # 8xy2 - Vx &= Vy
            Op.XOR: self._8xy3,        # 8xy3 - Vx ^= Vy
            Op.ADD_REG: self._8xy4,    # 8xy4 - Vx += Vy, VF = carry
            Op.SUB: self._8xy5,        # 8xy5 - Vx -= Vy, VF = NOT borrow
            Op.SHR: self._8xy6,        # 8xy6 - Vx >>= 1, VF = bit shifted out
            Op.SUBN: self._8xy7,       # 8xy7 - Vx = Vy - Vx, VF = NOT borrow
            Op.SHL: self._8xyE,        # 8xyE - Vx <<= 1, VF = bit shifted out
            Op.SNE_REG: self._9xy0,    # 9xy0 - Skip if Vx != Vy
            Op.LD_I: self._Annn,       # Annn - I = nnn
            Op.JP_V0: self._Bnnn,      # Bnnn - Jump to nnn + V0
            Op.RND: self._Cxkk,        # Cxkk - Vx = random byte & kk
            Op.DRW: self._Dxyn,        # Dxyn - Draw sprite, VF = collision
            Op.SKP: self._Ex9E,        # Ex9E - Skip if key Vx is pressed
            Op.SKNP: self._ExA1,       # ExA1 - Skip if key Vx is not pressed
            Op.LD_VX_DT: self._Fx07,   # Fx07 - Vx = delay timer
            Op.LD_VX_K: self._Fx0A,    # Fx0A - Wait for a key press, Vx = key
            Op.LD_DT_VX: self._Fx15,   # Fx15 - delay timer = Vx
            Op.LD_ST_VX: self._Fx18,   # Fx18 - sound timer = Vx
            Op.ADD_I: self._Fx1E,      # Fx1E - I += Vx
            Op.LD_F: self._Fx29,       # Fx29 - I = font glyph for digit Vx
            Op.LD_B: self._Fx33,       # Fx33 - BCD of Vx at I, I+1, I+2
            Op.LD_MEM_VX: self._Fx55,  # Fx55 - store V0..Vx at I
            Op.LD_VX_MEM: self._Fx65,  # Fx65 - load V0..Vx from I
            Op.UNKNOWN: self._unknown,
        }
        missing = set(Op) - set(self.funcmap)
        if missing:
            raise RuntimeError("No handler for %s" % ", ".join(sorted(op.name for op in missing)))

    def execute(self, state, ins):
        """Apply ``ins`` to ``state`` and return the resulting ``Effect``."""
        return self.funcmap[ins.op](state, ins) or Effect.NONE

    # ---- Opcode Handlers ----

    def _0nnn(self, s, ins):
        # 0nnn is ignored on modern interpreters
        logger.debug("SYS call ignored (%04X)", ins.opcode)

    def _00E0(self, s, ins):
        s.display_buffer[:] = bytes(len(s.display_buffer))
        s.should_draw = True
        return Effect.DISPLAY_DIRTY

    def _00EE(self, s, ins):
        s.pc = s.pop()

    def _1nnn(self, s, ins):
        s.pc = ins.nnn

    def _2nnn(self, s, ins):
        s.push(s.pc)
        s.pc = ins.nnn

    def _3xkk(self, s, ins):
        if s.V[ins.x] == ins.kk:
            s.pc += 2

    def _4xkk(self, s, ins):
        if s.V[ins.x] != ins.kk:
            s.pc += 2

    def _5xy0(self, s, ins):
        if s.V[ins.x] == s.V[ins.y]:
            s.pc += 2

    def _6xkk(self, s, ins):
        s.V[ins.x] = ins.kk

    def _7xkk(self, s, ins):
        s.V[ins.x] = (s.V[ins.x] + ins.kk) & 0xFF

    # 8xy0..8xyE - register ALU
    def _8xy0(self, s, ins):
        s.V[ins.x] = s.V[ins.y]

    def _8xy1(self, s, ins):
        s.V[ins.x] |= s.V[ins.y]

    def _8xy2(self, s, ins):
        s.V[ins.x] &= s.V[ins.y]

    def _8xy3(self, s, ins):
        s.V[ins.x] ^= s.V[ins.y]

    def _8xy4(self, s, ins):
        total = s.V[ins.x] + s.V[ins.y]
        s.V[ins.x] = total & 0xFF
        s.V[FLAG] = 1 if total > 0xFF else 0

    def _8xy5(self, s, ins):
        vx, vy = s.V[ins.x], s.V[ins.y]
        s.V[ins.x] = (vx - vy) & 0xFF
        s.V[FLAG] = 1 if vx >= vy else 0

    def _8xy6(self, s, ins):
        vx = s.V[ins.x]
        s.V[ins.x] = vx >> 1
        s.V[FLAG] = vx & 1

    def _8xy7(self, s, ins):
        vx, vy = s.V[ins.x], s.V[ins.y]
        s.V[ins.x] = (vy - vx) & 0xFF
        s.V[FLAG] = 1 if vy >= vx else 0

    def _8xyE(self, s, ins):
        vx = s.V[ins.x]
        s.V[ins.x] = (vx << 1) & 0xFF
        s.V[FLAG] = (vx >> 7) & 1

    def _9xy0(self, s, ins):
        if s.V[ins.x] != s.V[ins.y]:
            s.pc += 2

    def _Annn(self, s, ins):
        s.I = ins.nnn

    def _Bnnn(self, s, ins):
        # out of range targets fault on the next fetch
        s.pc = ins.nnn + s.V[0]

    def _Cxkk(self, s, ins):
        s.V[ins.x] = self.rng.getrandbits(8) & ins.kk

    def _Dxyn(self, s, ins):
        x = s.V[ins.x] % WIDTH
        y = s.V[ins.y] % HEIGHT
        rows = s.read_block(s.I, ins.n)
        buf = s.display_buffer
        clip = self.quirks.clip_sprites
        collision = 0
        for row, sprite in enumerate(rows):
            py = y + row
            if py >= HEIGHT:
                if clip:
                    break
                py %= HEIGHT
            base = py * WIDTH
            for bit in range(8):
                if not sprite & (0x80 >> bit):
                    continue
                px = x + bit
                if px >= WIDTH:
                    if clip:
                        break
                    px %= WIDTH
                idx = base + px
                collision |= buf[idx]
                buf[idx] ^= 1
        s.V[FLAG] = collision
        s.should_draw = True
        return Effect.DISPLAY_DIRTY

    # Ex9E / ExA1 - SKP / SKNP
    def _key(self, s, ins):
        key = s.V[ins.x]
        if key >= KEY_COUNT:
            raise InvalidKeyIndex("V%X holds %d, not a key index" % (ins.x, key))
        return s.keys[key]

    def _Ex9E(self, s, ins):
        if self._key(s, ins):
            s.pc += 2

    def _ExA1(self, s, ins):
        if not self._key(s, ins):
            s.pc += 2

    # Fx07..Fx65 - timers, memory, I, and key input
    def _Fx07(self, s, ins):
        s.V[ins.x] = s.delay_timer

    def _Fx0A(self, s, ins):
        for key, pressed in enumerate(s.keys):
            if pressed:
                s.V[ins.x] = key
                return
        # stall: the same instruction is fetched again next cycle
        s.pc -= 2

    def _Fx15(self, s, ins):
        s.delay_timer = s.V[ins.x]

    def _Fx18(self, s, ins):
        s.sound_timer = s.V[ins.x]

    def _Fx1E(self, s, ins):
        new_i = s.I + s.V[ins.x]
        s.I = new_i & 0xFFFF
        if self.quirks.index_overflow_flag:
            s.V[FLAG] = 1 if new_i > 0xFFF else 0

    def _Fx29(self, s, ins):
        digit = s.V[ins.x]
        if digit > 0xF:
            raise InvalidDigit("V%X holds %d, no font glyph for it" % (ins.x, digit))
        s.I = s.font_address(digit)

    def _Fx33(self, s, ins):
        val = s.V[ins.x]
        s.write(s.I, (val // 100, (val // 10) % 10, val % 10))

    def _Fx55(self, s, ins):
        s.write(s.I, s.V[:ins.x + 1])
        if self.quirks.load_store_increments_index:
            s.I = (s.I + ins.x + 1) & 0xFFFF

    def _Fx65(self, s, ins):
        s.V[:ins.x + 1] = s.read_block(s.I, ins.x + 1)
        if self.quirks.load_store_increments_index:
            s.I = (s.I + ins.x + 1) & 0xFFFF

    def _unknown(self, s, ins):
        raise UnknownOpcode("Unknown opcode %04X" % ins.opcode)

