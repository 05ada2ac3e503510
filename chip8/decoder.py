"""Turn 16-bit instruction words into ``Instruction`` tuples.

Decoding never fails: anything outside the instruction set becomes
``Op.UNKNOWN`` and the executor raises the fault.

Operand fields (Cowgod's naming):
    nnn = lowest 12 bits (address)
    n   = lowest 4 bits
    x   = lower 4 bits of the high byte (register)
    y   = upper 4 bits of the low byte (register)
    kk  = lowest 8 bits (byte)
"""

from collections import namedtuple
from enum import Enum


class Op(Enum):
    SYS = "0nnn"
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_BYTE = "3xkk"
    SNE_BYTE = "4xkk"
    SE_REG = "5xy0"
    LD_BYTE = "6xkk"
    ADD_BYTE = "7xkk"
    LD_REG = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_REG = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I = "Fx1E"
    LD_F = "Fx29"
    LD_B = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"
    UNKNOWN = "????"


Instruction = namedtuple("Instruction", "op opcode x y n kk nnn")


# Secondary selectors: low nibble for groups 8, low byte for E and F
_GROUP_8 = {
    0x0: Op.LD_REG, 0x1: Op.OR, 0x2: Op.AND, 0x3: Op.XOR, 0x4: Op.ADD_REG,
    0x5: Op.SUB, 0x6: Op.SHR, 0x7: Op.SUBN, 0xE: Op.SHL,
}
_GROUP_E = {0x9E: Op.SKP, 0xA1: Op.SKNP}
_GROUP_F = {
    0x07: Op.LD_VX_DT, 0x0A: Op.LD_VX_K, 0x15: Op.LD_DT_VX, 0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I, 0x29: Op.LD_F, 0x33: Op.LD_B, 0x55: Op.LD_MEM_VX, 0x65: Op.LD_VX_MEM,
}
# Groups whose whole meaning comes from the high nibble
_SIMPLE = {
    0x1: Op.JP, 0x2: Op.CALL, 0x3: Op.SE_BYTE, 0x4: Op.SNE_BYTE, 0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE, 0xA: Op.LD_I, 0xB: Op.JP_V0, 0xC: Op.RND, 0xD: Op.DRW,
}


def _select(opcode):
    prefix = opcode >> 12
    n = opcode & 0xF
    kk = opcode & 0xFF

    if prefix in _SIMPLE:
        return _SIMPLE[prefix]
    if prefix == 0x0:
        if opcode == 0x00E0:
            return Op.CLS
        if opcode == 0x00EE:
            return Op.RET
        return Op.SYS
    if prefix == 0x5:
        return Op.SE_REG if n == 0 else Op.UNKNOWN
    if prefix == 0x9:
        return Op.SNE_REG if n == 0 else Op.UNKNOWN
    if prefix == 0x8:
        return _GROUP_8.get(n, Op.UNKNOWN)
    if prefix == 0xE:
        return _GROUP_E.get(kk, Op.UNKNOWN)
    return _GROUP_F.get(kk, Op.UNKNOWN)


def decode(opcode):
    opcode &= 0xFFFF
    return Instruction(
        op=_select(opcode),
        opcode=opcode,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


_MNEMONICS = {
    Op.SYS: "SYS {nnn:03X}", Op.CLS: "CLS", Op.RET: "RET",
    Op.JP: "JP {nnn:03X}", Op.CALL: "CALL {nnn:03X}",
    Op.SE_BYTE: "SE V{x:X}, {kk:02X}", Op.SNE_BYTE: "SNE V{x:X}, {kk:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}", Op.LD_BYTE: "LD V{x:X}, {kk:02X}",
    Op.ADD_BYTE: "ADD V{x:X}, {kk:02X}", Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}", Op.AND: "AND V{x:X}, V{y:X}", Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}", Op.SUB: "SUB V{x:X}, V{y:X}", Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}", Op.SHL: "SHL V{x:X}", Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, {nnn:03X}", Op.JP_V0: "JP V0, {nnn:03X}", Op.RND: "RND V{x:X}, {kk:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n:X}", Op.SKP: "SKP V{x:X}", Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT", Op.LD_VX_K: "LD V{x:X}, K", Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}", Op.ADD_I: "ADD I, V{x:X}", Op.LD_F: "LD F, V{x:X}",
    Op.LD_B: "LD B, V{x:X}", Op.LD_MEM_VX: "LD [I], V{x:X}", Op.LD_VX_MEM: "LD V{x:X}, [I]",
    Op.UNKNOWN: "DW {opcode:04X}",
}


def mnemonic(instruction):
    """Assembly-style text for debug logs, e.g. ``DRW V0, V1, 5``."""
    return _MNEMONICS[instruction.op].format(**instruction._asdict())
