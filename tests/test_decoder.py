import pytest

from chip8.decoder import Op, decode, mnemonic


def test_operand_fields() -> None:
    ins = decode(0xD12F)
    assert ins.op is Op.DRW
    assert (ins.x, ins.y, ins.n) == (0x1, 0x2, 0xF)
    assert ins.kk == 0x2F
    assert ins.nnn == 0x12F


@pytest.mark.parametrize("opcode, op", [
    (0x00E0, Op.CLS),
    (0x00EE, Op.RET),
    (0x0123, Op.SYS),
    (0x1ABC, Op.JP),
    (0x2ABC, Op.CALL),
    (0x5120, Op.SE_REG),
    (0x8AB6, Op.SHR),
    (0x8ABE, Op.SHL),
    (0x9120, Op.SNE_REG),
    (0xE19E, Op.SKP),
    (0xE1A1, Op.SKNP),
    (0xF00A, Op.LD_VX_K),
    (0xF565, Op.LD_VX_MEM),
])
def test_known_opcodes(opcode, op) -> None:
    assert decode(opcode).op is op


@pytest.mark.parametrize("opcode", [0x5121, 0x912F, 0x8AB8, 0x8ABF, 0xE1FF, 0xF1FF, 0xF000])
def test_unrecognised_selectors_decode_to_unknown(opcode) -> None:
    assert decode(opcode).op is Op.UNKNOWN


def test_every_group_decodes_without_raising() -> None:
    seen = {decode(word).op for word in range(0x10000)}
    assert seen == set(Op)


def test_mnemonic() -> None:
    assert mnemonic(decode(0xD015)) == "DRW V0, V1, 5"
    assert mnemonic(decode(0x6A2B)) == "LD VA, 2B"
    assert mnemonic(decode(0xF1FF)) == "DW F1FF"
