import pytest

from chip8.machine import Machine


def assemble(*opcodes):
    """Pack 16-bit opcodes into a big-endian ROM image."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


@pytest.fixture
def machine():
    return Machine(seed=1234)


@pytest.fixture
def load(machine):
    def _load(*opcodes):
        machine.load_rom(assemble(*opcodes))
        return machine
    return _load
