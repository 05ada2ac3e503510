import pytest

from chip8.constants import FONTSET, FONT_BASE, MAX_ROM_SIZE, START_ADDRESS
from chip8.errors import OutOfBoundsAccess, RomTooLarge
from chip8.machine import Machine

from .conftest import assemble


def test_initial_state() -> None:
    s = Machine().state
    assert s.pc == START_ADDRESS
    assert s.I == 0
    assert s.sp == 0
    assert bytes(s.V) == bytes(16)
    assert s.read_block(FONT_BASE, len(FONTSET)) == FONTSET
    assert (s.delay_timer, s.sound_timer) == (0, 0)


def test_first_fetch_is_rom_start(machine) -> None:
    machine.load_rom(assemble(0x6A42, 0x6B01))
    assert machine.state.fetch() == 0x6A42
    machine.step()
    assert machine.state.V[0xA] == 0x42
    assert machine.state.pc == 0x202


def test_largest_rom_fits(machine) -> None:
    rom = bytes(range(256)) * (MAX_ROM_SIZE // 256)
    machine.load_rom(rom)
    assert machine.state.read_block(START_ADDRESS, len(rom)) == rom


def test_oversized_rom_is_rejected_without_reset(load) -> None:
    machine = load(0x6A42)
    machine.step()
    with pytest.raises(RomTooLarge):
        machine.load_rom(bytes(MAX_ROM_SIZE + 1))
    assert machine.state.V[0xA] == 0x42
    assert machine.state.pc == 0x202


def test_load_rom_resets_everything(load) -> None:
    machine = load(0x2206, 0x0000, 0x0000, 0x6A42, 0xF015)
    machine.state.delay_timer = 9
    machine.press(3)
    machine.run(3)
    machine.load_rom(assemble(0x1200))
    s = machine.state
    assert s.pc == START_ADDRESS
    assert s.sp == 0
    assert s.V[0xA] == 0
    assert s.delay_timer == 0
    assert not any(s.pending_keys)
    assert machine.cycle_count == 0


def test_reset_reloads_current_rom(load) -> None:
    machine = load(0x6A42, 0x1202)
    machine.run(3)
    machine.reset()
    assert machine.state.pc == START_ADDRESS
    assert machine.state.V[0xA] == 0
    assert machine.state.fetch() == 0x6A42


def test_load_rom_file(tmp_path, machine) -> None:
    path = tmp_path / "test.ch8"
    path.write_bytes(assemble(0x00E0, 0x1200))
    machine.load_rom_file(str(path))
    assert machine.state.fetch() == 0x00E0


def test_fetch_past_end_of_memory(load) -> None:
    machine = load(0x1FFF)
    machine.step()
    with pytest.raises(OutOfBoundsAccess) as info:
        machine.step()
    assert info.value.pc == 0xFFF
    assert info.value.opcode is None


def test_jump_offset_past_memory_faults_on_fetch(load) -> None:
    machine = load(0x60FF, 0xBFFF)
    machine.run(2)
    assert machine.state.pc == 0xFFF + 0xFF
    with pytest.raises(OutOfBoundsAccess):
        machine.step()


def test_keys_are_latched_per_cycle(load) -> None:
    machine = load(0x6005, 0xE09E)
    machine.step()
    machine.press(5)
    assert not machine.state.keys[5]
    machine.step()
    assert machine.state.keys[5]
    assert machine.state.pc == 0x206


def test_set_keys_vector(machine) -> None:
    keys = [False] * 16
    keys[0xF] = True
    machine.set_keys(keys)
    assert machine.state.pending_keys[0xF]
    with pytest.raises(ValueError):
        machine.set_keys([True] * 15)


def test_take_frame_clears_dirty_flag(load) -> None:
    machine = load(0xA050, 0xD015, 0x1204)
    dirty, frame = machine.take_frame()
    assert dirty  # a fresh machine needs one paint
    machine.run(2)
    dirty, frame = machine.take_frame()
    assert dirty
    assert frame[0] == 1
    machine.step()
    dirty, _ = machine.take_frame()
    assert not dirty


def test_run_reports_display_change(load) -> None:
    machine = load(0x6001, 0x6102, 0xA050, 0xD015)
    assert not machine.run(3)
    assert machine.run(1)
    assert machine.cycle_count == 4


def test_sound_active(load) -> None:
    machine = load(0x6002, 0xF018)
    machine.run(2)
    assert machine.sound_active
    machine.tick_timers()
    machine.tick_timers()
    machine.tick_timers()
    assert not machine.sound_active
    assert machine.state.sound_timer == 0
