import pytest

from chip8.cli import build_parser, main
from chip8.config import EmulatorConfig, Quirks
from chip8.constants import MAX_ROM_SIZE


def test_defaults_from_args() -> None:
    args = build_parser().parse_args(["10", "0", "game.ch8"])
    config = EmulatorConfig.from_args(args)
    assert config.scale == 10
    assert config.cpu_hz == 500
    assert config.quirks == Quirks()


def test_delay_sets_cpu_rate() -> None:
    args = build_parser().parse_args(["5", "4", "game.ch8"])
    assert EmulatorConfig.from_args(args).cpu_hz == 250

    args = build_parser().parse_args(["5", "4", "game.ch8", "--cpu-hz", "900"])
    assert EmulatorConfig.from_args(args).cpu_hz == 900


def test_quirk_flags() -> None:
    args = build_parser().parse_args(
        ["10", "1", "game.ch8", "--font-at-zero", "--increment-index", "--index-overflow", "--clip-sprites"])
    quirks = EmulatorConfig.from_args(args).quirks
    assert quirks == Quirks(font_base=0, load_store_increments_index=True,
                            index_overflow_flag=True, clip_sprites=True)


def test_bad_font_base() -> None:
    with pytest.raises(ValueError):
        Quirks(font_base=0x100)


def test_missing_rom_exits_nonzero(tmp_path) -> None:
    assert main(["10", "1", str(tmp_path / "nope.ch8")]) == 2


def test_oversized_rom_exits_nonzero(tmp_path) -> None:
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(MAX_ROM_SIZE + 1))
    assert main(["10", "1", str(path)]) == 2


def test_bad_scale_exits_nonzero(tmp_path) -> None:
    path = tmp_path / "ok.ch8"
    path.write_bytes(b"\x12\x00")
    assert main(["0", "1", str(path)]) == 2
