"""Emulator configuration and CHIP-8 quirk toggles."""

from dataclasses import dataclass, field
from typing import Optional

from .constants import CPU_HZ, FONT_BASE, TIMER_HZ


@dataclass(frozen=True)
class Quirks:
    """Behaviour that differs between historical interpreters.

    - font_base                  : where the 80-byte font table lives (0x050 or 0x000).
    - load_store_increments_index: Fx55 / Fx65 leave I pointing past the last register.
    - index_overflow_flag        : Fx1E sets VF when I + Vx runs past 0xFFF.
    - clip_sprites               : pixels past the right/bottom edge are dropped
                                   instead of wrapping to the opposite edge.
    """
    font_base: int = FONT_BASE
    load_store_increments_index: bool = False
    index_overflow_flag: bool = False
    clip_sprites: bool = False

    def __post_init__(self):
        if self.font_base not in (0x000, 0x050):
            raise ValueError("font_base must be 0x000 or 0x050, got 0x%03X" % self.font_base)


@dataclass
class EmulatorConfig:
    """Host-level settings for one emulator run."""
    scale: int = 10
    cpu_hz: int = CPU_HZ
    timer_hz: float = TIMER_HZ
    quirks: Quirks = field(default_factory=Quirks)
    beep_frequency: int = 440
    seed: Optional[int] = None

    def __post_init__(self):
        if self.scale < 1:
            raise ValueError("scale must be at least 1")
        if self.cpu_hz <= 0:
            raise ValueError("cpu_hz must be positive")

    @staticmethod
    def cpu_hz_from_delay(delay_ms):
        """Turn an inter-cycle delay in milliseconds into an instruction rate."""
        if delay_ms <= 0:
            return CPU_HZ
        return max(1, round(1000.0 / delay_ms))

    @classmethod
    def from_args(cls, ns) -> 'EmulatorConfig':
        quirks = Quirks(
            font_base=0x000 if ns.font_at_zero else FONT_BASE,
            load_store_increments_index=ns.increment_index,
            index_overflow_flag=ns.index_overflow,
            clip_sprites=ns.clip_sprites,
        )
        cpu_hz = ns.cpu_hz if ns.cpu_hz else cls.cpu_hz_from_delay(ns.delay)
        return cls(scale=ns.scale, cpu_hz=cpu_hz, quirks=quirks, seed=ns.seed)
