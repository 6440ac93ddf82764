"""Gain tables of the E4000: LNA, mixer and IF stage settings and gain modes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .e4k_regs import AGC11_LNA_GAIN_ENH, E4kError, Reg, RegField


class GainMode(IntEnum):
    """How the tuner's overall gain is controlled."""

    AGC = 0
    MANUAL = 1
    LINEARITY = 2
    SENSITIVITY = 3


MAX_GAIN_MODE = GainMode.SENSITIVITY


@dataclass(frozen=True)
class GainTableEntry:
    """Stage settings (tenths of dB) that together give one total gain."""

    gain: int
    lna_gain: int
    mixer_gain: int
    if_gains: tuple[int, int, int, int, int, int]


# Gains in tenths of dB offered in manual mode.
E4K_GAINS: tuple[int, ...] = (
    -10, 15, 40, 65, 90, 115, 140, 165, 190, 215, 240, 290, 340, 420,
)

# Gains offered by the linearity and sensitivity modes; these include the
# default 24 dB of IF gain.
E4K_STD_GAINS: tuple[int, ...] = (
    -10, 40, 90, 140, 190, 240, 290, 340, 390, 440, 490,
)

_LINEARITY_TABLE: tuple[GainTableEntry, ...] = tuple(
    GainTableEntry(g, lna, mix, ifs)
    for g, lna, mix, ifs in (
        (-10, -50, 40, (-30, 0, 0, 0, 150, 120)),
        (40, -50, 40, (-30, 0, 0, 20, 150, 150)),
        (90, -50, 40, (-30, 60, 0, 20, 150, 150)),
        (140, -50, 120, (-30, 30, 0, 10, 150, 150)),
        (190, 0, 120, (-30, 30, 0, 10, 150, 150)),
        (240, 0, 120, (-30, 60, 30, 0, 150, 150)),
        (290, 50, 120, (-30, 60, 30, 0, 150, 150)),
        (340, 100, 120, (-30, 60, 30, 0, 150, 150)),
        (390, 150, 120, (-30, 60, 30, 0, 150, 150)),
        (440, 200, 120, (-30, 60, 30, 0, 150, 150)),
        (490, 250, 120, (-30, 60, 30, 0, 150, 150)),
    )
)

_SENSITIVITY_TABLE: tuple[GainTableEntry, ...] = tuple(
    GainTableEntry(g, lna, mix, ifs)
    for g, lna, mix, ifs in (
        (-10, 100, 40, (-30, 0, 0, 0, 90, 30)),
        (40, 150, 40, (-30, 0, 0, 0, 90, 30)),
        (90, 200, 40, (-30, 0, 0, 0, 90, 30)),
        (140, 250, 40, (-30, 0, 0, 0, 90, 30)),
        (190, 250, 40, (-30, 0, 0, 20, 90, 60)),
        (240, 250, 120, (-30, 0, 0, 10, 120, 90)),
        (290, 250, 120, (-30, 30, 0, 0, 120, 120)),
        (340, 250, 120, (60, 30, 0, 20, 90, 90)),
        (390, 250, 120, (60, 30, 0, 10, 120, 120)),
        (440, 250, 120, (60, 30, 0, 0, 150, 150)),
        (490, 250, 120, (60, 60, 0, 20, 150, 150)),
    )
)

_GAIN_TABLES = {
    GainMode.LINEARITY: _LINEARITY_TABLE,
    GainMode.SENSITIVITY: _SENSITIVITY_TABLE,
}

# Gain choices per stage as reported to users: (description, gains).
_STAGE_CHOICES: tuple[tuple[str, tuple[int, ...]], ...] = (
    ("LNA", (-50, -25, 0, 25, 50, 75, 100, 125, 150, 175, 200, 250, 300)),
    ("Mixer", (40, 120)),
    ("IF1", (-30, 60)),
    ("IF2", (0, 30, 60, 90)),
    ("IF3", (0, 30, 60, 90)),
    ("IF4", (0, 10, 20, 20)),
    ("IF5", (30, 60, 90, 120, 150)),
    ("IF6", (30, 60, 90, 120, 150)),
)

STAGE_COUNT = len(_STAGE_CHOICES)

# Register encodings of the IF stages 1..6, indexed by register value.
IF_STAGE_GAINS: dict[int, tuple[int, ...]] = {
    1: (-30, 60),
    2: (0, 30, 60, 90),
    3: (0, 30, 60, 90),
    4: (0, 10, 20, 20),
    5: (30, 60, 90, 120, 150, 150, 150, 150),
    6: (30, 60, 90, 120, 150, 150, 150, 150),
}

_IF_STAGE_FIELDS: dict[int, RegField] = {
    1: RegField(Reg.GAIN3, 0, 1),
    2: RegField(Reg.GAIN3, 1, 2),
    3: RegField(Reg.GAIN3, 3, 2),
    4: RegField(Reg.GAIN3, 5, 2),
    5: RegField(Reg.GAIN4, 0, 3),
    6: RegField(Reg.GAIN4, 3, 3),
}

# LNA gain in tenths of dB -> GAIN1 register code.
_LNA_GAIN_CODES: dict[int, int] = {
    -50: 0, -25: 1, 0: 4, 25: 5, 50: 6, 75: 7, 100: 8,
    125: 9, 150: 10, 175: 11, 200: 12, 250: 13, 300: 15,
}

_ENHANCED_GAINS: tuple[int, ...] = (10, 30, 50, 70)

# Mixer gain in tenths of dB -> GAIN2 bit.
MIXER_GAIN_BITS: dict[int, int] = {40: 0, 120: 1}

# IF gains applied when no gain table is in use, by stage.
DEFAULT_IF_GAINS: dict[int, int] = {1: 60, 2: 0, 3: 0, 4: 0, 5: 90, 6: 90}


def find_stage_gain(stage: int, value: int) -> int:
    """Register value selecting a gain for IF stage 1..6."""
    gains = IF_STAGE_GAINS.get(stage)
    if gains is None:
        raise E4kError(f"no IF gain stage {stage}")
    try:
        return gains.index(value)
    except ValueError:
        raise E4kError(f"IF stage {stage} has no gain {value}") from None


def if_stage_field(stage: int) -> RegField:
    """The register field holding the gain setting of IF stage 1..6."""
    try:
        return _IF_STAGE_FIELDS[stage]
    except KeyError:
        raise E4kError(f"no IF gain stage {stage}") from None


def lna_gain_code(gain: int) -> int:
    """GAIN1 register code for an LNA gain in tenths of dB."""
    try:
        return _LNA_GAIN_CODES[gain]
    except KeyError:
        raise E4kError(f"unsupported LNA gain {gain}") from None


def enhanced_gain_code(gain: int) -> int:
    """AGC11 value enabling LNA gain enhancement; gain 0 switches it off."""
    if gain in _ENHANCED_GAINS:
        return AGC11_LNA_GAIN_ENH | (_ENHANCED_GAINS.index(gain) << 1)
    if gain == 0:
        return 0
    raise E4kError(f"unsupported enhanced gain {gain}")


def gain_table(mode: int) -> tuple[GainTableEntry, ...]:
    """The combined gain table used by the linearity or sensitivity mode."""
    try:
        return _GAIN_TABLES[GainMode(mode)]
    except (ValueError, KeyError):
        raise E4kError(f"gain mode {mode!r} has no gain table") from None


def gain_table_entry(mode: int, gain: int) -> GainTableEntry:
    """The stage settings giving a total gain in a table-driven mode."""
    for entry in gain_table(mode):
        if entry.gain == gain:
            return entry
    raise E4kError(f"gain {gain} is not in the table for mode {mode!r}")


def tuner_gain_list(mode: int) -> tuple[int, ...]:
    """Total gains, in tenths of dB, offered in a gain mode."""
    if mode <= GainMode.MANUAL:
        return E4K_GAINS
    return E4K_STD_GAINS


def stage_gain_choices(stage: int) -> tuple[str, tuple[int, ...]]:
    """Description and selectable gains of one of the eight gain stages."""
    if not 0 <= stage < STAGE_COUNT:
        raise E4kError(f"no gain stage {stage}")
    return _STAGE_CHOICES[stage]