"""RF and IF filter tables of the E4000 and selection of the nearest setting."""

from __future__ import annotations

from collections.abc import Sequence

from .e4k_regs import Band, E4kError, IfFilter, Reg, RegField


def _mhz(value: int) -> int:
    return value * 1_000_000


def _khz(value: int) -> int:
    return value * 1_000


RF_FILTER_CENTER_UHF: tuple[int, ...] = tuple(
    _mhz(f)
    for f in (360, 380, 405, 425, 450, 475, 505, 540,
              575, 615, 670, 720, 760, 840, 890, 970)
)

RF_FILTER_CENTER_L: tuple[int, ...] = tuple(
    _mhz(f)
    for f in (1300, 1320, 1360, 1410, 1445, 1460, 1490, 1530,
              1560, 1590, 1640, 1660, 1680, 1700, 1720, 1750)
)

MIX_FILTER_BW: tuple[int, ...] = tuple(
    _khz(f)
    for f in (27000, 27000, 27000, 27000, 27000, 27000, 27000, 27000,
              4600, 4200, 3800, 3400, 3300, 2700, 2300, 1900)
)

IFRC_FILTER_BW: tuple[int, ...] = tuple(
    _khz(f)
    for f in (21400, 21000, 17600, 14700, 12400, 10600, 9000, 7700,
              6400, 5300, 4400, 3400, 2600, 1800, 1200, 1000)
)

IFCH_FILTER_BW: tuple[int, ...] = tuple(
    _khz(f)
    for f in (5500, 5300, 5000, 4800, 4600, 4400, 4300, 4100,
              3900, 3800, 3700, 3600, 3400, 3300, 3200, 3100,
              3000, 2950, 2900, 2800, 2750, 2700, 2600, 2550,
              2500, 2450, 2400, 2300, 2280, 2240, 2200, 2150)
)

_IF_FILTER_BW = {
    IfFilter.MIX: MIX_FILTER_BW,
    IfFilter.CHAN: IFCH_FILTER_BW,
    IfFilter.RC: IFRC_FILTER_BW,
}

_IF_FILTER_FIELDS = {
    IfFilter.MIX: RegField(Reg.FILT2, 4, 4),
    IfFilter.CHAN: RegField(Reg.FILT3, 0, 5),
    IfFilter.RC: RegField(Reg.FILT2, 0, 4),
}


def _as_filter(filter_: int) -> IfFilter:
    try:
        return IfFilter(filter_)
    except ValueError:
        raise E4kError(f"unknown IF filter {filter_!r}") from None


def closest_index(values: Sequence[int], target: int) -> int:
    """Index of the value nearest to target; the first one wins a tie."""
    if not values:
        raise ValueError("cannot pick the closest value of an empty sequence")
    best, _ = min(enumerate(values), key=lambda item: abs(item[1] - target))
    return best


def choose_rf_filter(band: int, freq: int) -> int:
    """Return the 4-bit RF filter index to use for a frequency in a band."""
    try:
        band = Band(band)
    except ValueError:
        raise E4kError(f"unknown band {band!r}") from None
    if band in (Band.VHF2, Band.VHF3):
        return 0
    if band is Band.UHF:
        return closest_index(RF_FILTER_CENTER_UHF, freq)
    return closest_index(RF_FILTER_CENTER_L, freq)


def if_filter_bandwidths(filter_: int) -> tuple[int, ...]:
    """Bandwidths in Hz selectable for an IF filter, by register value."""
    return _IF_FILTER_BW[_as_filter(filter_)]


def if_filter_field(filter_: int) -> RegField:
    """The register field that holds an IF filter's bandwidth setting."""
    return _IF_FILTER_FIELDS[_as_filter(filter_)]


def find_if_bandwidth_index(filter_: int, bandwidth: int) -> int:
    """Register value giving the bandwidth closest to the one asked for."""
    return closest_index(if_filter_bandwidths(filter_), bandwidth)