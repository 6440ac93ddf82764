"""Synthesizer (PLL) parameter computation for the Elonics E4000 tuner."""

from __future__ import annotations

import logging

from .e4k_regs import Band, E4kError, PllParams

_log = logging.getLogger(__name__)

PLL_Y = 65536

# Relaxed VCO limits: min FLO is 2400/48 = 50 MHz, max FLO is 4400/2 = 2200 MHz.
FVCO_MIN_KHZ = 2_400_000
FVCO_MAX_KHZ = 4_400_000
FVCO_MIN = FVCO_MIN_KHZ * 1000
FVCO_MAX = FVCO_MAX_KHZ * 1000

FOSC_MIN = 16_000_000
FOSC_MAX = 30_000_000

THREE_PHASE_LIMIT = 350_000_000

# (upper frequency bound, SYNTH7 register value, divider R)
PLL_VARS: tuple[tuple[int, int, int], ...] = (
    (72_400_000, (1 << 3) | 7, 48),
    (81_200_000, (1 << 3) | 6, 40),
    (108_300_000, (1 << 3) | 5, 32),
    (162_500_000, (1 << 3) | 4, 24),
    (216_600_000, (1 << 3) | 3, 16),
    (325_000_000, (1 << 3) | 2, 12),
    (350_000_000, (1 << 3) | 1, 8),
    (432_000_000, (0 << 3) | 3, 8),
    (667_000_000, (0 << 3) | 2, 6),
    (1_200_000_000, (0 << 3) | 1, 4),
)

_BAND_LIMITS: tuple[tuple[int, Band], ...] = (
    (140_000_000, Band.VHF2),
    (350_000_000, Band.VHF3),
    (1_135_000_000, Band.UHF),
)


def is_fosc_valid(fosc: int) -> bool:
    """True if the reference oscillator frequency is within 16..30 MHz."""
    if fosc < FOSC_MIN or fosc > FOSC_MAX:
        _log.warning("[E4K] Fosc %d invalid", fosc)
        return False
    return True


def is_fvco_valid(fvco: int) -> bool:
    """True if a VCO frequency lies within the supported VCO range."""
    khz = fvco // 1000
    if khz < FVCO_MIN_KHZ or khz > FVCO_MAX_KHZ:
        _log.warning("[E4K] Fvco %d invalid", fvco)
        return False
    return True


def is_z_valid(z: int) -> bool:
    """True if the integral multiplier fits its 8-bit register."""
    if z > 255:
        _log.warning("[E4K] Z %d invalid", z)
        return False
    return True


def use_three_phase_mixing(flo: int) -> bool:
    """Whether three-phase mixing is used at a local oscillator frequency."""
    return flo < THREE_PHASE_LIMIT


def compute_fvco(fosc: int, z: int, x: int) -> int:
    """VCO frequency in Hz for multiplier Z + X / 65536."""
    return fosc * z + (fosc * x) // PLL_Y


def compute_flo(fosc: int, z: int, x: int, r: int) -> int:
    """Local oscillator frequency in Hz: the VCO frequency divided by R."""
    fvco = compute_fvco(fosc, z, x)
    if fvco == 0:
        raise E4kError("VCO frequency computes to zero")
    return fvco // r


def compute_pll_params(fosc: int, intended_flo: int) -> PllParams:
    """Compute synthesizer settings tuning as close as possible to intended_flo."""
    if not is_fosc_valid(fosc):
        raise E4kError(f"reference frequency {fosc} Hz is outside 16..30 MHz")

    r = 2
    r_idx = 0
    threephase = False
    for limit, synth7, mult in PLL_VARS:
        if intended_flo < limit:
            threephase = bool(synth7 & 0x08)
            r_idx = synth7
            r = mult
            break

    intended_fvco = min(max(intended_flo * r, FVCO_MIN), FVCO_MAX)

    z = intended_fvco // fosc
    remainder = intended_fvco - fosc * z
    x = (remainder * PLL_Y) // fosc
    z &= 0xFF  # the register holds eight bits

    flo = compute_flo(fosc, z, x, r)
    return PllParams(
        fosc=fosc,
        intended_flo=intended_flo,
        flo=flo,
        x=x,
        z=z,
        r=r,
        r_idx=r_idx,
        threephase=threephase,
    )


def band_for_frequency(flo: int) -> Band:
    """The band the tuner switches to for a local oscillator frequency."""
    for limit, band in _BAND_LIMITS:
        if flo < limit:
            return band
    return Band.L