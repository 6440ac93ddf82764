"""Register map, enumerations and small data types for the Elonics E4000 tuner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

E4K_I2C_ADDR = 0xC8
E4K_CHECK_ADDR = 0x02
E4K_CHECK_VAL = 0x40


class E4kError(ValueError):
    """Raised when an E4000 operation is given an argument it cannot accept."""


class Reg(IntEnum):
    """Register addresses of the E4000."""

    MASTER1 = 0x00
    MASTER2 = 0x01
    MASTER3 = 0x02
    MASTER4 = 0x03
    MASTER5 = 0x04
    CLK_INP = 0x05
    REF_CLK = 0x06
    SYNTH1 = 0x07
    SYNTH2 = 0x08
    SYNTH3 = 0x09
    SYNTH4 = 0x0A
    SYNTH5 = 0x0B
    SYNTH6 = 0x0C
    SYNTH7 = 0x0D
    SYNTH8 = 0x0E
    SYNTH9 = 0x0F
    FILT1 = 0x10
    FILT2 = 0x11
    FILT3 = 0x12
    GAIN1 = 0x14
    GAIN2 = 0x15
    GAIN3 = 0x16
    GAIN4 = 0x17
    AGC1 = 0x1A
    AGC2 = 0x1B
    AGC3 = 0x1C
    AGC4 = 0x1D
    AGC5 = 0x1E
    AGC6 = 0x1F
    AGC7 = 0x20
    AGC8 = 0x21
    AGC11 = 0x24
    AGC12 = 0x25
    DC1 = 0x29
    DC2 = 0x2A
    DC3 = 0x2B
    DC4 = 0x2C
    DC5 = 0x2D
    DC6 = 0x2E
    DC7 = 0x2F
    DC8 = 0x30
    QLUT0 = 0x50
    QLUT1 = 0x51
    QLUT2 = 0x52
    QLUT3 = 0x53
    ILUT0 = 0x60
    ILUT1 = 0x61
    ILUT2 = 0x62
    ILUT3 = 0x63
    DCTIME1 = 0x70
    DCTIME2 = 0x71
    DCTIME3 = 0x72
    DCTIME4 = 0x73
    PWM1 = 0x74
    PWM2 = 0x75
    PWM3 = 0x76
    PWM4 = 0x77
    BIAS = 0x78
    CLKOUT_PWDN = 0x7A
    CHFILT_CALIB = 0x7B
    I2C_REG_ADDR = 0x7D


MASTER1_RESET = 1 << 0
MASTER1_NORM_STBY = 1 << 1
MASTER1_POR_DET = 1 << 2

SYNTH1_PLL_LOCK = 1 << 0
SYNTH1_BAND_SHIF = 1

SYNTH7_3PHASE_EN = 1 << 3

SYNTH8_VCOCAL_UPD = 1 << 2

FILT3_DISABLE = 1 << 5

AGC1_LIN_MODE = 1 << 4
AGC1_LNA_UPDATE = 1 << 5
AGC1_LNA_G_LOW = 1 << 6
AGC1_LNA_G_HIGH = 1 << 7
AGC1_MOD_MASK = 0xF

AGC6_LNA_CAL_REQ = 1 << 4

AGC7_MIX_GAIN_AUTO = 1 << 0
AGC7_GAIN_STEP_5DB = 1 << 5

AGC8_SENS_LIN_AUTO = 1 << 0

AGC11_LNA_GAIN_ENH = 1 << 0

DC1_CAL_REQ = 1 << 0

DC5_I_LUT_EN = 1 << 0
DC5_Q_LUT_EN = 1 << 1
DC5_RANGE_DET_EN = 1 << 2
DC5_RANGE_EN = 1 << 3
DC5_TIMEVAR_EN = 1 << 4

CLKOUT_DISABLE = 0x96

CHFCALIB_CMD = 1 << 0


class AgcMode(IntEnum):
    """Values of the AGC mode field in AGC1."""

    SERIAL = 0x0
    IF_PWM_LNA_SERIAL = 0x1
    IF_PWM_LNA_AUTONL = 0x2
    IF_PWM_LNA_SUPERV = 0x3
    IF_SERIAL_LNA_PWM = 0x4
    IF_PWM_LNA_PWM = 0x5
    IF_DIG_LNA_SERIAL = 0x6
    IF_DIG_LNA_AUTON = 0x7
    IF_DIG_LNA_SUPERV = 0x8
    IF_SERIAL_LNA_AUTON = 0x9
    IF_SERIAL_LNA_SUPERV = 0xA


class Band(IntEnum):
    """RF bands of the E4000."""

    VHF2 = 0
    VHF3 = 1
    UHF = 2
    L = 3


class MixerFilterBw(IntEnum):
    """Named settings of the mixer filter bandwidth field."""

    BW_27M = 0
    BW_4M6 = 8
    BW_4M2 = 9
    BW_3M8 = 10
    BW_3M4 = 11
    BW_3M = 12
    BW_2M7 = 13
    BW_2M3 = 14
    BW_1M9 = 15


class IfFilter(IntEnum):
    """The three configurable IF filters."""

    MIX = 0
    CHAN = 1
    RC = 2


@dataclass(frozen=True)
class RegField:
    """A bit field inside an 8-bit register."""

    reg: int
    shift: int
    width: int

    def __post_init__(self) -> None:
        if not 0 <= self.width <= 8:
            raise ValueError(f"field width {self.width} is outside 0..8")
        if self.shift < 0 or self.shift + self.width > 8:
            raise ValueError(
                f"field at shift {self.shift} with width {self.width} "
                "does not fit in a byte"
            )

    def mask(self) -> int:
        """Bit mask of the field within its register."""
        return ((1 << self.width) - 1) << self.shift

    def extract(self, value: int) -> int:
        """Return the field's value from a whole register value."""
        return (value >> self.shift) & ((1 << self.width) - 1)


@dataclass
class PllParams:
    """Synthesizer settings computed for one tuning frequency."""

    fosc: int = 0
    intended_flo: int = 0
    flo: int = 0
    x: int = 0
    z: int = 0
    r: int = 0
    r_idx: int = 0
    threephase: bool = False