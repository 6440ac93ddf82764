"""Driver for the Fitipower FC0012 tuner, talking to the chip over an I2C bus."""

from __future__ import annotations

from typing import Protocol

FC0012_I2C_ADDR = 0xC6
FC0012_CHECK_ADDR = 0x00
FC0012_CHECK_VAL = 0xA1

DEFAULT_BANDWIDTH = 6_000_000
VCO_HIGH_LIMIT = 3_060_000_000
GPIO_BAND_BIT = 6
GPIO_BAND_LIMIT = 300_000_000

# Gains in tenths of dB the LNA can be set to.
FC0012_GAINS: tuple[int, ...] = (-99, -40, 71, 179, 192)

_GAIN_BITS: dict[int, int] = {-99: 0x02, -40: 0x00, 71: 0x08, 179: 0x17, 192: 0x10}
_DEFAULT_GAIN_BITS = 0x10

_GAIN_REG = 0x13
_VCO_REG = 0x0E

# Upper frequency bound, VCO multiplier, register 5 and register 6 values.
_DIVIDERS: tuple[tuple[int, int, int, int], ...] = (
    (37_084_000, 96, 0x82, 0x00),
    (55_625_000, 64, 0x82, 0x02),
    (74_167_000, 48, 0x42, 0x00),
    (111_250_000, 32, 0x42, 0x02),
    (148_334_000, 24, 0x22, 0x00),
    (222_500_000, 16, 0x22, 0x02),
    (296_667_000, 12, 0x12, 0x00),
    (445_000_000, 8, 0x12, 0x02),
    (593_334_000, 6, 0x0A, 0x00),
)
_TOP_DIVIDER = (4, 0x0A, 0x02)

_BANDWIDTH_BITS: dict[int, int] = {6_000_000: 0x80, 7_000_000: 0x40, 8_000_000: 0x00}

# Registers 0x01..0x15 written at start-up.
_INIT_REGISTERS: tuple[int, ...] = (
    0x05,  # 0x01
    0x10,  # 0x02
    0x00,  # 0x03
    0x00,  # 0x04
    0x0F,  # 0x05
    0x00,  # 0x06: divider 2, VCO slow
    0x00 | 0x20,  # 0x07: 28.8 MHz crystal
    0xFF,  # 0x08: AGC clock divide by 256, AGC gain 1/256, loop bw 1/8
    0x6E,  # 0x09: loop-through disabled
    0xB8,  # 0x0a: LO test buffer disabled
    0x82,  # 0x0b: output clock same as clock frequency
    0xFC | 0x02,  # 0x0c: dual master
    0x02,  # 0x0d: AGC not forcing, LNA forcing
    0x00,  # 0x0e
    0x00,  # 0x0f
    0x00,  # 0x10
    0x00,  # 0x11
    0x1F,  # 0x12: maximum gain
    0x08,  # 0x13: middle gain
    0x00,  # 0x14
    0x04,  # 0x15: LNA COMPS enabled
)


class Fc0012Error(ValueError):
    """Raised when the FC0012 cannot be set up as asked."""


class _Device(Protocol):
    def i2c_write(self, addr: int, data: bytes) -> None: ...

    def i2c_read(self, addr: int, length: int) -> bytes: ...

    def tuner_xtal_frequency(self) -> int: ...

    def set_gpio_bit(self, bit: int, enable_out: int, on: int) -> None: ...


def compute_pll_registers(
    freq: int, xtal_freq: int, bandwidth: int
) -> tuple[bytes, bool]:
    """Values of registers 1..6 tuning to freq, and whether the fast VCO is chosen."""
    half_xtal = xtal_freq // 2
    if half_xtal < 1000:
        raise Fc0012Error(f"crystal frequency {xtal_freq} Hz is too low")

    for limit, multi, reg5, reg6 in _DIVIDERS:
        if freq < limit:
            break
    else:
        multi, reg5, reg6 = _TOP_DIVIDER

    f_vco = (freq * multi) & 0xFFFFFFFF
    vco_select = f_vco >= VCO_HIGH_LIMIT
    if vco_select:
        reg6 |= 0x08

    xdiv = (f_vco // half_xtal) & 0xFFFF
    if f_vco - xdiv * half_xtal >= half_xtal // 2:
        xdiv = (xdiv + 1) & 0xFFFF

    pm = (xdiv // 8) & 0xFF
    am = (xdiv - 8 * pm) & 0xFF
    if am < 2:
        am = (am + 8) & 0xFF
        pm = (pm - 1) & 0xFF

    if pm > 31:
        reg1 = (am + 8 * (pm - 31)) & 0xFF
        reg2 = 31
    else:
        reg1 = am
        reg2 = pm

    if reg1 > 15 or reg2 < 0x0B:
        raise Fc0012Error(f"no valid PLL combination found for {freq} Hz")

    reg6 |= 0x20  # fix clock out

    xin = ((f_vco % half_xtal) // 1000) & 0xFFFF
    xin = ((xin << 15) // (half_xtal // 1000)) & 0xFFFF
    if xin >= 16384:
        xin = (xin + 32768) & 0xFFFF

    reg3 = xin >> 8
    reg4 = xin & 0xFF

    reg6 &= 0x3F
    reg6 |= _BANDWIDTH_BITS.get(bandwidth, 0x00)

    reg5 |= 0x07  # for the Realtek demodulator

    return bytes((reg1, reg2, reg3, reg4, reg5, reg6)), vco_select


def gain_register_bits(gain: int) -> int:
    """Low bits of register 0x13 for an LNA gain; unknown gains select 19.2 dB."""
    return _GAIN_BITS.get(gain, _DEFAULT_GAIN_BITS)


class Fc0012Tuner:
    """An FC0012 tuner reached through a device offering I2C and GPIO access."""

    def __init__(self, device: _Device) -> None:
        self._device = device
        self._gain = 0

    def _write(self, reg: int, value: int) -> None:
        self._device.i2c_write(FC0012_I2C_ADDR, bytes((reg & 0xFF, value & 0xFF)))

    def _read(self, reg: int) -> int:
        self._device.i2c_write(FC0012_I2C_ADDR, bytes((reg & 0xFF,)))
        data = self._device.i2c_read(FC0012_I2C_ADDR, 1)
        if not data:
            raise OSError(f"short I2C read of FC0012 register {reg:#04x}")
        return data[0]

    def _calibrate_vco(self) -> None:
        self._write(_VCO_REG, 0x80)
        self._write(_VCO_REG, 0x00)

    def init(self) -> None:
        """Write the start-up register settings."""
        for reg, value in enumerate(_INIT_REGISTERS, start=1):
            self._write(reg, value)

    def set_freq(self, freq: int) -> int:
        """Tune to freq Hz and return the local oscillator frequency."""
        self._device.set_gpio_bit(GPIO_BAND_BIT, 1, 1 if freq > GPIO_BAND_LIMIT else 0)
        self.set_params(freq, DEFAULT_BANDWIDTH)
        return freq

    def set_params(self, freq: int, bandwidth: int) -> None:
        """Program the PLL for freq Hz and the given bandwidth, then calibrate the VCO."""
        registers, vco_select = compute_pll_registers(
            freq, self._device.tuner_xtal_frequency(), bandwidth
        )
        for reg, value in enumerate(registers, start=1):
            self._write(reg, value)

        self._calibrate_vco()
        self._write(_VCO_REG, 0x00)  # re-calibration if needed
        voltage = self._read(_VCO_REG) & 0x3F

        reg6 = registers[5]
        if vco_select and voltage > 0x3C:
            reg6 &= ~0x08 & 0xFF
        elif not vco_select and voltage < 0x02:
            reg6 |= 0x08
        else:
            return
        self._write(0x06, reg6)
        self._calibrate_vco()

    def gain(self) -> int:
        """The gain last set, in tenths of dB."""
        return self._gain

    def set_gain(self, gain: int) -> None:
        """Set the LNA gain in tenths of dB."""
        value = self._read(_GAIN_REG) & 0xE0
        self._write(_GAIN_REG, value | gain_register_bits(gain))
        self._gain = gain

    def tuner_gains(self) -> tuple[int, ...]:
        """Gains in tenths of dB the tuner offers."""
        return FC0012_GAINS

    def xtal_frequency(self) -> int:
        """The tuner keeps no crystal frequency of its own; always 0."""
        return 0