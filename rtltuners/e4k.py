"""Driver for the Elonics E4000 tuner, talking to the chip over an I2C bus."""

from __future__ import annotations

from typing import Protocol

from .e4k_filters import (
    choose_rf_filter,
    find_if_bandwidth_index,
    if_filter_bandwidths,
    if_filter_field,
)
from .e4k_gain import (
    DEFAULT_IF_GAINS,
    MAX_GAIN_MODE,
    MIXER_GAIN_BITS,
    STAGE_COUNT,
    GainMode,
    enhanced_gain_code,
    find_stage_gain,
    gain_table_entry,
    if_stage_field,
    lna_gain_code,
    stage_gain_choices,
    tuner_gain_list,
)
from .e4k_pll import band_for_frequency, compute_pll_params
from .e4k_regs import (
    AGC1_MOD_MASK,
    AGC7_MIX_GAIN_AUTO,
    CLKOUT_DISABLE,
    DC5_RANGE_DET_EN,
    E4K_I2C_ADDR,
    FILT3_DISABLE,
    MASTER1_NORM_STBY,
    MASTER1_POR_DET,
    MASTER1_RESET,
    SYNTH1_PLL_LOCK,
    AgcMode,
    Band,
    E4kError,
    IfFilter,
    PllParams,
    Reg,
    RegField,
)

# Gains of the three stages a legacy total gain reading leaves out.
_UNCOUNTED_GAIN = 60 + 90 + 90

_MAGIC_REGISTERS: tuple[tuple[int, int], ...] = (
    (0x7E, 0x01),
    (0x7F, 0xFE),
    (0x82, 0x00),
    (0x86, 0x50),  # polarity A
    (0x87, 0x20),  # configure mixer
    (0x88, 0x01),  # configure mixer
    (0x9F, 0x7F),  # configure LNA
    (0xA0, 0x07),  # configure LNA
)


class _Device(Protocol):
    def i2c_write(self, addr: int, data: bytes) -> None: ...

    def i2c_read(self, addr: int, length: int) -> bytes: ...

    def tuner_xtal_frequency(self) -> int: ...


class E4kTuner:
    """An E4000 tuner reached through a device offering I2C access."""

    def __init__(self, device: _Device) -> None:
        self._device = device
        self._addr = E4K_I2C_ADDR
        self.band = Band.VHF2
        self.pll = PllParams()
        self.gain_mode = GainMode.AGC
        self._stage_gains = [0] * STAGE_COUNT

    # Register access

    def _write(self, reg: int, value: int) -> None:
        self._device.i2c_write(self._addr, bytes((reg & 0xFF, value & 0xFF)))

    def _read(self, reg: int) -> int:
        self._device.i2c_write(self._addr, bytes((reg & 0xFF,)))
        data = self._device.i2c_read(self._addr, 1)
        if not data:
            raise OSError(f"short I2C read of E4000 register {reg:#04x}")
        return data[0]

    def _set_mask(self, reg: int, mask: int, value: int) -> None:
        current = self._read(reg)
        if current & mask == value:
            return
        self._write(reg, (current & ~mask & 0xFF) | (value & mask))

    def _field_write(self, field: RegField, value: int) -> None:
        self._set_mask(field.reg, field.mask(), value << field.shift)

    def _field_read(self, field: RegField) -> int:
        return field.extract(self._read(field.reg))

    # Life cycle

    def init(self) -> None:
        """Reset the chip and bring it to its default operating state."""
        self.pll.fosc = self._device.tuner_xtal_frequency()

        try:
            self._read(0)  # dummy access, the chip does not acknowledge it
        except OSError:
            pass

        self._write(Reg.MASTER1, MASTER1_RESET | MASTER1_NORM_STBY | MASTER1_POR_DET)
        self._write(Reg.CLK_INP, 0x00)
        self._write(Reg.REF_CLK, 0x00)
        self._write(Reg.CLKOUT_PWDN, CLKOUT_DISABLE)

        for reg, value in _MAGIC_REGISTERS:
            self._write(reg, value)

        self._write(Reg.AGC4, 0x10)  # high threshold
        self._write(Reg.AGC5, 0x04)  # low threshold
        self._write(Reg.AGC6, 0x1A)  # LNA calibration and loop rate
        self._set_mask(Reg.AGC1, AGC1_MOD_MASK, AgcMode.SERIAL)
        self._set_mask(Reg.AGC7, AGC7_MIX_GAIN_AUTO, 0)

        self.set_gain_mode(0)
        self._set_default_if_gains()

        self.set_if_filter_bandwidth(IfFilter.MIX, 1_900_000)
        self.set_if_filter_bandwidth(IfFilter.RC, 1_000_000)
        self.set_if_filter_bandwidth(IfFilter.CHAN, 2_150_000)
        self.enable_channel_filter(True)

        self._set_mask(Reg.DC5, 0x03, 0)
        self._set_mask(Reg.DCTIME1, 0x03, 0)
        self._set_mask(Reg.DCTIME2, 0x03, 0)

    def exit(self) -> None:
        """Put the tuner into standby."""
        self.standby(True)

    def standby(self, enable: bool) -> None:
        """Enter or leave standby mode."""
        self._set_mask(Reg.MASTER1, MASTER1_NORM_STBY, 0 if enable else MASTER1_NORM_STBY)

    # Frequency

    def set_freq(self, freq: int) -> int:
        """Tune to freq Hz and return the local oscillator frequency reached."""
        params = compute_pll_params(self.pll.fosc, freq)
        self._tune(params)
        if not self._read(Reg.SYNTH1) & SYNTH1_PLL_LOCK:
            raise E4kError(f"PLL not locked for {freq} Hz")
        return self.pll.flo

    def _tune(self, params: PllParams) -> None:
        self._write(Reg.SYNTH7, params.r_idx)
        self._write(Reg.SYNTH3, params.z)
        self._write(Reg.SYNTH4, params.x & 0xFF)
        self._write(Reg.SYNTH5, (params.x >> 8) & 0xFF)
        self.pll = params
        self._set_band(band_for_frequency(params.intended_flo))
        self._set_mask(Reg.FILT1, 0x0F, choose_rf_filter(self.band, params.intended_flo))

    def _set_band(self, band: Band) -> None:
        self._write(Reg.BIAS, 0 if band is Band.L else 3)
        # Clearing first avoids a gap between 325 and 350 MHz.
        self._set_mask(Reg.SYNTH1, 0x06, 0)
        self._set_mask(Reg.SYNTH1, 0x06, band << 1)
        self.band = band

    # Filters

    def set_bandwidth(self, bandwidth: int) -> None:
        """Set all three IF filters as close as possible to bandwidth Hz."""
        for filter_ in (IfFilter.MIX, IfFilter.RC, IfFilter.CHAN):
            self.set_if_filter_bandwidth(filter_, bandwidth)

    def set_if_filter_bandwidth(self, filter_: int, bandwidth: int) -> int:
        """Select the nearest bandwidth of one IF filter and return it in Hz."""
        index = find_if_bandwidth_index(filter_, bandwidth)
        self._field_write(if_filter_field(filter_), index)
        return if_filter_bandwidths(filter_)[index]

    def if_filter_bandwidth(self, filter_: int) -> int:
        """The bandwidth in Hz an IF filter is currently set to."""
        index = self._field_read(if_filter_field(filter_))
        return if_filter_bandwidths(filter_)[index]

    def enable_channel_filter(self, on: bool) -> None:
        """Enable or disable the IF channel filter."""
        self._set_mask(Reg.FILT3, FILT3_DISABLE, 0 if on else FILT3_DISABLE)

    # Gain

    def gain(self) -> int:
        """Total gain in tenths of dB, counted the legacy way."""
        return sum(self._stage_gains) - _UNCOUNTED_GAIN

    def set_gain(self, gain: int) -> None:
        """Set the total gain in tenths of dB according to the gain mode."""
        mixer_gain = 120 if gain > 340 else 40
        if self.gain_mode <= GainMode.MANUAL:
            lna_gain = min(300, gain - mixer_gain)
            self.set_lna_gain(lna_gain)
            self.set_mixer_gain(mixer_gain)
            self._set_default_if_gains()
            return
        entry = gain_table_entry(self.gain_mode, gain)
        self.set_lna_gain(entry.lna_gain)
        self.set_mixer_gain(entry.mixer_gain)
        for stage, stage_gain in enumerate(entry.if_gains, start=1):
            self._set_if_stage_gain(stage, stage_gain)

    def set_if_gain(self, stage: int, gain: int) -> None:
        """Set IF stage stage + 1; gain is scaled down by ten before use."""
        self._set_if_stage_gain(stage + 1, int(gain / 10))

    def _set_if_stage_gain(self, stage: int, gain: int) -> None:
        index = find_stage_gain(stage, gain)
        self._field_write(if_stage_field(stage), index)
        self._stage_gains[stage + 1] = gain

    def _set_default_if_gains(self) -> None:
        for stage, gain in DEFAULT_IF_GAINS.items():
            self._set_if_stage_gain(stage, gain)

    def set_gain_mode(self, mode: int) -> int:
        """Select AGC (0) or a manual mode; return the table mode or 0."""
        if not mode:
            self.gain_mode = GainMode.AGC
            self._set_mask(Reg.AGC1, AGC1_MOD_MASK, AgcMode.IF_SERIAL_LNA_AUTON)
            self._set_mask(Reg.AGC7, AGC7_MIX_GAIN_AUTO, 1)
            self._set_mask(Reg.AGC11, 0x7, 0)
            self._set_default_if_gains()
            return 0

        self._set_mask(Reg.AGC1, AGC1_MOD_MASK, AgcMode.SERIAL)
        self._set_mask(Reg.AGC7, AGC7_MIX_GAIN_AUTO, 0)
        self._set_mask(Reg.AGC11, 0x7, 5)
        if mode < 0 or mode > MAX_GAIN_MODE:
            self.gain_mode = GainMode.MANUAL
        else:
            self.gain_mode = GainMode(mode)
        if self.gain_mode > GainMode.MANUAL:
            return int(self.gain_mode)
        return 0

    def tuner_gains(self) -> tuple[int, ...]:
        """Total gains in tenths of dB offered in the current gain mode."""
        return tuner_gain_list(self.gain_mode)

    def stage_count(self) -> int:
        """Number of individually settable gain stages."""
        return STAGE_COUNT

    def stage_gains(self, stage: int) -> tuple[str, tuple[int, ...]]:
        """Description and selectable gains of a gain stage."""
        return stage_gain_choices(stage)

    def stage_gain(self, stage: int) -> int:
        """Current gain of a stage in tenths of dB; 0 for an unknown stage."""
        if 0 <= stage < STAGE_COUNT:
            return self._stage_gains[stage]
        return 0

    def set_stage_gain(self, stage: int, gain: int) -> None:
        """Set one stage: 0 is the LNA, 1 the mixer, 2 to 7 IF stages 1 to 6."""
        if stage == 0:
            self.set_lna_gain(gain)
        elif stage == 1:
            self.set_mixer_gain(gain)
        elif 2 <= stage < STAGE_COUNT:
            self._set_if_stage_gain(stage - 1, gain)
        else:
            raise E4kError(f"no gain stage {stage}")

    def set_lna_gain(self, gain: int) -> int:
        """Set the LNA gain in tenths of dB."""
        code = lna_gain_code(gain)
        self._set_mask(Reg.GAIN1, 0x0F, code)
        self._stage_gains[0] = gain
        return gain

    def set_mixer_gain(self, gain: int) -> None:
        """Set the mixer gain: 40 or 120 tenths of dB."""
        try:
            bit = MIXER_GAIN_BITS[gain]
        except KeyError:
            raise E4kError(f"unsupported mixer gain {gain}") from None
        self._set_mask(Reg.GAIN2, 1, bit)
        self._stage_gains[1] = gain

    def set_enhanced_gain(self, gain: int) -> int:
        """Enable LNA gain enhancement, or switch it off with gain 0."""
        try:
            code = enhanced_gain_code(gain)
        except E4kError:
            self._set_mask(Reg.AGC11, 0x7, 0)
            raise
        self._set_mask(Reg.AGC11, 0x7, code)
        return gain

    # DC offset

    def set_common_mode(self, value: int) -> None:
        """Set the common mode voltage selector, 0 to 7."""
        if not 0 <= value <= 7:
            raise E4kError(f"common mode value {value} is outside 0..7")
        self._set_mask(Reg.DC7, 7, value)

    def manual_dc_offset(self, iofs: int, irange: int, qofs: int, qrange: int) -> None:
        """Program the I and Q DC offsets and ranges by hand."""
        for name, value, limit in (
            ("I offset", iofs, 0x3F),
            ("I range", irange, 0x03),
            ("Q offset", qofs, 0x3F),
            ("Q range", qrange, 0x03),
        ):
            if not 0 <= value <= limit:
                raise E4kError(f"{name} {value} is outside 0..{limit}")
        self._set_mask(Reg.DC2, 0x3F, iofs)
        self._set_mask(Reg.DC3, 0x3F, qofs)
        self._set_mask(Reg.DC4, 0x33, (qrange << 4) | irange)

    def dc_offset_calibrate(self) -> None:
        """Run a DC offset calibration now."""
        self._set_mask(Reg.DC5, DC5_RANGE_DET_EN, DC5_RANGE_DET_EN)
        self._write(Reg.DC1, 0x01)

    # Reference clock

    def xtal_frequency(self) -> int:
        """Reference oscillator frequency in Hz."""
        return self.pll.fosc

    def set_xtal_frequency(self, freq: int) -> None:
        """Set the reference oscillator frequency in Hz."""
        self.pll.fosc = freq