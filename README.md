# rtltuners

Register-level drivers for the tuner chips found in RTL2832-based SDR
dongles, together with helpers for the dongle EEPROM layout and a small
catalog of known dongles.

## Modules

- `rtltuners.e4k`: `E4kTuner`, a driver for the Elonics E4000 tuner. It
  resets and initialises the chip (`init`), tunes (`set_freq` returns the
  local oscillator frequency reached and raises `E4kError` if the PLL does
  not lock), selects band and RF filter, sets IF filter bandwidths
  (`set_bandwidth`, `set_if_filter_bandwidth`, `if_filter_bandwidth`,
  `enable_channel_filter`), controls gain (`set_gain_mode`, `set_gain`,
  `gain`, `set_lna_gain`, `set_mixer_gain`, `set_if_gain`,
  `set_stage_gain`, `stage_gain`, `stage_gains`, `stage_count`,
  `tuner_gains`, `set_enhanced_gain`), and handles DC offset
  (`manual_dc_offset`, `dc_offset_calibrate`, `set_common_mode`), standby
  and the reference clock frequency.
- `rtltuners.e4k_pll`: `compute_pll_params(fosc, intended_flo)`,
  `compute_fvco`, `compute_flo`, `band_for_frequency` and validity checks
  for the reference, VCO and multiplier.
- `rtltuners.e4k_gain`: `GainMode`, the linearity and sensitivity gain
  tables (`gain_table`, `gain_table_entry`), stage gain choices and
  register encodings.
- `rtltuners.e4k_filters`: RF filter selection (`choose_rf_filter`) and
  the IF filter bandwidth tables (`if_filter_bandwidths`,
  `find_if_bandwidth_index`, `if_filter_field`).
- `rtltuners.e4k_regs`: register addresses (`Reg`), `Band`, `IfFilter`,
  `AgcMode`, `RegField`, `PllParams` and `E4kError`.
- `rtltuners.fc0012`: `Fc0012Tuner` for the Fitipower FC0012 (`init`,
  `set_freq`, `set_params`, `set_gain`, `gain`, `tuner_gains`), plus the
  pure functions `compute_pll_registers(freq, xtal_freq, bandwidth)` and
  `gain_register_bits(gain)`. Errors are raised as `Fc0012Error`.
- `rtltuners.eeprom`: `parse_eeprom`, `parse_strings`,
  `read_string_descriptor` and `build_eeprom_image` for the RTL2832
  EEPROM layout (header bytes, VID/PID, three USB string descriptors).
  Bad data raises `EepromError`.
- `rtltuners.dongles`: `Dongle` and `DongleCatalog`. A catalog keeps every
  dongle ever seen, merges newly seen ones (`merge`), finds entries by
  identity, USB path, names, id string or serial number, lists present
  dongles and their display names, builds an EEPROM image for an entry,
  and is saved to and loaded from a JSON file (`save`, `load`).

## The device object

The tuner classes do no USB I/O themselves. They take a `device` object
that provides:

- `i2c_write(addr, data)` and `i2c_read(addr, length)` for transfers to the
  tuner;
- `tuner_xtal_frequency()` returning the tuner's reference frequency in Hz;
- for `Fc0012Tuner` also `set_gpio_bit(bit, enable_out, on)`.

Any USB backend, or a fake device in tests, can supply these.

## Example

```python
from rtltuners.e4k_pll import compute_pll_params
from rtltuners.eeprom import build_eeprom_image, parse_eeprom

params = compute_pll_params(28_800_000, 100_000_000)
print(params.flo, params.z, params.x, params.r)

image = build_eeprom_image(0x0BDA, 0x2838, "Realtek", "RTL2838UHIDIR", "00000001")
info = parse_eeprom(image)
print(info.manufacturer, info.product, info.serial)
```

## What it does not do

The package has no USB backend: it does not enumerate, open or stream
samples from dongles, and it offers no command-line tool. The dongle
catalog is filled only by what the caller merges into it; it does not scan
the USB bus itself.

## Tests

```
pip install -e .[test]
pytest
```