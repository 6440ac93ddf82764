import dataclasses

import pytest

from rtltuners.e4k_regs import PllParams, Reg, RegField


def test_mask_of_upper_nibble_field():
    assert RegField(Reg.FILT2, 4, 4).mask() == 0xF0


def test_mask_of_full_byte_field():
    assert RegField(Reg.GAIN1, 0, 8).mask() == 0xFF


def test_mask_of_zero_width_field_is_empty():
    assert RegField(Reg.GAIN1, 3, 0).mask() == 0


@pytest.mark.parametrize(
    "field",
    [
        RegField(Reg.FILT2, 4, 4),
        RegField(Reg.FILT3, 0, 5),
        RegField(Reg.FILT2, 0, 4),
        RegField(Reg.GAIN3, 1, 2),
        RegField(Reg.GAIN4, 3, 3),
    ],
)
def test_extract_round_trips_shifted_values(field):
    for value in range(1 << field.width):
        assert field.extract(value << field.shift) == value


@pytest.mark.parametrize(
    "field",
    [RegField(Reg.GAIN3, 0, 1), RegField(Reg.GAIN3, 5, 2), RegField(Reg.FILT3, 0, 5)],
)
def test_extract_ignores_bits_outside_field(field):
    outside = 0xFF & ~field.mask()
    assert field.extract(outside) == 0
    assert field.extract(0xFF) == field.mask() >> field.shift


def test_mask_stays_within_a_byte():
    for width in range(9):
        for shift in range(9 - width):
            mask = RegField(Reg.AGC1, shift, width).mask()
            assert 0 <= mask <= 0xFF
            assert bin(mask).count("1") == width


@pytest.mark.parametrize("shift,width", [(0, 9), (0, -1), (5, 4), (-1, 2)])
def test_invalid_field_geometry_rejected(shift, width):
    with pytest.raises(ValueError):
        RegField(Reg.AGC1, shift, width)


def test_pll_params_replace_keeps_other_fields():
    params = PllParams(fosc=28_800_000, intended_flo=100_000_000, r=32)
    changed = dataclasses.replace(params, flo=99_999_000)
    assert changed.flo == 99_999_000
    assert changed.fosc == params.fosc
    assert changed.r == params.r
    assert params.flo == 0