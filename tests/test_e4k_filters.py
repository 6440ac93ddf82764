import pytest

from rtltuners.e4k_filters import (
    RF_FILTER_CENTER_L,
    RF_FILTER_CENTER_UHF,
    choose_rf_filter,
    closest_index,
    find_if_bandwidth_index,
    if_filter_bandwidths,
    if_filter_field,
)
from rtltuners.e4k_regs import Band, E4kError, IfFilter, Reg


def test_closest_index_tie_takes_first():
    assert closest_index([10, 20], 15) == 0


def test_closest_index_exact_match():
    values = [5, 9, 40, 100]
    for position, value in enumerate(values):
        assert closest_index(values, value) == position


def test_closest_index_empty_rejected():
    with pytest.raises(ValueError):
        closest_index([], 7)


@pytest.mark.parametrize("band", [Band.VHF2, Band.VHF3])
def test_vhf_bands_use_filter_zero(band):
    assert choose_rf_filter(band, 150_000_000) == 0
    assert choose_rf_filter(band, 300_000_000) == 0


def test_uhf_centers_select_their_own_index():
    for position, center in enumerate(RF_FILTER_CENTER_UHF):
        assert choose_rf_filter(Band.UHF, center) == position


def test_l_band_centers_select_their_own_index():
    for position, center in enumerate(RF_FILTER_CENTER_L):
        assert choose_rf_filter(Band.L, center + 1_000) == position


def test_filter_index_fits_four_bits():
    for freq in range(350_000_000, 1_800_000_000, 7_000_000):
        for band in (Band.UHF, Band.L):
            assert 0 <= choose_rf_filter(band, freq) <= 0xF


def test_frequency_far_outside_table_clamps_to_edges():
    assert choose_rf_filter(Band.UHF, 10_000_000) == 0
    last = len(RF_FILTER_CENTER_L) - 1
    assert choose_rf_filter(Band.L, 3_000_000_000) == last


def test_unknown_band_rejected():
    with pytest.raises(E4kError):
        choose_rf_filter(7, 500_000_000)


def test_bandwidth_tables_fit_their_register_fields():
    for filter_ in IfFilter:
        field = if_filter_field(filter_)
        assert len(if_filter_bandwidths(filter_)) == 1 << field.width


def test_filter_fields_from_source():
    assert if_filter_field(IfFilter.MIX).reg == Reg.FILT2
    assert if_filter_field(IfFilter.CHAN).reg == Reg.FILT3
    assert if_filter_field(IfFilter.RC).reg == Reg.FILT2
    assert if_filter_field(IfFilter.MIX).mask() & if_filter_field(IfFilter.RC).mask() == 0


def test_mixer_default_narrowest_setting():
    bandwidths = if_filter_bandwidths(IfFilter.MIX)
    index = find_if_bandwidth_index(IfFilter.MIX, 1_900_000)
    assert bandwidths[index] == 1_900_000
    assert index == len(bandwidths) - 1


def test_repeated_mixer_bandwidth_takes_first_entry():
    assert find_if_bandwidth_index(IfFilter.MIX, 27_000_000) == 0


@pytest.mark.parametrize(
    "filter_,bandwidth",
    [(IfFilter.RC, 1_000_000), (IfFilter.CHAN, 2_150_000), (IfFilter.CHAN, 5_500_000)],
)
def test_exact_bandwidths_are_found(filter_, bandwidth):
    index = find_if_bandwidth_index(filter_, bandwidth)
    assert if_filter_bandwidths(filter_)[index] == bandwidth


def test_chosen_bandwidth_is_nearest():
    for filter_ in IfFilter:
        bandwidths = if_filter_bandwidths(filter_)
        for wanted in range(500_000, 30_000_000, 333_000):
            chosen = bandwidths[find_if_bandwidth_index(filter_, wanted)]
            assert all(abs(chosen - wanted) <= abs(b - wanted) for b in bandwidths)


@pytest.mark.parametrize("bad", [3, -1, 42])
def test_unknown_if_filter_rejected(bad):
    with pytest.raises(E4kError):
        if_filter_bandwidths(bad)
    with pytest.raises(E4kError):
        find_if_bandwidth_index(bad, 2_000_000)
    with pytest.raises(E4kError):
        if_filter_field(bad)