import pytest

from rtltuners.e4k_gain import (
    DEFAULT_IF_GAINS,
    E4K_GAINS,
    E4K_STD_GAINS,
    IF_STAGE_GAINS,
    MIXER_GAIN_BITS,
    STAGE_COUNT,
    GainMode,
    enhanced_gain_code,
    find_stage_gain,
    gain_table,
    gain_table_entry,
    if_stage_field,
    lna_gain_code,
    stage_gain_choices,
    tuner_gain_list,
)
from rtltuners.e4k_regs import E4kError, Reg


@pytest.mark.parametrize("stage", range(1, 7))
def test_stage_choices_encode_within_field(stage):
    _, gains = stage_gain_choices(stage + 1)
    field = if_stage_field(stage)
    for g in gains:
        idx = find_stage_gain(stage, g)
        assert IF_STAGE_GAINS[stage][idx] == g
        assert field.extract(idx << field.shift) == idx


def test_find_stage_gain_first_match():
    assert find_stage_gain(1, -30) == 0
    assert find_stage_gain(4, 20) == IF_STAGE_GAINS[4].index(20)


@pytest.mark.parametrize("stage, value", [(0, 0), (7, 30), (2, 45), (-1, 0)])
def test_find_stage_gain_errors(stage, value):
    with pytest.raises(E4kError):
        find_stage_gain(stage, value)


def test_if_stage_field_registers():
    assert if_stage_field(1).reg == Reg.GAIN3
    assert if_stage_field(6).reg == Reg.GAIN4
    with pytest.raises(E4kError):
        if_stage_field(0)


def test_lna_gain_codes():
    assert lna_gain_code(-50) == 0
    assert lna_gain_code(300) == 15
    with pytest.raises(E4kError):
        lna_gain_code(275)
    _, choices = stage_gain_choices(0)
    codes = [lna_gain_code(g) for g in choices]
    assert len(set(codes)) == len(codes)
    assert all(0 <= c <= 0xF for c in codes)


def test_enhanced_gain_codes():
    assert enhanced_gain_code(0) == 0
    codes = [enhanced_gain_code(g) for g in (10, 30, 50, 70)]
    assert len(set(codes)) == 4
    assert all(c & 1 and c <= 7 for c in codes)
    with pytest.raises(E4kError):
        enhanced_gain_code(20)


@pytest.mark.parametrize("mode", [GainMode.LINEARITY, GainMode.SENSITIVITY])
def test_gain_tables_are_consistent(mode):
    table = gain_table(mode)
    assert tuple(e.gain for e in table) == E4K_STD_GAINS
    for entry in table:
        lna_gain_code(entry.lna_gain)
        assert entry.mixer_gain in MIXER_GAIN_BITS
        for stage, g in enumerate(entry.if_gains, start=1):
            assert IF_STAGE_GAINS[stage][find_stage_gain(stage, g)] == g


def test_gain_table_entry_lookup():
    entry = gain_table_entry(GainMode.LINEARITY, 190)
    assert entry.lna_gain == 0
    assert entry.mixer_gain == 120
    with pytest.raises(E4kError):
        gain_table_entry(GainMode.SENSITIVITY, 195)


@pytest.mark.parametrize("mode", [GainMode.AGC, GainMode.MANUAL, 7])
def test_gain_table_missing_mode(mode):
    with pytest.raises(E4kError):
        gain_table(mode)


def test_tuner_gain_list_by_mode():
    assert tuner_gain_list(GainMode.AGC) == E4K_GAINS
    assert tuner_gain_list(GainMode.MANUAL) == E4K_GAINS
    assert tuner_gain_list(GainMode.LINEARITY) == E4K_STD_GAINS
    assert tuner_gain_list(GainMode.SENSITIVITY) == E4K_STD_GAINS


def test_stage_gain_choices():
    desc, gains = stage_gain_choices(0)
    assert desc == "LNA"
    assert gains[0] == -50 and gains[-1] == 300
    assert stage_gain_choices(1) == ("Mixer", (40, 120))
    assert [stage_gain_choices(s)[0] for s in range(2, STAGE_COUNT)] == [
        "IF1", "IF2", "IF3", "IF4", "IF5", "IF6",
    ]
    with pytest.raises(E4kError):
        stage_gain_choices(STAGE_COUNT)


def test_default_if_gains_are_encodable():
    for stage, g in DEFAULT_IF_GAINS.items():
        assert IF_STAGE_GAINS[stage][find_stage_gain(stage, g)] == g