import pytest

from mediaxl.dataformat import (
    DataFormat,
    is_continuous_data_format,
    is_discrete_data_format,
    is_supported_data_format,
    is_valid_data_format,
)


def test_enum_values_follow_declaration_order():
    assert [f.value for f in DataFormat] == [0, 1, 2, 3, 4]
    assert DataFormat(1) is DataFormat.VIDEO
    assert [is_valid_data_format(value) for value in range(5)] == [False, True, True, True, True]


@pytest.mark.parametrize(
    "fmt, valid, supported, discrete, continuous",
    [
        (DataFormat.UNSPECIFIED, False, False, False, False),
        (DataFormat.VIDEO, True, True, True, False),
        (DataFormat.AUDIO, True, True, False, True),
        (DataFormat.DATA, True, True, True, False),
        (DataFormat.MUX, True, False, False, False),
    ],
)
def test_classification(fmt, valid, supported, discrete, continuous):
    assert is_valid_data_format(fmt) is valid
    assert is_supported_data_format(fmt) is supported
    assert is_discrete_data_format(fmt) is discrete
    assert is_continuous_data_format(fmt) is continuous


def test_plain_integers_are_accepted():
    assert is_discrete_data_format(1)
    assert is_continuous_data_format(2)


@pytest.mark.parametrize("fmt", [-1, 5, 99])
def test_unknown_values_are_rejected(fmt):
    assert not is_valid_data_format(fmt)
    assert not is_supported_data_format(fmt)
    assert not is_discrete_data_format(fmt)
    assert not is_continuous_data_format(fmt)


def test_discrete_and_continuous_are_disjoint_and_supported():
    for fmt in DataFormat:
        assert not (is_discrete_data_format(fmt) and is_continuous_data_format(fmt))
        if is_discrete_data_format(fmt) or is_continuous_data_format(fmt):
            assert is_supported_data_format(fmt)
            assert is_valid_data_format(fmt)