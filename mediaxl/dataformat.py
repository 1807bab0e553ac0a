"""Flow data formats and their classification."""

from __future__ import annotations

import enum


class DataFormat(enum.IntEnum):
    """Source and flow data formats as defined by NMOS IS-04."""

    UNSPECIFIED = 0
    VIDEO = 1
    AUDIO = 2
    DATA = 3
    MUX = 4


_VALID = frozenset({DataFormat.VIDEO, DataFormat.AUDIO, DataFormat.DATA, DataFormat.MUX})
_SUPPORTED = frozenset({DataFormat.VIDEO, DataFormat.AUDIO, DataFormat.DATA})
_DISCRETE = frozenset({DataFormat.VIDEO, DataFormat.DATA})
_CONTINUOUS = frozenset({DataFormat.AUDIO})


def is_valid_data_format(fmt: int) -> bool:
    """Return whether the format is a valid, specified format."""
    return fmt in _VALID


def is_supported_data_format(fmt: int) -> bool:
    """Return whether the format is supported."""
    return fmt in _SUPPORTED


def is_discrete_data_format(fmt: int) -> bool:
    """Return whether the format operates in discrete grains."""
    return fmt in _DISCRETE


def is_continuous_data_format(fmt: int) -> bool:
    """Return whether the format operates in continuous samples."""
    return fmt in _CONTINUOUS