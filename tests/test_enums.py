import pytest

from workforce_payroll.core.enums import ShiftKind
from workforce_payroll.core.exceptions import ComputationError


@pytest.mark.parametrize(
    "raw, kind",
    [("open", ShiftKind.OPEN), (" Close ", ShiftKind.CLOSE), ("DOUBLE", ShiftKind.DOUBLE), ("", ShiftKind.OTHER),
     (None, ShiftKind.OTHER)],
)
def test_shift_kind_parse(raw, kind):
    assert ShiftKind.parse(raw) is kind


def test_shift_kind_parse_rejects_unknown_value():
    with pytest.raises(ComputationError):
        ShiftKind.parse("night")


def test_double_covers_open_and_close():
    assert ShiftKind.DOUBLE.covers(ShiftKind.OPEN)
    assert ShiftKind.OPEN.covers(ShiftKind.DOUBLE)
    assert not ShiftKind.OPEN.covers(ShiftKind.CLOSE)
    assert not ShiftKind.OTHER.covers(ShiftKind.OPEN)
