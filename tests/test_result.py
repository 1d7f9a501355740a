from __future__ import annotations

import pytest

from permflow.permission import (
    GRANTED,
    PERMANENTLY_DENIED,
    AggregateOutcome,
    Denied,
    Granted,
    PermanentlyDenied,
    permission_name,
)
from permflow.permission.result import outcome_name

CAMERA = "android.permission.CAMERA"
MIC = "android.permission.RECORD_AUDIO"
FINE = "android.permission.ACCESS_FINE_LOCATION"


def test_outcomes_are_values() -> None:
    assert Granted() == GRANTED
    assert PermanentlyDenied() == PERMANENTLY_DENIED
    assert Denied(True) == Denied(should_show_rationale=True)
    assert Denied(True) != Denied(False)
    assert Denied().should_show_rationale is False


@pytest.mark.parametrize(
    "outcome, name",
    [(GRANTED, "granted"), (Denied(True), "denied"), (PERMANENTLY_DENIED, "permanently_denied")],
)
def test_outcome_name(outcome, name) -> None:
    assert outcome_name(outcome) == name


def test_outcome_name_rejects_other_values() -> None:
    with pytest.raises(TypeError):
        outcome_name("granted")


def test_aggregate_partitions_requested_keys() -> None:
    result = AggregateOutcome.from_outcomes(
        {CAMERA: GRANTED, MIC: Denied(True), FINE: PERMANENTLY_DENIED}
    )

    assert result.granted == {CAMERA}
    assert result.denied == {MIC}
    assert result.permanently_denied == {FINE}
    assert result.granted | result.denied | result.permanently_denied == set(result.per_key)
    assert not (result.granted & result.denied)
    assert not (result.denied & result.permanently_denied)
    assert not (result.granted & result.permanently_denied)

    assert result.all_granted is False
    assert result.any_permanently_denied is True
    assert result.any_rationale() is True
    assert result.keys == [CAMERA, MIC, FINE]
    assert result.granted_in_order() == [CAMERA]
    assert result.not_granted_in_order() == [MIC, FINE]


def test_aggregate_all_granted_for() -> None:
    result = AggregateOutcome.all_granted_for([CAMERA, MIC])

    assert result.all_granted is True
    assert result.any_permanently_denied is False
    assert result.per_key == {CAMERA: GRANTED, MIC: GRANTED}


def test_aggregate_to_dict_is_sorted() -> None:
    result = AggregateOutcome.from_outcomes({MIC: Denied(False), CAMERA: Denied(False)})

    assert result.to_dict() == {
        "granted": [],
        "denied": [CAMERA, MIC],
        "permanently_denied": [],
        "all_granted": False,
    }


def test_aggregate_rejects_non_outcomes() -> None:
    with pytest.raises(TypeError, match=CAMERA):
        AggregateOutcome.from_outcomes({CAMERA: True})


def test_permission_name() -> None:
    assert permission_name(CAMERA) == "CAMERA"
    assert permission_name("custom") == "custom"
