from datetime import date

import pytest
from pydantic import TypeAdapter, ValidationError

from staffdesk.schemas.leave_schema import (
    EarlyOutDraft,
    FullDayDraft,
    HalfDayDraft,
    LateArrivalDraft,
    LeaveDraft,
)


drafts = TypeAdapter(LeaveDraft)


def test_discriminator_picks_variant():
    assert isinstance(drafts.validate_python({"leave_type": "full-day", "start_date": "2024-01-02", "end_date": "2024-01-03"}), FullDayDraft)
    assert isinstance(drafts.validate_python({"leave_type": "half-day", "start_date": "2024-01-02", "half": "first"}), HalfDayDraft)
    assert isinstance(drafts.validate_python({"leave_type": "early-out", "start_date": "2024-01-02", "time": "16:00"}), EarlyOutDraft)
    assert isinstance(drafts.validate_python({"leave_type": "late-arrival", "start_date": "2024-01-02", "time": "09:45"}), LateArrivalDraft)


def test_full_day_range():
    draft = drafts.validate_python({"leave_type": "full-day", "start_date": "2024-01-02", "end_date": "2024-01-05"})
    assert draft.resolved_end_date() == date(2024, 1, 5)
    assert draft.resolved_extra_info() is None
    with pytest.raises(ValidationError):
        drafts.validate_python({"leave_type": "full-day", "start_date": "2024-01-05", "end_date": "2024-01-02"})


def test_single_day_variants_end_on_start_date():
    draft = drafts.validate_python({"leave_type": "late-arrival", "start_date": "2024-01-02", "time": "09:45"})
    assert draft.resolved_end_date() == date(2024, 1, 2)


def test_preformatted_extra_info_is_kept_verbatim():
    draft = drafts.validate_python({"leave_type": "early-out", "start_date": "2024-01-02", "extra_info": "leaving after lunch"})
    assert draft.resolved_extra_info() == "leaving after lunch"


def test_typed_field_wins_over_extra_info():
    draft = drafts.validate_python({
        "leave_type": "half-day",
        "start_date": "2024-01-02",
        "half": "second",
        "extra_info": "Half Day (first half)",
    })
    assert draft.resolved_extra_info() == "Half Day (second half)"


@pytest.mark.parametrize("payload", [
    {"leave_type": "half-day", "start_date": "2024-01-02", "half": "third"},
    {"leave_type": "early-out", "start_date": "2024-01-02", "time": "25:00"},
    {"leave_type": "late-arrival", "start_date": "2024-01-02"},
    {"leave_type": "full-day", "end_date": "2024-01-02"},
])
def test_invalid_drafts(payload):
    with pytest.raises(ValidationError):
        drafts.validate_python(payload)
