import pytest

from src.planner.core.schedule_form import (
    ScheduleDraft,
    TodoDraft,
    draft_errors,
    is_todo_draft_valid,
    is_valid,
    set_slot_field,
    to_schedule_records,
    toggle_weekday,
)
from src.planner.core.weekdays import Weekday


def draft_with(slots, title="Algorithms"):
    return ScheduleDraft(title=title, slots=dict(slots))


class TestIsValid:
    def test_end_time_out_of_range_rejected(self):
        assert not is_valid(draft_with({Weekday.MON: (20, 21)}))

    def test_last_displayable_hour_accepted(self):
        assert is_valid(draft_with({Weekday.MON: (19, 20)}))

    def test_no_weekday_selected_rejected(self):
        draft = draft_with({}, title="Non-empty title")
        assert not is_valid(draft)
        assert draft_errors(draft) == ["select at least one weekday"]

    def test_blank_title_rejected(self):
        assert not is_valid(draft_with({Weekday.MON: (9, 10)}, title="   "))

    def test_start_must_precede_end(self):
        assert not is_valid(draft_with({Weekday.MON: (12, 12)}))
        assert not is_valid(draft_with({Weekday.MON: (13, 12)}))

    def test_start_below_range_rejected(self):
        assert not is_valid(draft_with({Weekday.MON: (8, 10)}))

    def test_cleared_field_rejected(self):
        assert not is_valid(draft_with({Weekday.MON: (None, 10)}))

    def test_every_selected_weekday_is_checked(self):
        draft = draft_with({Weekday.MON: (9, 10), Weekday.FRI: (15, 21)})
        assert not is_valid(draft)
        assert draft_errors(draft) == ["FRI: end_time must be between 9 and 20"]

    def test_overlapping_selections_are_not_rejected(self):
        assert is_valid(draft_with({Weekday.MON: (9, 12), Weekday.TUE: (9, 12)}))


class TestDraftEditing:
    def test_toggle_adds_default_then_removes(self):
        draft = ScheduleDraft(title="x")
        toggle_weekday(draft, Weekday.WED)
        assert draft.slots == {Weekday.WED: (9, 10)}
        toggle_weekday(draft, Weekday.WED)
        assert draft.slots == {}

    def test_set_field_touches_one_weekday(self):
        draft = draft_with({Weekday.MON: (9, 10), Weekday.TUE: (9, 10)})
        set_slot_field(draft, Weekday.MON, "end_time", 12)
        set_slot_field(draft, Weekday.MON, "start_time", 10)
        assert draft.slots == {Weekday.MON: (10, 12), Weekday.TUE: (9, 10)}

    def test_set_field_rejects_unknown_name_and_unselected_day(self):
        draft = draft_with({Weekday.MON: (9, 10)})
        with pytest.raises(ValueError):
            set_slot_field(draft, Weekday.MON, "duration", 2)
        with pytest.raises(KeyError):
            set_slot_field(draft, Weekday.SAT, "end_time", 11)


def test_to_schedule_records_one_per_weekday_in_week_order():
    draft = ScheduleDraft(
        title="  Networks ",
        content="Room 2",
        color="#ff0000",
        slots={Weekday.FRI: (14, 16), Weekday.MON: (9, 11)},
    )
    records = to_schedule_records(draft, owner_id=3)
    assert [r["weekday"] for r in records] == [Weekday.MON, Weekday.FRI]
    assert records[0] == {
        "weekday": Weekday.MON,
        "start_time": 9,
        "end_time": 11,
        "title": "Networks",
        "content": "Room 2",
        "color": "#ff0000",
        "owner_id": 3,
    }


def test_todo_draft_requires_every_field():
    assert is_todo_draft_valid(TodoDraft("Essay", "Intro", "2024-01-01", "2024-01-02"))
    assert not is_todo_draft_valid(TodoDraft("Essay", " ", "2024-01-01", "2024-01-02"))
    assert not is_todo_draft_valid(TodoDraft())
