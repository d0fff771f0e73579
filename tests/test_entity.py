"""Tests for the Record entity."""

from entity_actions.entity import Record, values_differ
from entity_actions.protocols import Entity


class TestValuesDiffer:
    """Tests for values_differ()."""

    def test_identity_and_equality(self) -> None:
        marker = object()

        assert values_differ(marker, marker) is False
        assert values_differ(1, 1) is False
        assert values_differ("a", "a") is False
        assert values_differ(False, None) is True
        assert values_differ([1], [1]) is False
        assert values_differ({"a": 1}, {"a": 2}) is True


class TestRecord:
    """Tests for Record dirty tracking."""

    def test_satisfies_entity_protocol(self) -> None:
        assert isinstance(Record(), Entity)

    def test_new_record_is_clean(self) -> None:
        record = Record({"title": "Hello"})

        assert record.is_dirty is False
        assert record.get("title") == "Hello"
        assert record.get("missing") is None

    def test_set_marks_dirty(self) -> None:
        record = Record({"title": "Hello"})

        record.set("title", "Edited")

        assert record.is_dirty is True
        assert record.changed_attributes() == {"title": ("Hello", "Edited")}

    def test_setting_same_value_stays_clean(self) -> None:
        record = Record({"title": "Hello"})

        record.set("title", "Hello")

        assert record.is_dirty is False

    def test_commit_and_rollback(self) -> None:
        record = Record({"title": "Hello"})
        record.set("title", "Edited")
        record.commit()

        assert record.is_dirty is False
        assert record.changed_attributes() == {}

        record.set("title", "Again")
        record.set("extra", 1)
        record.rollback_attributes()

        assert record.to_dict() == {"title": "Edited"}
        assert record.is_dirty is False

    def test_repr_shows_dirty_state(self) -> None:
        record = Record({"a": 1})
        record.set("a", 2)

        assert "dirty" in repr(record)
