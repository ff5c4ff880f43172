"""Tests for declaration validators."""

import pytest

from switchyard.wiring.models.enums import ValidatorKind as V
from switchyard.wiring.validators import check, first_failure, validator


def _ok(kind: V, value: object, arg: object = None) -> bool:
    return check(validator(kind, "msg", arg), value)


class TestBasicPredicates:
    """Tests for generic predicates."""

    def test_non_empty(self) -> None:
        """is_non_empty accepts False but not blank strings."""
        assert _ok(V.IS_NON_EMPTY, False)
        assert not _ok(V.IS_NON_EMPTY, "  ")

    def test_non_empty_array(self) -> None:
        """Only non-empty lists pass."""
        assert _ok(V.IS_NON_EMPTY_ARRAY, [1])
        assert not _ok(V.IS_NON_EMPTY_ARRAY, [])
        assert not _ok(V.IS_NON_EMPTY_ARRAY, {"a": 1})

    def test_min_items(self) -> None:
        """has_min_items compares list length with the argument."""
        assert _ok(V.HAS_MIN_ITEMS, ["a", "b", "c"], 3)
        assert not _ok(V.HAS_MIN_ITEMS, ["a", "b"], 3)

    def test_required_keys(self) -> None:
        """Every listed key must be present and not None."""
        assert _ok(V.HAS_REQUIRED_KEYS, {"a": 0, "b": ""}, ["a", "b"])
        assert not _ok(V.HAS_REQUIRED_KEYS, {"a": 0, "b": None}, ["a", "b"])
        assert _ok(V.HAS_REQUIRED_KEYS, {"a": 1}, "a")

    def test_booleans(self) -> None:
        """is_true and is_false are exact."""
        assert _ok(V.IS_TRUE, True)
        assert not _ok(V.IS_TRUE, 1)
        assert _ok(V.IS_FALSE, False)
        assert not _ok(V.IS_FALSE, None)

    def test_key_is_true(self) -> None:
        """The named key must be exactly True."""
        assert _ok(V.KEY_IS_TRUE, {"enabled": True}, "enabled")
        assert not _ok(V.KEY_IS_TRUE, {"enabled": "yes"}, "enabled")

    def test_list_argument_frozen(self) -> None:
        """List arguments become tuples so specs stay hashable."""
        spec = validator(V.HAS_REQUIRED_KEYS, "msg", ["a"])
        assert spec.arg == ("a",)


class TestDomainPredicates:
    """Tests for booking and template predicates."""

    def test_all_slots_valid_accepts_aliases(self) -> None:
        """slotId, slotType and prompt are accepted aliases."""
        slots = [
            {"id": "name", "type": "name", "question": "Name?"},
            {"slotId": "phone", "slotType": "phone", "prompt": "Phone?"},
        ]
        assert _ok(V.ALL_SLOTS_VALID, slots)

    def test_all_slots_valid_rejects_incomplete(self) -> None:
        """A slot without a question fails."""
        assert not _ok(V.ALL_SLOTS_VALID, [{"id": "name", "type": "name"}])

    def test_all_slots_have_question(self) -> None:
        """Every slot needs a literal question and the list must be non-empty."""
        assert _ok(V.ALL_SLOTS_HAVE_QUESTION, [{"question": "Name?"}])
        assert not _ok(V.ALL_SLOTS_HAVE_QUESTION, [])
        assert not _ok(V.ALL_SLOTS_HAVE_QUESTION, [{"prompt": "Name?"}])

    @pytest.mark.parametrize(
        ("refs", "expected"),
        [
            ([{"templateId": "t"}], True),
            ([{"templateId": "t", "enabled": False}], False),
            ([{"templateId": "t", "enabled": False}, {"templateId": "u"}], True),
            ([], False),
            (None, False),
        ],
    )
    def test_has_enabled_ref(self, refs: object, expected: bool) -> None:
        """At least one ref not explicitly disabled."""
        assert _ok(V.HAS_ENABLED_REF, refs) is expected

    def test_resume_booking(self) -> None:
        """A template is required only while enabled."""
        assert _ok(V.RESUME_BOOKING_HAS_TEMPLATE, {"enabled": False})
        assert _ok(V.RESUME_BOOKING_HAS_TEMPLATE, {"template": "Back to booking."})
        assert not _ok(V.RESUME_BOOKING_HAS_TEMPLATE, {"enabled": True})

    def test_confirmation_requests(self) -> None:
        """Two non-blank triggers, either as a list or under 'default'."""
        assert _ok(V.CONFIRMATION_REQUESTS_HAS_TRIGGERS, {"triggers": ["a", "b"]})
        assert _ok(V.CONFIRMATION_REQUESTS_HAS_TRIGGERS, {"triggers": {"default": ["a", "b"]}})
        assert not _ok(V.CONFIRMATION_REQUESTS_HAS_TRIGGERS, {"triggers": ["a", ""]})
        assert _ok(V.CONFIRMATION_REQUESTS_HAS_TRIGGERS, {"enabled": False})


class TestFirstFailure:
    """Tests for first_failure."""

    def test_returns_first_failing_in_order(self) -> None:
        """Declaration order decides which message is reported."""
        specs = (
            validator(V.IS_NON_EMPTY_ARRAY, "need slots"),
            validator(V.ALL_SLOTS_VALID, "bad slots"),
        )
        failed = first_failure(specs, [])
        assert failed is not None
        assert failed.message == "need slots"

        failed = first_failure(specs, [{"id": "x"}])
        assert failed is not None
        assert failed.message == "bad slots"

    def test_none_when_all_pass(self) -> None:
        """All passing yields None."""
        assert first_failure((validator(V.IS_TRUE, "m"),), True) is None
