"""Value predicates referenced by registry and tier declarations.

Declarations name a predicate with a ``ValidatorSpec``; this module is the
only place the predicates are implemented.
"""

from collections.abc import Callable, Iterable
from typing import Any

from switchyard.wiring.models.enums import ValidatorKind
from switchyard.wiring.models.registry import ValidatorSpec
from switchyard.wiring.paths import is_empty

Predicate = Callable[[Any, Any], bool]


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _slot_is_valid(slot: Any) -> bool:
    if not isinstance(slot, dict):
        return False
    has_id = bool(slot.get("id") or slot.get("slotId"))
    has_type = bool(slot.get("type") or slot.get("slotType"))
    has_question = bool(slot.get("question") or slot.get("prompt"))
    return has_id and has_type and has_question


def _all_slots_valid(value: Any, _arg: Any) -> bool:
    return isinstance(value, list) and all(_slot_is_valid(slot) for slot in value)


def _all_slots_have_question(value: Any, _arg: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(slot, dict) and slot.get("question") for slot in value)
    )


def _has_enabled_ref(value: Any, _arg: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and any(isinstance(ref, dict) and ref.get("enabled") is not False for ref in value)
    )


def _resume_booking_has_template(value: Any, _arg: Any) -> bool:
    if not isinstance(value, dict):
        return False
    if value.get("enabled") is False:
        return True
    return _is_non_empty_string(value.get("template"))


def _confirmation_requests_has_triggers(value: Any, _arg: Any) -> bool:
    if not isinstance(value, dict):
        return False
    if value.get("enabled") is False:
        return True
    triggers = value.get("triggers")
    if isinstance(triggers, dict):
        triggers = triggers.get("default")
    if not isinstance(triggers, list):
        return False
    return len([t for t in triggers if t]) >= 2


def _has_required_keys(value: Any, arg: Any) -> bool:
    if not isinstance(value, dict):
        return False
    keys = (arg,) if isinstance(arg, str) else tuple(arg or ())
    return all(value.get(key) is not None for key in keys)


_PREDICATES: dict[ValidatorKind, Predicate] = {
    ValidatorKind.IS_NON_EMPTY: lambda v, _: not is_empty(v),
    ValidatorKind.IS_NON_EMPTY_ARRAY: lambda v, _: isinstance(v, list) and len(v) > 0,
    ValidatorKind.HAS_MIN_ITEMS: lambda v, n: isinstance(v, list) and len(v) >= int(n or 0),
    ValidatorKind.IS_NON_EMPTY_OBJECT: lambda v, _: isinstance(v, dict) and len(v) > 0,
    ValidatorKind.HAS_REQUIRED_KEYS: _has_required_keys,
    ValidatorKind.IS_NON_EMPTY_STRING: lambda v, _: _is_non_empty_string(v),
    ValidatorKind.IS_TRUE: lambda v, _: v is True,
    ValidatorKind.IS_FALSE: lambda v, _: v is False,
    ValidatorKind.IS_NOT_NONE: lambda v, _: v is not None,
    ValidatorKind.KEY_IS_TRUE: lambda v, key: isinstance(v, dict) and v.get(key) is True,
    ValidatorKind.ALL_SLOTS_VALID: _all_slots_valid,
    ValidatorKind.ALL_SLOTS_HAVE_QUESTION: _all_slots_have_question,
    ValidatorKind.HAS_ENABLED_REF: _has_enabled_ref,
    ValidatorKind.RESUME_BOOKING_HAS_TEMPLATE: _resume_booking_has_template,
    ValidatorKind.CONFIRMATION_REQUESTS_HAS_TRIGGERS: _confirmation_requests_has_triggers,
}


def check(spec: ValidatorSpec, value: Any) -> bool:
    """Apply one validator to a value."""
    return _PREDICATES[spec.kind](value, spec.arg)


def first_failure(
    validators: Iterable[ValidatorSpec], value: Any
) -> ValidatorSpec | None:
    """Return the first validator the value fails, in declaration order."""
    for spec in validators:
        if not check(spec, value):
            return spec
    return None


def validator(kind: ValidatorKind, message: str, arg: Any = None) -> ValidatorSpec:
    """Shorthand used by declaration modules."""
    if isinstance(arg, list):
        arg = tuple(arg)
    return ValidatorSpec(kind=kind, arg=arg, message=message)
