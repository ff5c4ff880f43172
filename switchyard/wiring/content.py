"""Detection of shared-content bodies inside tenant-scoped values.

Tenant records may only reference shared templates by id. A value that
carries scenario bodies (a non-empty ``scenarios`` list, or trigger and
quick-reply lists side by side) means shared content was copied into the
tenant record.
"""

from typing import Any

SCENARIO_TEXT_KEYS = ("triggers", "quickReplies")


def _is_scenario_body(item: Any) -> bool:
    return isinstance(item, dict) and "triggers" in item and "quickReplies" in item


def embeds_shared_content(value: Any) -> bool:
    """Whether a stored value contains shared scenario bodies at any depth."""
    if isinstance(value, dict):
        scenarios = value.get("scenarios")
        if isinstance(scenarios, list) and len(scenarios) > 0:
            return True
        if _is_scenario_body(value):
            return True
        return any(embeds_shared_content(v) for v in value.values())
    if isinstance(value, list):
        return any(embeds_shared_content(item) for item in value)
    return False


def find_scenario_text_paths(value: Any, prefix: str = "") -> list[str]:
    """Dotted paths of ``triggers`` and ``quickReplies`` arrays anywhere in a value.

    Scenario text is present only when both kinds appear; a lone ``triggers``
    list (as on confirmation requests) is ordinary tenant config.
    """
    found: list[str] = []
    if isinstance(value, dict):
        for key, child in value.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if key in SCENARIO_TEXT_KEYS and isinstance(child, list):
                found.append(path)
            else:
                found.extend(find_scenario_text_paths(child, path))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            found.extend(find_scenario_text_paths(item, f"{prefix}.{index}" if prefix else str(index)))
    return found


def has_scenario_text(value: Any) -> bool:
    """Whether both trigger and quick-reply arrays appear in a value."""
    keys = {path.rsplit(".", 1)[-1] for path in find_scenario_text_paths(value)}
    return all(key in keys for key in SCENARIO_TEXT_KEYS)
