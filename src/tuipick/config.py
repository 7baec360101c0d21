"""Picker configuration: typed defaults merged with host string overrides.

Each recognised option is parsed on its own. A malformed value only affects
that option, which keeps its default; the rest of the overrides still apply.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping

from tuipick.fuzzy import CaseMatching

logger = logging.getLogger(__name__)

OPTION_CASE_MATCHING = "picker_case_matching"
OPTION_MATCH_PATHS = "picker_match_paths"
OPTION_START_IN_SEARCH_MODE = "picker_start_in_search_mode"


@dataclass(frozen=True)
class PickerConfig:
    """Behaviour toggles consulted by matching, input handling and rendering."""

    case_matching: CaseMatching = CaseMatching.SMART
    match_paths: bool = False
    start_in_search_mode: bool = False


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"expected 'true' or 'false', got {value!r}")


def _parse_case_matching(value: str) -> CaseMatching:
    try:
        return CaseMatching(value.strip().lower())
    except ValueError:
        choices = ", ".join(f"'{mode.value}'" for mode in CaseMatching)
        raise ValueError(f"expected one of {choices}, got {value!r}") from None


# option key -> (PickerConfig field, parser)
_OPTIONS: dict[str, tuple[str, Callable[[str], Any]]] = {
    OPTION_CASE_MATCHING: ("case_matching", _parse_case_matching),
    OPTION_MATCH_PATHS: ("match_paths", _parse_bool),
    OPTION_START_IN_SEARCH_MODE: ("start_in_search_mode", _parse_bool),
}


def recognized_options() -> list[str]:
    return list(_OPTIONS)


def load_config(
    overrides: Mapping[str, str],
    defaults: PickerConfig | None = None,
) -> PickerConfig:
    """Build a config snapshot from *defaults* and host *overrides*.

    Present keys override the default, absent keys leave it untouched and
    unknown keys are ignored.
    """
    base = defaults if defaults is not None else PickerConfig()
    changes: dict[str, Any] = {}

    for key, value in overrides.items():
        option = _OPTIONS.get(key)
        if option is None:
            logger.debug("ignoring unknown picker option %r", key)
            continue

        field_name, parse = option
        if not isinstance(value, str):
            logger.warning(
                "invalid value %r for option %r: expected a string; keeping default %r",
                value,
                key,
                getattr(base, field_name),
            )
            continue

        try:
            changes[field_name] = parse(value)
        except ValueError as exc:
            logger.warning(
                "invalid value for option %r: %s; keeping default %r",
                key,
                exc,
                getattr(base, field_name),
            )

    return replace(base, **changes)
