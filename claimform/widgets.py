"""
Widget state resolver.

Maps a logical field value (bool, option label or None) onto the physical
on-state of a checkbox or radio field. Which on-state names a field carries
is a property of the form; see WidgetKind for how they are grouped.
"""

import logging
from enum import Enum
from typing import Any, Optional, Sequence

from claimform.errors import WidgetStateError

logger = logging.getLogger(__name__)


class WidgetKind(str, Enum):
    SINGLE = "single"    # one on-state: checked or not
    YES_NO = "yes_no"    # exactly {Yes, No}
    MULTI = "multi"      # any other set of options


def classify(on_states: Sequence[str]) -> WidgetKind:
    states = set(on_states)
    if states == {"Yes", "No"}:
        return WidgetKind.YES_NO
    if len(states) > 1:
        return WidgetKind.MULTI
    return WidgetKind.SINGLE


def select_state(on_states: Sequence[str], value: Any) -> Optional[str]:
    """
    Pick the on-state to activate for value, or None to turn everything off.

    Raises:
        WidgetStateError: a label that names none of the field's states
    """
    kind = classify(on_states)

    if kind is WidgetKind.YES_NO:
        if isinstance(value, str):
            if value in on_states:
                return value
            raise WidgetStateError(f"{value!r} is not one of {list(on_states)}")
        return "Yes" if value is True else "No"

    if kind is WidgetKind.MULTI:
        if isinstance(value, str):
            if value in on_states:
                return value
            raise WidgetStateError(f"{value!r} is not one of {list(on_states)}")
        if value is True:
            return on_states[0]
        return None

    if not on_states:
        return None
    return on_states[0] if value is True else None


def _label(kind: WidgetKind, state: Optional[str]) -> str:
    if kind is WidgetKind.SINGLE:
        return "checked" if state else "unchecked"
    return state or "unchecked"


def apply_state(document, field_name: str, value: Any) -> str:
    """
    Resolve value against the field's on-states and set it on the document.
    Every other on-state of the field is turned off.

    Returns:
        Human-readable label of what was applied
    """
    on_states = document.get_on_states(field_name)
    kind = classify(on_states)
    state = select_state(on_states, value)
    document.set_discrete_state(field_name, state)
    logger.debug(f"{field_name}: {kind.value} -> {state}")
    return _label(kind, state)
