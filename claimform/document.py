"""
Form document abstraction over PyMuPDF.

Fields are addressed by their fully-qualified name. A name can own several
widgets (a multi-option checkbox, a radio group, a text field repeated on
two pages); operations apply to every widget of the name.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import fitz  # PyMuPDF

from claimform.errors import WidgetStateError
from claimform.schema import FieldInfo, FieldKind

logger = logging.getLogger(__name__)

OFF_STATE = "Off"

_KIND_BY_WIDGET_TYPE = {
    fitz.PDF_WIDGET_TYPE_TEXT: FieldKind.TEXT,
    fitz.PDF_WIDGET_TYPE_CHECKBOX: FieldKind.CHECKBOX,
    fitz.PDF_WIDGET_TYPE_RADIOBUTTON: FieldKind.RADIO,
    fitz.PDF_WIDGET_TYPE_COMBOBOX: FieldKind.DROPDOWN,
    fitz.PDF_WIDGET_TYPE_LISTBOX: FieldKind.DROPDOWN,
}


def widget_on_states(widget: "fitz.Widget") -> List[str]:
    """Appearance state names of a button widget other than Off."""
    states = widget.button_states() or {}
    names = (states.get("normal") or []) + (states.get("down") or [])
    on_states: List[str] = []
    for name in names:
        if name != OFF_STATE and name not in on_states:
            on_states.append(name)
    return on_states


class FormDocument:
    """A fillable PDF form opened for editing."""

    def __init__(self, doc: "fitz.Document"):
        self.doc = doc

    @classmethod
    def load(cls, data: bytes) -> "FormDocument":
        return cls(fitz.open(stream=data, filetype="pdf"))

    @classmethod
    def open(cls, path: Union[str, Path]) -> "FormDocument":
        return cls(fitz.open(str(path)))

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def _widgets(self, name: Optional[str] = None) -> Iterator["fitz.Widget"]:
        for page in self.doc:
            for widget in page.widgets():
                if name is None or widget.field_name == name:
                    yield widget

    def list_fields(self) -> List[FieldInfo]:
        """All form fields in document order, one entry per field name."""
        fields: Dict[str, FieldInfo] = {}
        for widget in self._widgets():
            kind = _KIND_BY_WIDGET_TYPE.get(widget.field_type)
            if kind is None:
                logger.debug(f"Ignoring {widget.field_type_string} widget {widget.field_name!r}")
                continue
            info = fields.get(widget.field_name)
            if info is None:
                info = FieldInfo(name=widget.field_name, kind=kind, page_index=widget.parent.number)
                fields[widget.field_name] = info
            if kind in (FieldKind.CHECKBOX, FieldKind.RADIO):
                for state in widget_on_states(widget):
                    if state not in info.on_states:
                        info.on_states.append(state)
        return list(fields.values())

    def get_on_states(self, name: str) -> List[str]:
        on_states: List[str] = []
        for widget in self._widgets(name):
            for state in widget_on_states(widget):
                if state not in on_states:
                    on_states.append(state)
        return on_states

    def get_value(self, name: str) -> Optional[str]:
        for widget in self._widgets(name):
            return widget.field_value
        return None

    def set_text(self, name: str, value: str) -> None:
        found = False
        for widget in self._widgets(name):
            widget.field_value = str(value)
            widget.update()
            found = True
        if not found:
            raise KeyError(f"No field named {name!r}")

    def set_discrete_state(self, name: str, state: Optional[str]) -> None:
        """
        Turn on the widget whose on-state is state and every other widget of
        the field off. None turns the whole field off.
        """
        widgets = list(self._widgets(name))
        if not widgets:
            raise KeyError(f"No field named {name!r}")

        selected = [w for w in widgets if state is not None and state in widget_on_states(w)]
        if state is not None and not selected:
            raise WidgetStateError(f"{name!r} has no on-state {state!r}")

        # Off first, so the field value ends on the selected state
        for widget in widgets:
            if widget not in selected:
                widget.field_value = OFF_STATE
                widget.update()
        for widget in selected:
            widget.field_value = state
            widget.update()

    def select_option(self, name: str, value: str) -> None:
        found = False
        for widget in self._widgets(name):
            options = [opt[0] if isinstance(opt, (list, tuple)) else opt for opt in (widget.choice_values or [])]
            if options and value not in options:
                raise WidgetStateError(f"{value!r} is not an option of {name!r}")
            widget.field_value = value
            widget.update()
            found = True
        if not found:
            raise KeyError(f"No field named {name!r}")

    def draw_text(self, page_index: int, x: float, y: float, text: str, font_size: float = 10) -> None:
        """Draw text with its baseline at (x, y), y measured up from the bottom edge."""
        page = self.doc[page_index]
        page.insert_text((x, page.rect.height - y), text, fontsize=font_size, fontname="helv", color=(0, 0, 0))

    def flatten(self) -> None:
        """Burn widget appearances into page content; fields are no longer editable."""
        self.doc.bake(annots=False, widgets=True)

    def serialize(self) -> bytes:
        return self.doc.tobytes(garbage=3, deflate=True, encryption=fitz.PDF_ENCRYPT_NONE)

    def save(self, path: Union[str, Path]) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.doc.save(str(path), garbage=3, deflate=True, encryption=fitz.PDF_ENCRYPT_NONE)

    def close(self) -> None:
        self.doc.close()

    def __enter__(self) -> "FormDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
