#!/usr/bin/env python3
"""
Inspect a PDF's form widgets. Use to debug field mapping:
  python scripts/inspect_form_fields.py path/to/DBLNYC84.pdf [--page N]

Prints every widget with its page, type, current value and on-states, and
flags checkbox fields whose on-states form a Yes/No pair or a multi-option set.
"""
import sys
from pathlib import Path

# Allow running from repo root or from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import fitz

from claimform.document import widget_on_states
from claimform.widgets import WidgetKind, classify


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python scripts/inspect_form_fields.py <path/to.pdf> [--page N]", file=sys.stderr)
        sys.exit(1)
    path = Path(sys.argv[1])
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        sys.exit(1)
    only_page = None
    if "--page" in sys.argv:
        only_page = int(sys.argv[sys.argv.index("--page") + 1])

    doc = fitz.open(str(path))
    print(f"=== {path.name}: {doc.page_count} pages ===")
    for page in doc:
        if only_page is not None and page.number != only_page:
            continue
        widgets = list(page.widgets())
        print(f"\n=== Page {page.number} widgets ({len(widgets)}) ===")
        if not widgets:
            print("  (none - page is flattened or drawn only)")
            continue
        for w in widgets:
            name = w.field_name or ""
            val = str(w.field_value or "").strip()
            if len(val) > 60:
                val = val[:57] + "..."
            line = f"  [{w.field_type_string}] {name!r} => {val!r}"
            on_states = widget_on_states(w) if w.field_type in (
                fitz.PDF_WIDGET_TYPE_CHECKBOX, fitz.PDF_WIDGET_TYPE_RADIOBUTTON
            ) else []
            if on_states:
                line += f" on={on_states}"
            print(line)

    print("\n=== Multi-state checkbox fields ===")
    grouped = {}
    for page in doc:
        for w in page.widgets():
            if w.field_type == fitz.PDF_WIDGET_TYPE_CHECKBOX:
                states = grouped.setdefault(w.field_name, [])
                states.extend(s for s in widget_on_states(w) if s not in states)
    for name, states in grouped.items():
        kind = classify(states)
        if kind is not WidgetKind.SINGLE:
            print(f"  {kind.value:7} {name!r}: {states}")
    doc.close()


if __name__ == "__main__":
    main()
