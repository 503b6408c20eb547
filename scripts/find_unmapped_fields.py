#!/usr/bin/env python3
"""
Compare a PDF's form fields against the field mapping catalog.
  python scripts/find_unmapped_fields.py path/to/DBLNYC84.pdf

Lists form fields with no mapping (they are skipped on fill) and mappings
that name no field in this PDF (stale or misspelled names).
"""
import sys
from pathlib import Path

# Allow running from repo root or from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from claimform.document import FormDocument
from claimform.field_mapping import FIELD_MAPPINGS


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python scripts/find_unmapped_fields.py <path/to.pdf>", file=sys.stderr)
        return 1
    path = Path(sys.argv[1])
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 1

    with FormDocument.open(path) as document:
        fields = document.list_fields()

    form_names = [f.name for f in fields]
    unmapped = [f for f in fields if f.name not in FIELD_MAPPINGS]
    stale = [name for name in FIELD_MAPPINGS if name not in set(form_names)]

    print(f"Form fields: {len(form_names)}  Mappings: {len(FIELD_MAPPINGS)}")
    print(f"\n=== Unmapped form fields ({len(unmapped)}) ===")
    for info in unmapped:
        states = f" on={info.on_states}" if info.on_states else ""
        print(f"  p{info.page_index} [{info.kind.value}] {info.name!r}{states}")
    print(f"\n=== Mappings with no form field ({len(stale)}) ===")
    for name in stale:
        print(f"  {name!r}")
    return 0 if not unmapped else 2


if __name__ == "__main__":
    sys.exit(main())
