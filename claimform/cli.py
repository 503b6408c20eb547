"""
Command line entry point.

  python -m claimform fill claim-001 [--output PATH] [--input PATH] [--ai] [--flatten] [--preview]
  python -m claimform batch 5 [PREFIX] [--ai]
  python -m claimform inspect DBLNYC84.pdf
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from claimform.batch import batch_fill
from claimform.config import Settings
from claimform.document import FormDocument
from claimform.errors import MissingCredentialError, MissingInputError
from claimform.field_mapping import get_mapping
from claimform.filler import fill_form

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="claimform", description="Fill the NY DB-450 claim form with synthetic data.")
    sub = parser.add_subparsers(dest="command", required=True)

    fill = sub.add_parser("fill", help="Fill one form for a run id")
    fill.add_argument("run_id", help="Unique identifier for this run (used for data persistence)")
    fill.add_argument("--output", "-o", type=Path, default=None, help="Output PDF path (default: <output_dir>/<run_id>.pdf)")
    fill.add_argument("--input", "-i", type=Path, default=None, help="Blank form PDF (default: CLAIMFORM_INPUT_PDF)")
    fill.add_argument("--ai", action="store_true", help="Generate disability descriptions with the AI backend")
    fill.add_argument("--flatten", action="store_true", help="Flatten form after filling")
    fill.add_argument("--preview", action="store_true", help="Preview field values without creating a PDF")

    batch = sub.add_parser("batch", help="Fill <prefix>-001 .. <prefix>-NNN")
    batch.add_argument("count", type=int, help="Number of forms to generate")
    batch.add_argument("prefix", nargs="?", default="claim", help="Run id prefix (default: claim)")
    batch.add_argument("--input", "-i", type=Path, default=None, help="Blank form PDF (default: CLAIMFORM_INPUT_PDF)")
    batch.add_argument("--ai", action="store_true", help="Generate disability descriptions with the AI backend")
    batch.add_argument("--flatten", action="store_true", help="Flatten forms after filling")

    inspect = sub.add_parser("inspect", help="List a PDF's form fields, kinds and on-states")
    inspect.add_argument("pdf", type=Path)
    return parser


def _inspect(pdf: Path) -> int:
    if not pdf.exists():
        print(f"File not found: {pdf}", file=sys.stderr)
        return 1
    with FormDocument.open(pdf) as document:
        fields = document.list_fields()
        print(f"=== {pdf.name}: {document.page_count} pages, {len(fields)} fields ===")
        for info in fields:
            mapping = get_mapping(info.name)
            mapped = mapping.kind.value if mapping else "UNMAPPED"
            states = f" {info.on_states}" if info.on_states else ""
            print(f"  p{info.page_index} [{info.kind.value}] {info.name!r}{states} -> {mapped}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        if args.command == "fill":
            result = fill_form(
                args.run_id,
                settings=settings,
                input_path=args.input,
                output_path=args.output,
                use_ai=args.ai,
                flatten=args.flatten,
                preview=args.preview,
            )
            return 0 if not result.errors else 2
        if args.command == "batch":
            results = batch_fill(
                args.count,
                args.prefix,
                settings=settings,
                input_path=args.input,
                use_ai=args.ai,
                flatten=args.flatten,
            )
            return 0 if all(r.success for r in results) else 2
        if args.command == "inspect":
            return _inspect(args.pdf)
    except (MissingInputError, MissingCredentialError) as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
