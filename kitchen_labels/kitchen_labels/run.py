from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

import uvicorn

from .config import get_settings
from .errors import LabelError
from .logging import configure_logging
from .render import format_date, label_pdf_bytes
from .session import session_from_settings


def _serve(args, settings) -> int:
    uvicorn.run(
        "kitchen_labels.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _label(args, settings) -> int:
    session = session_from_settings(settings)
    record = session.print_label(args.product, args.category, args.date or date.today())
    out_dir = Path(args.out or settings.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"label_{record.id}.pdf"
    out_file.write_bytes(label_pdf_bytes(record, font_path=settings.label_font_path))
    status = session.status_of(record)
    print(f"{record.product_name} ({record.category}): годен до {format_date(record.expiry_date)} [{status.value}]")
    print(f"label written to {out_file}")
    return 0


def _categories(args, settings) -> int:
    session = session_from_settings(settings)
    for rule in session.catalog:
        print(f"{rule.name}\t{rule.shelf_life_days} дн.\t{rule.temperature_range}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="kitchen-labels", description="Kitchen expiry label station")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the web form")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=_serve)

    label = sub.add_parser("label", help="print one label to a PDF file")
    label.add_argument("--product", required=True, help="product name")
    label.add_argument("--category", required=True, help="category name, exact match")
    label.add_argument("--date", default=None, help="production date, YYYY-MM-DD (default: today)")
    label.add_argument("--out", default=None, help="output directory")
    label.set_defaults(func=_label)

    cats = sub.add_parser("categories", help="list the category catalog")
    cats.set_defaults(func=_categories)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    try:
        return args.func(args, settings)
    except LabelError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
