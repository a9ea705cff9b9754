import argparse
import json
import logging
import sys

from meter_reconcile import reconcile
from meter_reconcile.api import ReconcileConfig
from meter_reconcile.errors import ReconcileError
from meter_reconcile.matching.matcher import TieBreak
from meter_reconcile.utils.json_encoder import DecimalEncoder


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Reconcile meter photographs against a prior-period spreadsheet"
    )
    parser.add_argument("prior", help="Prior-period .xlsx/.xlsm/.csv file")
    parser.add_argument("captures", nargs="+", help="Meter photos or scanned PDFs, in capture order")
    parser.add_argument("-o", "--out", help="Output workbook (.xlsx)")
    parser.add_argument("--json", help="Write the full JSON report here instead of stdout")
    parser.add_argument(
        "--disable-deskew",
        action="store_true",
        help="Disable pre-OCR deskew correction.",
    )
    parser.add_argument(
        "--reject-ambiguous",
        action="store_true",
        help="Leave a capture unmatched when its digit suffix fits several prior records.",
    )
    parser.add_argument("--dpi", type=int, default=300, help="Render resolution for PDF captures.")
    parser.add_argument("--debug", action="store_true", help="Print per-capture OCR diagnostics to stderr.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging.")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ReconcileConfig(
        enable_deskew=not args.disable_deskew,
        tie_break=TieBreak.REJECT if args.reject_ambiguous else TieBreak.FIRST,
        pdf_dpi=args.dpi,
    )

    try:
        report = reconcile(
            args.prior,
            args.captures,
            workbook_out=args.out,
            json_out=args.json,
            config=config,
        )
    except ReconcileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.debug:
        print("\n\n".join(report["diagnostics"]), file=sys.stderr)

    if not args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False, cls=DecimalEncoder))
    return 0


if __name__ == "__main__":
    sys.exit(main())
