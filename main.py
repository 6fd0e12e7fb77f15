import argparse
import logging
import sys
from datetime import date

import settings
from scenarios import run_scenarios

LOGGER = logging.getLogger(__name__)


def _iso_date(value):
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value}") from None


def build_parser():
    parser = argparse.ArgumentParser(description="Run the scripted checkout scenarios")
    parser.add_argument('--today', type=_iso_date, default=None,
                        help='Date used for expiration checks (YYYY-MM-DD, default: today)')
    parser.add_argument('--receipts-dir', default=None,
                        help=f'Also write PNG receipts here (e.g. {settings.RECEIPTS_DIR})')
    parser.add_argument('--log-level', default=settings.LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv=None, out=None):
    args = build_parser().parse_args(argv)
    settings.configure_logging(args.log_level)

    today = args.today or date.today()
    LOGGER.info("Running scenarios for %s", today.isoformat())
    run_scenarios(today, out or sys.stdout, receipts_dir=args.receipts_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
