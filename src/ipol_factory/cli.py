"""Command line entry points: ipol-build and ipol-list-bins."""

import argparse
import logging
import sys
from pathlib import Path

from . import config as cfg
from .errors import ConfigurationError, DataIntegrityError, FitError, IpolFactoryError
from .factory import IpolFactory
from .parsers.histogram_store import list_bins

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 2
EXIT_DATA_ERROR = 3
EXIT_FIT_ERROR = 4


def _setup_logging(level: str):
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipol-build",
        description="Build polynomial surrogates (ipols) of histogram bins from a parameter scan.",
    )
    parser.add_argument("--scan-dir", "-s", required=True,
                        help="directory to scan for run directories (required)")
    parser.add_argument("--prediction-file", "-p", default=cfg.DEFAULT_PREDICTION_FILE,
                        help=f"histogram file inside each run (default: {cfg.DEFAULT_PREDICTION_FILE})")
    parser.add_argument("--param-file", "-f", default=cfg.DEFAULT_PARAM_FILE,
                        help=f"parameter file inside each run (default: {cfg.DEFAULT_PARAM_FILE})")
    parser.add_argument("--bin-list", "-b", default=cfg.DEFAULT_BIN_LIST,
                        help=f"file listing '<histogram>#<bin>' entries (default: {cfg.DEFAULT_BIN_LIST})")
    parser.add_argument("--order", type=int, default=cfg.DEFAULT_ORDER,
                        help=f"maximum polynomial order (default: {cfg.DEFAULT_ORDER})")
    parser.add_argument("--n-test", type=int, default=0,
                        help="number of runs held out to choose the order (default: 0, no selection)")
    parser.add_argument("--output", "-o", default=cfg.DEFAULT_OUTPUT,
                        help=f"ipol file to write (default: {cfg.DEFAULT_OUTPUT})")
    parser.add_argument("--include-header", action=argparse.BooleanOptionalAction, default=True,
                        help="write the parameter header (default: on)")
    parser.add_argument("--log-level", default=cfg.LOG_LEVEL,
                        choices=cfg.LOG_LEVELS, type=str.upper,
                        help=f"logging level (default: {cfg.LOG_LEVEL})")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    try:
        config = cfg.make_config(
            scan_dir=Path(args.scan_dir),
            prediction_file=args.prediction_file,
            param_file=args.param_file,
            bin_list=Path(args.bin_list),
            order=args.order,
            n_test=args.n_test,
            output=Path(args.output),
            include_header=args.include_header,
        )
        IpolFactory(config).run()
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        parser.print_usage(sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except DataIntegrityError as e:
        logger.error("Data error: %s", e)
        return EXIT_DATA_ERROR
    except FitError as e:
        logger.error("Fit error: %s", e)
        return EXIT_FIT_ERROR
    except IpolFactoryError as e:
        logger.error("%s", e)
        return EXIT_DATA_ERROR
    return EXIT_OK


def build_list_bins_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipol-list-bins",
        description="List every '<histogram>#<bin>' of a histogram file, for use as a bin list.",
    )
    parser.add_argument("--input", "-i", required=True, help="histogram file (required)")
    parser.add_argument("--output", "-o", default="out.txt", help="output file (default: out.txt)")
    parser.add_argument("--log-level", default=cfg.LOG_LEVEL,
                        choices=cfg.LOG_LEVELS, type=str.upper)
    return parser


def list_bins_main(argv=None) -> int:
    args = build_list_bins_parser().parse_args(argv)
    _setup_logging(args.log_level)

    try:
        bins = list_bins(args.input)
    except DataIntegrityError as e:
        logger.error("Error opening input file: %s", e)
        return 1

    Path(args.output).write_text("".join(f"{b}\n" for b in bins), encoding='utf-8')
    logger.info("%d bins written to %s", len(bins), args.output)
    return EXIT_OK


def run():
    sys.exit(main())


def run_list_bins():
    sys.exit(list_bins_main())


if __name__ == "__main__":
    run()
