"""
Parser for the run directories of a parameter scan.

Each run lives in its own subdirectory of the scan directory and carries a
parameter file with one ``<name> <value>`` pair per line.
"""
import logging
from pathlib import Path
from typing import List

import pandas as pd

from ..errors import ConfigurationError, DataIntegrityError

logger = logging.getLogger(__name__)


def scan_run_directories(scan_dir: Path) -> List[Path]:
    """
    Lists the run directories directly under ``scan_dir``.

    The directory listing order depends on the filesystem, and the held-out
    runs are the first ones of this list, so it is sorted by name.
    """
    scan_dir = Path(scan_dir)
    if not scan_dir.is_dir():
        raise ConfigurationError(f"{scan_dir} is not a valid directory.")
    return sorted((entry for entry in scan_dir.iterdir() if entry.is_dir()), key=lambda p: p.name)


def read_params(param_file: Path) -> List[float]:
    """
    Reads the parameter values of one run.

    Lines with fewer than two tokens are skipped, tokens after the value are
    ignored. The line order is the axis order.
    """
    params = []
    with open(param_file, 'r', encoding='UTF-8') as f:
        for line_number, line in enumerate(f, start=1):
            tokens = line.split()
            if len(tokens) < 2:
                continue
            try:
                params.append(float(tokens[1]))
            except ValueError:
                raise DataIntegrityError(
                    f"Invalid parameter value '{tokens[1]}' in {param_file}:{line_number}"
                ) from None
    return params


def read_param_names(param_file: Path) -> List[str]:
    """Reads the first token of every non-blank line of a parameter file."""
    with open(param_file, 'r', encoding='UTF-8') as f:
        return [line.split()[0] for line in f if line.split()]


def load_runs(scan_dir: Path, param_filename: str) -> pd.DataFrame:
    """
    Reads the parameter vector of every run under ``scan_dir``.

    Args:
        scan_dir (Path): Directory containing one subdirectory per run.
        param_filename (str): Name of the parameter file inside each run.

    Returns:
        A DataFrame with one row per run, in run order, with the columns
        'run_id', 'run_path' and one column per parameter axis ('p0', 'p1', ...).
    """
    run_dirs = scan_run_directories(scan_dir)
    if not run_dirs:
        raise ConfigurationError(f"No run directories found in {scan_dir}.")

    rows = []
    dimension = None
    for run_dir in run_dirs:
        param_path = run_dir / param_filename
        if not param_path.is_file():
            raise DataIntegrityError(f"Parameter file {param_path} not found.")

        params = read_params(param_path)
        if dimension is None:
            dimension = len(params)
            if dimension == 0:
                raise DataIntegrityError(f"No parameters found in {param_path}.")
        elif len(params) != dimension:
            raise DataIntegrityError(
                f"{param_path} has {len(params)} parameters, expected {dimension}."
            )

        row = {'run_id': run_dir.name, 'run_path': run_dir}
        row.update({f"p{i}": value for i, value in enumerate(params)})
        rows.append(row)

    logger.info("Found %d parameter files in directory %s", len(rows), scan_dir)
    return pd.DataFrame(rows)


def param_columns(run_table: pd.DataFrame) -> List[str]:
    """Names of the parameter columns of a run table, in axis order."""
    return [col for col in run_table.columns if col not in ('run_id', 'run_path')]
