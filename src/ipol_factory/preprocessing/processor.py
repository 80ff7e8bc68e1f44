"""
Preprocessing: parameter space assembly and observable extraction.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from ..errors import ConfigurationError, InvalidValueError
from ..parsers.bin_list_parser import BinDescriptor
from ..parsers.histogram_store import open_store
from ..parsers.run_parser import param_columns

logger = logging.getLogger(__name__)


def fit_param_scaler(mins: Sequence[float], maxs: Sequence[float]) -> MinMaxScaler:
    """
    MinMaxScaler mapping the box [mins, maxs] onto [0, 1]. Axes of zero
    width are only shifted.
    """
    scaler = MinMaxScaler()
    scaler.fit(np.vstack([np.asarray(mins, dtype=float), np.asarray(maxs, dtype=float)]))
    return scaler


@dataclass(frozen=True, eq=False)
class ParameterSpace:
    """The training parameter points and their per-axis bounds."""

    points: np.ndarray
    names: List[str] = field(default_factory=list)

    def __post_init__(self):
        points = np.atleast_2d(np.asarray(self.points, dtype=float))
        if points.shape[0] == 0:
            raise ConfigurationError("The parameter space has no training points.")
        points.setflags(write=False)
        object.__setattr__(self, 'points', points)

    @property
    def dim(self) -> int:
        return self.points.shape[1]

    @property
    def n_points(self) -> int:
        return self.points.shape[0]

    @property
    def mins(self) -> np.ndarray:
        return self.points.min(axis=0)

    @property
    def maxs(self) -> np.ndarray:
        return self.points.max(axis=0)

    def scaler(self) -> MinMaxScaler:
        return fit_param_scaler(self.mins, self.maxs)


def split_runs(run_table: pd.DataFrame, n_test: int) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Splits the runs into (train, test): the first ``n_test`` runs are held out.
    """
    n_runs = len(run_table)
    if n_test < 0:
        raise ConfigurationError(f"n_test must be >= 0, got {n_test}.")
    if n_test >= n_runs:
        raise ConfigurationError(
            f"n_test={n_test} leaves no training runs out of {n_runs} runs."
        )
    train = run_table.iloc[n_test:].reset_index(drop=True)
    test = run_table.iloc[:n_test].reset_index(drop=True)
    return train, test


def build_parameter_space(
    run_table: pd.DataFrame,
    n_test: int,
    names: List[str] = None
) -> Tuple[ParameterSpace, np.ndarray]:
    """
    Builds the parameter space from the training runs.

    Args:
        run_table (pd.DataFrame): Runs in run order, as returned by load_runs.
        n_test (int): Number of leading runs held out for order selection.
        names (List[str], optional): Parameter names for the header. Defaults
                                    to the run table's parameter columns.

    Returns:
        A tuple:
        1. the ParameterSpace of the training runs;
        2. the held-out points, array of shape (n_test, dim).
    """
    columns = param_columns(run_table)
    train, test = split_runs(run_table, n_test)

    if names is None:
        names = list(columns)
    elif len(names) != len(columns):
        logger.warning(
            "Got %d parameter names for %d parameters: %s", len(names), len(columns), names
        )

    space = ParameterSpace(points=train[columns].to_numpy(dtype=float), names=list(names))
    test_points = test[columns].to_numpy(dtype=float).reshape(len(test), len(columns))

    logger.info("%d runs for training, %d runs held out.", space.n_points, len(test_points))
    return space, test_points


def extract_observable_matrix(
    store_paths: Sequence,
    bins: Sequence[BinDescriptor],
    store_opener: Callable = open_store
) -> np.ndarray:
    """
    Reads every requested bin from every run into a bin-major matrix.

    Each store is opened once and closed before the next one, so only one
    file is open at any time whatever the number of runs or bins.

    Args:
        store_paths: Histogram store of each run, in run order.
        bins: The bins to read, in bin-list order.
        store_opener: Callable returning a context manager with a
                      ``bin_content(name, index)`` method.

    Returns:
        A read-only array of shape (len(bins), len(store_paths)), [bin][run].
    """
    matrix = np.empty((len(bins), len(store_paths)), dtype=float)

    for col, store_path in enumerate(store_paths):
        with store_opener(store_path) as store:
            for row, bin_descriptor in enumerate(bins):
                value = store.bin_content(bin_descriptor.name, bin_descriptor.index)
                if not np.isfinite(value):
                    raise InvalidValueError(value, bin_descriptor.name, store_path)
                matrix[row, col] = value
        logger.debug("Read %d bins from %s", len(bins), store_path)

    matrix.setflags(write=False)
    logger.info("Extracted %d bins from %d runs.", len(bins), len(store_paths))
    return matrix
