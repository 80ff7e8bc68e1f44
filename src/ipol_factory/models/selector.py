"""
Choice of the polynomial order of each bin by scoring against held-out runs.
"""
import logging
from collections import namedtuple
from typing import Callable, List, Sequence

import numpy as np

from ..evaluation.metrics import calculate_ssr
from ..parsers.bin_list_parser import BinDescriptor, bin_identifier
from ..preprocessing.processor import ParameterSpace
from .ipol import Ipol

logger = logging.getLogger(__name__)

SelectionResult = namedtuple("SelectionResult", ["ipol", "order", "score"])


def select_order(
    space: ParameterSpace,
    values: Sequence[float],
    order: int,
    name: str,
    test_points: Sequence = (),
    fit: Callable = Ipol.fit
) -> SelectionResult:
    """
    Fits one bin and keeps the order that best predicts the held-out runs.

    ``values`` covers every run in run order: the first ``len(test_points)``
    entries are the held-out truth, the rest the training values.

    Without held-out points a single ipol of order ``order`` is fitted on all
    values (score None). Otherwise orders 0..order are fitted on the training
    values, each scored by its sum of squared residuals on the held-out runs,
    and the lowest score wins; on equal scores the lower order is kept.
    """
    values = np.asarray(values, dtype=float)
    n_test = len(test_points)

    if n_test == 0:
        return SelectionResult(ipol=fit(space, values, order, name), order=order, score=None)

    test_values = values[:n_test]
    train_values = values[n_test:]

    best = None
    smallest_error = float('inf')
    for candidate_order in range(order + 1):
        candidate = fit(space, train_values, candidate_order, name)
        predictions = [candidate.evaluate(point) for point in test_points]
        error = calculate_ssr(test_values, predictions)
        logger.debug("%s: order %d scored %g", name, candidate_order, error)

        if best is None or error < smallest_error:
            smallest_error = error
            best = SelectionResult(ipol=candidate, order=candidate_order, score=error)

    if best is None:
        # order < 0: nothing was swept, let the fitter report it.
        return SelectionResult(ipol=fit(space, train_values, order, name), order=order, score=None)
    return best


def build_ipol(
    space: ParameterSpace,
    values: Sequence[float],
    order: int,
    name: str,
    test_points: Sequence = (),
    fit: Callable = Ipol.fit
):
    """The selected ipol of one bin (see select_order)."""
    return select_order(space, values, order, name, test_points, fit).ipol


def select_ipols(
    space: ParameterSpace,
    matrix: np.ndarray,
    bins: Sequence[BinDescriptor],
    order: int,
    test_points: Sequence = (),
    fit: Callable = Ipol.fit
) -> List[SelectionResult]:
    """
    Runs the order selection for every bin of the observable matrix.

    Args:
        space (ParameterSpace): Training parameter space.
        matrix (np.ndarray): Bin-major values, shape (len(bins), n_runs).
        bins: The bins, in the matrix's row order.
        order (int): Maximum polynomial order.
        test_points: Held-out parameter points, shape (n_test, dim).

    Returns:
        One SelectionResult per bin, in bin order.
    """
    if len(bins) != matrix.shape[0]:
        raise ValueError(f"Got {len(bins)} bins for a matrix of {matrix.shape[0]} rows.")

    results = []
    for bin_descriptor, row in zip(bins, matrix):
        result = select_order(space, row, order, bin_identifier(bin_descriptor), test_points, fit)
        logger.debug("%s: selected order %d", bin_identifier(bin_descriptor), result.order)
        results.append(result)
    return results
