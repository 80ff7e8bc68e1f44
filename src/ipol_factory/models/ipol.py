"""
Polynomial interpolation ("ipol") of one observable bin over the parameter space.

The parameters are mapped onto [0, 1] with the bounds of the training space,
expanded into monomials with sklearn's PolynomialFeatures and the
coefficients solved with numpy's least squares.
"""
from math import comb
from typing import Sequence

import numpy as np
from sklearn.preprocessing import PolynomialFeatures

from ..errors import FitError
from ..preprocessing.processor import ParameterSpace, fit_param_scaler

NUMBER_FORMAT = "%.12g"


def format_number(value: float) -> str:
    return NUMBER_FORMAT % value


def num_coeffs(dim: int, order: int) -> int:
    """Number of monomials of degree <= order in dim variables."""
    return comb(dim + order, order)


class Ipol:
    """
    A fitted polynomial. Build it with ``Ipol.fit`` or ``Ipol.from_string``.
    """

    def __init__(self, coeffs, order: int, mins, maxs, name: str = ""):
        self.coeffs = np.asarray(coeffs, dtype=float).ravel()
        self.order = int(order)
        self.mins = np.asarray(mins, dtype=float).ravel()
        self.maxs = np.asarray(maxs, dtype=float).ravel()
        self.name = name

        if self.mins.shape != self.maxs.shape:
            raise ValueError("mins and maxs must have the same length.")
        expected = num_coeffs(self.dim, self.order)
        if len(self.coeffs) != expected:
            raise ValueError(
                f"Expected {expected} coefficients for dim={self.dim}, order={self.order}, "
                f"got {len(self.coeffs)}."
            )

        self._scaler = fit_param_scaler(self.mins, self.maxs)
        self._features = PolynomialFeatures(degree=self.order).fit(np.zeros((1, self.dim)))

    @property
    def dim(self) -> int:
        return len(self.mins)

    @classmethod
    def fit(cls, space: ParameterSpace, values: Sequence[float], order: int, name: str = "") -> "Ipol":
        """
        Fits the polynomial of the given order through the training points.

        Args:
            space (ParameterSpace): Training points and bounds.
            values: One observed value per training point.
            order (int): Polynomial order.
            name (str): Identifier carried by the model.

        Raises:
            FitError: if the order is negative or there are fewer points than
                      coefficients.
        """
        values = np.asarray(values, dtype=float).ravel()
        if order < 0:
            raise FitError(f"{name}: polynomial order must be >= 0, got {order}.")
        if len(values) != space.n_points:
            raise FitError(
                f"{name}: got {len(values)} values for {space.n_points} parameter points."
            )
        n_coeffs = num_coeffs(space.dim, order)
        if space.n_points < n_coeffs:
            raise FitError(
                f"{name}: too few points to fit order {order} in {space.dim} dimensions "
                f"({space.n_points} points, {n_coeffs} coefficients needed)."
            )

        features = PolynomialFeatures(degree=order)
        design = features.fit_transform(space.scaler().transform(space.points))
        coeffs, _, _, _ = np.linalg.lstsq(design, values, rcond=None)
        return cls(coeffs, order, space.mins, space.maxs, name=name)

    def evaluate_many(self, points) -> np.ndarray:
        points = np.atleast_2d(np.asarray(points, dtype=float))
        if points.shape[1] != self.dim:
            raise ValueError(f"Expected points of dimension {self.dim}, got {points.shape[1]}.")
        return self._features.transform(self._scaler.transform(points)) @ self.coeffs

    def evaluate(self, point) -> float:
        return float(self.evaluate_many(np.reshape(np.asarray(point, dtype=float), (1, -1)))[0])

    def render(self, var: str = "") -> str:
        """
        '<var>: <dim> <order> <coefficients...>'. Without ``var`` the model's
        own name is used as the label.
        """
        label = var or self.name
        fields = [str(self.dim), str(self.order)] + [format_number(c) for c in self.coeffs]
        body = " ".join(fields)
        return f"{label}: {body}" if label else body

    @classmethod
    def from_string(cls, line: str, name: str = "") -> "Ipol":
        """
        Parses a rendered ipol followed by its parameter bounds:
        '<label>: <dim> <order> <coefficients...> <mins...> <maxs...>'.
        """
        label, sep, rest = line.partition(':')
        tokens = (rest if sep else label).split()
        if len(tokens) < 2:
            raise ValueError(f"Not an ipol line: '{line.strip()}'")

        dim, order = int(tokens[0]), int(tokens[1])
        numbers = [float(t) for t in tokens[2:]]
        n_coeffs = num_coeffs(dim, order)
        if len(numbers) != n_coeffs + 2 * dim:
            raise ValueError(
                f"Expected {n_coeffs} coefficients and {2 * dim} bounds, got {len(numbers)} numbers."
            )
        coeffs = numbers[:n_coeffs]
        mins = numbers[n_coeffs:n_coeffs + dim]
        maxs = numbers[n_coeffs + dim:]
        return cls(coeffs, order, mins, maxs, name=name or (label.strip() if sep else ""))

    def __repr__(self):
        return f"Ipol(name={self.name!r}, dim={self.dim}, order={self.order})"
