"""Polynomial surrogate models and the order selection."""

from .ipol import Ipol, num_coeffs
from .selector import SelectionResult, build_ipol, select_ipols, select_order

__all__ = ["Ipol", "SelectionResult", "build_ipol", "num_coeffs", "select_ipols", "select_order"]
