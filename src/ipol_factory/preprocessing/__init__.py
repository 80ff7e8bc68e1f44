"""Parameter space assembly and observable extraction."""

from .processor import (
    ParameterSpace,
    build_parameter_space,
    extract_observable_matrix,
    fit_param_scaler,
    split_runs,
)

__all__ = [
    "ParameterSpace",
    "build_parameter_space",
    "extract_observable_matrix",
    "fit_param_scaler",
    "split_runs",
]
