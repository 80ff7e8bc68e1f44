"""
Metrics used to score candidate ipols against held-out runs.
"""
import numpy as np


def calculate_ssr(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Sum of squared residuals. Lower is better; 0.0 for empty inputs.
    """
    residuals = np.asarray(y_pred, dtype=float) - np.asarray(y_true, dtype=float)
    return float(np.sum(residuals ** 2))
