"""Model evaluation metrics."""

from .metrics import calculate_ssr

__all__ = ["calculate_ssr"]
