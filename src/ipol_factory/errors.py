"""
Exceptions raised by the ipol-factory pipeline.

Every stage raises; only the command line entry point turns an
``IpolFactoryError`` into an exit status.
"""


class IpolFactoryError(Exception):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(IpolFactoryError):
    """Invalid or missing user input, detected before any data is processed."""


class DataIntegrityError(IpolFactoryError):
    """A run's data cannot be used (missing file, series, bin or bad value)."""


class StoreNotFoundError(DataIntegrityError):
    def __init__(self, store_path, reason=""):
        self.store_path = str(store_path)
        message = f"Could not open histogram store {self.store_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MissingSeriesError(DataIntegrityError):
    def __init__(self, series_name: str, store_path):
        self.series_name = series_name
        self.store_path = str(store_path)
        super().__init__(f"Histogram {series_name} not found in file {self.store_path}")


class MissingBinError(DataIntegrityError):
    def __init__(self, series_name: str, bin_index: int, n_bins: int, store_path):
        self.series_name = series_name
        self.bin_index = bin_index
        self.n_bins = n_bins
        self.store_path = str(store_path)
        super().__init__(
            f"Bin {bin_index} out of range for histogram {series_name} "
            f"({n_bins} bins) in file {self.store_path}"
        )


class InvalidValueError(DataIntegrityError):
    def __init__(self, value: float, series_name: str, store_path):
        self.value = value
        self.series_name = series_name
        self.store_path = str(store_path)
        super().__init__(
            f"Invalid value {value} for histogram {series_name} in file {self.store_path}"
        )


class FitError(IpolFactoryError):
    """The polynomial could not be fitted with the requested order."""
