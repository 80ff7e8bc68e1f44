"""
Read access to the per-run histogram stores (ROOT files) through uproot.
"""
import logging
from pathlib import Path
from typing import Dict, List

import numpy as np
import uproot

from ..errors import DataIntegrityError, MissingBinError, MissingSeriesError, StoreNotFoundError

logger = logging.getLogger(__name__)

# Class prefix of the objects bin_content accepts as a bin series.
HISTOGRAM_CLASS_PREFIX = "TH1"

# Histogram classes enumerated by list_bins.
LISTED_CLASSNAMES = ("TH1D",)


class HistogramStore:
    """
    One open ROOT file. Use it as a context manager so the file handle is
    released as soon as the run has been read.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._file = None
        self._values_cache: Dict[str, np.ndarray] = {}

    def open(self):
        try:
            self._file = uproot.open(self.path)
        except (OSError, ValueError) as e:
            raise StoreNotFoundError(self.path, str(e)) from e
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
        self._values_cache = {}

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _bin_values(self, name: str) -> np.ndarray:
        if name in self._values_cache:
            return self._values_cache[name]
        if self._file is None:
            raise RuntimeError(f"Store {self.path} is not open.")

        # uproot paths are relative to the file's top directory.
        key = name.lstrip('/')
        try:
            hist = self._file[key]
        except KeyError:
            raise MissingSeriesError(name, self.path) from None
        if not getattr(hist, 'classname', '').startswith(HISTOGRAM_CLASS_PREFIX):
            raise MissingSeriesError(name, self.path)

        try:
            values = np.asarray(hist.values(), dtype=float)
        except (TypeError, ValueError, uproot.DeserializationError) as e:
            raise DataIntegrityError(f"Could not read histogram {name} in file {self.path}: {e}") from e
        self._values_cache[name] = values
        return values

    def bin_content(self, name: str, index: int) -> float:
        """
        Content of regular bin ``index`` (0-based, under/overflow excluded)
        of histogram ``name``.
        """
        values = self._bin_values(name)
        if values.ndim != 1 or not 0 <= index < len(values):
            raise MissingBinError(name, index, values.shape[0] if values.ndim else 0, self.path)
        return float(values[index])

    def list_bins(self) -> List[str]:
        """Every '/<path>#<bin>' identifier of the 1D histograms in the store."""
        if self._file is None:
            raise RuntimeError(f"Store {self.path} is not open.")

        classnames = self._file.classnames(recursive=True, cycle=False)
        identifiers = []
        for key in sorted(classnames):
            if classnames[key] not in LISTED_CLASSNAMES:
                continue
            n_bins = len(self._file[key].values())
            identifiers.extend(f"/{key}#{i}" for i in range(n_bins))
        return identifiers


def open_store(path) -> HistogramStore:
    """Returns an unopened store; enter it with ``with open_store(path) as store``."""
    return HistogramStore(path)


def list_bins(store_path) -> List[str]:
    """
    Enumerates the bin identifiers of one histogram store, the producer of
    a bin list.
    """
    with open_store(store_path) as store:
        bins = store.list_bins()
    logger.info("Found %d bins in %s", len(bins), store_path)
    return bins
