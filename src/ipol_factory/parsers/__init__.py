"""Readers for run directories, bin lists and histogram stores."""

from .bin_list_parser import BinDescriptor, bin_identifier, read_bin_list
from .histogram_store import HistogramStore, list_bins, open_store
from .run_parser import load_runs, read_param_names, read_params

__all__ = [
    "BinDescriptor",
    "HistogramStore",
    "bin_identifier",
    "list_bins",
    "load_runs",
    "open_store",
    "read_bin_list",
    "read_param_names",
    "read_params",
]
