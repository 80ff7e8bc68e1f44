import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from .config import IpolConfig
from .errors import ConfigurationError
from .parsers.bin_list_parser import BinDescriptor, read_bin_list
from .parsers.histogram_store import open_store
from .parsers.run_parser import load_runs, read_param_names
from .preprocessing.processor import ParameterSpace, build_parameter_space, extract_observable_matrix
from .models.ipol import Ipol
from .models.selector import SelectionResult, select_ipols
from .writers.ipol_writer import format_ipol_document, write_ipol_file

logger = logging.getLogger(__name__)


class IpolFactory:
    """
    Builds one ipol per bin from a directory of simulation runs.

    The stages run in order and each one keeps its result on the factory:
    ``load_data`` (runs, bins, parameter space), ``train`` (observable matrix,
    selected ipols) and ``save`` (the ipol file).
    """

    def __init__(self, config: IpolConfig):

        if not isinstance(config, IpolConfig):
            raise ConfigurationError("config must be an IpolConfig (see config.make_config)")

        self.config = config

        self.run_table: Optional[pd.DataFrame] = None
        self.bins: List[BinDescriptor] = []
        self.space: Optional[ParameterSpace] = None
        self.test_points: Optional[np.ndarray] = None

        self.matrix: Optional[np.ndarray] = None
        self.selections: List[SelectionResult] = []

    @property
    def ipols(self) -> List[Ipol]:
        return [selection.ipol for selection in self.selections]

    def load_data(self):
        """
        Scans the run directories, reads the bin list and builds the
        training parameter space.
        """
        cfg = self.config
        logger.info("Scanning %s", cfg.scan_dir)

        self.run_table = load_runs(cfg.scan_dir, cfg.param_file)
        names = read_param_names(self.run_table['run_path'].iloc[0] / cfg.param_file)
        self.space, self.test_points = build_parameter_space(self.run_table, cfg.n_test, names)

        self.bins = read_bin_list(cfg.bin_list)
        logger.info("Read %d bins from %s", len(self.bins), cfg.bin_list)
        return self

    def store_paths(self) -> List[Path]:
        if self.run_table is None:
            raise RuntimeError("Data not loaded, call load_data()")
        return [Path(run_path) / self.config.prediction_file for run_path in self.run_table['run_path']]

    def train(self, store_opener=open_store, fit=Ipol.fit):
        """
        Extracts the observable matrix and selects one ipol per bin.
        """
        if self.space is None:
            raise RuntimeError("Data not loaded, call load_data()")

        self.matrix = extract_observable_matrix(self.store_paths(), self.bins, store_opener)
        self.selections = select_ipols(
            self.space, self.matrix, self.bins, self.config.order, self.test_points, fit
        )

        if len(self.test_points) > 0:
            orders = pd.Series([s.order for s in self.selections], dtype=int)
            logger.info("Selected orders: %s", orders.value_counts().sort_index().to_dict())
        return self

    def to_document(self) -> str:
        if self.space is None or self.matrix is None:
            raise RuntimeError("No ipols selected, call train()")
        return format_ipol_document(self.space, self.bins, self.ipols, self.config.include_header)

    def save(self, file_path=None) -> Path:
        """
        Writes the ipol file (defaults to the configured output path).
        """
        return write_ipol_file(file_path or self.config.output, self.to_document())

    def run(self) -> Path:
        return self.load_data().train().save()
