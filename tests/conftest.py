"""Shared pytest configuration and fixtures."""

import logging

import numpy as np
import pytest
import uproot

# Surface all log output during tests so failures are easy to diagnose.
logging.basicConfig(level=logging.DEBUG)


def _write_store(path, histograms):
    """Writes {name: bin contents} as TH1D histograms with unit-width bins."""
    with uproot.recreate(path) as f:
        for name, counts in histograms.items():
            counts = np.asarray(counts, dtype=float)
            f[name] = (counts, np.arange(len(counts) + 1, dtype=float))
    return path


@pytest.fixture
def write_store():
    return _write_store


@pytest.fixture
def make_scan(tmp_path):
    """
    Creates a scan directory with one run per parameter vector. Runs are named
    run000, run001, ... in the order given.
    """
    def _make(param_vectors, histograms_per_run, names=("x",),
              param_file="params.dat", store_file="prediction.root"):
        scan_dir = tmp_path / "scan"
        scan_dir.mkdir(exist_ok=True)
        for i, (params, histograms) in enumerate(zip(param_vectors, histograms_per_run)):
            run_dir = scan_dir / f"run{i:03d}"
            run_dir.mkdir()
            lines = "".join(f"{name} {value}\n" for name, value in zip(names, params))
            (run_dir / param_file).write_text(lines)
            _write_store(run_dir / store_file, histograms)
        return scan_dir

    return _make


@pytest.fixture
def quadratic_scan(make_scan):
    """Five 1D runs at x = 0..4 with histogram h = [x^2, 2x + 1] and dir/g = [x]."""
    xs = [0.0, 1.0, 2.0, 3.0, 4.0]
    histograms = [{"h": [x ** 2, 2 * x + 1], "dir/g": [x]} for x in xs]
    return make_scan([[x] for x in xs], histograms)
