"""Tests for the ipol-build and ipol-list-bins entry points."""

import pytest

from ipol_factory.config import resolve_log_level
from ipol_factory.cli import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_DATA_ERROR,
    EXIT_FIT_ERROR,
    EXIT_OK,
    list_bins_main,
    main,
)


@pytest.fixture
def bin_list(tmp_path):
    path = tmp_path / "bin.list"
    path.write_text("/h#0\n/h#1\n")
    return path


def _argv(scan_dir, bin_list, output, *extra):
    return ["-s", str(scan_dir), "-b", str(bin_list), "-o", str(output), *extra]


def test_build(quadratic_scan, bin_list, tmp_path):
    output = tmp_path / "output.ipol"

    status = main(_argv(quadratic_scan, bin_list, output, "--order", "2", "--n-test", "1"))

    assert status == EXIT_OK
    lines = output.read_text().splitlines()
    assert lines[:5] == [
        "ParamNames: x",
        "MinParamVals: 1",
        "MaxParamVals: 4",
        "Dimension: 1",
        "---",
    ]
    assert lines[5] == "/h#0 0 1"
    assert lines[6].startswith("  var: 1 2 ")
    assert lines[7] == "  err: 1 0 0 1 4"


def test_build_without_header(quadratic_scan, bin_list, tmp_path):
    output = tmp_path / "output.ipol"

    status = main(_argv(quadratic_scan, bin_list, output, "--order", "1", "--no-include-header"))

    assert status == EXIT_OK
    assert output.read_text().startswith("/h#0 0 1\n")


def test_missing_scan_dir_argument():
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code != 0


def test_invalid_scan_dir(tmp_path, bin_list, capsys):
    output = tmp_path / "output.ipol"

    status = main(_argv(tmp_path / "missing", bin_list, output))

    assert status == EXIT_CONFIGURATION_ERROR
    assert "usage:" in capsys.readouterr().err
    assert not output.exists()


def test_missing_series(make_scan, tmp_path):
    scan_dir = make_scan([[0.0], [1.0], [2.0]], [{"h": [1.0]}, {"g": [1.0]}, {"h": [3.0]}])
    bin_list = tmp_path / "bin.list"
    bin_list.write_text("/h#0\n")
    output = tmp_path / "output.ipol"

    status = main(_argv(scan_dir, bin_list, output, "--order", "1"))

    assert status == EXIT_DATA_ERROR
    assert not output.exists()


def test_order_too_high(quadratic_scan, bin_list, tmp_path):
    output = tmp_path / "output.ipol"

    status = main(_argv(quadratic_scan, bin_list, output, "--order", "6"))

    assert status == EXIT_FIT_ERROR
    assert not output.exists()


def test_list_bins(tmp_path, write_store):
    store = write_store(tmp_path / "prediction.root", {"h": [1.0, 2.0], "dir/g": [3.0]})
    output = tmp_path / "bins.txt"

    status = list_bins_main(["-i", str(store), "-o", str(output)])

    assert status == EXIT_OK
    assert output.read_text() == "/dir/g#0\n/h#0\n/h#1\n"


def test_list_bins_unreadable_input(tmp_path):
    status = list_bins_main(["-i", str(tmp_path / "missing.root"), "-o", str(tmp_path / "bins.txt")])

    assert status == 1


def test_bin_list_naming_a_directory(quadratic_scan, tmp_path):
    bin_list = tmp_path / "bin.list"
    bin_list.write_text("/dir#0\n")
    output = tmp_path / "output.ipol"

    status = main(_argv(quadratic_scan, bin_list, output, "--order", "1"))

    assert status == EXIT_DATA_ERROR
    assert not output.exists()


@pytest.mark.parametrize("value, expected", [
    ("debug", "DEBUG"),
    ("WARNING", "WARNING"),
    ("TRACE", "INFO"),
    (None, "INFO"),
    ("", "INFO"),
])
def test_resolve_log_level(value, expected):
    assert resolve_log_level(value) == expected
