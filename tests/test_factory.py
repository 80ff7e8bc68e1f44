import numpy as np
import pytest

from ipol_factory.config import IpolConfig, make_config
from ipol_factory.errors import ConfigurationError, MissingSeriesError
from ipol_factory.factory import IpolFactory
from ipol_factory.writers.ipol_writer import read_ipol_file


@pytest.fixture
def bin_list(tmp_path):
    path = tmp_path / "bin.list"
    path.write_text("/h#0\n/h#1\nnot a bin\n/dir/g#0\n")
    return path


def _config(scan_dir, bin_list, tmp_path, **kwargs):
    return make_config(scan_dir=scan_dir, bin_list=bin_list, output=tmp_path / "output.ipol", **kwargs)


def test_factory_requires_config():
    with pytest.raises(ConfigurationError):
        IpolFactory("not a config")


def test_make_config_invalid_scan_dir(tmp_path):
    with pytest.raises(ConfigurationError, match="not a valid directory"):
        make_config(scan_dir=tmp_path / "missing")


def test_make_config_negative_n_test(tmp_path):
    with pytest.raises(ConfigurationError, match="n_test"):
        make_config(scan_dir=tmp_path, n_test=-1)


def test_config_defaults(tmp_path):
    config = make_config(scan_dir=tmp_path)

    assert isinstance(config, IpolConfig)
    assert config.prediction_file == "prediction.root"
    assert config.param_file == "params.dat"
    assert config.order == 4
    assert config.n_test == 0
    assert config.include_header is True


def test_full_workflow_without_held_out_runs(quadratic_scan, bin_list, tmp_path):
    config = _config(quadratic_scan, bin_list, tmp_path, order=3, n_test=0)

    factory = IpolFactory(config)
    output = factory.run()

    assert factory.matrix.shape == (3, 5)
    assert [s.order for s in factory.selections] == [3, 3, 3]

    header, ipols = read_ipol_file(output)
    assert header["ParamNames"] == ["x"]
    assert header["MinParamVals"] == [0.0]
    assert header["MaxParamVals"] == [4.0]
    assert list(ipols) == ["/h#0", "/h#1", "/dir/g#0"]
    for x in [0.0, 1.0, 2.0, 3.0, 4.0]:
        assert ipols["/h#0"].evaluate([x]) == pytest.approx(x ** 2, abs=1e-6)


def test_full_workflow_with_held_out_run(quadratic_scan, bin_list, tmp_path):
    config = _config(quadratic_scan, bin_list, tmp_path, order=3, n_test=1)

    factory = IpolFactory(config).load_data()

    assert factory.space.n_points == 4
    assert np.allclose(factory.test_points, [[0.0]])

    factory.train()
    output = factory.save()

    assert factory.selections[0].order >= 2
    assert factory.selections[0].ipol.evaluate([0.0]) == pytest.approx(0.0, abs=1e-6)

    # Bounds come from the training runs only (x = 1..4).
    header, _ = read_ipol_file(output)
    assert header["MinParamVals"] == [1.0]
    assert header["MaxParamVals"] == [4.0]
    assert header["Dimension"] == 1


def test_no_header(quadratic_scan, bin_list, tmp_path):
    config = _config(quadratic_scan, bin_list, tmp_path, order=1, include_header=False)

    output = IpolFactory(config).run()

    lines = output.read_text().splitlines()
    assert lines[0] == "/h#0 0 1"
    assert len(lines) == 9


def test_missing_series_writes_nothing(make_scan, bin_list, tmp_path):
    histograms = [{"h": [1.0, 2.0], "dir/g": [1.0]}, {"h": [1.0, 2.0]}, {"h": [1.0, 2.0], "dir/g": [1.0]}]
    scan_dir = make_scan([[0.0], [1.0], [2.0]], histograms)
    config = _config(scan_dir, bin_list, tmp_path, order=1)

    with pytest.raises(MissingSeriesError, match="run001"):
        IpolFactory(config).run()

    assert not (tmp_path / "output.ipol").exists()


def test_all_runs_held_out(quadratic_scan, bin_list, tmp_path):
    config = _config(quadratic_scan, bin_list, tmp_path, n_test=5)

    with pytest.raises(ConfigurationError):
        IpolFactory(config).load_data()


def test_save_before_train_with_empty_bin_list(quadratic_scan, tmp_path):
    empty_bin_list = tmp_path / "empty.list"
    empty_bin_list.write_text("no bins here\n")
    factory = IpolFactory(_config(quadratic_scan, empty_bin_list, tmp_path))

    with pytest.raises(RuntimeError, match="call train"):
        factory.to_document()

    factory.load_data()
    assert factory.bins == []
    with pytest.raises(RuntimeError, match="call train"):
        factory.save()

    assert not (tmp_path / "output.ipol").exists()
