import json
import os

import pytest
from click.testing import CliRunner

from ms_rawscan.data_source.memory import MemoryRun, MemoryScan
from ms_rawscan.tools import cli as tool
from ms_rawscan.tools.utils import is_debug_mode
from ms_rawscan.test.common import touch, survey_scan, dda_run


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MS_RAWSCAN_CONFIGDIR", str(tmp_path / "config"))


def test_describe(tmp_path):
    runner = CliRunner()
    path = touch(tmp_path)
    result = runner.invoke(tool.cli, ['describe', path], obj={"opener": dda_run(4, 2)})
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "run.raw" in lines[0]
    assert lines[1] == "First Scan: 1"
    assert lines[2] == "Last Scan: 12"
    assert lines[3] == "Scan Count: 12"
    assert lines[4] == "MS1 Scans: 4"
    assert lines[5] == "MS2 Scans: 8"


def test_scan(tmp_path):
    runner = CliRunner()
    path = touch(tmp_path)
    result = runner.invoke(tool.cli, ['scan', path, '2'], obj={"opener": dda_run(2, 2)})
    assert result.exit_code == 0, result.output
    assert "ID: controllerType=0 controllerNumber=1 scan=2" in result.output
    assert "MS Level: 2" in result.output
    assert "Precursor Scan: 1" in result.output
    assert "Precursor Charge: 2" in result.output

    result = runner.invoke(tool.cli, ['scan', path, '99'], obj={"opener": dda_run(2, 2)})
    assert result.exit_code != 0
    assert "Scan 99 is not in" in result.output


def test_extract(tmp_path):
    runner = CliRunner()
    path = touch(tmp_path)
    run = dda_run(5, 3)
    result = runner.invoke(tool.cli, ['extract', path, '-p', '3', '-k', '1'], obj={"opener": run})
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].split("\t")[0] == "index"
    rows = [line.split("\t") for line in lines[1:]]
    assert [int(row[0]) for row in rows] == list(range(1, 21))
    assert all(row[3] == "1" for row in rows)
    assert rows[0][5] == "-"
    assert rows[1][5] == "1"
    assert run.open_handles() == []


def test_extract_uses_configured_filter(tmp_path, monkeypatch):
    confdir = tmp_path / "config"
    confdir.mkdir()
    with open(str(confdir / "config.json"), 'wt') as fh:
        json.dump({"extraction": {"max_parallelism": 1,
                                  "peak_filter": {"peaks_to_keep_per_window": 1}}}, fh)
    runner = CliRunner()
    path = touch(tmp_path)
    run = MemoryRun([survey_scan(mz=[100.0, 200.0], intensity=[1.0, 2.0])])
    result = runner.invoke(tool.cli, ['extract', path], obj={"opener": run})
    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[1].split("\t")[3] == "1"


def test_extract_failure(tmp_path):
    runner = CliRunner()
    path = touch(tmp_path)
    run = MemoryRun([survey_scan(), MemoryScan("FTMS + c NSI Full ms [100.00-200.00]")])
    result = runner.invoke(tool.cli, ['extract', path], obj={"opener": run})
    assert result.exit_code == 1
    assert "Error reading scan 2" in result.output


def test_missing_file(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        tool.cli, ['describe', os.path.join(str(tmp_path), "missing.raw")],
        obj={"opener": MemoryRun([])})
    assert result.exit_code == 1
    assert "Could not locate" in result.output


def test_is_debug_mode(monkeypatch):
    monkeypatch.delenv("MS_RAWSCAN_DEBUG", raising=False)
    assert not is_debug_mode()
    monkeypatch.setenv("MS_RAWSCAN_DEBUG", "yes")
    assert is_debug_mode()
    monkeypatch.setenv("MS_RAWSCAN_DEBUG", "off")
    assert not is_debug_mode()
