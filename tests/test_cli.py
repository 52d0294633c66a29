"""Command-line behaviour: option validation, exit codes, outputs."""

import pytest
from conftest import PROLOGUE, T1_DATA, T1_SCHEMA, T2_DATA, T2_SCHEMA, crlf, dump_text, read_output
from typer.testing import CliRunner

from dumpsplit import __version__
from dumpsplit.cli import app


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def dump(write_dump):
    return write_dump(dump_text(T1_SCHEMA, T1_DATA, T2_SCHEMA, T2_DATA))


def test_split_to_directory(runner, dump, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["split", str(dump), "--outdir", str(out)])
    assert result.exit_code == 0, result.output
    assert read_output(out / "t1.sql") == PROLOGUE + crlf(T1_SCHEMA + T1_DATA)
    assert read_output(out / "t2.sql") == PROLOGUE + crlf(T2_SCHEMA + T2_DATA)


def test_split_to_stdout(runner, dump):
    result = runner.invoke(app, ["split", str(dump), "-f", "-", "-i", "t2", "-m", "data"])
    assert result.exit_code == 0
    assert crlf(T2_DATA).encode("utf-8") in result.stdout_bytes
    assert b"DROP TABLE IF EXISTS `t1`;" not in result.stdout_bytes


def test_quiet_without_verbose(runner, dump, tmp_path):
    result = runner.invoke(app, ["split", str(dump), "--outdir", str(tmp_path / "out")])
    assert result.exit_code == 0
    assert result.output == ""

    result = runner.invoke(app, ["split", str(dump), "--outdir", str(tmp_path / "again"), "-v"])
    assert result.exit_code == 0
    assert "Split complete" in result.output


def test_comma_separated_and_repeated_names(runner, dump, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["split", str(dump), "-d", str(out), "-i", "t1,t2", "-e", "t2"])
    assert result.exit_code == 0
    assert [p.name for p in out.iterdir()] == ["t1.sql"]


def test_exclude_data_flag(runner, dump, tmp_path):
    target = tmp_path / "slim.sql"
    result = runner.invoke(app, ["split", str(dump), "-f", str(target), "--exclude-data", "t1"])
    assert result.exit_code == 0
    assert read_output(target) == PROLOGUE + crlf(T1_SCHEMA + T2_SCHEMA + T2_DATA)


def test_compress_flag(runner, dump, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["split", str(dump), "-d", str(out), "-c"])
    assert result.exit_code == 0
    assert sorted(p.name for p in out.iterdir()) == ["t1.sql.gz", "t2.sql.gz"]
    assert read_output(out / "t1.sql.gz") == PROLOGUE + crlf(T1_SCHEMA + T1_DATA)


def test_destination_is_required(runner, dump):
    result = runner.invoke(app, ["split", str(dump)])
    assert result.exit_code == 1


def test_destinations_are_exclusive(runner, dump, tmp_path):
    result = runner.invoke(app, ["split", str(dump), "-f", "-", "-d", str(tmp_path / "out")])
    assert result.exit_code == 1
    assert not (tmp_path / "out").exists()


def test_invalid_mode_is_rejected(runner, dump, tmp_path):
    result = runner.invoke(app, ["split", str(dump), "-d", str(tmp_path / "out"), "-m", "everything"])
    assert result.exit_code != 0
    assert not (tmp_path / "out").exists()


def test_missing_dump_exits_non_zero(runner, tmp_path):
    result = runner.invoke(app, ["split", str(tmp_path / "nope.sql"), "-d", str(tmp_path / "out")])
    assert result.exit_code == 1


def test_oversized_line_exits_non_zero(runner, write_dump, tmp_path):
    dump = write_dump(dump_text(T1_SCHEMA, ["LOCK TABLES `t1` WRITE;", "INSERT " + "x" * 5000 + ";"]))
    result = runner.invoke(app, ["split", str(dump), "-d", str(tmp_path / "out"), "--max-line-size", "1024"])
    assert result.exit_code == 1


def test_policy_file(runner, dump, tmp_path):
    policy = tmp_path / "policy.yml"
    policy.write_text("include: [t1, t2]\nexclude_data: [t2]\nmode: both\n")
    target = tmp_path / "all.sql"
    result = runner.invoke(app, ["split", str(dump), "-f", str(target), "--config", str(policy), "-m", "schema"])
    assert result.exit_code == 0
    assert read_output(target) == PROLOGUE + crlf(T1_SCHEMA + T2_SCHEMA)


def test_bad_policy_file(runner, dump, tmp_path):
    policy = tmp_path / "policy.yml"
    policy.write_text("tables: [t1]\n")
    result = runner.invoke(app, ["split", str(dump), "-d", str(tmp_path / "out"), "--config", str(policy)])
    assert result.exit_code == 1


def test_version(runner):
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout
