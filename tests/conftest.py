"""Pytest configuration and shared fixtures."""

import pytest
from click.testing import CliRunner

from jsmerge.cli import cli
from jsmerge.settings import ENV_VARS


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep JSMERGE_* variables from the caller's shell out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Invoke the CLI with args.

    Usage:
        result = invoke(["out.json", "a.json", "b.json", "--quiet"])
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke


@pytest.fixture
def write_inputs(tmp_path):
    """Write input files and return their paths in the given order.

    Usage:
        paths = write_inputs({"a.json": '{"id":1}\\n', "b.json": b"..."})
    """

    def _write(files):
        paths = []
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
            paths.append(path)
        return paths

    return _write


@pytest.fixture
def output_path(tmp_path):
    """Destination for merged output."""
    return tmp_path / "out" / "merged.json"


@pytest.fixture
def sample_ndjson():
    """Provide sample NDJSON data as string."""
    return '{"name":"Alice","age":30}\n{"name":"Bob","age":25}\n'


class ListSink:
    """In-memory sink recording every write."""

    def __init__(self):
        self.writes = []
        self.closed = 0

    def write(self, text):
        self.writes.append(text)
        return len(text)

    def close(self):
        self.closed += 1

    @property
    def text(self):
        return "".join(self.writes)


@pytest.fixture
def list_sink():
    return ListSink()
