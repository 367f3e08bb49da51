"""Tests for parser options and their YAML configuration file."""

from __future__ import annotations

import pytest

from qubitlib.config import (
    DEFAULT_MAX_DEPTH,
    ConfigError,
    ParserOptions,
    load_options,
)


@pytest.fixture
def write_config(tmp_path):
    def write(text: str):
        path = tmp_path / "qubit.yaml"
        path.write_text(text)
        return path

    return write


class TestParserOptions:
    def test_defaults(self):
        options = ParserOptions()
        assert options.max_depth == DEFAULT_MAX_DEPTH
        assert options.filename == "<string>"

    def test_from_mapping(self):
        options = ParserOptions.from_mapping({"max_depth": 8, "filename": "a.qb"})
        assert options == ParserOptions(max_depth=8, filename="a.qb")

    def test_from_none(self):
        assert ParserOptions.from_mapping(None) == ParserOptions()

    @pytest.mark.parametrize(
        "data",
        [
            {"max_depth": 0},
            {"max_depth": 1000},
            {"max_depth": "deep"},
            {"filename": ""},
            {"unknown": 1},
        ],
    )
    def test_schema_violations(self, data):
        with pytest.raises(ConfigError):
            ParserOptions.from_mapping(data)

    def test_error_names_offending_key(self):
        with pytest.raises(ConfigError, match="max_depth"):
            ParserOptions.from_mapping({"max_depth": -1})


class TestLoadOptions:
    def test_load(self, write_config):
        path = write_config("max_depth: 16\nfilename: rules.qb\n")
        options = load_options(path)
        assert options.max_depth == 16
        assert options.filename == "rules.qb"

    def test_empty_file_gives_defaults(self, write_config):
        assert load_options(write_config("")) == ParserOptions()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="file not found"):
            load_options(tmp_path / "nope.yaml")

    def test_unreadable_path(self, tmp_path):
        # Opening a directory fails with an OSError other than "not found".
        with pytest.raises(ConfigError, match="cannot read file") as excinfo:
            load_options(tmp_path)
        assert excinfo.value.path == tmp_path

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.yaml"
        path.write_bytes(b"filename: caf\xe9\n")
        with pytest.raises(ConfigError, match="not valid UTF-8"):
            load_options(path)

    def test_invalid_yaml(self, write_config):
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_options(write_config("max_depth: [1, 2\n"))

    def test_not_a_mapping(self, write_config):
        with pytest.raises(ConfigError):
            load_options(write_config("- 1\n- 2\n"))

    def test_error_carries_path(self, write_config):
        path = write_config("max_depth: 0\n")
        with pytest.raises(ConfigError) as excinfo:
            load_options(path)
        assert excinfo.value.path == path
        assert str(path) in str(excinfo.value)
