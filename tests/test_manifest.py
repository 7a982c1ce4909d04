"""Tests for the launcher symbol manifest."""

import json

import pytest

from fft_generator.emitter import generate
from fft_generator.manifest import (
    MANIFEST_FORMAT,
    load_manifest,
    load_manifest_from_dict,
    manifest_to_dict,
)
from fft_generator.naming import MANIFEST_FILE
from fft_generator.target_config import TargetConfig

from conftest import make_catalog


class TestManifest:
    def test_artifact_matches_symbols(self, mixed_catalog):
        result = generate(mixed_catalog, group_count=4)
        data = json.loads(result.artifact(MANIFEST_FILE).text)
        assert data["format"] == MANIFEST_FORMAT
        assert [s["name"] for s in data["symbols"]] == [s.name for s in result.symbols]
        assert load_manifest_from_dict(data) == result.symbols

    def test_load_from_file(self, mixed_catalog, tmp_path):
        result = generate(mixed_catalog, group_count=4)
        path = tmp_path / MANIFEST_FILE
        path.write_text(result.artifact(MANIFEST_FILE).text)
        assert load_manifest(str(path)) == result.symbols

    def test_custom_prefix(self):
        config = TargetConfig(symbol_prefix="mylib")
        result = generate(make_catalog(small=[16]), config=config, group_count=1)
        data = json.loads(result.artifact(MANIFEST_FILE).text)
        assert data["prefix"] == "mylib"
        assert load_manifest_from_dict(data) == result.symbols

    def test_wrong_format(self):
        with pytest.raises(ValueError, match="Not a kernel manifest"):
            load_manifest_from_dict({"format": "something_else", "version": 1, "symbols": []})

    def test_wrong_version(self):
        with pytest.raises(ValueError, match="version"):
            load_manifest_from_dict({"format": MANIFEST_FORMAT, "version": 99, "symbols": []})

    def test_name_key_mismatch(self):
        result = generate(make_catalog(small=[16, 32]), group_count=1)
        data = manifest_to_dict(result.symbols)
        data["symbols"][0]["length"] = 64
        with pytest.raises(ValueError, match="does not match"):
            load_manifest_from_dict(data)
