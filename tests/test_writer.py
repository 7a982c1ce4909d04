"""Tests for writing artifacts to disk."""

import logging

import pytest

from fft_generator import generate_to_directory
from fft_generator.artifacts import Artifact
from fft_generator.errors import ArtifactWriteError, FFTGeneratorError
from fft_generator.writer import write_artifacts


class TestWriteArtifacts:
    def test_writes_all(self, tmp_path):
        out = tmp_path / "out"
        paths = write_artifacts([Artifact("a.h", "A\n"), Artifact("b.cpp", "B\n")], str(out))
        assert [p.name for p in paths] == ["a.h", "b.cpp"]
        assert (out / "a.h").read_text() == "A\n"
        assert (out / "b.cpp").read_text() == "B\n"

    def test_overwrites(self, tmp_path):
        (tmp_path / "a.h").write_text("old")
        write_artifacts([Artifact("a.h", "new")], str(tmp_path))
        assert (tmp_path / "a.h").read_text() == "new"

    def test_failure_continues_then_raises(self, tmp_path, caplog):
        # a directory in the way makes that one file unopenable
        (tmp_path / "blocked.h").mkdir()
        artifacts = [Artifact("first.h", "1"), Artifact("blocked.h", "2"), Artifact("last.h", "3")]
        with caplog.at_level(logging.ERROR, logger="fft_generator.writer"):
            with pytest.raises(ArtifactWriteError) as excinfo:
                write_artifacts(artifacts, str(tmp_path))
        assert excinfo.value.failed == ["blocked.h"]
        assert "blocked.h" in caplog.text
        assert (tmp_path / "first.h").read_text() == "1"
        assert (tmp_path / "last.h").read_text() == "3"

    def test_error_kinds(self):
        err = ArtifactWriteError(["x.h", "y.h"])
        assert isinstance(err, FFTGeneratorError)
        assert isinstance(err, OSError)
        assert "2 artifact(s)" in str(err)


class TestGenerateToDirectory:
    def test_from_dict(self, tmp_path):
        catalog = {"small": [16, 64], "fused2d": [{"length1": 16, "length2": 16}]}
        result = generate_to_directory(catalog, str(tmp_path), group_count=2)
        for name in result.artifact_names:
            assert (tmp_path / name).is_file()
        assert (tmp_path / "kernel_manifest.json").is_file()
        assert (tmp_path / "kernel_launch_single_0.cpp").read_text() == \
            '#include "kernel_launch_single_0.cpp.h"\n'
