"""Tests for loading and writing version-tagged artifacts."""

import json
import shutil

import pytest

from solc_compiler.artifacts import (
    artifact_path,
    load_artifact,
    version_from_path,
    write_artifact,
)
from solc_compiler.errors import ArtifactNotFound, SolidityError


class TestVersionFromPath:
    def test_version_tag(self):
        assert version_from_path("Contracts/compiler/version_0.4.24.sol") == "0.4.24"

    def test_directory_name_not_used(self):
        with pytest.raises(ArtifactNotFound):
            version_from_path("version_0.4.24/Token.sol")

    def test_missing_tag(self):
        with pytest.raises(ArtifactNotFound):
            version_from_path("Contracts/Token.sol")


@pytest.mark.parametrize("version", ["0.4.24", "0.8.11"])
def test_load_stored_artifacts(compiler_dir, version):
    contracts = load_artifact(version, compiler_dir)

    assert list(contracts) == ["<stdin>:test"]
    c = contracts["<stdin>:test"]
    assert c.code.startswith("0x")
    assert c.info.compiler_version == version
    assert c.info.abi_definition[0]["name"] == "multiply"
    assert c.info.source == (compiler_dir / f"version_{version}.sol").read_text()


def test_missing_artifact(compiler_dir):
    with pytest.raises(ArtifactNotFound) as exc_info:
        load_artifact("0.6.0", compiler_dir)
    assert "0.6.0" in str(exc_info.value)
    assert isinstance(exc_info.value, FileNotFoundError)


def test_artifact_from_other_compiler_rejected(compiler_dir, tmp_path):
    shutil.copy(compiler_dir / "version_0.8.11.json", tmp_path / "version_0.8.12.json")
    with pytest.raises(ArtifactNotFound):
        load_artifact("0.8.12", tmp_path)


class TestCorruptArtifact:
    def test_bad_top_level_json(self, tmp_path):
        (tmp_path / "version_0.8.11.json").write_text("{not json")
        with pytest.raises(SolidityError):
            load_artifact("0.8.11", tmp_path)

    def test_bad_embedded_abi(self, compiler_dir, tmp_path):
        data = json.loads((compiler_dir / "version_0.4.24.json").read_text())
        data["contracts"]["<stdin>:test"]["abi"] = "[{broken"
        (tmp_path / "version_0.4.24.json").write_text(json.dumps(data))

        with pytest.raises(SolidityError) as exc_info:
            load_artifact("0.4.24", tmp_path)
        assert "corrupt artifact" in str(exc_info.value)

    @pytest.mark.parametrize("payload", [[], "0.8.11", {"contracts": []}, {"contracts": {"<stdin>:test": []}}])
    def test_unexpected_shape(self, tmp_path, payload):
        (tmp_path / "version_0.8.11.json").write_text(json.dumps(payload))
        with pytest.raises(SolidityError):
            load_artifact("0.8.11", tmp_path)


def test_artifact_without_source_file(compiler_dir, tmp_path):
    shutil.copy(compiler_dir / "version_0.4.24.json", tmp_path)
    contracts = load_artifact("0.4.24", tmp_path)
    assert contracts["<stdin>:test"].info.source == ""


class TestWriteArtifact:
    def test_written_artifact_loads_back(self, compiler_dir, tmp_path):
        shutil.copy(compiler_dir / "version_0.4.24.sol", tmp_path)
        original = load_artifact("0.4.24", compiler_dir)

        path = write_artifact(original, tmp_path / "version_0.4.24.sol")

        assert path == artifact_path(tmp_path, "0.4.24")
        assert json.loads(path.read_text())["version"] == "0.4.24"
        assert load_artifact("0.4.24", tmp_path) == original

    def test_untagged_source_refused(self, compiler_dir, tmp_path):
        contracts = load_artifact("0.8.11", compiler_dir)
        with pytest.raises(SolidityError):
            write_artifact(contracts, tmp_path / "Token.sol")
        assert list(tmp_path.iterdir()) == []

    def test_compiler_must_match_tag(self, compiler_dir, tmp_path):
        # e.g. version_0.4.24.sol with "^0.4.24" compiled by a newer 0.4.x
        contracts = load_artifact("0.8.11", compiler_dir)
        with pytest.raises(SolidityError):
            write_artifact(contracts, tmp_path / "version_0.4.24.sol")
        assert list(tmp_path.iterdir()) == []

    def test_mixed_versions_refused(self, compiler_dir, tmp_path):
        mixed = {
            "a": load_artifact("0.4.24", compiler_dir)["<stdin>:test"],
            "b": load_artifact("0.8.11", compiler_dir)["<stdin>:test"],
        }
        with pytest.raises(SolidityError):
            write_artifact(mixed, tmp_path / "version_0.4.24.sol")
