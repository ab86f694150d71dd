# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""
Version-tagged compiled artifacts
=================================
Fallback cache used when no suitable solc is installed. Artifacts sit next
to the source they were compiled from:

    Contracts/compiler/
        version_0.4.24.sol      <-- source, pragma solidity 0.4.24;
        version_0.4.24.json     <-- solc --combined-json output for it

The .json file holds raw combined-json output ({"contracts": ..., "version":
...}), so artifacts produced by solc itself or by write_artifact() load the
same way. Artifacts are only ever read during resolution.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, Union

from .constraints import parse_version
from .contract import Contract, parse_combined_json
from .errors import ArtifactNotFound, MalformedVersion, SolidityError
from .solc import COMBINED_OUTPUT_VALUES, VERSION_OUTPUT_RE

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "version_"
ARTIFACT_SUFFIX = ".json"
SOURCE_SUFFIX = ".sol"

VERSION_TAG_RE = re.compile(re.escape(ARTIFACT_PREFIX) + r"(\d+\.\d+\.\d+)")

PathLike = Union[str, Path]


def version_from_path(path: PathLike) -> str:
    """'contracts/version_0.4.24.sol' -> '0.4.24'"""
    match = VERSION_TAG_RE.search(Path(path).name)
    if not match:
        raise ArtifactNotFound(f"no {ARTIFACT_PREFIX}<X.Y.Z> tag in {path}", path)
    return match.group(1)


def artifact_path(base_dir: PathLike, version: str) -> Path:
    return Path(base_dir) / f"{ARTIFACT_PREFIX}{version}{ARTIFACT_SUFFIX}"


def load_artifact(version: str, base_dir: PathLike) -> Dict[str, Contract]:
    """
    Load the stored contracts compiled by solc `version`.

    Raises ArtifactNotFound if there is no artifact for exactly that version.
    The adjacent version_<X.Y.Z>.sol, if present, becomes ContractInfo.source.
    """
    path = artifact_path(base_dir, version)
    if not path.is_file():
        raise ArtifactNotFound(f"no compiled artifact for solc {version}: {path} does not exist", path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SolidityError(f"corrupt artifact {path}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("contracts", {}), dict):
        raise SolidityError(f"corrupt artifact {path}: expected a combined-json object with a \"contracts\" map")

    recorded = str(data.get("version") or version)
    match = VERSION_OUTPUT_RE.search(recorded)
    if not match:
        raise MalformedVersion(recorded)
    compiler_version = str(parse_version(match.group(0)))
    if compiler_version != version:
        raise ArtifactNotFound(
            f"artifact {path} was produced by solc {compiler_version}, not {version}", path
        )

    source_path = path.with_suffix(SOURCE_SUFFIX)
    source = ""
    if source_path.is_file():
        source = source_path.read_text(encoding="utf-8", errors="replace")

    options = "--combined-json " + ",".join(COMBINED_OUTPUT_VALUES)
    try:
        contracts = parse_combined_json(
            data.get("contracts", {}), source, compiler_version, compiler_version, options
        )
    except (ValueError, AttributeError, TypeError) as e:
        raise SolidityError(f"corrupt artifact {path}: {e}") from e
    logger.debug("Loaded artifact %s", path)
    return contracts


def write_artifact(contracts: Dict[str, Contract], source_path: PathLike) -> Path:
    """
    Store a live-compiled result set as the artifact of `source_path`.

    The artifact is named after the source's version_<X.Y.Z> tag, the name
    load_artifact() looks up. Raises SolidityError if the source is untagged
    or if the contracts were not all compiled by exactly that version.
    """
    source_path = Path(source_path)
    try:
        version = version_from_path(source_path)
    except ArtifactNotFound as e:
        raise SolidityError(
            f"refusing to write an artifact for {source_path}: no {ARTIFACT_PREFIX}<X.Y.Z> tag in its name"
        ) from e

    versions = {c.info.compiler_version for c in contracts.values()}
    if versions != {version}:
        raise SolidityError(
            f"refusing to write {artifact_path(source_path.parent, version)}: "
            f"contracts were compiled by solc {sorted(versions)}, not {version}"
        )

    payload = {"contracts": {}, "version": version}
    for key, contract in contracts.items():
        info = contract.info
        payload["contracts"][key] = {
            "abi": info.abi_definition,
            "bin": contract.code[2:],
            "bin-runtime": contract.runtime_code[2:],
            "srcmap": info.src_map,
            "srcmap-runtime": info.src_map_runtime,
            "userdoc": info.user_doc,
            "devdoc": info.developer_doc,
            "metadata": info.metadata,
        }

    path = artifact_path(source_path.parent, version)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path
