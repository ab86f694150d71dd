# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""
Compile-or-load resolution
==========================
Compiles a Solidity file with the installed solc when that compiler satisfies
the file's pragmas, and otherwise loads the precompiled artifact for the
version encoded in the file name:

    Contracts/compiler/version_0.4.24.sol
        solc 0.4.24 installed  -> compiled live
        solc 0.8.11 installed  -> version_0.4.24.json loaded
        no solc                -> version_0.4.24.json loaded

Decision order: query the solc version, extract pragmas, match, then compile or load.
A source without any pragma is compiled by whatever solc is installed.
Once compilation has been attempted its outcome is final; a compile error is
never answered with a stored artifact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from .artifacts import artifact_path, load_artifact, version_from_path
from .constraints import can_compile
from .contract import Contract
from .errors import InvalidConstraint, MalformedVersion, ToolNotInstalled
from .pragma import extract_versions
from .solc import Solidity, compile_with, solc_version

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────
# Decisions
# ────────────────────────────────────────────

@dataclass(frozen=True)
class Compile:
    solidity: Solidity


@dataclass(frozen=True)
class Load:
    path: Path

    @property
    def version(self) -> str:
        return version_from_path(self.path)


Decision = Union[Compile, Load]


def decide(solc: Optional[str], source: str, path) -> Decision:
    """Pick the live-compile or artifact-load path for `source`."""
    try:
        s = solc_version(solc)
    except (ToolNotInstalled, MalformedVersion) as e:
        # A solc whose version cannot be read is treated as absent: load, don't abort.
        logger.debug("No usable solc (%s), loading artifact for %s", e, path)
        return Load(Path(path))

    constraints = extract_versions(source)
    if not constraints:
        logger.debug("%s declares no version pragma, compiling with solc %s", path, s.version)
        return Compile(s)

    try:
        ok = can_compile(s.version, constraints)
    except (InvalidConstraint, MalformedVersion) as e:
        # Unmatchable pragmas fall back to the stored artifact instead of aborting.
        logger.warning("Cannot match solc %s against %s: %s", s.version, constraints, e)
        ok = False

    if ok:
        logger.debug("solc %s satisfies %s", s.version, constraints)
        return Compile(s)
    logger.debug("solc %s does not satisfy %s, loading artifact", s.version, constraints)
    return Load(Path(path))


# ────────────────────────────────────────────
# Outcomes
# ────────────────────────────────────────────

@dataclass(frozen=True)
class Compiled:
    contracts: Dict[str, Contract]
    solidity: Solidity


@dataclass(frozen=True)
class Loaded:
    contracts: Dict[str, Contract]
    version: str
    artifact: Path


Outcome = Union[Compiled, Loaded]


def resolve(solc: Optional[str], path, source: Optional[str] = None) -> Outcome:
    """
    Compile or load the contracts of the .sol file at `path`.

    `source` overrides the file's contents when given; `path` still decides
    which artifact is loaded on the fallback path.
    """
    path = Path(path)
    if source is None:
        source = path.read_text(encoding="utf-8", errors="replace")

    decision = decide(solc, source, path)
    if isinstance(decision, Compile):
        return Compiled(compile_with(decision.solidity, source), decision.solidity)

    version = decision.version
    contracts = load_artifact(version, path.parent)
    return Loaded(contracts, version, artifact_path(path.parent, version))


def resolve_and_compile(solc: Optional[str], path, source: Optional[str] = None) -> Dict[str, Contract]:
    """Like resolve(), returning only the contracts."""
    return resolve(solc, path, source).contracts


compile_solidity_or_load = resolve_and_compile
