# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""
solc process shim
=================
Locates a solc binary, reads its version, and compiles sources through
py-solc-x with --combined-json output.

    solidity = solc_version("solc")          # raises ToolNotInstalled
    contracts = compile_solidity_string("solc", source)
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import solcx
from solcx.exceptions import SolcError

from .constraints import parse_version
from .contract import Contract, parse_combined_json
from .errors import CompilationError, MalformedVersion, ToolNotInstalled

logger = logging.getLogger(__name__)

DEFAULT_SOLC = os.environ.get("SOLC_BINARY", "solc")

COMBINED_OUTPUT_VALUES = [
    "abi",
    "bin",
    "bin-runtime",
    "srcmap",
    "srcmap-runtime",
    "userdoc",
    "devdoc",
    "metadata",
]

VERSION_OUTPUT_RE = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")


@dataclass(frozen=True)
class Solidity:
    """An installed solc binary and the version it reports."""

    path: str
    version: str
    full_version: str
    major: int
    minor: int
    patch: int

    @property
    def options(self) -> str:
        return "--combined-json " + ",".join(COMBINED_OUTPUT_VALUES)


def solc_version(solc: Optional[str] = None) -> Solidity:
    """
    Query a solc binary for its version. `solc` is a name looked up on PATH or a path.

    Raises ToolNotInstalled if the binary cannot be found or executed, and
    MalformedVersion if --version does not print a version triple.
    """
    solc = solc or DEFAULT_SOLC
    path = shutil.which(solc)
    if path is None:
        raise ToolNotInstalled(solc)

    try:
        proc = subprocess.run(
            [path, "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
        )
    except OSError as e:
        raise ToolNotInstalled(solc) from e
    except subprocess.CalledProcessError as e:
        raise ToolNotInstalled(solc, f"failed to report its version (exit status {e.returncode})") from e

    match = VERSION_OUTPUT_RE.search(proc.stdout)
    if not match:
        raise MalformedVersion(proc.stdout.strip())
    version = parse_version(match.group(0))

    logger.debug("Found solc %s at %s", version, path)
    return Solidity(
        path=path,
        version=str(version),
        full_version=proc.stdout,
        major=version.major,
        minor=version.minor,
        patch=version.patch,
    )


def _compilation_error(e: SolcError) -> CompilationError:
    diagnostics = (getattr(e, "stderr_data", "") or "").strip() or str(e)
    return CompilationError("solc: compilation failed", diagnostics)


def compile_solidity_string(solc: Optional[str], source: str) -> Dict[str, Contract]:
    """
    Compile source text read from stdin. Contracts are keyed "<stdin>:Name".

    Raises CompilationError carrying solc's diagnostics when solc rejects the
    source or finds no contracts in it.
    """
    return compile_with(solc_version(solc), source)


def compile_with(s: Solidity, source: str) -> Dict[str, Contract]:
    """Compile source text with a compiler already found by solc_version()."""
    try:
        output = solcx.compile_source(
            source,
            output_values=COMBINED_OUTPUT_VALUES,
            solc_binary=s.path,
        )
    except SolcError as e:
        raise _compilation_error(e) from e

    return parse_combined_json(output, source, s.version, s.version, s.options)


def compile_solidity(solc: Optional[str], *source_files) -> Dict[str, Contract]:
    """
    Compile one or more .sol files in a single solc run.

    Each contract carries the source of the file it was declared in. Keys are
    "path:Name" as solc prints them.
    """
    if not source_files:
        raise ValueError("solc: no source files")

    sources = {}
    for f in source_files:
        p = Path(f)
        sources[str(p.resolve())] = p.read_text(encoding="utf-8", errors="replace")

    s = solc_version(solc)
    try:
        output = solcx.compile_files(
            [str(Path(f)) for f in source_files],
            output_values=COMBINED_OUTPUT_VALUES,
            solc_binary=s.path,
        )
    except SolcError as e:
        raise _compilation_error(e) from e

    # Group by declaring file so each contract gets its own source text.
    by_file = {}
    for key, data in output.items():
        file_part = key.rsplit(":", 1)[0]
        by_file.setdefault(file_part, {})[key] = data

    combined_source = "".join(sources.values())
    results = {}
    for file_part, contracts in by_file.items():
        source = sources.get(str(Path(file_part).resolve()), combined_source)
        results.update(parse_combined_json(contracts, source, s.version, s.version, s.options))
    return results
