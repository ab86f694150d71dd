# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""Compile Solidity with the installed solc, or load a version-tagged artifact."""

from .artifacts import load_artifact, write_artifact
from .constraints import can_compile, parse_constraint, parse_version
from .contract import Contract, ContractInfo
from .errors import (
    ArtifactNotFound,
    CompilationError,
    InvalidConstraint,
    MalformedVersion,
    SolidityError,
    ToolNotInstalled,
)
from .pragma import extract_versions
from .resolver import compile_solidity_or_load, resolve, resolve_and_compile
from .solc import compile_solidity, compile_solidity_string, solc_version

__version__ = "0.1.0"
