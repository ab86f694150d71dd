# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""Shared fixtures for solc_compiler tests."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from solc_compiler.constraints import parse_version
from solc_compiler.errors import ToolNotInstalled
from solc_compiler.solc import Solidity

COMPILER_DIR = Path(__file__).resolve().parent / "fixtures" / "compiler"

TEST_SOURCE = """
pragma solidity >0.0.0;
contract test {
   /// @notice Will multiply `a` by 7.
   function multiply(uint a) public returns(uint d) {
       return a * 7;
   }
}
"""


def pytest_collection_modifyitems(config, items):
    if shutil.which("solc"):
        return
    skip = pytest.mark.skip(reason="solc not found on PATH")
    for item in items:
        if "requires_solc" in item.keywords:
            item.add_marker(skip)


def make_solidity(version: str, path: str = "/usr/bin/solc") -> Solidity:
    v = parse_version(version)
    return Solidity(
        path=path,
        version=str(v),
        full_version=f"solc, the solidity compiler commandline interface\nVersion: {version}+commit.00000000.Linux.g++\n",
        major=v.major,
        minor=v.minor,
        patch=v.patch,
    )


@pytest.fixture
def compiler_dir() -> Path:
    """Synthetic version_<X.Y.Z> sources and combined-json artifacts."""
    return COMPILER_DIR


@pytest.fixture
def installed_solc(monkeypatch):
    """
    Pretend a solc of the given version is installed, or none at all when
    called with None. Returns the list of sources handed to the compiler.
    """
    compiled = []

    def install(version, contracts=None):
        def fake_version(solc=None):
            if version is None:
                raise ToolNotInstalled(solc or "solc")
            return make_solidity(version)

        def fake_compile(solidity, source):
            compiled.append(source)
            if isinstance(contracts, Exception):
                raise contracts
            return contracts if contracts is not None else {}

        monkeypatch.setattr("solc_compiler.resolver.solc_version", fake_version)
        monkeypatch.setattr("solc_compiler.resolver.compile_with", fake_compile)
        return compiled

    return install
