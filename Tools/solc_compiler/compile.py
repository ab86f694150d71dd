# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""
Solidity Compile-or-Load Tool
=============================
Compiles Solidity contracts with the locally installed solc when it satisfies
each file's version pragmas, and otherwise loads the precompiled artifact
stored next to the file. Machines without the right compiler (or without any
compiler) still get identical results.

Directory layout:
    Contracts/compiler/
        version_0.4.24.sol      <-- source
        version_0.4.24.json     <-- artifact (--write-artifact), used when solc 0.4.24 is absent
        version_0.8.11.sol
        version_0.8.11.json

Usage:
    solc-compile                                   # every .sol in Contracts/
    solc-compile path/to/version_0.8.11.sol        # specific files
    solc-compile --solc /opt/solc-0.4.24 FILE      # pick a compiler binary
    solc-compile --install 0.8.11 --write-artifact # refresh the 0.8.11 artifact
    solc-compile --output-dir build/               # save .bin / abi files
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import certifi
import solcx

from .artifacts import write_artifact
from .contract import contract_name
from .errors import SolidityError
from .pragma import extract_versions_from_path
from .resolver import Compiled, resolve
from .solc import DEFAULT_SOLC

APP_DIR = Path(__file__).parent.resolve()
CONTRACTS_DIR = APP_DIR.parent.parent / "Contracts"

EIP170_LIMIT = 24576


# ────────────────────────────────────────────
# Compiler installation
# ────────────────────────────────────────────

def _use_certifi_bundle():
    """Point requests (used by py-solc-x downloads) at certifi's CA bundle."""
    ca_bundle = certifi.where()
    os.environ.setdefault("SSL_CERT_FILE", ca_bundle)
    os.environ.setdefault("REQUESTS_CA_BUNDLE", ca_bundle)


def install_solc(version: str) -> str:
    """Install the specified solc release if needed and return its binary path."""
    installed = [str(v) for v in solcx.get_installed_solc_versions()]
    if version not in installed:
        print(f"Installing solc {version}...")
        _use_certifi_bundle()
        solcx.install_solc(version)
    return str(solcx.get_executable(version))


# ────────────────────────────────────────────
# Output formatting
# ────────────────────────────────────────────

def print_results(contracts: dict, name: str = None):
    """Print compilation results."""
    if not contracts:
        print("No contracts found.")
        return

    selected = contracts
    if name:
        selected = {k: c for k, c in contracts.items() if contract_name(k) == name}
        if not selected:
            available = [contract_name(k) for k in contracts]
            print(f"Contract '{name}' not found. Available: {available}")
            return

    for key, contract in selected.items():
        runtime_size = contract.runtime_size_bytes
        print(f"{'='*70}")
        print(f"  Contract: {key}")
        print(f"  solc:          {contract.info.compiler_version}")
        print(f"  Runtime size:  {runtime_size} bytes ({runtime_size / 1024:.1f} KB)")
        print(f"  Creation size: {contract.creation_size_bytes} bytes")
        if runtime_size > EIP170_LIMIT:
            print(f"  WARNING: Exceeds EIP-170 contract size limit (24,576 bytes)!")
        print(f"{'='*70}")
        print(f"\n  Creation Bytecode:")
        print(f"  {contract.code[:120]}...")
        print(f"\n  ABI entries: {len(contract.info.abi_definition or [])}")
        print()


def save_results(contracts: dict, output_dir: Path):
    """Save bytecode and ABI files per contract."""
    output_dir.mkdir(parents=True, exist_ok=True)

    for key, contract in contracts.items():
        name = contract_name(key)
        (output_dir / f"{name}_creation.bin").write_text(contract.code)
        (output_dir / f"{name}_runtime.bin").write_text(contract.runtime_code)
        (output_dir / f"{name}_abi.json").write_text(
            json.dumps(contract.info.abi_definition, indent=2)
        )
        artifact = {
            "creation_bytecode": contract.code,
            "runtime_bytecode": contract.runtime_code,
            "abi": contract.info.abi_definition,
            "compiler_version": contract.info.compiler_version,
            "runtime_size_bytes": contract.runtime_size_bytes,
            "creation_size_bytes": contract.creation_size_bytes,
        }
        (output_dir / f"{name}_artifact.json").write_text(json.dumps(artifact, indent=2))

    print(f"Artifacts saved to: {output_dir.resolve()}")


# ────────────────────────────────────────────
# Batch compilation
# ────────────────────────────────────────────

def discover_sol_files(contracts_dir: Path) -> list:
    """Find all .sol files in the contracts directory, recursively."""
    return [f for f in sorted(contracts_dir.rglob("*.sol")) if f.is_file()]


def compile_all(
    paths: list,
    solc: str = None,
    contract: str = None,
    output_dir: Path = None,
    write_artifacts: bool = False,
) -> int:
    """Resolve every file and return the number of failures."""
    print("\n" + "=" * 60)
    print("  Solidity Compile-or-Load")
    print("=" * 60)
    print(f"\n  solc:  {solc or DEFAULT_SOLC}")
    print(f"  Files: {len(paths)}\n")

    failed = 0
    summary = []

    for sol_file in paths:
        print(f"\n{'─'*60}")
        print(f"  {sol_file}")
        print(f"{'─'*60}")

        try:
            print(f"  Pragmas: {', '.join(extract_versions_from_path(sol_file)) or 'none'}")
            outcome = resolve(solc, sol_file)
            if isinstance(outcome, Compiled):
                status = "COMPILED"
                print(f"  Compiled with solc {outcome.solidity.version} ({outcome.solidity.path})")
                if write_artifacts:
                    written = write_artifact(outcome.contracts, sol_file)
                    print(f"  Artifact written: {written}")
            else:
                status = "LOADED"
                print(f"  Loaded artifact {outcome.artifact}")

            print_results(outcome.contracts, contract)
            if output_dir:
                save_results(outcome.contracts, output_dir / sol_file.stem)

            for key, c in outcome.contracts.items():
                summary.append((contract_name(key), c.info.compiler_version, status))
        except (SolidityError, OSError) as e:
            print(f"  FAILED: {e}", file=sys.stderr)
            failed += 1
            summary.append((sol_file.name, "-", "FAILED"))

    print(f"\n{'='*60}")
    print(f"  SUMMARY")
    print(f"{'='*60}")
    print(f"  {'Contract':<40} {'solc':>10} {'Status':>10}")
    print(f"  {'─'*40} {'─'*10} {'─'*10}")
    for name, version, status in summary:
        print(f"  {name:<40} {version:>10} {status:>10}")
    print()

    return failed


# ────────────────────────────────────────────
# Main
# ────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compile Solidity contracts with the installed solc, or load stored artifacts"
    )
    parser.add_argument("paths", nargs="*", type=Path, help="Solidity files (default: every .sol under --contracts-dir)")
    parser.add_argument("--contracts-dir", type=Path, default=CONTRACTS_DIR, help=f"Directory scanned when no paths are given (default: {CONTRACTS_DIR})")
    parser.add_argument("--solc", default=None, help=f"solc binary name or path (default: {DEFAULT_SOLC})")
    parser.add_argument("--install", metavar="VERSION", default=None, help="Install this solc release via py-solc-x and use it")
    parser.add_argument("--contract", default=None, help="Only print this contract")
    parser.add_argument("--output-dir", type=Path, default=None, help="Save bytecode and ABI files here")
    parser.add_argument("--write-artifact", action="store_true", help="Store version_<X.Y.Z>.json next to each live-compiled file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution decisions")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    solc = args.solc
    if args.install:
        try:
            solc = install_solc(args.install)
        except Exception as e:
            print(f"Failed to install solc {args.install}: {e}", file=sys.stderr)
            return 1

    paths = args.paths or discover_sol_files(args.contracts_dir)
    if not paths:
        print(f"\nNo .sol files found in: {args.contracts_dir}")
        return 0

    failed = compile_all(
        paths,
        solc=solc,
        contract=args.contract,
        output_dir=args.output_dir,
        write_artifacts=args.write_artifact,
    )
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
