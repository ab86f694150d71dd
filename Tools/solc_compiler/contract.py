# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""Compiled contract records and the solc --combined-json parser."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ContractInfo:
    source: str
    language: str
    language_version: str
    compiler_version: str
    compiler_options: str
    src_map: Any = None
    src_map_runtime: str = ""
    abi_definition: Any = None
    user_doc: Any = None
    developer_doc: Any = None
    metadata: str = ""


@dataclass(frozen=True)
class Contract:
    code: str
    runtime_code: str
    info: ContractInfo = field(repr=False)

    @property
    def creation_size_bytes(self) -> int:
        return len(self.code[2:]) // 2

    @property
    def runtime_size_bytes(self) -> int:
        return len(self.runtime_code[2:]) // 2


def contract_name(key: str) -> str:
    """'<stdin>:Token' -> 'Token'"""
    return key.rsplit(":", 1)[-1]


def _decode(value: Any) -> Any:
    """
    Pre-0.8 solc emits abi/userdoc/devdoc as JSON-encoded strings, newer
    releases emit objects. Normalize both to objects.
    """
    if isinstance(value, str):
        if not value:
            return None
        return json.loads(value)
    return value


def _hex(value: Optional[str]) -> str:
    if not value:
        return ""
    return value if value.startswith("0x") else f"0x{value}"


def parse_combined_json(
    contracts: Dict[str, dict],
    source: str,
    language_version: str,
    compiler_version: str,
    compiler_options: str,
) -> Dict[str, Contract]:
    """
    Build Contract records from the "contracts" section of solc's
    --combined-json output.

    `source` is attached verbatim to every contract. Raises ValueError if an
    embedded abi/doc string is not valid JSON.
    """
    results = {}
    for key, data in contracts.items():
        info = ContractInfo(
            source=source,
            language="Solidity",
            language_version=language_version,
            compiler_version=compiler_version,
            compiler_options=compiler_options,
            src_map=data.get("srcmap"),
            src_map_runtime=data.get("srcmap-runtime", ""),
            abi_definition=_decode(data.get("abi")),
            user_doc=_decode(data.get("userdoc")),
            developer_doc=_decode(data.get("devdoc")),
            metadata=data.get("metadata", ""),
        )
        results[key] = Contract(
            code=_hex(data.get("bin")),
            runtime_code=_hex(data.get("bin-runtime")),
            info=info,
        )
    return results
