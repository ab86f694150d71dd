# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""
Pragma version extraction
=========================
Finds the compiler version constraints a Solidity source declares through
`pragma solidity <constraint>;` statements.

    >>> extract_versions("pragma solidity ^0.8.0;\\ncontract A {}")
    ['^0.8.0']

Pragmas commented out with `//` on the same line are ignored. Block comments
are not inspected.
"""

import re
from pathlib import Path

PRAGMA_RE = re.compile(r"\bpragma\s+solidity\s+([^;\n]+);")


def _is_line_commented(source: str, pos: int) -> bool:
    """True if a `//` marker sits before `pos` on the same line."""
    line_start = source.rfind("\n", 0, pos) + 1
    return "//" in source[line_start:pos]


def extract_versions(source: str) -> list:
    """
    Return the version constraints of every active pragma, in source order.

    Duplicates are kept: a file may legitimately carry several pragmas and
    all of them have to hold.
    """
    versions = []
    for match in PRAGMA_RE.finditer(source):
        if _is_line_commented(source, match.start()):
            continue
        # ">=0.8.2   <0.9.0" -> ">=0.8.2 <0.9.0"
        versions.append(" ".join(match.group(1).split()))
    return versions


def extract_versions_from_path(path) -> list:
    """Read a .sol file and extract its version constraints."""
    source = Path(path).read_text(encoding="utf-8", errors="replace")
    return extract_versions(source)
