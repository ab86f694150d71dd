# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""
Version constraint matching
===========================
Decides whether an installed solc version satisfies the constraints declared
by a source's pragmas.

Constraints are parsed into one of three forms:

    ExactPin    0.4.24, =0.4.24
    CaretRange  ^0.4.24            (>=0.4.24 <0.5.0)
    RangeSpec   anything else npm-style: >0.0.0, >=0.8.2 <0.9.0, ~0.5.1, 0.8.x

Every constraint must hold for a compiler to be usable.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Union

from semantic_version import NpmSpec, Version

from .errors import InvalidConstraint, MalformedVersion

# solc reports "0.8.11+commit.d7f03943"; build metadata is tolerated
VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:\+[0-9A-Za-z.-]+)?$")
EXACT_RE = re.compile(r"^=?\s*(\d+\.\d+\.\d+)$")
CARET_RE = re.compile(r"^\^\s*(\d+\.\d+\.\d+)$")


def parse_version(text: str) -> Version:
    """Parse a compiler version string into a plain major.minor.patch Version."""
    match = VERSION_RE.match(str(text).strip())
    if not match:
        raise MalformedVersion(text)
    major, minor, patch = (int(g) for g in match.groups())
    return Version(major=major, minor=minor, patch=patch)


@dataclass(frozen=True)
class ExactPin:
    version: Version

    def matches(self, installed: Version) -> bool:
        return installed == self.version

    def __str__(self):
        return str(self.version)


@dataclass(frozen=True)
class CaretRange:
    version: Version

    @property
    def upper(self) -> Version:
        """Exclusive upper bound: the next breaking release."""
        v = self.version
        if v.major:
            return v.next_major()
        if v.minor:
            return v.next_minor()
        return v.next_patch()

    def matches(self, installed: Version) -> bool:
        return self.version <= installed < self.upper

    def __str__(self):
        return f"^{self.version}"


@dataclass(frozen=True)
class RangeSpec:
    expression: str
    spec: NpmSpec

    def matches(self, installed: Version) -> bool:
        return self.spec.match(installed)

    def __str__(self):
        return self.expression


Constraint = Union[ExactPin, CaretRange, RangeSpec]


def parse_constraint(text: str) -> Constraint:
    constraint = " ".join(str(text).split())
    if not constraint:
        raise InvalidConstraint(text, "empty constraint")

    m = EXACT_RE.match(constraint)
    if m:
        return ExactPin(Version(m.group(1)))

    m = CARET_RE.match(constraint)
    if m:
        return CaretRange(Version(m.group(1)))

    try:
        return RangeSpec(constraint, NpmSpec(constraint))
    except ValueError as e:
        raise InvalidConstraint(text, str(e)) from e


def can_compile(installed: str, constraints: Iterable[str]) -> bool:
    """
    Return True if `installed` satisfies every constraint.

    Raises MalformedVersion for a bad installed version and InvalidConstraint
    for an unparsable constraint. A clean mismatch returns False.
    """
    version = parse_version(installed)
    parsed = [parse_constraint(c) for c in constraints]
    return all(c.matches(version) for c in parsed)
