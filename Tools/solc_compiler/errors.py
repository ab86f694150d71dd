# Copyright (c) 2023-2026 Cryft Labs. All rights reserved.
# Licensed under the Apache License, Version 2.0.
# This software is part of a patented system. See LICENSE and PATENT NOTICE.

"""Exceptions raised while resolving, compiling or loading Solidity contracts."""


class SolidityError(Exception):
    """Base class for every error raised by solc_compiler."""


class MalformedVersion(SolidityError, ValueError):
    """The compiler reported a version that is not a major.minor.patch triple."""

    def __init__(self, version: str):
        super().__init__(f"malformed compiler version {version!r}")
        self.version = version


class InvalidConstraint(SolidityError, ValueError):
    """A pragma constraint could not be parsed as a version range."""

    def __init__(self, constraint: str, reason: str = ""):
        message = f"invalid version constraint {constraint!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.constraint = constraint


class CompilationError(SolidityError):
    """solc ran and failed. `diagnostics` holds the tool's own output."""

    def __init__(self, message: str, diagnostics: str = ""):
        if diagnostics:
            message = f"{message}\n{diagnostics}"
        super().__init__(message)
        self.diagnostics = diagnostics


class ArtifactNotFound(SolidityError, FileNotFoundError):
    """No stored artifact exists for the requested compiler version."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class ToolNotInstalled(SolidityError):
    """No usable solc binary could be found."""

    def __init__(self, solc: str, reason: str = "not found on PATH"):
        super().__init__(f"solc binary {solc!r} {reason}")
        self.solc = solc
