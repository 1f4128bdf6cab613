"""Exception types raised by the artifact trends pipeline."""

from __future__ import annotations


class TrendsError(Exception):
    """Base class for all pipeline errors."""


class DirectoryNotFound(TrendsError):
    def __init__(self, path: str):
        self.path = str(path)
        super().__init__(f"Directory does not exist: {self.path}")


class MalformedArtifact(TrendsError):
    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Malformed artifact {file_name}: {reason}")


class InvalidSelector(TrendsError):
    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid selector {expression!r}: {reason}")
