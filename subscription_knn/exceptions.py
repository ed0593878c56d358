"""Exceptions raised by the subscription KNN pipeline."""

from __future__ import annotations

from typing import Iterable


class PipelineError(Exception):
    """Base class for fatal pipeline errors."""


class SchemaError(PipelineError):
    """The source table is missing one or more required columns."""

    def __init__(self, missing: Iterable[str], available: Iterable[str] = ()):
        self.missing = list(missing)
        self.available = list(available)
        message = f"Missing required column(s): {', '.join(self.missing)}"
        if self.available:
            message += f" (found: {', '.join(map(str, self.available))})"
        super().__init__(message)


class EmptyDatasetError(PipelineError):
    """No records are left to fit or evaluate a model on."""
