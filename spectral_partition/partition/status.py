"""Outcome classification shared by the partition entry points."""

import enum


class Status(enum.IntEnum):
    """Tagged outcome of a partition or analysis call.

    SUCCESS and ITERATION_LIMIT both come with usable output; the latter
    marks best-effort results from an exhausted iteration budget.
    """

    SUCCESS = 0
    ITERATION_LIMIT = 1
    INVALID_INPUT = 2

    @property
    def ok(self) -> bool:
        return self is not Status.INVALID_INPUT


class PartitionInputError(ValueError):
    """Raised for arguments rejected before any iteration starts."""


class ConvergenceWarning(UserWarning):
    """Issued by raise_for_status() for iteration-limited results."""
