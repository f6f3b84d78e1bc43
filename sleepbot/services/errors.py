from __future__ import annotations


class TrackerError(Exception):
    """Base class for errors raised by the sleep tracker."""


class StorageError(TrackerError):
    """The event store could not complete a read or write."""


class NotFoundError(TrackerError):
    """An expected chat, message or member is missing."""


class ValidationError(TrackerError):
    """A command was rejected before anything was written."""
