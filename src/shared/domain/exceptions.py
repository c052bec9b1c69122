"""Cross-module exception base classes."""

from __future__ import annotations


class DegradedSideEffect(Exception):
    """A secondary step failed after the primary operation already succeeded.

    Raised by stock adjustment and notification dispatch. Callers catch it,
    log it, and still report success for the primary operation.
    """
