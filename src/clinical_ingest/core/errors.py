"""
Exceptions raised by the ingest pipeline.
"""


class IngestError(Exception):
    """Base class for ingest failures."""


class SourceAccessError(IngestError):
    """A source file is missing or unreadable. Aborts the run."""


class RowRejected(IngestError):
    """A single row cannot be ingested. The row is dropped and the run continues."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
