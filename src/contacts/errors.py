"""Error taxonomy for the note-ingestion pipeline."""


class PeopleGraphError(Exception):
    """Base error surfaced to the user at the ingestion boundary."""


class ExtractionError(PeopleGraphError):
    """The oracle failed or returned something that isn't an extraction result.

    The raw input travels with the error so the caller can offer a retry.
    """

    def __init__(self, message: str, raw_input: str = ""):
        super().__init__(message)
        self.raw_input = raw_input


class StorageError(PeopleGraphError):
    """The record store could not be read or written."""


class IngestionBusyError(PeopleGraphError):
    """An ingestion is already waiting on the oracle."""


class ContactNotFoundError(PeopleGraphError):
    """A commit referenced a contact that is no longer in the roster."""
