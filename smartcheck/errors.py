# Exceptions raised by the layers around the engine (file reading, storage).
# The engine itself never raises: its failures are reported as error Findings.


class SmartCheckError(Exception):
    """Base class for SmartCheck errors."""


class SourceReadError(SmartCheckError):
    """A contract file could not be read."""


class StorageError(SmartCheckError):
    """The analysis history store failed."""
