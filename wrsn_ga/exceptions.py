# wrsn_ga/exceptions.py


class InputInvalidError(ValueError):
    """Empty request set, bad node index or non-positive GA sizes."""


class PersistenceError(OSError):
    """Missing or corrupt guess file."""
