"""Storage-layer exceptions."""


class StorageError(Exception):
    """Table creation, insert or query failed against the rate database."""
