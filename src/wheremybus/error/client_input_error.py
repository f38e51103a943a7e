class ClientInputError(ValueError):
    """Raised when a caller submits an update or query that cannot be served."""
