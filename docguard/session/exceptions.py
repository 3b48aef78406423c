class SessionStoreError(Exception):
    """Raised when session state cannot be read, decoded or written."""
