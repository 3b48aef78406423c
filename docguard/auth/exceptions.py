class AuthenticationError(Exception):
    """Raised when credentials are rejected."""
