"""API-key pre-authentication and structured error responses for FastAPI."""

__version__ = "0.1.0"
