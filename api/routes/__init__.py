"""API route modules."""
from api.routes import manual_tests, questions

__all__ = ["manual_tests", "questions"]
