"""FastAPI dependencies."""
from api.dependencies.client import get_evaluator_client

__all__ = ["get_evaluator_client"]
