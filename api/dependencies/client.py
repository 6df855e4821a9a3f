"""Backend client dependency for FastAPI."""
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.config import TOKEN_PATH
from api.services.evaluator_client import EvaluatorClient
from api.services.token_store import MemoryTokenStore, TokenStore

# Bearer token forwarded to the evaluator backend
security = HTTPBearer(auto_error=False)


def get_evaluator_client(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> EvaluatorClient:
    """Build a backend client.

    A bearer token on the incoming request is passed through; otherwise the
    token saved by ``cli.py login`` is used.
    """
    if credentials is not None:
        return EvaluatorClient(token_store=MemoryTokenStore(credentials.credentials))
    return EvaluatorClient(token_store=TokenStore(TOKEN_PATH))
