"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import manual_tests, questions
from core.logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title="Answer Evaluator Authoring API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}


# Include routers
app.include_router(manual_tests.router)
app.include_router(questions.router)
