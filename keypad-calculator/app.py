"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_store
from config import DEFAULT_CONFIG, CalculatorConfig
from store import SessionStore


def create_app(
    store: SessionStore | None = None,
    config: CalculatorConfig = DEFAULT_CONFIG,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store for testing; creates a fresh one using
    ``config`` if omitted.
    """
    if store is None:
        store = SessionStore(config)

    set_store(store)

    app = FastAPI(
        title="Keypad Calculator API",
        description=(
            "Keypad calculator sessions. Each session runs one calculator: "
            "press keys one at a time and render the returned display and "
            "caption verbatim. The answer updates live while the second "
            "number is typed."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
