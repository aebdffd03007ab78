"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.app.api.http.app_data import ApplicationDependencies
from src.app.core.services import DbSessionService, OrderService


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a database session that is closed once the request is done."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_order_service(session: Session = Depends(get_db_session)) -> OrderService:
    """Get an order service bound to the request's session."""
    return OrderService(session)
