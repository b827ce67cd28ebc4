"""Common dependencies for FastAPI dependency injection"""
import uuid
from datetime import datetime, timezone
from typing import Generator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from core.errors import Unauthenticated, ValidationFailed
from core.store import Store
from readmodel.identity import resolve_optional_id


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency, one session per request.

    Yields:
        Session: SQLAlchemy database session
    """
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_store(session: Session = Depends(get_db_session)) -> Store:
    return Store(session)


def new_trace_id() -> str:
    return f"api_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def get_trace_id(request: Request) -> str:
    """
    Generate unique trace ID for request tracking.

    Also kept on request.state so error responses can carry it.

    Returns:
        str: Unique trace ID
    """
    trace_id = new_trace_id()
    request.state.trace_id = trace_id
    return trace_id


def get_viewer_id(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
) -> Optional[str]:
    """
    Caller identity as established by the upstream auth layer.

    Returns:
        Optional[str]: Normalized viewer id, None for anonymous requests
    """
    viewer_id = resolve_optional_id(x_user_id, "viewer_id")
    request.state.viewer_id = viewer_id
    return viewer_id


def require_viewer_id(viewer_id: Optional[str] = Depends(get_viewer_id)) -> str:
    if viewer_id is None:
        raise Unauthenticated("X-User-Id header is required")
    return viewer_id


def get_page_params(request: Request, page: int = 1, limit: Optional[int] = None) -> dict:
    """page/limit query parameters; limit defaults to and is bounded by settings"""
    settings = request.app.state.settings
    if limit is None:
        limit = settings.default_page_size
    if limit > settings.max_page_size:
        raise ValidationFailed(f"limit must not exceed {settings.max_page_size}")
    return {"page": page, "limit": limit}
