"""Paginator: count pass plus a sorted skip/limit window over a composed pipeline"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping

from sqlalchemy import func, select

from core.errors import ValidationFailed
from core.store import Store
from readmodel.pipeline import Pipeline, PipelineCompositionError
from readmodel.shaper import shape_row

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class PageWindow:
    """Page envelope: one window of items plus pagination metadata"""
    items: List[Any] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    current_page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    has_next_page: bool = False
    has_prev_page: bool = False


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationFailed(f"{name} must be a positive integer, got {value!r}")
    return value


def paginate(
    store: Store,
    pipeline: Pipeline,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    shape: Callable[[Mapping[str, Any]], Dict[str, Any]] = shape_row,
) -> PageWindow:
    """
    Execute a sorted pipeline one page at a time.

    Args:
        store: Request-scoped store
        pipeline: Composed pipeline; must already contain a Sort stage
        page: 1-based page number
        limit: Page size
        shape: Applied to every returned row

    Returns:
        PageWindow: items is empty when page > total_pages

    Raises:
        ValidationFailed: page or limit is not a positive integer
        PipelineCompositionError: pipeline is not sorted
    """
    page = _positive_int(page, "page")
    limit = _positive_int(limit, "limit")
    if not pipeline.is_sorted:
        raise PipelineCompositionError(f"{pipeline.name}: sort must precede the pagination window")

    stmt = pipeline.statement()
    total_items = int(store.scalar(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ) or 0)
    total_pages = math.ceil(total_items / limit)

    items: List[Any] = []
    if page <= total_pages:
        rows = store.run_pipeline(stmt.offset((page - 1) * limit).limit(limit))
        items = [shape(row) for row in rows]

    logger.debug("Page fetched", extra={
        "pipeline": pipeline.name,
        "page": page,
        "rows": len(items),
    })

    return PageWindow(
        items=items,
        total_items=total_items,
        total_pages=total_pages,
        current_page=page,
        limit=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )
