"""
Pagination utilities for the RelateAI API.
Provides consistent pagination across all list endpoints.
"""
from typing import TypeVar, List

from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T")

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def normalize_page(page: int = None, limit: int = None) -> tuple[int, int]:
    """Clamp page/limit into sane bounds (page >= 1, 1 <= limit <= MAX_LIMIT)."""
    page = page if page and page > 0 else 1
    if not limit or limit <= 0:
        limit = DEFAULT_LIMIT
    return page, min(limit, MAX_LIMIT)


def create_pagination(total: int, page: int, limit: int) -> dict:
    """
    Create pagination metadata.

    Args:
        total: Total count of all items
        page: Current page number
        limit: Items per page

    Returns:
        Dictionary with pagination metadata
    """
    pages = (total + limit - 1) // limit if limit > 0 else 0

    return {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": pages,
        "has_next": page < pages,
        "has_prev": page > 1
    }


async def paginate_query(
    session: AsyncSession,
    query,
    page: int = 1,
    limit: int = DEFAULT_LIMIT
) -> tuple[List, dict]:
    """
    Execute a paginated query.

    Args:
        session: Database session
        query: SQLModel select query (ordering already applied)
        page: Page number (1-indexed)
        limit: Items per page

    Returns:
        (items, pagination metadata)
    """
    page, limit = normalize_page(page, limit)

    # Get total count
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total_result = await session.exec(count_query)
    total = total_result.one()

    # Apply pagination
    offset = (page - 1) * limit
    result = await session.exec(query.offset(offset).limit(limit))
    items = result.all()

    return items, create_pagination(total, page, limit)
