from fastapi import Query
from pydantic import BaseModel


def pagination_params(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> dict:
    return {"skip": skip, "limit": limit}


def paginate(query, skip: int, limit: int, schema: type[BaseModel] | None = None) -> dict:
    """Slice ``query`` into a page; rows are converted with ``schema`` when given."""
    total = query.count()
    items = query.offset(skip).limit(limit).all()
    if schema is not None:
        items = [schema.model_validate(i) for i in items]
    return {"items": items, "total": total, "skip": skip, "limit": limit}
