from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Query

from shared.core.exceptions import ValidationError
from shared.core.schemas import CommonQueryParams


def apply_sorting(query: Query, params: CommonQueryParams, sort_columns: Dict[str, Any],
                  default_sort: str, tie_breaker: Optional[Any] = None,
                  default_order: str = "desc") -> Query:
    """Order ``query`` by the whitelisted column named in ``params.sort_by``."""
    sort_by = (params.sort_by or default_sort).lower()
    column = sort_columns.get(sort_by)
    if column is None:
        raise ValidationError(
            f"cannot sort by {params.sort_by}",
            details={"allowed": sorted(sort_columns)},
        )

    sort_order = (params.sort_order or default_order).lower()
    if sort_order not in ("asc", "desc"):
        raise ValidationError(f"invalid sort order: {params.sort_order}")

    if sort_order == "asc":
        query = query.order_by(column.asc())
        if tie_breaker is not None:
            query = query.order_by(tie_breaker.asc())
    else:
        query = query.order_by(column.desc())
        if tie_breaker is not None:
            query = query.order_by(tie_breaker.desc())
    return query


def paginate(query: Query, params: CommonQueryParams) -> Tuple[List[Any], int]:
    # count before ordering so the database does not sort twice
    total = query.order_by(None).count()
    rows = query.offset(params.skip).limit(params.limit).all()
    return rows, total
