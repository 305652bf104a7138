"""Translate queryDocuments filters/orderBy/limit into a chained Firestore query."""

from typing import Any, Iterable, Optional

from google.cloud.firestore_v1.base_query import BaseQuery, FieldFilter

from .schemas import OrderBy, QueryFilter
from .timestamps import normalize

# Wire operator -> Firestore SDK operator
OPERATORS = {
    "==": "==",
    "!=": "!=",
    ">": ">",
    "<": "<",
    ">=": ">=",
    "<=": "<=",
    "array-contains": "array_contains",
    "array-contains-any": "array_contains_any",
    "in": "in",
    "not-in": "not-in",
}

DIRECTIONS = {
    "asc": BaseQuery.ASCENDING,
    "desc": BaseQuery.DESCENDING,
}


def build_query(
    base: Any,
    filters: Iterable[QueryFilter] = (),
    order_by: Iterable[OrderBy] = (),
    limit: Optional[int] = None,
) -> Any:
    query = base
    for f in filters:
        query = query.where(filter=FieldFilter(f.field, OPERATORS[f.operator], normalize(f.value)))
    for order in order_by:
        query = query.order_by(order.field, direction=DIRECTIONS[order.direction])
    if limit:
        query = query.limit(limit)
    return query
