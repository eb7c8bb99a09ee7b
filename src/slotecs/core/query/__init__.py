"""Query functionality: query model and entity matching."""

from slotecs.core.query.models import Query, QuerySpec
from slotecs.core.query.operations import match_entities, normalize_query, query_from_args

__all__ = [
    # Models
    "Query",
    "QuerySpec",
    # Operations
    "match_entities",
    "normalize_query",
    "query_from_args",
]
