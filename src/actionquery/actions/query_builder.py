"""Compile action filters into a single parameterized query."""

import hashlib
import json
import operator
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from sqlalchemy import ColumnElement, and_, func, literal_column, or_
from sqlmodel import col, select
from sqlmodel.sql.expression import SelectOfScalar

from actionquery.common.exceptions import InvalidInputError, UnsupportedOperationError
from actionquery.config.config import settings
from actionquery.config.errors import ErrorNames

from .capabilities import ServerInfo, supports_json_extract
from .models import UNCLAIMED, ActionGroup, ActionRecord
from .schemas import ActionFilters, ArgsMatching, OrderBy, QueryType

__all__ = [
    "LIKE_ESCAPE",
    "build_query",
    "encode_args",
    "escape_like",
    "get_args_for_query",
    "hash_args",
    "validate_sql_comparator",
]


LIKE_ESCAPE = "\\"

_COMPARATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
}

_LIKE_SPECIAL = re.compile(r"([\\%_])")
_LEADING_INT = re.compile(r"\s*[+-]?\d+")

_ORDER_COLUMNS = {
    OrderBy.HOOK: col(ActionRecord.hook),
    OrderBy.GROUP: col(ActionGroup.slug),
    OrderBy.MODIFIED: col(ActionRecord.last_attempt_gmt),
    OrderBy.ACTION_ID: col(ActionRecord.action_id),
    OrderBy.DATE: col(ActionRecord.scheduled_date_gmt),
}


def build_query(
    filters: ActionFilters,
    query_type: QueryType | str = QueryType.SELECT,
    *,
    server_info: ServerInfo | None = None,
) -> SelectOfScalar:
    """Build the action ID (or count) query for the given filters.

    Every filter value ends up as a bound parameter, in the order the
    predicates are appended: group, hook, args, status, date, modified,
    claimed, search, then offset and limit.

    Args:
        filters: Structured filter specification.
        query_type: ``select`` for action IDs or ``count`` for the match count.
        server_info: Storage engine capabilities, required for JSON args matching.

    Returns:
        SQLModel select statement projecting action IDs or a count.

    Raises:
        InvalidInputError: Unknown query type, args matching mode or JSON value type.
        UnsupportedOperationError: JSON args matching without engine support.
    """
    try:
        query_type = QueryType(query_type)
    except ValueError:
        raise InvalidInputError(ErrorNames.INVALID_QUERY_TYPE) from None

    action_id = col(ActionRecord.action_id)
    query = (
        select(func.count(action_id))
        if query_type == QueryType.COUNT
        else select(action_id)
    ).select_from(ActionRecord)

    if filters.group or filters.orderby == OrderBy.GROUP:
        query = query.outerjoin(
            ActionGroup, col(ActionGroup.group_id) == col(ActionRecord.group_id)
        )

    predicates = _filter_predicates(filters, server_info)
    for predicate in predicates:
        query = query.where(predicate)

    if query_type == QueryType.SELECT:
        if filters.orderby != OrderBy.NONE:
            column = _ORDER_COLUMNS[filters.orderby]
            query = query.order_by(
                column.asc() if filters.order == "ASC" else column.desc()
            )

        if filters.per_page > 0:
            query = query.offset(filters.offset).limit(filters.per_page)

    logger.debug(
        "Action query built",
        query_type=query_type,
        predicates=len(predicates),
        orderby=filters.orderby,
    )
    return query


def validate_sql_comparator(comparator: str) -> str:
    """Return the comparator if it is allowed, ``=`` otherwise."""
    return comparator if comparator in _COMPARATORS else "="


def encode_args(args: Mapping[str, Any]) -> str:
    """Serialize args to their canonical compact JSON form.

    Keys keep their insertion order, stored rows are written the same way.

    Raises:
        InvalidInputError: If the args are not JSON serializable.
    """
    try:
        return json.dumps(args, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Args are not JSON serializable: {e}") from e


def get_args_for_query(args: Mapping[str, Any]) -> str:
    """Canonical args string as stored in the indexed args column.

    Args longer than the index limit are replaced by their hash so the
    column keeps a bounded length.
    """
    encoded = encode_args(args)
    if len(encoded) <= settings.max_index_length:
        return encoded
    return hash_args(encoded)


def hash_args(encoded: str) -> str:
    """Fixed length digest of encoded args."""
    return hashlib.md5(encoded.encode(), usedforsecurity=False).hexdigest()


def escape_like(value: str) -> str:
    """Escape ``LIKE`` wildcards so ``value`` only matches literally."""
    return _LIKE_SPECIAL.sub(r"\\\1", value)


# -----------------------------------------------------------------------------
# Predicates ------------------------------------------------------------------
# -----------------------------------------------------------------------------


def _filter_predicates(
    filters: ActionFilters, server_info: ServerInfo | None
) -> list[ColumnElement[bool]]:
    predicates: list[ColumnElement[bool]] = []

    if filters.group:
        predicates.append(col(ActionGroup.slug) == filters.group)

    if filters.hook:
        predicates.append(col(ActionRecord.hook).in_(filters.hook))

    if filters.args is not None:
        predicates.extend(
            _args_predicates(
                filters.args, filters.partial_args_matching, server_info
            )
        )

    if filters.status:
        predicates.append(col(ActionRecord.status).in_(filters.status))

    if filters.date is not None:
        predicates.append(
            _date_predicate(
                col(ActionRecord.scheduled_date_gmt),
                filters.date,
                filters.date_compare,
            )
        )

    if filters.modified is not None:
        predicates.append(
            _date_predicate(
                col(ActionRecord.last_attempt_gmt),
                filters.modified,
                filters.modified_compare,
            )
        )

    claim_predicate = _claim_predicate(filters.claimed)
    if claim_predicate is not None:
        predicates.append(claim_predicate)

    # "0" counts as an empty search.
    if filters.search and filters.search != "0":
        predicates.append(_search_predicate(filters.search))

    return predicates


def _args_predicates(
    args: Mapping[str, Any], matching: str, server_info: ServerInfo | None
) -> list[ColumnElement[bool]]:
    try:
        matching = ArgsMatching(matching)
    except ValueError:
        raise InvalidInputError(
            ErrorNames.UNKNOWN_ARGS_MATCHING.format(value=matching)
        ) from None

    column = col(ActionRecord.args)
    match matching:
        case ArgsMatching.JSON:
            if server_info is None or not supports_json_extract(server_info):
                raise UnsupportedOperationError(ErrorNames.JSON_MATCHING_UNAVAILABLE)
            return [
                func.json_extract(column, f"$.{key}") == _json_value(value)
                for key, value in args.items()
            ]
        case ArgsMatching.LIKE:
            return [
                column.like(
                    f"%{escape_like(_json_pair(key, value))}%", escape=LIKE_ESCAPE
                )
                for key, value in args.items()
            ]
        case _:
            return [column == get_args_for_query(args)]


def _json_pair(key: str, value: Any) -> str:  # noqa: ANN401
    # '"key":value' as it appears inside the stored JSON object
    return encode_args({key: value}).strip("{}")


def _json_value(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, bool):
        # Compared as an extracted JSON literal: JSON true, 1 or "true" by engine.
        return func.json_extract("true" if value else "false", "$")
    if isinstance(value, int | float | str):
        return value
    raise InvalidInputError(
        ErrorNames.UNSUPPORTED_JSON_VALUE.format(value=type(value).__name__)
    )


def _date_predicate(
    column: Any,  # noqa: ANN401
    value: datetime,
    comparator: str,
) -> ColumnElement[bool]:
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return _COMPARATORS[validate_sql_comparator(comparator)](column, value)


def _claim_predicate(claimed: bool | int | None) -> ColumnElement[bool] | None:
    claim_id = col(ActionRecord.claim_id)
    if claimed is True:
        return claim_id != literal_column(str(UNCLAIMED))
    if claimed is False:
        return claim_id == literal_column(str(UNCLAIMED))
    if claimed is None:
        return None
    return claim_id == claimed


def _search_predicate(search: str) -> ColumnElement[bool]:
    term = f"%{search}%"
    extended_args = col(ActionRecord.extended_args)
    clauses = [
        col(ActionRecord.hook).like(term),
        and_(extended_args.is_(None), col(ActionRecord.args).like(term)),
        extended_args.like(term),
    ]

    # Claim 0 means unclaimed, so a zero search never matches on claim ID.
    search_claim_id = _as_int(search)
    if search_claim_id:
        clauses.append(col(ActionRecord.claim_id) == search_claim_id)

    return or_(*clauses)


def _as_int(value: str) -> int:
    # Leading integer prefix, "42abc" is 42 and "abc42" is 0.
    match = _LEADING_INT.match(value)
    return int(match.group(0)) if match else 0
