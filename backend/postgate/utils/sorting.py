from __future__ import annotations
from flask import abort


def apply_multi_sort(query, sort_expr: str | None, allowed: dict, default: list, tie_breaker):
    """Apply a `?sort=` expression such as `-created_at,title` to a query.

    allowed: field key -> column. default: clauses used when no sort is given.
    tie_breaker: column appended (descending) so paging stays deterministic.
    """
    if not sort_expr:
        return query.order_by(*default, tie_breaker.desc())
    clauses = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        col = allowed.get(key)
        if col is None:
            abort(400, description=f'Invalid sort field {key}')
        clauses.append(col.desc() if desc else col.asc())
    clauses.append(tie_breaker.desc())
    return query.order_by(*clauses)
