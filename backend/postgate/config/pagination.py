DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Largest value SQLite (and BIGINT columns) can bind.
MAX_OFFSET = 2**63 - 1


def normalize_pagination(limit_raw, offset_raw):
    """Coerce raw query-string values into a bounded (limit, offset) pair."""
    try:
        limit = int(limit_raw) if limit_raw not in (None, '') else DEFAULT_LIMIT
        offset = int(offset_raw) if offset_raw not in (None, '') else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    if offset > MAX_OFFSET:
        raise ValueError('offset out of range')
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    return limit, offset
