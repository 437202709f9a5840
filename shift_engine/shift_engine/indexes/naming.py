"""Index name synthesis under the SQL Server identifier length limit.

Names follow ``{prefix}_{table}_{field1}_{field2}...`` with prefix ``AK`` for
alternate keys and ``IX`` otherwise.  A name longer than 128 characters is
cut to leave room for ``_`` plus an 8-character hash of the *untruncated*
name, so two long names that only collide after truncation still differ.
The cut is a plain character offset and may fall inside a field name.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

MAX_INDEX_NAME_LENGTH = 128
HASH_LENGTH = 8  # 8 hex characters = 32 bits

ALTERNATE_KEY_PREFIX = "AK"
INDEX_PREFIX = "IX"


def generate_index_name(is_alternate_key: bool, table_name: str, resolved_fields: Iterable[str]) -> str:
    """Return an index name of at most :data:`MAX_INDEX_NAME_LENGTH` characters.

    Parameters
    ----------
    is_alternate_key:
        ``True`` for unique alternate keys (``AK_`` prefix).
    table_name:
        The indexed table.
    resolved_fields:
        Physical column names, already resolved from model names.
    """
    prefix = ALTERNATE_KEY_PREFIX if is_alternate_key else INDEX_PREFIX
    base_name = f"{prefix}_{table_name}_{'_'.join(resolved_fields)}"

    if len(base_name) <= MAX_INDEX_NAME_LENGTH:
        return base_name

    max_base_length = MAX_INDEX_NAME_LENGTH - (1 + HASH_LENGTH)
    return f"{base_name[:max_base_length]}_{_short_hash(base_name)}"


def _short_hash(value: str) -> str:
    """First :data:`HASH_LENGTH` lowercase hex digits of the SHA-256 of *value*."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:HASH_LENGTH]
