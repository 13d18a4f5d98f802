"""Column lookups between ENCODE tables.

Every helper here behaves like a left-outer join projected onto one or more
columns: the result always has one value per row of the primary table, in
the same order and with the same index. Unresolvable keys become missing
values (or a fallback value), never errors.
"""

import re
from collections.abc import Hashable
from typing import Container, Dict, Iterable, Optional, Sequence, Tuple, Union

import pandas as pd

_ID_PREFIX = re.compile(r"/.*/(.*)/")

ValuePair = Union[str, Tuple[str, str]]


def is_missing(value) -> bool:
    return pd.api.types.is_scalar(value) and pd.isna(value)


def missing_series(index: pd.Index) -> pd.Series:
    return pd.Series([None] * len(index), index=index, dtype=object)


def get_column(table: Optional[pd.DataFrame], name: str) -> Optional[pd.Series]:
    """Return ``table[name]``, or None if the table or column is absent.

    With duplicated column names the first occurrence is returned.
    """
    if table is None or name not in table.columns:
        return None
    column = table.loc[:, name]
    if isinstance(column, pd.DataFrame):
        column = column.iloc[:, 0]
    return column


def set_column(table: pd.DataFrame, name: str, values: pd.Series) -> None:
    """Assign ``values`` in place, overwriting the first column called ``name``."""
    if name in table.columns:
        table.isetitem(list(table.columns).index(name), values)
    else:
        table[name] = values


def coalesce(primary: pd.Series, fallback: pd.Series) -> pd.Series:
    """Take ``primary`` where present, ``fallback`` elsewhere."""
    values = [f if is_missing(p) else p for p, f in zip(primary, fallback)]
    return pd.Series(values, index=primary.index, dtype=object)


def substitute(values, pattern: re.Pattern, repl: str = r"\1"):
    """Apply ``pattern.sub`` to every string; anything else passes through."""
    def _sub(value):
        return pattern.sub(repl, value) if isinstance(value, str) else value

    if isinstance(values, pd.Series):
        return pd.Series([_sub(v) for v in values], index=values.index, dtype=object)
    return _sub(values)


def remove_id_prefix(ids):
    """Remove the type prefix from ENCODE URL-like identifiers.

    ``/files/ENC09345TXW/`` becomes ``ENC09345TXW``. Values that do not look
    like a path are returned unchanged.
    """
    return substitute(ids, _ID_PREFIX)


def _first_match_index(keys: pd.Series, values: pd.Series) -> Dict[Hashable, object]:
    index: Dict[Hashable, object] = {}
    for key, value in zip(keys, values):
        if isinstance(key, Hashable) and not is_missing(key):
            index.setdefault(key, value)
    return index


def _match(index: Container, key) -> bool:
    return isinstance(key, Hashable) and not is_missing(key) and key in index


def pull_column_id(
    ids: Iterable, table2: Optional[pd.DataFrame], id2: str, pulled_column: str
) -> pd.Series:
    """Look up each of ``ids`` in ``table2[id2]`` and return ``table2[pulled_column]``.

    The first matching row wins. Keys without a match give a missing value.
    """
    if not isinstance(ids, pd.Series):
        ids = pd.Series(list(ids), dtype=object)

    keys = get_column(table2, id2)
    values = get_column(table2, pulled_column)
    if keys is None or values is None:
        return missing_series(ids.index)

    index = _first_match_index(keys, values)
    pulled = [index[key] if _match(index, key) else None for key in ids]
    return pd.Series(pulled, index=ids.index, dtype=object)


def pull_column(
    table1: pd.DataFrame,
    table2: Optional[pd.DataFrame],
    id1: str,
    id2: str,
    pulled_column: str,
) -> pd.Series:
    """Match ``table1[id1]`` to ``table2[id2]`` and return ``table2[pulled_column]``."""
    ids = get_column(table1, id1)
    if ids is None:
        return missing_series(table1.index)
    return pull_column_id(ids, table2, id2, pulled_column)


def pull_column_merge(
    table1: pd.DataFrame,
    table2: Optional[pd.DataFrame],
    id1: str,
    id2: str,
    pulled_column: str,
    updated_value: str,
) -> pd.Series:
    """Like :func:`pull_column`, but rows whose key has no match in ``table2``
    keep ``table1[updated_value]``."""
    pulled = pull_column(table1, table2, id1, id2, pulled_column)
    fallback = get_column(table1, updated_value)
    if fallback is None:
        fallback = missing_series(table1.index)

    ids = get_column(table1, id1)
    keys = get_column(table2, id2)
    if ids is None or keys is None:
        return pd.Series(list(fallback), index=table1.index, dtype=object)

    known_keys = {key for key in keys if isinstance(key, Hashable) and not is_missing(key)}
    merged = [
        value if _match(known_keys, key) else prior
        for key, value, prior in zip(ids, pulled, fallback)
    ]
    return pd.Series(merged, index=table1.index, dtype=object)


def pull_column_no_prefix(
    table1: pd.DataFrame,
    table2: Optional[pd.DataFrame],
    id1: str,
    id2: str,
    pull_value: str,
    prefix_value: str,
) -> pd.Series:
    """Pull a column; where nothing was found, fall back to
    ``table1[prefix_value]`` with its id prefix removed."""
    pulled = pull_column(table1, table2, id1, id2, pull_value)
    prior = get_column(table1, prefix_value)
    if prior is None:
        return pulled
    return coalesce(pulled, remove_id_prefix(prior))


def pull_columns(
    table1: pd.DataFrame,
    table2: Optional[pd.DataFrame],
    id1: str,
    id2: str,
    value_pairs: Sequence[ValuePair],
) -> pd.DataFrame:
    """Pull several columns at once into a new table.

    Each item of ``value_pairs`` is either a column name of ``table2``, kept
    as is, or an ``(output_name, source_name)`` pair. For example
    ``[("antibody_target", "target")]`` creates ``antibody_target`` from
    ``table2["target"]``.
    """
    pulled = {}
    for pair in value_pairs:
        if isinstance(pair, str):
            out_name, value_name = pair, pair
        else:
            out_name, value_name = pair
        pulled[out_name] = pull_column(table1, table2, id1, id2, value_name)
    return pd.DataFrame(pulled, index=table1.index)


def pull_columns_append(
    table1: pd.DataFrame,
    table2: Optional[pd.DataFrame],
    id1: str,
    id2: str,
    value_pairs: Sequence[ValuePair],
) -> pd.DataFrame:
    """Call :func:`pull_columns` and append the result to the right of ``table1``."""
    pulled = pull_columns(table1, table2, id1, id2, value_pairs)
    return pd.concat([table1, pulled], axis=1)
