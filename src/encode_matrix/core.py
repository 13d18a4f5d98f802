"""Orchestrator: threads the file table through every resolver and splits the result."""

import logging
from collections import OrderedDict
from typing import Dict, List, Mapping, Optional

import pandas as pd

from encode_matrix import resolvers
from encode_matrix.lookup import get_column
from encode_matrix.models import EXPECTED_COLUMNS, LITE_GROUP, OUTPUT_GROUPS

logger = logging.getLogger(__name__)


class MissingTableError(KeyError):
    """Raised when the primary ``file`` table is not among the input tables."""


def resolve_file_table(tables: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Merge every reference table into the file table, sorted by dataset accession."""
    if tables.get("file") is None:
        raise MissingTableError("file")
    db = tables.get
    files = tables["file"].reset_index(drop=True)
    logger.info("Resolving metadata for %d files", len(files))

    files = resolvers.rename_file_columns(files)
    files = resolvers.split_dataset_column(files)

    files = resolvers.update_project_platform_lab(
        files, awards=db("award"), labs=db("lab"), platforms=db("platform")
    )
    files = resolvers.update_replicate(files, replicates=db("replicate"))
    files = resolvers.update_antibody(
        files,
        antibody_lot=db("antibody_lot"),
        antibody_charac=db("antibody_characterization"),
    )
    files = resolvers.update_treatment(
        files,
        treatments=db("treatment"),
        libraries=db("library"),
        biosamples=db("biosample"),
        replicates=db("replicate"),
        datasets=db("dataset"),
    )
    files = resolvers.update_experiment(files, experiments=db("experiment"))
    files = resolvers.update_biosample_types(files, biosample_types=db("biosample_type"))
    files = resolvers.update_target(files, targets=db("target"), organisms=db("organism"))

    files = resolvers.update_miscellaneous(
        files, libraries=db("library"), users=db("user"), datasets=db("dataset")
    )
    files = resolvers.file_size_conversion(files)
    files = resolvers.remove_remaining_prefixes(files)

    order = get_column(files, "accession").sort_values(kind="stable", na_position="last")
    return files.loc[order.index].reset_index(drop=True)


def missing_expected_columns(table: pd.DataFrame) -> List[str]:
    """Return the explicitly grouped columns the table does not have."""
    present = set(table.columns)
    return [col for col in EXPECTED_COLUMNS if col not in present]


def partition_columns(table: pd.DataFrame) -> "OrderedDict[str, pd.DataFrame]":
    """Split a resolved table into the column groups of ``OUTPUT_GROUPS``.

    Only present columns are kept. When a name appears more than once the
    first occurrence is used.
    """
    columns = list(table.columns)
    named = set(EXPECTED_COLUMNS)
    partitions: "OrderedDict[str, pd.DataFrame]" = OrderedDict()

    for group in OUTPUT_GROUPS:
        if group.is_remainder:
            seen = set()
            positions = []
            for pos, col in enumerate(columns):
                if col not in named and col not in seen:
                    seen.add(col)
                    positions.append(pos)
        else:
            positions = [columns.index(col) for col in group.columns if col in columns]
        partitions[group.name] = table.iloc[:, positions]

    return partitions


def export_matrix_lite(tables: Mapping[str, pd.DataFrame]) -> Dict[str, pd.DataFrame]:
    """Resolve file metadata and return it split into the output column groups.

    The ``encode_df`` entry holds the most relevant columns; the
    ``encode_df_ext_*`` entries hold the rest.
    """
    files = resolve_file_table(tables)

    missing = missing_expected_columns(files)
    if missing:
        logger.warning(
            "Some expected columns are no longer present within ENCODE metadata. "
            "Missing columns: %s", ", ".join(missing),
        )

    partitions = partition_columns(files)
    logger.info(
        "Resolved %d files into %d columns (%d in %s)",
        len(files), sum(p.shape[1] for p in partitions.values()),
        partitions[LITE_GROUP].shape[1], LITE_GROUP,
    )
    return partitions


def export_matrix(tables: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Resolve file metadata and return every column in a single table."""
    partitions = export_matrix_lite(tables)
    return pd.concat(list(partitions.values()), axis=1)


class FullTableCache:
    """Holds the full merged table once it has been computed.

    Not thread-safe. Call :meth:`reset` to force the next :meth:`get` to
    rebuild it.
    """

    def __init__(self):
        self._table: Optional[pd.DataFrame] = None

    @property
    def is_populated(self) -> bool:
        return self._table is not None

    def get(self, tables: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
        if self._table is None:
            logger.debug("Building full metadata table")
            self._table = export_matrix(tables)
        return self._table

    def reset(self) -> None:
        self._table = None
