"""Extract the ENCODE tables and store them locally."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import pandas as pd

from encode_matrix.client import EncodeClient
from encode_matrix.models import ENCODE_TYPES
from encode_matrix.output import has_tables, remove_tables, write_tables

logger = logging.getLogger(__name__)


def prepare_database(
    directory: Union[str, Path],
    types: Iterable[str] = ENCODE_TYPES,
    overwrite: bool = False,
    client: Optional[EncodeClient] = None,
) -> Optional[Dict[str, pd.DataFrame]]:
    """Download the given ENCODE tables into ``directory``.

    Returns the extracted tables, or None when the directory already holds
    tables (and ``overwrite`` is false) or nothing could be extracted. With
    ``overwrite`` the previous tables are replaced as a whole, so a type that
    is no longer extracted does not survive from an earlier run.
    """
    if has_tables(directory) and not overwrite:
        logger.warning(
            "%s already holds ENCODE tables and will not be overwritten. "
            "Delete it or set overwrite=True before re-running the data preparation.",
            directory,
        )
        return None

    client = client or EncodeClient()
    tables: Dict[str, pd.DataFrame] = {}
    for object_type in types:
        logger.info("Extracting table %s", object_type)
        table = client.extract_table(object_type)
        if table.shape[1] == 0:
            logger.info("Table %s is empty, skipping", object_type)
            continue
        tables[object_type] = table

    if not tables:
        logger.warning(
            "Something went wrong during data preparation: no table could be extracted. "
            "Please re-run the whole process."
        )
        return None

    if overwrite and has_tables(directory):
        logger.info("Removed %d stale tables from %s", remove_tables(directory), directory)
    write_tables(tables, directory)
    logger.info("Stored %d tables in %s", len(tables), directory)
    return tables
