"""Read and write ENCODE tables as TSV/CSV files."""

import logging
from pathlib import Path
from typing import Dict, Mapping, Union

import pandas as pd

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def write_tsv(table: pd.DataFrame, filepath: PathLike) -> None:
    _write(table, filepath, delimiter="\t")


def write_csv(table: pd.DataFrame, filepath: PathLike) -> None:
    _write(table, filepath, delimiter=",")


def write_table(table: pd.DataFrame, filepath: PathLike, fmt: str = "tsv") -> None:
    if fmt == "csv":
        write_csv(table, filepath)
    else:
        write_tsv(table, filepath)


def _write(table: pd.DataFrame, filepath: PathLike, delimiter: str) -> None:
    table.to_csv(filepath, sep=delimiter, index=False, encoding="utf-8")


def write_tables(tables: Mapping[str, pd.DataFrame], directory: PathLike) -> None:
    """Write one ``<name>.tsv`` file per table."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    for name, table in tables.items():
        write_tsv(table, directory / f"{name}.tsv")
        logger.debug("Wrote %s (%d rows)", name, len(table))


def remove_tables(directory: PathLike) -> int:
    """Delete every ``<name>.tsv`` file of a directory; return how many were removed."""
    removed = 0
    for path in Path(directory).glob("*.tsv"):
        path.unlink()
        removed += 1
    return removed


def has_tables(directory: PathLike) -> bool:
    directory = Path(directory)
    return directory.is_dir() and any(directory.glob("*.tsv"))


def load_tables(directory: PathLike) -> Dict[str, pd.DataFrame]:
    """Load every ``<name>.tsv`` file of a directory written by :func:`write_tables`."""
    tables = {}
    for path in sorted(Path(directory).glob("*.tsv")):
        tables[path.stem] = pd.read_csv(
            path, sep="\t", keep_default_na=False, na_values=[""], low_memory=False
        )
    return tables
