"""Resolution steps that merge the ENCODE reference tables into the file table.

Each ``update_*`` function takes the running file table and the reference
tables it needs, and returns a new file table with the same rows in the same
order. Missing reference tables are allowed: lookups against them resolve to
missing values.
"""

import logging
import re
from typing import Optional

import pandas as pd

from encode_matrix.lookup import (
    coalesce,
    get_column,
    is_missing,
    missing_series,
    pull_column,
    pull_column_id,
    pull_column_merge,
    pull_column_no_prefix,
    pull_columns_append,
    remove_id_prefix,
    set_column,
    substitute,
)

logger = logging.getLogger(__name__)

_DATASET_TYPE = re.compile(r"/(.*)/.*/")
_DATASET_ACCESSION = re.compile(r"/.*/(.*)/")

FILE_COLUMN_RENAMES = {
    "status": "file_status",
    "accession": "file_accession",
    "award": "project",
    "replicate": "replicate_list",
}

REPLICATE_COLUMNS = [
    "biological_replicate_number",
    ("replicate_antibody", "antibody"),
    "technical_replicate_number",
]

ANTIBODY_COLUMNS = [
    ("antibody_target", "targets"),
    ("antibody_characterization", "characterizations"),
]

TREATMENT_COLUMNS = [
    ("treatment_amount", "amount"),
    ("treatment_amount_unit", "amount_units"),
    ("treatment_duration", "duration"),
    ("treatment_duration_unit", "duration_units"),
    ("treatment_temperature", "temperature"),
    ("treatment_temperature_unit", "temperature_units"),
    ("treatment_notes", "notes"),
]

EXPERIMENT_COLUMNS = [
    "target",
    "date_released",
    "status",
    ("assay", "assay_title"),
    "biosample_ontology",
    ("controls", "possible_controls"),
    ("dataset_biosample_summary", "biosample_summary"),
    ("dataset_description", "description"),
]

BIOSAMPLE_TYPE_COLUMNS = [
    ("biosample_type", "classification"),
    ("biosample_name", "term_name"),
]

# Identifier columns that still carry their /<type>/ prefix at the end.
PREFIXED_COLUMNS = ["replicate_libraries", "controls", "controlled_by", "replicate_list"]

Table = Optional[pd.DataFrame]


def _strip_column(files: pd.DataFrame, name: str) -> None:
    column = get_column(files, name)
    if column is not None:
        set_column(files, name, remove_id_prefix(column))


def rename_file_columns(files: pd.DataFrame) -> pd.DataFrame:
    return files.rename(columns=FILE_COLUMN_RENAMES)


def split_dataset_column(files: pd.DataFrame) -> pd.DataFrame:
    """Split ``/<type>/<accession>/`` dataset references into two leading columns."""
    dataset = get_column(files, "dataset")
    if dataset is None:
        dataset = missing_series(files.index)

    split = pd.DataFrame(
        {
            "accession": substitute(dataset, _DATASET_ACCESSION),
            "dataset_type": substitute(dataset, _DATASET_TYPE),
        },
        index=files.index,
    )
    return pd.concat([split, files], axis=1)


def update_project_platform_lab(
    files: pd.DataFrame, awards: Table, labs: Table, platforms: Table
) -> pd.DataFrame:
    files = files.copy()
    set_column(
        files, "project",
        pull_column_no_prefix(files, awards, "project", "id", "project", "project"),
    )
    _strip_column(files, "paired_with")
    set_column(
        files, "platform",
        pull_column_no_prefix(files, platforms, "platform", "id", "title", "platform"),
    )
    set_column(
        files, "lab",
        pull_column_no_prefix(files, labs, "lab", "id", "title", "lab"),
    )
    return files


def update_replicate(files: pd.DataFrame, replicates: Table) -> pd.DataFrame:
    return pull_columns_append(files, replicates, "replicate_list", "id", REPLICATE_COLUMNS)


def update_antibody(
    files: pd.DataFrame, antibody_lot: Table, antibody_charac: Table
) -> pd.DataFrame:
    files = pull_columns_append(
        files, antibody_lot, "replicate_antibody", "id", ANTIBODY_COLUMNS
    )
    set_column(
        files, "antibody_caption",
        pull_column(files, antibody_charac, "antibody_characterization", "id", "caption"),
    )
    set_column(
        files, "antibody_characterization",
        pull_column_merge(
            files, antibody_charac, "antibody_characterization", "id",
            "characterization_method", "antibody_characterization",
        ),
    )
    _strip_column(files, "replicate_antibody")
    _strip_column(files, "antibody_target")
    return files


def first_list_entry(values: pd.Series, sep: str = ";") -> pd.Series:
    """Return the first entry of each ``sep``-delimited string, stripped."""
    firsts = [
        value.split(sep)[0].strip() if isinstance(value, str) else value
        for value in values
    ]
    return pd.Series(firsts, index=values.index, dtype=object)


def infer_biosample_ids(
    files: pd.DataFrame, libraries: Table, replicates: Table, datasets: Table
) -> pd.Series:
    """Resolve the biosample behind each file.

    The replicate's library is used when known. Otherwise the biosample is
    inferred from the first replicate listed by the file's dataset: all the
    replicates of a dataset are expected to share one biosample, so the first
    entry of the list stands for all of them.
    """
    biosample_ids = pull_column(files, libraries, "replicate_libraries", "id", "biosample")

    library_ids = pull_column(files, replicates, "replicate_list", "id", "library")
    biosample_ids = coalesce(
        biosample_ids, pull_column_id(library_ids, libraries, "id", "biosample")
    )

    replicate_lists = pull_column(files, datasets, "accession", "accession", "replicates")
    first_replicates = first_list_entry(replicate_lists)
    library_ids = pull_column_id(first_replicates, replicates, "id", "library")
    return coalesce(
        biosample_ids, pull_column_id(library_ids, libraries, "id", "biosample")
    )


def update_treatment(
    files: pd.DataFrame,
    treatments: Table,
    libraries: Table,
    biosamples: Table,
    replicates: Table,
    datasets: Table,
) -> pd.DataFrame:
    files = files.copy()
    biosample_ids = infer_biosample_ids(files, libraries, replicates, datasets)
    set_column(files, "biosample_id", biosample_ids)
    logger.debug(
        "Resolved biosamples for %d of %d files",
        sum(not is_missing(b) for b in biosample_ids), len(files),
    )

    set_column(
        files, "organism", pull_column(files, biosamples, "biosample_id", "id", "organism")
    )
    set_column(
        files, "treatment_id",
        pull_column(files, biosamples, "biosample_id", "id", "treatments"),
    )

    # The term name replaces the id when the treatment is known.
    set_column(files, "treatment", get_column(files, "treatment_id"))
    set_column(
        files, "treatment",
        pull_column_merge(
            files, treatments, "treatment_id", "id", "treatment_term_name", "treatment"
        ),
    )
    return pull_columns_append(files, treatments, "treatment_id", "id", TREATMENT_COLUMNS)


def update_experiment(files: pd.DataFrame, experiments: Table) -> pd.DataFrame:
    return pull_columns_append(
        files, experiments, "accession", "accession", EXPERIMENT_COLUMNS
    )


def update_biosample_types(files: pd.DataFrame, biosample_types: Table) -> pd.DataFrame:
    return pull_columns_append(
        files, biosample_types, "biosample_ontology", "id", BIOSAMPLE_TYPE_COLUMNS
    )


def update_target(files: pd.DataFrame, targets: Table, organisms: Table) -> pd.DataFrame:
    files = files.copy()
    set_column(
        files, "organism",
        pull_column_merge(files, targets, "target", "id", "organism", "organism"),
    )
    set_column(
        files, "investigated_as",
        pull_column(files, targets, "target", "id", "investigated_as"),
    )
    set_column(
        files, "target",
        pull_column_merge(files, targets, "target", "id", "label", "target"),
    )
    set_column(
        files, "organism",
        pull_column_merge(files, organisms, "organism", "id", "scientific_name", "organism"),
    )
    return files


def update_miscellaneous(
    files: pd.DataFrame, libraries: Table, users: Table, datasets: Table
) -> pd.DataFrame:
    files = files.copy()
    set_column(
        files, "nucleic_acid_term",
        pull_column(files, libraries, "replicate_libraries", "id", "nucleic_acid_term_name"),
    )
    set_column(
        files, "submitted_by",
        pull_column_merge(files, users, "submitted_by", "id", "title", "submitted_by"),
    )
    set_column(
        files, "status",
        pull_column_merge(files, datasets, "accession", "accession", "status", "status"),
    )
    return files


def format_file_size(size):
    """Render a byte count with binary units, e.g. ``2048`` -> ``"2 Kb"``.

    Missing values are returned as None; values that are not numbers are
    returned unchanged.
    """
    if is_missing(size):
        return None
    try:
        size = float(size)
    except (TypeError, ValueError):
        return size

    if size < 1024:
        return f"{_format_number(size)} b"
    elif size < 1048576:
        return f"{_format_number(round(size / 1024, 1))} Kb"
    elif size < 1073741824:
        return f"{_format_number(round(size / 1048576, 1))} Mb"
    return f"{_format_number(round(size / 1073741824, 2))} Gb"


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return str(value)


def file_size_conversion(files: pd.DataFrame) -> pd.DataFrame:
    sizes = get_column(files, "file_size")
    if sizes is None:
        return files
    files = files.copy()
    set_column(
        files, "file_size",
        pd.Series([format_file_size(s) for s in sizes], index=files.index, dtype=object),
    )
    return files


def remove_remaining_prefixes(files: pd.DataFrame) -> pd.DataFrame:
    files = files.copy()
    for name in PREFIXED_COLUMNS:
        _strip_column(files, name)
    return files
