"""Table names and output column groups, the contract with downstream consumers."""

from dataclasses import dataclass
from typing import Optional, Tuple

# Tables extracted from the ENCODE portal, keyed by their snake_case type name.
ENCODE_TYPES = [
    "file",
    "award",
    "lab",
    "platform",
    "replicate",
    "antibody_lot",
    "antibody_characterization",
    "treatment",
    "library",
    "biosample",
    "biosample_type",
    "dataset",
    "experiment",
    "target",
    "organism",
    "user",
]

LITE_COLUMNS = (
    "accession",
    "file_accession",
    "file_type",
    "file_format",
    "file_size",
    "output_category",
    "output_type",
    "target",
    "investigated_as",
    "nucleic_acid_term",
    "assay",
    "treatment_id",
    "treatment",
    "treatment_amount",
    "treatment_amount_unit",
    "treatment_duration",
    "treatment_duration_unit",
    "treatment_temperature",
    "treatment_temperature_unit",
    "treatment_notes",
    "biosample_id",
    "biosample_type",
    "biosample_name",
    "dataset_biosample_summary",
    "dataset_description",
    "replicate_libraries",
    "replicate_antibody",
    "antibody_target",
    "antibody_characterization",
    "antibody_caption",
    "organism",
    "dataset_type",
    "assembly",
    "status",
    "controls",
    "controlled_by",
    "lab",
    "run_type",
    "read_length",
    "paired_end",
    "paired_with",
    "platform",
    "href",
    "biological_replicates",
    "biological_replicate_number",
    "technical_replicate_number",
    "replicate_list",
    "technical_replicates",
    "project",
    "dataset",
    "dbxrefs",
    "superseded_by",
    "file_status",
    "submitted_by",
    "library",
    "derived_from",
    "file_format_type",
    "file_format_specifications",
    "genome_annotation",
    "external_accession",
    "date_released",
    "biosample_ontology",
    "md5sum",
)

STORAGE_COLUMNS = ("notes", "cloud_metadata.url", "s3_uri")

PROVENANCE_COLUMNS = (
    "date_created",
    "uuid",
    "cloud_metadata.md5sum_base64",
    "quality_metrics",
    "content_md5sum",
)


@dataclass(frozen=True)
class ColumnGroup:
    name: str
    columns: Optional[Tuple[str, ...]] = None  # None collects every unnamed column

    @property
    def is_remainder(self) -> bool:
        return self.columns is None


OUTPUT_GROUPS = [
    ColumnGroup("encode_df", LITE_COLUMNS),
    ColumnGroup("encode_df_ext_1", STORAGE_COLUMNS),
    ColumnGroup("encode_df_ext_2", PROVENANCE_COLUMNS),
    ColumnGroup("encode_df_ext_3"),
]

LITE_GROUP = OUTPUT_GROUPS[0].name

EXPECTED_COLUMNS = [
    col for group in OUTPUT_GROUPS if not group.is_remainder for col in group.columns
]
