"""Shared fixtures for encode-matrix tests."""

import pandas as pd
import pytest
import requests

from encode_matrix.rate_limiter import RateLimiter


@pytest.fixture
def fast_limiter():
    """Rate limiter that never blocks (high rate)."""
    return RateLimiter(10_000)


@pytest.fixture
def session():
    return requests.Session()


# --- Miniature ENCODE database ---
#
# ENCFF001AAA: fully linked ChIP-seq file.
# ENCFF002BBB: no replicate; its dataset lists two replicates from different
#              biosamples, and an award missing from the award table.
# ENCFF003CCC: annotation file with no experiment and no replicate.


@pytest.fixture
def file_table():
    return pd.DataFrame(
        {
            "accession": ["ENCFF001AAA", "ENCFF002BBB", "ENCFF003CCC"],
            "status": ["released", "released", "archived"],
            "award": ["/awards/U54HG004558/", "/awards/UNKNOWN/", "/awards/U54HG004558/"],
            "replicate": ["/replicates/r1/", None, None],
            "replicate_libraries": ["/libraries/ENCLB001AAA/", None, None],
            "dataset": [
                "/experiments/ENCSR001AAA/",
                "/experiments/ENCSR002BBB/",
                "/annotations/ENCSR000ANN/",
            ],
            "lab": ["/labs/lab-a/", "/labs/lab-a/", "/labs/unknown-lab/"],
            "platform": ["/platforms/OBI:0002001/", None, None],
            "paired_with": ["/files/ENCFF002BBB/", None, None],
            "submitted_by": ["/users/u1/", "/users/u2/", "/users/u1/"],
            "controlled_by": ["/files/ENCFF900CTL/", None, None],
            "file_size": [2048, 1023, None],
            "file_type": ["bam", "bigWig", "bed bed3+"],
            "file_format": ["bam", "bigWig", "bed"],
            "output_type": ["alignments", "signal", "candidate Cis-Regulatory Elements"],
            "assembly": ["GRCh38", "mm10", "GRCh38"],
            "notes": ["aligned with bwa", None, None],
            "uuid": ["u-001", "u-002", "u-003"],
            "md5sum": ["aaa", "bbb", "ccc"],
            "extra_field": ["x1", "x2", "x3"],
        }
    )


@pytest.fixture
def reference_tables():
    return {
        "award": pd.DataFrame(
            {"id": ["/awards/U54HG004558/"], "project": ["ENCODE"]}
        ),
        "lab": pd.DataFrame(
            {"id": ["/labs/lab-a/"], "title": ["Lab A, Stanford"]}
        ),
        "platform": pd.DataFrame(
            {"id": ["/platforms/OBI:0002001/"], "title": ["Illumina HiSeq 2000"]}
        ),
        "replicate": pd.DataFrame(
            {
                "id": ["/replicates/r1/", "/replicates/r2/", "/replicates/r3/"],
                "biological_replicate_number": [1, 1, 2],
                "technical_replicate_number": [1, 1, 1],
                "antibody": ["/antibodies/ENCAB001AAA/", None, None],
                "library": [
                    "/libraries/ENCLB001AAA/",
                    "/libraries/ENCLB002BBB/",
                    "/libraries/ENCLB003CCC/",
                ],
            }
        ),
        "antibody_lot": pd.DataFrame(
            {
                "id": ["/antibodies/ENCAB001AAA/"],
                "targets": ["/targets/CTCF-human/"],
                "characterizations": ["/antibody-characterizations/c1/"],
            }
        ),
        "antibody_characterization": pd.DataFrame(
            {
                "id": ["/antibody-characterizations/c1/"],
                "caption": ["Western blot of nuclear extract"],
                "characterization_method": ["immunoblot"],
            }
        ),
        "library": pd.DataFrame(
            {
                "id": [
                    "/libraries/ENCLB001AAA/",
                    "/libraries/ENCLB002BBB/",
                    "/libraries/ENCLB003CCC/",
                ],
                "biosample": [
                    "/biosamples/ENCBS001AAA/",
                    "/biosamples/ENCBS002BBB/",
                    "/biosamples/ENCBS003CCC/",
                ],
                "nucleic_acid_term_name": ["DNA", "DNA", "RNA"],
            }
        ),
        "biosample": pd.DataFrame(
            {
                "id": [
                    "/biosamples/ENCBS001AAA/",
                    "/biosamples/ENCBS002BBB/",
                    "/biosamples/ENCBS003CCC/",
                ],
                "organism": ["/organisms/human/", "/organisms/mouse/", "/organisms/human/"],
                "treatments": ["/treatments/t1/", None, "/treatments/t2/"],
            }
        ),
        "treatment": pd.DataFrame(
            {
                "id": ["/treatments/t1/", "/treatments/t2/"],
                "treatment_term_name": ["estradiol", None],
                "amount": [10, 5],
                "amount_units": ["nM", "mg/mL"],
                "duration": [1, 30],
                "duration_units": ["hour", "minute"],
                "temperature": [None, 37],
                "temperature_units": [None, "Celsius"],
                "notes": [None, "heat shock"],
            }
        ),
        "dataset": pd.DataFrame(
            {
                "accession": ["ENCSR001AAA", "ENCSR002BBB"],
                "replicates": ["/replicates/r1/", "/replicates/r2/; /replicates/r3/"],
                "status": ["released", "archived"],
            }
        ),
        "experiment": pd.DataFrame(
            {
                "accession": ["ENCSR001AAA", "ENCSR002BBB"],
                "target": ["/targets/CTCF-human/", None],
                "date_released": ["2012-02-13", "2013-05-01"],
                "status": ["released", "released"],
                "assay_title": ["TF ChIP-seq", "DNase-seq"],
                "biosample_ontology": [
                    "/biosample-types/cell_line_EFO_0002067/",
                    "/biosample-types/tissue_UBERON_0000955/",
                ],
                "possible_controls": ["/experiments/ENCSR900CTL/", None],
                "biosample_summary": ["K562", "brain tissue"],
                "description": ["CTCF ChIP-seq on K562", "DNase-seq on brain"],
            }
        ),
        "biosample_type": pd.DataFrame(
            {
                "id": [
                    "/biosample-types/cell_line_EFO_0002067/",
                    "/biosample-types/tissue_UBERON_0000955/",
                ],
                "classification": ["cell line", "tissue"],
                "term_name": ["K562", "brain"],
            }
        ),
        "target": pd.DataFrame(
            {
                "id": ["/targets/CTCF-human/"],
                "label": ["CTCF"],
                "investigated_as": ["transcription factor"],
                "organism": ["/organisms/human/"],
            }
        ),
        "organism": pd.DataFrame(
            {
                "id": ["/organisms/human/", "/organisms/mouse/"],
                "scientific_name": ["Homo sapiens", "Mus musculus"],
            }
        ),
        "user": pd.DataFrame(
            {"id": ["/users/u1/"], "title": ["Jane Submitter"]}
        ),
    }


@pytest.fixture
def tables(file_table, reference_tables):
    return {"file": file_table, **reference_tables}


@pytest.fixture
def encode_search_payload():
    """Trimmed portal search response for type=Lab."""
    return {
        "@graph": [
            {
                "@id": "/labs/lab-a/",
                "@type": ["Lab", "Item"],
                "title": "Lab A, Stanford",
                "awards": ["/awards/U54HG004558/", "/awards/U41HG006992/"],
                "pi": "/users/u1/",
                "fax": "",
                "aliases": [],
                "address": {"city": "Stanford", "country": "USA"},
            },
            {
                "@id": "/labs/lab-b/",
                "@type": ["Lab", "Item"],
                "title": "Lab B",
                "awards": ["/awards/U54HG004558/"],
                "pi": "/users/u2/",
                "aliases": [],
                "address": {"city": "Seattle"},
            },
        ],
        "total": 2,
    }
