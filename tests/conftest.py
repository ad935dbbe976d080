import logging

import pandas as pd
import pytest


CLINICAL_ROWS = [
    # SAMPLE_ID, AGE, CANCER_TYPE, CANCER_TYPE_DETAILED, SEX, PRIMARY_RACE, ETHNICITY, CENTER
    ("S1", "65", "Non-Small Cell Lung Cancer", "Lung Adenocarcinoma", "Female", "White", "Non-Spanish/non-Hispanic", "DFCI"),
    ("S2", ">89", "Melanoma", "Cutaneous Melanoma", "Male", "White", "Non-Spanish/non-Hispanic", "MSK"),
    ("S3", "<18", "Breast Cancer", "Breast Invasive Ductal Carcinoma", "Female", "Black", "", "VICC"),
    ("S4", "", "Gastrointestinal Stromal Tumor", "Gastrointestinal Stromal Tumor", "Male", "Asian", "Spanish/Hispanic", "JHU"),
]

MUTATION_ROWS = [
    # Hugo_Symbol, Tumor_Sample_Barcode, CLIN_SIG
    ("ALK", "S1", "pathogenic"),
    ("ALK", "S2", "pathogenic"),
    ("KIT", "S4", "likely_pathogenic"),
    ("KIT", "S2", "pathogenic"),
    ("BRAF", "S2", ""),
    ("EGFR", "S1", "benign"),
    ("ERBB2", "S9", "pathogenic"),
    ("PIK3CA", "S3", "pathogenic"),
]

THERAPY_HTML = """<html><body>
<h1>Targeted Cancer Therapies</h1>
<table>
<tr><th>Agent</th><th>Target(s)</th><th>FDA-approved indication(s)</th></tr>
<tr>
  <td>Crizotinib (Xalkori)</td>
  <td>ALK, ROS1, MET</td>
  <td>Non-small cell lung cancer<br/>Anaplastic large cell lymphoma</td>
</tr>
<tr>
  <td>Imatinib (Gleevec)</td>
  <td>KIT, PDGFRα</td>
  <td><ul><li>Gastrointestinal stromal tumor</li><li>Chronic myelogenous leukemia</li><li>Dermatofibrosarcoma protuberans</li></ul></td>
</tr>
</table>
</body></html>
"""


def clinical_frame():
    return pd.DataFrame([
        {
            "SAMPLE_ID": sample,
            "PATIENT_ID": sample.replace("S", "P"),
            "AGE_AT_SEQ_REPORT": age,
            "ONCOTREE_CODE": "CODE",
            "SAMPLE_TYPE": "Primary",
            "SEQ_ASSAY_ID": f"{center}-PANEL",
            "CANCER_TYPE": cancer_type,
            "CANCER_TYPE_DETAILED": detailed,
            "SEX": sex,
            "PRIMARY_RACE": race,
            "ETHNICITY": ethnicity,
            "CENTER": center,
        }
        for sample, age, cancer_type, detailed, sex, race, ethnicity, center in CLINICAL_ROWS
    ])


def mutation_frame():
    return pd.DataFrame([
        {
            "Hugo_Symbol": gene,
            "Entrez_Gene_Id": "0",
            "Center": "DFCI",
            "NCBI_Build": "GRCh37",
            "Chromosome": "7",
            "Start_Position": str(1000 + i),
            "End_Position": str(1000 + i),
            "Variant_Classification": "Missense_Mutation",
            "Variant_Type": "SNP",
            "Reference_Allele": "C",
            "Tumor_Seq_Allele2": "T",
            "Tumor_Sample_Barcode": sample,
            "CLIN_SIG": clin_sig,
        }
        for i, (gene, sample, clin_sig) in enumerate(MUTATION_ROWS)
    ])


def write_maf(df, path, version_line="#version 2.4"):
    with open(path, "w") as f:
        if version_line is not None:
            f.write(version_line + "\n")
        df.to_csv(f, sep="\t", index=False)
    return path


@pytest.fixture
def clinical_file(tmp_path):
    file = tmp_path / "data_clinical.txt"
    clinical_frame().to_csv(file, sep="\t", index=False)
    return file


@pytest.fixture
def mutation_file(tmp_path):
    return write_maf(mutation_frame(), tmp_path / "data_mutations_extended.txt")


@pytest.fixture
def therapy_html(tmp_path):
    file = tmp_path / "targeted_therapies.html"
    file.write_text(THERAPY_HTML, encoding="utf-8")
    return file


@pytest.fixture
def restore_logging():
    """Undo root logger changes made by the pipeline's logging setup."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
