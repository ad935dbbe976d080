import logging

import numpy as np
import pandas as pd
import pytest

from genie_onlabel.data_processing import load_clinical_table, load_mutation_table, tidy_therapies, parse_therapy_html
from genie_onlabel.therapy_analysis import (
    filter_pathogenic,
    gene_count_per_indication,
    indications_for_gene,
    join_mutations_clinical,
    load_indication_map,
    on_label_by_cancer_type,
    on_label_long,
    on_label_summary,
    pathogenic_ratios,
    plot_on_label,
)

from conftest import THERAPY_HTML


def make_clinical(rows):
    return pd.DataFrame(rows, columns=["sample_id", "cancer_type"])


def make_mutations(rows):
    return pd.DataFrame(rows, columns=["hugo_symbol", "tumor_sample_barcode", "clin_sig"])


def test_join_preserves_mutation_rows():
    clinical = make_clinical([("S1", "Melanoma"), ("S2", "Breast Cancer"), ("S3", "Glioma")])
    mutations = make_mutations([
        ("ALK", "S1", "pathogenic"),
        ("KIT", "S2", None),
        ("MET", "S9", "benign"),
        ("ALK", "S1", "likely_pathogenic"),
    ])
    joined = join_mutations_clinical(mutations, clinical)
    assert len(joined) == len(mutations)
    assert joined.loc[joined["tumor_sample_barcode"] == "S9", "cancer_type"].isna().all()
    assert list(joined["cancer_type"][:2]) == ["Melanoma", "Breast Cancer"]


def test_join_with_duplicate_samples_keeps_cardinality(caplog):
    clinical = make_clinical([("S1", "Melanoma"), ("S1", "Glioma")])
    mutations = make_mutations([("ALK", "S1", "pathogenic"), ("KIT", "S1", "pathogenic")])
    with caplog.at_level(logging.WARNING):
        joined = join_mutations_clinical(mutations, clinical)
    assert len(joined) == 2
    assert set(joined["cancer_type"]) == {"Melanoma"}
    assert "duplicate" in caplog.text


def test_join_with_loaded_tables(clinical_file, mutation_file):
    clinical = load_clinical_table(str(clinical_file))
    mutations = load_mutation_table(str(mutation_file))
    joined = join_mutations_clinical(mutations, clinical)
    assert len(joined) == len(mutations)
    assert "center_clinical" in joined.columns
    assert joined["sample_id"].isna().sum() == 1


def test_filter_pathogenic_substring_and_case():
    joined = make_mutations([
        ("A", "S1", "pathogenic"),
        ("B", "S1", "likely_pathogenic"),
        ("C", "S1", "benign"),
        ("D", "S1", None),
        ("E", "S1", "Pathogenic"),
        ("F", "S1", "uncertain_significance"),
    ])
    annotated, pathogenic = filter_pathogenic(joined)
    assert len(annotated) == 5
    assert list(pathogenic["hugo_symbol"]) == ["A", "B"]


def test_pathogenic_ratios():
    joined = make_mutations([
        ("A", "S1", "pathogenic"),
        ("B", "S1", "likely_pathogenic"),
        ("C", "S1", "benign"),
        ("D", "S1", None),
    ])
    annotated, pathogenic = filter_pathogenic(joined)
    ratios = pathogenic_ratios(joined, annotated, pathogenic)
    assert ratios["pathogenic"] == 2
    assert ratios["pathogenic_of_total"] == pytest.approx(0.5)
    assert ratios["pathogenic_of_annotated"] == pytest.approx(2 / 3)


def test_pathogenic_ratios_empty():
    joined = make_mutations([])
    annotated, pathogenic = filter_pathogenic(joined)
    ratios = pathogenic_ratios(joined, annotated, pathogenic)
    assert np.isnan(ratios["pathogenic_of_total"])
    assert np.isnan(ratios["pathogenic_of_annotated"])


def test_gene_count_per_indication_drops_zero_cells():
    pathogenic = pd.DataFrame({
        "hugo_symbol": pd.Categorical(["ALK", "ALK", "KIT"], categories=["ALK", "EGFR", "KIT"]),
        "cancer_type": pd.Categorical(
            ["Melanoma", "Melanoma", "Glioma"], categories=["Glioma", "Melanoma", "Breast Cancer"]
        ),
    })
    counts = gene_count_per_indication(pathogenic)
    assert (counts["count"] > 0).all()
    assert set(zip(counts["hugo_symbol"], counts["cancer_type"], counts["count"])) == {
        ("ALK", "Melanoma", 2),
        ("KIT", "Glioma", 1),
    }


def test_alk_example_on_label_fraction():
    clinical = make_clinical([("S1", "Non-Small Cell Lung Cancer"), ("S2", "Melanoma")])
    mutations = make_mutations([("ALK", "S1", "pathogenic"), ("ALK", "S2", "pathogenic")])
    _, pathogenic = filter_pathogenic(join_mutations_clinical(mutations, clinical))
    counts = gene_count_per_indication(pathogenic)
    alk = counts[counts["hugo_symbol"] == "ALK"].set_index("cancer_type")["count"].to_dict()
    assert alk == {"Non-Small Cell Lung Cancer": 1, "Melanoma": 1}

    summary = on_label_summary(
        counts, genes=["ALK"], approved_indications={"ALK": {"Non-Small Cell Lung Cancer"}}
    )
    row = summary.iloc[0]
    assert row["on_label"] == 1
    assert row["off_label"] == 1
    assert row["total"] == 2
    assert row["pct_on_label"] == pytest.approx(0.5)
    assert row["pct_off_label"] == pytest.approx(0.5)
    assert row["ci_lower"] < 0.5 < row["ci_upper"]


def test_on_label_summary_default_genes(clinical_file, mutation_file):
    joined = join_mutations_clinical(
        load_mutation_table(str(mutation_file)), load_clinical_table(str(clinical_file))
    )
    _, pathogenic = filter_pathogenic(joined)
    summary = on_label_summary(gene_count_per_indication(pathogenic)).set_index("gene")
    assert len(summary) == 10
    assert summary.loc["ALK", ["on_label", "off_label"]].tolist() == [1, 1]
    assert summary.loc["KIT", ["on_label", "off_label"]].tolist() == [1, 1]
    assert summary.loc["PIK3CA", "pct_on_label"] == pytest.approx(1.0)
    # the ERBB2 mutation has no clinical record, so no cancer type to count
    assert summary.loc["ERBB2", "total"] == 0
    assert np.isnan(summary.loc["ERBB2", "pct_on_label"])
    assert np.isnan(summary.loc["ERBB2", "ci_lower"])


def test_on_label_summary_gene_without_indications(caplog):
    counts = pd.DataFrame({"hugo_symbol": ["TP53"], "cancer_type": ["Melanoma"], "count": [3]})
    with caplog.at_level(logging.WARNING):
        summary = on_label_summary(counts, genes=["TP53"], approved_indications={})
    assert summary.loc[0, "off_label"] == 3
    assert summary.loc[0, "pct_on_label"] == 0
    assert "TP53" in caplog.text


def test_load_indication_map(tmp_path):
    file = tmp_path / "indications.tsv"
    file.write_text(
        "gene\tcancer_type\n"
        "MET\tRenal Cell Carcinoma\n"
        "MET\tNon-Small Cell Lung Cancer\n"
        "ALK\tNon-Small Cell Lung Cancer\n"
    )
    mapping = load_indication_map(str(file))
    assert mapping == {
        "MET": {"Renal Cell Carcinoma", "Non-Small Cell Lung Cancer"},
        "ALK": {"Non-Small Cell Lung Cancer"},
    }


def test_indications_for_gene():
    therapies = tidy_therapies(parse_therapy_html(THERAPY_HTML))
    alk = indications_for_gene(therapies, "alk")
    assert list(alk["agent"].unique()) == ["Crizotinib (Xalkori)"]
    assert set(alk["indication"]) == {"Non-small cell lung cancer", "Anaplastic large cell lymphoma"}
    assert indications_for_gene(therapies, "EGFR").empty


def test_on_label_long_and_plots(tmp_path):
    summary = on_label_summary(
        pd.DataFrame({
            "hugo_symbol": ["ALK", "ALK", "MET"],
            "cancer_type": ["Non-Small Cell Lung Cancer", "Melanoma", "Renal Cell Carcinoma"],
            "count": [4, 2, 3],
        }),
        genes=["ALK", "MET"],
    )
    long = on_label_long(summary)
    assert len(long) == 4
    assert set(long["label"]) == {"On-label", "Off-label"}
    written = plot_on_label(summary, str(tmp_path / "plots"))
    assert len(written) == 2
    for path in written:
        assert (tmp_path / "plots" / path.split("/")[-1]).exists()


def test_on_label_by_cancer_type():
    counts = pd.DataFrame({
        "hugo_symbol": ["MET", "MET", "MET", "TP53"],
        "cancer_type": ["Renal Cell Carcinoma", "Non-Small Cell Lung Cancer", "Glioma", "Melanoma"],
        "count": [2, 1, 5, 7],
    })
    labelled = on_label_by_cancer_type(
        counts,
        genes=["MET"],
        approved_indications={"MET": {"Renal Cell Carcinoma", "Non-Small Cell Lung Cancer"}},
    )
    assert set(labelled["hugo_symbol"]) == {"MET"}
    flags = labelled.set_index("cancer_type")["on_label"].to_dict()
    assert flags == {"Renal Cell Carcinoma": True, "Non-Small Cell Lung Cancer": True, "Glioma": False}
    assert labelled["count"].sum() == 8
