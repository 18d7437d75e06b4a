"""Tests for the contrast title index and its loader."""

from pathlib import Path

import pytest

from gsa_api.titles import ContrastTitleIndex, load_contrast_titles


@pytest.fixture
def titles_file(tmp_path: Path) -> Path:
    """Contrast title file with malformed and duplicate rows.

    Covers:
    - Normal rows across two experiments
    - Blank line and a two-field line (skipped)
    - Extra trailing field (ignored)
    - Duplicate key (last row wins)
    """
    path = tmp_path / "contrastTitles.tsv"
    path.write_text(
        "E-TABM-90\tg4_g3\t'wild type' vs 'mutant'\n"
        "E-TABM-90\tg2_g1\t'control' vs 'heat'\n"
        "\n"
        "E-MTAB-1\tonly_two_fields\n"
        "E-MTAB-2\tg1_g2\t'day 1' vs 'day 2'\textra\n"
        "E-MTAB-3\tg1_g2\tfirst title\n"
        "E-MTAB-3\tg1_g2\tsecond title\n"
    )
    return path


def test_load_titles(titles_file: Path):
    index = load_contrast_titles(titles_file)

    assert index.get("E-TABM-90", "g4_g3") == "'wild type' vs 'mutant'"
    assert index.get("E-TABM-90", "g2_g1") == "'control' vs 'heat'"
    assert index.get("E-MTAB-2", "g1_g2") == "'day 1' vs 'day 2'"


def test_malformed_lines_skipped(titles_file: Path):
    index = load_contrast_titles(titles_file)

    assert index.get("E-MTAB-1", "only_two_fields") is None
    assert len(index) == 4
    assert index.accession_count == 3


def test_duplicate_key_last_wins(titles_file: Path):
    index = load_contrast_titles(titles_file)

    assert index.get("E-MTAB-3", "g1_g2") == "second title"


def test_unknown_keys_return_none(titles_file: Path):
    index = load_contrast_titles(titles_file)

    assert index.get("E-NOPE-1", "g4_g3") is None
    assert index.get("E-TABM-90", "g9_g9") is None


def test_missing_file_gives_empty_index(tmp_path: Path):
    """A missing title file is logged, not raised."""
    index = load_contrast_titles(tmp_path / "missing.tsv")

    assert isinstance(index, ContrastTitleIndex)
    assert len(index) == 0


def test_read_error_keeps_partial_index(tmp_path: Path):
    """Rows parsed before an undecodable line are kept."""
    path = tmp_path / "broken.tsv"
    good = "E-TABM-90\tg4_g3\tgood title\n" * 2000
    path.write_bytes(good.encode("utf-8") + b"E-BAD\tg1\t\xff\xfe bad bytes\n")

    index = load_contrast_titles(path)

    assert index.get("E-TABM-90", "g4_g3") == "good title"


def test_bad_line_after_one_title_keeps_that_title(tmp_path: Path):
    path = tmp_path / "short.tsv"
    path.write_bytes(b"E-1\tg1\tTitle one\n\xff\tbad\tx\nE-2\tg2\tnever read\n")

    index = load_contrast_titles(path)

    assert index.get("E-1", "g1") == "Title one"
    assert index.get("E-2", "g2") is None
    assert len(index) == 1


def test_index_copies_source_mapping():
    source = {"E-TABM-90": {"g4_g3": "title"}}
    index = ContrastTitleIndex(source)

    source["E-TABM-90"]["g4_g3"] = "changed"

    assert index.get("E-TABM-90", "g4_g3") == "title"
