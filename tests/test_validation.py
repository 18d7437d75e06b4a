"""Tests for request parameter validation."""

import pytest

from gsa_api.errors import ParameterValidationError
from gsa_api.validation import ParameterValidator, ValidationResult


@pytest.fixture
def validator() -> ParameterValidator:
    return ParameterValidator(max_genes=100)


def test_valid_overlap_params(validator):
    result = validator.validate({
        "FORMAT": "json",
        "ORGANISM": "arabidopsis_thaliana",
        "GENE_IDS": "AT1G48030 AT2G17130",
    })

    assert result.passed
    assert result.errors == []


def test_valid_title_params(validator):
    result = validator.validate({"EXPACC": "E-TABM-90", "CONTRASTID": "g4_g3"})

    assert result.passed


def test_whitelist_allows_punctuation(validator):
    assert validator.is_whitelisted("Homo sapiens (v.2)_a+b-c")


@pytest.mark.parametrize("param,value,message", [
    ("EXPACC", "E-TABM-90;rm", "Invalid experiment accession"),
    ("CONTRASTID", "g4/g3", "Invalid comparison identifier"),
    ("ORGANISM", "arabidopsis'thaliana", "Invalid organism name"),
    ("GENE_IDS", "AT1G48030 $(ls)", "Invalid gene identifiers"),
])
def test_forbidden_character_rejected(validator, param, value, message):
    result = validator.validate({param: value})

    assert not result.passed
    assert result.errors == [{"param": param, "msg": message, "value": value}]


def test_unsupported_format_rejected(validator):
    result = validator.validate({"FORMAT": "xml"})

    assert result.errors == [{
        "param": "FORMAT",
        "msg": "The only formats allowed are tsv and json",
        "value": "xml",
    }]


def test_gene_count_limit(validator):
    at_limit = " ".join(f"G{i}" for i in range(100))
    over_limit = " ".join(f"G{i}" for i in range(101))

    assert validator.validate({"GENE_IDS": at_limit}).passed

    result = validator.validate({"GENE_IDS": over_limit})
    assert [e["msg"] for e in result.errors] == [
        "The number of gene identifiers must be no more than 100"
    ]


def test_custom_gene_limit_in_message():
    validator = ParameterValidator(max_genes=2)

    result = validator.validate({"GENE_IDS": "A B C"})

    assert result.errors[0]["msg"] == "The number of gene identifiers must be no more than 2"


def test_gene_checks_reported_together(validator):
    """Whitelist and count failures on GENE_IDS are both reported."""
    genes = " ".join(f"G{i}" for i in range(100)) + " BAD;"

    result = validator.validate({"GENE_IDS": genes})

    assert [e["msg"] for e in result.errors] == [
        "Invalid gene identifiers",
        "The number of gene identifiers must be no more than 100",
    ]


def test_errors_accumulate_across_params(validator):
    result = validator.validate({
        "FORMAT": "xml",
        "ORGANISM": "bad/organism",
        "GENE_IDS": "ok",
    })

    assert sorted(e["param"] for e in result.errors) == ["FORMAT", "ORGANISM"]


def test_absent_params_not_checked(validator):
    assert validator.validate({}).passed
    assert validator.validate({"FORMAT": None, "ORGANISM": ""}).passed


def test_raise_for_errors():
    result = ValidationResult()
    result.raise_for_errors()

    result.add("FORMAT", "The only formats allowed are tsv and json", "xml")
    with pytest.raises(ParameterValidationError) as exc_info:
        result.raise_for_errors()

    assert exc_info.value.errors == result.errors
    assert "FORMAT" in str(exc_info.value)
