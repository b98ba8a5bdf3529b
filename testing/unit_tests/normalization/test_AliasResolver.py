# testing/unit_tests/normalization/test_AliasResolver.py
import logging
import pytest
from normalization.field_aliases import AliasResolver

SAMPLE_ALIASES = {
    "work_experience": {
        "title": ["title", "jobTitle", "role"],
        "company": ["company", "employer"],
    }
}

@pytest.fixture
def resolver():
    return AliasResolver(SAMPLE_ALIASES)

def test_first_present_alias_wins(resolver):
    record = {"role": "Developer", "jobTitle": "Engineer"}
    assert resolver.resolve(record, "work_experience", "title") == "Engineer"

@pytest.mark.parametrize("record", [
    {"title": None, "role": "Developer"},
    {"title": "", "role": "Developer"},
    {"title": "   ", "jobTitle": None, "role": "Developer"},
])
def test_null_and_blank_values_are_skipped(resolver, record):
    assert resolver.resolve(record, "work_experience", "title") == "Developer"

def test_default_when_no_alias_present(resolver):
    assert resolver.resolve({"other": "x"}, "work_experience", "company", "") == ""
    assert resolver.resolve({}, "work_experience", "company") is None

def test_unlisted_field_falls_back_to_canonical_key(resolver):
    assert resolver.resolve({"gpa": "3.9"}, "education", "gpa") == "3.9"

@pytest.mark.parametrize("record", [None, "text", ["a"], 5])
def test_non_dict_record_returns_default(resolver, record):
    assert resolver.resolve(record, "work_experience", "title", "fallback") == "fallback"

def test_resolve_record_covers_every_field(resolver):
    result = resolver.resolve_record({"employer": "Acme"}, "work_experience")
    assert result == {"title": None, "company": "Acme"}

def test_lists_are_values(resolver):
    aliases = AliasResolver({"resume": {"work_experience": ["workExperience", "experience"]}})
    record = {"workExperience": [], "experience": [{"title": "Dev"}]}
    assert aliases.resolve(record, "resume", "work_experience") == []

def test_packaged_alias_table():
    resolver = AliasResolver()
    assert resolver.resolve({"employer": "Acme"}, "work_experience", "company") == "Acme"
    assert resolver.resolve({"institution": "MIT"}, "education", "school") == "MIT"
    assert resolver.resolve({"summary": "Hi"}, "resume", "professional_summary") == "Hi"

def test_empty_alias_table_warns(caplog):
    with caplog.at_level(logging.WARNING):
        resolver = AliasResolver({})
    assert "No field aliases configured" in caplog.text
    assert resolver.resolve({"title": "Dev"}, "work_experience", "title") == "Dev"
