# testing/unit_tests/normalization/test_FieldMapper.py
import pytest
from models.resume import (
    Education, Language, PersonalInfo, Project, Reference, ResumeData, Skill, WorkExperience
)
from normalization.field_mapper import BLOCK_FIELDS, SCALAR_FIELDS, FieldMapper

@pytest.fixture
def mapper():
    return FieldMapper()

@pytest.fixture
def resume():
    return ResumeData(
        personal_info=PersonalInfo(first_name="Jane", last_name="Doe", city="Nairobi"),
        professional_summary="Engineer",
        work_experience=[
            WorkExperience(title="Lead", company="Acme", start_date="2021", end_date="2024-01",
                           current=True, description="Built APIs<br>Led team<br>Hired"),
            WorkExperience(title="Dev", company="Beta", start_date="2018", end_date="2021"),
        ],
        education=[Education(degree="BSc", field="CS", school="UoN", graduation_date="2018", gpa="3.8")],
        skills=[Skill(name="Go", level="Expert")],
        technical_skills=[Skill(name="go"), Skill(name="Docker")],
        languages=[Language(language="English", proficiency="Native"), Language(language="Swahili")],
        references=[Reference(name="Ann", company="Acme", email="ann@acme.io", phone="123")],
        projects=[Project(name="Site", technologies=["Python", "Flask"])],
    )

def test_scalar_fields(mapper, resume):
    fields = mapper.scalar_fields(resume)
    assert set(fields) == set(SCALAR_FIELDS)
    assert fields["FULL_NAME"] == "Jane Doe"
    assert fields["NAME"] == "Jane"
    assert fields["SURNAME"] == "Doe"
    assert fields["CITY"] == "Nairobi"
    assert fields["LOCATION"] == "Nairobi"
    assert fields["PROFESSIONAL_SUMMARY"] == "Engineer"
    assert fields["EMAIL"] == ""

def test_block_items_use_fixed_field_sets(mapper, resume):
    blocks = mapper.block_items(resume)
    assert set(blocks) == set(BLOCK_FIELDS)
    for name, items in blocks.items():
        for item in items:
            assert set(item) == set(BLOCK_FIELDS[name])

def test_current_job_ends_present(mapper, resume):
    experience = mapper.block_items(resume)["EXPERIENCE"]
    assert experience[0]["END_DATE"] == "Present"
    assert experience[1]["END_DATE"] == "2021"

def test_education_item(mapper, resume):
    edu = mapper.block_items(resume)["EDUCATION"][0]
    assert edu == {
        "DEGREE": "BSc",
        "FIELD": "CS",
        "INSTITUTION": "UoN",
        "START_DATE": "",
        "END_DATE": "2018",
        "DESCRIPTION": "",
        "GPA": "3.8",
    }

def test_skills_merge_without_duplicates(mapper, resume):
    skills = mapper.block_items(resume)["SKILLS"]
    assert [s["SKILL"] for s in skills] == ["Go", "Docker"]
    assert skills[0]["SKILL_LEVEL"] == "Expert"

def test_project_technologies_joined(mapper, resume):
    project = mapper.block_items(resume)["PROJECTS"][0]
    assert project["PROJECT_TECHNOLOGIES"] == "Python, Flask"

def test_empty_resume_has_empty_blocks(mapper):
    blocks = mapper.block_items(ResumeData())
    assert all(items == [] for items in blocks.values())

def test_indexed_experience_fields(mapper, resume):
    fields = mapper.indexed_fields(resume)
    assert fields["JOB_TITLE_1"] == "Lead"
    assert fields["EMPLOYER_1"] == "Acme"
    assert fields["WSD_1"] == "2021"
    assert fields["WED_1"] == "Present"
    assert fields["WED_2"] == "2021"
    assert fields["WORK_DESCRIPTION_1"] == "Built APIs"
    assert fields["WORK_DESCRIPTION_1.1"] == "Led team"
    assert fields["WORK_DESCRIPTION_1.2"] == "Hired"
    assert "WORK_DESCRIPTION_2" not in fields

def test_indexed_lists(mapper, resume):
    fields = mapper.indexed_fields(resume)
    assert fields["DEGREE_1"] == "BSc"
    assert fields["INSTITUTION_1"] == "UoN"
    assert fields["EED_1"] == "2018"
    assert fields["SKILL_2"] == "Docker"
    assert fields["LANGUAGE_1"] == "English (Native)"
    assert fields["LANGUAGE_2"] == "Swahili"
    assert fields["REFERENCE_EMAIL_1"] == "ann@acme.io"

def test_indexed_limits():
    mapper = FieldMapper({"indexed_placeholders": {"experience": 1, "skills": 2}})
    resume = ResumeData(
        work_experience=[WorkExperience(title="A"), WorkExperience(title="B")],
        skills=[Skill(name="x"), Skill(name="y"), Skill(name="z")],
    )
    fields = mapper.indexed_fields(resume)
    assert "JOB_TITLE_2" not in fields
    assert "SKILL_3" not in fields
    assert fields["SKILL_2"] == "y"

def test_custom_present_label():
    mapper = FieldMapper({"rendering": {"present_label": "Current"}})
    resume = ResumeData(work_experience=[WorkExperience(current=True, end_date="2020")])
    assert mapper.block_items(resume)["EXPERIENCE"][0]["END_DATE"] == "Current"

def test_all_scalar_fields_merges_indexed(mapper, resume):
    fields = mapper.all_scalar_fields(resume)
    assert fields["FULL_NAME"] == "Jane Doe"
    assert fields["JOB_TITLE_1"] == "Lead"
