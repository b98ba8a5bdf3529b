import logging
from typing import Dict, List, Optional

from config import load_config
from models.resume import PRESENT_LABEL, ResumeData

logger = logging.getLogger(__name__)

# Fixed field sets of each repeating block
BLOCK_FIELDS = {
    "EXPERIENCE": ("JOB_TITLE", "COMPANY", "START_DATE", "END_DATE", "LOCATION", "DESCRIPTION"),
    "EDUCATION": ("DEGREE", "FIELD", "INSTITUTION", "START_DATE", "END_DATE", "DESCRIPTION", "GPA"),
    "SKILLS": ("SKILL", "SKILL_LEVEL"),
    "CERTIFICATIONS": ("CERTIFICATION", "CERTIFICATION_DATE"),
    "LANGUAGES": ("LANGUAGE", "PROFICIENCY"),
    "ACHIEVEMENTS": ("ACHIEVEMENT", "ACHIEVEMENT_DATE"),
    "REFERENCES": ("REFERENCE_NAME", "REFERENCE_COMPANY", "REFERENCE_EMAIL", "REFERENCE_PHONE"),
    "PROJECTS": ("PROJECT_NAME", "PROJECT_DESCRIPTION", "PROJECT_TECHNOLOGIES", "PROJECT_URL"),
}

SCALAR_FIELDS = (
    "FULL_NAME", "NAME", "FIRST_NAME", "SURNAME", "LAST_NAME", "TAGLINE", "EMAIL", "PHONE",
    "ADDRESS", "CITY", "LOCATION", "POSTCODE", "LINKEDIN", "PORTFOLIO",
    "PROFESSIONAL_SUMMARY", "SUMMARY", "RESUME_TITLE",
)

DEFAULT_LIMITS = {
    "experience": 5,
    "work_descriptions": 10,
    "education": 10,
    "skills": 10,
    "languages": 10,
    "achievements": 10,
    "certifications": 10,
    "references": 10,
}

class FieldMapper:
    """Flattens a canonical ResumeData into the token maps templates substitute"""

    def __init__(self, config: Optional[Dict] = None):
        if config is None:
            config = load_config().get("rendering", {})
        settings = config.get("rendering", {})
        self.present_label = settings.get("present_label", PRESENT_LABEL)
        self.description_separator = settings.get("description_separator", "<br>")
        self.limits = {**DEFAULT_LIMITS, **config.get("indexed_placeholders", {})}

    def scalar_fields(self, data: ResumeData) -> Dict[str, str]:
        info = data.personal_info
        return {
            "FULL_NAME": info.display_name(),
            "NAME": info.first_name,
            "FIRST_NAME": info.first_name,
            "SURNAME": info.last_name,
            "LAST_NAME": info.last_name,
            "TAGLINE": info.tagline,
            "EMAIL": info.email,
            "PHONE": info.phone,
            "ADDRESS": info.address,
            "CITY": info.city or info.location,
            "LOCATION": info.location or info.city or info.address,
            "POSTCODE": info.postcode,
            "LINKEDIN": info.linkedin,
            "PORTFOLIO": info.portfolio,
            "PROFESSIONAL_SUMMARY": data.professional_summary,
            "SUMMARY": data.professional_summary,
            "RESUME_TITLE": data.title,
        }

    def block_items(self, data: ResumeData) -> Dict[str, List[Dict[str, str]]]:
        return {
            "EXPERIENCE": [
                {
                    "JOB_TITLE": exp.title,
                    "COMPANY": exp.company,
                    "START_DATE": exp.start_date,
                    "END_DATE": exp.display_end_date(self.present_label),
                    "LOCATION": exp.location,
                    "DESCRIPTION": exp.description,
                }
                for exp in data.work_experience
            ],
            "EDUCATION": [
                {
                    "DEGREE": edu.degree,
                    "FIELD": edu.field,
                    "INSTITUTION": edu.school,
                    "START_DATE": edu.start_date,
                    "END_DATE": edu.graduation_date,
                    "DESCRIPTION": edu.description,
                    "GPA": edu.gpa,
                }
                for edu in data.education
            ],
            "SKILLS": [
                {"SKILL": skill.name, "SKILL_LEVEL": skill.level}
                for skill in data.all_skills()
            ],
            "CERTIFICATIONS": [
                {"CERTIFICATION": cert.name, "CERTIFICATION_DATE": cert.date}
                for cert in data.certifications
            ],
            "LANGUAGES": [
                {"LANGUAGE": lang.language, "PROFICIENCY": lang.proficiency}
                for lang in data.languages
            ],
            "ACHIEVEMENTS": [
                {"ACHIEVEMENT": item.title, "ACHIEVEMENT_DATE": item.date}
                for item in data.achievements
            ],
            "REFERENCES": [
                {
                    "REFERENCE_NAME": ref.name,
                    "REFERENCE_COMPANY": ref.company,
                    "REFERENCE_EMAIL": ref.email,
                    "REFERENCE_PHONE": ref.phone,
                }
                for ref in data.references
            ],
            "PROJECTS": [
                {
                    "PROJECT_NAME": project.name,
                    "PROJECT_DESCRIPTION": project.description,
                    "PROJECT_TECHNOLOGIES": ", ".join(project.technologies),
                    "PROJECT_URL": project.url,
                }
                for project in data.projects
            ],
        }

    def indexed_fields(self, data: ResumeData) -> Dict[str, str]:
        """Numbered placeholders used by older templates, e.g. {JOB_TITLE_1} or {WORK_DESCRIPTION_1.2}"""
        fields = {}

        for i, exp in enumerate(data.work_experience[:self.limits["experience"]], start=1):
            fields[f"JOB_TITLE_{i}"] = exp.title
            fields[f"EMPLOYER_{i}"] = exp.company
            fields[f"WSD_{i}"] = exp.start_date
            fields[f"WED_{i}"] = exp.display_end_date(self.present_label)

            lines = [line for line in exp.description.split(self.description_separator) if line]
            for n, line in enumerate(lines[:self.limits["work_descriptions"]]):
                key = f"WORK_DESCRIPTION_{i}" if n == 0 else f"WORK_DESCRIPTION_{i}.{n}"
                fields[key] = line

        for i, edu in enumerate(data.education[:self.limits["education"]], start=1):
            fields[f"DEGREE_{i}"] = edu.degree
            fields[f"INSTITUTION_{i}"] = edu.school
            fields[f"ESD_{i}"] = edu.start_date
            fields[f"EED_{i}"] = edu.graduation_date

        simple_lists = (
            ("SKILL", "skills", [s.name for s in data.all_skills()]),
            ("LANGUAGE", "languages", [self._language_label(l.language, l.proficiency) for l in data.languages]),
            ("ACHIEVEMENT", "achievements", [a.title for a in data.achievements]),
            ("CERTIFICATION", "certifications", [c.name for c in data.certifications]),
        )
        for prefix, limit_key, values in simple_lists:
            for i, value in enumerate(values[:self.limits[limit_key]], start=1):
                fields[f"{prefix}_{i}"] = value

        for i, ref in enumerate(data.references[:self.limits["references"]], start=1):
            fields[f"REFERENCE_NAME_{i}"] = ref.name
            fields[f"REFERENCE_COMPANY_{i}"] = ref.company
            fields[f"REFERENCE_PHONE_{i}"] = ref.phone
            fields[f"REFERENCE_EMAIL_{i}"] = ref.email

        return fields

    def all_scalar_fields(self, data: ResumeData) -> Dict[str, str]:
        """Named scalars merged with the numbered legacy placeholders"""
        fields = self.indexed_fields(data)
        fields.update(self.scalar_fields(data))
        return fields

    @staticmethod
    def _language_label(language: str, proficiency: str) -> str:
        return f"{language} ({proficiency})" if proficiency else language
