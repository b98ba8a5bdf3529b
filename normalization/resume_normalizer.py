import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from models.resume import (
    Achievement,
    Certification,
    Education,
    Language,
    PersonalInfo,
    Project,
    Reference,
    ResumeData,
    Skill,
    WorkExperience,
)
from utils.error_handling import NormalizationError
from .field_aliases import AliasResolver

logger = logging.getLogger(__name__)

DESCRIPTION_SEPARATOR = "<br>"
# Wrapper keys used by stored resume rows around the actual resume payload
PAYLOAD_KEYS = ("resume_data", "resumeData", "content")
TRUE_STRINGS = {"true", "yes", "1", "y"}

class ResumeNormalizer:
    """Reconciles resume payloads from any historic schema into one ResumeData"""

    def __init__(self, resolver: Optional[AliasResolver] = None,
                 description_separator: str = DESCRIPTION_SEPARATOR):
        self.resolver = resolver or AliasResolver()
        self.description_separator = description_separator

    def normalize(self, raw: Union[Dict, str, None]) -> ResumeData:
        """Normalize a raw payload (dict, JSON string or None) to the canonical record"""
        record = self._load(raw)

        def resolve(field: str) -> Any:
            return self.resolver.resolve(record, "resume", field)

        personal = resolve("personal_info")
        resume = ResumeData(
            title=self._text(resolve("title")),
            personal_info=self.normalize_personal_info(personal if isinstance(personal, dict) else {}),
            professional_summary=self._text(resolve("professional_summary")),
            work_experience=self._normalize_list(resolve("work_experience"), self.normalize_experience),
            education=self._normalize_list(resolve("education"), self.normalize_education),
            skills=self._normalize_list(resolve("skills"), self.normalize_skill),
            technical_skills=self._normalize_list(resolve("technical_skills"), self.normalize_skill),
            soft_skills=self._normalize_list(resolve("soft_skills"), self.normalize_skill),
            achievements=self._normalize_list(resolve("achievements"), self.normalize_achievement),
            certifications=self._normalize_list(resolve("certifications"), self.normalize_certification),
            projects=self._normalize_list(resolve("projects"), self.normalize_project),
            languages=self._normalize_list(resolve("languages"), self.normalize_language),
            references=self._normalize_list(resolve("references"), self.normalize_reference),
        )
        logger.debug(
            f"Normalized resume: {len(resume.work_experience)} jobs, "
            f"{len(resume.education)} degrees, {len(resume.all_skills())} skills"
        )
        return resume

    def _load(self, raw: Union[Dict, str, None]) -> Dict:
        if raw is None:
            return {}
        if isinstance(raw, ResumeData):
            return raw.model_dump()
        if isinstance(raw, str):
            if not raw.strip():
                return {}
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise NormalizationError(f"Resume data is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise NormalizationError(f"Resume data must be an object, got {type(raw).__name__}")

        for key in PAYLOAD_KEYS:
            payload = raw.get(key)
            if isinstance(payload, str) and payload.strip():
                try:
                    payload = json.loads(payload)
                except json.JSONDecodeError:
                    logger.warning(f"Ignoring unparseable '{key}' payload")
                    continue
            if isinstance(payload, dict):
                logger.debug(f"Unwrapping resume payload from '{key}'")
                merged = {k: v for k, v in raw.items() if k not in PAYLOAD_KEYS}
                merged.update(payload)
                return merged
        return raw

    def normalize_personal_info(self, record: Dict) -> PersonalInfo:
        fields = self.resolver.resolve_record(record, "personal_info")
        return PersonalInfo(**{name: self._text(value) for name, value in fields.items()
                               if name in PersonalInfo.model_fields})

    def normalize_experience(self, entry: Any) -> Optional[WorkExperience]:
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "work_experience")

        # A description list wins over the scalar description
        descriptions = fields.get("descriptions")
        if isinstance(descriptions, list) and descriptions:
            description = self.description_separator.join(self._text_list(descriptions))
        else:
            description = self._text(fields.get("description"))

        return WorkExperience(
            title=self._text(fields.get("title")),
            company=self._text(fields.get("company")),
            location=self._text(fields.get("location")),
            start_date=self._text(fields.get("start_date")),
            end_date=self._text(fields.get("end_date")),
            current=self._flag(fields.get("current")),
            description=description,
            achievements=self._text_list(fields.get("achievements")),
        )

    def normalize_education(self, entry: Any) -> Optional[Education]:
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "education")
        return Education(
            degree=self._text(fields.get("degree")),
            field=self._text(fields.get("field")),
            school=self._text(fields.get("school")),
            location=self._text(fields.get("location")),
            start_date=self._text(fields.get("start_date")),
            graduation_date=self._text(fields.get("graduation_date")),
            gpa=self._text(fields.get("gpa")),
            description=self._text(fields.get("description")),
            honors=self._text_list(fields.get("honors")),
        )

    def normalize_skill(self, entry: Any) -> Optional[Skill]:
        if isinstance(entry, str):
            return Skill(name=entry.strip()) if entry.strip() else None
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "skill")
        skill = Skill(name=self._text(fields.get("name")), level=self._text(fields.get("level")))
        return skill if skill.name else None

    def normalize_achievement(self, entry: Any) -> Optional[Achievement]:
        if isinstance(entry, str):
            return Achievement(title=entry.strip()) if entry.strip() else None
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "achievement")
        return Achievement(title=self._text(fields.get("title")), date=self._text(fields.get("date")))

    def normalize_certification(self, entry: Any) -> Optional[Certification]:
        if isinstance(entry, str):
            return Certification(name=entry.strip()) if entry.strip() else None
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "certification")
        return Certification(**{name: self._text(value) for name, value in fields.items()})

    def normalize_project(self, entry: Any) -> Optional[Project]:
        if isinstance(entry, str):
            return Project(name=entry.strip()) if entry.strip() else None
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "project")
        technologies = fields.get("technologies")
        if isinstance(technologies, str):
            technologies = technologies.split(",")
        return Project(
            name=self._text(fields.get("name")),
            description=self._text(fields.get("description")),
            technologies=self._text_list(technologies),
            url=self._text(fields.get("url")),
        )

    def normalize_language(self, entry: Any) -> Optional[Language]:
        if isinstance(entry, str):
            return Language(language=entry.strip()) if entry.strip() else None
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "language")
        return Language(language=self._text(fields.get("language")),
                        proficiency=self._text(fields.get("proficiency")))

    def normalize_reference(self, entry: Any) -> Optional[Reference]:
        if isinstance(entry, str):
            return Reference(name=entry.strip()) if entry.strip() else None
        if not isinstance(entry, dict):
            return None
        fields = self.resolver.resolve_record(entry, "reference")
        return Reference(**{name: self._text(value) for name, value in fields.items()})

    def _normalize_list(self, items: Any, builder: Callable[[Any], Any]) -> List:
        if items is None:
            return []
        if not isinstance(items, list):
            items = [items]

        normalized = []
        for item in items:
            result = builder(item)
            if result is None:
                logger.debug(f"Skipping unusable entry of type {type(item).__name__}")
                continue
            normalized.append(result)
        return normalized

    @staticmethod
    def _text(value: Any) -> str:
        if value is None or isinstance(value, (dict, bool)):
            return ""
        if isinstance(value, list):
            return ", ".join(ResumeNormalizer._text_list(value))
        return str(value).strip()

    @staticmethod
    def _text_list(values: Any) -> List[str]:
        if values is None:
            return []
        if not isinstance(values, list):
            values = [values]
        texts = []
        for value in values:
            if isinstance(value, (list, dict)):
                continue
            text = ResumeNormalizer._text(value)
            if text:
                texts.append(text)
        return texts

    @staticmethod
    def _flag(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in TRUE_STRINGS
        return bool(value)
