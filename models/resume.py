from typing import List
from pydantic import BaseModel, Field

PRESENT_LABEL = "Present"

class PersonalInfo(BaseModel):
    """Contact and header details"""
    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    tagline: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    address: str = ""
    city: str = ""
    postcode: str = ""
    linkedin: str = ""
    portfolio: str = ""

    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return f"{self.first_name} {self.last_name}".strip()

class WorkExperience(BaseModel):
    """Work experience"""
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    achievements: List[str] = []

    def display_end_date(self, present_label: str = PRESENT_LABEL) -> str:
        return present_label if self.current else self.end_date

class Education(BaseModel):
    """Education information"""
    degree: str = ""
    field: str = ""
    school: str = ""
    location: str = ""
    start_date: str = ""
    graduation_date: str = ""
    gpa: str = ""
    description: str = ""
    honors: List[str] = []

class Skill(BaseModel):
    name: str = ""
    level: str = ""

class Achievement(BaseModel):
    title: str = ""
    date: str = ""

class Certification(BaseModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiry_date: str = ""
    credential_id: str = ""

class Project(BaseModel):
    name: str = ""
    description: str = ""
    technologies: List[str] = []
    url: str = ""

class Language(BaseModel):
    language: str = ""
    proficiency: str = ""

class Reference(BaseModel):
    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    relationship: str = ""

class ResumeData(BaseModel):
    """Canonical resume record every template renders against"""
    title: str = ""
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    professional_summary: str = ""
    work_experience: List[WorkExperience] = []
    education: List[Education] = []
    skills: List[Skill] = []
    technical_skills: List[Skill] = []
    soft_skills: List[Skill] = []
    achievements: List[Achievement] = []
    certifications: List[Certification] = []
    projects: List[Project] = []
    languages: List[Language] = []
    references: List[Reference] = []

    def all_skills(self) -> List[Skill]:
        """Combined skill list, first occurrence of each name wins"""
        seen = set()
        combined = []
        for skill in self.skills + self.technical_skills + self.soft_skills:
            key = skill.name.lower()
            if not skill.name or key in seen:
                continue
            seen.add(key)
            combined.append(skill)
        return combined
