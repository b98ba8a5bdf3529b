import logging
from typing import Callable, Dict, List

from markupsafe import Markup

from models.resume import ResumeData
from schemas.template_schema import LayoutConfig, TemplateSection
from .html_templates import render_template

logger = logging.getLogger(__name__)

PROFICIENCY_LEVELS = {
    "basic": 1,
    "conversational": 2,
    "fluent": 3,
    "native": 4,
}
PROFICIENCY_DOTS = 4

def sort_sections(sections: List[TemplateSection]) -> List[TemplateSection]:
    """Order sections by ``order``; ties keep their input order"""
    return sorted(sections, key=lambda section: section.order)

class SectionRenderer:
    """Builds body markup for schema templates from known section types"""

    def __init__(self, data: ResumeData, present_label: str = "Present"):
        self.data = data
        self.present_label = present_label
        self.renderers: Dict[str, Callable[[TemplateSection], str]] = {
            "header": self.render_header,
            "summary": self.render_summary,
            "experience": self.render_experience,
            "education": self.render_education,
            "skills": self.render_skills,
            "achievements": self.render_achievements,
            "certifications": self.render_certifications,
            "projects": self.render_projects,
            "languages": self.render_languages,
            "references": self.render_references,
        }

    def render_layout(self, sections: List[TemplateSection], layout: LayoutConfig) -> str:
        """Render sections into the resume container, split into columns for two-column layouts"""
        ordered = sort_sections(sections)

        if layout.type == "single-column":
            primary, secondary = ordered, []
        else:
            primary = [s for s in ordered if s.id in layout.primary_column]
            secondary = [s for s in ordered if s.id in layout.secondary_column]
            dropped = [s.id for s in ordered if s not in primary and s not in secondary]
            if dropped:
                logger.debug(f"Sections outside both columns are not rendered: {dropped}")

        return str(render_template(
            "layout.html",
            layout_type=layout.type,
            primary=self._render_all(primary),
            secondary=self._render_all(secondary),
        ))

    def _render_all(self, sections: List[TemplateSection]) -> List[Markup]:
        rendered = (self.render_section(section) for section in sections)
        return [Markup(html) for html in rendered if html]

    def render_section(self, section: TemplateSection) -> str:
        renderer = self.renderers.get(section.type)
        if renderer is None:
            logger.debug(f"Unknown section type '{section.type}' skipped")
            return ""
        return renderer(section)

    @staticmethod
    def _limit(items: List, section: TemplateSection) -> List:
        max_items = section.config.max_items
        return items[:max_items] if max_items else items

    def _render(self, name: str, section: TemplateSection, **context) -> str:
        context.setdefault("title", section.title)
        return str(render_template(name, config=section.config, present_label=self.present_label, **context))

    def render_header(self, section: TemplateSection) -> str:
        info = self.data.personal_info
        contacts = [
            ("email", info.email),
            ("phone", info.phone),
            ("location", info.location or info.city),
            ("linkedin", info.linkedin),
            ("portfolio", info.portfolio),
        ]
        return self._render("header.html", section, info=info, contacts=contacts)

    def render_summary(self, section: TemplateSection) -> str:
        if not self.data.professional_summary:
            return ""
        return self._render(
            "summary.html", section,
            title=section.title or "Professional Summary",
            summary=self.data.professional_summary,
        )

    def render_experience(self, section: TemplateSection) -> str:
        experiences = self._limit(self.data.work_experience, section)
        if not experiences:
            return ""
        return self._render("experience.html", section, items=experiences)

    def render_education(self, section: TemplateSection) -> str:
        education = self._limit(self.data.education, section)
        if not education:
            return ""
        return self._render("education.html", section, items=education)

    def render_skills(self, section: TemplateSection) -> str:
        skills = self._limit(self.data.all_skills(), section)
        if not skills:
            return ""
        return self._render("skills.html", section, items=skills, layout=section.config.layout or "list")

    def render_achievements(self, section: TemplateSection) -> str:
        achievements = self._limit(self.data.achievements, section)
        if not achievements:
            return ""
        return self._render("achievements.html", section, items=achievements)

    def render_certifications(self, section: TemplateSection) -> str:
        certifications = self._limit(self.data.certifications, section)
        if not certifications:
            return ""
        return self._render("certifications.html", section, items=certifications)

    def render_projects(self, section: TemplateSection) -> str:
        projects = self._limit(self.data.projects, section)
        if not projects:
            return ""
        return self._render("projects.html", section, items=projects)

    def render_languages(self, section: TemplateSection) -> str:
        languages = self._limit(self.data.languages, section)
        if not languages:
            return ""
        return self._render(
            "languages.html", section,
            items=languages, levels=PROFICIENCY_LEVELS, dots=PROFICIENCY_DOTS,
        )

    def render_references(self, section: TemplateSection) -> str:
        references = self._limit(self.data.references, section)
        if not references:
            return ""
        return self._render("references.html", section, items=references)
