from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

SizeOption = Literal["small", "medium", "large"]
GapOption = Literal["tight", "normal", "loose"]
BorderStyle = Literal["solid", "dashed", "dotted"]
LayoutType = Literal["single-column", "two-column", "sidebar-left", "sidebar-right"]

SECTION_TYPES = (
    "header",
    "summary",
    "experience",
    "education",
    "skills",
    "achievements",
    "certifications",
    "projects",
    "languages",
    "references",
)

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

class SectionConfig(_CamelModel):
    max_items: Optional[int] = Field(default=None, alias="maxItems")
    show_location: bool = Field(default=False, alias="showLocation")
    show_dates: bool = Field(default=False, alias="showDates")
    layout: str = "list"

class TemplateSection(_CamelModel):
    id: str
    type: str
    title: str = ""
    required: bool = False
    order: int = 0
    config: SectionConfig = Field(default_factory=SectionConfig)

class LayoutConfig(_CamelModel):
    type: LayoutType = "single-column"
    primary_column: List[str] = Field(default_factory=list, alias="primaryColumn")
    secondary_column: List[str] = Field(default_factory=list, alias="secondaryColumn")

class ColorScheme(_CamelModel):
    primary: str = "#2563eb"
    secondary: str = "#475569"
    accent: str = "#2563eb"
    text: str = "#1e293b"
    background: str = "#ffffff"

class Typography(_CamelModel):
    heading_font: str = Field(default="Arial", alias="headingFont")
    body_font: str = Field(default="Arial", alias="bodyFont")
    heading_size: SizeOption = Field(default="medium", alias="headingSize")
    body_size: SizeOption = Field(default="medium", alias="bodySize")

class Spacing(_CamelModel):
    section_gap: GapOption = Field(default="normal", alias="sectionGap")
    item_gap: GapOption = Field(default="normal", alias="itemGap")

class Borders(_CamelModel):
    style: BorderStyle = "solid"
    header_underline: bool = Field(default=False, alias="headerUnderline")
    section_dividers: bool = Field(default=False, alias="sectionDividers")

class StyleConfig(_CamelModel):
    color_scheme: ColorScheme = Field(default_factory=ColorScheme, alias="colorScheme")
    typography: Typography = Field(default_factory=Typography)
    spacing: Spacing = Field(default_factory=Spacing)
    borders: Borders = Field(default_factory=Borders)

class SchemaTemplate(_CamelModel):
    """Template composed from known section types plus layout and style options"""
    id: str = ""
    name: str = ""
    description: str = ""
    category: str = ""
    is_premium: bool = False
    sections: List[TemplateSection] = []
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SchemaTemplate":
        """Build from either the flat shape or the stored ``template_config`` shape"""
        if "template_config" in payload:
            merged = {k: v for k, v in payload.items() if k != "template_config"}
            merged.update(payload["template_config"] or {})
            payload = merged
        return cls.model_validate(payload)

    @staticmethod
    def looks_like_schema(payload: Any) -> bool:
        return isinstance(payload, dict) and ("template_config" in payload or "sections" in payload)
