"""
Form bodies for the content generators.

Each model mirrors one generator form: the minimum lengths and required
selections are the form-level rules, and the defaults are what the form
starts with. Prompt assembly lives in studio.prompts.
"""
from pydantic import BaseModel, Field


# ──────────────────────────── Education ───────────────────────────────────

class QuizForm(BaseModel):
    title: str = Field(..., min_length=3)
    subject: str = Field(..., min_length=2)
    grade_level: str = "middle"
    description: str = Field(..., min_length=10)
    question_count: str = "10"
    question_types: list[str] = Field(default_factory=lambda: ["multiple-choice"], min_length=1)
    include_answers: bool = True


class LessonPlanForm(BaseModel):
    title: str = Field(..., min_length=3)
    subject: str = Field(..., min_length=2)
    grade_level: str = "middle"
    description: str = Field(..., min_length=10)
    duration: str = "60"            # minutes
    include_images: bool = True


class StudyGuideForm(BaseModel):
    title: str = Field(..., min_length=3)
    subject: str = Field(..., min_length=2)
    grade_level: str = "middle"
    description: str = Field(..., min_length=10)
    sections: list[str] = Field(
        default_factory=lambda: ["key-concepts", "examples", "summary"], min_length=1
    )
    include_images: bool = True
    include_practice: bool = True


# ──────────────────────────── Marketing ───────────────────────────────────

class EmailTemplateForm(BaseModel):
    subject: str = Field(..., min_length=3)
    campaign_type: str = "promotional"
    product_name: str = Field(..., min_length=2)
    description: str = Field(..., min_length=10)
    audience: str = Field(..., min_length=3)
    include_images: bool = True
    include_button: bool = True


class LandingPageForm(BaseModel):
    product_name: str = Field(..., min_length=2)
    industry: str = Field(..., min_length=2)
    description: str = Field(..., min_length=10)
    style: str = "modern"
    color_scheme: str = "blue"
    sections: list[str] = Field(
        default_factory=lambda: ["hero", "features", "testimonials", "cta"], min_length=1
    )
    include_images: bool = True
    include_forms: bool = True


class AdBannerForm(BaseModel):
    headline: str = Field(..., min_length=2)
    banner_size: str = "leaderboard"
    product_name: str = Field(..., min_length=2)
    description: str = Field(..., min_length=5)
    color_scheme: str = "blue"
    include_image: bool = True
    animated: bool = False


# ──────────────────────────── Architecture ────────────────────────────────

class FloorPlanForm(BaseModel):
    project_name: str = Field(..., min_length=2)
    building_type: str = "residential"
    square_footage: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10)
    rooms: list[str] = Field(
        default_factory=lambda: ["living", "kitchen", "bedroom", "bathroom"], min_length=1
    )
    include_labels: bool = True
    include_dimensions: bool = True


class InteriorDesignForm(BaseModel):
    room_type: str = "living"
    style: str = "modern"
    square_footage: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10)
    furniture: list[str] = Field(
        default_factory=lambda: ["sofa", "coffee-table", "tv"], min_length=1
    )
    color_scheme: str = "neutral"
    include_labels: bool = True


class VisualizationForm(BaseModel):
    project_name: str = Field(..., min_length=2)
    building_type: str = "residential"
    visualization_type: str = "exterior"
    style: str = "modern"
    description: str = Field(..., min_length=10)
    include_text: bool = True
    include_multiple_views: bool = False


# ──────────────────────────── Healthcare ──────────────────────────────────

class ChartForm(BaseModel):
    title: str = Field(..., min_length=3)
    chart_type: str = "bar"
    data_description: str = Field(..., min_length=10)
    include_labels: bool = True
    include_legend: bool = True


class HealthGuideForm(BaseModel):
    title: str = Field(..., min_length=3)
    guide_type: str = "condition"
    audience: str = "patients"
    description: str = Field(..., min_length=10)
    sections: list[str] = Field(
        default_factory=lambda: ["overview", "symptoms", "treatment", "prevention"],
        min_length=1,
    )
    include_images: bool = True
    include_references: bool = True
