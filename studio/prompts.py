"""
Prompt assembly for the industry content generators.

Every builder takes a validated form and returns one instruction string:

  header   — "Create a ... with the following details:" plus one
             "Label: value" line per field, values interpolated verbatim
             (lists joined with ", ")
  clauses  — one line per boolean toggle, always exactly one of its two
             fixed variants
  footer   — fixed formatting instructions for the content type

Blocks are separated by a blank line. User text is not escaped.
"""
from dataclasses import dataclass
from typing import Callable, Type

from pydantic import BaseModel

from studio.errors import UnknownContentTypeError
from studio.forms import (
    AdBannerForm,
    ChartForm,
    EmailTemplateForm,
    FloorPlanForm,
    HealthGuideForm,
    InteriorDesignForm,
    LandingPageForm,
    LessonPlanForm,
    QuizForm,
    StudyGuideForm,
    VisualizationForm,
)


def toggle_clause(enabled: bool, when_on: str, when_off: str) -> str:
    return when_on if enabled else when_off


def _joined(values: list[str]) -> str:
    return ", ".join(values)


def _compose(*blocks: list[str]) -> str:
    return "\n\n".join("\n".join(block) for block in blocks)


# ──────────────────────────── Education ───────────────────────────────────

def build_quiz_prompt(form: QuizForm) -> str:
    return _compose(
        [
            "Create an educational quiz with the following details:",
            f"Title: {form.title}",
            f"Subject: {form.subject}",
            f"Grade Level: {form.grade_level}",
            f"Description: {form.description}",
            f"Number of Questions: {form.question_count}",
            f"Question Types: {_joined(form.question_types)}",
        ],
        [
            toggle_clause(
                form.include_answers,
                "Include an answer key at the end.",
                "Do not include answers.",
            ),
        ],
        [
            "Format the quiz with appropriate headings, sections, and styling using Tailwind CSS.",
            "Make the quiz interactive with appropriate input elements for each question type.",
        ],
    )


def build_lesson_plan_prompt(form: LessonPlanForm) -> str:
    return _compose(
        [
            "Create an educational lesson plan with the following details:",
            f"Title: {form.title}",
            f"Subject: {form.subject}",
            f"Grade Level: {form.grade_level}",
            f"Description: {form.description}",
            f"Duration: {form.duration} minutes",
        ],
        [
            "The lesson plan should include:",
            "1. Learning objectives",
            "2. Required materials",
            "3. Introduction/warm-up activity",
            "4. Main content/instruction",
            "5. Student activities",
            "6. Assessment/evaluation",
            "7. Conclusion",
        ],
        [
            toggle_clause(
                form.include_images,
                "Include placeholders for relevant educational images.",
                "Do not include images.",
            ),
        ],
        [
            "Format the content with appropriate headings, sections, and styling using Tailwind CSS.",
        ],
    )


def build_study_guide_prompt(form: StudyGuideForm) -> str:
    return _compose(
        [
            "Create an educational study guide with the following details:",
            f"Title: {form.title}",
            f"Subject: {form.subject}",
            f"Grade Level: {form.grade_level}",
            f"Description: {form.description}",
            f"Sections to Include: {_joined(form.sections)}",
        ],
        [
            toggle_clause(
                form.include_images,
                "Include placeholders for relevant educational images.",
                "Do not include images.",
            ),
            toggle_clause(
                form.include_practice,
                "Include practice questions or exercises at the end.",
                "Do not include practice questions.",
            ),
        ],
        [
            "Format the study guide with appropriate headings, sections, and styling using Tailwind CSS.",
            "Make the content comprehensive, clear, and educational.",
        ],
    )


# ──────────────────────────── Marketing ───────────────────────────────────

def build_email_template_prompt(form: EmailTemplateForm) -> str:
    return _compose(
        [
            "Create an email marketing template with the following details:",
            f"Subject Line: {form.subject}",
            f"Campaign Type: {form.campaign_type}",
            f"Product/Service Name: {form.product_name}",
            f"Description: {form.description}",
            f"Target Audience: {form.audience}",
        ],
        [
            toggle_clause(
                form.include_images,
                "Include placeholders for product images.",
                "Do not include images.",
            ),
            toggle_clause(
                form.include_button,
                "Include a call-to-action button.",
                "Do not include a CTA button.",
            ),
        ],
        [
            "Format the email with appropriate headings, sections, and styling using inline CSS and HTML.",
            "Make the content compelling, persuasive, and focused on the campaign goal.",
            "Ensure the design is responsive and works well in email clients.",
        ],
    )


def build_landing_page_prompt(form: LandingPageForm) -> str:
    return _compose(
        [
            "Create a marketing landing page with the following details:",
            f"Product/Service Name: {form.product_name}",
            f"Industry: {form.industry}",
            f"Description: {form.description}",
            f"Style: {form.style}",
            f"Color Scheme: {form.color_scheme}",
            f"Sections to Include: {_joined(form.sections)}",
        ],
        [
            toggle_clause(
                form.include_images,
                "Include placeholders for relevant product images and icons.",
                "Do not include images.",
            ),
            toggle_clause(
                form.include_forms,
                "Include a lead capture form with appropriate fields.",
                "Do not include forms.",
            ),
        ],
        [
            "Format the landing page with appropriate headings, sections, and styling using Tailwind CSS.",
            "Make the content compelling, persuasive, and focused on conversion.",
            "Ensure the design is responsive and mobile-friendly.",
        ],
    )


def build_ad_banner_prompt(form: AdBannerForm) -> str:
    return _compose(
        [
            "Create an HTML ad banner with the following details:",
            f"Headline: {form.headline}",
            f"Banner Size: {form.banner_size}",
            f"Product/Service Name: {form.product_name}",
            f"Description: {form.description}",
            f"Color Scheme: {form.color_scheme}",
        ],
        [
            toggle_clause(
                form.include_image,
                "Include a placeholder for a product image.",
                "Do not include images.",
            ),
            toggle_clause(
                form.animated,
                "Add simple CSS animations for elements.",
                "No animations needed.",
            ),
        ],
        [
            "Format the banner with appropriate styling using HTML and CSS.",
            "Make the content compelling and focused on driving clicks.",
            "Ensure the design fits the specified banner size.",
        ],
    )


# ──────────────────────────── Architecture ────────────────────────────────

def build_floor_plan_prompt(form: FloorPlanForm) -> str:
    return _compose(
        [
            "Create a floor plan layout with the following details:",
            f"Project Name: {form.project_name}",
            f"Building Type: {form.building_type}",
            f"Square Footage: {form.square_footage}",
            f"Description: {form.description}",
            f"Rooms to Include: {_joined(form.rooms)}",
        ],
        [
            toggle_clause(
                form.include_labels,
                "Include labels for each room and area.",
                "Do not include labels.",
            ),
            toggle_clause(
                form.include_dimensions,
                "Include dimensions for rooms and overall layout.",
                "Do not include dimensions.",
            ),
        ],
        [
            "Create an HTML representation of a floor plan using div elements with Tailwind CSS for positioning and styling.",
            "Use different colors to represent different rooms and areas.",
            "Make the layout proportional and realistic based on typical room sizes.",
        ],
    )


def build_interior_design_prompt(form: InteriorDesignForm) -> str:
    return _compose(
        [
            "Create an interior design layout with the following details:",
            f"Room Type: {form.room_type}",
            f"Design Style: {form.style}",
            f"Square Footage: {form.square_footage}",
            f"Description: {form.description}",
            f"Furniture to Include: {_joined(form.furniture)}",
            f"Color Scheme: {form.color_scheme}",
        ],
        [
            toggle_clause(
                form.include_labels,
                "Include labels for furniture and design elements.",
                "Do not include labels.",
            ),
        ],
        [
            "Create an HTML representation of an interior design layout using div elements with Tailwind CSS for positioning and styling.",
            "Use different colors to represent different furniture pieces and design elements.",
            "Make the layout proportional and realistic based on typical room dimensions.",
            "Include design recommendations and style notes.",
        ],
    )


def build_visualization_prompt(form: VisualizationForm) -> str:
    return _compose(
        [
            "Create an architectural visualization presentation with the following details:",
            f"Project Name: {form.project_name}",
            f"Building Type: {form.building_type}",
            f"Visualization Type: {form.visualization_type}",
            f"Architectural Style: {form.style}",
            f"Description: {form.description}",
        ],
        [
            toggle_clause(
                form.include_text,
                "Include descriptive text and annotations.",
                "Minimize text, focus on visual representation.",
            ),
            toggle_clause(
                form.include_multiple_views,
                "Include multiple views/perspectives of the design.",
                "Focus on a single main view.",
            ),
        ],
        [
            "Create an HTML representation of an architectural visualization using div elements with Tailwind CSS for styling.",
            "Include placeholders for architectural renderings and diagrams.",
            "Create a professional presentation layout with appropriate sections.",
        ],
    )


# ──────────────────────────── Healthcare ──────────────────────────────────

def build_chart_prompt(form: ChartForm) -> str:
    return _compose(
        [
            "Create a healthcare chart with the following details:",
            f"Title: {form.title}",
            f"Chart Type: {form.chart_type}",
            f"Data Description: {form.data_description}",
        ],
        [
            toggle_clause(
                form.include_labels,
                "Include labels for the chart.",
                "Do not include labels.",
            ),
            toggle_clause(
                form.include_legend,
                "Include a legend for the chart.",
                "Do not include a legend.",
            ),
        ],
        [
            "Create an HTML representation of a healthcare chart using div elements with Tailwind CSS for styling.",
            "Make the chart interactive and easy to understand.",
        ],
    )


def build_health_guide_prompt(form: HealthGuideForm) -> str:
    return _compose(
        [
            "Create a healthcare guide with the following details:",
            f"Title: {form.title}",
            f"Guide Type: {form.guide_type}",
            f"Target Audience: {form.audience}",
            f"Description: {form.description}",
            f"Sections to Include: {_joined(form.sections)}",
        ],
        [
            toggle_clause(
                form.include_images,
                "Include placeholders for relevant medical images and diagrams.",
                "Do not include images.",
            ),
            toggle_clause(
                form.include_references,
                "Include references or sources at the end.",
                "Do not include references.",
            ),
        ],
        [
            "Format the guide with appropriate headings, sections, and styling using Tailwind CSS.",
            "Make the content accurate, clear, and easy to understand for the target audience.",
            "Use numbered steps for procedures and clear warnings for important information.",
        ],
    )


# ──────────────────────────── Catalog ─────────────────────────────────────

@dataclass(frozen=True)
class ContentTemplate:
    category: str
    slug: str
    # Label sent to the generation client, e.g. "study guide"
    content_type: str
    form: Type[BaseModel]
    builder: Callable[[BaseModel], str]


CONTENT_TEMPLATES: dict[tuple[str, str], ContentTemplate] = {
    (t.category, t.slug): t
    for t in (
        ContentTemplate("education", "quiz", "quiz", QuizForm, build_quiz_prompt),
        ContentTemplate("education", "lesson-plan", "lesson plan", LessonPlanForm, build_lesson_plan_prompt),
        ContentTemplate("education", "study-guide", "study guide", StudyGuideForm, build_study_guide_prompt),
        ContentTemplate("marketing", "email-template", "email template", EmailTemplateForm, build_email_template_prompt),
        ContentTemplate("marketing", "landing-page", "landing page", LandingPageForm, build_landing_page_prompt),
        ContentTemplate("marketing", "ad-banner", "ad banner", AdBannerForm, build_ad_banner_prompt),
        ContentTemplate("architecture", "floor-plan", "floor plan", FloorPlanForm, build_floor_plan_prompt),
        ContentTemplate("architecture", "interior-design", "interior design", InteriorDesignForm, build_interior_design_prompt),
        ContentTemplate("architecture", "visualization", "visualization", VisualizationForm, build_visualization_prompt),
        ContentTemplate("healthcare", "chart", "chart", ChartForm, build_chart_prompt),
        ContentTemplate("healthcare", "health-guide", "health guide", HealthGuideForm, build_health_guide_prompt),
    )
}


def get_template(category: str, slug: str) -> ContentTemplate:
    try:
        return CONTENT_TEMPLATES[(category, slug)]
    except KeyError:
        raise UnknownContentTypeError(category, slug) from None


def build_prompt(category: str, slug: str, form: BaseModel) -> str:
    """Assemble the prompt for a registered content type.

    The form must be an instance of the template's form model; passing any
    other model is a caller error.
    """
    template = get_template(category, slug)
    if not isinstance(form, template.form):
        raise TypeError(
            f"{category}/{slug} expects {template.form.__name__}, got {type(form).__name__}"
        )
    return template.builder(form)
