"""
Content generation endpoints:
  GET  /generate/templates           — catalog of generators and their forms
  POST /generate/{category}/{slug}   — validate form → build prompt → generate

Every generation failure is reported with the same message; the specific
cause is only logged and counted by the client.
"""
import logging

from fastapi import APIRouter, Body, HTTPException, status
from opentelemetry import trace
from pydantic import ValidationError

from studio.clients.generation_client import generation_client
from studio.errors import GenerationError, UnknownContentTypeError
from studio.preview import wrap_document
from studio.prompts import CONTENT_TEMPLATES, get_template
from studio.schemas import ContentTemplateInfo, GeneratedContentResponse

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get("/templates", response_model=list[ContentTemplateInfo])
async def list_templates():
    return [
        ContentTemplateInfo(
            category=t.category,
            slug=t.slug,
            content_type=t.content_type,
            form_schema=t.form.model_json_schema(),
        )
        for t in CONTENT_TEMPLATES.values()
    ]


@router.post("/{category}/{slug}", response_model=GeneratedContentResponse)
async def generate(category: str, slug: str, values: dict = Body(...)):
    try:
        template = get_template(category, slug)
    except UnknownContentTypeError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    try:
        form = template.form.model_validate(values)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        )

    with tracer.start_as_current_span("generate_content") as span:
        span.set_attribute("generation.category", category)
        span.set_attribute("generation.content_type", template.content_type)

        prompt = template.builder(form)
        try:
            content = await generation_client.generate(prompt, category, template.content_type)
        except GenerationError as exc:
            span.set_attribute("generation.failure", exc.reason.value)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to generate {template.content_type}. Please try again.",
            )

        return GeneratedContentResponse(
            category=category,
            content_type=template.content_type,
            content=content,
            document=wrap_document(content),
        )
