"""Jinja2 rendering for the study assistant page."""

from __future__ import annotations

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from study_assistant.models import WorkflowSnapshot

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SUBMIT_LABEL = "Generate Summary & Quiz"
SUBMIT_LOADING_LABEL = "Processing..."
EMPTY_PLACEHOLDER = "Your AI-generated summary and quiz questions will appear here"
LOADING_PLACEHOLDER = "Analyzing your text and generating content..."

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    submit_label=SUBMIT_LABEL,
    submit_loading_label=SUBMIT_LOADING_LABEL,
    empty_placeholder=EMPTY_PLACEHOLDER,
    loading_placeholder=LOADING_PLACEHOLDER,
)


def render_output(snapshot: WorkflowSnapshot) -> str:
    """Render the output region: exactly one of error, result, loading or empty."""

    return templates.get_template("_output.html").render(snapshot=snapshot).strip()


def render_page(snapshot: WorkflowSnapshot) -> str:
    """Render the full form page for ``snapshot``."""

    return templates.get_template("index.html").render(snapshot=snapshot)


def page_response(request: Request, snapshot: WorkflowSnapshot) -> Response:
    """Serve the form page for ``snapshot``."""

    return templates.TemplateResponse(request, "index.html", {"snapshot": snapshot})
