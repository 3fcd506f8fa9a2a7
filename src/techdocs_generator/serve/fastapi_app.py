"""FastAPI front end for the documentation generator.

Endpoints:
- GET /health
- GET /templates
- GET /session
- PUT /session/template  { "template_id": "..." }
- PUT /session/params    { "tone": "...", "language": "...", "max_length": 250 }
- PUT /session/input     { "input": "..." }
- POST /generate
- GET /download
"""
from __future__ import annotations
import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from techdocs_generator.client.gemini import GeminiClient
from techdocs_generator.common.config import load_settings
from techdocs_generator.common.errors import UnknownTemplateError
from techdocs_generator.common.logging_setup import setup_logging
from techdocs_generator.common.schema import DOWNLOAD_FILENAME, SessionState, Tone
from techdocs_generator.common.templates import list_templates, require_template
from techdocs_generator.session.controller import SessionController

LOGGER = logging.getLogger("techdocs.serve.app")

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)

CONTROLLER = SessionController(
    GeminiClient(SETTINGS),
    template_id=SETTINGS.default_template,
    params=SETTINGS.default_params(),
)

class TemplateOut(BaseModel):
    id: str
    name: str
    description: str
    placeholder: str

class ParamsModel(BaseModel):
    tone: Tone
    language: str
    max_length: int = Field(gt=0)

class ParamsPatch(BaseModel):
    tone: Tone | None = None
    language: str | None = None
    max_length: int | None = Field(default=None, gt=0)

class TemplateSelectIn(BaseModel):
    template_id: str

class InputIn(BaseModel):
    input: str

class MetricsOut(BaseModel):
    generation_time_seconds: float | None = None
    total_tokens: int | None = None

class SessionOut(BaseModel):
    status: str
    template_id: str
    params: ParamsModel
    input: str
    output: str
    error: str | None = None
    metrics: MetricsOut

def _to_out(state: SessionState) -> SessionOut:
    return SessionOut(
        status=state.status.value,
        template_id=state.template_id.value,
        params=ParamsModel(
            tone=state.params.tone,
            language=state.params.language,
            max_length=state.params.max_length,
        ),
        input=state.user_input,
        output=state.output,
        error=state.error,
        metrics=MetricsOut(
            generation_time_seconds=state.metrics.generation_time_seconds,
            total_tokens=state.metrics.total_tokens,
        ),
    )

app = FastAPI(title="TechDocs Generator")

@app.on_event("startup")
def _validate_default_template_on_startup() -> None:
    """Fail fast when the configured default template is not registered."""
    require_template(SETTINGS.default_template)
    if not SETTINGS.api_key:
        LOGGER.warning("API key is not set; generation requests will fail until it is configured")

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "model": SETTINGS.model}

@app.get("/templates", response_model=list[TemplateOut])
def templates() -> list[TemplateOut]:
    return [
        TemplateOut(id=t.id.value, name=t.name, description=t.description, placeholder=t.placeholder)
        for t in list_templates()
    ]

@app.get("/session", response_model=SessionOut)
def session() -> SessionOut:
    return _to_out(CONTROLLER.state)

@app.put("/session/template", response_model=SessionOut)
def select_template(body: TemplateSelectIn) -> SessionOut:
    try:
        CONTROLLER.select_template(body.template_id)
    except UnknownTemplateError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_out(CONTROLLER.state)

@app.put("/session/params", response_model=SessionOut)
def update_params(body: ParamsPatch) -> SessionOut:
    try:
        CONTROLLER.update_params(tone=body.tone, language=body.language, max_length=body.max_length)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_out(CONTROLLER.state)

@app.put("/session/input", response_model=SessionOut)
def set_input(body: InputIn) -> SessionOut:
    CONTROLLER.set_input(body.input)
    return _to_out(CONTROLLER.state)

@app.post("/generate", response_model=SessionOut)
async def generate() -> SessionOut:
    if CONTROLLER.is_loading:
        raise HTTPException(status_code=409, detail="Generation already in progress.")
    state = await CONTROLLER.generate()
    return _to_out(state)

@app.get("/download")
def download() -> Response:
    output = CONTROLLER.state.output
    if not output:
        raise HTTPException(status_code=404, detail="No generated documentation to download.")
    return Response(
        content=output,
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
