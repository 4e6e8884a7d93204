"""
Form Pages.

Server-rendered page holding both forms. Every request mounts fresh form
components (which fetch their tag lists), applies the posted values,
submits if asked to and renders the result with its notifications. Pass
phrases are never echoed back into the page.
"""

from pathlib import Path
from typing import Annotated, Any

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from newsdesk.components.analytics import tracking_directives
from newsdesk.components.forms import RecordForm, TagForm, mounted
from newsdesk.components.interaction import OutsideInteractionSignal
from newsdesk.core.config import get_app_config, get_base_path
from newsdesk.core.logging import get_logger, log_with_source
from newsdesk.schemas.record import RecordFormState
from newsdesk.schemas.submission import Notification
from newsdesk.schemas.tag import TagFormState
from newsdesk.services.notifications import NotificationCenter
from newsdesk.web.dependencies import Client, ServiceOptions

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _analytics_context(request: Request) -> dict[str, Any]:
    analytics = get_app_config().analytics
    if not analytics.enabled:
        return {"analytics_script": None, "analytics_directives": []}

    script = request.app.state.beacon.mount(analytics.site_id, analytics.tracker_url)
    return {
        "analytics_script": script,
        "analytics_directives": tracking_directives(analytics.site_id, analytics.tracker_url),
    }


def _render(
    request: Request,
    record_form: RecordForm,
    tag_form: TagForm,
    notifications: list[Notification],
) -> HTMLResponse:
    app_settings = get_app_config().application
    context = {
        "app_name": app_settings.name,
        "base_path": get_base_path(),
        "record": record_form.state,
        "record_selector": record_form.selector,
        "tag": tag_form.state,
        "tag_selector": tag_form.selector,
        "notifications": notifications,
        **_analytics_context(request),
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    client: Client,
    query_tag: Annotated[str, Query(alias="queryTag", max_length=100)] = "",
) -> HTMLResponse:
    """Both forms, empty."""
    notifier = NotificationCenter()
    signal = OutsideInteractionSignal()
    record_form = RecordForm(client, signal, notifier)
    tag_form = TagForm(client, signal, notifier, query=query_tag)

    async with mounted(record_form, tag_form):
        return _render(request, record_form, tag_form, notifier.drain())


@router.post("/records", response_class=HTMLResponse, include_in_schema=False)
async def submit_record(
    request: Request,
    client: Client,
    options: ServiceOptions,
    tags: Annotated[list[int], Form(default_factory=list)],
    title: Annotated[str, Form()] = "",
    url: Annotated[str, Form()] = "",
    date_happened: Annotated[str | None, Form(alias="dateHappened")] = None,
    content: Annotated[str, Form()] = "",
    auto_tags: Annotated[str, Form(alias="autoTags")] = "",
    quck_comment: Annotated[str, Form(alias="quckComment")] = "",
    pass_phrase_1: Annotated[str, Form(alias="passPhrase1")] = "",
    pass_phrase_2: Annotated[str, Form(alias="passPhrase2")] = "",
) -> HTMLResponse:
    """Record form post."""
    fields: dict[str, Any] = {
        "title": title,
        "url": url,
        "content": content,
        "auto_tags": auto_tags,
        "quck_comment": quck_comment,
        "tags": tags,
        "pass_phrase_1": pass_phrase_1,
        "pass_phrase_2": pass_phrase_2,
    }
    if date_happened is not None:
        fields["date_happened"] = date_happened

    notifier = NotificationCenter()
    signal = OutsideInteractionSignal()
    record_form = RecordForm(
        client, signal, notifier, state=RecordFormState(**fields), **options
    )
    tag_form = TagForm(client, signal, notifier)

    async with mounted(record_form, tag_form):
        result = await record_form.submit()
        log_with_source(
            logger, "web", "info", "Record form handled",
            outcome=result.outcome.value, attempts=result.attempts,
        )
        return _render(request, record_form, tag_form, notifier.drain())


@router.post("/tags", response_class=HTMLResponse, include_in_schema=False)
async def submit_tag(
    request: Request,
    client: Client,
    options: ServiceOptions,
    name: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    count: Annotated[int, Form()] = 0,
    query_tag: Annotated[str, Form(alias="queryTag")] = "",
    pass_phrase_1: Annotated[str, Form(alias="passPhrase1")] = "",
    pass_phrase_2: Annotated[str, Form(alias="passPhrase2")] = "",
) -> HTMLResponse:
    """Tag form post."""
    state = TagFormState(
        name=name,
        description=description,
        count=count,
        pass_phrase_1=pass_phrase_1,
        pass_phrase_2=pass_phrase_2,
    )

    notifier = NotificationCenter()
    signal = OutsideInteractionSignal()
    record_form = RecordForm(client, signal, notifier)
    tag_form = TagForm(client, signal, notifier, state=state, query=query_tag, **options)

    async with mounted(record_form, tag_form):
        result = await tag_form.submit()
        log_with_source(
            logger, "web", "info", "Tag form handled",
            outcome=result.outcome.value, attempts=result.attempts,
        )
        return _render(request, record_form, tag_form, notifier.drain())
