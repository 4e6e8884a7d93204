"""
JSON API Endpoints.

The same two forms as the HTML page, for scripted clients. Each request
mounts its own form component, exactly like a page render, so the tag
list used for link filtering is always fresh.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from newsdesk.components.forms import RecordForm, TagForm, mounted
from newsdesk.components.interaction import OutsideInteractionSignal
from newsdesk.core.exceptions import TagDirectoryError
from newsdesk.core.logging import get_logger, log_with_source
from newsdesk.schemas.base import ApiResponse, ErrorDetail, ResponseMetadata
from newsdesk.schemas.record import RecordFormState
from newsdesk.schemas.submission import (
    NotificationLevel,
    SubmissionOutcome,
    SubmissionResult,
)
from newsdesk.schemas.tag import TagFormState, TagResponse
from newsdesk.web.dependencies import Client, RequestId, ServiceOptions

logger = get_logger(__name__)

router = APIRouter()

OUTCOME_STATUS: dict[SubmissionOutcome, int] = {
    SubmissionOutcome.SUCCESS: 201,
    SubmissionOutcome.MISSING_CREDENTIALS: 400,
    SubmissionOutcome.MISSING_REQUIRED_FIELD: 400,
    SubmissionOutcome.LINKING_FAILED: 502,
    SubmissionOutcome.UNEXPECTED_RESPONSE: 502,
    SubmissionOutcome.FAILED: 502,
}


def _submission_response(result: SubmissionResult, request_id: str | None) -> JSONResponse:
    """Wrap a submission result in the API envelope with a matching status."""
    error = None
    if not result.success:
        errors = [n.message for n in result.notifications if n.level is NotificationLevel.ERROR]
        error = ErrorDetail(
            code=result.error_code or "SYS_INTERNAL_ERROR",
            message=errors[-1] if errors else result.outcome.value,
        )

    body = ApiResponse[SubmissionResult](
        success=result.success,
        data=result,
        error=error,
        metadata=ResponseMetadata(request_id=request_id),
    )
    return JSONResponse(
        status_code=OUTCOME_STATUS[result.outcome],
        content=body.model_dump(mode="json"),
    )


@router.get(
    "/tags",
    response_model=ApiResponse[list[TagResponse]],
    summary="List tags",
    description="Existing tags, optionally filtered by a case-insensitive name fragment.",
)
async def list_tags(
    client: Client,
    request_id: RequestId,
    q: str = Query(default="", max_length=100, description="Name fragment"),
) -> ApiResponse[list[TagResponse]]:
    """List existing tags."""
    form = TagForm(client, OutsideInteractionSignal(), query=q)
    async with mounted(form):
        if form.directory.last_error:
            raise TagDirectoryError(form.directory.last_error)
        tags = [TagResponse(id=tag.id, name=tag.name) for tag in form.selector.visible_tags()]

    return ApiResponse(data=tags, metadata=ResponseMetadata(request_id=request_id))


@router.post(
    "/records",
    response_model=ApiResponse[SubmissionResult],
    status_code=201,
    summary="Submit a record",
    description="Create a news record and link the selected tags to it.",
)
async def create_record(
    data: RecordFormState,
    client: Client,
    options: ServiceOptions,
    request_id: RequestId,
) -> JSONResponse:
    """Submit a record."""
    form = RecordForm(client, OutsideInteractionSignal(), state=data, **options)
    async with mounted(form):
        result = await form.submit()

    log_with_source(
        logger, "api", "info", "Record submission handled",
        outcome=result.outcome.value, attempts=result.attempts,
    )
    return _submission_response(result, request_id)


@router.post(
    "/tags",
    response_model=ApiResponse[SubmissionResult],
    status_code=201,
    summary="Create a tag",
    description="Create a new tag.",
)
async def create_tag(
    data: TagFormState,
    client: Client,
    options: ServiceOptions,
    request_id: RequestId,
) -> JSONResponse:
    """Create a tag."""
    form = TagForm(client, OutsideInteractionSignal(), state=data, **options)
    async with mounted(form):
        result = await form.submit()

    log_with_source(
        logger, "api", "info", "Tag submission handled",
        outcome=result.outcome.value, attempts=result.attempts,
    )
    return _submission_response(result, request_id)
