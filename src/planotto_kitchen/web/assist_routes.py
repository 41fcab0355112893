"""POST /assist: one endpoint, dispatched on `action`."""

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from planotto_kitchen.assist.actions import AssistAction

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assist"])


class AssistRequest(BaseModel):
    """Action plus its action-specific payload."""

    action: str
    payload: dict[str, Any] | None = None


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse({"error": error}, status_code=400)


@router.post("/assist")
async def assist(request: Request):
    """
    Validation errors are the only non-200 answers:

    - body is not a JSON object, or payload is not an object -> "invalid request"
    - no action -> "action is required"
    - action not in AssistAction -> "unknown action"
    """
    try:
        body = await request.json()
    except ValueError:
        return _bad_request("invalid request")
    if not isinstance(body, dict):
        return _bad_request("invalid request")
    if not body.get("action"):
        return _bad_request("action is required")

    try:
        req = AssistRequest.model_validate(body)
    except ValidationError as e:
        logger.info(f"Rejected assist request: {e.error_count()} validation error(s)")
        return _bad_request("invalid request")

    try:
        action = AssistAction(req.action)
    except ValueError:
        return _bad_request("unknown action")

    return await request.app.state.assist.handle(action, req.payload or {})
