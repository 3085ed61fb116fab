import logging

from fastapi import APIRouter, Depends, Query
from starlette.responses import PlainTextResponse, RedirectResponse, Response

from app.core.config import Settings, get_settings
from app.core.observability import REDIRECT_DECISIONS
from app.services.redirect_validator import (
    Classification,
    DenyReason,
    RedirectValidator,
    Verdict,
    get_redirect_validator,
)
from app.utils.encoding import round_trip

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirect"])

INVALID_REDIRECT_MESSAGE = "Invalid redirect URL"


def _reject(classification: Classification) -> Response:
    reason = classification.reason.value if classification.reason else "unknown"
    REDIRECT_DECISIONS.labels(Verdict.deny.value, reason).inc()
    logger.info("Redirect rejected reason=%s host=%s", reason, classification.hostname)
    return PlainTextResponse(INVALID_REDIRECT_MESSAGE, status_code=400)


@router.get("/redirect")
def redirect(
    url: str | None = Query(default=None),
    validator: RedirectValidator = Depends(get_redirect_validator),
    settings: Settings = Depends(get_settings),
) -> Response:
    if not url:
        return _reject(Classification(Verdict.deny, DenyReason.missing))

    classification = validator.evaluate(url)
    if not classification.allowed:
        return _reject(classification)

    target = round_trip(url)

    REDIRECT_DECISIONS.labels(Verdict.allow.value, "allowed").inc()
    logger.info("Redirect allowed host=%s", classification.hostname)
    return RedirectResponse(target, status_code=settings.redirect_status_code)
