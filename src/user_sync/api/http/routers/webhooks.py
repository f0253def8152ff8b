"""Inbound webhook endpoints."""

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from src.user_sync.api.http.deps import (
    get_raw_body,
    get_user_sync_service,
    get_webhook_verification_service,
)
from src.user_sync.core.models.webhook_event import WebhookEvent
from src.user_sync.core.services import (
    MissingWebhookHeadersError,
    UserSyncService,
    WebhookSignatureError,
    WebhookVerificationService,
    extract_svix_headers,
)

router = APIRouter(tags=["webhooks"])


@router.post("/clerk")
def clerk_webhook(
    request: Request,
    verifier: WebhookVerificationService = Depends(get_webhook_verification_service),
    body: bytes = Depends(get_raw_body),
    user_sync_service: UserSyncService = Depends(get_user_sync_service),
) -> dict[str, Any]:
    """Mirror a Clerk user lifecycle event into the local user table.

    Status codes:
    - 500: signing secret missing, or applying the event failed
    - 400: Svix headers missing, body not JSON, or signature invalid
    - 200: event applied, or ignored because its type is not handled
    """
    try:
        svix_headers = extract_svix_headers(request.headers)
    except MissingWebhookHeadersError as e:
        logger.error("Missing Svix headers: {}", e.missing)
        raise HTTPException(
            status_code=400, detail="Error occurred -- no svix headers"
        ) from e

    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.error("Error parsing JSON body: {}", e)
        raise HTTPException(status_code=400, detail="Error parsing JSON body") from e

    try:
        verifier.verify(body, svix_headers)
    except WebhookSignatureError as e:
        logger.error("Error verifying webhook: {}", e)
        raise HTTPException(status_code=400, detail="Error verifying webhook") from e

    event = WebhookEvent.from_payload(payload)
    logger.info("Received event: {} ({})", event.type, svix_headers["svix-id"])
    logger.debug("Payload data: {}", event.data)

    try:
        outcome = user_sync_service.handle_event(event)
    except Exception as e:
        logger.exception("Error processing webhook: {}", e)
        raise HTTPException(status_code=500, detail="Internal Server Error") from e

    return {"message": "Webhook processed successfully", "outcome": outcome}
