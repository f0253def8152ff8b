"""Svix signature verification for inbound Clerk webhooks."""

import base64
import binascii
from collections.abc import Mapping

from loguru import logger
from svix.webhooks import Webhook, WebhookVerificationError

SVIX_ID_HEADER = "svix-id"
SVIX_TIMESTAMP_HEADER = "svix-timestamp"
SVIX_SIGNATURE_HEADER = "svix-signature"
SVIX_HEADERS = (SVIX_ID_HEADER, SVIX_TIMESTAMP_HEADER, SVIX_SIGNATURE_HEADER)
SECRET_PREFIX = "whsec_"


class WebhookConfigurationError(RuntimeError):
    """The signing secret is missing or cannot be used."""


class MissingWebhookHeadersError(ValueError):
    """One or more Svix headers were absent or blank."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing svix headers: {', '.join(missing)}")
        self.missing = missing


class WebhookSignatureError(ValueError):
    """The payload signature did not verify."""


def extract_svix_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Pick the three Svix headers out of a (case-insensitive) header mapping.

    Raises:
        MissingWebhookHeadersError: If any header is absent or blank.
    """
    values = {name: (headers.get(name) or "").strip() for name in SVIX_HEADERS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise MissingWebhookHeadersError(missing)
    return values


class WebhookVerificationService:
    """Verify Svix-signed payloads with a shared signing secret."""

    def __init__(self, signing_secret: str | None):
        if not signing_secret:
            raise WebhookConfigurationError("Webhook signing secret is not configured")
        try:
            # svix pads short keys; only strict base64 is accepted
            base64.b64decode(signing_secret.removeprefix(SECRET_PREFIX), validate=True)
            self._webhook = Webhook(signing_secret)
        except (binascii.Error, ValueError, TypeError) as e:
            raise WebhookConfigurationError(
                "Webhook signing secret is not a valid whsec_ secret"
            ) from e

    def verify(self, body: bytes, headers: Mapping[str, str]) -> None:
        """Verify the raw body against the Svix headers.

        Args:
            body: The request body exactly as received
            headers: The svix-id, svix-timestamp and svix-signature values

        Raises:
            WebhookSignatureError: If the signature, timestamp or headers are invalid
        """
        try:
            self._webhook.verify(body, dict(headers))
        except WebhookVerificationError as e:
            logger.warning("Webhook signature verification failed: {}", e)
            raise WebhookSignatureError(str(e)) from e
        except ValueError as e:
            # Malformed signature header or undecodable signature
            logger.warning("Webhook signature header could not be parsed: {}", e)
            raise WebhookSignatureError("Malformed signature header") from e
