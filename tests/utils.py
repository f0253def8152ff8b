import base64
import json
from datetime import UTC, datetime
from typing import Any

from svix.webhooks import Webhook

TEST_SIGNING_SECRET = "whsec_" + base64.b64encode(
    b"clerk-user-sync-test-secret-0001"
).decode("ascii")


def clerk_user_data(
    user_id: str = "user_2abcDEF123",
    username: str | None = "ada",
    phone_number: str | None = "+15555550100",
    image_url: str | None = "https://img.clerk.com/ada.png",
) -> dict[str, Any]:
    """A trimmed-down Clerk user object as found in ``data``."""
    phone_numbers = []
    if phone_number is not None:
        phone_numbers.append(
            {"id": "idn_1", "object": "phone_number", "phone_number": phone_number}
        )
    return {
        "id": user_id,
        "object": "user",
        "username": username,
        "phone_numbers": phone_numbers,
        "image_url": image_url,
        "email_addresses": [],
    }


def clerk_event(event_type: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"object": "event", "type": event_type, "data": data}


def svix_headers(
    body: str,
    secret: str = TEST_SIGNING_SECRET,
    msg_id: str = "msg_2testDelivery",
    timestamp: datetime | None = None,
) -> dict[str, str]:
    """Sign ``body`` the way Svix does and return the delivery headers."""
    timestamp = timestamp or datetime.now(UTC)
    signature = Webhook(secret).sign(msg_id, timestamp, body)
    return {
        "svix-id": msg_id,
        "svix-timestamp": str(int(timestamp.timestamp())),
        "svix-signature": signature,
    }


def signed_request(
    payload: dict[str, Any], secret: str = TEST_SIGNING_SECRET, **kwargs: Any
) -> tuple[str, dict[str, str]]:
    """Serialize a payload and return (body, headers) ready to post."""
    body = json.dumps(payload)
    return body, svix_headers(body, secret=secret, **kwargs)
