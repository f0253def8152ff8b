"""Tests for the Clerk webhook endpoint."""

import inspect
import json
from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from src.user_sync.api.http.deps import get_user_sync_service
from src.user_sync.core.models import SyncOutcome
from src.user_sync.core.services import UserSyncService
from src.user_sync.entities.core.user import User, UserRepository
from tests.utils import clerk_event, clerk_user_data, signed_request, svix_headers


def _post(client, url, payload, **kwargs):
    body, headers = signed_request(payload, **kwargs)
    return client.post(url, content=body, headers=headers)


class TestSigningSecret:
    """Requests are refused with 500 until a usable secret is configured."""

    @pytest.mark.parametrize("signing_secret", [None])
    def test_missing_secret(self, client, webhook_url, signing_secret):
        response = _post(client, webhook_url, clerk_event("user.created", clerk_user_data()))

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}

    @pytest.mark.parametrize("signing_secret", [None])
    def test_missing_secret_takes_precedence_over_headers(
        self, client, webhook_url, signing_secret
    ):
        """An unconfigured receiver answers 500 even to unsigned requests."""
        response = client.post(webhook_url, content=b"{}")

        assert response.status_code == 500

    @pytest.mark.parametrize("signing_secret", ["whsec_abc"])
    def test_undecodable_secret(self, client, webhook_url, signing_secret):
        body = json.dumps(clerk_event("user.created", clerk_user_data()))
        headers = {
            "svix-id": "msg_1",
            "svix-timestamp": str(int(datetime.now(UTC).timestamp())),
            "svix-signature": "v1,c2lnbmF0dXJl",
        }

        response = client.post(webhook_url, content=body, headers=headers)

        assert response.status_code == 500


class TestRequestValidation:
    """Transport and signature failures are answered with 400."""

    @pytest.mark.parametrize("missing", ["svix-id", "svix-timestamp", "svix-signature"])
    def test_missing_svix_header(self, client, webhook_url, missing):
        body, headers = signed_request(clerk_event("user.created", clerk_user_data()))
        del headers[missing]

        response = client.post(webhook_url, content=body, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"detail": "Error occurred -- no svix headers"}

    def test_unparseable_body(self, client, webhook_url):
        body = "{not json"

        response = client.post(webhook_url, content=body, headers=svix_headers(body))

        assert response.status_code == 400
        assert response.json() == {"detail": "Error parsing JSON body"}

    def test_invalid_signature(self, client, webhook_url):
        body, headers = signed_request(clerk_event("user.created", clerk_user_data()))
        headers["svix-signature"] = "v1,aW52YWxpZC1zaWduYXR1cmU="

        response = client.post(webhook_url, content=body, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"detail": "Error verifying webhook"}

    def test_body_modified_after_signing(self, client, webhook_url):
        body, headers = signed_request(clerk_event("user.created", clerk_user_data()))

        response = client.post(
            webhook_url, content=body.replace("ada", "eve"), headers=headers
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Error verifying webhook"}

    def test_stale_timestamp(self, client, webhook_url, session):
        response = _post(
            client,
            webhook_url,
            clerk_event("user.created", clerk_user_data()),
            timestamp=datetime.now(UTC) - timedelta(minutes=10),
        )

        assert response.status_code == 400
        assert UserRepository(session).list_all() == []



class TestUserEvents:
    """Verified user events are mirrored into the user table."""

    def test_user_created(self, client, webhook_url, session):
        response = _post(
            client, webhook_url, clerk_event("user.created", clerk_user_data(user_id="user_1"))
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Webhook processed successfully",
            "outcome": "created",
        }
        users = UserRepository(session).list_all()
        assert len(users) == 1
        assert users[0].external_user_id == "user_1"
        assert users[0].username == "ada"
        assert users[0].phone_number == "+15555550100"
        assert users[0].profile_image_url == "https://img.clerk.com/ada.png"

    def test_user_created_with_sparse_profile(self, client, webhook_url, session):
        payload = clerk_event(
            "user.created",
            clerk_user_data(user_id="user_1", username=None, phone_number=None, image_url=None),
        )

        response = _post(client, webhook_url, payload)

        assert response.status_code == 200
        user = UserRepository(session).get_by_external_id("user_1")
        assert (user.username, user.phone_number, user.profile_image_url) == ("", "", "")

    def test_user_updated(self, client, webhook_url, session):
        repo = UserRepository(session)
        existing = repo.create(User(external_user_id="user_1", username="ada"))
        session.commit()

        response = _post(
            client,
            webhook_url,
            clerk_event(
                "user.updated",
                clerk_user_data(user_id="user_1", username="countess", phone_number=None),
            ),
        )

        assert response.status_code == 200
        assert response.json()["outcome"] == "updated"
        user = repo.get_by_external_id("user_1")
        assert user.id == existing.id
        assert user.username == "countess"
        assert user.phone_number == ""

    def test_user_deleted(self, client, webhook_url, session):
        repo = UserRepository(session)
        repo.create(User(external_user_id="user_1"))
        repo.create(User(external_user_id="user_2"))
        session.commit()

        response = _post(
            client,
            webhook_url,
            clerk_event("user.deleted", {"id": "user_1", "object": "user", "deleted": True}),
        )

        assert response.status_code == 200
        assert response.json()["outcome"] == "deleted"
        assert [u.external_user_id for u in repo.list_all()] == ["user_2"]

    def test_unknown_event_type(self, client, webhook_url, session):
        response = _post(
            client, webhook_url, clerk_event("session.created", {"id": "sess_1"})
        )

        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"
        assert UserRepository(session).list_all() == []

    @pytest.mark.parametrize(
        "payload",
        [
            {"object": "event", "data": {}},
            {"type": 7, "data": {}},
            {"type": None, "data": clerk_user_data()},
            ["user.created"],
            "user.created",
        ],
    )
    def test_envelope_without_event_type_is_ignored(
        self, client, webhook_url, session, payload
    ):
        """Signed bodies with no string type are unhandled events, not errors."""
        response = _post(client, webhook_url, payload)

        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"
        assert UserRepository(session).list_all() == []

    def test_user_event_without_id(self, client, webhook_url, session):
        """A user event that cannot be applied fails like any persistence error."""
        response = _post(
            client, webhook_url, clerk_event("user.created", {"username": "x"})
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}
        assert UserRepository(session).list_all() == []

    def test_update_of_unknown_user(self, client, webhook_url, session):
        """Updates for users never created fail with 500 so the provider retries."""
        response = _post(
            client, webhook_url, clerk_event("user.updated", clerk_user_data(user_id="ghost"))
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}
        assert UserRepository(session).list_all() == []

    def test_delete_of_unknown_user(self, client, webhook_url):
        response = _post(
            client, webhook_url, clerk_event("user.deleted", {"id": "ghost", "deleted": True})
        )

        assert response.status_code == 500

    def test_duplicate_create(self, client, webhook_url, session):
        payload = clerk_event("user.created", clerk_user_data(user_id="user_1"))

        assert _post(client, webhook_url, payload).status_code == 200
        assert _post(client, webhook_url, payload, msg_id="msg_retry").status_code == 500
        assert len(UserRepository(session).list_all()) == 1


class TestServiceDispatch:
    """Handler behaviour with the sync service replaced by a mock."""

    @pytest.fixture
    def sync_service(self, client):
        service = Mock(spec=UserSyncService)
        client.app.dependency_overrides[get_user_sync_service] = lambda: service
        return service

    def test_event_passed_to_service_once(self, client, webhook_url, sync_service):
        sync_service.handle_event.return_value = SyncOutcome.CREATED
        payload = clerk_event("user.created", clerk_user_data(user_id="user_1"))

        response = _post(client, webhook_url, payload)

        assert response.status_code == 200
        sync_service.handle_event.assert_called_once()
        event = sync_service.handle_event.call_args.args[0]
        assert event.type == "user.created"
        assert event.data["id"] == "user_1"

    def test_service_not_called_when_verification_fails(
        self, client, webhook_url, sync_service
    ):
        body, headers = signed_request(clerk_event("user.created", clerk_user_data()))
        headers["svix-signature"] = "v1,aW52YWxpZA=="

        response = client.post(webhook_url, content=body, headers=headers)

        assert response.status_code == 400
        sync_service.handle_event.assert_not_called()

    def test_persistence_failure(self, client, webhook_url, sync_service):
        sync_service.handle_event.side_effect = OperationalError(
            "INSERT", {}, Exception("database is locked")
        )

        response = _post(
            client, webhook_url, clerk_event("user.created", clerk_user_data())
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}


class TestResponseHeaders:
    def test_request_id_is_echoed(self, client, webhook_url):
        body, headers = signed_request(clerk_event("session.ended", {}))
        headers["X-Request-ID"] = "req-123"

        response = client.post(webhook_url, content=body, headers=headers)

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_handler_runs_in_threadpool():
    """Database work must not run on the event loop."""
    from src.user_sync.api.http.routers.webhooks import clerk_webhook

    assert not inspect.iscoroutinefunction(clerk_webhook)
