"""Integration tests for the direct send endpoints."""

import pytest

from push_relay.adapters.fcm import BatchResponse, MessagingError, SendError, SendResponse

NOTIFICATION = {"title": "Flash sale", "body": "Everything is 20% off"}


@pytest.mark.integration
class TestSendNotification:
    """Test POST /api/send-notification."""

    def test_send_notification(self, client, mock_messaging):
        mock_messaging.send.return_value = "projects/demo-project/messages/1"

        response = client.post(
            "/api/send-notification",
            json={
                "token": "tokA",
                "notification": NOTIFICATION,
                "data": {"screen": "Sale"},
                "apns": {"payload": {"aps": {"badge": 3}}},
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "messageId": "projects/demo-project/messages/1",
            "message": "Notification sent successfully",
        }
        message = mock_messaging.send.await_args.args[0]
        assert message.apns["payload"]["aps"]["badge"] == 3
        assert message.apns["payload"]["aps"]["sound"] == "default"

    def test_missing_token(self, client, mock_messaging):
        response = client.post("/api/send-notification", json={"notification": NOTIFICATION})

        assert response.status_code == 400
        assert response.json()["error"] == "FCM token is required"
        mock_messaging.send.assert_not_called()

    def test_missing_title(self, client, mock_messaging):
        response = client.post(
            "/api/send-notification",
            json={"token": "tokA", "notification": {"body": "no title"}},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Notification title and body are required"
        mock_messaging.send.assert_not_called()

    def test_malformed_body(self, client, mock_messaging):
        response = client.post(
            "/api/send-notification",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        mock_messaging.send.assert_not_called()

    def test_provider_error(self, client, mock_messaging):
        mock_messaging.send.side_effect = MessagingError(
            "messaging/invalid-argument",
            "The registration token is not a valid FCM registration token",
        )

        response = client.post(
            "/api/send-notification", json={"token": "tokA", "notification": NOTIFICATION}
        )

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "The registration token is not a valid FCM registration token",
            "code": "messaging/invalid-argument",
        }


@pytest.mark.integration
class TestSendMulticastNotification:
    """Test POST /api/send-multicast-notification."""

    def test_send_multicast(self, client, mock_messaging):
        mock_messaging.send_each_for_multicast.return_value = BatchResponse(
            responses=[
                SendResponse(success=True, message_id="projects/demo-project/messages/1"),
                SendResponse(
                    success=False,
                    error=SendError(
                        code="messaging/registration-token-not-registered",
                        message="Requested entity was not found.",
                    ),
                ),
            ]
        )

        response = client.post(
            "/api/send-multicast-notification",
            json={"tokens": ["tokA", "tokB"], "notification": NOTIFICATION},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["successCount"] == 1
        assert body["failureCount"] == 1
        assert body["responses"][1]["error"]["code"] == "messaging/registration-token-not-registered"

    def test_multicast_does_not_touch_registry(self, client, mock_messaging):
        mock_messaging.send_each_for_multicast.return_value = BatchResponse(
            responses=[
                SendResponse(
                    success=False,
                    error=SendError(code="messaging/invalid-argument", message="bad"),
                )
            ]
        )
        client.post("/api/register-fcm-token", json={"shopifyCustomerID": "9", "token": "tokA"})

        client.post(
            "/api/send-multicast-notification",
            json={"tokens": ["tokA"], "notification": NOTIFICATION},
        )

        registered = client.post(
            "/api/register-fcm-token", json={"shopifyCustomerID": "9", "token": "tokA"}
        )
        assert registered.json() == {"success": True, "duplicate": True}

    @pytest.mark.parametrize("tokens", [None, [], "tokA"])
    def test_tokens_must_be_non_empty_array(self, client, mock_messaging, tokens):
        payload = {"notification": NOTIFICATION}
        if tokens is not None:
            payload["tokens"] = tokens

        response = client.post("/api/send-multicast-notification", json=payload)

        assert response.status_code == 400
        mock_messaging.send_each_for_multicast.assert_not_called()

    def test_unexpected_failure(self, client, mock_messaging):
        mock_messaging.send_each_for_multicast.side_effect = RuntimeError("boom")

        response = client.post(
            "/api/send-multicast-notification",
            json={"tokens": ["tokA"], "notification": NOTIFICATION},
        )

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_SERVER_ERROR"
