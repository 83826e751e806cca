"""Firebase Cloud Messaging adapter (FCM HTTP v1 API)."""

import asyncio
import json
import logging
from typing import Any

import httpx
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account
from pydantic import BaseModel, Field

from push_relay.core.logging import mask_token
from push_relay.core.retry_handler import RetryHandler

logger = logging.getLogger(__name__)

FCM_ENDPOINT = "https://fcm.googleapis.com"
FCM_SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]

# FCM allows at most this many tokens in one multicast message
MAX_MULTICAST_TOKENS = 500

# FcmError.errorCode -> provider error code
FCM_ERROR_CODES = {
    "UNREGISTERED": "messaging/registration-token-not-registered",
    "INVALID_ARGUMENT": "messaging/invalid-argument",
    "SENDER_ID_MISMATCH": "messaging/mismatched-credential",
    "QUOTA_EXCEEDED": "messaging/message-rate-exceeded",
    "UNAVAILABLE": "messaging/server-unavailable",
    "INTERNAL": "messaging/internal-error",
    "THIRD_PARTY_AUTH_ERROR": "messaging/third-party-auth-error",
    "APNS_AUTH_ERROR": "messaging/third-party-auth-error",
}

# google.rpc status -> provider error code, used when no FcmError detail is present
STATUS_ERROR_CODES = {
    "INVALID_ARGUMENT": "messaging/invalid-argument",
    "NOT_FOUND": "messaging/registration-token-not-registered",
    "PERMISSION_DENIED": "messaging/mismatched-credential",
    "UNAUTHENTICATED": "messaging/authentication-error",
    "RESOURCE_EXHAUSTED": "messaging/message-rate-exceeded",
    "UNAVAILABLE": "messaging/server-unavailable",
    "INTERNAL": "messaging/internal-error",
}

UNKNOWN_ERROR = "messaging/unknown-error"
NETWORK_ERROR = "app/network-error"
INVALID_CREDENTIAL = "app/invalid-credential"

TRANSIENT_ERROR_CODES = frozenset(
    {"messaging/server-unavailable", "messaging/internal-error", NETWORK_ERROR}
)


class MessagingError(Exception):
    """A send rejected by FCM or lost in transit."""

    def __init__(self, code: str, message: str, http_status: int | None = None):
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(f"{code}: {message}")

    @property
    def is_transient(self) -> bool:
        return self.code in TRANSIENT_ERROR_CODES


# Pydantic models for FCM messages


class Notification(BaseModel):
    """Basic notification shown by the device."""

    title: str
    body: str


class _BaseMessage(BaseModel):
    notification: Notification | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    android: dict[str, Any] | None = None
    apns: dict[str, Any] | None = None


class Message(_BaseMessage):
    """A message addressed to a single registration token."""

    token: str

    def to_payload(self) -> dict[str, Any]:
        """Encode as the ``message`` object of a v1 ``messages:send`` request."""
        message: dict[str, Any] = {"token": self.token}
        if self.notification is not None:
            message["notification"] = self.notification.model_dump()
        if self.data:
            message["data"] = {str(k): _encode_data_value(v) for k, v in self.data.items()}
        if self.android:
            message["android"] = _encode_android(self.android)
        if self.apns:
            message["apns"] = self.apns
        return message


class MulticastMessage(_BaseMessage):
    """A message fanned out to several registration tokens."""

    tokens: list[str]

    def for_token(self, token: str) -> Message:
        return Message(
            token=token,
            notification=self.notification,
            data=self.data,
            android=self.android,
            apns=self.apns,
        )


class SendError(BaseModel):
    code: str
    message: str


class SendResponse(BaseModel):
    """Outcome of delivering to one token."""

    success: bool
    message_id: str | None = None
    error: SendError | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.message_id is not None:
            result["messageId"] = self.message_id
        if self.error is not None:
            result["error"] = self.error.model_dump()
        return result


class BatchResponse(BaseModel):
    """Per-token outcomes of a multicast send, in token order."""

    responses: list[SendResponse]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.responses if r.success)

    @property
    def failure_count(self) -> int:
        return len(self.responses) - self.success_count


def _encode_data_value(value: Any) -> str:
    # FCM only accepts string values in the data map
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _encode_android(android: dict[str, Any]) -> dict[str, Any]:
    encoded = dict(android)
    priority = encoded.get("priority")
    if isinstance(priority, str):
        encoded["priority"] = priority.upper()
    return encoded


def error_from_response(response: httpx.Response) -> MessagingError:
    """Translate an FCM v1 error response into a MessagingError."""
    try:
        body = response.json()
    except ValueError:
        body = {}

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        error = {}

    fcm_code = None
    for detail in error.get("details") or []:
        if str(detail.get("@type", "")).endswith("FcmError"):
            fcm_code = detail.get("errorCode")
            break

    code = (
        FCM_ERROR_CODES.get(fcm_code)
        or STATUS_ERROR_CODES.get(error.get("status"))
        or UNKNOWN_ERROR
    )
    message = error.get("message") or f"FCM request failed with HTTP {response.status_code}"
    return MessagingError(code, message, http_status=response.status_code)


class FCMClient:
    """Client for the FCM HTTP v1 send API."""

    def __init__(
        self,
        credentials: Credentials,
        project_id: str,
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        base_url: str = FCM_ENDPOINT,
    ):
        """
        Initialize FCM client.

        Args:
            credentials: google-auth credentials scoped for firebase.messaging
            project_id: Firebase project the messages are sent through
            timeout: Request timeout in seconds
            max_retries: Attempts per message on transient errors
            retry_delay: Initial backoff between attempts in seconds
            base_url: FCM API root
        """
        if not project_id:
            raise ValueError("A Firebase project id is required")
        self.credentials = credentials
        self.project_id = project_id
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.base_url = base_url.rstrip("/")
        self._client: httpx.AsyncClient | None = None
        self._refresh_lock = asyncio.Lock()

    @classmethod
    def from_service_account_file(
        cls, path: str, project_id: str | None = None, **kwargs: Any
    ) -> "FCMClient":
        """Build a client from a service account JSON key file."""
        credentials = service_account.Credentials.from_service_account_file(
            path, scopes=FCM_SCOPES
        )
        return cls(credentials, project_id or credentials.project_id, **kwargs)

    async def __aenter__(self) -> "FCMClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Content-Type": "application/json"},
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if not self._client:
            raise RuntimeError("FCMClient must be used as async context manager")
        return self._client

    @property
    def send_path(self) -> str:
        return f"/v1/projects/{self.project_id}/messages:send"

    async def _access_token(self) -> str:
        async with self._refresh_lock:
            if not self.credentials.valid:
                # google-auth refreshes synchronously over requests
                try:
                    await asyncio.to_thread(self.credentials.refresh, GoogleAuthRequest())
                except GoogleAuthError as e:
                    logger.error(f"Failed to refresh FCM credentials: {e}")
                    raise MessagingError(INVALID_CREDENTIAL, str(e)) from e
        return self.credentials.token

    async def _post(self, payload: dict[str, Any]) -> str:
        token = await self._access_token()
        try:
            response = await self.client.post(
                self.send_path,
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.RequestError as e:
            raise MessagingError(NETWORK_ERROR, f"Failed to reach FCM: {e}") from e

        if response.status_code >= 400:
            raise error_from_response(response)
        return str(response.json().get("name", ""))

    async def send(self, message: Message) -> str:
        """
        Send a message to a single token.

        Returns:
            The FCM message name (``projects/<id>/messages/<id>``)

        Raises:
            MessagingError: If FCM rejects the message or cannot be reached
        """
        payload = {"message": message.to_payload()}

        message_id = await RetryHandler.with_retry(
            self._post,
            payload,
            max_retries=self.max_retries,
            delay=self.retry_delay,
            retry_if=lambda e: isinstance(e, MessagingError) and e.is_transient,
        )
        logger.debug(f"FCM accepted message for {mask_token(message.token)}: {message_id}")
        return message_id

    async def _send_one(self, message: Message) -> SendResponse:
        try:
            message_id = await self.send(message)
        except MessagingError as e:
            logger.info(f"FCM delivery to {mask_token(message.token)} failed: {e.code}")
            return SendResponse(success=False, error=SendError(code=e.code, message=e.message))
        return SendResponse(success=True, message_id=message_id)

    async def send_each_for_multicast(self, multicast: MulticastMessage) -> BatchResponse:
        """
        Send a message to every token concurrently.

        Per-token failures are reported in the returned BatchResponse and
        never raised.
        """
        if not multicast.tokens:
            raise ValueError("Multicast message must contain at least one token")
        if len(multicast.tokens) > MAX_MULTICAST_TOKENS:
            raise ValueError(
                f"Multicast message may contain at most {MAX_MULTICAST_TOKENS} tokens"
            )

        responses = await asyncio.gather(
            *(self._send_one(multicast.for_token(token)) for token in multicast.tokens)
        )
        return BatchResponse(responses=list(responses))
