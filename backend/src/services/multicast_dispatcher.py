"""
Multicast push delivery through Firebase Cloud Messaging.

The dispatcher sends one payload to every target token in a single batched
call and returns one DeliveryResult per token, in token order. Per-token
failures are results, not errors; only a failure of the batched call itself
raises DispatchError.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import firebase_admin
from firebase_admin import credentials, messaging

from backend.src.config.settings import AppSettings, get_settings
from backend.src.services.exceptions import DispatchError
from backend.src.services.notification_composer import NotificationPayload
from backend.src.utils.logging_config import get_logger


logger = get_logger("push")

FIREBASE_APP_NAME = "dailypulse"


@dataclass(frozen=True)
class DeliveryResult:
    """
    Outcome of delivering to one token.

    Attributes:
        success: Whether the push service accepted the message for the token
        message_id: Push service message id on success
        error: Error detail on failure
        error_code: Push service error code on failure
        unregistered: True when the token is no longer valid and should be
            forgotten
    """

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    unregistered: bool = False

    @classmethod
    def delivered(cls, message_id: Optional[str] = None) -> "DeliveryResult":
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(
        cls,
        error: str,
        error_code: Optional[str] = None,
        unregistered: bool = False,
    ) -> "DeliveryResult":
        return cls(success=False, error=error, error_code=error_code, unregistered=unregistered)


class PushTransport(ABC):
    """Push service client capable of one batched send."""

    @abstractmethod
    async def send_multicast(self, payload: NotificationPayload) -> List[DeliveryResult]:
        """
        Send the payload to all payload.tokens in one call.

        Returns:
            One result per token, in the same order as payload.tokens

        Raises:
            Exception: If the batched call itself fails
        """


def get_firebase_app(settings: Optional[AppSettings] = None) -> firebase_admin.App:
    """
    Get (or initialize once) the Firebase Admin app used for messaging.

    Uses the service-account file from FIREBASE_CREDENTIALS_PATH when set,
    otherwise Google application default credentials.
    """
    settings = settings or get_settings()
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    credential = (
        credentials.Certificate(settings.firebase_credentials_path)
        if settings.firebase_configured
        else None
    )
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    logger.info(
        "Initializing Firebase Admin app",
        extra={"explicit_credentials": settings.firebase_configured},
    )
    return firebase_admin.initialize_app(credential, options, name=FIREBASE_APP_NAME)


class FirebasePushTransport(PushTransport):
    """PushTransport using firebase_admin.messaging.send_each_for_multicast."""

    def __init__(
        self,
        app: Optional[firebase_admin.App] = None,
        dry_run: bool = False,
        app_factory: Optional[Callable[[], firebase_admin.App]] = None,
    ):
        """
        Args:
            app: Firebase app to send through (None = SDK default app)
            dry_run: Validate messages without delivering them
            app_factory: Called on first send to build the app. Credential
                errors then surface from send_multicast instead of here.
        """
        self.app = app
        self.dry_run = dry_run
        self.app_factory = app_factory

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "FirebasePushTransport":
        settings = settings or get_settings()
        return cls(
            dry_run=settings.push_dry_run,
            app_factory=lambda: get_firebase_app(settings),
        )

    def _resolve_app(self) -> Optional[firebase_admin.App]:
        if self.app is None and self.app_factory is not None:
            self.app = self.app_factory()
        return self.app

    def _send(self, message: messaging.MulticastMessage) -> messaging.BatchResponse:
        return messaging.send_each_for_multicast(message, self.dry_run, self._resolve_app())

    def build_message(self, payload: NotificationPayload) -> messaging.MulticastMessage:
        """Map the payload onto an FCM multicast message."""
        link = payload.content.link
        # FCM rejects non-HTTPS webpush links; the service worker uses data["url"] anyway
        webpush = (
            messaging.WebpushConfig(fcm_options=messaging.WebpushFCMOptions(link=link))
            if link.startswith("https://")
            else None
        )
        return messaging.MulticastMessage(
            tokens=list(payload.tokens),
            notification=messaging.Notification(**payload.notification_block()),
            data=payload.data_block(),
            webpush=webpush,
        )

    async def send_multicast(self, payload: NotificationPayload) -> List[DeliveryResult]:
        message = self.build_message(payload)
        # The SDK call blocks on HTTP; keep the event loop free
        batch = await asyncio.to_thread(self._send, message)
        logger.info(
            f"FCM response received: {batch.success_count} successful, "
            f"{batch.failure_count} failed."
        )
        return [self._to_result(response) for response in batch.responses]

    @staticmethod
    def _to_result(response: Any) -> DeliveryResult:
        if response.success:
            return DeliveryResult.delivered(response.message_id)
        exc = response.exception
        return DeliveryResult.failed(
            error=str(exc) if exc else "Unknown delivery error",
            error_code=getattr(exc, "code", None),
            unregistered=isinstance(
                exc, (messaging.UnregisteredError, messaging.SenderIdMismatchError)
            ),
        )


class MulticastDispatcher:
    """Sends one composed payload through a PushTransport."""

    def __init__(self, transport: PushTransport):
        self.transport = transport

    async def dispatch(self, payload: NotificationPayload) -> List[DeliveryResult]:
        """
        Deliver the payload to every token in one batched send.

        Args:
            payload: Composed payload with a non-empty token list

        Returns:
            Per-token results, index-aligned with payload.tokens

        Raises:
            ValueError: If the payload has no tokens
            DispatchError: If the batched send fails or returns a result
                count that does not match the token count
        """
        if not payload.tokens:
            raise ValueError("Cannot dispatch a payload without target tokens")

        token_count = len(payload.tokens)
        logger.info(
            "Sending multicast message...",
            extra={"token_count": token_count, "data": payload.data_block()},
        )

        try:
            results = await self.transport.send_multicast(payload)
        except DispatchError:
            raise
        except Exception as e:
            raise DispatchError(
                f"Multicast send failed: {e}", token_count=token_count
            ) from e

        results = list(results)
        if len(results) != token_count:
            raise DispatchError(
                f"Push service returned {len(results)} results for {token_count} tokens",
                token_count=token_count,
            )
        return results
