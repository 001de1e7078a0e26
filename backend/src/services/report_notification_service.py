"""
Report notification pipeline.

Pushes a "new report" notification to administrators and the regional
managers of the report's region whenever a report is created:

    resolve recipients -> collect tokens -> compose -> dispatch -> report

The pipeline is fire-and-forget. Empty recipient or token sets end it
early, lookup failures are isolated, per-token failures are logged, and a
failed batched send is logged and swallowed. notify_report_created never
raises.
"""

import enum
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from backend.src.config.settings import AppSettings, get_settings
from backend.src.services.account_directory import AccountDirectory, SqlAccountDirectory
from backend.src.services.device_token_service import DeviceTokenService
from backend.src.services.exceptions import DispatchError
from backend.src.services.failure_reporter import DeliverySummary, FailureReporter
from backend.src.services.multicast_dispatcher import (
    FirebasePushTransport,
    MulticastDispatcher,
    PushTransport,
)
from backend.src.services.notification_composer import NotificationComposer
from backend.src.services.recipient_resolver import RecipientResolver
from backend.src.services.report_events import ReportCreatedEvent
from backend.src.services.token_aggregator import TokenAggregator
from backend.src.utils.logging_config import get_logger


logger = get_logger("push")


class PipelineState(enum.Enum):
    """Terminal state reached by one pipeline run."""
    NO_RECIPIENTS = "no_recipients"
    NO_TOKENS = "no_tokens"
    DISPATCHED = "dispatched"
    DISPATCH_FAILED = "dispatch_failed"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    """
    Result of one pipeline run. Every run completes; state says how far it got.
    """

    report_id: str
    state: PipelineState
    recipient_count: int = 0
    token_count: int = 0
    summary: Optional[DeliverySummary] = None
    error: Optional[str] = None

    @property
    def success_count(self) -> int:
        return self.summary.success_count if self.summary else 0

    @property
    def failure_count(self) -> int:
        return self.summary.failure_count if self.summary else 0


class ReportNotificationService:
    """
    Orchestrates report-created push notifications.

    Args:
        directory: Account roster for recipient lookups
        transport: Push service client
        composer: Payload composer
        token_store: Optional DeviceTokenService used to forget
            unregistered tokens and stamp delivered ones
        prune_invalid_tokens: Whether unregistered tokens are deleted
    """

    def __init__(
        self,
        directory: AccountDirectory,
        transport: PushTransport,
        composer: NotificationComposer,
        token_store: Optional[DeviceTokenService] = None,
        prune_invalid_tokens: bool = True,
    ):
        self.resolver = RecipientResolver(directory)
        self.aggregator = TokenAggregator()
        self.composer = composer
        self.dispatcher = MulticastDispatcher(transport)
        self.reporter = FailureReporter()
        self.token_store = token_store
        self.prune_invalid_tokens = prune_invalid_tokens

    @classmethod
    def from_settings(
        cls,
        db: Session,
        settings: Optional[AppSettings] = None,
        transport: Optional[PushTransport] = None,
    ) -> "ReportNotificationService":
        """Build the pipeline over the SQL directory and Firebase transport."""
        settings = settings or get_settings()
        return cls(
            directory=SqlAccountDirectory(db),
            transport=transport or FirebasePushTransport.from_settings(settings),
            composer=NotificationComposer.from_settings(settings),
            token_store=DeviceTokenService(db),
            prune_invalid_tokens=settings.push_prune_invalid_tokens,
        )

    async def notify_report_created(self, event: ReportCreatedEvent) -> PipelineOutcome:
        """
        Run the pipeline for one newly created report.

        Args:
            event: The report-created event

        Returns:
            PipelineOutcome describing the terminal state
        """
        logger.info(
            "Report notification triggered",
            extra={
                "report_id": event.report_id,
                "submitted_by": event.submitted_by,
                "region": event.submitted_by_region,
            },
        )
        outcome = PipelineOutcome(report_id=event.report_id, state=PipelineState.FAILED)

        try:
            recipients = await self.resolver.resolve(event)
            outcome.recipient_count = len(recipients)
            if not recipients:
                logger.info("No recipients found (admins or relevant regional managers).")
                outcome.state = PipelineState.NO_RECIPIENTS
                return outcome

            tokens = self.aggregator.collect(recipients, event.submitted_by)
            outcome.token_count = len(tokens)
            if not tokens:
                logger.info("No push tokens found for any recipients.")
                outcome.state = PipelineState.NO_TOKENS
                return outcome

            payload = self.composer.compose(event, tokens)

            try:
                results = await self.dispatcher.dispatch(payload)
            except DispatchError as e:
                logger.error(
                    f"Error sending push message: {e}",
                    extra={"report_id": event.report_id, "token_count": len(tokens)},
                    exc_info=True,
                )
                outcome.state = PipelineState.DISPATCH_FAILED
                outcome.error = str(e)
                return outcome

            outcome.summary = self.reporter.report(results, payload.tokens)
            outcome.state = PipelineState.DISPATCHED
            self._update_token_store(outcome.summary)
            return outcome
        except Exception as e:
            logger.error(
                f"Report notification pipeline failed: {e}",
                extra={"report_id": event.report_id},
                exc_info=True,
            )
            outcome.error = str(e)
            return outcome

    def _update_token_store(self, summary: DeliverySummary) -> None:
        """Forget unregistered tokens and stamp delivered ones. Never raises."""
        if self.token_store is None:
            return
        try:
            stale: Sequence[str] = summary.unregistered_tokens
            if self.prune_invalid_tokens and stale:
                self.token_store.remove_invalid(stale)
            if summary.delivered_tokens:
                self.token_store.mark_used(summary.delivered_tokens)
        except Exception as e:
            logger.warning(f"Push token bookkeeping failed: {e}", exc_info=True)
