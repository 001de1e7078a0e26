"""
Reports per-token delivery failures after a multicast send.

Purely observational: partial failure is expected and never fails the
notification pipeline, so this stage only logs and summarizes.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from backend.src.services.multicast_dispatcher import DeliveryResult
from backend.src.utils.logging_config import get_logger


logger = get_logger("push")


@dataclass(frozen=True)
class FailedDelivery:
    token: str
    error: Optional[str] = None
    error_code: Optional[str] = None
    unregistered: bool = False


@dataclass
class DeliverySummary:
    """Success/failure counts for one multicast send."""

    success_count: int = 0
    failure_count: int = 0
    failed: List[FailedDelivery] = field(default_factory=list)
    delivered_tokens: List[str] = field(default_factory=list)

    @property
    def failed_tokens(self) -> List[str]:
        return [failure.token for failure in self.failed]

    @property
    def unregistered_tokens(self) -> List[str]:
        return [failure.token for failure in self.failed if failure.unregistered]


class FailureReporter:
    """Maps delivery results back to their tokens and logs the failures."""

    def report(
        self,
        results: Sequence[DeliveryResult],
        tokens: Sequence[str],
    ) -> DeliverySummary:
        """
        Args:
            results: Per-token results from the dispatcher
            tokens: Tokens in dispatch order (index-aligned with results)

        Returns:
            DeliverySummary
        """
        summary = DeliverySummary()

        if len(results) != len(tokens):
            logger.warning(
                "Delivery result count does not match token count",
                extra={"result_count": len(results), "token_count": len(tokens)},
            )

        for token, result in zip(tokens, results):
            if result.success:
                summary.success_count += 1
                summary.delivered_tokens.append(token)
                continue

            summary.failure_count += 1
            summary.failed.append(FailedDelivery(
                token=token,
                error=result.error,
                error_code=result.error_code,
                unregistered=result.unregistered,
            ))
            logger.error(
                f"Token failed: {token}: {result.error}",
                extra={"token": token, "error_code": result.error_code},
            )

        logger.info(
            f"Push delivery summary: {summary.success_count} successful, "
            f"{summary.failure_count} failed.",
            extra={
                "success": summary.success_count,
                "failed": summary.failure_count,
            },
        )
        if summary.failure_count:
            logger.info(
                "List of tokens that caused failures: " + ", ".join(summary.failed_tokens)
            )
        return summary
