"""
Builds the push payload announcing a new report.

One canonical field set (title, body, icon, link) is derived per report.
Two views are taken from it:
- notification_block: title/body for the platform notification and the
  in-app toast shown while the dashboard is in the foreground
- data_block: title/body/icon/url as flat strings, the source of truth for
  the service worker rendering the notification in the background
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional, Tuple

from backend.src.config.settings import AppSettings, get_settings
from backend.src.services.report_events import ReportCreatedEvent


REPORT_SUBMITTED_TITLE = "New Report Submitted!"
DEFAULT_SUBMITTER_NAME = "A user"
DEFAULT_LOCATION_NAME = "a location"


@dataclass(frozen=True)
class NotificationContent:
    """Canonical notification fields for one report."""

    title: str
    body: str
    icon: str
    link: str


@dataclass(frozen=True)
class NotificationPayload:
    """
    Immutable push payload plus the tokens it targets.

    Attributes:
        content: Canonical notification fields
        tokens: Unique target tokens, in dispatch order
    """

    content: NotificationContent
    tokens: Tuple[str, ...] = field(default_factory=tuple)

    def notification_block(self) -> Dict[str, str]:
        """Platform notification view (title and body only)."""
        return {
            "title": self.content.title,
            "body": self.content.body,
        }

    def data_block(self) -> Dict[str, str]:
        """
        Data-only view read by background delivery agents.

        Keys are title, body, icon and url; all values are strings.
        """
        return {
            "title": self.content.title,
            "body": self.content.body,
            "icon": self.content.icon,
            "url": self.content.link,
        }

    def to_dict(self) -> Dict[str, object]:
        return {
            "notification": self.notification_block(),
            "data": self.data_block(),
            "tokens": list(self.tokens),
        }


class NotificationComposer:
    """Composes the "new report" payload."""

    def __init__(self, icon_url: str, link_builder: Callable[[str], str]):
        """
        Args:
            icon_url: Absolute icon URL
            link_builder: Maps a report GUID to its detail-view URL
        """
        self.icon_url = icon_url
        self.link_builder = link_builder

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "NotificationComposer":
        settings = settings or get_settings()
        return cls(icon_url=settings.icon_url, link_builder=settings.report_link)

    def build_content(self, event: ReportCreatedEvent) -> NotificationContent:
        submitter_name = event.submitted_by_name or DEFAULT_SUBMITTER_NAME
        location_name = event.location_name or DEFAULT_LOCATION_NAME
        return NotificationContent(
            title=REPORT_SUBMITTED_TITLE,
            body=f"{submitter_name} just submitted a report for {location_name}. Tap to view.",
            icon=self.icon_url,
            link=self.link_builder(event.report_id),
        )

    def compose(self, event: ReportCreatedEvent, tokens: Iterable[str]) -> NotificationPayload:
        """
        Args:
            event: The report-created event
            tokens: Target tokens from the token aggregator

        Returns:
            NotificationPayload ready for the dispatcher
        """
        return NotificationPayload(content=self.build_content(event), tokens=tuple(tokens))
