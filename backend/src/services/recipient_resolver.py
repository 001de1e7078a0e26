"""
Recipient resolution for report-created notifications.

Every administrator is notified; regional managers are added when the
report carries a region they cover. The two directory queries fail
independently: a failed lookup is logged and contributes no recipients.
"""

from typing import Dict

from backend.src.services.account_directory import AccountDirectory, DirectoryAccount
from backend.src.services.report_events import ReportCreatedEvent
from backend.src.utils.logging_config import get_logger


logger = get_logger("push")


class RecipientResolver:
    """Builds the deduplicated recipient map for one report."""

    def __init__(self, directory: AccountDirectory):
        self.directory = directory

    async def resolve(self, event: ReportCreatedEvent) -> Dict[str, DirectoryAccount]:
        """
        Resolve the accounts to notify about a new report.

        Args:
            event: The report-created event

        Returns:
            Mapping of account GUID to account. An account matching both
            queries appears once. May be empty.
        """
        recipients: Dict[str, DirectoryAccount] = {}

        try:
            admins = await self.directory.list_admins()
        except Exception as e:
            logger.error(
                f"Failed to query for admins: {e}",
                extra={"report_id": event.report_id},
                exc_info=True,
            )
        else:
            for account in admins:
                recipients[account.account_id] = account
            logger.info(f"Found {len(admins)} admin(s).", extra={"report_id": event.report_id})

        region = event.submitted_by_region
        if region:
            try:
                managers = await self.directory.list_regional_managers(region)
            except Exception as e:
                logger.error(
                    f"Failed to query for regional managers in region {region}: {e}",
                    extra={"report_id": event.report_id, "region": region},
                    exc_info=True,
                )
            else:
                for account in managers:
                    recipients[account.account_id] = account
                logger.info(
                    f"Found {len(managers)} regional manager(s) for region: {region}.",
                    extra={"report_id": event.report_id, "region": region},
                )
        else:
            logger.info(
                "Report is missing a region. Notifying admins only.",
                extra={"report_id": event.report_id},
            )

        logger.info(
            f"Total unique recipients to notify: {len(recipients)}.",
            extra={"report_id": event.report_id},
        )
        return recipients
