"""
Flattens resolved recipients into the list of push tokens to target.
"""

from typing import Dict, List, Mapping, Optional

from backend.src.services.account_directory import DirectoryAccount
from backend.src.utils.logging_config import get_logger


logger = get_logger("push")


class TokenAggregator:
    """
    Collects unique push tokens from a recipient map.

    The submitter never notifies themselves: their account may still be a
    resolved recipient (e.g. an admin submitting a report) but contributes
    no tokens. Tokens are deduplicated across all accounts, since one device
    token can be registered under several accounts.
    """

    def collect(
        self,
        recipients: Mapping[str, DirectoryAccount],
        submitter_id: Optional[str],
    ) -> List[str]:
        """
        Args:
            recipients: Account GUID to account mapping
            submitter_id: GUID of the report submitter

        Returns:
            Unique tokens in first-seen order (possibly empty)
        """
        unique: Dict[str, None] = {}

        for account_id, account in recipients.items():
            if account_id == submitter_id:
                continue

            tokens = account.push_tokens
            if not isinstance(tokens, (list, tuple)):
                if tokens:
                    logger.warning(
                        "Ignoring malformed push token field",
                        extra={"account_id": account_id, "field_type": type(tokens).__name__},
                    )
                continue

            for token in tokens:
                if isinstance(token, str) and token:
                    unique.setdefault(token, None)

        logger.info(f"Found {len(unique)} unique push tokens to send to.")
        return list(unique)
