import logging
from datetime import datetime, timezone
from typing import Optional

from studyhub.models.material import ModerationStatus
from studyhub.models.user import User

logger = logging.getLogger(__name__)

INVALID_STATUS_MESSAGE = "Invalid status. Must be 'approved' or 'rejected'"
DECISIONS = (ModerationStatus.approved.value, ModerationStatus.rejected.value)


class InvalidModerationStatus(ValueError):
    pass


def moderate(item, status: Optional[str], moderator: User, reason: Optional[str] = None):
    """
    Record a moderation decision on a material or quiz.

    Only "approved" and "rejected" are decisions; anything else raises
    InvalidModerationStatus. An item that was already moderated can be
    moderated again, the latest decision wins.
    """
    if status not in DECISIONS:
        raise InvalidModerationStatus(INVALID_STATUS_MESSAGE)

    previous = item.moderation_status
    item.moderation_status = ModerationStatus(status)
    item.moderated_by_id = moderator.id
    item.moderated_at = datetime.now(timezone.utc)
    item.moderation_notes = reason
    logger.info(
        f"{type(item).__name__} {item.id} moderated by user {moderator.id}: "
        f"{getattr(previous, 'value', previous)} -> {status}"
    )
    return item
