"""
Review moderation state machine.

    pending  --approve--> approved
    pending  --reject---> rejected
    rejected --approve--> approved
    approved --reject---> rejected

Repeating an action is a no-op. Nothing ever returns a review to 'pending'.
"""
import logging

from proofviral.services import data_access

logger = logging.getLogger(__name__)

ACTIONS = {
    'approve': 'approved',
    'reject': 'rejected',
}


class InvalidModerationAction(ValueError):
    pass


def next_status(current_status, action):
    """Status a review ends up in after ``action``."""
    try:
        target = ACTIONS[action]
    except KeyError:
        raise InvalidModerationAction(f"Unknown moderation action: {action}")
    if current_status not in ('pending', 'approved', 'rejected'):
        raise InvalidModerationAction(f"Unknown review status: {current_status}")
    return target


def moderate(review, action):
    """Apply a moderation action and persist the new status."""
    target = next_status(review.status, action)
    if review.status == target:
        logger.debug("Review %s already %s", review.id, target)
        return review
    logger.info("Review %s: %s -> %s", review.id, review.status, target)
    return data_access.update_review_status(review, target)
