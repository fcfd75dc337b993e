"""
Signals emitted by the note lifecycle.

Apps that store a creator's recorded content connect to
``creator_data_purge_requested`` and delete their rows when it fires.
"""
import logging

from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Sent with creator_id once a deletion request has been approved by everyone.
creator_data_purge_requested = Signal()


def request_creator_data_purge(creator_id):
    """Default CREATOR_DATA_PURGE_HANDLER: broadcast the purge to receivers."""
    responses = creator_data_purge_requested.send(sender=None, creator_id=creator_id)
    logger.info(f"Purge for creator {creator_id} sent to {len(responses)} receivers")
    return responses
