"""
Celery tasks for the note lifecycle.
"""
from celery import shared_task
from django.conf import settings
from django.utils.module_loading import import_string
import logging

logger = logging.getLogger(__name__)

PURGE_MAX_RETRIES = 5


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=PURGE_MAX_RETRIES,
)
def purge_creator_data(self, creator_id):
    """
    Purge a creator's recorded content after unanimous deletion consent.

    Delegates to the callable named by CREATOR_DATA_PURGE_HANDLER. Failures
    are retried with exponential backoff; once retries run out the error is
    raised and a representative can queue the purge again.
    """
    handler = import_string(settings.CREATOR_DATA_PURGE_HANDLER)

    try:
        handler(creator_id)
    except Exception:
        logger.exception(
            f"Data purge failed for creator {creator_id} "
            f"(attempt {self.request.retries + 1} of {PURGE_MAX_RETRIES + 1})"
        )
        raise

    logger.info(f"Data purged for creator {creator_id}")
    return f"Data purged for creator {creator_id}"
