"""Document deletion and ledger retention.

The Celery task module is imported by workers.celery_app, not here, so the
service can be used without Celery configured.
"""

from .service import DELETION_BATCH_SIZE, DeletionService

__all__ = ["DELETION_BATCH_SIZE", "DeletionService"]
