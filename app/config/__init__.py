# Load the Celery app when Django starts so shared_task decorators
# (ledger.tasks) bind to it and beat can find the sweep task.

from config.celery import app as celery_app

__all__ = ("celery_app",)
