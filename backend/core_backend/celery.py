import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

app = Celery("core_backend")

# Read CELERY_* keys from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "clear-unpaid-orders": {
        "task": "orders.tasks.clear_unpaid_orders",
        "schedule": crontab(minute=0),  # Every hour, on the hour
    },
}
