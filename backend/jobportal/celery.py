import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'jobportal.settings')
app = Celery('jobportal')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'deactivate-expired-jobs': {
        'task': 'portal.tasks.deactivate_expired_jobs',
        'schedule': crontab(minute=0),  # hourly
    },
}
