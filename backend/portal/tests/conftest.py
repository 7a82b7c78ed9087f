import pytest
from django.utils import timezone
from hypothesis import HealthCheck, settings as hypothesis_settings
from rest_framework.test import APIClient

from portal.notifications import InMemoryNotificationGateway
from portal.resumes import ResumeBlobGateway
from portal.service import ApplicationService
from portal.store import ApplicationStore

# The autouse storage fixture is function scoped; examples never depend on its state.
hypothesis_settings.register_profile(
    'portal',
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
hypothesis_settings.load_profile('portal')


@pytest.fixture(autouse=True)
def resume_storage(settings, tmp_path):
    """Keep resume blobs and media inside the test's temporary directory."""
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    settings.STORAGES = {
        **settings.STORAGES,
        'resumes': {
            'BACKEND': 'django.core.files.storage.FileSystemStorage',
            'OPTIONS': {'location': str(tmp_path / 'resumes')},
        },
    }
    return tmp_path / 'resumes'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def notifier():
    return InMemoryNotificationGateway()


@pytest.fixture
def service(notifier):
    return ApplicationService(
        store=ApplicationStore(),
        blobs=ResumeBlobGateway(),
        notifier=notifier,
        clock=timezone.now,
    )


@pytest.fixture
def stored_resume():
    """Write a small resume through the blob gateway and return its handle."""
    def _store(data=b'%PDF', name='resume.pdf'):
        return ResumeBlobGateway().store(data, name, 'application/pdf')
    return _store
