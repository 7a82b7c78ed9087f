"""
Authorization policy: who may read, transition, acknowledge and download.
"""
from types import SimpleNamespace

import pytest
from hypothesis import given, strategies as st

from portal.exceptions import NotAuthorized, NotFound
from portal.models import Role
from portal.policy import Operation, get_role, may_perform, may_view_job_applications, require

EMPLOYER_ID = 1
APPLICANT_ID = 2


def actor(pk, role):
    return SimpleNamespace(pk=pk, is_authenticated=True, account=SimpleNamespace(role=role))


def application(employer_id=EMPLOYER_ID, applicant_id=APPLICANT_ID):
    return SimpleNamespace(pk=99, applicant_id=applicant_id, job=SimpleNamespace(employer_id=employer_id))


operations = st.sampled_from(list(Operation))
roles = st.sampled_from(list(Role))
ids = st.integers(min_value=1, max_value=50)


class TestMayPerform:
    def test_employer_of_job_may_do_everything(self):
        for op in Operation:
            assert may_perform(actor(EMPLOYER_ID, Role.EMPLOYER), application(), op)

    def test_applicant_may_read_and_download_only(self):
        seeker = actor(APPLICANT_ID, Role.JOBSEEKER)
        assert may_perform(seeker, application(), Operation.READ)
        assert may_perform(seeker, application(), Operation.DOWNLOAD_RESUME)
        assert not may_perform(seeker, application(), Operation.TRANSITION)
        assert not may_perform(seeker, application(), Operation.ACKNOWLEDGE)

    def test_admin_may_read_and_download_only(self):
        admin = actor(500, Role.ADMIN)
        assert may_perform(admin, application(), Operation.READ)
        assert may_perform(admin, application(), Operation.DOWNLOAD_RESUME)
        assert not may_perform(admin, application(), Operation.TRANSITION)
        assert not may_perform(admin, application(), Operation.ACKNOWLEDGE)

    def test_other_employer_is_denied(self):
        for op in Operation:
            assert not may_perform(actor(3, Role.EMPLOYER), application(), op)

    def test_other_seeker_is_denied(self):
        for op in Operation:
            assert not may_perform(actor(4, Role.JOBSEEKER), application(), op)

    def test_user_without_account_is_denied(self):
        # The employer id matches, but a user with no role gets nothing
        user = SimpleNamespace(pk=EMPLOYER_ID, is_authenticated=True, account=None)
        assert get_role(user) is None
        assert not may_perform(user, application(), Operation.READ)

    def test_anonymous_is_denied(self):
        anon = SimpleNamespace(pk=None, is_authenticated=False)
        assert not may_perform(anon, application(), Operation.READ)

    @given(ids, ids, ids)
    def test_applicant_never_transitions(self, applicant_id, employer_id, _):
        app = application(employer_id=employer_id, applicant_id=applicant_id)
        assert not may_perform(actor(applicant_id, Role.JOBSEEKER), app, Operation.TRANSITION)

    @given(ids, ids, ids)
    def test_admin_never_transitions(self, admin_id, employer_id, applicant_id):
        app = application(employer_id=employer_id, applicant_id=applicant_id)
        assert not may_perform(actor(admin_id, Role.ADMIN), app, Operation.TRANSITION)

    @given(ids, roles, operations)
    def test_strangers_are_always_denied(self, actor_id, role, op):
        app = application(employer_id=1000, applicant_id=2000)
        if role != Role.ADMIN:
            assert not may_perform(actor(actor_id, role), app, op)


class TestRequire:
    def test_require_raises_not_authorized(self):
        with pytest.raises(NotAuthorized):
            require(actor(4, Role.JOBSEEKER), application(), Operation.READ)

    def test_not_authorized_is_indistinguishable_from_not_found(self):
        denied = NotAuthorized(reason='read denied')
        missing = NotFound()
        assert isinstance(denied, NotFound)
        assert denied.status_code == missing.status_code == 404
        assert denied.default_code == missing.default_code
        assert str(denied.detail) == str(missing.detail)

    def test_require_passes_for_allowed_operation(self):
        require(actor(EMPLOYER_ID, Role.EMPLOYER), application(), Operation.TRANSITION)


class TestJobApplicationsVisibility:
    def test_only_owning_employer_sees_job_applications(self):
        job = SimpleNamespace(employer_id=EMPLOYER_ID)
        assert may_view_job_applications(actor(EMPLOYER_ID, Role.EMPLOYER), job)
        assert not may_view_job_applications(actor(3, Role.EMPLOYER), job)
        assert not may_view_job_applications(actor(APPLICANT_ID, Role.JOBSEEKER), job)
