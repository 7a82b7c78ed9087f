from rest_framework import permissions

from .models import Role
from .policy import get_role


class HasPortalRole(permissions.BasePermission):
    """
    Allow requests whose user carries one of ``allowed_roles``.

    Users without a portal account have no role and are always denied.
    """
    allowed_roles = ()
    message = 'Your role is not permitted to perform this operation.'

    def has_permission(self, request, view):
        return get_role(request.user) in self.allowed_roles


class IsJobSeeker(HasPortalRole):
    allowed_roles = (Role.JOBSEEKER,)


class IsEmployer(HasPortalRole):
    allowed_roles = (Role.EMPLOYER,)


class IsEmployerOrAdmin(HasPortalRole):
    allowed_roles = (Role.EMPLOYER, Role.ADMIN)


class IsPortalUser(HasPortalRole):
    allowed_roles = (Role.EMPLOYER, Role.JOBSEEKER, Role.ADMIN)


class IsEmployerOrJobSeeker(HasPortalRole):
    allowed_roles = (Role.EMPLOYER, Role.JOBSEEKER)
