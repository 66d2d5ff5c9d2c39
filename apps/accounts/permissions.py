"""
Role-based permission classes.

Roles gate the REST adapters; admin-only manager operations additionally
re-check the role against the database.
"""

from rest_framework.permissions import BasePermission

from .models import UserRole


class HasRole(BasePermission):
    """Base class: user must be authenticated and hold one of allowed_roles."""

    allowed_roles = ()
    message = 'Your role does not permit this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and getattr(user, 'role', None) in self.allowed_roles
        )


class IsAdminRole(HasRole):
    """Permission: user must be an administrator."""

    allowed_roles = (UserRole.ADMIN,)
    message = 'Only administrators can perform this action.'


class IsEmployeeRole(HasRole):
    """Permission: user must be a pickup point employee."""

    allowed_roles = (UserRole.EMPLOYEE,)
    message = 'Only employees can perform this action.'


class IsStaffRole(HasRole):
    """Permission: administrators and employees (read access to PVZ data)."""

    allowed_roles = (UserRole.ADMIN, UserRole.EMPLOYEE)
