# core/permissions.py

from rest_framework.permissions import BasePermission, SAFE_METHODS
from .constants import UserRoles


class IsAdmin(BasePermission):
    def has_permission(self, request, view):
        return request.user.role == UserRoles.ADMIN


class IsStaff(BasePermission):
    """Front-line operators; admins are always allowed."""
    def has_permission(self, request, view):
        return request.user.role in [UserRoles.STAFF, UserRoles.ADMIN]


class IsQueueViewer(BasePermission):
    def has_permission(self, request, view):
        return request.user.role in [
            UserRoles.STAFF,
            UserRoles.ADMIN,
            UserRoles.VISUALIZER,
        ]


class IsAdminOrReadOnly(BasePermission):
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return request.user.role == UserRoles.ADMIN


def has_branch_access(user, branch_id):
    """Admins see every branch; staff and visualizers only their own."""
    if user.role == UserRoles.ADMIN:
        return True
    return user.branch_id is not None and user.branch_id == branch_id


def can_manage_appointment(user, appointment):
    """Owner, admin, or staff of the appointment's branch."""
    if user.role == UserRoles.ADMIN:
        return True
    if appointment.user_id is not None and appointment.user_id == user.id:
        return True
    return user.role == UserRoles.STAFF and has_branch_access(user, appointment.branch_id)
