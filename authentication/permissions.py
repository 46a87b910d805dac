"""
Custom permissions for Saathi Backend.

Implements role-based access control:
- Admin: dispatch, reassignment, force close, fleet map
- Officer: own case lifecycle, own position updates
- Citizen: SOS creation, own case status

Case-level rules (assigned officer only, admin force close) are enforced by
the case state machine, not here.
"""

from rest_framework import permissions


class IsAuthenticated(permissions.IsAuthenticated):
    """
    Extended IsAuthenticated that also checks the account is active.
    """

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return request.user.is_active


class IsAdmin(permissions.BasePermission):
    """
    Permission for dispatch administrators only.
    """

    message = "This action requires admin access."

    def has_permission(self, request, view):
        if not request.user.is_authenticated or not request.user.is_active:
            return False
        return request.user.is_admin


class IsOfficer(permissions.BasePermission):
    """
    Permission for field officers with an officer profile.
    """

    message = "This action is for field officers only."

    def has_permission(self, request, view):
        if not request.user.is_authenticated or not request.user.is_active:
            return False
        return request.user.is_officer and hasattr(request.user, 'officer_profile')


class IsOfficerOrAdmin(permissions.BasePermission):
    """
    Permission for officers and admins (dispatcher views).
    """

    message = "This action requires officer or admin access."

    def has_permission(self, request, view):
        if not request.user.is_authenticated or not request.user.is_active:
            return False
        return request.user.is_officer or request.user.is_admin
