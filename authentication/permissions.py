from rest_framework import permissions


class IsPrivileged(permissions.BasePermission):
    """Faculty, admins and HODs: may create groups, assignments and polls and grade."""
    message = 'Only faculty, admin or HOD can perform this action'

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_privileged


class IsStudent(permissions.BasePermission):
    """Custom permission to only allow students to access."""
    message = 'Only students can perform this action'

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == 'student'


class IsApprover(permissions.BasePermission):
    """Admins and HODs confirm new accounts."""
    message = 'Only admin or HOD can manage account approvals'

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_approver
