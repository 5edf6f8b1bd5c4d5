from rest_framework.permissions import BasePermission


class IsStudent(BasePermission):
    message = "Only student accounts can access this resource."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_student)


class IsWarden(BasePermission):
    message = "Access denied. Warden role required."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_warden)


class IsSuperAdmin(BasePermission):
    message = "SuperAdmin access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_superadmin)
