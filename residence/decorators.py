from functools import wraps

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect


def role_required(check, message):
    """Build a page decorator that admits users for whom ``check(user)`` holds."""

    def decorator(view_func):
        @wraps(view_func)
        @login_required(login_url='login')
        def _wrapped_view(request, *args, **kwargs):
            if not check(request.user):
                messages.error(request, message)
                return redirect('dashboard')
            return view_func(request, *args, **kwargs)

        return _wrapped_view

    return decorator


student_required = role_required(
    lambda user: user.is_student,
    "Only student accounts can access that page.",
)
warden_required = role_required(
    lambda user: user.is_warden,
    "You do not have permission to access that page.",
)
superadmin_required = role_required(
    lambda user: user.is_superadmin,
    "Only super administrators can access that page.",
)
