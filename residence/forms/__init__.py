from .auth import RegisterForm

__all__ = ["RegisterForm"]
