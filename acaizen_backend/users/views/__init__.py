from .accounts import UserViewSet
from .auth import LoginView
from .me import MeView

__all__ = [
    "LoginView",
    "MeView",
    "UserViewSet",
]
