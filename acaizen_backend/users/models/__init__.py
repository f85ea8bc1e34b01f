from .user import DEFAULT_ADMIN_ID, User, UserManager, generate_user_id

__all__ = [
    "User",
    "UserManager",
    "DEFAULT_ADMIN_ID",
    "generate_user_id",
]
