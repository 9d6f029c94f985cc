from .service import UserAdminService, UserListIn, UserListOut

__all__ = ["UserAdminService", "UserListIn", "UserListOut"]
