from taskreward.users.service import UserInfo, UserService

__all__ = ["UserInfo", "UserService"]
