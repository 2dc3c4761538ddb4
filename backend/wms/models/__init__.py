from wms.models.session import AuthSession
from wms.models.user import Role, User

__all__ = ["AuthSession", "Role", "User"]
