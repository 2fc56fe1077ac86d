from sitegate.utils.role.roles import ADMIN_ROLE, AdminIdentity, admin_required

__all__ = ["ADMIN_ROLE", "AdminIdentity", "admin_required"]
