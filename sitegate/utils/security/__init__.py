from sitegate.utils.security.encryption import DataEncryption
from sitegate.utils.security.security import PasswordSecurity

__all__ = ["DataEncryption", "PasswordSecurity"]
