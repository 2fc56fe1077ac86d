from werkzeug.security import check_password_hash, generate_password_hash


class PasswordSecurity:
    @staticmethod
    def hash_password(password):
        return generate_password_hash(password, method='pbkdf2:sha256', salt_length=16)

    @staticmethod
    def verify_password(password, password_hash):
        if not password_hash or password is None:
            return False
        return check_password_hash(password_hash, password)
