import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from sitegate.utils.logs import logger


class DataEncryption:
    def __init__(self, key: Optional[str] = None):
        if not key:
            logger.warning("ENCRYPTION_KEY não definida; a usar chave efémera (dados cifrados não sobrevivem a reinícios)")
            key = Fernet.generate_key()
        self.cipher = Fernet(key)

    def encrypt(self, data: Optional[str]) -> Optional[str]:
        """Cifra dados sensíveis (IP, user agent dos contactos)"""
        if data is None:
            return None
        return self.cipher.encrypt(data.encode()).decode()

    def decrypt(self, encrypted_data: Optional[str]) -> Optional[str]:
        if encrypted_data is None:
            return None
        try:
            return self.cipher.decrypt(encrypted_data.encode()).decode()
        except InvalidToken:
            logger.warning("Falha ao decifrar valor (chave diferente?)")
            return None

    @staticmethod
    def generate_hash(data: str) -> str:
        return hashlib.sha256(data.encode()).hexdigest()
