"""Admin authentication: one configured identity, JWT bearer tokens."""

from __future__ import annotations

import hmac
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from sitegate.app.settings import AdminSettings, SecretsSettings
from sitegate.services.event_log import EventLog
from sitegate.utils.logs import logger
from sitegate.utils.role.roles import ADMIN_ROLE, AdminIdentity
from sitegate.utils.security.security import PasswordSecurity

JWT_ALGORITHM = "HS256"
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthResult:
    success: bool
    message: str
    token: Optional[str] = None


class AuthManager:
    def __init__(self, admin: AdminSettings, secrets: SecretsSettings, event_log: EventLog):
        self.username = admin.username
        self.password_hash = admin.password_hash
        if not self.password_hash and admin.password:
            self.password_hash = PasswordSecurity.hash_password(admin.password)
        if not self.password_hash:
            logger.warning("Nenhuma password de administrador configurada; o login admin ficará indisponível")
        self.secrets = secrets
        self.event_log = event_log

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------
    def generate_token(self, username: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "username": username,
            "role": ADMIN_ROLE,
            "loginTime": int(time.time() * 1000),
            "iat": now,
            "exp": now + timedelta(hours=self.secrets.token_ttl_hours),
            "iss": self.secrets.jwt_issuer,
            "aud": self.secrets.jwt_audience,
        }
        return jwt.encode(payload, self.secrets.jwt_secret, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Claims of a valid token, or ``None`` when signature/expiry/issuer/audience fail."""
        try:
            return jwt.decode(
                token,
                self.secrets.jwt_secret,
                algorithms=[JWT_ALGORITHM],
                audience=self.secrets.jwt_audience,
                issuer=self.secrets.jwt_issuer,
            )
        except jwt.PyJWTError as exc:
            logger.debug("Token rejeitado: %s", exc)
            return None

    def identity_from_token(self, token: str, *, ip: Optional[str] = None) -> Optional[AdminIdentity]:
        claims = self.verify_token(token)
        if not claims or claims.get("role") != ADMIN_ROLE:
            self.event_log.log("invalid_token", {"token": token[:20] + "...", "ip": ip})
            return None
        return AdminIdentity(claims)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------
    def authenticate(
        self,
        username: str,
        password: str,
        *,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthResult:
        context = {"username": username, "ip": ip, "userAgent": user_agent}

        if not hmac.compare_digest((username or "").encode(), self.username.encode()):
            self.event_log.log("auth_failed", {"reason": "invalid_username", **context})
            return AuthResult(success=False, message=INVALID_CREDENTIALS)

        if not PasswordSecurity.verify_password(password, self.password_hash):
            self.event_log.log("auth_failed", {"reason": "invalid_password", **context})
            return AuthResult(success=False, message=INVALID_CREDENTIALS)

        token = self.generate_token(username)
        self.event_log.log("auth_success", context)
        logger.process("Login de administrador %s a partir de %s", username, ip)
        return AuthResult(success=True, message="Authentication successful", token=token)


__all__ = ["AuthManager", "AuthResult", "INVALID_CREDENTIALS", "JWT_ALGORITHM"]
