"""Repositório da lista de IPs bloqueados."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitegate.models.Blocked_ip import BlockedIP
from sitegate.repository.Base_repository import BaseRepo
from sitegate.utils.logs import logger


class BlockedIPRepo(BaseRepo):
    def __init__(self, session: Optional[Session] = None):
        super().__init__(BlockedIP, session=session)

    def all_addresses(self) -> List[str]:
        try:
            return [row[0] for row in self.session.query(BlockedIP.ip_address).all()]
        except SQLAlchemyError:
            logger.exception("Erro ao carregar IPs bloqueados")
            return []

    def block(self, ip: str, reason: Optional[str] = None) -> BlockedIP:
        """Idempotente: um IP já bloqueado mantém o motivo original."""
        existing = self.get(ip)
        if existing is not None:
            return existing
        return self.add(BlockedIP(ip_address=ip, reason=reason))

    def unblock(self, ip: str) -> bool:
        return self.delete_by_id(ip)
