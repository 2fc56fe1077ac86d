"""Repositório do log de eventos (append-only, truncado aos N mais recentes)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitegate.models.Security_event import SecurityEvent
from sitegate.repository.Base_repository import BaseRepo
from sitegate.utils.logs import logger


class SecurityEventRepo(BaseRepo):
    def __init__(self, session: Optional[Session] = None):
        super().__init__(SecurityEvent, session=session)

    def append(
        self,
        event: str,
        payload: Dict[str, Any],
        severity: str,
        *,
        max_entries: int,
        timestamp: Optional[datetime] = None,
    ) -> SecurityEvent:
        """Insere um evento e remove os excedentes na mesma transacção."""
        try:
            entry = SecurityEvent(event=event, payload=payload, severity=severity)
            if timestamp is not None:
                entry.timestamp = timestamp
            self.session.add(entry)
            self.session.flush()
            self._truncate(max_entries)
            self.session.commit()
            return entry
        except SQLAlchemyError:
            self._rollback("registar")
            raise

    def _truncate(self, max_entries: int) -> int:
        cutoff = (
            self.session.query(SecurityEvent.id)
            .order_by(SecurityEvent.id.desc())
            .offset(max_entries)
            .limit(1)
            .scalar()
        )
        if cutoff is None:
            return 0
        return (
            self.session.query(SecurityEvent)
            .filter(SecurityEvent.id <= cutoff)
            .delete(synchronize_session=False)
        )

    def recent(self, limit: int) -> List[SecurityEvent]:
        try:
            return (
                self.session.query(SecurityEvent)
                .order_by(SecurityEvent.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Erro ao listar eventos recentes")
            return []

    def all_in_order(self) -> List[SecurityEvent]:
        try:
            return self.session.query(SecurityEvent).order_by(SecurityEvent.id).all()
        except SQLAlchemyError:
            logger.exception("Erro ao exportar eventos")
            return []

    def count_since(self, since: datetime) -> int:
        try:
            return (
                self.session.query(func.count(SecurityEvent.id))
                .filter(SecurityEvent.timestamp > since)
                .scalar()
                or 0
            )
        except SQLAlchemyError:
            logger.exception("Erro ao contar eventos desde %s", since)
            return 0

    def count_by_event(self, event: str) -> int:
        return self.count(event=event)

    def count_by_severity(self, severity: str) -> int:
        return self.count(severity=severity)
