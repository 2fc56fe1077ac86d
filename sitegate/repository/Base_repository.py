"""Infraestrutura simples de repositórios baseada em SQLAlchemy."""

from __future__ import annotations

from typing import Any, List, Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitegate.app.extensions import db
from sitegate.utils.logs import logger


class BaseRepo:
    """CRUD básico; leituras devolvem vazio em erro, escritas fazem rollback e propagam."""

    def __init__(self, model: Type[Any], session: Optional[Session] = None) -> None:
        self.model = model
        self._session = session

    @property
    def session(self) -> Session:
        # resolvido por pedido para acompanhar o scoped session do Flask-SQLAlchemy
        return self._session or db.session

    # ------------------------------------------------------------------
    # Utilitários internos
    # ------------------------------------------------------------------
    def _commit(self, commit: bool) -> None:
        if commit:
            self.session.commit()
        else:
            self.session.flush()

    def _rollback(self, action: str) -> None:
        self.session.rollback()
        logger.exception("Erro ao %s %s", action, self.model.__name__)

    # ------------------------------------------------------------------
    # Operações de leitura
    # ------------------------------------------------------------------
    def get(self, id: Any) -> Optional[Any]:
        try:
            return self.session.get(self.model, id)
        except SQLAlchemyError:
            logger.exception("Erro ao buscar %s id=%s", self.model.__name__, id)
            return None

    def list_all(self) -> List[Any]:
        try:
            return self.session.query(self.model).all()
        except SQLAlchemyError:
            logger.exception("Erro ao listar %s", self.model.__name__)
            return []

    def count(self, **filters: Any) -> int:
        try:
            return self.session.query(self.model).filter_by(**filters).count()
        except SQLAlchemyError:
            logger.exception("Erro ao contar %s filtros=%s", self.model.__name__, filters)
            return 0

    # ------------------------------------------------------------------
    # Operações de escrita
    # ------------------------------------------------------------------
    def add(self, obj: Any, commit: bool = True) -> Any:
        try:
            self.session.add(obj)
            self._commit(commit)
            return obj
        except SQLAlchemyError:
            self._rollback("adicionar")
            raise

    def save(self, obj: Any, commit: bool = True) -> Any:
        """Persiste alterações num objecto já ligado à sessão."""
        try:
            self._commit(commit)
            return obj
        except SQLAlchemyError:
            self._rollback("actualizar")
            raise

    def delete(self, obj: Any, commit: bool = True) -> bool:
        try:
            self.session.delete(obj)
            self._commit(commit)
            return True
        except SQLAlchemyError:
            self._rollback("apagar")
            raise

    def delete_by_id(self, id: Any, commit: bool = True) -> bool:
        obj = self.get(id)
        if not obj:
            return False
        return self.delete(obj, commit=commit)
