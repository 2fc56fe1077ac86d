"""Repositório especializado para as configurações do site (chave/valor JSON)."""

from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitegate.models.Site_settings import SiteSetting
from sitegate.repository.Base_repository import BaseRepo
from sitegate.utils.logs import logger


class SiteSettingsRepo(BaseRepo):
    def __init__(self, session: Optional[Session] = None):
        super().__init__(SiteSetting, session=session)

    def as_dict(self) -> Dict[str, Any]:
        try:
            return {row.key: row.value for row in self.session.query(SiteSetting).all()}
        except SQLAlchemyError:
            logger.exception("Erro ao carregar configurações do site")
            return {}

    def set_many(self, values: Mapping[str, Any], *, commit: bool = True) -> None:
        """Grava várias chaves numa única transacção."""
        try:
            for key, value in values.items():
                setting = self.session.get(SiteSetting, key)
                if setting:
                    setting.value = value
                else:
                    self.session.add(SiteSetting(key=key, value=value))
            self._commit(commit)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Erro ao gravar configurações %s", sorted(values))
            raise
