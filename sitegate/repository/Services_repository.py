from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitegate.models.Services import Service
from sitegate.repository.Base_repository import BaseRepo
from sitegate.utils.logs import logger


class ServiceRepo(BaseRepo):
    def __init__(self, session: Optional[Session] = None):
        super().__init__(Service, session=session)

    def ordered(self) -> List[Service]:
        try:
            return self.session.query(Service).order_by(Service.id).all()
        except SQLAlchemyError:
            logger.exception("Erro ao listar serviços")
            return []

    def update_fields(self, service_id: int, fields: Dict[str, Any]) -> Optional[Service]:
        service = self.get(service_id)
        if service is None:
            return None
        for key, value in fields.items():
            setattr(service, key, value)
        return self.save(service)
