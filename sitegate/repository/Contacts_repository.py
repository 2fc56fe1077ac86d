from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitegate.models.Contacts import Contact, ContactStatus
from sitegate.repository.Base_repository import BaseRepo
from sitegate.utils.logs import logger


class ContactRepo(BaseRepo):
    def __init__(self, session: Optional[Session] = None):
        super().__init__(Contact, session=session)

    def newest_first(self) -> List[Contact]:
        try:
            return (
                self.session.query(Contact)
                .order_by(Contact.timestamp.desc(), Contact.id.desc())
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Erro ao listar contactos")
            return []

    def set_status(self, contact_id: int, status: ContactStatus) -> Optional[Contact]:
        contact = self.get(contact_id)
        if contact is None:
            return None
        contact.status = status
        return self.save(contact)
