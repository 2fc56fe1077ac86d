import enum

from sitegate.app.extensions import db
from sitegate.utils.timeutils import isoformat, utc_now


class ContactStatus(enum.Enum):
    NEW = 'new'
    READ = 'read'
    REPLIED = 'replied'
    ARCHIVED = 'archived'


class Contact(db.Model):
    """Mensagem recebida pelo formulário de contacto."""
    __tablename__ = 'contact'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    service = db.Column(db.String(120))
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.Enum(ContactStatus), nullable=False, default=ContactStatus.NEW)
    timestamp = db.Column(db.DateTime, nullable=False, default=utc_now, index=True)

    # Contexto do pedido, cifrado em repouso (Fernet)
    ip_encrypted = db.Column(db.Text)
    user_agent_encrypted = db.Column(db.Text)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "service": self.service,
            "message": self.message,
            "status": self.status.value if self.status else None,
            "timestamp": isoformat(self.timestamp),
        }

    def __repr__(self):
        return f'<Contact {self.id} {self.email} [{self.status}]>'
