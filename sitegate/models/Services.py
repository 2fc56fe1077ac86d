from sitegate.app.extensions import db
from sitegate.utils.timeutils import isoformat, utc_now


class Service(db.Model):
    """Serviço listado na página pública."""
    __tablename__ = 'service'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    icon = db.Column(db.String(32))
    description = db.Column(db.Text)
    features = db.Column(db.JSON, nullable=False, default=list)
    price = db.Column(db.String(80))
    type = db.Column(db.String(32), nullable=False, default='contact')
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "description": self.description,
            "features": list(self.features or []),
            "price": self.price,
            "type": self.type,
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Service {self.id} {self.name}>'
