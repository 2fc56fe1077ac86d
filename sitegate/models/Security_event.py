from sitegate.app.extensions import db
from sitegate.utils.timeutils import isoformat, utc_now


class SecurityEvent(db.Model):
    """Entrada do log de eventos de segurança/analytics (append-only)."""
    __tablename__ = 'security_event'

    id = db.Column(db.Integer, primary_key=True)
    event = db.Column(db.String(64), nullable=False, index=True)
    payload = db.Column(db.JSON, nullable=False, default=dict)
    severity = db.Column(db.String(10), nullable=False, default='low', index=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utc_now, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "event": self.event,
            "data": self.payload or {},
            "severity": self.severity,
            "timestamp": isoformat(self.timestamp),
        }

    def __repr__(self):
        return f'<SecurityEvent {self.event} ({self.severity})>'
