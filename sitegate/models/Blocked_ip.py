from sitegate.app.extensions import db
from sitegate.utils.timeutils import isoformat, utc_now


class BlockedIP(db.Model):
    """Endereço bloqueado permanentemente pelo firewall."""
    __tablename__ = 'blocked_ip'

    ip_address = db.Column(db.String(45), primary_key=True)
    reason = db.Column(db.String(80))
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    def to_dict(self):
        return {
            "ip": self.ip_address,
            "reason": self.reason,
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<BlockedIP {self.ip_address}>'
