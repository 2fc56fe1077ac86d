"""Modelos relacionados à configuração persistente do site."""

from sitegate.app.extensions import db
from sitegate.utils.timeutils import utc_now


class SiteSetting(db.Model):
    __tablename__ = "site_setting"

    key = db.Column(db.String(80), primary_key=True)
    value = db.Column(db.JSON)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:  # pragma: no cover - helper
        return f"<SiteSetting {self.key}={self.value!r}>"
