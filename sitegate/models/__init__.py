# sitegate/models/__init__.py
from sitegate.models.Blocked_ip import BlockedIP
from sitegate.models.Contacts import Contact, ContactStatus
from sitegate.models.Security_event import SecurityEvent
from sitegate.models.Services import Service
from sitegate.models.Site_settings import SiteSetting

__all__ = [
    "BlockedIP",
    "Contact",
    "ContactStatus",
    "SecurityEvent",
    "Service",
    "SiteSetting",
]
