from sitegate.repository.Base_repository import BaseRepo
from sitegate.repository.Blocked_ip_repository import BlockedIPRepo
from sitegate.repository.Contacts_repository import ContactRepo
from sitegate.repository.Security_event_repository import SecurityEventRepo
from sitegate.repository.Services_repository import ServiceRepo
from sitegate.repository.Site_settings_repository import SiteSettingsRepo

__all__ = [
    "BaseRepo",
    "BlockedIPRepo",
    "ContactRepo",
    "SecurityEventRepo",
    "ServiceRepo",
    "SiteSettingsRepo",
]
