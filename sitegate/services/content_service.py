"""Content store: site settings, the services catalogue and contact submissions."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional

from sitegate.models.Contacts import Contact, ContactStatus
from sitegate.models.Services import Service
from sitegate.repository.Contacts_repository import ContactRepo
from sitegate.repository.Services_repository import ServiceRepo
from sitegate.repository.Site_settings_repository import SiteSettingsRepo
from sitegate.utils.logs import logger
from sitegate.utils.security.encryption import DataEncryption
from sitegate.utils.timeutils import isoformat, utc_now

DEFAULT_SITE_DATA: Dict[str, Any] = {
    "title": "Pro Tech Solutions",
    "navLogo": "Pro Tech Solutions",
    "heroTitle": "Premium Tech Services",
    "heroDescription": "Professional modifications, customizations and security solutions",
    "servicesTitle": "Our Services",
    "contactTitle": "Get In Touch",
    "footerTitle": "Pro Tech Solutions",
    "footerDescription": "Professional tech services you can trust",
    "footerCopyright": "© 2024 Pro Tech Solutions. All rights reserved.",
    "theme": "dark",
    "audio": {"url": "", "autoplay": False},
}

SITE_FIELDS = tuple(DEFAULT_SITE_DATA)

DEFAULT_SERVICES: List[Dict[str, Any]] = [
    {
        "name": "Mobile App Mods",
        "icon": "📱",
        "description": "Custom modifications for popular mobile applications",
        "features": ["Premium features unlocked", "Ad-free experience", "Custom themes"],
        "price": "Contact for pricing",
        "type": "contact",
    },
    {
        "name": "Game Modifications",
        "icon": "🎮",
        "description": "Enhanced gaming experiences with custom mods",
        "features": ["Unlimited resources", "Custom skins", "Enhanced gameplay"],
        "price": "Contact for pricing",
        "type": "contact",
    },
    {
        "name": "Software Customization",
        "icon": "💻",
        "description": "Tailored software solutions for your needs",
        "features": ["Custom features", "Performance optimization", "UI improvements"],
        "price": "Contact for pricing",
        "type": "contact",
    },
    {
        "name": "Security Audits",
        "icon": "🔒",
        "description": "Comprehensive security analysis of your applications",
        "features": ["Vulnerability scanning", "Penetration testing", "Security reports"],
        "price": "Contact for pricing",
        "type": "contact",
    },
]

SERVICE_FIELDS = ("name", "icon", "description", "features", "price", "type")


class ContentService:
    def __init__(
        self,
        encryption: DataEncryption,
        *,
        settings_repo: Optional[SiteSettingsRepo] = None,
        service_repo: Optional[ServiceRepo] = None,
        contact_repo: Optional[ContactRepo] = None,
    ):
        self.encryption = encryption
        self.settings_repo = settings_repo or SiteSettingsRepo()
        self.service_repo = service_repo or ServiceRepo()
        self.contact_repo = contact_repo or ContactRepo()

    def ensure_seeded(self) -> bool:
        """Populate defaults on an empty database. Returns ``True`` when seeding happened."""
        if self.settings_repo.count() or self.service_repo.count():
            return False
        self.settings_repo.set_many(copy.deepcopy(DEFAULT_SITE_DATA), commit=False)
        for entry in DEFAULT_SERVICES:
            self.service_repo.add(Service(**copy.deepcopy(entry)), commit=False)
        self.service_repo.session.commit()
        logger.info("Conteúdo inicial do site criado (%d serviços)", len(DEFAULT_SERVICES))
        return True

    # ------------------------------------------------------------------
    # Site data
    # ------------------------------------------------------------------
    def site_settings(self) -> Dict[str, Any]:
        data = copy.deepcopy(DEFAULT_SITE_DATA)
        stored = self.settings_repo.as_dict()
        data.update({key: value for key, value in stored.items() if key in SITE_FIELDS})
        return data

    def get_site_data(self) -> Dict[str, Any]:
        data = self.site_settings()
        data["services"] = self.list_services()
        return data

    def update_site_settings(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Partial update; keys outside the known site fields are dropped."""
        accepted = {key: value for key, value in fields.items() if key in SITE_FIELDS}
        if isinstance(accepted.get("audio"), Mapping):
            accepted["audio"] = {**self.site_settings()["audio"], **accepted["audio"]}
        if accepted:
            self.settings_repo.set_many(accepted)
            logger.info("Configurações do site actualizadas: %s", sorted(accepted))
        return self.get_site_data()

    def update_audio(self, url: str, autoplay: bool) -> Dict[str, Any]:
        audio = {"url": url, "autoplay": bool(autoplay)}
        self.settings_repo.set_many({"audio": audio})
        return audio

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------
    def list_services(self) -> List[Dict[str, Any]]:
        return [service.to_dict() for service in self.service_repo.ordered()]

    def get_service(self, service_id: int) -> Optional[Dict[str, Any]]:
        service = self.service_repo.get(service_id)
        return service.to_dict() if service else None

    def add_service(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        values = {key: fields[key] for key in SERVICE_FIELDS if fields.get(key) is not None}
        service = self.service_repo.add(Service(**values))
        logger.info("Serviço %s criado (id=%s)", service.name, service.id)
        return service.to_dict()

    def update_service(self, service_id: int, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        values = {key: value for key, value in fields.items() if key in SERVICE_FIELDS}
        service = self.service_repo.update_fields(service_id, values)
        return service.to_dict() if service else None

    def delete_service(self, service_id: int) -> bool:
        deleted = self.service_repo.delete_by_id(service_id)
        if deleted:
            logger.info("Serviço %s removido", service_id)
        return deleted

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------
    def save_contact(
        self,
        fields: Mapping[str, Any],
        *,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Contact:
        contact = Contact(
            name=fields["name"],
            email=fields["email"],
            service=fields.get("service") or None,
            message=fields["message"],
            status=ContactStatus.NEW,
            timestamp=utc_now(),
            ip_encrypted=self.encryption.encrypt(ip),
            user_agent_encrypted=self.encryption.encrypt(user_agent),
        )
        return self.contact_repo.add(contact)

    def list_contacts(self) -> List[Dict[str, Any]]:
        return [contact.to_dict() for contact in self.contact_repo.newest_first()]

    def contact_origin(self, contact_id: int) -> Optional[Dict[str, Optional[str]]]:
        """Decrypted request context stored with a contact."""
        contact = self.contact_repo.get(contact_id)
        if contact is None:
            return None
        return {
            "ip": self.encryption.decrypt(contact.ip_encrypted),
            "userAgent": self.encryption.decrypt(contact.user_agent_encrypted),
        }

    def update_contact_status(self, contact_id: int, status: ContactStatus) -> Optional[Dict[str, Any]]:
        contact = self.contact_repo.set_status(contact_id, status)
        return contact.to_dict() if contact else None

    # ------------------------------------------------------------------
    # Backup / restore
    # ------------------------------------------------------------------
    def backup(self) -> Dict[str, Any]:
        """Restorable snapshot of the content.

        Security events are exported separately: their payloads carry raw
        request headers and would trip the firewall when posted back.
        """
        return {
            "siteData": self.get_site_data(),
            "contacts": self.list_contacts(),
            "timestamp": isoformat(utc_now()),
        }

    def restore(self, site_data: Mapping[str, Any]) -> Dict[str, Any]:
        """Overwrite site settings and, when present, the services catalogue."""
        fields = {key: value for key, value in site_data.items() if key in SITE_FIELDS}
        services = site_data.get("services")

        session = self.settings_repo.session
        try:
            if fields:
                self.settings_repo.set_many(fields, commit=False)
            if isinstance(services, list):
                for existing in self.service_repo.ordered():
                    session.delete(existing)
                for entry in services:
                    values = {key: entry.get(key) for key in SERVICE_FIELDS if entry.get(key) is not None}
                    session.add(Service(**values))
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("Erro ao restaurar backup do site")
            raise

        logger.info(
            "Backup restaurado: %d campos, %s serviços",
            len(fields),
            len(services) if isinstance(services, list) else "sem",
        )
        return self.get_site_data()


__all__ = ["ContentService", "DEFAULT_SERVICES", "DEFAULT_SITE_DATA", "SITE_FIELDS"]
