"""Pydantic models validating the JSON bodies accepted by the API."""
from __future__ import annotations

import ipaddress
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sitegate.models.Contacts import ContactStatus

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class LoginRequest(_Payload):
    username: str = ""
    password: str = ""


class ContactSubmission(_Payload):
    name: str = Field(default="", min_length=1, max_length=120)
    email: str = Field(default="", min_length=1, max_length=254)
    service: Optional[str] = Field(default=None, max_length=120)
    message: str = Field(default="", min_length=1, max_length=5000)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        if value and not EMAIL_RE.match(value):
            raise ValueError("Invalid email address")
        return value


class AudioSettings(_Payload):
    url: str = Field(default="", max_length=500)
    autoplay: bool = False


class SiteSettingsUpdate(_Payload):
    """Partial update of the site settings; unknown keys are ignored."""

    title: Optional[str] = Field(default=None, max_length=200)
    nav_logo: Optional[str] = Field(default=None, alias="navLogo", max_length=200)
    hero_title: Optional[str] = Field(default=None, alias="heroTitle", max_length=200)
    hero_description: Optional[str] = Field(default=None, alias="heroDescription", max_length=1000)
    services_title: Optional[str] = Field(default=None, alias="servicesTitle", max_length=200)
    contact_title: Optional[str] = Field(default=None, alias="contactTitle", max_length=200)
    footer_title: Optional[str] = Field(default=None, alias="footerTitle", max_length=200)
    footer_description: Optional[str] = Field(default=None, alias="footerDescription", max_length=1000)
    footer_copyright: Optional[str] = Field(default=None, alias="footerCopyright", max_length=200)
    theme: Optional[str] = Field(default=None, max_length=40)
    audio: Optional[AudioSettings] = None

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, keyed as stored."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class ServiceCreate(_Payload):
    name: str = Field(min_length=1, max_length=120)
    icon: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, max_length=2000)
    features: List[str] = Field(default_factory=list)
    price: Optional[str] = Field(default=None, max_length=80)
    type: str = Field(default="contact", max_length=32)


class ServiceUpdate(_Payload):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    icon: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, max_length=2000)
    features: Optional[List[str]] = None
    price: Optional[str] = Field(default=None, max_length=80)
    type: Optional[str] = Field(default=None, max_length=32)


class ContactStatusUpdate(_Payload):
    status: ContactStatus


class RestoreSiteData(SiteSettingsUpdate):
    services: Optional[List[ServiceCreate]] = None


class RestoreRequest(_Payload):
    site_data: Optional[RestoreSiteData] = Field(default=None, alias="siteData")


class BlockRequest(_Payload):
    ip: str
    reason: str = Field(default="manual_block", max_length=80)

    @field_validator("ip")
    @classmethod
    def _valid_ip(cls, value: str) -> str:
        return str(ipaddress.ip_address(value))


__all__ = [
    "AudioSettings",
    "BlockRequest",
    "ContactStatusUpdate",
    "ContactSubmission",
    "LoginRequest",
    "RestoreRequest",
    "ServiceCreate",
    "ServiceUpdate",
    "SiteSettingsUpdate",
]
