"""Resolução de país por IP (MaxMind GeoIP2/GeoLite2)."""

from __future__ import annotations

import ipaddress
from pathlib import Path
from typing import Optional, Protocol

import geoip2.database
import geoip2.errors

from sitegate.utils.logs import logger


class GeoResolver(Protocol):
    def country_for(self, ip: str) -> Optional[str]:
        ...


class NullGeoResolver:
    """Sem base de dados: origem sempre desconhecida."""

    def country_for(self, ip: str) -> Optional[str]:
        return None


class GeoIPResolver:
    def __init__(self, database_path: Path):
        self.database_path = Path(database_path)
        self._reader = geoip2.database.Reader(str(self.database_path))

    def country_for(self, ip: str) -> Optional[str]:
        try:
            address = ipaddress.ip_address(ip)
        except ValueError:
            return None
        if address.is_private or address.is_loopback:
            return None
        try:
            return self._reader.country(ip).country.iso_code
        except geoip2.errors.AddressNotFoundError:
            return None

    def close(self) -> None:
        self._reader.close()


def build_geo_resolver(database_path: Optional[Path]) -> GeoResolver:
    if not database_path:
        return NullGeoResolver()
    try:
        resolver = GeoIPResolver(database_path)
    except (OSError, ValueError):
        logger.exception("Não foi possível abrir a base GeoIP %s; bloqueio por país desativado", database_path)
        return NullGeoResolver()
    logger.info("Base GeoIP carregada de %s", database_path)
    return resolver
