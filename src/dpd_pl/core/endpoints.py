"""Tabla de endpoints por entorno.

Lookup puro: no hay red aquí. El handshake vive en `core.session`.
"""

from __future__ import annotations

from enum import Enum

from dpd_pl.core.errors import ConfigurationError


class Environment(str, Enum):
    PRODUCTION = "production"
    DEMO = "demo"


class ServiceKind(str, Enum):
    """Familia de servicios DPD (un handle por familia)."""

    PACKAGE_SERVICES = "package_services"
    XML_SERVICES = "xml_services"
    PUDO = "pudo"


ENDPOINTS: dict[Environment, dict[ServiceKind, str]] = {
    Environment.PRODUCTION: {
        ServiceKind.PACKAGE_SERVICES: (
            "https://dpdservices.dpd.com.pl/DPDPackageObjServicesService/DPDPackageObjServices?WSDL"
        ),
        ServiceKind.XML_SERVICES: (
            "https://dpdservices.dpd.com.pl/DPDPackageXmlServicesService/DPDPackageXmlServices?WSDL"
        ),
        ServiceKind.PUDO: "https://mypudo.dpd.com.pl/api/v2",
    },
    Environment.DEMO: {
        ServiceKind.PACKAGE_SERVICES: (
            "https://dpdservicesdemo.dpd.com.pl/DPDPackageObjServicesService/DPDPackageObjServices?WSDL"
        ),
        ServiceKind.XML_SERVICES: (
            "https://dpdservicesdemo.dpd.com.pl/DPDPackageXmlServicesService/DPDPackageXmlServices?WSDL"
        ),
        ServiceKind.PUDO: "https://mypudo-demo.dpd.com.pl/api/v2",
    },
}


def resolve_endpoint(environment: Environment | str, service_kind: ServiceKind | str) -> str:
    """Devuelve la URL del servicio; `ConfigurationError` si la combinación no existe."""

    try:
        env = Environment(environment)
        kind = ServiceKind(service_kind)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown environment/service: {environment!r}/{service_kind!r}",
            cause=exc,
        ) from exc

    url = ENDPOINTS.get(env, {}).get(kind)
    if not url:
        raise ConfigurationError(f"No endpoint configured for {env.value}/{kind.value}")
    return url
