"""Catálogo de procedimientos remotos.

Por qué un catálogo explícito:
- Cada procedimiento declara estáticamente su par de contratos
  (request/response) y la familia de servicios que lo expone.
- Los servicios referencian `Procedure.X`, no strings sueltos; un nombre mal
  escrito falla al importar, no en runtime contra el WSDL.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from dpd_pl.core.domain import contracts, requests
from dpd_pl.core.endpoints import ServiceKind


class Procedure(str, Enum):
    GENERATE_PACKAGES_NUMBERS = "generatePackagesNumbersV9"
    GENERATE_INTERNATIONAL_PACKAGE_NUMBERS = "generateInternationalPackageNumbersV1"
    GENERATE_SPED_LABELS = "generateSpedLabelsV4"
    GENERATE_PROTOCOL = "generateProtocolV2"
    PACKAGES_PICKUP_CALL = "packagesPickupCallV4"
    GENERATE_DOMESTIC_RETURN_LABEL = "generateDomesticReturnLabelV1"
    GENERATE_RETURN_LABEL = "generateReturnLabelV1"
    GET_PARCEL_STATUS = "getParcelStatus"
    GET_POSTCODE_INFO = "getPostcodeInfo"
    FIND_PARCEL_SHOPS = "findParcelShops"
    GET_PARCEL_SHOP = "getParcelShop"


@dataclass(frozen=True)
class ProcedureSpec:
    procedure: Procedure
    kind: ServiceKind
    request: Any
    response: Any

    @property
    def name(self) -> str:
        return self.procedure.value


_PKG = ServiceKind.PACKAGE_SERVICES

CATALOG: dict[Procedure, ProcedureSpec] = {
    spec.procedure: spec
    for spec in (
        ProcedureSpec(
            Procedure.GENERATE_PACKAGES_NUMBERS,
            _PKG,
            requests.DomesticShipment,
            contracts.PackageGenerationWire,
        ),
        ProcedureSpec(
            Procedure.GENERATE_INTERNATIONAL_PACKAGE_NUMBERS,
            _PKG,
            requests.InternationalShipment,
            contracts.PackageGenerationWire,
        ),
        ProcedureSpec(Procedure.GENERATE_SPED_LABELS, _PKG, requests.LabelRequest, contracts.DocumentWire),
        ProcedureSpec(Procedure.GENERATE_PROTOCOL, _PKG, requests.WaybillsRequest, contracts.ProtocolWire),
        ProcedureSpec(Procedure.PACKAGES_PICKUP_CALL, _PKG, requests.PickupRequest, contracts.PickupCallWire),
        ProcedureSpec(
            Procedure.GENERATE_DOMESTIC_RETURN_LABEL,
            _PKG,
            requests.ReturnLabelRequest,
            contracts.DocumentWire,
        ),
        ProcedureSpec(
            Procedure.GENERATE_RETURN_LABEL,
            _PKG,
            requests.ReturnLabelRequest,
            contracts.DocumentWire,
        ),
        ProcedureSpec(
            Procedure.GET_PARCEL_STATUS,
            _PKG,
            requests.ParcelStatusQuery,
            contracts.ParcelStatusWire,
        ),
        ProcedureSpec(Procedure.GET_POSTCODE_INFO, _PKG, requests.PostcodeQuery, contracts.PostcodeInfoWire),
        ProcedureSpec(
            Procedure.FIND_PARCEL_SHOPS,
            ServiceKind.PUDO,
            requests.ParcelShopQuery,
            contracts.ParcelShopsWire,
        ),
        ProcedureSpec(
            Procedure.GET_PARCEL_SHOP,
            ServiceKind.PUDO,
            requests.ParcelShopLookup,
            contracts.ParcelShopWire | None,
        ),
    )
}


def spec_for(procedure: Procedure) -> ProcedureSpec:
    return CATALOG[procedure]


def procedures_for(kind: ServiceKind) -> frozenset[str]:
    """Nombres que un handle de `kind` debe exponer para este cliente."""

    return frozenset(s.name for s in CATALOG.values() if s.kind is kind)
