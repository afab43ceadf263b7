"""Envíos nacionales: números de paquete, etiquetas, protocolo y recogida."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from dpd_pl.core.catalog import Procedure
from dpd_pl.core.domain import contracts
from dpd_pl.core.domain.models import (
    ApiMessage,
    CourierPickupResponse,
    DomesticPackage,
    GeneratedPackage,
    LabelFormat,
    LabelResponse,
    PackageGenerationResponse,
    PackageStatus,
    PageFormat,
    ProtocolResponse,
)
from dpd_pl.core.services.base import BaseService

GENERATION_POLICY = "STOP_ON_FIRST_ERROR"
LANG_CODE = "PL"


def package_args(package: DomesticPackage, master_fid: str) -> dict[str, Any]:
    """Paquete validado -> estructura OpenUML (todos los bultos)."""

    wire = package.to_wire()
    wire.pop("thirdPartyFid", None)
    third_party = package.third_party_fid
    if third_party is None and package.payer_type == "THIRD_PARTY":
        third_party = master_fid
    if third_party:
        wire["thirdPartyFID"] = third_party
    return wire


def generation_result(wire: contracts.PackageGenerationWire) -> PackageGenerationResponse:
    packages = [
        GeneratedPackage(
            package_id=p.package_id,
            parcel_ids=[parcel.parcel_id for parcel in p.parcels],
            waybill=p.waybill,
            status=PackageStatus(status=p.status) if p.status else None,
            session_id=wire.session_id,
        )
        for p in wire.packages or []
    ]
    errors = [ApiMessage(code=e.code, message=e.message) for e in wire.errors or []]
    return PackageGenerationResponse(packages=packages, errors=errors)


class DomesticService(BaseService):
    async def generate_package_numbers(
        self,
        packages: Sequence[DomesticPackage | Mapping[str, Any]],
    ) -> PackageGenerationResponse:
        """Registra los paquetes en DPD y devuelve sus números de guía."""

        shipment = self._parse(Procedure.GENERATE_PACKAGES_NUMBERS, {"packages": list(packages)})
        master_fid = self._ctx.credentials.master_fid
        args = {
            "authDataV1": self._auth,
            "openUMLFeV11": {
                "packages": [package_args(p, master_fid) for p in shipment.packages],
            },
            "pkgNumsGenerationPolicyV1": GENERATION_POLICY,
            "langCode": LANG_CODE,
        }
        wire = await self._call(Procedure.GENERATE_PACKAGES_NUMBERS, args)
        return generation_result(wire)

    async def generate_labels(
        self,
        waybills: Iterable[str],
        *,
        format: LabelFormat = "PDF",
        page_format: PageFormat = "A4",
        variant: str = "BIC3",
    ) -> LabelResponse:
        request = self._parse(
            Procedure.GENERATE_SPED_LABELS,
            {
                "waybills": list(waybills),
                "format": format,
                "pageFormat": page_format,
                "variant": variant,
            },
        )
        args = {
            "authDataV1": self._auth,
            "dpdServicesParamsV1": {"waybills": list(request.waybills)},
            "outputDocFormatV1": request.format,
            "outputDocPageFormatV1": request.page_format,
            "outputLabelType": "LABEL",
            "labelVariant": request.variant,
        }
        wire = await self._call(Procedure.GENERATE_SPED_LABELS, args)
        return LabelResponse(
            label_data=wire.document_data,
            format=request.format,
            page_format=request.page_format,
        )

    async def generate_protocol(self, waybills: Iterable[str]) -> ProtocolResponse:
        """Protocolo de entrega al mensajero para las guías dadas."""

        request = self._parse(Procedure.GENERATE_PROTOCOL, {"waybills": list(waybills)})
        args = {
            "authDataV1": self._auth,
            "dpdServicesParamsV1": {"waybills": list(request.waybills)},
        }
        wire = await self._call(Procedure.GENERATE_PROTOCOL, args)
        return ProtocolResponse(protocol_data=wire.document_data, session_id=wire.session_id)

    async def pickup_call(
        self,
        pickup_date: str,
        time_from: str,
        time_to: str,
        waybills: Iterable[str] | None = None,
    ) -> CourierPickupResponse:
        request = self._parse(
            Procedure.PACKAGES_PICKUP_CALL,
            {
                "pickupDate": pickup_date,
                "pickupTimeFrom": time_from,
                "pickupTimeTo": time_to,
                "waybills": list(waybills) if waybills is not None else None,
            },
        )
        args: dict[str, Any] = {"authDataV1": self._auth, **request.to_wire()}
        wire = await self._call(Procedure.PACKAGES_PICKUP_CALL, args)
        return CourierPickupResponse(
            pickup_id=wire.pickup_call_id,
            status=wire.status,
            pickup_date=request.pickup_date,
        )
