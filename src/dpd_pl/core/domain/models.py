"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Los contratos de input (direcciones, bultos, servicios adicionales) se
  validan en el borde, antes de tocar la red.
- Los resultados públicos son modelos documentados (Field) que se serializan
  sin pérdida para CLI/JSON.

Convenciones:
- Atributos en snake_case, alias camelCase tal como los espera DPD.
- Escalares `Strict*`: el input del llamador no se convierte en silencio.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictStr
from pydantic.config import ConfigDict

PayerType = Literal["SENDER", "RECEIVER", "THIRD_PARTY"]
LabelFormat = Literal["PDF", "ZPL", "EPL"]
PageFormat = Literal["A4", "A6", "LBL"]
CodCurrency = Literal["PLN", "EUR", "RON", "CZK"]
DeclaredValueCurrency = Literal["PLN", "EUR"]
GuaranteeType = Literal["TIME0930", "TIME1200", "SATURDAY", "TIMEFIXED", "DPDTODAY"]

TRACKING_URL = "https://tracktrace.dpd.com.pl/findPackage?q={waybill}"


class _InputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    def to_wire(self) -> dict[str, object]:
        """Árbol de argumentos con nombres de red, sin campos ausentes."""

        return self.model_dump(by_alias=True, exclude_none=True)


class Credentials(_InputModel):
    """Credenciales de la cuenta DPD (inmutables durante la vida del cliente)."""

    login: StrictStr = Field(..., min_length=1)
    password: StrictStr = Field(..., min_length=1, repr=False)
    master_fid: StrictStr = Field(..., min_length=1, alias="masterFid")


class Address(_InputModel):
    """Remitente o destinatario."""

    company: StrictStr | None = None
    name: StrictStr = Field(..., min_length=1)
    address: StrictStr = Field(..., min_length=1)
    city: StrictStr = Field(..., min_length=1)
    postal_code: StrictStr = Field(..., min_length=1, alias="postalCode")
    country_code: StrictStr = Field(
        ...,
        min_length=2,
        max_length=2,
        pattern=r"^[A-Za-z]{2}$",
        alias="countryCode",
        description="Código ISO de 2 letras.",
    )
    email: StrictStr | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: StrictStr | None = None


class Parcel(_InputModel):
    content: StrictStr | None = Field(default=None, max_length=20)
    customer_data1: StrictStr | None = Field(default=None, max_length=35, alias="customerData1")
    customer_data2: StrictStr | None = Field(default=None, max_length=35, alias="customerData2")
    customer_data3: StrictStr | None = Field(default=None, max_length=35, alias="customerData3")
    size_x: StrictFloat | None = Field(default=None, gt=0, alias="sizeX")
    size_y: StrictFloat | None = Field(default=None, gt=0, alias="sizeY")
    size_z: StrictFloat | None = Field(default=None, gt=0, alias="sizeZ")
    weight: StrictFloat = Field(..., gt=0, description="Peso en kg.")


class COD(_InputModel):
    """Contra reembolso."""

    amount: StrictFloat = Field(..., gt=0)
    currency: CodCurrency = "PLN"


class DeclaredValue(_InputModel):
    amount: StrictFloat = Field(..., gt=0)
    currency: DeclaredValueCurrency = "PLN"


class Guarantee(_InputModel):
    type: GuaranteeType
    value: StrictStr | None = Field(
        default=None,
        pattern=r"^\d{2}:\d{2}$",
        description="Hora HH:MM (solo TIMEFIXED).",
    )


class DPDPickup(_InputModel):
    pudo: StrictStr = Field(..., min_length=1, description="Id del punto PUDO, p.ej. PL14187.")


class PackageServices(_InputModel):
    """Servicios adicionales del envío."""

    cod: COD | None = None
    declared_value: DeclaredValue | None = Field(default=None, alias="declaredValue")
    cud: StrictBool | None = None
    rod: StrictBool | None = None
    self_pickup: StrictBool | None = Field(default=None, alias="self")
    guarantee: Guarantee | None = None
    pudo_return: StrictBool | None = Field(default=None, alias="pudoReturn")
    dpd_pickup: DPDPickup | None = Field(default=None, alias="dpdPickup")
    carry_in: StrictBool | None = Field(default=None, alias="carryIn")
    dpd_lq: StrictBool | None = Field(default=None, alias="dpdLQ")
    dpd_food: StrictBool | None = Field(default=None, alias="dpdFood")


class DomesticPackage(_InputModel):
    sender: Address
    receiver: Address
    parcels: list[Parcel] = Field(..., min_length=1)
    payer_type: PayerType = Field(default="SENDER", alias="payerType")
    third_party_fid: StrictStr | None = Field(default=None, alias="thirdPartyFid")
    ref1: StrictStr | None = Field(default=None, max_length=50)
    ref2: StrictStr | None = Field(default=None, max_length=50)
    ref3: StrictStr | None = Field(default=None, max_length=50)
    services: PackageServices | None = None


class InternationalPackage(DomesticPackage):
    """Mismo contrato que el doméstico; DPD distingue por procedimiento."""


# -- Resultados públicos --------------------------------------------------------


class _ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PackageStatus(_ResultModel):
    status: str
    status_description: str | None = Field(default=None, alias="statusDescription")


class GeneratedPackage(_ResultModel):
    """Paquete con número asignado por DPD."""

    package_id: str = Field(..., alias="packageId")
    parcel_ids: list[str] = Field(default_factory=list, alias="parcelIds")
    waybill: str = Field(..., description="Número de guía del envío.")
    status: PackageStatus | None = None
    session_id: str | None = Field(default=None, alias="sessionId")


class ApiMessage(_ResultModel):
    code: str
    message: str


class PackageGenerationResponse(_ResultModel):
    packages: list[GeneratedPackage] = Field(default_factory=list)
    errors: list[ApiMessage] = Field(default_factory=list)

    @property
    def waybills(self) -> list[str]:
        return [p.waybill for p in self.packages]


class LabelResponse(_ResultModel):
    label_data: str = Field(..., alias="labelData", description="Documento en base64.")
    format: LabelFormat = "PDF"
    page_format: PageFormat = Field(default="A4", alias="pageFormat")


class ProtocolResponse(_ResultModel):
    protocol_data: str = Field(..., alias="protocolData")
    session_id: str | None = Field(default=None, alias="sessionId")


class CourierPickupResponse(_ResultModel):
    pickup_id: str = Field(..., alias="pickupId")
    status: str
    pickup_date: str = Field(..., alias="pickupDate")


class ParcelEvent(_ResultModel):
    date: str
    description: str
    location: str | None = None


class ParcelStatus(_ResultModel):
    """Estado de seguimiento de un envío."""

    waybill: str
    status: str
    status_code: str | None = Field(default=None, alias="statusCode")
    status_description: str | None = Field(default=None, alias="statusDescription")
    last_update: str | None = Field(default=None, alias="lastUpdate")
    events: list[ParcelEvent] = Field(default_factory=list)
    tracking_url: str = Field(..., alias="trackingUrl")


class PostcodeInfo(_ResultModel):
    postcode: str
    city: str
    country_code: str = Field(..., alias="countryCode")
    depot: str | None = None


class ParcelShop(_ResultModel):
    """Punto PUDO / ParcelShop."""

    parcel_shop_id: int = Field(..., alias="parcelShopId")
    pudo_id: str = Field(..., alias="pudoId")
    name: str
    address: str
    city: str
    postal_code: str = Field(..., alias="postalCode")
    country_code: str = Field(..., alias="countryCode")
    latitude: float | None = None
    longitude: float | None = None
    opening_hours: str | None = Field(default=None, alias="openingHours")
    services: list[str] = Field(default_factory=list)
    distance: float | None = None


class LabelResult(_ResultModel):
    """Resultado del flujo de dos pasos (número + etiqueta)."""

    waybill: str
    pdf_base64: str = Field(..., alias="pdfBase64")
    tracking_url: str = Field(..., alias="trackingUrl")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
    )


class BatchItemError(_ResultModel):
    index: int
    code: str
    message: str


class BatchLabelResult(_ResultModel):
    labels: list[LabelResult] = Field(default_factory=list)
    errors: list[BatchItemError] = Field(default_factory=list)


class TrackingSummary(_ResultModel):
    waybill: str
    status: str


def tracking_url_for(waybill: str) -> str:
    return TRACKING_URL.format(waybill=waybill)


__all__ = [
    "Address",
    "ApiMessage",
    "BatchItemError",
    "BatchLabelResult",
    "COD",
    "Credentials",
    "CourierPickupResponse",
    "DPDPickup",
    "DeclaredValue",
    "DomesticPackage",
    "GeneratedPackage",
    "Guarantee",
    "InternationalPackage",
    "LabelFormat",
    "LabelResponse",
    "LabelResult",
    "PackageGenerationResponse",
    "PackageServices",
    "PackageStatus",
    "PageFormat",
    "Parcel",
    "ParcelEvent",
    "ParcelShop",
    "ParcelStatus",
    "PayerType",
    "PostcodeInfo",
    "ProtocolResponse",
    "TrackingSummary",
    "tracking_url_for",
]
