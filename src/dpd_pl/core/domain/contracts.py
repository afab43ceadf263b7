"""Contratos de respuesta (forma de los datos tal como llegan de la red).

Reglas:
- Nombres de red como alias; atributos en snake_case.
- Escalares estrictos: `123` no es `"123"`.
- Campos desconocidos se ignoran (el WSDL de DPD añade campos entre versiones),
  pero nunca se inventan los ausentes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr
from pydantic.config import ConfigDict


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StatusEnvelope(WireModel):
    """Campos de estado a nivel API, presentes en cualquier respuesta."""

    # Solo por alias: `status` en minúscula es un campo de negocio (p.ej. recogida).
    model_config = ConfigDict(populate_by_name=False, extra="ignore")

    status: StrictStr | None = Field(default=None, alias="Status")
    status_info: StrictStr | None = Field(default=None, alias="StatusInfo")


class ParcelIdWire(WireModel):
    parcel_id: StrictStr = Field(..., alias="parcelId")


class GeneratedPackageWire(WireModel):
    package_id: StrictStr = Field(..., alias="packageId")
    parcels: list[ParcelIdWire]
    waybill: StrictStr
    status: StrictStr | None = None


class ApiMessageWire(WireModel):
    code: StrictStr
    message: StrictStr


class PackageGenerationWire(WireModel):
    packages: list[GeneratedPackageWire] | None = None
    session_id: StrictStr | None = Field(default=None, alias="sessionId")
    errors: list[ApiMessageWire] | None = None


class DocumentWire(WireModel):
    document_data: StrictStr = Field(..., alias="documentData")


class ProtocolWire(DocumentWire):
    session_id: StrictStr | None = Field(default=None, alias="sessionId")


class PickupCallWire(WireModel):
    pickup_call_id: StrictStr = Field(..., alias="pickupCallId")
    status: StrictStr


class ParcelEventWire(WireModel):
    date: StrictStr
    description: StrictStr
    location: StrictStr | None = None


class ParcelDetailsWire(WireModel):
    waybill: StrictStr
    status: StrictStr
    status_code: StrictStr | None = Field(default=None, alias="statusCode")
    status_description: StrictStr | None = Field(default=None, alias="statusDescription")
    last_update: StrictStr | None = Field(default=None, alias="lastUpdate")
    events: list[ParcelEventWire] | None = None


class ParcelStatusWire(WireModel):
    parcel: ParcelDetailsWire


class PostcodeInfoWire(WireModel):
    postcode: StrictStr
    city: StrictStr
    country_code: StrictStr = Field(..., min_length=2, max_length=2, alias="countryCode")
    depot: StrictStr | None = None


class ParcelShopWire(WireModel):
    parcel_shop_id: StrictInt = Field(..., alias="parcelShopId")
    pudo_id: StrictStr = Field(..., alias="pudoId")
    name: StrictStr
    address: StrictStr
    city: StrictStr
    postal_code: StrictStr = Field(..., alias="postalCode")
    country_code: StrictStr = Field(..., alias="countryCode")
    latitude: StrictFloat | None = None
    longitude: StrictFloat | None = None
    opening_hours: StrictStr | None = Field(default=None, alias="openingHours")
    services: list[StrictStr] | None = None
    distance: StrictFloat | None = Field(default=None, ge=0)


class ParcelShopsWire(WireModel):
    parcel_shops: list[ParcelShopWire] = Field(..., alias="parcelShops")
