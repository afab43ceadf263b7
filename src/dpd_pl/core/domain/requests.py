"""Contratos de input por procedimiento.

Cada modelo es la mitad "request" de un par del catálogo
(`dpd_pl.core.catalog`). Los servicios validan aquí, antes de construir el
árbol de argumentos.
"""

from __future__ import annotations

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from dpd_pl.core.domain.models import (
    Address,
    DomesticPackage,
    InternationalPackage,
    LabelFormat,
    PageFormat,
    _InputModel,
)

Waybill = StrictStr


class DomesticShipment(_InputModel):
    packages: list[DomesticPackage] = Field(..., min_length=1)


class InternationalShipment(_InputModel):
    packages: list[InternationalPackage] = Field(..., min_length=1)


class WaybillsRequest(_InputModel):
    waybills: list[Waybill] = Field(..., min_length=1)


class LabelRequest(WaybillsRequest):
    format: LabelFormat = "PDF"
    page_format: PageFormat = Field(default="A4", alias="pageFormat")
    variant: StrictStr = Field(default="BIC3", min_length=1)


class ReturnLabelRequest(WaybillsRequest):
    receiver: Address
    format: LabelFormat = "PDF"
    page_format: PageFormat = Field(default="A4", alias="pageFormat")
    variant: StrictStr | None = None


class PickupRequest(_InputModel):
    pickup_date: StrictStr = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", alias="pickupDate")
    pickup_time_from: StrictStr = Field(..., pattern=r"^\d{2}:\d{2}$", alias="pickupTimeFrom")
    pickup_time_to: StrictStr = Field(..., pattern=r"^\d{2}:\d{2}$", alias="pickupTimeTo")
    waybills: list[Waybill] | None = None


class ParcelStatusQuery(_InputModel):
    waybill: StrictStr = Field(..., min_length=1)


class PostcodeQuery(_InputModel):
    postcode: StrictStr = Field(..., min_length=1)
    country_code: StrictStr = Field(default="PL", pattern=r"^[A-Z]{2}$", alias="countryCode")


class ParcelShopQuery(_InputModel):
    """Parámetros de búsqueda de puntos PUDO."""

    address: StrictStr | None = None
    city: StrictStr | None = None
    postal_code: StrictStr | None = Field(default=None, alias="postalCode")
    country_code: StrictStr = Field(default="PL", pattern=r"^[A-Z]{2}$", alias="countryCode")
    limit: StrictInt | None = Field(default=None, gt=0, le=100)
    services: list[StrictStr] | None = None
    hide_closed: StrictBool | None = Field(default=None, alias="hideClosed")
    latitude: StrictFloat | None = Field(default=None, ge=-90, le=90)
    longitude: StrictFloat | None = Field(default=None, ge=-180, le=180)
    radius: StrictFloat | None = Field(default=None, gt=0)


class ParcelShopLookup(_InputModel):
    pudo_id: StrictStr = Field(..., min_length=1, alias="pudoId")


class LabelPackage(_InputModel):
    weight: StrictFloat = Field(..., gt=0)
    content: StrictStr | None = Field(default=None, max_length=20)


class LabelOptions(_InputModel):
    format: LabelFormat = "PDF"
    page_format: PageFormat = Field(default="A4", alias="pageFormat")
    variant: StrictStr = Field(default="BIC3", min_length=1)


class CreateLabelRequest(_InputModel):
    """Input del flujo de alto nivel `DPDSDK.create_label`."""

    sender: Address
    receiver: Address
    pkg: LabelPackage
    label: LabelOptions = Field(default_factory=LabelOptions)
