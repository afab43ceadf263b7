"""Fachada de alto nivel sobre `DPDClient`.

Flujos listos para usar:
- `create_label`: número de paquete + etiqueta en una sola llamada.
- `create_labels_batch`: lo mismo para N envíos, secuencial, con errores
  recogidos por índice.
- `get_tracking` / `create_pickup`: envoltorios finos.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from dpd_pl.core.client import DPDClient
from dpd_pl.core.config import DPDSettings
from dpd_pl.core.domain.models import (
    BatchItemError,
    BatchLabelResult,
    CourierPickupResponse,
    DomesticPackage,
    LabelResult,
    Parcel,
    TrackingSummary,
    tracking_url_for,
)
from dpd_pl.core.domain.requests import CreateLabelRequest
from dpd_pl.core.errors import DPDError, ServiceError
from dpd_pl.core.validation import validate_input

_log = logging.getLogger(__name__)


class DPDSDK:
    """Flujos comunes sin tener que conocer los procedimientos DPD."""

    def __init__(
        self,
        settings: DPDSettings | None = None,
        *,
        client: DPDClient | None = None,
    ) -> None:
        self.client = client or DPDClient(settings)

    @property
    def settings(self) -> DPDSettings:
        return self.client.settings

    async def initialize(self) -> None:
        await self.client.initialize()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> DPDSDK:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def create_label(self, request: CreateLabelRequest | Mapping[str, Any]) -> LabelResult:
        req = validate_input(CreateLabelRequest, request)

        package = DomesticPackage(
            sender=req.sender,
            receiver=req.receiver,
            parcels=[Parcel(weight=req.pkg.weight, content=req.pkg.content)],
            payer_type="SENDER",
        )
        generated = await self.client.domestic.generate_package_numbers([package])
        waybills = generated.waybills
        if not waybills or not waybills[0]:
            raise ServiceError("Waybill not returned by DPD API", "MISSING_WAYBILL")
        waybill = waybills[0]

        label = await self.client.domestic.generate_labels(
            [waybill],
            format=req.label.format,
            page_format=req.label.page_format,
            variant=req.label.variant,
        )
        return LabelResult(
            waybill=waybill,
            pdf_base64=label.label_data,
            tracking_url=tracking_url_for(waybill),
        )

    async def create_labels_batch(
        self,
        requests: Sequence[CreateLabelRequest | Mapping[str, Any]],
    ) -> BatchLabelResult:
        result = BatchLabelResult()
        for index, request in enumerate(requests):
            try:
                result.labels.append(await self.create_label(request))
            except DPDError as exc:
                _log.warning("Label %d failed: %s", index, exc.message)
                result.errors.append(BatchItemError(index=index, code=exc.code, message=exc.message))
        return result

    async def get_tracking(self, waybill: str) -> TrackingSummary:
        status = await self.client.tracking.get_parcel_status(waybill)
        return TrackingSummary(waybill=status.waybill, status=status.status)

    async def create_pickup(
        self,
        pickup_date: str,
        time_from: str,
        time_to: str,
        waybills: Iterable[str] | None = None,
    ) -> CourierPickupResponse:
        return await self.client.domestic.pickup_call(pickup_date, time_from, time_to, waybills)
