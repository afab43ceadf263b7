"""Etiquetas de devolución (nacional e internacional)."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from dpd_pl.core.catalog import Procedure
from dpd_pl.core.domain.models import Address, LabelFormat, LabelResponse, PageFormat
from dpd_pl.core.services.base import BaseService


class ReturnService(BaseService):
    async def generate_domestic_return_label(
        self,
        waybills: Iterable[str],
        receiver: Address | Mapping[str, Any],
        *,
        format: LabelFormat = "PDF",
        page_format: PageFormat = "A4",
        variant: str | None = None,
    ) -> LabelResponse:
        return await self._return_label(
            Procedure.GENERATE_DOMESTIC_RETURN_LABEL,
            waybills,
            receiver,
            format=format,
            page_format=page_format,
            variant=variant,
        )

    async def generate_international_return_label(
        self,
        waybills: Iterable[str],
        receiver: Address | Mapping[str, Any],
        *,
        format: LabelFormat = "PDF",
        page_format: PageFormat = "A4",
        variant: str | None = None,
    ) -> LabelResponse:
        return await self._return_label(
            Procedure.GENERATE_RETURN_LABEL,
            waybills,
            receiver,
            format=format,
            page_format=page_format,
            variant=variant,
        )

    async def _return_label(
        self,
        procedure: Procedure,
        waybills: Iterable[str],
        receiver: Address | Mapping[str, Any],
        *,
        format: LabelFormat,
        page_format: PageFormat,
        variant: str | None,
    ) -> LabelResponse:
        request = self._parse(
            procedure,
            {
                "waybills": list(waybills),
                "receiver": receiver,
                "format": format,
                "pageFormat": page_format,
                "variant": variant,
            },
        )
        args: dict[str, Any] = {
            "authDataV1": self._auth,
            "returnedWaybillsV1": {"waybill": list(request.waybills)},
            "receiver": request.receiver.to_wire(),
            "outputDocFormatV1": request.format,
            "outputDocPageFormatV1": request.page_format,
            "outputLabelType": "RETURN",
        }
        if request.variant is not None:
            args["labelVariant"] = request.variant
        wire = await self._call(procedure, args)
        return LabelResponse(
            label_data=wire.document_data,
            format=request.format,
            page_format=request.page_format,
        )
