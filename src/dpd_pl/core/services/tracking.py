"""Seguimiento de envíos y consulta de códigos postales."""

from __future__ import annotations

from dpd_pl.core.catalog import Procedure
from dpd_pl.core.domain.models import ParcelEvent, ParcelStatus, PostcodeInfo, tracking_url_for
from dpd_pl.core.services.base import BaseService


class TrackingService(BaseService):
    async def get_parcel_status(self, waybill: str) -> ParcelStatus:
        query = self._parse(Procedure.GET_PARCEL_STATUS, {"waybill": waybill})
        args = {"authDataV1": self._auth, "waybill": query.waybill}
        wire = await self._call(Procedure.GET_PARCEL_STATUS, args)

        parcel = wire.parcel
        return ParcelStatus(
            waybill=parcel.waybill,
            status=parcel.status,
            status_code=parcel.status_code,
            status_description=parcel.status_description,
            last_update=parcel.last_update,
            events=[
                ParcelEvent(date=e.date, description=e.description, location=e.location)
                for e in parcel.events or []
            ],
            tracking_url=tracking_url_for(parcel.waybill),
        )

    async def get_postcode_info(self, postcode: str, country_code: str = "PL") -> PostcodeInfo:
        query = self._parse(
            Procedure.GET_POSTCODE_INFO,
            {"postcode": postcode, "countryCode": country_code},
        )
        args = {"authDataV1": self._auth, **query.to_wire()}
        wire = await self._call(Procedure.GET_POSTCODE_INFO, args)
        return PostcodeInfo(
            postcode=wire.postcode,
            city=wire.city,
            country_code=wire.country_code,
            depot=wire.depot,
        )
