"""Puntos PUDO (myPUDO REST API).

La API REST va por el mismo invocador que SOAP: reintentos, validación de
contrato y errores tipados son idénticos. Las credenciales viajan como
Basic auth del cliente HTTP, no en el árbol de argumentos.
"""

from __future__ import annotations

from typing import Any, Mapping

from dpd_pl.core.catalog import Procedure
from dpd_pl.core.domain import contracts
from dpd_pl.core.domain.models import ParcelShop
from dpd_pl.core.domain.requests import ParcelShopQuery
from dpd_pl.core.services.base import BaseService


def parcel_shop_from(wire: contracts.ParcelShopWire) -> ParcelShop:
    return ParcelShop.model_validate(wire.model_dump(exclude_none=True))


class PudoService(BaseService):
    async def find_parcel_shops(
        self,
        query: ParcelShopQuery | Mapping[str, Any],
    ) -> list[ParcelShop]:
        params = self._parse(Procedure.FIND_PARCEL_SHOPS, query)
        wire = await self._call(Procedure.FIND_PARCEL_SHOPS, params.to_wire())
        return [parcel_shop_from(shop) for shop in wire.parcel_shops]

    async def get_parcel_shop(self, pudo_id: str) -> ParcelShop | None:
        """`None` si el punto no existe (HTTP 404)."""

        lookup = self._parse(Procedure.GET_PARCEL_SHOP, {"pudoId": pudo_id})
        wire = await self._call(Procedure.GET_PARCEL_SHOP, lookup.to_wire())
        if wire is None:
            return None
        return parcel_shop_from(wire)
