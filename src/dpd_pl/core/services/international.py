"""Envíos internacionales (DPD Classic)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from dpd_pl.core.catalog import Procedure
from dpd_pl.core.domain.models import InternationalPackage, PackageGenerationResponse
from dpd_pl.core.services.base import BaseService
from dpd_pl.core.services.domestic import GENERATION_POLICY, LANG_CODE, generation_result, package_args


class InternationalService(BaseService):
    async def generate_package_numbers(
        self,
        packages: Sequence[InternationalPackage | Mapping[str, Any]],
    ) -> PackageGenerationResponse:
        shipment = self._parse(
            Procedure.GENERATE_INTERNATIONAL_PACKAGE_NUMBERS,
            {"packages": list(packages)},
        )
        master_fid = self._ctx.credentials.master_fid
        args = {
            "authDataV1": self._auth,
            "internationalOpenUMLFeV1": {
                "packages": [package_args(p, master_fid) for p in shipment.packages],
            },
            "pkgNumsGenerationPolicyV1": GENERATION_POLICY,
            "langCode": LANG_CODE,
        }
        wire = await self._call(Procedure.GENERATE_INTERNATIONAL_PACKAGE_NUMBERS, args)
        return generation_result(wire)
