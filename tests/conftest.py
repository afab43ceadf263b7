"""Shared fixtures: in-memory connection handles and a wired DPDClient.

No test touches the network: every handle is a `StubConnection` whose
responses are queued per procedure.
"""

from __future__ import annotations

from typing import Any, Mapping

import pytest

from dpd_pl.core.catalog import procedures_for
from dpd_pl.core.client import DPDClient
from dpd_pl.core.config import DPDSettings
from dpd_pl.core.endpoints import ServiceKind
from dpd_pl.core.interfaces.transport import ConnectionOptions


class StubConnection:
    """ConnectionHandle double: queued outcomes per procedure, records calls.

    The last queued outcome is sticky, so a single queued error repeats for
    every retry.
    """

    def __init__(self, procedures: frozenset[str] | set[str]) -> None:
        self._procedures = frozenset(procedures)
        self._outcomes: dict[str, list[Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    @property
    def procedures(self) -> frozenset[str]:
        return self._procedures

    def queue(self, procedure: str, *outcomes: Any) -> None:
        self._outcomes.setdefault(procedure, []).extend(outcomes)

    def calls_to(self, procedure: str) -> list[dict[str, Any]]:
        return [args for name, args in self.calls if name == procedure]

    async def invoke(self, procedure: str, args: Mapping[str, Any]) -> Any:
        self.calls.append((procedure, dict(args)))
        pending = self._outcomes.get(procedure)
        if not pending:
            raise AssertionError(f"unexpected call to {procedure}")
        outcome = pending.pop(0) if len(pending) > 1 else pending[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


def make_factory(handle: StubConnection, opened: list[str] | None = None):
    async def factory(url: str, options: ConnectionOptions) -> StubConnection:
        if opened is not None:
            opened.append(url)
        return handle

    return factory


def address(**overrides: Any) -> dict[str, Any]:
    data = {
        "name": "Jan Kowalski",
        "address": "ul. Mineralna 15",
        "city": "Warszawa",
        "postalCode": "02-274",
        "countryCode": "PL",
    }
    data.update(overrides)
    return data


def domestic_package(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "sender": address(name="Sender Sp. z o.o."),
        "receiver": address(),
        "parcels": [{"weight": 1.5}],
    }
    data.update(overrides)
    return data


def generation_response(waybill: str = "W1", package_id: str = "P1") -> dict[str, Any]:
    return {
        "Status": "OK",
        "sessionId": "S1",
        "packages": [
            {
                "packageId": package_id,
                "parcels": [{"parcelId": "X"}],
                "waybill": waybill,
                "status": "OK",
            }
        ],
    }


def parcel_shop(**overrides: Any) -> dict[str, Any]:
    data = {
        "parcelShopId": 14187,
        "pudoId": "PL14187",
        "name": "Żabka",
        "address": "ul. Prosta 1",
        "city": "Warszawa",
        "postalCode": "00-001",
        "countryCode": "PL",
        "latitude": 52.23,
        "longitude": 21.01,
        "services": ["PUDO", "RETURN"],
    }
    data.update(overrides)
    return data


@pytest.fixture
def settings() -> DPDSettings:
    return DPDSettings(
        _env_file=None,
        login="test",
        password="secret",
        master_fid="1495",
        environment="demo",
        timeout_ms=5_000,
        max_retries=2,
        retry_delay_ms=0,
    )


@pytest.fixture
def soap_stub() -> StubConnection:
    return StubConnection(procedures_for(ServiceKind.PACKAGE_SERVICES))


@pytest.fixture
def pudo_stub() -> StubConnection:
    return StubConnection(procedures_for(ServiceKind.PUDO))


@pytest.fixture
def factories(soap_stub: StubConnection, pudo_stub: StubConnection):
    return {
        ServiceKind.PACKAGE_SERVICES: make_factory(soap_stub),
        ServiceKind.PUDO: make_factory(pudo_stub),
    }


@pytest.fixture
async def client(settings: DPDSettings, factories):
    dpd = DPDClient(settings, factories=factories)
    await dpd.initialize()
    yield dpd
    await dpd.aclose()
