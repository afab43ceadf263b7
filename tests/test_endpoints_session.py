"""Unit Tests: endpoint table and session manager.

Invariants:
    - resolve_endpoint is a pure lookup; unknown env/kind -> ConfigurationError
    - handle() before initialize() raises NotInitializedError without network
    - Any handshake failure surfaces as NetworkError with the original cause
    - A failed initialize() closes the handles it already opened
"""

import pytest

from dpd_pl.core.endpoints import ENDPOINTS, Environment, ServiceKind, resolve_endpoint
from dpd_pl.core.errors import ConfigurationError, NetworkError, NotInitializedError
from dpd_pl.core.interfaces.transport import ConnectionHandle, ConnectionOptions
from dpd_pl.core.session import SessionManager, open_session

from tests.conftest import StubConnection, make_factory


def test_resolve_known_endpoints():
    assert resolve_endpoint("demo", "pudo") == "https://mypudo-demo.dpd.com.pl/api/v2"
    assert resolve_endpoint(Environment.PRODUCTION, ServiceKind.PACKAGE_SERVICES).startswith(
        "https://dpdservices.dpd.com.pl/DPDPackageObjServicesService"
    )


def test_every_environment_covers_every_kind():
    for env in Environment:
        for kind in ServiceKind:
            assert ENDPOINTS[env][kind].startswith("https://")


@pytest.mark.parametrize(("env", "kind"), [("staging", "pudo"), ("demo", "ftp")])
def test_unknown_endpoint_is_configuration_error(env, kind):
    with pytest.raises(ConfigurationError):
        resolve_endpoint(env, kind)


def test_stub_satisfies_connection_protocol():
    assert isinstance(StubConnection(set()), ConnectionHandle)


def test_handle_before_initialize_raises_without_network():
    opened = []
    session = SessionManager(
        "demo",
        ConnectionOptions(),
        factories={ServiceKind.PACKAGE_SERVICES: make_factory(StubConnection(set()), opened)},
    )

    with pytest.raises(NotInitializedError):
        session.handle()

    assert opened == []
    assert not session.initialized


async def test_initialize_opens_one_handle_per_kind():
    soap, pudo = StubConnection({"a"}), StubConnection({"b"})
    opened = []
    session = SessionManager(
        Environment.DEMO,
        ConnectionOptions(),
        factories={
            ServiceKind.PACKAGE_SERVICES: make_factory(soap, opened),
            ServiceKind.PUDO: make_factory(pudo, opened),
        },
    )

    await session.initialize()

    assert session.handle(ServiceKind.PACKAGE_SERVICES) is soap
    assert session.handle(ServiceKind.PUDO) is pudo
    assert opened == [
        ENDPOINTS[Environment.DEMO][ServiceKind.PACKAGE_SERVICES],
        ENDPOINTS[Environment.DEMO][ServiceKind.PUDO],
    ]

    await session.aclose()

    assert soap.closed and pudo.closed
    with pytest.raises(NotInitializedError):
        session.handle(ServiceKind.PUDO)


async def test_open_session_wraps_handshake_failures():
    cause = OSError("name resolution failed")

    async def failing(url, options):
        raise cause

    with pytest.raises(NetworkError) as info:
        await open_session("https://example.invalid/?WSDL", ConnectionOptions(), failing)

    assert info.value.cause is cause
    assert "example.invalid" in info.value.message


async def test_failed_initialize_closes_opened_handles():
    soap = StubConnection({"a"})

    async def failing(url, options):
        raise RuntimeError("malformed WSDL")

    session = SessionManager(
        "production",
        ConnectionOptions(),
        factories={ServiceKind.PACKAGE_SERVICES: make_factory(soap), ServiceKind.PUDO: failing},
    )

    with pytest.raises(NetworkError):
        await session.initialize()

    assert soap.closed
    assert not session.initialized


async def test_reinitialize_closes_replaced_handles():
    handles = [StubConnection({"a"}), StubConnection({"a"})]

    async def fresh_handle(url, options):
        return handles.pop(0)

    first, second = handles
    session = SessionManager(
        Environment.DEMO,
        ConnectionOptions(),
        factories={ServiceKind.PACKAGE_SERVICES: fresh_handle},
    )

    await session.initialize([ServiceKind.PACKAGE_SERVICES])
    await session.initialize([ServiceKind.PACKAGE_SERVICES])

    assert first.closed
    assert not second.closed
    assert session.handle(ServiceKind.PACKAGE_SERVICES) is second

    await session.aclose()

    assert second.closed
