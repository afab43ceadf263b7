"""Integration Tests: DPDSDK workflows.

Invariants:
    - create_label = generate number + print label, with tracking URL
    - No waybill in the generation response -> ServiceError(MISSING_WAYBILL)
    - Batch collects DPDError per index and keeps going
"""

import pytest

from dpd_pl.core.client import DPDClient
from dpd_pl.core.errors import ServiceError, ValidationError
from dpd_pl.core.services.sdk import DPDSDK

from tests.conftest import address, generation_response

GENERATE = "generatePackagesNumbersV9"
LABELS = "generateSpedLabelsV4"


def _request(weight=2.0, **label):
    data = {"sender": address(name="Shop"), "receiver": address(), "pkg": {"weight": weight, "content": "docs"}}
    if label:
        data["label"] = label
    return data


@pytest.fixture
def sdk(client):
    return DPDSDK(client=client)


async def test_create_label(sdk, soap_stub):
    soap_stub.queue(GENERATE, generation_response(waybill="0000123U"))
    soap_stub.queue(LABELS, {"Status": "OK", "documentData": "JVBERi0xLjQ="})

    result = await sdk.create_label(_request(format="ZPL", pageFormat="LBL"))

    assert result.waybill == "0000123U"
    assert result.pdf_base64 == "JVBERi0xLjQ="
    assert result.tracking_url.endswith("q=0000123U")
    assert result.created_at.tzinfo is not None

    package = soap_stub.calls_to(GENERATE)[0]["openUMLFeV11"]["packages"][0]
    assert package["parcels"] == [{"weight": 2.0, "content": "docs"}]
    assert package["payerType"] == "SENDER"
    label_args = soap_stub.calls_to(LABELS)[0]
    assert label_args["dpdServicesParamsV1"] == {"waybills": ["0000123U"]}
    assert label_args["outputDocFormatV1"] == "ZPL"
    assert label_args["outputDocPageFormatV1"] == "LBL"
    assert label_args["labelVariant"] == "BIC3"


async def test_create_label_without_waybill(sdk, soap_stub):
    soap_stub.queue(GENERATE, {"Status": "OK", "packages": []})

    with pytest.raises(ServiceError) as info:
        await sdk.create_label(_request())

    assert info.value.code == "MISSING_WAYBILL"
    assert soap_stub.calls_to(LABELS) == []


async def test_create_label_validates_before_network(sdk, soap_stub):
    with pytest.raises(ValidationError) as info:
        await sdk.create_label(_request(weight=0.0))

    assert [v.path for v in info.value.violations] == ["pkg.weight"]
    assert soap_stub.calls == []


async def test_batch_collects_errors_per_index(sdk, soap_stub):
    soap_stub.queue(GENERATE, generation_response(waybill="A"), generation_response(waybill="B"))
    soap_stub.queue(LABELS, {"documentData": "QQ=="})

    result = await sdk.create_labels_batch([_request(), _request(weight=-1.0), _request()])

    assert [label.waybill for label in result.labels] == ["A", "B"]
    assert len(result.errors) == 1
    assert result.errors[0].index == 1
    assert result.errors[0].code == "VALIDATION_ERROR"


async def test_get_tracking(sdk, soap_stub):
    soap_stub.queue("getParcelStatus", {"parcel": {"waybill": "W1", "status": "IN_TRANSIT"}})

    summary = await sdk.get_tracking("W1")

    assert summary.model_dump() == {"waybill": "W1", "status": "IN_TRANSIT"}


async def test_create_pickup(sdk, soap_stub):
    soap_stub.queue("packagesPickupCallV4", {"pickupCallId": "PU-9", "status": "OK"})

    pickup = await sdk.create_pickup("2025-10-23", "10:00", "14:00")

    assert pickup.pickup_id == "PU-9"
    assert "waybills" not in soap_stub.calls_to("packagesPickupCallV4")[0]


async def test_sdk_context_manager(settings, factories, soap_stub):
    async with DPDSDK(client=DPDClient(settings, factories=factories)) as sdk:
        assert sdk.client.initialized

    assert soap_stub.closed
    assert not sdk.client.initialized
