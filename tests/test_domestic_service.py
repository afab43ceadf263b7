"""Integration Tests: domestic and international services over a stub handle.

Invariants:
    - Invalid input raises ValidationError before any procedure call
    - Status != OK -> ServiceError(API_ERROR) with the raw response as details
    - Contract violations in the response -> ServiceError(INVALID_RESPONSE)
    - Every package and every parcel reaches the argument tree
"""

import pytest

from dpd_pl.core.client import DPDClient
from dpd_pl.core.domain.models import Address, DomesticPackage, Parcel
from dpd_pl.core.errors import NetworkError, NotInitializedError, ServiceError, ValidationError

from tests.conftest import address, domestic_package, generation_response

GENERATE = "generatePackagesNumbersV9"


async def test_generate_package_numbers_end_to_end(client, soap_stub):
    soap_stub.queue(GENERATE, generation_response())

    result = await client.domestic.generate_package_numbers([domestic_package()])

    assert result.waybills == ["W1"]
    package = result.packages[0]
    assert package.package_id == "P1"
    assert package.parcel_ids == ["X"]
    assert package.session_id == "S1"
    assert package.status.status == "OK"

    (args,) = soap_stub.calls_to(GENERATE)
    assert args["authDataV1"] == {"login": "test", "password": "secret", "masterFid": "1495"}
    assert args["pkgNumsGenerationPolicyV1"] == "STOP_ON_FIRST_ERROR"
    assert args["langCode"] == "PL"
    sent = args["openUMLFeV11"]["packages"][0]
    assert sent["payerType"] == "SENDER"
    assert sent["receiver"]["postalCode"] == "02-274"
    assert sent["parcels"] == [{"weight": 1.5}]
    assert "thirdPartyFID" not in sent


async def test_generated_package_is_flattened(client, soap_stub):
    soap_stub.queue(
        GENERATE,
        {"packages": [{"packageId": "P1", "parcels": [{"parcelId": "PC1"}], "waybill": "W1", "status": "OK"}]},
    )

    result = await client.domestic.generate_package_numbers([domestic_package()])

    package = result.packages[0].model_dump(by_alias=True, include={"package_id", "parcel_ids", "waybill"})
    assert package == {"packageId": "P1", "parcelIds": ["PC1"], "waybill": "W1"}


async def test_model_instances_are_accepted(client, soap_stub):
    soap_stub.queue(GENERATE, generation_response())
    package = DomesticPackage(
        sender=Address(**address()),
        receiver=Address(**address()),
        parcels=[Parcel(weight=2.0, content="books")],
    )

    result = await client.domestic.generate_package_numbers([package])

    assert result.waybills == ["W1"]
    sent = soap_stub.calls_to(GENERATE)[0]["openUMLFeV11"]["packages"][0]
    assert sent["parcels"] == [{"weight": 2.0, "content": "books"}]


async def test_all_packages_and_parcels_are_sent(client, soap_stub):
    soap_stub.queue(GENERATE, generation_response())
    packages = [
        domestic_package(parcels=[{"weight": 1.0}, {"weight": 2.0}, {"weight": 3.0}]),
        domestic_package(ref1="SECOND"),
    ]

    await client.domestic.generate_package_numbers(packages)

    sent = soap_stub.calls_to(GENERATE)[0]["openUMLFeV11"]["packages"]
    assert len(sent) == 2
    assert [p["weight"] for p in sent[0]["parcels"]] == [1.0, 2.0, 3.0]
    assert sent[1]["ref1"] == "SECOND"


async def test_third_party_payer_defaults_to_master_fid(client, soap_stub):
    soap_stub.queue(GENERATE, generation_response())

    await client.domestic.generate_package_numbers(
        [domestic_package(payerType="THIRD_PARTY"), domestic_package(payerType="THIRD_PARTY", thirdPartyFid="777")]
    )

    sent = soap_stub.calls_to(GENERATE)[0]["openUMLFeV11"]["packages"]
    assert sent[0]["thirdPartyFID"] == "1495"
    assert sent[1]["thirdPartyFID"] == "777"
    assert "thirdPartyFid" not in sent[1]


async def test_services_use_wire_names(client, soap_stub):
    soap_stub.queue(GENERATE, generation_response())
    services = {
        "cod": {"amount": 120.5, "currency": "PLN"},
        "self": True,
        "dpdPickup": {"pudo": "PL14187"},
        "guarantee": {"type": "TIMEFIXED", "value": "10:30"},
    }

    await client.domestic.generate_package_numbers([domestic_package(services=services)])

    sent = soap_stub.calls_to(GENERATE)[0]["openUMLFeV11"]["packages"][0]
    assert sent["services"] == services


async def test_invalid_input_never_reaches_network(client, soap_stub):
    bad = domestic_package(parcels=[{"weight": -1.0}], receiver=address(countryCode="POL"))

    with pytest.raises(ValidationError) as info:
        await client.domestic.generate_package_numbers([bad])

    paths = {v.path for v in info.value.violations}
    assert paths == {"packages[0].receiver.countryCode", "packages[0].parcels[0].weight"}
    assert soap_stub.calls == []


async def test_empty_package_list_is_rejected(client, soap_stub):
    with pytest.raises(ValidationError):
        await client.domestic.generate_package_numbers([])

    assert soap_stub.calls == []


async def test_api_error_status(client, soap_stub):
    raw = {"Status": "ERROR", "StatusInfo": "LIMIT_EXCEEDED"}
    soap_stub.queue(GENERATE, raw)

    with pytest.raises(ServiceError) as info:
        await client.domestic.generate_package_numbers([domestic_package()])

    assert info.value.code == "API_ERROR"
    assert "LIMIT_EXCEEDED" in info.value.message
    assert info.value.details == raw


async def test_return_envelope_is_unwrapped(client, soap_stub):
    soap_stub.queue(GENERATE, {"return": generation_response(waybill="W9")})

    result = await client.domestic.generate_package_numbers([domestic_package()])

    assert result.waybills == ["W9"]


async def test_invalid_response_carries_violations(client, soap_stub):
    soap_stub.queue(
        GENERATE,
        {"Status": "OK", "packages": [{"packageId": "P1", "parcels": [{"parcelId": "X"}], "waybill": 123}]},
    )

    with pytest.raises(ServiceError) as info:
        await client.domestic.generate_package_numbers([domestic_package()])

    assert info.value.code == "INVALID_RESPONSE"
    assert [v.path for v in info.value.violations] == ["packages[0].waybill"]


async def test_api_errors_list_is_returned(client, soap_stub):
    soap_stub.queue(GENERATE, {"packages": [], "errors": [{"code": "E1", "message": "bad postcode"}]})

    result = await client.domestic.generate_package_numbers([domestic_package()])

    assert result.waybills == []
    assert result.errors[0].code == "E1"


async def test_generate_labels(client, soap_stub):
    soap_stub.queue("generateSpedLabelsV4", {"Status": "OK", "documentData": "JVBERi0="})

    label = await client.domestic.generate_labels(["W1", "W2"], page_format="A6")

    assert label.label_data == "JVBERi0="
    assert label.format == "PDF"
    assert label.page_format == "A6"
    (args,) = soap_stub.calls_to("generateSpedLabelsV4")
    assert args["dpdServicesParamsV1"] == {"waybills": ["W1", "W2"]}
    assert args["outputDocFormatV1"] == "PDF"
    assert args["outputDocPageFormatV1"] == "A6"
    assert args["outputLabelType"] == "LABEL"
    assert args["labelVariant"] == "BIC3"


async def test_generate_labels_rejects_unknown_format(client, soap_stub):
    with pytest.raises(ValidationError) as info:
        await client.domestic.generate_labels(["W1"], format="GIF")

    assert [v.path for v in info.value.violations] == ["format"]
    assert soap_stub.calls == []


async def test_generate_labels_page_format_uses_wire_name(client, soap_stub):
    with pytest.raises(ValidationError) as info:
        await client.domestic.generate_labels(["W1"], page_format="A5")

    assert [(v.path, v.reason.value) for v in info.value.violations] == [("pageFormat", "out of enum")]
    assert soap_stub.calls == []


async def test_generate_protocol(client, soap_stub):
    soap_stub.queue("generateProtocolV2", {"documentData": "UFJPVE8=", "sessionId": "S7"})

    protocol = await client.domestic.generate_protocol(["W1"])

    assert protocol.protocol_data == "UFJPVE8="
    assert protocol.session_id == "S7"


async def test_pickup_call(client, soap_stub):
    soap_stub.queue("packagesPickupCallV4", {"pickupCallId": "PU-1", "status": "PENDING"})

    pickup = await client.domestic.pickup_call("2025-10-23", "09:00", "12:00", ["W1"])

    assert pickup.pickup_id == "PU-1"
    assert pickup.status == "PENDING"
    assert pickup.pickup_date == "2025-10-23"
    (args,) = soap_stub.calls_to("packagesPickupCallV4")
    assert args["pickupDate"] == "2025-10-23"
    assert args["pickupTimeFrom"] == "09:00"
    assert args["pickupTimeTo"] == "12:00"
    assert args["waybills"] == ["W1"]


async def test_pickup_call_validates_date(client, soap_stub):
    with pytest.raises(ValidationError) as info:
        await client.domestic.pickup_call("23.10.2025", "9:00", "12:00")

    assert {v.path for v in info.value.violations} == {"pickupDate", "pickupTimeFrom"}
    assert soap_stub.calls == []


async def test_international_uses_its_own_payload(client, soap_stub):
    soap_stub.queue("generateInternationalPackageNumbersV1", generation_response(waybill="INT1"))

    result = await client.international.generate_package_numbers(
        [domestic_package(receiver=address(countryCode="DE", postalCode="10115", city="Berlin"))]
    )

    assert result.waybills == ["INT1"]
    (args,) = soap_stub.calls_to("generateInternationalPackageNumbersV1")
    assert args["internationalOpenUMLFeV1"]["packages"][0]["receiver"]["countryCode"] == "DE"


async def test_transient_failures_are_retried_by_services(client, soap_stub):
    soap_stub.queue(GENERATE, NetworkError("reset"), generation_response())

    result = await client.domestic.generate_package_numbers([domestic_package()])

    assert result.waybills == ["W1"]
    assert len(soap_stub.calls_to(GENERATE)) == 2


async def test_calls_before_initialize_raise(settings, factories, soap_stub):
    dpd = DPDClient(settings, factories=factories)

    with pytest.raises(NotInitializedError):
        await dpd.domestic.generate_protocol(["W1"])

    assert soap_stub.calls == []
