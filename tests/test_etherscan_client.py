from unittest.mock import MagicMock

import pytest
import requests

from etherscan_gateway.errors import (
    DecodeError,
    PaidPlanRequiredError,
    TransportError,
    UpstreamAPIError,
    UpstreamRPCError,
)
from etherscan_gateway.etherscan_client import (
    EnvelopeKind,
    parse_envelope,
    unwrap_envelope,
)

from ._gateway_helpers import (
    API_KEY,
    BASE_URL,
    fake_response,
    make_explorer,
    paid_plan,
    rpc_error,
    rpc_ok,
    sent_params,
    status_ok,
)


def test_parse_envelope_recognises_rpc_shape():
    envelope = parse_envelope(rpc_ok("0x10"))
    assert envelope.kind is EnvelopeKind.RPC
    assert envelope.result == "0x10"
    assert envelope.error is None


def test_parse_envelope_recognises_status_shape():
    envelope = parse_envelope(status_ok([{"hash": "0xabc"}]))
    assert envelope.kind is EnvelopeKind.STATUS
    assert envelope.status == "1"
    assert envelope.result == [{"hash": "0xabc"}]


def test_parse_envelope_empty_version_tag_is_status_shape():
    envelope = parse_envelope({"jsonrpc": "", "status": "1", "message": "OK", "result": "42"})
    assert envelope.kind is EnvelopeKind.STATUS


@pytest.mark.parametrize("payload", [[1, 2], "text", None, {"status": 1, "message": "OK"}])
def test_parse_envelope_unparseable(payload):
    assert parse_envelope(payload).kind is EnvelopeKind.UNPARSEABLE


def test_unwrap_unparseable_raises_decode_error():
    with pytest.raises(DecodeError):
        unwrap_envelope(parse_envelope([1, 2]))


def test_request_builds_query_and_returns_inner_result():
    client = make_explorer(status_ok("123"))

    assert client.request("10", "account", "balance", {"address": "0xabc"}) == "123"

    call = client.session.get.call_args
    assert call.args[0] == BASE_URL
    assert call.kwargs["timeout"] == 10
    assert call.kwargs["params"] == {
        "module": "account",
        "action": "balance",
        "apikey": API_KEY,
        "chainid": "10",
        "address": "0xabc",
    }


def test_rpc_envelope_result_is_returned_verbatim():
    block = {"number": "0xff", "transactions": []}
    client = make_explorer(rpc_ok(block))
    assert client.request("1", "proxy", "eth_getBlockByNumber") == block


def test_status_without_status_field_returns_result():
    client = make_explorer({"message": "", "result": {"SafeGasPrice": "12"}})
    assert client.request("1", "gastracker", "gasoracle") == {"SafeGasPrice": "12"}


def test_notok_is_classified_as_paid_plan_required():
    client = make_explorer(paid_plan())

    with pytest.raises(PaidPlanRequiredError) as excinfo:
        client.request("8453", "account", "balance")

    assert not isinstance(excinfo.value, UpstreamAPIError)
    assert "Free API access is not supported" in excinfo.value.detail


def test_other_failure_status_is_upstream_api_error():
    client = make_explorer({"status": "0", "message": "No transactions found", "result": []})

    with pytest.raises(UpstreamAPIError) as excinfo:
        client.request("1", "account", "txlist")

    assert excinfo.value.status == "0"
    assert excinfo.value.message == "No transactions found"


@pytest.mark.parametrize(("module", "action"), [("proxy", "eth_call"), ("account", "balance")])
def test_rpc_error_object_is_surfaced_for_any_action(module, action):
    client = make_explorer(rpc_error(-32000, "execution reverted"))

    with pytest.raises(UpstreamRPCError) as excinfo:
        client.request("1", module, action)

    assert excinfo.value.code == -32000
    assert excinfo.value.message == "execution reverted"


def test_empty_rpc_error_object_is_still_an_error():
    client = make_explorer({"jsonrpc": "2.0", "id": 1, "result": "0x2", "error": {}})

    with pytest.raises(UpstreamRPCError):
        client.request("1", "proxy", "eth_call")


@pytest.mark.parametrize("exc", [requests.ConnectionError("boom"), requests.Timeout("slow")])
def test_transport_failures_are_not_retried(exc):
    client = make_explorer(exc)

    with pytest.raises(TransportError):
        client.request("1", "account", "balance")

    assert client.session.get.call_count == 1


def test_http_error_status_is_transport_error():
    client = make_explorer()
    client.session.get.side_effect = [fake_response({}, status_code=502)]

    with pytest.raises(TransportError):
        client.request("1", "account", "balance")


def test_invalid_json_is_decode_error():
    client = make_explorer()
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.side_effect = ValueError("Expecting value")
    client.session.get.side_effect = [response]

    with pytest.raises(DecodeError):
        client.request("1", "account", "balance")


def test_account_balance_requires_string_result():
    client = make_explorer(status_ok("1000"), status_ok(1000))

    assert client.get_account_balance("1", "0xabc") == "1000"
    assert sent_params(client)["tag"] == "latest"
    with pytest.raises(DecodeError):
        client.get_account_balance("1", "0xabc")


def test_contract_abi_requires_string_result():
    client = make_explorer(status_ok({"abi": []}))
    with pytest.raises(DecodeError):
        client.get_contract_abi("1", "0xabc")


def test_block_by_number_raw_converts_block_to_hex():
    client = make_explorer(rpc_ok({}), rpc_ok({}))

    client.get_block_by_number_raw("1", "255")
    client.get_block_by_number_raw("1", "latest")

    first = sent_params(client, 0)
    assert first["action"] == "eth_getBlockByNumber"
    assert first["tag"] == "0xff"
    assert first["boolean"] == "true"
    assert sent_params(client, 1)["tag"] == "latest"


def test_block_by_number_uses_decimal_block_reward_lookup():
    client = make_explorer(status_ok({"blockNumber": "255"}))

    client.get_block_by_number("1", "255")

    params = sent_params(client)
    assert params["module"] == "block"
    assert params["action"] == "getblockreward"
    assert params["blockno"] == "255"


def test_transaction_by_block_and_index_converts_both_numbers():
    client = make_explorer(rpc_ok(None))

    client.get_transaction_by_block_number_and_index("1", "255", "3")

    params = sent_params(client)
    assert params["tag"] == "0xff"
    assert params["index"] == "0x3"


def test_latest_block_number_is_decimal():
    client = make_explorer(rpc_ok("0x10d4f"))
    assert client.get_latest_block_number("1") == "68943"


def test_execute_contract_method_only_sends_params_when_given():
    client = make_explorer(rpc_ok("0x"), rpc_ok("0x"))

    client.execute_contract_method("1", "0xtoken", "0x06fdde03")
    client.execute_contract_method("1", "0xtoken", "0x06fdde03", "extra")

    assert "params" not in sent_params(client, 0)
    assert sent_params(client, 0)["to"] == "0xtoken"
    assert sent_params(client, 1)["params"] == "extra"


def test_transaction_count_defaults_tag():
    client = make_explorer(rpc_ok("0x5"))
    assert client.get_transaction_count("1", "0xabc", "") == "0x5"
    assert sent_params(client)["tag"] == "latest"


def test_address_listings_merge_address_into_params():
    client = make_explorer(status_ok([]), status_ok([]))

    client.get_token_transfers_by_address("1", "0xabc", {"page": "2"})
    client.get_erc721_transfers("1", "0xabc")

    first = sent_params(client, 0)
    assert first["action"] == "tokentx"
    assert first["address"] == "0xabc"
    assert first["page"] == "2"
    assert sent_params(client, 1)["action"] == "tokennfttx"
