import pytest

from etherscan_gateway.chains import (
    FALLBACK_RPC_URLS,
    NATIVE_SYMBOLS,
    BackendChoice,
    is_native_token,
    native_symbol,
    select_backend,
)


@pytest.mark.parametrize("chain_id", ["56", "8453", "43114"])
def test_known_public_rpc_chains_are_fallback_capable(chain_id):
    assert select_backend(chain_id) is BackendChoice.FALLBACK_CAPABLE


@pytest.mark.parametrize("chain_id", ["1", "137", "42161", "", "999999", "056"])
def test_other_chains_are_primary_only(chain_id):
    assert select_backend(chain_id) is BackendChoice.PRIMARY_ONLY


def test_static_tables_are_read_only():
    with pytest.raises(TypeError):
        FALLBACK_RPC_URLS["1"] = "https://example.test"  # type: ignore[index]
    with pytest.raises(TypeError):
        NATIVE_SYMBOLS["1"] = "XYZ"  # type: ignore[index]


def test_native_symbol_defaults_to_eth():
    assert native_symbol("137") == "MATIC"
    assert native_symbol("43114") == "AVAX"
    assert native_symbol("424242") == "ETH"


def test_native_placeholder_matches_case_insensitively():
    assert is_native_token("0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE")
    assert not is_native_token("0xdAC17F958D2ee523a2206206994597C13D831ec7")
    assert not is_native_token("")
