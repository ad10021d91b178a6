from basket_governance.observability.redaction import REDACTED, redact_sensitive


def test_redacts_secret_like_keys() -> None:
    payload = {
        "private_key": "abc",
        "rpc_api_key": "xyz",
        "nested": {"deployer_mnemonic": "word word word"},
    }

    redacted = redact_sensitive(payload)

    assert redacted["private_key"] == REDACTED
    assert redacted["rpc_api_key"] == REDACTED
    assert redacted["nested"]["deployer_mnemonic"] == REDACTED


def test_keeps_voting_token_address_visible() -> None:
    address = "0x" + "07" * 20

    redacted = redact_sensitive({"voting_token_address": address, "owner": address})

    assert redacted == {"voting_token_address": address, "owner": address}


def test_masks_key_shaped_hex_values_anywhere() -> None:
    key = "0x" + "ab" * 32

    redacted = redact_sensitive({"note": key, "signers": [key, "0x" + "ab" * 20]})

    assert redacted["note"] == REDACTED
    assert redacted["signers"] == [REDACTED, "0x" + "ab" * 20]
