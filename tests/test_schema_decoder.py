import pytest

from pipehub.core.exceptions import DecodeError
from pipehub.core.node import MappingList, from_python
from pipehub.decoding.schema_decoder import decode_config
from pipehub.models.config import HostConfig, ServerActionConfig, ServerHTTPConfig


def _doc():
    return {
        "host": [{"endpoint": "google", "handler": "base.Default"}],
        "server": [
            {
                "graceful-shutdown": "10s",
                "http": [{"port": 80}],
                "action": [{"not-found": "base.NotFound", "panic": "base.Panic"}],
            }
        ],
        "pipe": [{"github.com/pipehub/sample": [{"version": "v0.7.0", "alias": "base"}]}],
    }


def test_decode_config_populates_hosts_and_server_and_leaves_pipes_empty():
    cfg = decode_config(from_python(_doc()))

    assert cfg.hosts == (HostConfig(endpoint="google", handler="base.Default"),)
    assert cfg.pipes == ()
    assert len(cfg.servers) == 1
    server = cfg.server
    assert server.graceful_shutdown == "10s"
    assert server.http == (ServerHTTPConfig(port=80),)
    assert server.action == (ServerActionConfig(not_found="base.NotFound", panic="base.Panic"),)


def test_missing_keys_keep_zero_values():
    cfg = decode_config(from_python({"host": [{}], "server": [{}]}))

    assert cfg.hosts == (HostConfig(endpoint="", handler=""),)
    assert cfg.server.graceful_shutdown == ""
    assert cfg.server.http == ()
    assert cfg.server.action == ()


def test_empty_document_decodes_to_empty_config():
    cfg = decode_config(from_python({}))

    assert cfg.hosts == ()
    assert cfg.pipes == ()
    assert cfg.server is None


def test_unrecognized_top_level_keys_are_ignored():
    cfg = decode_config(from_python({"listener": [{"address": ":80"}], "host": [{"endpoint": "a"}]}))

    assert cfg.hosts == (HostConfig(endpoint="a"),)


def test_pipe_subtree_is_not_decoded_generically():
    # Even a malformed pipe value is left to the label recovery stage.
    cfg = decode_config(from_python({"pipe": "github.com/pipehub/sample"}))

    assert cfg.pipes == ()


def test_integer_field_accepts_base10_string():
    cfg = decode_config(from_python({"server": [{"http": [{"port": "8080"}]}]}))

    assert cfg.server.http[0].port == 8080


def test_integer_field_rejects_non_numeric_string():
    with pytest.raises(DecodeError) as exc:
        decode_config(from_python({"server": [{"http": [{"port": "eighty"}]}]}))

    assert exc.value.key == "server[0].http[0].port"
    assert "port" in str(exc.value)


def test_integer_field_rejects_hex_literal():
    with pytest.raises(DecodeError):
        decode_config(from_python({"server": [{"http": [{"port": "0x50"}]}]}))


def test_integer_field_rejects_non_ascii_digits():
    with pytest.raises(DecodeError) as exc:
        decode_config(from_python({"server": [{"http": [{"port": "８０"}]}]}))

    assert exc.value.key == "server[0].http[0].port"


def test_string_field_rejects_integer_scalar():
    with pytest.raises(DecodeError) as exc:
        decode_config(from_python({"host": [{"endpoint": 42}]}))

    assert exc.value.key == "host[0].endpoint"


def test_block_field_requires_mapping_list():
    with pytest.raises(DecodeError) as exc:
        decode_config(from_python({"host": {"endpoint": "google"}}))

    assert exc.value.key == "host"
    assert "mapping list" in str(exc.value)


def test_scalar_field_rejects_block():
    with pytest.raises(DecodeError) as exc:
        decode_config(from_python({"server": [{"graceful-shutdown": [{"value": "10s"}]}]}))

    assert exc.value.key == "server[0].graceful-shutdown"


def test_root_must_be_mapping():
    with pytest.raises(DecodeError, match="<root>"):
        decode_config(MappingList(()))
