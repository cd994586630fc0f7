"""
Tests for document loading and the full decode -> validate -> project pipeline.
"""

import json
from pathlib import Path

import pytest

from pipehub.core.exceptions import DecodeError, DurationParseError, ValidationError
from pipehub.loader import load_config, read_document
from pipehub.models.config import PipeConfig
from pipehub.wiring.projections import to_client_config, to_generate_config

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

EXAMPLE_YAML = """\
host:
  - endpoint: google
    handler: base.Default

server:
  - graceful-shutdown: 10s
    http:
      - port: 80
    action:
      - not-found: base.NotFound
        panic: base.Panic

pipe:
  - github.com/pipehub/sample:
      - version: v0.7.0
        alias: base
"""


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def _noop(err):
    return None


def test_example_document_round_trip(tmp_path):
    cfg = load_config(_write(tmp_path, "pipehub.yaml", EXAMPLE_YAML))

    client = to_client_config(cfg, _noop)
    generate = to_generate_config(cfg)

    assert [(h.endpoint, h.handler) for h in client.hosts] == [("google", "base.Default")]
    assert client.server.http.port == 80
    assert client.server.action.not_found == "base.NotFound"
    assert client.server.action.panic == "base.Panic"
    assert [(p.alias, p.path, p.version, p.module) for p in generate.pipes] == [
        ("base", "github.com/pipehub/sample", "v0.7.0", "")
    ]


def test_json_and_yaml_documents_decode_to_the_same_config(tmp_path):
    from_yaml = load_config(_write(tmp_path, "pipehub.yml", EXAMPLE_YAML))
    from_json = load_config(EXAMPLES / "pipehub.json")

    assert from_yaml == from_json


def test_shipped_examples_are_valid():
    cfg = load_config(EXAMPLES / "pipehub.yaml")

    assert cfg.pipes == (
        PipeConfig(import_path="github.com/pipehub/sample", version="v0.7.0", alias="base"),
    )


def test_load_config_accepts_parsed_dict():
    cfg = load_config(config_dict={"host": [{"endpoint": "google", "handler": "base.Default"}]})

    assert cfg.hosts[0].endpoint == "google"
    assert cfg.pipes == ()
    assert cfg.server is None


def test_load_config_requires_a_source():
    with pytest.raises(ValueError, match="config_path or config_dict"):
        load_config()


def test_empty_document_is_empty_config(tmp_path):
    cfg = load_config(_write(tmp_path, "empty.yaml", ""))

    assert cfg.hosts == ()
    assert cfg.pipes == ()
    assert cfg.servers == ()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_document(tmp_path / "missing.yaml")


def test_unsupported_suffix_raises(tmp_path):
    with pytest.raises(ValueError, match="Unsupported config format"):
        read_document(_write(tmp_path, "pipehub.hcl", 'host { endpoint = "google" }'))


def test_duplicate_server_block_fails_validation(tmp_path):
    doc = {"server": [{"http": [{"port": 80}]}, {"http": [{"port": 81}]}]}

    with pytest.raises(ValidationError, match="server"):
        load_config(_write(tmp_path, "pipehub.json", json.dumps(doc)))


def test_unknown_pipe_option_fails_decoding(tmp_path):
    doc = {"pipe": [{"github.com/pipehub/sample": [{"version": "v0.7.0", "verison": "v0.8.0"}]}]}

    with pytest.raises(DecodeError, match="verison"):
        load_config(_write(tmp_path, "pipehub.json", json.dumps(doc)))


def test_pipe_without_options_is_kept(tmp_path):
    cfg = load_config(_write(tmp_path, "pipehub.yaml", "pipe:\n  - github.com/pipehub/sample:\n"))

    assert cfg.pipes == (PipeConfig(import_path="github.com/pipehub/sample"),)
    assert to_generate_config(cfg).pipes[0].path == "github.com/pipehub/sample"


def test_pipe_without_options_is_kept_from_dict():
    cfg = load_config(config_dict={"pipe": [{"github.com/pipehub/sample": None}]})

    assert [p.import_path for p in cfg.pipes] == ["github.com/pipehub/sample"]


def test_float_value_fails_decoding(tmp_path):
    with pytest.raises(DecodeError, match="port"):
        load_config(_write(tmp_path, "pipehub.yaml", "server:\n  - http:\n      - port: 80.5\n"))


def test_malformed_graceful_shutdown_fails_at_load_time(tmp_path):
    with pytest.raises(DurationParseError, match="10 seconds"):
        load_config(_write(tmp_path, "pipehub.yaml", "server:\n  - graceful-shutdown: 10 seconds\n"))


def test_unrecognized_top_level_keys_are_ignored(tmp_path):
    cfg = load_config(_write(tmp_path, "pipehub.yaml", EXAMPLE_YAML + "telemetry:\n  - exporter: stdout\n"))

    assert len(cfg.hosts) == 1
