from pathlib import Path

import pytest
from pytest import raises

from nat64_info.datamodel import Nat64Config
from nat64_info.utils.modeling import parse_yaml
from nat64_info.utils.modeling.errors import DataParsingError, DataValidationError


def test_config_defaults():
    config = Nat64Config()

    assert str(config.discovery.probe_host) == "nat64.jitsi.net"
    assert config.discovery.ttl.seconds() == 60
    assert config.discovery.static_prefix is None
    assert config.resolver.backend == "dnspython"
    assert config.resolver.timeout.seconds() == 5
    assert config.resolver.nameservers is None
    assert config.logging.level == "notice"
    assert config.logging.target == "stderr"


def test_config_dashed_keys():
    config = Nat64Config(
        parse_yaml(
            """
discovery:
  probe-host: ipv4only.arpa
  ttl: 10m
  static-prefix: 64:ff9b::/96
resolver:
  timeout: 1500ms
  nameservers:
    - 192.0.2.53
    - 2001:db8::53
"""
        )
    )

    assert config.discovery.probe_host.punycode() == "ipv4only.arpa"
    assert config.discovery.ttl.seconds() == 600
    assert config.discovery.static_prefix is not None
    assert str(config.discovery.static_prefix.to_prefix()) == "64:ff9b::/96"
    assert config.resolver.timeout.millis() == 1500
    assert [str(ns) for ns in config.resolver.nameservers or []] == ["192.0.2.53", "2001:db8::53"]


def test_config_to_dict():
    source = {"discovery": {"probe-host": "ipv4only.arpa", "ttl": "2m"}, "logging": {"level": "debug"}}
    data = Nat64Config(source).to_dict()

    assert data["discovery"] == {"probe-host": "ipv4only.arpa", "ttl": "2m", "static-prefix": None}
    assert data["logging"] == {"level": "debug", "target": "stderr"}
    assert Nat64Config(data) == Nat64Config(source)


@pytest.mark.parametrize(
    "source",
    [
        {"discovery": {"ttl": "0s"}},
        {"discovery": {"ttl": "60"}},
        {"discovery": {"probe-host": "-invalid-.example"}},
        {"discovery": {"static-prefix": "64:ff9b::"}},
        {"discovery": {"static-prefix": "64:ff9b::/64"}},
        {"discovery": {"unknown": True}},
        {"resolver": {"backend": "carrier-pigeon"}},
        {"resolver": {"timeout": "0ms"}},
        {"resolver": {"nameservers": []}},
        {"resolver": {"nameservers": ["not-an-ip"]}},
        {"resolver": {"backend": "system", "nameservers": ["192.0.2.53"]}},
        {"logging": {"level": "loud"}},
        {"logging": {"target": "file"}},
        {"discovery": "nat64.example.net"},
    ],
)
def test_config_invalid(source):
    with raises(DataValidationError):
        Nat64Config(source)


def test_config_errors_are_aggregated():
    with raises(DataValidationError) as exc:
        Nat64Config({"discovery": {"ttl": "1x", "probe-host": "-bad-"}})
    msg = str(exc.value)
    assert "/discovery/ttl" in msg
    assert "/discovery/probe-host" in msg


@pytest.mark.parametrize(
    "name,text",
    [
        ("config.yaml", "discovery:\n  probe-host: ipv4only.arpa\n"),
        ("config.json", '{"discovery": {"probe-host": "ipv4only.arpa"}}'),
    ],
)
def test_config_from_file(tmp_path: Path, name: str, text: str):
    path = tmp_path / name
    path.write_text(text, encoding="utf8")
    assert str(Nat64Config.from_file(path).discovery.probe_host) == "ipv4only.arpa"


def test_config_from_file_duplicate_keys(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: info\n  level: debug\n", encoding="utf8")
    with raises(DataParsingError):
        Nat64Config.from_file(path)


def test_config_from_missing_file(tmp_path: Path):
    with raises(DataParsingError):
        Nat64Config.from_file(tmp_path / "missing.yaml")
