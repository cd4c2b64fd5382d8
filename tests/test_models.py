"""Tests for evangeline.models and evangeline.config."""

from __future__ import annotations

import dataclasses

import pytest

from evangeline.config import DEFAULT_GATEWAY_URL, ConnectionConfig
from evangeline.errors import InvalidIdentityError
from evangeline.models import FileData, Message, validate_identity


class TestValidateIdentity:
    @pytest.mark.parametrize("identity", ["ab", "evangeline", "x" * 32])
    def test_valid(self, identity: str) -> None:
        assert validate_identity(identity) == identity

    @pytest.mark.parametrize("identity", ["", "a", "x" * 33])
    def test_invalid(self, identity: str) -> None:
        with pytest.raises(InvalidIdentityError) as exc_info:
            validate_identity(identity)
        assert exc_info.value.identity == identity
        assert isinstance(exc_info.value, ValueError)


class TestMessage:
    def test_from_dict_keeps_unknown_fields(self) -> None:
        msg = Message.from_dict({"author": "a", "content": "hi", "id": 42, "attachments": []})

        assert msg.author == "a"
        assert msg.content == "hi"
        assert msg.id == "42"
        assert msg.extra == {"attachments": []}

    def test_to_dict_round_trips_wire_shape(self) -> None:
        data = {"author": "a", "content": "hi", "nonce": "n1"}

        assert Message.from_dict(data).to_dict() == data

    def test_from_dict_tolerates_missing_fields(self) -> None:
        msg = Message.from_dict({})

        assert msg.author == ""
        assert msg.content == ""
        assert msg.id is None


class TestFileData:
    def test_from_dict(self) -> None:
        data = FileData.from_dict(
            {"id": 1234, "name": "cat.png", "bucket": "attachments", "spoiler": True,
             "metadata": {"type": "image", "width": 10, "height": 20}}
        )

        assert data.id == "1234"
        assert data.name == "cat.png"
        assert data.spoiler is True
        assert data.metadata["width"] == 10


class TestConnectionConfig:
    def test_defaults(self) -> None:
        config = ConnectionConfig()

        assert config.gateway_url == DEFAULT_GATEWAY_URL
        assert config.heartbeat_interval == 45.0
        assert config.validate_identity is True
        assert not config.rest_url.endswith("/")

    def test_trailing_slashes_stripped(self) -> None:
        config = ConnectionConfig(rest_url="https://rest.test///", cdn_url="https://cdn.test/")

        assert config.rest_url == "https://rest.test"
        assert config.cdn_url == "https://cdn.test"

    def test_is_immutable(self) -> None:
        config = ConnectionConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.gateway_url = "wss://other/"  # type: ignore[misc]

    def test_rejects_non_positive_heartbeat(self) -> None:
        with pytest.raises(ValueError):
            ConnectionConfig(heartbeat_interval=0)

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EVANGELINE_GATEWAY_URL", "wss://gw.test/")
        monkeypatch.setenv("EVANGELINE_REST_URL", "https://rest.test/")
        monkeypatch.setenv("EVANGELINE_TOKEN", "secret")
        monkeypatch.setenv("EVANGELINE_HEARTBEAT_INTERVAL", "20")
        monkeypatch.setenv("EVANGELINE_VALIDATE_IDENTITY", "false")
        monkeypatch.delenv("EVANGELINE_CDN_URL", raising=False)

        config = ConnectionConfig.from_env()

        assert config.gateway_url == "wss://gw.test/"
        assert config.rest_url == "https://rest.test"
        assert config.cdn_url == ConnectionConfig().cdn_url
        assert config.token == "secret"
        assert config.heartbeat_interval == 20.0
        assert config.validate_identity is False
