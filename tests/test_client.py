from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from conftest import Recorder
from tenderly_plugin import __version__
from tenderly_plugin.core.types import CompilerConfig, TenderlyCompiler, TenderlyContract, TenderlyContractUploadRequest
from tenderly_plugin.service import ServiceResponseError, TenderlyService, TransportError


@pytest.fixture
def request_data():
    return TenderlyContractUploadRequest(
        contracts=[
            TenderlyContract(
                contract_name="Token",
                source="contract Token {}",
                source_path="contracts/Token.sol",
                compiler=TenderlyCompiler(version="0.8.0"),
            )
        ],
        config=CompilerConfig(compiler_version="0.8.0"),
    )


def make_service(config, recorder):
    return TenderlyService(config, transport=httpx.MockTransport(recorder))


def test_headers_carry_version_and_access_key(config, request_data):
    recorder = Recorder()
    asyncio.run(make_service(config, recorder).verify_contracts(request_data))

    sent = recorder.requests[0]
    assert sent.url.host == "api.tenderly.test"
    assert sent.headers["User-Agent"] == f"tenderly-plugin/{__version__}"
    assert sent.headers["X-Access-Key"] == "secret-key"
    assert sent.headers["Content-Type"] == "application/json"


def test_access_key_falls_back_to_environment(config, request_data, monkeypatch):
    monkeypatch.setenv("TENDERLY_ACCESS_KEY", "env-key")
    recorder = Recorder()
    asyncio.run(make_service(config.update(access_key=None), recorder).verify_contracts(request_data))
    assert recorder.requests[0].headers["X-Access-Key"] == "env-key"


def test_no_access_key_header_when_unset(config, request_data, monkeypatch):
    monkeypatch.delenv("TENDERLY_ACCESS_KEY", raising=False)
    recorder = Recorder()
    asyncio.run(make_service(config.update(access_key=None), recorder).verify_contracts(request_data))
    assert "X-Access-Key" not in recorder.requests[0].headers


def test_push_path_includes_username_and_project(config, request_data):
    recorder = Recorder()
    asyncio.run(make_service(config, recorder).push_contracts(request_data, "proj", "bob"))
    assert recorder.requests[0].url.path == "/api/v1/account/bob/project/proj/contracts"
    assert recorder.payload()["contracts"][0]["sourcePath"] == "contracts/Token.sol"


def test_error_status_raises_service_response_error(config, request_data):
    recorder = Recorder(status_code=500, body={"error": "boom"})
    with pytest.raises(ServiceResponseError) as exc_info:
        asyncio.run(make_service(config, recorder).verify_contracts(request_data))
    assert exc_info.value.status_code == 500
    assert "boom" in exc_info.value.msg


def test_connection_failure_raises_transport_error(config, request_data):
    recorder = Recorder(error=httpx.ConnectTimeout("timed out"))
    with pytest.raises(TransportError) as exc_info:
        asyncio.run(make_service(config, recorder).verify_contracts(request_data))
    assert "timed out" in exc_info.value.msg
    assert len(recorder.requests) == 1


def test_success_logs_reported_contracts(config, request_data, caplog):
    recorder = Recorder(body={"contracts": [{"contract_name": "Token"}, {"contractName": "Vault"}]})
    with caplog.at_level(logging.INFO, logger="TenderlyService"):
        asyncio.run(make_service(config, recorder).verify_contracts(request_data))

    assert "successfully verified" in caplog.text
    assert "Token" in caplog.text
    assert "Vault" in caplog.text


def test_non_json_success_body_is_tolerated(config, request_data):
    def handler(request):
        return httpx.Response(200, text="ok")

    service = TenderlyService(config, transport=httpx.MockTransport(handler))
    asyncio.run(service.push_contracts(request_data, "proj", "bob"))
