"""Shared test fixtures for the InsumerAPI adapter tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from insumer.client import InsumerClient
from insumer.config import Settings

Responder = Callable[[httpx.Request], httpx.Response]

TEST_API_KEY = "insr_test_key"

# One valid argument set per catalog operation.
VALID_ARGUMENTS: dict[str, dict[str, Any]] = {
    "insumer_jwks": {},
    "insumer_attest": {
        "wallet": "0xabc",
        "conditions": [
            {"type": "token_balance", "contractAddress": "0xtoken", "chainId": 1, "threshold": 100}
        ],
    },
    "insumer_compliance_templates": {},
    "insumer_wallet_trust": {"wallet": "0xabc"},
    "insumer_batch_wallet_trust": {"wallets": [{"wallet": "0xabc"}]},
    "insumer_verify": {"merchantId": "acme", "wallet": "0xabc"},
    "insumer_list_merchants": {"token": "UNI"},
    "insumer_get_merchant": {"id": "acme"},
    "insumer_list_tokens": {"chain": 8453},
    "insumer_check_discount": {"merchant": "acme", "wallet": "0xabc"},
    "insumer_credits": {},
    "insumer_buy_credits": {"txHash": "0xtx", "chainId": 8453, "amount": 5},
    "insumer_confirm_payment": {
        "code": "INSR-A7K3M",
        "txHash": "0xtx",
        "chainId": "solana",
        "amount": "12.50",
    },
    "insumer_create_merchant": {"companyName": "Acme", "companyId": "acme"},
    "insumer_merchant_status": {"id": "acme"},
    "insumer_configure_tokens": {"id": "acme", "ownToken": None},
    "insumer_configure_nfts": {"id": "acme", "nftCollections": []},
    "insumer_configure_settings": {"id": "acme", "discountMode": "highest"},
    "insumer_publish_directory": {"id": "acme"},
    "insumer_buy_merchant_credits": {"id": "acme", "txHash": "0xtx", "chainId": 1, "amount": 10},
    "insumer_request_domain_verification": {"id": "acme", "domain": "acme.com"},
    "insumer_verify_domain": {"id": "acme"},
    "insumer_acp_discount": {"merchantId": "acme", "wallet": "0xabc"},
    "insumer_ucp_discount": {"merchantId": "acme", "wallet": "0xabc"},
    "insumer_validate_code": {"code": "INSR-AB12C"},
}


class RecordingAPI:
    """Fake InsumerAPI: records every request and answers via `responder`."""

    def __init__(self, responder: Responder | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Responder = responder or (
            lambda request: httpx.Response(200, json={"ok": True, "data": {"echo": request.url.path}})
        )
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def respond_with(self, status_code: int = 200, **kwargs: Any) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def api() -> RecordingAPI:
    """Provide a fresh fake InsumerAPI."""
    return RecordingAPI()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key=TEST_API_KEY)


@pytest.fixture
def client(settings: Settings, api: RecordingAPI) -> InsumerClient:
    """Provide a client with an API key wired to the fake API."""
    return InsumerClient(settings, transport=api.transport)


@pytest.fixture
def keyless_client(api: RecordingAPI) -> InsumerClient:
    """Provide a client deployed without an API key."""
    return InsumerClient(Settings(), transport=api.transport)


@pytest.fixture
def valid_arguments() -> dict[str, dict[str, Any]]:
    return {name: dict(arguments) for name, arguments in VALID_ARGUMENTS.items()}
