# =============================================================================
# insumer/client.py  —  Request Dispatcher & Response Relay
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Runs one tool invocation from start to finish:
#
#     raw arguments ──▶ validate ──▶ build HttpCall ──▶ one HTTP round trip
#                          │               │                    │
#                          ▼               ▼                    ▼
#                   VALIDATION_ERROR   missing API key     relay upstream
#                   (no network)       (no network)        JSON as-is
#
#   Every path ends in a ResultEnvelope.  Nothing is retried or cached;
#   the InsumerAPI is the authority on every result it returns.
#
# RESOURCES:
#   A fresh httpx.AsyncClient is opened and closed for every call.  No
#   connection pool or other state is shared between invocations, so
#   concurrent tool calls are independent.  Timeouts are httpx's defaults.
#
# TESTING:
#   Pass `transport=httpx.MockTransport(handler)` to replace the network.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from insumer.catalog import get_operation
from insumer.config import MISSING_KEY_MESSAGE, Settings
from insumer.models import HttpCall, ResultEnvelope
from insumer.schemas import describe_validation_error

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class InsumerClient:
    """Validates tool input, forwards it to the InsumerAPI, relays the answer."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    async def invoke(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> ResultEnvelope:
        """Run the catalog operation `name` with caller-supplied arguments."""
        operation = get_operation(name)

        try:
            request = operation.validate(arguments)
        except ValidationError as exc:
            issues = describe_validation_error(exc)
            logger.info("%s rejected: %d validation issue(s)", name, len(issues))
            return ResultEnvelope.failure(
                {
                    "code": "VALIDATION_ERROR",
                    "message": f"Invalid arguments for {name}",
                    "issues": issues,
                }
            )

        call = operation.build_call(request)
        if call.authenticated and not self.settings.has_api_key:
            return ResultEnvelope.failure(MISSING_KEY_MESSAGE)

        return await self.send(call, enveloped=operation.enveloped)

    async def send(self, call: HttpCall, enveloped: bool = True) -> ResultEnvelope:
        """Issue exactly one HTTP request and relay its response."""
        url = f"{self.settings.base_url}{call.path}"
        logger.debug("%s %s params=%s", call.method, url, call.params)

        try:
            async with httpx.AsyncClient(transport=self._transport) as http:
                response = await http.request(
                    call.method,
                    url,
                    params=call.params,
                    json=call.json,
                    headers=self._headers(call),
                )
        except httpx.HTTPError as exc:
            reason = str(exc) or exc.__class__.__name__
            logger.warning("%s %s failed: %s", call.method, call.path, reason)
            return ResultEnvelope.failure(
                f"Request to InsumerAPI failed ({call.method} {call.path}): {reason}"
            )

        return relay(response, enveloped=enveloped)

    def _headers(self, call: HttpCall) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if call.authenticated:
            headers[API_KEY_HEADER] = self.settings.api_key
        return headers


def relay(response: httpx.Response, enveloped: bool = True) -> ResultEnvelope:
    """Wrap an upstream response without touching its payload.

    Enveloped operations succeed only on a 2xx status with `"ok": true` in
    the body.  Raw operations (the JWKS document) succeed on any 2xx.
    """
    try:
        body = response.json()
    except ValueError:
        excerpt = response.text[:200]
        return ResultEnvelope.failure(
            f"InsumerAPI returned a non-JSON response (HTTP {response.status_code}): {excerpt}",
            status_code=response.status_code,
        )

    if enveloped:
        ok = response.is_success and isinstance(body, dict) and body.get("ok") is True
    else:
        ok = response.is_success

    return ResultEnvelope.from_upstream(body, ok=ok, status_code=response.status_code)
