# =============================================================================
# insumer/models.py  —  Per-call Data Structures
# =============================================================================
#
# Three small dataclasses describe everything that exists during one tool
# invocation.  All of them are created when the call starts and discarded
# when it ends; nothing here is cached or persisted.
#
#   ToolRequest     validated input          (schemas.py produces it)
#   HttpCall        the one HTTP request     (catalog.py builds it)
#   ResultEnvelope  the relayed outcome      (client.py returns it)
# =============================================================================

import json
from dataclasses import dataclass, field
from typing import Any, Optional


# -----------------------------------------------------------------------------
# ToolRequest: validated arguments for one named operation
# -----------------------------------------------------------------------------
# `arguments` uses the wire (camelCase) names.  Optional fields the caller
# left out are absent from the mapping; fields the caller explicitly set to
# null are present with a None value.  The two mean different things to the
# API ("leave unchanged" vs "remove"), so they must never be conflated.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolRequest:
    """Input that passed schema validation for `operation`."""

    operation: str
    arguments: dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# HttpCall: exactly one outbound request
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class HttpCall:
    """Concrete HTTP request derived from a ToolRequest."""

    method: str                               # "GET", "POST", "PUT"
    path: str                                 # "/merchants/acme/tokens"
    params: dict[str, str] = field(default_factory=dict)
    json: Optional[dict[str, Any]] = None     # None = no request body
    authenticated: bool = True                # attach X-API-Key


# -----------------------------------------------------------------------------
# ResultEnvelope: what goes back to the agent
# -----------------------------------------------------------------------------
# The InsumerAPI answers with {ok, data?, error?, meta?}.  We lift those four
# fields out for convenience but keep the parsed `body` untouched; the text
# relayed to the agent is always the body itself, pretty-printed.
#
# Failures produced locally (validation, missing key, transport) use the same
# shape so the agent sees one format regardless of where a call stopped.
# -----------------------------------------------------------------------------
@dataclass
class ResultEnvelope:
    """Uniform outcome of one tool invocation."""

    ok: bool
    data: Any = None
    error: Any = None
    meta: Any = None
    body: Any = None                          # verbatim JSON relayed to the caller
    status_code: Optional[int] = None         # None when no response was received

    @classmethod
    def from_upstream(cls, body: Any, ok: bool, status_code: int) -> "ResultEnvelope":
        """Wrap a parsed upstream body without altering it."""
        if isinstance(body, dict) and "ok" in body:
            return cls(
                ok=ok,
                data=body.get("data"),
                error=body.get("error"),
                meta=body.get("meta"),
                body=body,
                status_code=status_code,
            )
        # Raw (non-enveloped) responses such as the JWKS document.
        return cls(
            ok=ok,
            data=body if ok else None,
            error=None if ok else body,
            body=body,
            status_code=status_code,
        )

    @classmethod
    def failure(cls, error: Any, status_code: Optional[int] = None) -> "ResultEnvelope":
        """Build a failure envelope for a call that never got a usable answer."""
        return cls(
            ok=False,
            error=error,
            body={"ok": False, "error": error},
            status_code=status_code,
        )

    @property
    def is_error(self) -> bool:
        return not self.ok

    def to_text(self) -> str:
        """The relayed payload: the body as indented JSON."""
        return json.dumps(self.body, indent=2, ensure_ascii=False)
