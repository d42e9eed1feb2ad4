# =============================================================================
# insumer/catalog.py  —  The Operation Catalog (ALL tools in one table)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Lists every InsumerAPI operation exposed as a tool.  Each entry says:
#     - the tool name and the description the agent reads
#     - which input schema validates it (schemas.py)
#     - which HTTP method and path it maps to
#     - where the validated arguments go: query string, JSON body, or nowhere
#     - whether it needs the API key
#     - whether the response uses the {ok, data, error, meta} envelope
#
# PATH FIELDS:
#   A `{name}` placeholder in the path (e.g. "/merchants/{id}/tokens") is
#   filled from the argument of the same name.  That argument is removed from
#   the payload, so a merchant id appears in the URL and never in the body.
#
# TOOL NAMING CONVENTIONS:
#   Every tool is prefixed `insumer_`.  GET operations are advertised as
#   read-only; everything else may spend credits or change merchant state.
# =============================================================================

import string
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional
from urllib.parse import quote

from insumer import schemas
from insumer.models import HttpCall, ToolRequest

Payload = Literal["query", "body", "none"]


@dataclass(frozen=True)
class Operation:
    """One row of the catalog: tool name → schema → HTTP request."""

    name: str
    description: str
    input_model: type[schemas.Schema]
    method: str
    path: str
    payload: Payload = "body"
    authenticated: bool = True
    enveloped: bool = True

    @property
    def read_only(self) -> bool:
        return self.method == "GET"

    @property
    def path_fields(self) -> tuple[str, ...]:
        return tuple(
            field_name
            for _, field_name, _, _ in string.Formatter().parse(self.path)
            if field_name
        )

    def input_schema(self) -> dict[str, Any]:
        return schemas.input_json_schema(self.input_model)

    def validate(self, arguments: Optional[Mapping[str, Any]]) -> ToolRequest:
        """Validate raw caller input.

        Raises:
            pydantic.ValidationError: if any declared constraint fails.
        """
        model = self.input_model.model_validate(dict(arguments or {}))
        return ToolRequest(operation=self.name, arguments=model.to_arguments())

    def build_call(self, request: ToolRequest) -> HttpCall:
        """Translate a validated request into exactly one HTTP call."""
        arguments = dict(request.arguments)
        path = self.path.format(
            **{
                field_name: quote(str(arguments.pop(field_name)), safe="")
                for field_name in self.path_fields
            }
        )

        params: dict[str, str] = {}
        body: Optional[dict[str, Any]] = None
        if self.payload == "query":
            params = {
                key: _query_value(value)
                for key, value in arguments.items()
                if value is not None and value != ""
            }
        elif self.payload == "body":
            body = arguments

        return HttpCall(
            method=self.method,
            path=path,
            params=params,
            json=body,
            authenticated=self.authenticated,
        )


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# The catalog
# =============================================================================

CATALOG: tuple[Operation, ...] = (
    # -------------------------------------------------------------------------
    # Key discovery
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_jwks",
        description=(
            "Get the JWKS (JSON Web Key Set) containing InsumerAPI's ECDSA P-256 public "
            "signing key. Use this to verify attestation signatures without hardcoding "
            "the key. The kid field in attestation responses identifies which key signed "
            "the response. No authentication required."
        ),
        input_model=schemas.NoArguments,
        method="GET",
        path="/jwks",
        payload="none",
        authenticated=False,
        enveloped=False,
    ),
    # -------------------------------------------------------------------------
    # On-chain verification
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_attest",
        description=(
            "Create on-chain verification (attestation). Verify 1-10 conditions (token "
            "balances, NFT ownership, EAS attestations, Farcaster identity) across 32 "
            "chains. Returns ECDSA-signed boolean results with a kid field identifying the "
            "signing key (fetch public key via insumer_jwks). Never exposes actual "
            "balances. Each result includes evaluatedCondition, conditionHash (SHA-256) and "
            "blockNumber/blockTimestamp for RPC chains. Standard mode costs 1 credit. Pass "
            "proof: 'merkle' for EIP-1186 Merkle storage proofs (2 credits). For EAS "
            "attestations, use a compliance template or raw schemaId. For Farcaster, use "
            "type 'farcaster_id'. Use insumer_compliance_templates to list templates."
        ),
        input_model=schemas.AttestInput,
        method="POST",
        path="/attest",
    ),
    Operation(
        name="insumer_compliance_templates",
        description=(
            "List available compliance templates for EAS attestation verification. "
            "Templates provide pre-configured schema IDs, attester addresses, and decoder "
            "contracts for KYC/identity providers (Coinbase Verifications on Base, Gitcoin "
            "Passport on Optimism). Use a template name in insumer_attest conditions "
            "instead of raw EAS parameters. No authentication or credits required."
        ),
        input_model=schemas.NoArguments,
        method="GET",
        path="/compliance/templates",
        payload="none",
        authenticated=False,
    ),
    Operation(
        name="insumer_wallet_trust",
        description=(
            "Generate a structured, ECDSA-signed wallet trust fact profile. Send a wallet "
            "address, get 17 base checks across stablecoins, governance tokens, NFTs, and "
            "staking positions; up to 20 checks with optional Solana and XRPL wallets. "
            "Returns per-dimension pass/fail counts and an overall summary. No score, no "
            "opinion, just verifiable evidence. Costs 3 credits (standard) or 6 credits "
            "(proof: 'merkle')."
        ),
        input_model=schemas.WalletTrustInput,
        method="POST",
        path="/trust",
    ),
    Operation(
        name="insumer_batch_wallet_trust",
        description=(
            "Generate wallet trust fact profiles for up to 10 wallets in a single request. "
            "Each wallet gets an independently ECDSA-signed profile with its own TRST-XXXXX "
            "ID. Supports partial success: failed wallets get error entries while "
            "successful ones return full profiles. Costs 3 credits per successful wallet "
            "(standard) or 6 credits per wallet (proof: 'merkle')."
        ),
        input_model=schemas.BatchWalletTrustInput,
        method="POST",
        path="/trust/batch",
    ),
    Operation(
        name="insumer_verify",
        description=(
            "Create signed discount code (INSR-XXXXX, 30-min expiry) for a wallet at a "
            "merchant. Returns tier and discount percentage, never raw balance amounts. "
            "Consumes 1 merchant credit. If the merchant has Stripe Connect, a coupon is "
            "auto-created."
        ),
        input_model=schemas.VerifyInput,
        method="POST",
        path="/verify",
    ),
    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_list_merchants",
        description=(
            "Browse merchants in the public directory. Filter by accepted token and "
            "verification status. Returns company name, website, tokens accepted, and "
            "discount info."
        ),
        input_model=schemas.ListMerchantsInput,
        method="GET",
        path="/merchants",
        payload="query",
    ),
    Operation(
        name="insumer_get_merchant",
        description=(
            "Get full public merchant profile including token tiers, NFT collections, "
            "discount mode, and verification status."
        ),
        input_model=schemas.MerchantIdInput,
        method="GET",
        path="/merchants/{id}",
        payload="none",
    ),
    Operation(
        name="insumer_list_tokens",
        description=(
            "List all registered tokens and NFT collections in the Insumer registry. "
            "Filter by chain, symbol, or asset type."
        ),
        input_model=schemas.ListTokensInput,
        method="GET",
        path="/tokens",
        payload="query",
    ),
    Operation(
        name="insumer_check_discount",
        description=(
            "Calculate discount for a wallet at a merchant. Checks on-chain balances and "
            "returns tier and discount percentage per token, never raw balance amounts. "
            "Free: does not consume credits."
        ),
        input_model=schemas.CheckDiscountInput,
        method="GET",
        path="/discount/check",
        payload="query",
    ),
    # -------------------------------------------------------------------------
    # Credits
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_credits",
        description=(
            "Check verification credit balance, tier (free/pro/enterprise), and daily rate "
            "limit for the current API key."
        ),
        input_model=schemas.NoArguments,
        method="GET",
        path="/credits",
        payload="none",
    ),
    Operation(
        name="insumer_buy_credits",
        description=(
            "Buy verification credits with USDC. Rate: 25 credits per 1 USDC. Minimum: "
            "5 USDC. Send USDC first, then provide the transaction hash."
        ),
        input_model=schemas.BuyCreditsInput,
        method="POST",
        path="/credits/buy",
    ),
    Operation(
        name="insumer_confirm_payment",
        description=(
            "Confirm USDC payment for a discount code. After calling insumer_verify, "
            "confirm that the USDC payment was made on-chain. The server verifies the "
            "transaction receipt."
        ),
        input_model=schemas.ConfirmPaymentInput,
        method="POST",
        path="/payment/confirm",
    ),
    # -------------------------------------------------------------------------
    # Merchant onboarding
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_create_merchant",
        description=(
            "Create a new merchant. Receives 100 free verification credits. The API key "
            "that creates the merchant owns it. Max 10 merchants per API key."
        ),
        input_model=schemas.CreateMerchantInput,
        method="POST",
        path="/merchants",
    ),
    Operation(
        name="insumer_merchant_status",
        description=(
            "Get full private merchant details: credits, token configs, NFT collections, "
            "directory status, verification status, USDC settings. Owner only."
        ),
        input_model=schemas.MerchantIdInput,
        method="GET",
        path="/merchants/{id}/status",
        payload="none",
    ),
    Operation(
        name="insumer_configure_tokens",
        description=(
            "Configure merchant token discount tiers. Set own token and/or partner tokens. "
            "Max 8 tokens total. Pass ownToken: null to remove the own token. Owner only."
        ),
        input_model=schemas.ConfigureTokensInput,
        method="PUT",
        path="/merchants/{id}/tokens",
    ),
    Operation(
        name="insumer_configure_nfts",
        description=(
            "Configure NFT collections that grant discounts at the merchant. Max 4 "
            "collections. Owner only."
        ),
        input_model=schemas.ConfigureNftsInput,
        method="PUT",
        path="/merchants/{id}/nfts",
    ),
    Operation(
        name="insumer_configure_settings",
        description=(
            "Update merchant settings: discount stacking mode, cap, and USDC payment "
            "configuration. All fields optional; usdcPayment: null disables USDC payments. "
            "Owner only."
        ),
        input_model=schemas.ConfigureSettingsInput,
        method="PUT",
        path="/merchants/{id}/settings",
    ),
    Operation(
        name="insumer_publish_directory",
        description=(
            "Publish (or refresh) the merchant's listing in the public directory. Call "
            "again after updating tokens or settings. Owner only."
        ),
        input_model=schemas.MerchantIdInput,
        method="POST",
        path="/merchants/{id}/directory",
    ),
    Operation(
        name="insumer_buy_merchant_credits",
        description=(
            "Buy merchant verification credits with USDC. Rate: 25 credits per 1 USDC "
            "($0.04/credit). Minimum: 5 USDC. Owner only."
        ),
        input_model=schemas.BuyMerchantCreditsInput,
        method="POST",
        path="/merchants/{id}/credits",
    ),
    # -------------------------------------------------------------------------
    # Domain verification
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_request_domain_verification",
        description=(
            "Request a domain verification token for a merchant. Returns the token and "
            "three verification methods: DNS TXT record, HTML meta tag, or file upload. "
            "After placing the token, call insumer_verify_domain. Verified merchants get "
            "a trust badge in the public directory. Owner only."
        ),
        input_model=schemas.DomainVerificationInput,
        method="POST",
        path="/merchants/{id}/domain-verification",
    ),
    Operation(
        name="insumer_verify_domain",
        description=(
            "Verify domain ownership for a merchant after placing the token from "
            "insumer_request_domain_verification. The server checks DNS TXT, HTML meta "
            "tag, and file upload automatically. Rate limited to 5 attempts per hour. "
            "Owner only."
        ),
        input_model=schemas.MerchantIdInput,
        method="PUT",
        path="/merchants/{id}/domain-verification",
        payload="none",
    ),
    # -------------------------------------------------------------------------
    # Commerce protocol integration
    # -------------------------------------------------------------------------
    Operation(
        name="insumer_acp_discount",
        description=(
            "Check token-holder discount eligibility in OpenAI/Stripe Agentic Commerce "
            "Protocol (ACP) format. Returns coupon objects, applied/rejected arrays, and "
            "per-item allocations compatible with ACP checkout flows. Consumes 1 merchant "
            "credit."
        ),
        input_model=schemas.CommerceDiscountInput,
        method="POST",
        path="/acp/discount",
    ),
    Operation(
        name="insumer_ucp_discount",
        description=(
            "Check token-holder discount eligibility in Google Universal Commerce Protocol "
            "(UCP) format. Returns title, extension field, and applied array compatible "
            "with UCP checkout flows. Consumes 1 merchant credit."
        ),
        input_model=schemas.CommerceDiscountInput,
        method="POST",
        path="/ucp/discount",
    ),
    Operation(
        name="insumer_validate_code",
        description=(
            "Validate an INSR-XXXXX discount code. For merchant backends during ACP/UCP "
            "checkout to confirm code validity, discount percent, and expiry. Returns "
            "valid/invalid status with reason. No authentication required, no credits "
            "consumed. Does not expose wallet or token data."
        ),
        input_model=schemas.ValidateCodeInput,
        method="GET",
        path="/codes/{code}",
        payload="none",
        authenticated=False,
    ),
)

_BY_NAME: dict[str, Operation] = {operation.name: operation for operation in CATALOG}


def get_operation(name: str) -> Operation:
    """Look up a catalog entry by tool name."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown operation: {name}") from None
