# =============================================================================
# insumer/schemas.py  —  Tool Input Schemas (the "shapes" of every call)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares, with pydantic, the input each InsumerAPI tool accepts.  The
#   catalog (catalog.py) pairs every operation with one of the *Input models
#   below; the models double as the JSON Schema advertised over MCP.
#
# WIRE NAMES:
#   The API and the MCP tool schemas use camelCase (`solanaWallet`,
#   `chainId`).  Python attributes are snake_case and an alias generator
#   maps between the two.  Unknown keys are rejected.
#
# ABSENT vs NULL:
#   Arguments are dumped with exclude_unset=True.  A field the caller left out
#   does not appear in the outbound request; a field the caller set to null
#   does.  configure_tokens(ownToken=null) and configure_settings(
#   usdcPayment=null) rely on this to mean "remove".
#
#   Only those two fields are typed Optional.  Every other optional field
#   defaults to None but rejects an explicit null, so null never reaches the
#   API where it would mean something different from "absent".
#
# CHAIN IDENTIFIERS:
#   A chain is either an EVM chain id (integer) or a named ledger ("solana",
#   "xrpl").  Three different allowed sets exist and each operation uses the
#   one that matches its context (see ChainSet below).
# =============================================================================

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    ValidationError,
    WithJsonSchema,
)
from pydantic.alias_generators import to_camel

Ledger = Literal["solana", "xrpl"]
LEDGERS: tuple[str, ...] = ("solana", "xrpl")


# -----------------------------------------------------------------------------
# ChainSet: one allowed-value set for chain identifiers
# -----------------------------------------------------------------------------
# evm_ids=None means "any integer" (verification accepts every EVM chain the
# API indexes, so the API decides).  Restricted sets also accept their ids as
# numeric strings ("8453") and convert them to integers.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ChainSet:
    """Allowed chain identifiers for one kind of operation."""

    name: str
    evm_ids: Optional[tuple[int, ...]] = None
    ledgers: tuple[str, ...] = LEDGERS

    def allows(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return self.evm_ids is None or value in self.evm_ids
        return value in self.ledgers

    def describe(self) -> str:
        ledgers = ", ".join(repr(name) for name in self.ledgers)
        if self.evm_ids is None:
            return f"Chain identifier: EVM chain ID (integer), {ledgers}"
        ids = ", ".join(str(chain_id) for chain_id in self.evm_ids)
        return f"{self.name.capitalize()} chain: {ids}, {ledgers}"

    def json_schema(self) -> dict[str, Any]:
        if self.evm_ids is None:
            numeric: dict[str, Any] = {"type": "integer"}
            strings = list(self.ledgers)
        else:
            numeric = {"type": "integer", "enum": list(self.evm_ids)}
            strings = [str(chain_id) for chain_id in self.evm_ids] + list(self.ledgers)
        return {
            "anyOf": [numeric, {"type": "string", "enum": strings}],
            "description": self.describe(),
        }


VERIFICATION_CHAINS = ChainSet(name="verification")
ONBOARDING_CHAINS = ChainSet(
    name="onboarding",
    evm_ids=(1, 56, 8453, 43114, 137, 42161, 10, 88888, 1868, 98866, 480),
)
USDC_CHAINS = ChainSet(
    name="USDC",
    evm_ids=(1, 8453, 137, 42161, 10, 56, 43114),
)


def chain_id_type(chain_set: ChainSet) -> Any:
    """Build the annotated pydantic type for chain ids drawn from `chain_set`."""
    numeric_strings = (
        {str(chain_id): chain_id for chain_id in chain_set.evm_ids}
        if chain_set.evm_ids is not None
        else {}
    )

    def _numeric_string_to_int(value: Any) -> Any:
        if isinstance(value, str) and value in numeric_strings:
            return numeric_strings[value]
        return value

    def _check_membership(value: Any) -> Any:
        if not chain_set.allows(value):
            raise ValueError(f"Must be a supported {chain_set.name} chain")
        return value

    return Annotated[
        Union[StrictInt, Ledger],
        BeforeValidator(_numeric_string_to_int),
        AfterValidator(_check_membership),
        WithJsonSchema(chain_set.json_schema()),
    ]


ChainId = chain_id_type(VERIFICATION_CHAINS)
OnboardingChainId = chain_id_type(ONBOARDING_CHAINS)
UsdcChainId = chain_id_type(USDC_CHAINS)


def _number(**constraints: Any) -> Any:
    # Keeps integers as integers (5 stays 5, not 5.0) while allowing decimals.
    # Booleans and numeric strings are rejected.
    return Union[
        Annotated[StrictInt, Field(**constraints)],
        Annotated[StrictFloat, Field(**constraints)],
    ]


DiscountPercent = Annotated[StrictInt, Field(ge=1, le=50, description="Discount percentage (1-50)")]
Decimals = Annotated[StrictInt, Field(ge=0, le=18, description="Token decimals (0-18, default 18)")]
ProofMode = Literal["merkle"]
UsdcAmount = Annotated[_number(ge=5), Field(description="USDC amount sent (minimum 5)")]


class Schema(BaseModel):
    """Base for every tool input: camelCase on the wire, no unknown keys."""

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid")

    def to_arguments(self) -> dict[str, Any]:
        """Dump to wire names, dropping fields the caller never supplied."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# =============================================================================
# Nested objects
# =============================================================================

class Tier(Schema):
    name: str = Field(max_length=30, description="Tier name, e.g. 'Gold', 'Silver'")
    threshold: _number(gt=0) = Field(description="Minimum token balance for this tier")
    discount: DiscountPercent


class TokenConfig(Schema):
    symbol: str = Field(max_length=10, description="Token symbol, e.g. 'UNI'")
    chain_id: OnboardingChainId
    contract_address: str = Field(
        description="Token contract address. For XRPL: use r-address issuer for "
        "trust line tokens, or 'native' for XRP."
    )
    decimals: Decimals = None
    currency: str = Field(
        default=None,
        max_length=3,
        description="XRPL trust line currency code (e.g. 'USD' for RLUSD).",
    )
    tiers: list[Tier] = Field(min_length=1, max_length=4, description="1-4 discount tiers")


class NftCollection(Schema):
    name: str = Field(max_length=50, description="NFT collection name")
    contract_address: str = Field(
        description="NFT contract address. For XRPL: use r-address of the NFT issuer."
    )
    taxon: StrictInt = Field(
        default=None, description="XRPL NFT taxon for filtering by collection. XRPL only."
    )
    chain_id: OnboardingChainId
    discount: DiscountPercent


ConditionType = Literal["token_balance", "nft_ownership", "eas_attestation", "farcaster_id"]
ComplianceTemplate = Literal[
    "coinbase_verified_account",
    "coinbase_verified_country",
    "coinbase_one",
    "gitcoin_passport_score",
    "gitcoin_passport_active",
]


class Condition(Schema):
    """One on-chain check.  Which optional fields matter depends on `type`;
    the API enforces those combinations."""

    type: ConditionType = Field(
        description="token_balance, nft_ownership, eas_attestation, or farcaster_id"
    )
    contract_address: str = Field(
        default=None,
        description="Token or NFT contract address (required for token_balance and nft_ownership)",
    )
    chain_id: ChainId = None
    threshold: _number() = Field(
        default=None, description="Minimum balance required (for token_balance)"
    )
    decimals: Decimals = None
    label: str = Field(default=None, max_length=100, description="Human-readable label")
    schema_id: str = Field(
        default=None,
        description="EAS schema ID (bytes32 hex). Required for eas_attestation unless template is provided.",
    )
    attester: str = Field(default=None, description="Expected attester address")
    indexer: str = Field(default=None, description="EAS indexer contract address")
    template: ComplianceTemplate = Field(
        default=None,
        description="Compliance template name. Use instead of raw schemaId/attester/indexer.",
    )


class WalletEntry(Schema):
    wallet: str = Field(description="EVM wallet address (0x...)")
    solana_wallet: str = Field(default=None, description="Solana wallet address (base58)")
    xrpl_wallet: str = Field(default=None, description="XRPL wallet address (r-address)")


class UsdcPayment(Schema):
    enabled: bool = Field(description="Enable or disable USDC payments")
    evm_address: str = Field(default=None, description="EVM wallet for USDC (0x...)")
    solana_address: str = Field(default=None, description="Solana wallet for USDC")
    xrpl_address: str = Field(default=None, description="XRPL wallet for USDC (r-address)")
    preferred_chain_id: UsdcChainId = None


class LineItem(Schema):
    path: str = Field(description="JSONPath reference to the line item, e.g. '$.line_items[0]'")
    amount: StrictInt = Field(description="Item price in cents")


# =============================================================================
# Operation inputs
# =============================================================================

class NoArguments(Schema):
    pass


class MerchantIdInput(Schema):
    id: str = Field(description="Merchant ID")


class AttestInput(Schema):
    wallet: str = Field(default=None, description="EVM wallet address (0x...)")
    solana_wallet: str = Field(default=None, description="Solana wallet address (base58)")
    xrpl_wallet: str = Field(default=None, description="XRPL wallet address (r-address)")
    proof: ProofMode = Field(
        default=None, description="Set to 'merkle' for EIP-1186 Merkle storage proofs (2 credits)."
    )
    conditions: list[Condition] = Field(
        min_length=1, max_length=10, description="1-10 on-chain conditions to verify"
    )


class WalletTrustInput(Schema):
    wallet: str = Field(description="EVM wallet address (0x...) to profile")
    solana_wallet: str = Field(default=None, description="Solana wallet address (base58)")
    xrpl_wallet: str = Field(default=None, description="XRPL wallet address (r-address)")
    proof: ProofMode = Field(
        default=None, description="Set to 'merkle' for Merkle storage proofs (6 credits)."
    )


class BatchWalletTrustInput(Schema):
    wallets: list[WalletEntry] = Field(
        min_length=1, max_length=10, description="1-10 wallet entries to profile"
    )
    proof: ProofMode = Field(
        default=None, description="Set to 'merkle' for Merkle storage proofs on all wallets."
    )


class VerifyInput(Schema):
    merchant_id: str = Field(description="Merchant ID")
    wallet: str = Field(default=None, description="EVM wallet address (0x...)")
    solana_wallet: str = Field(default=None, description="Solana wallet address (base58)")
    xrpl_wallet: str = Field(default=None, description="XRPL wallet address (r-address)")


class ListMerchantsInput(Schema):
    token: str = Field(default=None, description="Filter by accepted token symbol, e.g. 'UNI'")
    verified: Literal["true", "false"] = Field(
        default=None, description="Filter by domain verification status"
    )
    limit: StrictInt = Field(
        default=None, ge=1, le=200, description="Results per page (default 50, max 200)"
    )
    offset: StrictInt = Field(default=None, ge=0, description="Pagination offset (default 0)")


class ListTokensInput(Schema):
    chain: ChainId = None
    symbol: str = Field(default=None, description="Filter by token symbol")
    type: Literal["token", "nft"] = Field(default=None, description="Filter by asset type")


class CheckDiscountInput(Schema):
    merchant: str = Field(description="Merchant ID")
    wallet: str = Field(default=None, description="EVM wallet address (0x...)")
    solana_wallet: str = Field(default=None, description="Solana wallet address (base58)")
    xrpl_wallet: str = Field(default=None, description="XRPL wallet address (r-address)")


class BuyCreditsInput(Schema):
    tx_hash: str = Field(description="USDC transaction hash")
    chain_id: UsdcChainId
    amount: UsdcAmount


class ConfirmPaymentInput(Schema):
    code: str = Field(description="Verification code from insumer_verify (e.g. INSR-A7K3M)")
    tx_hash: str = Field(description="On-chain transaction hash or Solana signature")
    chain_id: UsdcChainId
    amount: Union[str, StrictInt, StrictFloat] = Field(description="USDC amount sent")


class CreateMerchantInput(Schema):
    company_name: str = Field(max_length=100, description="Company display name")
    company_id: str = Field(
        min_length=2,
        max_length=50,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Unique merchant ID (alphanumeric, dashes, underscores)",
    )
    location: str = Field(default=None, max_length=200, description="City or region")


class ConfigureTokensInput(MerchantIdInput):
    own_token: Optional[TokenConfig] = Field(
        default=None, description="Merchant's own token configuration, or null to remove"
    )
    partner_tokens: list[TokenConfig] = Field(
        default=None, description="Partner token configurations"
    )


class ConfigureNftsInput(MerchantIdInput):
    nft_collections: list[NftCollection] = Field(
        min_length=0, max_length=4, description="NFT collection configurations (0-4)"
    )


class ConfigureSettingsInput(MerchantIdInput):
    discount_mode: Literal["highest", "stack"] = Field(
        default=None,
        description="'highest' uses best single discount, 'stack' adds them together",
    )
    discount_cap: StrictInt = Field(
        default=None, ge=1, le=100, description="Maximum total discount percentage (1-100)"
    )
    usdc_payment: Optional[UsdcPayment] = Field(
        default=None, description="USDC payment settings, or null to disable"
    )


class BuyMerchantCreditsInput(MerchantIdInput):
    tx_hash: str = Field(description="USDC transaction hash")
    chain_id: UsdcChainId
    amount: UsdcAmount


class DomainVerificationInput(MerchantIdInput):
    domain: str = Field(description="Domain to verify (e.g. 'example.com')")


class CommerceDiscountInput(Schema):
    merchant_id: str = Field(description="Merchant ID")
    wallet: str = Field(default=None, description="EVM wallet address (0x...)")
    solana_wallet: str = Field(default=None, description="Solana wallet address (base58)")
    xrpl_wallet: str = Field(default=None, description="XRPL wallet address (r-address)")
    items: list[LineItem] = Field(
        default=None, description="Optional line items for per-item cent-amount allocations"
    )


class ValidateCodeInput(Schema):
    code: str = Field(
        pattern=r"^INSR-[A-Z0-9]{5}$", description="Discount code in INSR-XXXXX format"
    )


# =============================================================================
# Validation helpers
# =============================================================================

def input_json_schema(model: type[Schema]) -> dict[str, Any]:
    """JSON Schema advertised as a tool's inputSchema."""
    return model.model_json_schema(by_alias=True)


def describe_validation_error(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic ValidationError into {field, message, type} issues."""
    issues = []
    for error in exc.errors(include_url=False):
        field = ".".join(str(part) for part in error["loc"]) or "<root>"
        issues.append({"field": field, "message": error["msg"], "type": error["type"]})
    return issues
