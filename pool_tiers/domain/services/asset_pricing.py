from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from pool_tiers.domain.entities.pool_tier import NATIVE_ASSET


PRICING_TABLE_VERSION = "v1"

# Placeholder prices, not a price feed.
DEFAULT_NATIVE_USD_MULTIPLIER = Decimal("0.12")
DEFAULT_OTHER_USD_MULTIPLIER = Decimal("0.1")
DEFAULT_STABLECOIN_MARKERS = ("USDC",)


@dataclass(frozen=True)
class AssetPricingTable:
    """Maps an asset identifier to the USD multiplier used to value its reserve.

    Lookup order: exact overrides, the native asset, stablecoin markers
    (substring match, 1:1 with USD), then the conservative default.
    """

    version: str = PRICING_TABLE_VERSION
    native_multiplier: Decimal = DEFAULT_NATIVE_USD_MULTIPLIER
    other_multiplier: Decimal = DEFAULT_OTHER_USD_MULTIPLIER
    stablecoin_markers: tuple[str, ...] = DEFAULT_STABLECOIN_MARKERS
    overrides: dict[str, Decimal] = field(default_factory=dict)

    def multiplier_for(self, asset: str) -> Decimal:
        override = self.overrides.get(asset)
        if override is not None:
            return override
        if asset == NATIVE_ASSET:
            return self.native_multiplier
        if any(marker in asset for marker in self.stablecoin_markers):
            return Decimal("1")
        return self.other_multiplier


def build_pricing_table(
    *,
    native_multiplier: Decimal | None = None,
    other_multiplier: Decimal | None = None,
    stablecoin_markers: tuple[str, ...] | None = None,
    overrides: dict | None = None,
) -> AssetPricingTable:
    return AssetPricingTable(
        native_multiplier=native_multiplier
        if native_multiplier is not None
        else DEFAULT_NATIVE_USD_MULTIPLIER,
        other_multiplier=other_multiplier
        if other_multiplier is not None
        else DEFAULT_OTHER_USD_MULTIPLIER,
        stablecoin_markers=stablecoin_markers or DEFAULT_STABLECOIN_MARKERS,
        overrides={str(key): Decimal(str(value)) for key, value in (overrides or {}).items()},
    )
