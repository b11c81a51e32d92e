"""Market safety filtering based on exchange warning flags."""

from .base import Market

UNSAFE_CAUTION_TYPES = frozenset({
    "PRICE_FLUCTUATIONS",               # sharp price swings
    "TRADING_VOLUME_SOARING",           # volume spike
    "DEPOSIT_AMOUNT_SOARING",           # deposit spike
    "GLOBAL_PRICE_DIFFERENCES",         # premium vs global markets
    "CONCENTRATION_OF_SMALL_ACCOUNTS",  # few accounts dominate trading
})


def is_market_safe(market: Market) -> bool:
    """True when the market carries no warning and no unsafe caution flag."""
    if market.market_event.warning:
        return False

    return not any(caution in UNSAFE_CAUTION_TYPES for caution in market.market_event.cautions)


def filter_safe_markets(markets: list[Market]) -> list[Market]:
    """Keep only markets that are safe to trade."""
    return [market for market in markets if is_market_safe(market)]
