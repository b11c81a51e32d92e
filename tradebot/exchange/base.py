"""Exchange collaborator interface and response models."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..data.models import SignalKind
from ..errors import InvalidSignalError, MalformedDataError


class OrderSide(str, Enum):
    """Exchange order side."""
    BID = "bid"     # buy
    ASK = "ask"     # sell


def order_side_for(kind: SignalKind) -> OrderSide:
    """Map a directional signal to the exchange order side."""
    if kind == SignalKind.BUY:
        return OrderSide.BID
    if kind == SignalKind.SELL:
        return OrderSide.ASK
    raise InvalidSignalError(
        f"Invalid trade signal type: {getattr(kind, 'value', kind)}",
        signal_kind=str(getattr(kind, "value", kind))
    )


def _parse_float(raw: Any, field_name: str) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise MalformedDataError(
            f"Field '{field_name}' is not numeric: {raw!r}",
            raw_data=str(raw)[:100],
            expected_format="decimal string"
        ) from e


@dataclass(frozen=True)
class Account:
    """Balance of one currency held on the exchange."""
    currency: str
    balance: str
    locked: str = "0"
    avg_buy_price: str = "0"
    avg_buy_price_modified: bool = False
    unit_currency: str = ""

    @property
    def available(self) -> float:
        """Free balance as a float."""
        return _parse_float(self.balance, "balance")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Account":
        if not isinstance(payload, dict) or "currency" not in payload:
            raise MalformedDataError(
                "Account entry missing currency",
                raw_data=str(payload)[:100]
            )
        return cls(
            currency=str(payload["currency"]),
            balance=str(payload.get("balance", "0")),
            locked=str(payload.get("locked", "0")),
            avg_buy_price=str(payload.get("avg_buy_price", "0")),
            avg_buy_price_modified=bool(payload.get("avg_buy_price_modified", False)),
            unit_currency=str(payload.get("unit_currency", "")),
        )


@dataclass(frozen=True)
class Order:
    """Order confirmation returned by the exchange."""
    uuid: str
    side: str
    ord_type: str
    price: Optional[str]
    state: str
    market: str
    volume: Optional[str]
    remaining_volume: Optional[str] = None
    executed_volume: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Order":
        if not isinstance(payload, dict) or "uuid" not in payload:
            raise MalformedDataError(
                "Order response missing uuid",
                raw_data=str(payload)[:100]
            )
        return cls(
            uuid=str(payload["uuid"]),
            side=str(payload.get("side", "")),
            ord_type=str(payload.get("ord_type", "")),
            price=payload.get("price"),
            state=str(payload.get("state", "")),
            market=str(payload.get("market", "")),
            volume=payload.get("volume"),
            remaining_volume=payload.get("remaining_volume"),
            executed_volume=payload.get("executed_volume"),
        )


@dataclass(frozen=True)
class MarketEvent:
    """Exchange warning flags attached to a market."""
    warning: bool = False
    cautions: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Any) -> "MarketEvent":
        if not isinstance(payload, dict):
            return cls()

        caution = payload.get("caution")
        # Caution arrives either as a single type name or a map of flags
        if isinstance(caution, dict):
            cautions = tuple(sorted(name for name, active in caution.items() if active))
        elif isinstance(caution, str) and caution:
            cautions = (caution,)
        else:
            cautions = ()

        return cls(warning=bool(payload.get("warning", False)), cautions=cautions)


@dataclass(frozen=True)
class Market:
    """Tradable market listing."""
    market: str
    korean_name: str = ""
    english_name: str = ""
    market_event: MarketEvent = field(default_factory=MarketEvent)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Market":
        if not isinstance(payload, dict) or "market" not in payload:
            raise MalformedDataError(
                "Market entry missing market code",
                raw_data=str(payload)[:100]
            )
        return cls(
            market=str(payload["market"]),
            korean_name=str(payload.get("korean_name", "")),
            english_name=str(payload.get("english_name", "")),
            market_event=MarketEvent.from_payload(payload.get("market_event")),
        )


class ExchangeClient(ABC):
    """Price, balance and order collaborator used by the trading controller."""

    @abstractmethod
    def fetch_current_price(self, market: str) -> float:
        """
        Fetch the latest trade price.

        Returns:
            Strictly positive price

        Raises:
            ExternalFetchError: price unavailable or invalid
        """

    @abstractmethod
    def fetch_balance(self) -> list[Account]:
        """
        Fetch account balances.

        Raises:
            ExternalFetchError: balances unavailable
        """

    @abstractmethod
    def submit_order(self, side: SignalKind, market: str, price: float, volume: float) -> Order:
        """
        Submit a limit order.

        Raises:
            InvalidSignalError: side is not buy or sell
            OrderSubmissionError: order rejected or transport failed
        """
