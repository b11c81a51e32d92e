"""Upbit REST adapter implementing the exchange collaborator interface."""

import json
import socket
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

import structlog

from ..config.defaults import ExchangeParams
from ..config.loader import ExchangeCredentials
from ..data.models import SignalKind
from ..errors import (
    ExchangeError,
    ExternalFetchError,
    MalformedDataError,
    OrderSubmissionError,
)
from .auth import build_query_string, create_access_token
from .base import Account, ExchangeClient, Market, Order, order_side_for
from .markets import filter_safe_markets

logger = structlog.get_logger(__name__)

USER_AGENT = "tradebot/0.1"


class UpbitAPIError(ExchangeError):
    """Transport or HTTP-level failure talking to the Upbit API."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class UpbitClient(ExchangeClient):
    """Upbit Open API client for tickers, balances and limit orders."""

    def __init__(self, server_url: str = "https://api.upbit.com",
                 credentials: Optional[ExchangeCredentials] = None,
                 timeout_seconds: float = 10.0):
        parsed = urlparse(server_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid server URL: {server_url}")

        self.server_url = server_url.rstrip("/")
        self.credentials = credentials
        self.timeout_seconds = timeout_seconds
        self.logger = logger

    @classmethod
    def from_config(cls, params: ExchangeParams,
                    credentials: Optional[ExchangeCredentials] = None) -> "UpbitClient":
        return cls(
            server_url=params.server_url,
            credentials=credentials,
            timeout_seconds=params.timeout_seconds,
        )

    def fetch_current_price(self, market: str) -> float:
        """Fetch the latest trade price for a market."""
        if not market:
            raise ExternalFetchError("market parameter is empty", resource="ticker")

        try:
            tickers = self._request("GET", "/v1/ticker", query={"markets": market})
        except UpbitAPIError as e:
            raise ExternalFetchError(
                f"Ticker request failed: {e}",
                resource="ticker",
                status_code=e.status_code,
                context={"market": market}
            ) from e

        if not isinstance(tickers, list) or not tickers:
            raise ExternalFetchError(
                f"No price data available for market: {market}",
                resource="ticker",
                context={"market": market}
            )

        trade_price = tickers[0].get("trade_price") if isinstance(tickers[0], dict) else None
        if isinstance(trade_price, bool) or not isinstance(trade_price, (int, float)) \
                or trade_price <= 0:
            raise ExternalFetchError(
                f"Invalid price data (zero or negative) for market: {market}",
                resource="ticker",
                context={"market": market, "trade_price": trade_price}
            )

        self.logger.debug("Fetched current price", market=market, price=trade_price)
        return float(trade_price)

    def fetch_balance(self) -> list[Account]:
        """Fetch all account balances."""
        try:
            payload = self._request("GET", "/v1/accounts", authenticated=True)
        except UpbitAPIError as e:
            raise ExternalFetchError(
                f"Accounts request failed: {e}",
                resource="accounts",
                status_code=e.status_code
            ) from e

        if not isinstance(payload, list):
            raise ExternalFetchError(
                "Accounts response is not a list",
                resource="accounts",
                context={"response": str(payload)[:100]}
            )

        try:
            return [Account.from_payload(entry) for entry in payload]
        except MalformedDataError as e:
            raise ExternalFetchError(
                f"Malformed accounts response: {e}",
                resource="accounts"
            ) from e

    def submit_order(self, side: SignalKind, market: str, price: float, volume: float) -> Order:
        """Submit a limit order for a directional signal."""
        order_side = order_side_for(side)

        params = {
            "market": market,
            "side": order_side.value,
            "volume": f"{volume:.8f}",
            "price": f"{price:.2f}",
            "ord_type": "limit",
        }

        try:
            payload = self._request(
                "POST", "/v1/orders",
                form=params,
                authenticated=True,
                expected_status=(200, 201)
            )
            order = Order.from_payload(payload)
        except (UpbitAPIError, MalformedDataError) as e:
            raise OrderSubmissionError(
                f"Order submission failed: {e}",
                market=market,
                side=order_side.value,
                status_code=getattr(e, "status_code", None),
                context={"price": params["price"], "volume": params["volume"]}
            ) from e

        self.logger.info(
            "Order submitted",
            market=market,
            side=order_side.value,
            price=params["price"],
            volume=params["volume"],
            order_uuid=order.uuid,
            state=order.state
        )
        return order

    def cancel_order(self, order_uuid: str) -> Order:
        """Cancel an open order by UUID."""
        try:
            payload = self._request(
                "DELETE", "/v1/order",
                query={"uuid": order_uuid},
                authenticated=True
            )
            order = Order.from_payload(payload)
        except (UpbitAPIError, MalformedDataError) as e:
            raise OrderSubmissionError(
                f"Failed to cancel order {order_uuid}: {e}",
                status_code=getattr(e, "status_code", None),
                context={"order_uuid": order_uuid}
            ) from e

        self.logger.info("Order cancelled", order_uuid=order_uuid, state=order.state)
        return order

    def fetch_markets(self, safe_only: bool = True) -> list[Market]:
        """List markets, by default only those without warning flags."""
        try:
            payload = self._request("GET", "/v1/market/all", query={"is_details": "true"})
        except UpbitAPIError as e:
            raise ExternalFetchError(
                f"Market list request failed: {e}",
                resource="markets",
                status_code=e.status_code
            ) from e

        if not isinstance(payload, list):
            raise ExternalFetchError("Market list response is not a list", resource="markets")

        try:
            markets = [Market.from_payload(entry) for entry in payload]
        except MalformedDataError as e:
            raise ExternalFetchError(f"Malformed market list: {e}", resource="markets") from e

        return filter_safe_markets(markets) if safe_only else markets

    def _request(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, str]] = None,
        form: Optional[dict[str, str]] = None,
        authenticated: bool = False,
        expected_status: tuple[int, ...] = (200,)
    ) -> Any:
        """Perform an HTTP request and decode the JSON response."""
        url = self.server_url + path
        if query:
            url += "?" + build_query_string(query)

        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

        data = None
        if form is not None:
            data = build_query_string(form).encode("utf-8")
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        if authenticated:
            if self.credentials is None:
                raise UpbitAPIError(f"Credentials required for {method} {path}")
            token = create_access_token(
                self.credentials.access_key,
                self.credentials.secret_key,
                form or query
            )
            headers["Authorization"] = f"Bearer {token}"

        req = Request(url, data=data, headers=headers, method=method)

        try:
            with urlopen(req, timeout=self.timeout_seconds) as response:
                status = response.getcode()
                body = response.read().decode("utf-8")
        except HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            self.logger.warning(
                "Upbit API returned error status",
                method=method,
                path=path,
                status=e.code,
                body=error_body[:200]
            )
            raise UpbitAPIError(
                f"API returned status {e.code}: {error_body[:200]}",
                status_code=e.code
            ) from e
        except (URLError, socket.timeout, OSError) as e:
            raise UpbitAPIError(f"API request failed: {e}") from e

        if status not in expected_status:
            raise UpbitAPIError(
                f"API returned unexpected status {status}: {body[:200]}",
                status_code=status
            )

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise UpbitAPIError(
                f"Failed to decode response: {e}",
                status_code=status
            ) from e
