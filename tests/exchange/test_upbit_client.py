"""Tests for the Upbit REST adapter"""

import io
import json
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError
from urllib.parse import parse_qs

import jwt
import pytest

from tradebot.config.defaults import ExchangeParams
from tradebot.config.loader import ExchangeCredentials
from tradebot.data.models import SignalKind
from tradebot.errors import ExternalFetchError, InvalidSignalError, OrderSubmissionError
from tradebot.exchange.auth import generate_query_hash
from tradebot.exchange.upbit import UpbitClient

SECRET_KEY = "test-secret-key-0123456789abcdef0123456789abcdef"
CREDENTIALS = ExchangeCredentials(access_key="access", secret_key=SECRET_KEY)


def mock_response(payload, status=200):
    """Context-manager response as returned by urlopen"""
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    response.getcode.return_value = status
    response.read.return_value = json.dumps(payload).encode("utf-8")
    return response


def http_error(code, body=b'{"error": {"message": "rejected"}}'):
    return HTTPError("https://api.upbit.com", code, "error", {}, io.BytesIO(body))


@pytest.fixture
def mock_urlopen():
    with patch("tradebot.exchange.upbit.urlopen") as mocked:
        yield mocked


@pytest.fixture
def client():
    return UpbitClient("https://api.upbit.com", credentials=CREDENTIALS, timeout_seconds=5.0)


def sent_request(mock_urlopen):
    args, kwargs = mock_urlopen.call_args
    return args[0], kwargs


class TestConstruction:
    """Test client setup"""

    def test_invalid_url(self):
        with pytest.raises(ValueError):
            UpbitClient("not-a-url")

    def test_from_config(self):
        params = ExchangeParams(server_url="https://example.test/", timeout_seconds=3.0)
        client = UpbitClient.from_config(params, CREDENTIALS)
        assert client.server_url == "https://example.test"
        assert client.timeout_seconds == 3.0
        assert client.credentials is CREDENTIALS


class TestFetchCurrentPrice:
    """Test ticker requests"""

    def test_returns_trade_price(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response([{"market": "KRW-BTC", "trade_price": 50000000}])

        assert client.fetch_current_price("KRW-BTC") == 50000000.0

        request, kwargs = sent_request(mock_urlopen)
        assert request.full_url == "https://api.upbit.com/v1/ticker?markets=KRW-BTC"
        assert request.get_method() == "GET"
        assert request.get_header("Authorization") is None
        assert kwargs["timeout"] == 5.0

    def test_empty_market(self, client, mock_urlopen):
        with pytest.raises(ExternalFetchError):
            client.fetch_current_price("")
        mock_urlopen.assert_not_called()

    def test_empty_response(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response([])
        with pytest.raises(ExternalFetchError, match="No price data"):
            client.fetch_current_price("KRW-BTC")

    @pytest.mark.parametrize("trade_price", [0, -1, None, "100"])
    def test_invalid_price(self, client, mock_urlopen, trade_price):
        mock_urlopen.return_value = mock_response([{"trade_price": trade_price}])
        with pytest.raises(ExternalFetchError):
            client.fetch_current_price("KRW-BTC")

    def test_http_error(self, client, mock_urlopen):
        mock_urlopen.side_effect = http_error(500)
        with pytest.raises(ExternalFetchError) as exc_info:
            client.fetch_current_price("KRW-BTC")
        assert exc_info.value.status_code == 500

    def test_network_error(self, client, mock_urlopen):
        mock_urlopen.side_effect = URLError("connection refused")
        with pytest.raises(ExternalFetchError):
            client.fetch_current_price("KRW-BTC")

    def test_invalid_json(self, client, mock_urlopen):
        response = mock_response([])
        response.read.return_value = b"<html>"
        mock_urlopen.return_value = response
        with pytest.raises(ExternalFetchError):
            client.fetch_current_price("KRW-BTC")


class TestFetchBalance:
    """Test account requests"""

    def test_returns_accounts(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response([
            {"currency": "KRW", "balance": "100000.0", "locked": "0", "avg_buy_price": "0",
             "avg_buy_price_modified": False, "unit_currency": "KRW"},
            {"currency": "BTC", "balance": "0.5", "locked": "0.1", "avg_buy_price": "40000000",
             "avg_buy_price_modified": False, "unit_currency": "KRW"},
        ])

        accounts = client.fetch_balance()

        assert [a.currency for a in accounts] == ["KRW", "BTC"]
        assert accounts[0].available == 100000.0
        assert accounts[1].locked == "0.1"

    def test_signed_request(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response([])
        client.fetch_balance()

        request, _ = sent_request(mock_urlopen)
        assert request.full_url == "https://api.upbit.com/v1/accounts"
        auth = request.get_header("Authorization")
        assert auth.startswith("Bearer ")

        claims = jwt.decode(auth[len("Bearer "):], SECRET_KEY, algorithms=["HS256"])
        assert claims["access_key"] == "access"
        assert "query_hash" not in claims

    def test_requires_credentials(self, mock_urlopen):
        client = UpbitClient("https://api.upbit.com")
        with pytest.raises(ExternalFetchError, match="Credentials required"):
            client.fetch_balance()
        mock_urlopen.assert_not_called()

    def test_unauthorized(self, client, mock_urlopen):
        mock_urlopen.side_effect = http_error(401)
        with pytest.raises(ExternalFetchError) as exc_info:
            client.fetch_balance()
        assert exc_info.value.status_code == 401

    def test_non_list_response(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response({"error": "x"})
        with pytest.raises(ExternalFetchError):
            client.fetch_balance()


class TestSubmitOrder:
    """Test limit order submission"""

    ORDER_RESPONSE = {
        "uuid": "9ca023a5-851b-4fec-9f0a-48cd83c2eaae",
        "side": "bid",
        "ord_type": "limit",
        "price": "50000000.00",
        "state": "wait",
        "market": "KRW-BTC",
        "volume": "0.00100000",
        "remaining_volume": "0.00100000",
        "executed_volume": "0.0",
    }

    def test_buy_order(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response(self.ORDER_RESPONSE, status=201)

        order = client.submit_order(SignalKind.BUY, "KRW-BTC", 50000000.0, 0.001)

        assert order.uuid == self.ORDER_RESPONSE["uuid"]
        assert order.state == "wait"

        request, _ = sent_request(mock_urlopen)
        assert request.full_url == "https://api.upbit.com/v1/orders"
        assert request.get_method() == "POST"

        form = {k: v[0] for k, v in parse_qs(request.data.decode("utf-8")).items()}
        assert form == {
            "market": "KRW-BTC",
            "side": "bid",
            "volume": "0.00100000",
            "price": "50000000.00",
            "ord_type": "limit",
        }

        token = request.get_header("Authorization")[len("Bearer "):]
        claims = jwt.decode(token, SECRET_KEY, algorithms=["HS256"])
        assert claims["query_hash"] == generate_query_hash(form)

    def test_sell_order_side(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response(dict(self.ORDER_RESPONSE, side="ask"))

        order = client.submit_order(SignalKind.SELL, "KRW-BTC", 50000000.0, 0.001)

        request, _ = sent_request(mock_urlopen)
        assert "side=ask" in request.data.decode("utf-8")
        assert order.side == "ask"

    def test_hold_rejected(self, client, mock_urlopen):
        with pytest.raises(InvalidSignalError):
            client.submit_order(SignalKind.HOLD, "KRW-BTC", 100.0, 1.0)
        mock_urlopen.assert_not_called()

    def test_rejected_order(self, client, mock_urlopen):
        mock_urlopen.side_effect = http_error(400)
        with pytest.raises(OrderSubmissionError) as exc_info:
            client.submit_order(SignalKind.BUY, "KRW-BTC", 100.0, 1.0)

        assert exc_info.value.status_code == 400
        assert exc_info.value.side == "bid"
        assert exc_info.value.market == "KRW-BTC"

    def test_unexpected_status(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response(self.ORDER_RESPONSE, status=202)
        with pytest.raises(OrderSubmissionError):
            client.submit_order(SignalKind.BUY, "KRW-BTC", 100.0, 1.0)

    def test_malformed_confirmation(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response({"state": "wait"})
        with pytest.raises(OrderSubmissionError):
            client.submit_order(SignalKind.BUY, "KRW-BTC", 100.0, 1.0)


class TestOtherEndpoints:
    """Test cancellation and market listing"""

    def test_cancel_order(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response(
            dict(TestSubmitOrder.ORDER_RESPONSE, state="cancel")
        )

        order = client.cancel_order("abc")

        request, _ = sent_request(mock_urlopen)
        assert request.get_method() == "DELETE"
        assert request.full_url == "https://api.upbit.com/v1/order?uuid=abc"
        assert order.state == "cancel"

    def test_fetch_markets_filters_flagged(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response([
            {"market": "KRW-BTC", "korean_name": "비트코인", "english_name": "Bitcoin",
             "market_event": {"warning": False, "caution": {"PRICE_FLUCTUATIONS": False}}},
            {"market": "KRW-XYZ", "korean_name": "x", "english_name": "X",
             "market_event": {"warning": True, "caution": {}}},
            {"market": "KRW-ABC", "korean_name": "a", "english_name": "A",
             "market_event": {"warning": False, "caution": {"TRADING_VOLUME_SOARING": True}}},
        ])

        markets = client.fetch_markets()

        assert [m.market for m in markets] == ["KRW-BTC"]
        request, _ = sent_request(mock_urlopen)
        assert request.full_url == "https://api.upbit.com/v1/market/all?is_details=true"

    def test_fetch_all_markets(self, client, mock_urlopen):
        mock_urlopen.return_value = mock_response([
            {"market": "KRW-BTC"},
            {"market": "KRW-XYZ", "market_event": {"warning": True}},
        ])
        assert len(client.fetch_markets(safe_only=False)) == 2
