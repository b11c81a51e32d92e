"""
Trading controller.

Owns the price window and drives the periodic evaluation cycle:
Price Fetch → Window → Indicators → Signal → Balance → Sizing → Order

A single background worker runs one cycle per tick. Every read or mutation
of the window and of the controller state happens under one exclusive
lock, and a cycle holds that lock from price fetch through order
submission, so cycles are strictly sequential and status reads never see
a half-updated window.
"""

import threading
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from .config.defaults import AppConfig, get_default_config
from .data.models import PriceWindow, TradeSignal
from .errors import (
    DataQualityError,
    ExchangeError,
    InsufficientDataError,
    InvalidSignalError,
    OrderSubmissionError,
    SystemFailureError,
)
from .exchange.base import ExchangeClient, Order
from .logging.config import get_cycle_logger, get_state_logger, log_cycle_skip, log_state_transition
from .risk.manager import RiskManager
from .signals.generator import SignalGenerator

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)
cycle_logger = get_cycle_logger(__name__)


class ControllerPhase(str, Enum):
    """Controller lifecycle states."""
    IDLE = "idle"
    RUNNING = "running"


class CycleOutcome(str, Enum):
    """How an evaluation cycle ended."""
    CANCELLED = "cancelled"
    FETCH_FAILED = "fetch_failed"
    INSUFFICIENT_DATA = "insufficient_data"
    HOLD = "hold"
    NO_BALANCE = "no_balance"
    VOLUME_TOO_SMALL = "volume_too_small"
    INVALID_SIGNAL = "invalid_signal"
    ORDER_FAILED = "order_failed"
    ORDER_SUBMITTED = "order_submitted"
    FAILED = "failed"


@dataclass(frozen=True)
class CycleResult:
    """Result of one evaluation cycle."""
    outcome: CycleOutcome
    signal: Optional[TradeSignal] = None
    order: Optional[Order] = None
    error: Optional[Exception] = None

    @property
    def order_submitted(self) -> bool:
        return self.outcome == CycleOutcome.ORDER_SUBMITTED


@dataclass
class ControllerState:
    """Mutable controller state; guarded by the controller lock."""
    running: bool = False
    cancel_token: Optional[threading.Event] = None
    worker: Optional[threading.Thread] = None
    last_outcome: Optional[CycleOutcome] = None

    @property
    def phase(self) -> ControllerPhase:
        return ControllerPhase.RUNNING if self.running else ControllerPhase.IDLE


class TradingController:
    """
    Start/stop state machine around the periodic evaluation cycle.

    Stopping is cooperative: it prevents any further cycle from starting
    but does not interrupt or join a cycle already in progress.
    """

    def __init__(
        self,
        exchange: ExchangeClient,
        config: Optional[AppConfig] = None,
        signal_generator: Optional[SignalGenerator] = None,
        risk_manager: Optional[RiskManager] = None,
    ) -> None:
        self.config = config or get_default_config()
        self.exchange = exchange
        self.signal_generator = signal_generator or SignalGenerator(self.config.strategy)
        self.risk_manager = risk_manager or RiskManager(self.config.risk)

        self.market = self.config.exchange.market
        self.settlement_currency = self.config.exchange.settlement_currency

        self._lock = threading.Lock()
        self._window = PriceWindow(self.config.window.capacity)
        self._state = ControllerState()

        self.logger = logger
        self.state_logger = state_logger
        self.cycle_logger = cycle_logger.bind(market=self.market)

        self.logger.info(
            "Trading controller initialized",
            market=self.market,
            window_capacity=self._window.capacity,
            min_data_points=self.signal_generator.min_data_points
        )

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._state.running

    def start(self, interval: Optional[float] = None) -> bool:
        """
        Transition to RUNNING and begin the periodic cycle.

        Args:
            interval: Seconds between cycles; defaults to the configured interval

        Returns:
            True if the controller was started, False if it was already running
        """
        interval = self.config.controller.interval_seconds if interval is None else interval
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")

        with self._lock:
            if self._state.running:
                self.state_logger.info("Trading controller is already running")
                return False

            cancel_token = threading.Event()
            worker = threading.Thread(
                target=self._run_loop,
                args=(cancel_token, interval),
                name=f"trading-loop-{self.market}",
                daemon=True,
            )
            self._state.running = True
            self._state.cancel_token = cancel_token
            self._state.worker = worker

            log_state_transition(
                self.state_logger,
                from_state=ControllerPhase.IDLE.value,
                to_state=ControllerPhase.RUNNING.value,
                trigger="start",
                context={"interval_seconds": interval, "market": self.market}
            )
            worker.start()

        return True

    def stop(self) -> bool:
        """
        Cancel the periodic cycle and transition to IDLE.

        Returns:
            True if the controller was stopped, False if it was already idle
        """
        with self._lock:
            if not self._state.running:
                self.state_logger.debug("Trading controller is not running")
                return False

            self._cancel_locked(trigger="stop")

        return True

    def current_status(self) -> dict[str, Any]:
        """Snapshot of the controller state for status queries."""
        with self._lock:
            return {
                "running": self._state.running,
                "state": self._state.phase.value,
                "market": self.market,
                "strategy_parameters": asdict(self.signal_generator.params),
                "window_size": len(self._window),
                "last_price": self._window.latest,
                "last_outcome": (self._state.last_outcome.value
                                 if self._state.last_outcome else None),
            }

    def window_snapshot(self) -> tuple[float, ...]:
        """Ordered copy of the current price window."""
        with self._lock:
            return self._window.as_slice()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the current worker to exit.

        Returns:
            True if no worker is alive afterwards
        """
        with self._lock:
            worker = self._state.worker
        if worker is None:
            return True
        if worker is not threading.current_thread():
            worker.join(timeout)
        return not worker.is_alive()

    def run_cycle(self, cancel_token: Optional[threading.Event] = None) -> CycleResult:
        """
        Execute one evaluation cycle under the controller lock.

        Every failure is contained here: the result describes how the cycle
        ended and nothing is raised to the caller.

        Args:
            cancel_token: Token of the worker driving this cycle, if any

        Returns:
            CycleResult describing the outcome
        """
        with self._lock:
            if cancel_token is not None and cancel_token.is_set():
                return CycleResult(CycleOutcome.CANCELLED)

            try:
                result = self._evaluate_locked()
            except Exception as e:
                self.cycle_logger.exception(
                    "Unexpected error during trading cycle",
                    error=str(e),
                    error_type=type(e).__name__
                )
                result = CycleResult(CycleOutcome.FAILED, error=e)

            self._state.last_outcome = result.outcome
            return result

    def _run_loop(self, cancel_token: threading.Event, interval: float) -> None:
        """Background worker: one cycle per tick until the token is cancelled."""
        self.state_logger.info("Trading loop started", interval_seconds=interval)

        # wait() returns True as soon as the token is cancelled
        while not cancel_token.wait(interval):
            self.run_cycle(cancel_token)

        self.state_logger.info("Trading stopped")

    def _cancel_locked(self, trigger: str) -> None:
        if self._state.cancel_token is not None:
            self._state.cancel_token.set()

        self._state.running = False
        self._state.cancel_token = None

        log_state_transition(
            self.state_logger,
            from_state=ControllerPhase.RUNNING.value,
            to_state=ControllerPhase.IDLE.value,
            trigger=trigger,
            context={"market": self.market}
        )

    def _evaluate_locked(self) -> CycleResult:
        """Cycle body; the caller holds the lock."""
        self.cycle_logger.info("Starting trade cycle")

        # 1. Current price
        try:
            current_price = self.exchange.fetch_current_price(self.market)
            self._window.append(current_price)
        except (ExchangeError, DataQualityError) as e:
            log_cycle_skip(
                self.cycle_logger,
                reason="price_unavailable",
                stage="fetch_price",
                context={"error": str(e), "error_type": type(e).__name__},
                is_error=True
            )
            return CycleResult(CycleOutcome.FETCH_FAILED, error=e)

        self.cycle_logger.debug("Current price", price=current_price)

        # 2. Enough samples for the slowest indicator
        prices = self._window.as_slice()
        required = self.signal_generator.min_data_points
        if len(prices) < required:
            log_cycle_skip(
                self.cycle_logger,
                reason="insufficient_data",
                stage="window",
                context={"available": len(prices), "required": required}
            )
            return CycleResult(CycleOutcome.INSUFFICIENT_DATA)

        # 3. Technical analysis
        try:
            signal = self.signal_generator.analyze(prices)
        except InsufficientDataError as e:
            log_cycle_skip(
                self.cycle_logger,
                reason="insufficient_data",
                stage="analyze",
                context={"available": e.available_count, "required": e.required_count}
            )
            return CycleResult(CycleOutcome.INSUFFICIENT_DATA, error=e)

        self.cycle_logger.debug("Trade signal", **signal.to_dict())

        if not signal.is_directional:
            self.cycle_logger.debug("No trade signal, holding position")
            return CycleResult(CycleOutcome.HOLD, signal=signal)

        # 4. Balance in the settlement currency
        try:
            balance = self._settlement_balance()
        except (ExchangeError, DataQualityError) as e:
            log_cycle_skip(
                self.cycle_logger,
                reason="balance_unavailable",
                stage="fetch_balance",
                context={"error": str(e), "error_type": type(e).__name__},
                is_error=True
            )
            return CycleResult(CycleOutcome.FETCH_FAILED, signal=signal, error=e)

        if balance is None or balance <= 0:
            log_cycle_skip(
                self.cycle_logger,
                reason="no_balance",
                stage="fetch_balance",
                context={"currency": self.settlement_currency, "balance": balance},
                is_error=True
            )
            return CycleResult(CycleOutcome.NO_BALANCE, signal=signal)

        self.cycle_logger.debug(
            "Available balance", balance=balance, currency=self.settlement_currency
        )

        # 5. Position sizing
        volume = self.risk_manager.size_position(signal, balance, current_price)
        if volume <= 0:
            self.cycle_logger.debug("Calculated trade volume is too small", volume=volume)
            return CycleResult(CycleOutcome.VOLUME_TOO_SMALL, signal=signal)

        sized_signal = signal.with_volume(volume)

        # 6. Order hand-off
        try:
            order = self.exchange.submit_order(
                sized_signal.kind, self.market, sized_signal.price, sized_signal.volume
            )
        except InvalidSignalError as e:
            self.cycle_logger.error(
                "Invalid signal reached order step",
                signal_kind=e.signal_kind,
                error=str(e)
            )
            return CycleResult(CycleOutcome.INVALID_SIGNAL, signal=sized_signal, error=e)
        except (OrderSubmissionError, ExchangeError, SystemFailureError) as e:
            self.cycle_logger.error(
                "Error executing trade",
                error=str(e),
                error_type=type(e).__name__,
                **sized_signal.to_dict()
            )
            return CycleResult(CycleOutcome.ORDER_FAILED, signal=sized_signal, error=e)

        self.cycle_logger.info(
            "Order executed",
            order_uuid=order.uuid,
            side=order.side,
            state=order.state,
            **sized_signal.to_dict()
        )
        return CycleResult(CycleOutcome.ORDER_SUBMITTED, signal=sized_signal, order=order)

    def _settlement_balance(self) -> Optional[float]:
        """Free balance in the settlement currency, None if no such account."""
        for account in self.exchange.fetch_balance():
            if account.currency == self.settlement_currency:
                return account.available
        return None
