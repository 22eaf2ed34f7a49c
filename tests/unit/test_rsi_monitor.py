"""
Unit Tests for the RSI Monitor (aggregation over all trading pairs)

The Binance client and the directory are replaced by in-memory fakes.

Run with:
    pytest tests/unit/test_rsi_monitor.py -v
"""

import asyncio

import pytest

from core.errors import InternalError, UpstreamError
from core.schemas import CategorizedRSI, RSICategory
from services.classifier import classify
from services.rsi_monitor import RSIMonitor

RISING = [100.0 + i for i in range(15)]
FALLING = [100.0 - i for i in range(15)]
ZIGZAG = [10.0, 11.0] * 10


# ============================================
# Fakes
# ============================================

class FakeDirectory:

    def __init__(self, symbols=None, error=None):
        self.symbols = symbols or []
        self.error = error

    async def list_eligible_symbols(self):
        if self.error:
            raise self.error
        return list(self.symbols)


class FakeClient:
    """
    Answers get_closing_prices from a dict; values may be a list of closes,
    an exception to raise, or the string "hang" to never answer.
    """

    def __init__(self, series):
        self.series = series
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_closing_prices(self, symbol, interval, limit=50):
        self.calls.append((symbol, interval, limit))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            value = self.series[symbol]
            if value == "hang":
                await asyncio.Event().wait()
            if isinstance(value, Exception):
                raise value
            return list(value)
        finally:
            self.in_flight -= 1


def make_monitor(series, **kwargs):
    client = FakeClient(series)
    directory = FakeDirectory(list(series))
    return RSIMonitor(directory, client, **kwargs), client


def symbols_in(result: CategorizedRSI):
    return sorted(entry.symbol for category in RSICategory for entry in result.get(category))


# ============================================
# Tests
# ============================================

class TestAggregate:

    @pytest.mark.asyncio
    async def test_empty_directory_returns_all_categories_empty(self):
        monitor, client = make_monitor({})

        result = await monitor.aggregate("1h")

        dumped = result.model_dump()
        assert list(dumped) == [c.value for c in RSICategory]
        assert all(entries == [] for entries in dumped.values())
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_rising_series_lands_above_80(self):
        monitor, _ = make_monitor({"BTCUSDT": RISING})

        result = await monitor.aggregate("1h")

        assert len(result.above80) == 1
        assert result.above80[0].symbol == "BTCUSDT"
        assert result.above80[0].rsi == 100.0
        assert result.total() == 1

    @pytest.mark.asyncio
    async def test_every_entry_is_in_its_range(self):
        monitor, _ = make_monitor({"A": RISING, "B": FALLING, "C": ZIGZAG})

        result = await monitor.aggregate("4h")

        assert result.total() == 3
        for category in RSICategory:
            for entry in result.get(category):
                assert classify(entry.rsi) == category
        assert [e.symbol for e in result.below20] == ["B"]

    @pytest.mark.asyncio
    async def test_interval_and_limit_are_passed_through(self):
        monitor, client = make_monitor({"BTCUSDT": RISING}, kline_limit=50)

        await monitor.aggregate("15m")

        assert client.calls == [("BTCUSDT", "15m", 50)]

    @pytest.mark.asyncio
    async def test_failed_fetch_yields_empty_result(self):
        monitor, _ = make_monitor({"BTCUSDT": UpstreamError("HTTP 400")})

        result = await monitor.aggregate("1h")

        assert result.total() == 0
        assert result.model_dump()["above80"] == []

    @pytest.mark.asyncio
    async def test_short_series_are_dropped(self):
        monitor, _ = make_monitor({
            "NEWUSDT": RISING[:5],
            "FOURTEEN": RISING[:14],   # Passes the 14-point gate, too short for period 14
            "BTCUSDT": RISING,
        })

        result = await monitor.aggregate("1h")

        assert symbols_in(result) == ["BTCUSDT"]

    @pytest.mark.asyncio
    async def test_partial_failures_keep_the_rest(self):
        series = {f"S{i}USDT": ZIGZAG for i in range(10)}
        series["S3USDT"] = UpstreamError("timeout")
        series["S7USDT"] = []
        monitor, _ = make_monitor(series)

        result = await monitor.aggregate("1h")

        assert result.total() == 8
        assert "S3USDT" not in symbols_in(result)
        assert "S7USDT" not in symbols_in(result)

    @pytest.mark.asyncio
    async def test_hung_symbol_times_out_without_blocking_others(self):
        monitor, _ = make_monitor(
            {"SLOWUSDT": "hang", "BTCUSDT": RISING, "ETHUSDT": FALLING},
            symbol_timeout=0.05,
        )

        result = await asyncio.wait_for(monitor.aggregate("1h"), timeout=2)

        assert symbols_in(result) == ["BTCUSDT", "ETHUSDT"]

    @pytest.mark.asyncio
    async def test_fan_out_is_bounded(self):
        series = {f"S{i}USDT": ZIGZAG for i in range(25)}
        monitor, client = make_monitor(series, max_concurrency=4)

        result = await monitor.aggregate("1h")

        assert result.total() == 25
        assert client.max_in_flight <= 4

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_internal_error(self):
        monitor, _ = make_monitor({"BTCUSDT": RISING, "BADUSDT": KeyError("close")})

        with pytest.raises(InternalError, match="BADUSDT"):
            await monitor.aggregate("1h")

    @pytest.mark.asyncio
    async def test_failure_settles_every_task_before_raising(self):
        monitor, client = make_monitor({
            "SLOWUSDT": "hang",
            "BADUSDT": KeyError("close"),
            "WORSEUSDT": KeyError("open"),
        })

        with pytest.raises(InternalError):
            await monitor.aggregate("1h")

        # The hung request was cancelled and unwound, not left running
        assert client.in_flight == 0

    @pytest.mark.asyncio
    async def test_directory_failure_propagates(self):
        monitor = RSIMonitor(FakeDirectory(error=UpstreamError("exchangeInfo down")), FakeClient({}))

        with pytest.raises(UpstreamError):
            await monitor.aggregate("1h")

    def test_non_positive_concurrency_rejected(self):
        with pytest.raises(ValueError):
            RSIMonitor(FakeDirectory(), FakeClient({}), max_concurrency=0)


class TestRounding:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw, rounded, category",
        [
            (19.9961, 20.0, RSICategory.BETWEEN_20_30),
            (19.9949, 19.99, RSICategory.BELOW_20),
            (79.9951, 80.0, RSICategory.ABOVE_80),
            (55.55555, 55.56, RSICategory.BETWEEN_50_60),
        ],
    )
    async def test_value_is_rounded_before_classifying(self, monkeypatch, raw, rounded, category):
        monkeypatch.setattr("services.rsi_monitor.latest_rsi", lambda closes, period: raw)
        monitor, _ = make_monitor({"BTCUSDT": ZIGZAG})

        result = await monitor.aggregate("1h")

        assert [(e.symbol, e.rsi) for e in result.get(category)] == [("BTCUSDT", rounded)]
        assert result.total() == 1
