"""
Tests for the Monitoring System — non-blocking monitoring, alert
thresholding and deduplication, lifecycle, and metrics.
"""

import asyncio

import pytest

from biaswatch.monitor import (
    GENERIC_RECOMMENDATIONS,
    RECOMMENDATIONS,
    MonitoringConfig,
    MonitoringSystem,
    alert_id_for,
    calculate_priority,
)
from biaswatch.recognizer import PatternRecognizer
from biaswatch.schemas import (
    BiasLocation,
    BiasType,
    DetectedBias,
    Evidence,
    ReasoningChain,
    ReasoningStep,
)


def scenario_chain(chain_id="chain-e"):
    return ReasoningChain(
        id=chain_id,
        steps=[ReasoningStep(id="s1", content="I believe X is true", type="hypothesis")],
        evidence=[Evidence(id="e1", content="Evidence supporting X", relevance=0.9)],
        conclusion="X is definitely true",
    )


def _bias(bias_type, severity, confidence=1.0, reasoning="r"):
    return DetectedBias(
        type=bias_type,
        severity=severity,
        confidence=confidence,
        evidence=["e"],
        location=BiasLocation(step_index=0, reasoning=reasoning),
        explanation="x",
    )


class StubRecognizer(PatternRecognizer):
    """Returns a fixed detection list."""

    def __init__(self, biases):
        super().__init__()
        self._fixed = biases

    def detect_biases(self, chain, now=None):
        return list(self._fixed)


class FailingRecognizer(PatternRecognizer):

    def detect_biases(self, chain, now=None):
        raise RuntimeError("detector exploded")


def _config(**overrides):
    values = dict(alert_threshold=0.5, max_processing_time=3000.0, window_size=100,
                  max_cached_chains=1000)
    values.update(overrides)
    return MonitoringConfig(**values)


@pytest.fixture
def monitor():
    return MonitoringSystem(config=_config())


# ============================================================
# ALERTS
# ============================================================

class TestAlerts:

    @pytest.mark.asyncio
    async def test_scenario_e_single_high_alert(self, monitor):
        chain = scenario_chain()
        await monitor.monitor_continuously(chain)
        alerts = monitor.generate_real_time_alerts(chain)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.priority == "high"
        assert alert.severity == pytest.approx(0.625)
        assert alert.bias.type == BiasType.CONFIRMATION
        assert alert.actionable is True
        assert alert.recommendations == list(RECOMMENDATIONS[BiasType.CONFIRMATION])
        assert alert.message.startswith("High severity confirmation bias detected: ")

    @pytest.mark.asyncio
    async def test_alerts_deduplicated(self, monitor):
        chain = scenario_chain()
        await monitor.monitor_continuously(chain)
        assert len(monitor.generate_real_time_alerts(chain)) == 1
        assert monitor.generate_real_time_alerts(chain) == []

        # Re-monitoring the same chain yields the same alert id
        await monitor.monitor_continuously(chain)
        assert monitor.generate_real_time_alerts(chain) == []
        assert monitor.get_metrics().total_alerts == 1

    def test_unmonitored_chain(self, monitor):
        assert monitor.generate_real_time_alerts(scenario_chain("never-seen")) == []

    @pytest.mark.asyncio
    async def test_threshold_filters(self):
        monitor = MonitoringSystem(config=_config(alert_threshold=0.7))
        chain = scenario_chain()
        await monitor.monitor_continuously(chain)
        assert monitor.generate_real_time_alerts(chain) == []

    @pytest.mark.asyncio
    async def test_sorted_by_priority(self):
        biases = [
            _bias(BiasType.FRAMING, 0.4),          # 0.5   -> medium
            _bias(BiasType.SUNK_COST, 0.9),        # 1.0   -> critical
            _bias(BiasType.ANCHORING, 0.7, 0.75),  # 0.625 -> high
        ]
        monitor = MonitoringSystem(recognizer=StubRecognizer(biases), config=_config())
        chain = scenario_chain()
        await monitor.monitor_continuously(chain)
        alerts = monitor.generate_real_time_alerts(chain)

        assert [a.priority for a in alerts] == ["critical", "high", "medium"]
        medium = alerts[-1]
        assert medium.actionable is False
        assert medium.recommendations is None

        metrics = monitor.get_metrics()
        assert metrics.alerts_by_priority == {"medium": 1, "critical": 1, "high": 1}
        assert metrics.alerts_by_type == {"framing": 1, "sunk_cost": 1, "anchoring": 1}

    def test_priority_bands(self):
        assert calculate_priority(0.95) == "critical"
        assert calculate_priority(0.8) == "critical"
        assert calculate_priority(0.6) == "high"
        assert calculate_priority(0.4) == "medium"
        assert calculate_priority(0.39) == "low"

    def test_alert_id_deterministic(self):
        bias = _bias(BiasType.FRAMING, 0.5, reasoning="A" * 50)
        alert_id = alert_id_for(bias, "c1")
        assert alert_id == alert_id_for(bias, "c1")
        assert alert_id == "alert-c1-framing-0-" + "A" * 20

    def test_generic_recommendations(self):
        assert len(GENERIC_RECOMMENDATIONS) == 3
        assert set(RECOMMENDATIONS) == set(BiasType)


# ============================================================
# LIFECYCLE & FAILURES
# ============================================================

class TestLifecycle:

    @pytest.mark.asyncio
    async def test_stop_is_permanent(self, monitor):
        assert monitor.is_running
        monitor.stop()
        assert not monitor.is_running
        await monitor.monitor_continuously(scenario_chain())
        assert monitor.get_metrics().total_chains == 0
        assert monitor.generate_real_time_alerts(scenario_chain()) == []

    @pytest.mark.asyncio
    async def test_detection_errors_swallowed(self):
        monitor = MonitoringSystem(recognizer=FailingRecognizer(), config=_config())
        chain = scenario_chain()
        await monitor.monitor_continuously(chain)

        metrics = monitor.get_metrics()
        assert metrics.detection_errors == 1
        assert metrics.total_chains == 1
        assert metrics.total_biases == 0
        assert monitor.generate_real_time_alerts(chain) == []

    @pytest.mark.asyncio
    async def test_missing_id_counted_not_analyzed(self, monitor):
        chain = scenario_chain(chain_id="")
        await monitor.monitor_continuously(chain)
        metrics = monitor.get_metrics()
        assert metrics.total_chains == 1
        assert metrics.total_biases == 0

    @pytest.mark.asyncio
    async def test_cache_evicts_least_recent(self):
        monitor = MonitoringSystem(config=_config(max_cached_chains=2))
        for chain_id in ("c1", "c2", "c3"):
            await monitor.monitor_continuously(scenario_chain(chain_id))
        assert monitor.generate_real_time_alerts(scenario_chain("c1")) == []
        assert len(monitor.generate_real_time_alerts(scenario_chain("c3"))) == 1

    @pytest.mark.asyncio
    async def test_concurrent_monitoring(self, monitor):
        chains = [scenario_chain(f"c{i}") for i in range(20)]
        await asyncio.gather(*(monitor.monitor_continuously(c) for c in chains))
        metrics = monitor.get_metrics()
        assert metrics.total_chains == 20
        assert metrics.total_biases == 20


# ============================================================
# METRICS
# ============================================================

class TestMetrics:

    def test_empty(self, monitor):
        metrics = monitor.get_metrics()
        assert metrics.total_chains == 0
        assert metrics.average_processing_time == 0.0
        assert metrics.overhead_percentage == 0.0
        assert monitor.measure_performance_overhead() == 0.0

    @pytest.mark.asyncio
    async def test_after_monitoring(self, monitor):
        chain = scenario_chain()
        await monitor.monitor_continuously(chain)
        monitor.generate_real_time_alerts(chain)

        metrics = monitor.get_metrics()
        assert metrics.total_chains == 1
        assert metrics.total_biases == 1
        assert metrics.total_alerts == 1
        assert metrics.average_processing_time >= 1.0
        assert metrics.overhead_percentage == pytest.approx(100 / 9)
        assert monitor.measure_performance_overhead() == pytest.approx(100 / 9)
        assert metrics.alerts_by_type == {"confirmation": 1}
        assert metrics.alerts_by_priority == {"high": 1}

    @pytest.mark.asyncio
    async def test_budget_overruns_counted(self):
        monitor = MonitoringSystem(config=_config(max_processing_time=0.5))
        await monitor.monitor_continuously(scenario_chain())
        assert monitor.get_metrics().budget_overruns == 1
