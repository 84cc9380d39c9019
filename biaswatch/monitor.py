"""
Monitoring System — Continuous Bias Monitoring with Deduplicated Alerts

Wraps the PatternRecognizer for a stream of reasoning chains:
  - monitor_continuously() yields to the event loop once, then detects
    and caches results per chain id
  - generate_real_time_alerts() is pull-based: it reads the cache,
    thresholds, prioritizes, and never emits the same alert id twice
  - get_metrics() reports counters, timing, and a heuristic overhead

Lifecycle is one-way: running -> stopped. Detection errors never reach
the caller; they are counted and logged.

The result cache is LRU-bounded. The set of emitted alert ids is not,
so an alert suppressed once stays suppressed for the monitor's life.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from typing import Optional

from biaswatch.config import settings
from biaswatch.logging import get_logger
from biaswatch.recognizer import PatternRecognizer
from biaswatch.schemas.monitoring import AlertPriority, BiasAlert, MonitoringMetrics
from biaswatch.schemas.reasoning import BiasType, DetectedBias, ReasoningChain

logger = get_logger("monitor")

ACTIONABLE_SEVERITY = 0.6
ALERT_ID_PREFIX_CHARS = 20

# Monitoring is assumed to be ~10% of measured processing time
MONITORING_SHARE = 0.1

PRIORITY_ORDER: dict[str, int] = {"critical": 4, "high": 3, "medium": 2, "low": 1}


RECOMMENDATIONS: dict[BiasType, tuple[str, ...]] = {
    BiasType.CONFIRMATION: (
        "Actively seek evidence that contradicts your hypothesis",
        "Consider alternative explanations for the same evidence",
        "Apply devil's advocate reasoning to challenge assumptions",
    ),
    BiasType.ANCHORING: (
        "Re-evaluate estimates without reference to initial values",
        "Consider a wider range of possible outcomes",
        "Seek independent estimates from multiple sources",
    ),
    BiasType.AVAILABILITY: (
        "Gather statistical data rather than relying on memorable examples",
        "Consider base rates and broader context",
        "Actively search for less memorable but relevant information",
    ),
    BiasType.RECENCY: (
        "Review historical data and long-term trends",
        "Weight evidence by relevance, not recency",
        "Consider whether recent events are representative",
    ),
    BiasType.REPRESENTATIVENESS: (
        "Consider base rates and prior probabilities",
        "Avoid stereotyping based on superficial similarities",
        "Gather more data before drawing conclusions",
    ),
    BiasType.FRAMING: (
        "Reframe the problem in multiple ways",
        "Consider both positive and negative framings",
        "Focus on objective facts rather than presentation",
    ),
    BiasType.SUNK_COST: (
        "Evaluate decisions based on future costs and benefits only",
        "Ignore past investments that cannot be recovered",
        "Consider opportunity costs of continuing",
    ),
    BiasType.ATTRIBUTION: (
        "Consider situational factors affecting behavior",
        "Apply the same standards to yourself and others",
        "Avoid fundamental attribution error",
    ),
    BiasType.BANDWAGON: (
        "Evaluate the option against your own requirements",
        "Compare alternatives on merit, not adoption",
        "Ask whether popular choices fit your specific context",
    ),
}

GENERIC_RECOMMENDATIONS = (
    "Review reasoning for potential bias",
    "Seek diverse perspectives",
    "Apply systematic thinking frameworks",
)


@dataclass(frozen=True)
class MonitoringConfig:
    alert_threshold: float = field(default_factory=lambda: settings.ALERT_THRESHOLD)
    max_processing_time: float = field(default_factory=lambda: settings.MAX_PROCESSING_MS)
    window_size: int = field(default_factory=lambda: settings.TIMING_WINDOW)
    max_cached_chains: int = field(default_factory=lambda: settings.MAX_CACHED_CHAINS)


def calculate_priority(severity: float) -> AlertPriority:
    if severity >= 0.8:
        return "critical"
    if severity >= 0.6:
        return "high"
    if severity >= 0.4:
        return "medium"
    return "low"


def alert_id_for(bias: DetectedBias, chain_id: str) -> str:
    """Deterministic id from chain, type, step, and a location-text prefix."""
    location = f"{bias.location.step_index}-{bias.location.reasoning[:ALERT_ID_PREFIX_CHARS]}"
    return f"alert-{chain_id}-{bias.type.value}-{location}"


class MonitoringSystem:
    """Non-blocking bias monitoring over a stream of reasoning chains."""

    def __init__(
        self,
        recognizer: Optional[PatternRecognizer] = None,
        config: Optional[MonitoringConfig] = None,
    ):
        self.recognizer = recognizer or PatternRecognizer()
        self.config = config or MonitoringConfig()

        self._lock = threading.Lock()
        self._stopped = False

        self._total_chains = 0
        self._total_biases = 0
        self._total_alerts = 0
        self._budget_overruns = 0
        self._detection_errors = 0
        self._processing_times: deque[float] = deque(maxlen=self.config.window_size)
        self._alerts_by_type: dict[str, int] = {}
        self._alerts_by_priority: dict[str, int] = {}

        self._emitted_alert_ids: set[str] = set()
        self._results: OrderedDict[str, list[DetectedBias]] = OrderedDict()

    @property
    def is_running(self) -> bool:
        return not self._stopped

    def stop(self) -> None:
        """Stop permanently. Later monitor calls are no-ops."""
        self._stopped = True
        logger.info("Monitoring stopped")

    # ============================================================
    # MONITORING
    # ============================================================

    async def monitor_continuously(self, chain: ReasoningChain) -> None:
        """
        Analyze a chain without blocking the caller. Never raises.

        Chains without an id are counted and timed but not analyzed.
        """
        if self._stopped:
            return

        start = time.perf_counter()
        chain_id = getattr(chain, "id", None)

        if not chain_id:
            self._record(start, biases=None, chain_id=None)
            return

        # Single suspension point
        await asyncio.sleep(0)

        try:
            biases = self.recognizer.detect_biases(chain)
        except Exception as e:
            with self._lock:
                self._detection_errors += 1
            logger.warning(
                "Detection failed during monitoring",
                extra={
                    "chain_id": chain_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            self._record(start, biases=None, chain_id=chain_id)
            return

        self._record(start, biases=biases, chain_id=chain_id)

    def _record(
        self, start: float, biases: Optional[list[DetectedBias]], chain_id: Optional[str],
    ) -> None:
        elapsed_ms = max(1.0, (time.perf_counter() - start) * 1000)
        overrun = elapsed_ms > self.config.max_processing_time

        with self._lock:
            self._total_chains += 1
            self._processing_times.append(elapsed_ms)
            if overrun:
                self._budget_overruns += 1
            if biases is not None and chain_id:
                self._total_biases += len(biases)
                self._results[chain_id] = biases
                self._results.move_to_end(chain_id)
                while len(self._results) > self.config.max_cached_chains:
                    self._results.popitem(last=False)

        if overrun:
            logger.warning(
                "Monitoring exceeded processing budget",
                extra={"chain_id": chain_id, "duration_ms": round(elapsed_ms, 2)},
            )
        elif biases is not None:
            logger.debug(
                "Chain monitored",
                extra={
                    "chain_id": chain_id,
                    "biases_count": len(biases),
                    "duration_ms": round(elapsed_ms, 2),
                },
            )

    # ============================================================
    # ALERTS
    # ============================================================

    def generate_real_time_alerts(self, chain: ReasoningChain) -> list[BiasAlert]:
        """
        Alerts for the cached detections of chain.id at or above the
        threshold, highest priority first. Each alert id is emitted once.
        """
        with self._lock:
            biases = self._results.get(chain.id)
            if biases is not None:
                self._results.move_to_end(chain.id)
        if not biases:
            return []

        alerts: list[BiasAlert] = []
        for bias in biases:
            severity = self.recognizer.assess_severity(bias)
            if severity < self.config.alert_threshold:
                continue

            alert_id = alert_id_for(bias, chain.id)
            priority = calculate_priority(severity)
            with self._lock:
                if alert_id in self._emitted_alert_ids:
                    continue
                self._emitted_alert_ids.add(alert_id)
                self._total_alerts += 1
                self._alerts_by_type[bias.type.value] = (
                    self._alerts_by_type.get(bias.type.value, 0) + 1
                )
                self._alerts_by_priority[priority] = self._alerts_by_priority.get(priority, 0) + 1

            actionable = severity >= ACTIONABLE_SEVERITY
            alerts.append(BiasAlert(
                id=alert_id,
                bias=bias,
                severity=severity,
                priority=priority,
                message=self._message(bias, severity),
                actionable=actionable,
                recommendations=self._recommendations(bias) if actionable else None,
            ))
            logger.debug(
                "Alert emitted",
                extra={"chain_id": chain.id, "alert_id": alert_id, "bias_type": bias.type.value},
            )

        alerts.sort(key=lambda a: PRIORITY_ORDER[a.priority], reverse=True)
        return alerts

    def _message(self, bias: DetectedBias, severity: float) -> str:
        label = calculate_priority(severity).capitalize()
        name = bias.type.value.replace("_", " ")
        return f"{label} severity {name} bias detected: {bias.explanation}"

    def _recommendations(self, bias: DetectedBias) -> list[str]:
        return list(RECOMMENDATIONS.get(bias.type, GENERIC_RECOMMENDATIONS))

    # ============================================================
    # METRICS
    # ============================================================

    def get_metrics(self) -> MonitoringMetrics:
        with self._lock:
            times = list(self._processing_times)
            return MonitoringMetrics(
                total_chains=self._total_chains,
                total_biases=self._total_biases,
                total_alerts=self._total_alerts,
                average_processing_time=sum(times) / len(times) if times else 0.0,
                overhead_percentage=self._overhead(times),
                alerts_by_type=dict(self._alerts_by_type),
                alerts_by_priority=dict(self._alerts_by_priority),
                budget_overruns=self._budget_overruns,
                detection_errors=self._detection_errors,
            )

    def measure_performance_overhead(self) -> float:
        with self._lock:
            return self._overhead(list(self._processing_times))

    def _overhead(self, times: list[float]) -> float:
        """
        Heuristic, not instrumentation: monitoring's share of the mean
        processing time relative to the remaining share, as a percentage.
        """
        if not times:
            return 0.0
        avg = sum(times) / len(times)
        monitoring = avg * MONITORING_SHARE
        base = avg - monitoring
        return monitoring / base * 100 if base > 0 else 0.0
