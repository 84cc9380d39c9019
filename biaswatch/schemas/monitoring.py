"""
Monitoring Schemas — Alerts and Metrics
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from biaswatch.schemas.reasoning import DetectedBias, utcnow


AlertPriority = Literal["low", "medium", "high", "critical"]


class BiasAlert(BaseModel):
    id: str
    bias: DetectedBias
    severity: float = Field(..., ge=0.0, le=1.0)
    priority: AlertPriority
    timestamp: datetime = Field(default_factory=utcnow)
    message: str
    actionable: bool
    recommendations: Optional[list[str]] = None


class MonitoringMetrics(BaseModel):
    total_chains: int
    total_biases: int
    total_alerts: int
    average_processing_time: float  # ms
    overhead_percentage: float
    alerts_by_type: dict[str, int]
    alerts_by_priority: dict[str, int]
    budget_overruns: int = 0
    detection_errors: int = 0
