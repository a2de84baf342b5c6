"""Batch analysis: aggregate metrics and reports over battle telemetry."""

from hsr_sim.analysis.metrics import compute_batch_metrics, compute_character_metrics
from hsr_sim.analysis.models import BatchMetrics, BatchReport, CharacterMetrics
from hsr_sim.analysis.report import (
    build_report,
    format_damage,
    generate_text_report,
    hp_percent,
    load_report,
    save_report,
)

__all__ = [
    "BatchMetrics",
    "BatchReport",
    "CharacterMetrics",
    "build_report",
    "compute_batch_metrics",
    "compute_character_metrics",
    "format_damage",
    "generate_text_report",
    "hp_percent",
    "load_report",
    "save_report",
]
