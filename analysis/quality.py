"""
Quality consistency check over image diagnostics

Turns focus / clipping / foreground scalars into graded alerts, a suggested
result status and a simple checklist for quality indicators.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from .diagnostics import DiagnosticsResult
from .logger import app_logger


class Severity(IntEnum):
    """Alert severity, ordered"""
    INFO = 0
    WARNING = 1
    ERROR = 2
    CRITICAL = 3


STATUS_OFFICIAL = "Official"
STATUS_PRELIMINARY = "Preliminary"
STATUS_INVALID = "Invalid"

CHECK_OK = "ok"
CHECK_ATTENTION = "attention"
CHECK_POOR = "poor"

DEFAULT_THRESHOLDS = {
    'focus_min_good': 0.5,
    'focus_min_acceptable': 0.3,
    'clipping_max_good': 0.05,
    'clipping_max_acceptable': 0.15,
    'foreground_min_good': 0.1,
    'foreground_max_good': 0.9,
    'foreground_min_acceptable': 0.03,
    'foreground_max_acceptable': 0.97,
}

# Checklist bands
FOCUS_PERCENT_GOOD = 50.0
FOCUS_PERCENT_WARNING = 30.0
MASK_GOOD_BAND = (0.3, 0.8)
MASK_WARNING_BAND = (0.1, 0.95)


@dataclass(frozen=True)
class QualityAlert:
    severity: Severity
    code: str
    message: str
    recommendation: str = ""


@dataclass
class ConsistencyReport:
    """Alerts raised for one diagnostics result"""

    alerts: List[QualityAlert] = field(default_factory=list)

    @property
    def has_critical_alerts(self) -> bool:
        return any(a.severity is Severity.CRITICAL for a in self.alerts)

    @property
    def has_error_alerts(self) -> bool:
        return any(a.severity is Severity.ERROR for a in self.alerts)

    @property
    def has_warning_alerts(self) -> bool:
        return any(a.severity is Severity.WARNING for a in self.alerts)

    @property
    def is_consistent(self) -> bool:
        return not self.has_critical_alerts and not self.has_error_alerts

    @property
    def suggested_status(self) -> str:
        if self.has_critical_alerts:
            return STATUS_INVALID
        if self.has_error_alerts:
            return STATUS_PRELIMINARY
        # Warnings do not block an official result
        return STATUS_OFFICIAL

    @property
    def codes(self) -> List[str]:
        return [a.code for a in self.alerts]

    @property
    def summary(self) -> str:
        if not self.alerts:
            return "No consistency problems detected. Analysis OK."
        lines = [f"{len(self.alerts)} alert(s), suggested status: {self.suggested_status}"]
        for alert in sorted(self.alerts, key=lambda a: a.severity, reverse=True):
            lines.append(f"[{alert.severity.name}] {alert.code}: {alert.message}")
        return "\n".join(lines)


@dataclass(frozen=True)
class QualityChecklist:
    focus: str
    mask: str
    clipping: str
    overall: str


def _check_focus(diagnostics, t, alerts):
    focus = diagnostics.focus_score
    if focus < t['focus_min_acceptable']:
        alerts.append(QualityAlert(
            Severity.ERROR, "FOCUS_CRITICAL",
            f"Image is badly out of focus (focus={focus:.2f}). Results may be inaccurate.",
            "Adjust the microscope focus and capture a new image."))
    elif focus < t['focus_min_good']:
        alerts.append(QualityAlert(
            Severity.WARNING, "FOCUS_LOW",
            f"Focus below ideal (focus={focus:.2f}). Consider refocusing.",
            "Adjust focus for better accuracy."))


def _check_clipping(diagnostics, t, alerts):
    clipping = diagnostics.saturation_clipping_fraction
    if clipping > t['clipping_max_acceptable']:
        alerts.append(QualityAlert(
            Severity.ERROR, "CLIPPING_HIGH",
            f"Saturation clipping is very high ({clipping:.1%}). Colour information is lost.",
            "Reduce exposure or adjust the microscope illumination."))
    elif clipping > t['clipping_max_good']:
        alerts.append(QualityAlert(
            Severity.WARNING, "CLIPPING_MODERATE",
            f"Moderate saturation clipping ({clipping:.1%}). Colour classification may suffer.",
            "Consider adjusting exposure."))


def _check_foreground(diagnostics, t, alerts):
    foreground = diagnostics.foreground_fraction
    if foreground < t['foreground_min_acceptable']:
        alerts.append(QualityAlert(
            Severity.CRITICAL, "MASK_NO_SAMPLE",
            f"Almost no sample detected ({foreground:.1%}). The field of view may be empty.",
            "Check that there is sample in the field of view."))
    elif foreground < t['foreground_min_good']:
        alerts.append(QualityAlert(
            Severity.WARNING, "MASK_LOW_SAMPLE",
            f"Little sample detected ({foreground:.1%}). Analysed area may be small.",
            "Place more sample in the field or change magnification."))
    elif foreground > t['foreground_max_acceptable']:
        alerts.append(QualityAlert(
            Severity.ERROR, "MASK_TOO_MUCH",
            f"Nearly the whole image is sample ({foreground:.1%}). Segmentation or background problem.",
            "Check that the background is visible and well lit."))
    elif foreground > t['foreground_max_good']:
        alerts.append(QualityAlert(
            Severity.WARNING, "MASK_HIGH_SAMPLE",
            f"A lot of sample detected ({foreground:.1%}). Background may be inadequate.",
            "Make sure the background is light and uniform."))


def check_consistency(diagnostics: DiagnosticsResult, thresholds=None) -> ConsistencyReport:
    """
    Grade a diagnostics result.

    Args:
        diagnostics: Output of diagnose()
        thresholds: Optional overrides for DEFAULT_THRESHOLDS keys

    Returns:
        ConsistencyReport with alerts and the suggested status
    """
    t = dict(DEFAULT_THRESHOLDS)
    if thresholds:
        t.update(thresholds)

    report = ConsistencyReport()
    _check_focus(diagnostics, t, report.alerts)
    _check_clipping(diagnostics, t, report.alerts)
    _check_foreground(diagnostics, t, report.alerts)

    if report.alerts:
        app_logger.debug(f"Consistency check: {', '.join(report.codes)} -> {report.suggested_status}")
    return report


def _status(value, good, warning):
    if value >= good:
        return CHECK_OK
    if value >= warning:
        return CHECK_ATTENTION
    return CHECK_POOR


def _band_status(value, good_band, warning_band):
    if good_band[0] <= value <= good_band[1]:
        return CHECK_OK
    if warning_band[0] <= value <= warning_band[1]:
        return CHECK_ATTENTION
    return CHECK_POOR


def build_checklist(diagnostics: DiagnosticsResult, thresholds=None) -> QualityChecklist:
    """Per-metric ok / attention / poor verdicts plus an overall verdict"""
    t = dict(DEFAULT_THRESHOLDS)
    if thresholds:
        t.update(thresholds)

    focus = _status(diagnostics.focus_score_percent, FOCUS_PERCENT_GOOD, FOCUS_PERCENT_WARNING)
    mask = _band_status(diagnostics.foreground_fraction, MASK_GOOD_BAND, MASK_WARNING_BAND)

    clipping_value = diagnostics.saturation_clipping_fraction
    if clipping_value <= t['clipping_max_good']:
        clipping = CHECK_OK
    elif clipping_value <= t['clipping_max_acceptable']:
        clipping = CHECK_ATTENTION
    else:
        clipping = CHECK_POOR

    statuses = (focus, mask, clipping)
    if CHECK_POOR in statuses:
        overall = CHECK_POOR
    elif CHECK_ATTENTION in statuses:
        overall = CHECK_ATTENTION
    else:
        overall = CHECK_OK

    return QualityChecklist(focus=focus, mask=mask, clipping=clipping, overall=overall)
