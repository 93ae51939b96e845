"""
Image analysis core for HVS Sample Analysis.

Frames are (H, W, 3) uint8 RGB arrays. Every operation is synchronous and
allocates its own working buffers, so independent frames can be processed
from several threads at once.

Package structure:
    analysis/
    ├── __init__.py      # This file - exports
    ├── errors.py        # AnalysisError, InvalidFrameError
    ├── logger.py        # app_logger singleton (rotating file logs)
    ├── config.py        # Config, DEFAULT_CONFIG
    ├── frame.py         # Frame validation and file I/O
    ├── gradient.py      # Luminance and central-difference gradients
    ├── sample_mask.py   # Sample/background segmentation
    ├── diagnostics.py   # Focus, clipping, foreground coverage
    ├── tone.py          # Brightness/contrast/gamma/saturation presets
    ├── uv_mode.py       # UV visualization modes
    └── quality.py       # Consistency alerts and checklist

Usage:
    from analysis import load_frame, segment, diagnose, check_consistency

    frame = load_frame("sample.png")
    mask, preview = segment(frame, with_preview=True)
    report = check_consistency(diagnose(frame))
    print(report.suggested_status)
"""

from .errors import AnalysisError, InvalidFrameError

from .frame import (
    as_frame,
    has_interior,
    load_frame,
    save_frame,
)

from .gradient import (
    LuminanceGradient,
    composite_index,
    extract,
    gradient_components,
    gradient_magnitude,
    luminance,
)

from .sample_mask import (
    SampleMaskGrid,
    SampleMaskRecord,
    segment,
    tint_background,
)

from .diagnostics import DiagnosticsResult, diagnose

from .tone import (
    TonePreset,
    ToneParameters,
    apply_tone,
    detect_preset,
    gamma_lut,
)

from .uv_mode import (
    UvMode,
    UvParameters,
    apply_uv,
    recommended_mode,
)

from .quality import (
    ConsistencyReport,
    QualityAlert,
    QualityChecklist,
    Severity,
    build_checklist,
    check_consistency,
)

from .config import Config, DEFAULT_CONFIG

__all__ = [
    'AnalysisError',
    'InvalidFrameError',
    'as_frame',
    'has_interior',
    'load_frame',
    'save_frame',
    'LuminanceGradient',
    'composite_index',
    'extract',
    'gradient_components',
    'gradient_magnitude',
    'luminance',
    'SampleMaskGrid',
    'SampleMaskRecord',
    'segment',
    'tint_background',
    'DiagnosticsResult',
    'diagnose',
    'TonePreset',
    'ToneParameters',
    'apply_tone',
    'detect_preset',
    'gamma_lut',
    'UvMode',
    'UvParameters',
    'apply_uv',
    'recommended_mode',
    'ConsistencyReport',
    'QualityAlert',
    'QualityChecklist',
    'Severity',
    'build_checklist',
    'check_consistency',
    'Config',
    'DEFAULT_CONFIG',
]
