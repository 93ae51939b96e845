"""
HVS Sample Analysis
Main entry point - command line runner
"""
import argparse
import json
import os
import sys

from app_config import APP_DISPLAY_NAME, APP_SUBTITLE, DEFAULT_PREVIEW_SUFFIX, DEFAULT_TONE_SUFFIX
from analysis import (
    AnalysisError,
    Config,
    TonePreset,
    UvMode,
    apply_tone,
    apply_uv,
    build_checklist,
    check_consistency,
    diagnose,
    load_frame,
    save_frame,
    segment,
)
from analysis.logger import app_logger
from analysis.sample_mask import tint_background

UV_MODE_AUTO = 'auto'


def build_parser():
    parser = argparse.ArgumentParser(
        description=f'{APP_DISPLAY_NAME} - {APP_SUBTITLE}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  python main.py sample.png                        # Diagnostics and quality verdict
  python main.py sample.png --preview              # Also write sample_mask.png
  python main.py sample.png --preset HighContrast  # Also write sample_tone.png
  python main.py sample.png --uv-mode Simulated --output uv.png
        """)

    parser.add_argument('image', help='Image file to analyze')
    parser.add_argument('--config', metavar='PATH',
                        help='Config file (defaults to the per-user config.json)')
    parser.add_argument('--preview', nargs='?', const='', metavar='PATH',
                        help='Write the segmentation preview (default: <image>_mask.png)')
    parser.add_argument('--preset', choices=[p.value for p in TonePreset],
                        help='Tone preset to apply (Custom uses the configured values)')
    parser.add_argument('--uv-mode', choices=[m.value for m in UvMode] + [UV_MODE_AUTO],
                        help='UV visualization mode to apply after tone (auto: recommended for the configured hardware)')
    parser.add_argument('--output', metavar='PATH',
                        help='Where to write the tone/UV result (default: <image>_tone.png)')
    parser.add_argument('--json', action='store_true',
                        help='Print results as JSON')
    return parser


def _derived_path(image_path, suffix):
    base, _ = os.path.splitext(image_path)
    return f"{base}{suffix}.png"


def run(args):
    """Run one analysis; returns the process exit code"""
    config = Config(args.config)
    # JSON mode: only errors reach stdout besides the document
    app_logger.set_console_level('ERROR' if args.json else config.console_level())

    frame = load_frame(args.image)
    app_logger.info(f"Analyzing {args.image} ({frame.shape[1]}x{frame.shape[0]})")

    diagnostics = diagnose(frame)
    report = check_consistency(diagnostics, config.quality_thresholds())
    checklist = build_checklist(diagnostics, config.quality_thresholds())

    want_preview = args.preview is not None or config.get_section("segmentation").get("preview_enabled")
    mask, _ = segment(frame)
    written = {}

    if want_preview:
        tint, alpha = config.preview_style()
        preview = tint_background(frame, mask.is_sample, tint, alpha)
        preview_path = args.preview or _derived_path(args.image, DEFAULT_PREVIEW_SUFFIX)
        save_frame(preview, preview_path)
        written['preview'] = preview_path

    if args.preset or args.uv_mode or args.output:
        tone = config.tone_parameters()
        if args.preset:
            tone = tone.with_preset(args.preset)
        result = apply_tone(frame, tone)

        uv = config.uv_parameters()
        if args.uv_mode:
            mode = config.recommended_uv_mode() if args.uv_mode == UV_MODE_AUTO else args.uv_mode
            uv = uv.with_mode(mode)
        result = apply_uv(result, uv)

        output_path = args.output or _derived_path(args.image, DEFAULT_TONE_SUFFIX)
        save_frame(result, output_path)
        written['output'] = output_path
        app_logger.info(f"Tone {tone.preset.value}, {uv.status_text()} -> {output_path}")

    if args.json:
        print(json.dumps({
            'diagnostics': diagnostics.to_dict(),
            'sample_fraction': round(mask.sample_fraction, 6),
            'status': report.suggested_status,
            'alerts': report.codes,
            'checklist': {
                'focus': checklist.focus,
                'mask': checklist.mask,
                'clipping': checklist.clipping,
                'overall': checklist.overall,
            },
            'written': written,
        }, indent=2))
    else:
        print(f"Focus:      {diagnostics.focus_score_percent:.1f}% ({checklist.focus})")
        print(f"Clipping:   {diagnostics.saturation_clipping_fraction:.1%} ({checklist.clipping})")
        print(f"Foreground: {diagnostics.foreground_fraction:.1%} ({checklist.mask})")
        print(f"Sample:     {mask.sample_fraction:.1%} in {mask.regions_kept} region(s)")
        print(f"Overall:    {checklist.overall}")
        print(report.summary)
        for name, path in written.items():
            print(f"Wrote {name}: {path}")

    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    console_level = app_logger.console_level
    try:
        return run(args)
    except FileNotFoundError as e:
        app_logger.error(str(e))
        return 2
    except (AnalysisError, OSError) as e:
        app_logger.error(f"Analysis failed: {e}")
        return 1
    finally:
        app_logger.set_console_level(console_level)


if __name__ == "__main__":
    sys.exit(main())
