"""
Frame contract and image file helpers

A frame is an (H, W, 3) uint8 RGB array in row-major order. Analysis
functions only read frames; transforms always return new arrays.
"""
import os
import tempfile

import numpy as np
from PIL import Image

from .errors import InvalidFrameError


def as_frame(source) -> np.ndarray:
    """
    Validate and normalize an input into an RGB uint8 frame.

    Accepts:
    - numpy arrays shaped (H, W, 3), (H, W, 4) (alpha dropped) or (H, W) (gray)
    - PIL images of any mode (converted to RGB)

    Args:
        source: Frame-like input

    Returns:
        Contiguous (H, W, 3) uint8 array. The caller's array is returned
        as-is when it already satisfies the contract.

    Raises:
        InvalidFrameError: source is None, has zero width/height or an
            unsupported shape
    """
    if source is None:
        raise InvalidFrameError("Frame is required")

    if isinstance(source, Image.Image):
        if source.width == 0 or source.height == 0:
            raise InvalidFrameError(f"Frame has no pixels ({source.width}x{source.height})")
        return np.asarray(source.convert('RGB'), dtype=np.uint8)

    arr = np.asarray(source)

    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
    elif arr.ndim == 3 and arr.shape[2] == 4:
        arr = arr[:, :, :3]
    elif arr.ndim != 3 or arr.shape[2] != 3:
        raise InvalidFrameError(f"Unsupported frame shape {arr.shape}, expected (H, W, 3)")

    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidFrameError(f"Frame has no pixels ({arr.shape[1]}x{arr.shape[0]})")

    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)

    return np.ascontiguousarray(arr)


def has_interior(frame: np.ndarray) -> bool:
    """True when the frame has at least one pixel off the 1-pixel border"""
    return frame.shape[0] >= 3 and frame.shape[1] >= 3


def load_frame(path) -> np.ndarray:
    """
    Load an image file as an RGB frame.

    Raises:
        FileNotFoundError: path does not exist
        InvalidFrameError: the decoded image has no pixels
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image file not found: {path}")

    with Image.open(path) as img:
        return as_frame(img)


def save_frame(frame: np.ndarray, output_path, format_name=None, **save_kwargs) -> None:
    """
    Save a frame atomically to prevent corruption on crash/power loss.
    Uses temp file + rename pattern for atomic writes.

    Args:
        frame: RGB frame to save
        output_path: Final destination path
        format_name: Image format (JPEG, PNG, ...); inferred from the
            extension when omitted
        **save_kwargs: Additional arguments for PIL save()
    """
    frame = as_frame(frame)
    output_path = str(output_path)
    output_dir = os.path.dirname(output_path)

    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)

    if format_name is None:
        ext = os.path.splitext(output_path)[1].lower()
        format_name = Image.registered_extensions().get(ext, 'PNG')

    fd, temp_path = tempfile.mkstemp(
        suffix='.tmp',
        dir=output_dir if output_dir else '.',
        prefix='.saving_'
    )

    try:
        os.close(fd)  # PIL reopens the path itself

        Image.fromarray(frame).save(temp_path, format_name, **save_kwargs)

        # os.replace is atomic on the same filesystem
        os.replace(temp_path, output_path)

    except Exception:
        try:
            if os.path.exists(temp_path):
                os.remove(temp_path)
        except OSError:
            pass  # Best effort cleanup
        raise
