"""Ecosystem detectors and the upward directory walk.

Detection tests each directory from the starting point upward with every
detector in a fixed order. The first directory that passes any
detector's full validation wins; ancestors are not examined further.
"""

import logging
from pathlib import Path

from monava.detectors.base import Detector
from monava.detectors.cargo import CargoDetector
from monava.detectors.javascript import JavaScriptDetector
from monava.detectors.poetry import PoetryDetector
from monava.models.detection import DetectionResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3


def get_detectors() -> list[Detector]:
    """Return detector instances in resolution order.

    Returns:
        JavaScript, Cargo and Poetry detectors, in that order.
    """
    return [JavaScriptDetector(), CargoDetector(), PoetryDetector()]


def detect_directory(
    directory: Path,
    detectors: list[Detector] | None = None,
) -> DetectionResult | None:
    """Classify a single directory without walking upward.

    Args:
        directory: Absolute directory to test.
        detectors: Detectors to try; defaults to :func:`get_detectors`.

    Returns:
        The first detector's result that validates, or None.
    """
    for detector in detectors or get_detectors():
        result = detector.detect(directory)
        if result is not None:
            return result
    return None


def detect_workspace(
    start_directory: Path,
    max_depth: int = DEFAULT_MAX_DEPTH,
    detectors: list[Detector] | None = None,
) -> DetectionResult | None:
    """Walk upward from a directory looking for a workspace root.

    Args:
        start_directory: Directory to start from (a file starts at its parent).
        max_depth: Number of directories to test, starting directory included.
        detectors: Detectors to try; defaults to :func:`get_detectors`.

    Returns:
        DetectionResult for the nearest workspace root, or None if the
        depth is exhausted or the filesystem root is reached.
    """
    if max_depth < 1:
        msg = f"max_depth must be at least 1, got {max_depth}"
        raise ValueError(msg)

    try:
        current = start_directory.resolve()
    except OSError as e:
        logger.warning("Cannot resolve start directory %s: %s", start_directory, e)
        return None

    if current.is_file():
        current = current.parent
    if not current.is_dir():
        logger.debug("Start directory does not exist: %s", current)
        return None

    active = detectors or get_detectors()

    for _ in range(max_depth):
        if current.parent == current:
            break

        result = detect_directory(current, active)
        if result is not None:
            logger.debug(
                "Detected %s (%s) at %s",
                result.ecosystem.value,
                result.subtype.value,
                result.root,
            )
            return result

        current = current.parent

    logger.debug("No workspace found within %d levels of %s", max_depth, start_directory)
    return None


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "CargoDetector",
    "Detector",
    "JavaScriptDetector",
    "PoetryDetector",
    "detect_directory",
    "detect_workspace",
    "get_detectors",
]
