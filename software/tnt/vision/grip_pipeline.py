# tnt/vision/grip_pipeline.py
# -----------------------------------------------------------------------------
# GripPipeline: the GRIP-generated target-finding pipeline.
#
# Straight-line sequence of stock OpenCV operations:
#   HSV_Threshold0     source -> binary mask of the target colour
#   CV_cvtColor0       source -> YCrCb
#   CV_extractChannel0 YCrCb  -> single channel
#   Blur0              mask   -> softened mask
#   CV_add0            channel + softened mask (saturating)
#
# Constants live in shared/config.py; retune them in GRIP and paste them back.
# -----------------------------------------------------------------------------

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

import cv2
import numpy as np

from ..shared import config as C


class BlurType(Enum):
    """Which filter to use for a blur."""
    BOX = "Box Blur"
    GAUSSIAN = "Gaussian Blur"
    MEDIAN = "Median Filter"
    BILATERAL = "Bilateral Filter"

    @classmethod
    def get(cls, label: str) -> "BlurType":
        """Look up a blur by its GRIP label; unknown labels fall back to BOX."""
        for member in cls:
            if member.value == label:
                return member
        return cls.BOX

    def __str__(self) -> str:
        return self.value


# ------------------------------ steps ---------------------------------------- #

def hsv_threshold(
    image: np.ndarray,
    hue: Sequence[float],
    sat: Sequence[float],
    val: Sequence[float],
) -> np.ndarray:
    """Segment a BGR image on [min, max] hue, saturation and value ranges."""
    hsv = cv2.cvtColor(image, cv2.COLOR_BGR2HSV)
    return cv2.inRange(hsv, (hue[0], sat[0], val[0]), (hue[1], sat[1], val[1]))


def cv_cvtcolor(src: np.ndarray, code: int) -> np.ndarray:
    return cv2.cvtColor(src, code)


def cv_extractchannel(src: np.ndarray, channel: float) -> np.ndarray:
    """Extract a zero-indexed channel."""
    return cv2.extractChannel(src, int(channel))


def blur(image: np.ndarray, blur_type: BlurType, radius: float) -> np.ndarray:
    """Soften an image; `radius` is rounded to the nearest whole pixel."""
    r = int(radius + 0.5)
    if blur_type is BlurType.BOX:
        k = 2 * r + 1
        return cv2.blur(image, (k, k))
    if blur_type is BlurType.GAUSSIAN:
        k = 6 * r + 1
        return cv2.GaussianBlur(image, (k, k), r)
    if blur_type is BlurType.MEDIAN:
        k = 2 * r + 1
        return cv2.medianBlur(image, k)
    if blur_type is BlurType.BILATERAL:
        return cv2.bilateralFilter(image, -1, r, r)
    raise ValueError(f"Unsupported blur type: {blur_type!r}")


def cv_add(src1: np.ndarray, src2: np.ndarray) -> np.ndarray:
    """Per-element sum, saturating at the dtype's max."""
    return cv2.add(src1, src2)


# ----------------------------- pipeline -------------------------------------- #

class GripPipeline:
    def __init__(
        self,
        hue: Sequence[float] = C.HSV_THRESHOLD_HUE,
        sat: Sequence[float] = C.HSV_THRESHOLD_SATURATION,
        val: Sequence[float] = C.HSV_THRESHOLD_VALUE,
        cvtcolor_code: int = cv2.COLOR_RGB2YCrCb,
        channel: float = C.EXTRACT_CHANNEL,
        blur_type: BlurType | str = C.BLUR_TYPE,
        blur_radius: float = C.BLUR_RADIUS,
    ):
        for label, rng in (("hue", hue), ("saturation", sat), ("value", val)):
            if len(rng) != 2:
                raise ValueError(f"{label} range must be [min, max], got {rng!r}")
        if blur_radius < 0:
            raise ValueError(f"blur_radius must be >= 0, got {blur_radius}")

        self.hue = tuple(hue)
        self.sat = tuple(sat)
        self.val = tuple(val)
        self.cvtcolor_code = cvtcolor_code
        self.channel = channel
        self.blur_type = blur_type if isinstance(blur_type, BlurType) else BlurType.get(blur_type)
        self.blur_radius = float(blur_radius)

        # Outputs
        self.hsv_threshold_output: Optional[np.ndarray] = None
        self.cv_cvtcolor_output: Optional[np.ndarray] = None
        self.cv_extractchannel_output: Optional[np.ndarray] = None
        self.blur_output: Optional[np.ndarray] = None
        self.cv_add_output: Optional[np.ndarray] = None

    def process(self, source0: np.ndarray) -> np.ndarray:
        """Run every step on a 3-channel 8-bit frame and return cv_add_output."""
        # Step HSV_Threshold0:
        self.hsv_threshold_output = hsv_threshold(source0, self.hue, self.sat, self.val)

        # Step CV_cvtColor0:
        self.cv_cvtcolor_output = cv_cvtcolor(source0, self.cvtcolor_code)

        # Step CV_extractChannel0:
        self.cv_extractchannel_output = cv_extractchannel(self.cv_cvtcolor_output, self.channel)

        # Step Blur0:
        self.blur_output = blur(self.hsv_threshold_output, self.blur_type, self.blur_radius)

        # Step CV_add0:
        self.cv_add_output = cv_add(self.cv_extractchannel_output, self.blur_output)
        return self.cv_add_output
