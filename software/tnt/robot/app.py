# tnt/robot/app.py
# -----------------------------------------------------------------------------
# Robot-side loop: camera frame -> GRIP pipeline -> metrics pass.
#
# Every loop reads one frame, runs the pipeline, and calls do_samples() on the
# sampler. Loop and vision gauges are decimated so the console and the
# dashboard link see one report every METRICS_SAMPLE_FREQUENCY loops instead
# of one per frame.
# -----------------------------------------------------------------------------

from __future__ import annotations

import time
from typing import Dict, List, Optional

import cv2
import numpy as np

from ..metrics.sampler import MetricsSampler, Sample
from ..shared import config as C
from ..vision.grip_pipeline import GripPipeline
from ..vision.hud import draw_metrics


class LoopStats:
    """Per-loop numbers the gauges read from."""
    def __init__(self):
        self.frames = 0
        self.frame_ms = 0.0
        self.read_failures = 0


class LatestValues:
    """Reporter that remembers the last reported value per metric (for the HUD)."""
    def __init__(self):
        self.values: Dict[str, float] = {}

    def __call__(self, samples: List[Sample]) -> None:
        for s in samples:
            self.values[s.name] = s.value


def target_fraction(mask: Optional[np.ndarray], threshold: int = C.TARGET_PIXEL_THRESHOLD) -> float:
    """Fraction of pixels in `mask` brighter than `threshold` (0.0 for no mask)."""
    if mask is None or mask.size == 0:
        return 0.0
    return float(np.count_nonzero(mask > threshold)) / float(mask.size)


def build_sampler(
    stats: LoopStats,
    pipeline: GripPipeline,
    sample_frequency: int = C.METRICS_SAMPLE_FREQUENCY,
    debug: bool = False,
) -> MetricsSampler:
    """Wire the standard loop and vision gauges into a new sampler."""
    sampler = MetricsSampler(debug=debug)
    sampler.add_gauge("loop.frames", lambda: stats.frames, sample_frequency)
    sampler.add_gauge("loop.frame_ms", lambda: stats.frame_ms, sample_frequency)
    sampler.add_gauge("loop.read_failures", lambda: stats.read_failures, sample_frequency)
    sampler.add_gauge(
        "vision.target_fraction",
        lambda: target_fraction(pipeline.hsv_threshold_output),
        sample_frequency,
    )
    sampler.add_gauge(
        "vision.output_mean",
        lambda: float(pipeline.cv_add_output.mean()) if pipeline.cv_add_output is not None else 0.0,
        sample_frequency,
    )
    return sampler


def run(
    cap,
    pipeline: GripPipeline,
    sampler: MetricsSampler,
    stats: LoopStats,
    display: bool = True,
    max_frames: Optional[int] = None,
    max_read_failures: int = 10,
    debug: bool = False,
) -> int:
    """
    Main loop. Returns the number of frames processed.

    Stops on 'q' (display mode), after `max_frames`, or after
    `max_read_failures` consecutive failed camera reads.
    """
    latest = LatestValues()
    sampler.add_reporter(latest)
    consecutive_failures = 0

    try:
        while max_frames is None or stats.frames < max_frames:
            t0 = time.perf_counter()
            ok, frame = cap.read()
            if not ok or frame is None:
                stats.read_failures += 1
                consecutive_failures += 1
                print("[Vision] Failed to read frame from camera.")
                if consecutive_failures >= max_read_failures:
                    print("[Vision] Too many failed reads; stopping.")
                    break
                time.sleep(C.METRICS_PERIOD_S)
                continue
            consecutive_failures = 0

            output = pipeline.process(frame)
            stats.frames += 1
            stats.frame_ms = (time.perf_counter() - t0) * 1000.0

            samples = sampler.do_samples()
            if debug and samples:
                print(f"[Vision] frame {stats.frames}: reported {len(samples)} metric(s)")

            if display:
                view = cv2.cvtColor(output, cv2.COLOR_GRAY2BGR)
                if C.DISPLAY_SCALE != 1.0:
                    view = cv2.resize(view, None, fx=C.DISPLAY_SCALE, fy=C.DISPLAY_SCALE)
                draw_metrics(view, latest.values)
                cv2.imshow(C.WINDOW_NAME, view)
                if (cv2.waitKey(1) & 0xFF) == ord("q"):
                    print("[Vision] Quit requested.")
                    break
    finally:
        if display:
            cv2.destroyAllWindows()

    return stats.frames


def run_on_image(path: str, pipeline: GripPipeline, out_path: str = C.IMAGE_OUTPUT) -> np.ndarray:
    """Run the pipeline once on an image file and write cv_add_output to `out_path`."""
    frame = cv2.imread(path, cv2.IMREAD_COLOR)
    if frame is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    output = pipeline.process(frame)
    if not cv2.imwrite(out_path, output):
        raise OSError(f"Could not write image: {out_path}")
    print(f"[Vision] Wrote {out_path} ({output.shape[1]}x{output.shape[0]}), "
          f"target fraction {target_fraction(pipeline.hsv_threshold_output):.3f}")
    return output


def open_camera(index: int = C.CAM_INDEX):
    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open camera index {index}")
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, int(C.CAM_WIDTH))
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, int(C.CAM_HEIGHT))
    print(f"[Vision] Camera {index} opened")
    return cap
