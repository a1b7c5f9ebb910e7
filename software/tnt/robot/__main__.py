# tnt/robot/__main__.py
# -----------------------------------------------------------------------------
# Entry point for the robot side.
# Runs the GRIP pipeline on the camera (or once on an image file) and reports
# decimated loop/vision metrics to the console and, optionally, the dashboard.
# -----------------------------------------------------------------------------

from __future__ import annotations

import argparse

from ..metrics.reporter import ConsoleReporter, connect_reporter
from ..shared import config as C
from ..vision.grip_pipeline import GripPipeline
from .app import LoopStats, build_sampler, open_camera, run, run_on_image


def make_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TNT robot vision + metrics loop")
    p.add_argument("--camera-index", type=int, default=C.CAM_INDEX)
    p.add_argument("--image", type=str, default=None,
                   help="Run the pipeline once on this image instead of the camera.")
    p.add_argument("--out", type=str, default=C.IMAGE_OUTPUT,
                   help="Output path for --image runs.")
    p.add_argument("--sample-every", type=int, default=C.METRICS_SAMPLE_FREQUENCY,
                   help="Report each metric every N loops (first loop always reports).")
    p.add_argument("--dashboard", action="store_true",
                   help="Stream metrics to the dashboard at DASHBOARD_HOST:DASHBOARD_PORT.")
    p.add_argument("--host", type=str, default=C.DASHBOARD_HOST)
    p.add_argument("--port", type=int, default=C.DASHBOARD_PORT)
    p.add_argument("--no-display", action="store_true")
    p.add_argument("--max-frames", type=int, default=None)
    p.add_argument("--debug", action="store_true")
    return p


def main(argv=None):
    args = make_arg_parser().parse_args(argv)
    pipeline = GripPipeline()

    if args.image:
        run_on_image(args.image, pipeline, args.out)
        return

    if args.sample_every <= 0:
        raise SystemExit("--sample-every must be a positive integer")

    stats = LoopStats()
    sampler = build_sampler(stats, pipeline, args.sample_every, debug=args.debug)
    sampler.add_reporter(ConsoleReporter())

    dashboard = None
    if args.dashboard:
        try:
            dashboard = connect_reporter(args.host, args.port)
            sampler.add_reporter(dashboard)
        except OSError as exc:
            print(f"[Metrics] Dashboard unavailable at {args.host}:{args.port}: {exc}")

    cap = open_camera(args.camera_index)
    try:
        frames = run(
            cap,
            pipeline,
            sampler,
            stats,
            display=not args.no_display,
            max_frames=args.max_frames,
            debug=args.debug,
        )
        print(f"[Vision] Processed {frames} frame(s)")
    except KeyboardInterrupt:
        print("\n[Vision] Interrupted.")
    finally:
        cap.release()
        if dashboard is not None:
            dashboard.close()


if __name__ == "__main__":
    main()
