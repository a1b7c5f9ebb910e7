# tnt/shared/config.py
# -----------------------------------------------------------------------------
# Single source of truth for both robot-side and dashboard-side configuration.
# Keep protocol identifiers in shared/protocol.py.
# All code should import from this module instead of module-local configs.
#
# Deployment-specific values (dashboard address, camera index) can be
# overridden from the environment or a local .env file.
# -----------------------------------------------------------------------------

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PKG_ROOT  = Path(__file__).resolve().parent.parent
ROBOT_DIR = PKG_ROOT / "robot"

# -----------------------------
# Camera (Robot)
# -----------------------------
CAM_INDEX = int(os.getenv("TNT_CAM_INDEX", "0"))
CAM_WIDTH = 640
CAM_HEIGHT = 480
DISPLAY_SCALE = 1.0
WINDOW_NAME = "tnt-grip"

# Where --image runs write the pipeline result when no output path is given
IMAGE_OUTPUT = str(ROBOT_DIR / "grip_output.png")

# -----------------------------
# GRIP pipeline (generated constants; retune in GRIP, then paste here)
# -----------------------------
# Step HSV_Threshold0: [min, max] per channel, OpenCV 8-bit HSV ranges
HSV_THRESHOLD_HUE        = (0.0, 17.346568110980726)
HSV_THRESHOLD_SATURATION = (107.77877697841726, 255.0)
HSV_THRESHOLD_VALUE      = (123.83093525179855, 255.0)

# Step CV_extractChannel0: zero-indexed channel of the YCrCb image (2 = Cb)
EXTRACT_CHANNEL = 2

# Step Blur0
BLUR_TYPE   = "Box Blur"
BLUR_RADIUS = 21.69811320754717

# -----------------------------
# Metrics sampling
# -----------------------------
METRICS_SAMPLE_FREQUENCY = 10   # report every Nth read of a decimated gauge
METRICS_PERIOD_S = 0.02         # minimum loop period when no camera paces the loop

# Pixel value above which a GRIP output pixel counts as "target"
TARGET_PIXEL_THRESHOLD = 200

# -----------------------------
# Networking
# -----------------------------
# Robot connects to the dashboard at this host/port.
DASHBOARD_HOST = os.getenv("TNT_DASHBOARD_HOST", "192.168.49.2")
DASHBOARD_PORT = int(os.getenv("TNT_DASHBOARD_PORT", "65433"))

# Dashboard server bind
LISTEN_HOST = "0.0.0.0"
LISTEN_PORT = DASHBOARD_PORT
