"""App runner: import and run GazeGate.core.app.main()."""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if os.name == "nt":
    # Calibration targets and gaze predictions share physical pixels
    dpi_mode = (os.environ.get("GAZEGATE_DPI_AWARENESS", "") or "").strip().lower()
    if dpi_mode not in ("0", "1", "2", "3"):
        dpi_mode = "2"
    os.environ.setdefault("QT_QPA_PLATFORM", f"windows:dpiawareness={dpi_mode}")
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    os.environ.setdefault("QT_SCALE_FACTOR_ROUNDING_POLICY", "PassThrough")

from GazeGate.core.app import main

if __name__ == "__main__":
    raise SystemExit(main())
