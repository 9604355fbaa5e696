#!/usr/bin/env python
"""
Run the Streamlit AutoPricing application.

Usage:
    python scripts/run_app.py
"""
import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger("autopricing.run_app")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Get the UI module path
    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'autopricing' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        logger.error("UI module not found at %s", ui_path)
        sys.exit(1)

    # Run streamlit
    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    logger.info("Starting Streamlit: %s", ' '.join(cmd))

    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        logger.info("Application stopped.")


if __name__ == "__main__":
    main()
