#!/usr/bin/env python
"""
Run the AutoPricing API with uvicorn.

Usage:
    python scripts/run_api.py [--port 8000] [--no-reload]
"""
import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger("autopricing.run_api")


def main():
    parser = argparse.ArgumentParser(description="Run the AutoPricing API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    cmd = [
        sys.executable, "-m", "uvicorn",
        "autopricing.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    logger.info("Starting AutoPricing API (FastAPI) on %s:%s", args.host, args.port)
    try:
        subprocess.run(cmd, env=env)
    except KeyboardInterrupt:
        logger.info("API stopped.")


if __name__ == "__main__":
    main()
