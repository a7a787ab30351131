"""
Launch the library search page in Streamlit.

Usage:
    python scripts/run_app.py
    python scripts/run_app.py --port 8502 --headless
    python scripts/run_app.py --config /srv/books/config.json
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
APP_PATH = PROJECT_ROOT / "library_search" / "gui" / "app.py"

sys.path.insert(0, str(PROJECT_ROOT))

from library_search.core import get_config, ConfigurationError  # noqa: E402
from library_search.core.config_loader import CONFIG_ENV_VAR  # noqa: E402


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Launch the library search page")

    parser.add_argument(
        "--config",
        type=Path,
        help=f"Config file to use (also read from ${CONFIG_ENV_VAR})"
    )
    parser.add_argument("--port", type=int, default=8501, help="Server port (default: 8501)")
    parser.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Do not open a browser window"
    )

    return parser.parse_args()


def main():
    """Check the configured library, then hand over to streamlit run."""
    args = parse_args()
    env = dict(os.environ)

    if args.config:
        env[CONFIG_ENV_VAR] = str(args.config.resolve())
        os.environ[CONFIG_ENV_VAR] = env[CONFIG_ENV_VAR]

    try:
        config = get_config()
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    library = config.paths.library_directory
    if not library.is_dir():
        print(f"Warning: library directory does not exist yet: {library}")

    print(f"Library: {library}")
    print(f"Serving on http://{args.host}:{args.port} (Ctrl+C to stop)")

    cmd = [
        sys.executable, "-m", "streamlit", "run", str(APP_PATH),
        "--server.port", str(args.port),
        "--server.address", args.host,
        "--server.headless", "true" if args.headless else "false",
    ]

    try:
        subprocess.run(cmd, cwd=str(PROJECT_ROOT), env=env)
    except KeyboardInterrupt:
        print("\nStopped.")


if __name__ == "__main__":
    main()
