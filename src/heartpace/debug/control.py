"""
Control a running Heartpace daemon from the command line.

Talks to the daemon's HTTP control API. Useful for:
- Checking the current BPM and icon state
- Pressing the ±5 BPM / ±5 min buttons without a GUI
- Resetting the trajectory

Usage:
    python -m heartpace.debug.control status
    python -m heartpace.debug.control reset
    python -m heartpace.debug.control set --initial-bpm 120 --slope-minutes 45
    python -m heartpace.debug.control adjust target_bpm decrement
"""

import argparse
import json
import logging
import sys
from typing import Optional

import httpx

from heartpace.pulse.controls import CONTROLS, DIRECTIONS
from heartpace.utils.config import get_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("heartpace.debug.control")


def build_request(args: argparse.Namespace) -> tuple[str, str, Optional[dict]]:
    """Map parsed arguments to (method, path, json body)."""
    if args.command == "status":
        return "GET", "/api/status", None
    if args.command == "reset":
        return "POST", "/api/trajectory/reset", None
    if args.command == "adjust":
        return "POST", f"/api/controls/{args.control}/{args.direction}", None

    body = {
        "initial_bpm": args.initial_bpm,
        "target_bpm": args.target_bpm,
        "slope_duration_minutes": args.slope_minutes,
    }
    return "PUT", "/api/trajectory", {k: v for k, v in body.items() if v is not None}


def run_control(args: argparse.Namespace, client: Optional[httpx.Client] = None) -> int:
    """
    Send one request to the control API and print the resulting snapshot.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = get_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    method, path, body = build_request(args)

    headers = {}
    if config.api_token:
        headers["Authorization"] = f"Bearer {config.api_token}"

    owns_client = client is None
    client = client or httpx.Client(base_url=config.api_url, timeout=5.0)
    try:
        response = client.request(method, path, json=body, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"{method} {path} failed: {e.response.status_code} {e.response.text}")
        return 1
    except httpx.HTTPError as e:
        logger.error(f"Could not reach Heartpace at {config.api_url}: {e}")
        return 1
    finally:
        if owns_client:
            client.close()

    print(json.dumps(response.json(), indent=2))
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Control a running Heartpace daemon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m heartpace.debug.control status
    python -m heartpace.debug.control set --target-bpm 55
    python -m heartpace.debug.control adjust initial_bpm increment
    python -m heartpace.debug.control reset
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show the current pulse snapshot")
    subparsers.add_parser("reset", help="Restart the ramp with default initial BPM and slope")

    set_parser = subparsers.add_parser("set", help="Set trajectory parameters")
    set_parser.add_argument("--initial-bpm", type=float, help="Starting BPM (50-150)")
    set_parser.add_argument("--target-bpm", type=float, help="Target BPM (50-150)")
    set_parser.add_argument("--slope-minutes", type=float, help="Slope duration (20-60 minutes)")

    adjust_parser = subparsers.add_parser("adjust", help="Press a ±5 button")
    adjust_parser.add_argument("control", choices=CONTROLS)
    adjust_parser.add_argument("direction", choices=DIRECTIONS)

    args = parser.parse_args()
    sys.exit(run_control(args))


if __name__ == "__main__":
    main()
