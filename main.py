#!/usr/bin/env python3
"""App Store (VPP) License CLI.

This module provides a command-line interface for listing the VPP-purchased
App Store apps available to a team and adding one of them to the team.

Architecture:
    - FleetClient is the shared HTTP layer for all API calls
    - MDMAppleAPI wraps the VPP endpoints
    - AppStoreVppSession drives one list-select-submit interaction

Environment Variables Required:
    - FLEET_URL: Backend base URL
    - FLEET_API_TOKEN: API token of an admin user

Example Usage:
    $ python main.py --team-id 5                      # List App Store apps
    $ python main.py --team-id 5 --add 803453959      # Add Slack to team 5
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Local imports
from src.vpp.api import ConfigurationError, FleetClient, MDMAppleAPI
from src.vpp.assignment.adapters import FleetVppRepository, LoggingNotifier, RecordingNavigator
from src.vpp.assignment.use_cases import AppStoreVppSession, ViewState, VppView

logger = logging.getLogger("vpp.cli")


def print_view(team_id: int, view: VppView) -> None:
    """Print the view the way the web UI would lay it out."""
    print(f"\n[Team {team_id}] {view.description}")

    if view.state == ViewState.LOADING:
        print("  Loading...")
    elif view.state == ViewState.ENABLE_VPP:
        print(f"  {view.title}")
        print(f"  {view.message} ({view.link_text}: {view.link_url})")
    elif view.state in (ViewState.ERROR, ViewState.EMPTY):
        print(f"  {view.title}")
        print(f"  {view.message}")
    else:
        for item in view.items:
            marker = "(x)" if item.selected else "( )"
            print(f"  {marker} {item.app.id:>12}  {item.app.display_name}")


async def run(team_id: int, app_store_id: Optional[str] = None) -> int:
    """Run one session. Returns the process exit code."""
    try:
        client = FleetClient()
    except ConfigurationError as e:
        print(f"[Main] Configuration error: {e}")
        return 1

    async with client:
        repository = FleetVppRepository(MDMAppleAPI(client))
        navigator = RecordingNavigator()
        session = AppStoreVppSession.create(
            team_id,
            repository,
            LoggingNotifier(logger),
            navigator,
        )

        view = await session.load()
        print_view(team_id, view)

        if not app_store_id:
            session.cancel()
            return 0 if view.state in (ViewState.LIST, ViewState.EMPTY) else 2

        if view.state != ViewState.LIST:
            session.cancel()
            print("[Main] No App Store apps can be added for this team")
            return 2

        try:
            session.select(app_store_id)
        except KeyError as e:
            session.cancel()
            print(f"[Main] {e.args[0]}")
            return 2

        outcome = await session.submit()
        if navigator.current_url:
            print(f"[Main] Continue at {navigator.current_url}")
        return 0 if outcome.is_success else 3


def main():
    parser = argparse.ArgumentParser(
        description="List and add VPP App Store apps for a team",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --team-id 5                  # List App Store apps for team 5
  python main.py --team-id 5 --add 803453959  # Add an app to team 5
        """
    )
    parser.add_argument(
        "--team-id",
        type=int,
        required=True,
        metavar="ID",
        help="Team to list or add App Store apps for",
    )
    parser.add_argument(
        "--add",
        type=str,
        metavar="APP_STORE_ID",
        help="App Store id of the app to add",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    sys.exit(asyncio.run(run(args.team_id, args.add)))


if __name__ == "__main__":
    main()
