"""Live test harness for the Kodi session.

Usage::

    export KODI_HOST="192.168.1.20"
    export KODI_PORT="9090"

    python -m devtools.kodi_harness --movie "Interstellar"

Connects to Kodi, prints every domain event and availability change and,
optionally, runs one library command. Runs until interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys


async def _amain() -> None:
    from kodimedia import KodiError, KodiEvent, KodiSession
    from kodimedia.config import KodiSessionConfig

    host = os.getenv("KODI_HOST")
    if not host:
        print("KODI_HOST environment variable not set – nothing to do.")
        sys.exit(1)

    parser = argparse.ArgumentParser(description="Quick Kodi session harness")
    parser.add_argument("--movie", help="Play the movie best matching this title", default=None)
    parser.add_argument(
        "--episode", help="Play the next unwatched episode of this show", default=None
    )
    parser.add_argument("--addon", help="Start the addon best matching this name", default=None)
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    config = KodiSessionConfig.from_dict(
        {"host": host, "port": os.getenv("KODI_PORT", "9090")}
    )

    def print_event(event: KodiEvent) -> None:
        print(f" • {event.type}  {event.item or ''}  {event.param_flow()}")

    async with KodiSession(config) as kodi:
        kodi.add_event_listener(print_event)
        kodi.add_availability_listener(lambda change: print(f" ~ {change}"))

        try:
            if args.movie:
                print(f"Playing {await kodi.async_play_movie(args.movie)}")
            if args.episode:
                print(f"Playing {await kodi.async_play_latest_unwatched_episode(args.episode)}")
            if args.addon:
                print(f"Started {await kodi.async_start_addon(args.addon)}")
        except KodiError as err:
            print(f"Command failed ({err.translation_key}): {err}")

        print("Listening for events (Ctrl+C to stop)...")
        await asyncio.Event().wait()


def main() -> None:
    try:
        asyncio.run(_amain())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
