"""
Maze navigation episode

Runs one navigator through the reference 4x4 maze, renders every move and
writes the telemetry export to ``$TELEMETRY_DIR/telemetry-<session>.json``.

Run (no API key needed):  python examples/maze/run.py
Run with an LLM:          python examples/maze/run.py --llm
"""

import argparse
import asyncio
import json
import time

from minimaze import (
    JsonTelemetryStore,
    LLMNavigator,
    MazeSession,
    NavigatorFailedError,
    ScriptedNavigator,
    run_episode,
)
from minimaze.config import Config
from minimaze.logging_utils import log_error, log_info


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maze navigation episode")
    parser.add_argument("--llm", action="store_true", help="Use the LLM navigator")
    parser.add_argument(
        "--steps", type=int, default=Config.MAX_STEPS, help="Maximum navigator turns"
    )
    parser.add_argument("--no-render", action="store_true", help="Skip ASCII frames")
    return parser.parse_args()


async def main(args: argparse.Namespace) -> None:
    session = MazeSession()

    if args.llm:
        Config.validate()
        navigator = LLMNavigator(llm_provider=Config.LLM_PROVIDER, llm_model=Config.LLM_MODEL)
    else:
        navigator = ScriptedNavigator(session.grid)

    log_info(Config.display())

    store = JsonTelemetryStore(Config.TELEMETRY_DIR)
    await store.initialize()
    session_id = str(int(time.time() * 1000))

    try:
        result = await run_episode(
            session,
            navigator,
            max_steps=args.steps,
            store=store,
            session_id=session_id,
            render=not args.no_render,
            frame_delay=Config.FRAME_DELAY_SECONDS,
        )
    except NavigatorFailedError as exc:
        log_error(str(exc))
        return
    finally:
        await store.close()

    print("\n=== Navigation Complete ===")
    print("Final Results:", json.dumps(result.summary.to_display(), indent=2))


if __name__ == "__main__":
    asyncio.run(main(parse_args()))
