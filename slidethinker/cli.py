#!/usr/bin/env python3
"""
SlideThinker CLI

Usage:
    slidethinker generate "Remote Work Productivity" --length 5 --quality standard
    slidethinker quick "Remote Work Productivity"
    slidethinker stream "Remote Work Productivity" --quality high
    slidethinker compare "Remote Work Productivity" --audience executives
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from slidethinker.core import SlideThinkerError, get_settings, setup_logging
from slidethinker.models import GenerationParams, QualityLevel
from slidethinker.services.thinking_agent import ThinkingOrchestrator, to_api_result

logger = logging.getLogger(__name__)

COMMANDS = ("generate", "quick", "stream", "compare")


def build_params(args: argparse.Namespace) -> GenerationParams:
    raw_data = None
    if args.raw_data_file:
        raw_data = Path(args.raw_data_file).read_text(encoding="utf-8")
    return GenerationParams(
        topic=args.topic,
        audience=args.audience,
        tone=args.tone,
        length=args.length,
        quality_level=QualityLevel(args.quality),
        raw_data=raw_data,
    )


def write_output(payload, output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote result to %s", output)
    else:
        print(text)


async def run_command(args: argparse.Namespace) -> None:
    orchestrator = ThinkingOrchestrator()

    if args.command == "compare":
        write_output(await orchestrator.compare_quality(args.topic, args.audience), args.output)
        return

    params = build_params(args)
    if args.command == "stream":
        events = []
        async for event in orchestrator.stream_thinking(params):
            if event.type == "state":
                phase = event.data.current_phase
                logger.info("[%s] %s", phase, orchestrator.get_phase_description(phase))
            events.append(event.to_dict())
        write_output(events, args.output)
        return

    if args.command == "quick":
        result = await orchestrator.generate_quick(params)
    else:
        result = await orchestrator.generate_with_thinking(params)
    write_output(to_api_result(result), args.output)


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="SlideThinker - iterative presentation generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  generate   Full plan / generate / reflect / refine loop
  quick      Single generation pass with a fixed plan
  stream     One reflect-and-refine pass, collecting progress events
  compare    Quick vs. thinking quality comparison
        """
    )
    parser.add_argument("command", choices=COMMANDS, help="What to run")
    parser.add_argument("topic", help="Presentation topic")
    parser.add_argument(
        "--length", "-l",
        type=int,
        help="Requested slide count"
    )
    parser.add_argument(
        "--quality", "-q",
        choices=[level.value for level in QualityLevel],
        default=QualityLevel.HIGH.value,
        help="Quality level (default: high)"
    )
    parser.add_argument("--audience", "-a", help="Target audience")
    parser.add_argument("--tone", "-t", help="Tone of voice")
    parser.add_argument(
        "--raw-data-file",
        type=str,
        help="Reference data to ground the content (disables research)"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write JSON here instead of stdout"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args(argv)
    # Exports .env into os.environ for DefaultAzureCredential
    load_dotenv()
    setup_logging(logging.DEBUG if args.verbose else get_settings().log_level, stream=sys.stderr)

    try:
        asyncio.run(run_command(args))
    except SlideThinkerError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
