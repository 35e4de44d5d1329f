#!/usr/bin/env python3
"""
Run a directory of test definitions from the command line

Usage:
    python scripts/run_suite.py [tests_dir] [--config run_config.json]

Prints one PASSED/FAILED line per test and exits with status 1 when any test
failed or the run could not be configured.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from webtest_agent.agent.runner import AgentRunner
from webtest_agent.config import Settings, settings
from webtest_agent.llm import ReasoningConfigError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Execute natural-language UI tests")
    parser.add_argument("tests_dir", nargs="?", default=None, help="Directory of *.txt test definitions")
    parser.add_argument("--config", default=None, help="JSON run configuration file")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    config = Settings.from_json_file(args.config) if args.config else settings

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger = logging.getLogger("run_suite")

    try:
        runner = AgentRunner(config)
    except ReasoningConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    async with runner:
        summaries = await runner.run_from_directory(args.tests_dir)

    print(f"\n{'='*80}")
    for summary in summaries:
        marker = "✅" if summary.status == "PASSED" else "❌"
        print(f"{marker} {summary.status:<7} {summary.test_id} - {summary.title}")
    for error in runner.parse_errors:
        print(f"⚠️  SKIPPED {error}")
    print(f"{'='*80}")
    print(f"Reports written to: {config.artifacts_dir}")

    return 1 if any(summary.status != "PASSED" for summary in summaries) else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
