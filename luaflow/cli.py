"""
Command line entry point: render a Lua file's control flow as a Mermaid flowchart.
"""

import argparse
import sys
from typing import List, Optional

from luaflow.exceptions import LuaFlowError
from luaflow.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

MISSING_INPUT_MESSAGE = "Please provide a Lua file path as an argument."

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luaflow",
        description="Render the control flow of a Lua file as a Mermaid flowchart",
    )
    parser.add_argument("input", nargs="?", help="Path to the Lua source file")
    parser.add_argument(
        "-o",
        "--output",
        default=settings.output_file,
        help=f"Mermaid file path (default: {settings.output_file})",
    )
    parser.add_argument(
        "--no-markdown",
        action="store_true",
        help="Do not write the fenced '<output>.md' companion file",
    )
    parser.add_argument(
        "--label-elseif",
        action="store_true",
        default=settings.label_elseif_conditions,
        help="Give each elseif clause its own condition node",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level.upper(),
        help=f"Log level (default: {settings.log_level})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (sys.argv[1:] if omitted)

    Returns:
        Process exit status
    """
    from luaflow.config import Settings

    settings = Settings()
    args = _build_parser(settings).parse_args(argv)

    if not args.input:
        print(MISSING_INPUT_MESSAGE, file=sys.stderr)
        return 1

    setup_logging(args.log_level)

    settings = settings.model_copy(
        update={
            "label_elseif_conditions": args.label_elseif,
            "write_markdown": settings.write_markdown and not args.no_markdown,
        }
    )

    from luaflow.services import DiagramService
    from plugins.manager import create_plugin_manager

    service = DiagramService(create_plugin_manager(), settings=settings)
    try:
        output = service.write(args.input, args.output)
    except LuaFlowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"Mermaid diagram saved to {output}")
    return 0


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
