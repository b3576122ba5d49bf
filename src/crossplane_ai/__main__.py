"""Entry point for the crossplane-ai command."""

import argparse
import logging
import sys
from typing import Any

from crossplane_ai import __version__
from crossplane_ai.config import CrossplaneAIConfig, LogLevel, TransportMode

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    """Add resource filter arguments to a subparser."""
    parser.add_argument("--provider", default=None, help="Only resources of this provider (e.g. aws)")
    parser.add_argument("--namespace", default=None, help="Only resources in this namespace")


def _add_output_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        choices=["table", "json", "yaml"],
        default=None,
        help="Output format (default: from config or table)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="crossplane-ai",
        description="AI-style assistant for querying, analyzing and generating Crossplane resources",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--config", default=None, help="Config file (default: ~/.crossplane-ai.yaml)")
    parser.add_argument("--kubeconfig", default=None, help="Path to kubeconfig file")
    parser.add_argument("--context", default=None, help="Kubeconfig context to use")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the embedded sample cluster instead of a live cluster",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose (debug) logging")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for cluster and completion requests (default: 30)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Ask a question about your Crossplane resources")
    ask.add_argument("question", nargs="+", help="The question, in plain language")
    _add_filter_args(ask)
    _add_output_arg(ask)

    analyze = subparsers.add_parser("analyze", help="Analyze resource health")
    analyze.add_argument("name", nargs="?", default=None, help="Analyze only this resource")
    _add_filter_args(analyze)
    analyze.add_argument(
        "-H",
        "--health-check",
        action="store_true",
        help="Also report resources without readiness information",
    )
    analyze.add_argument("-s", "--summary", action="store_true", help="Show the summary only")
    _add_output_arg(analyze)

    suggest = subparsers.add_parser("suggest", help="Get improvement suggestions")
    suggest.add_argument(
        "category",
        nargs="?",
        default=None,
        help="database, security, optimize, network (default: general)",
    )
    _add_filter_args(suggest)
    suggest.add_argument("-l", "--limit", type=int, default=None, help="Maximum suggestions shown")
    suggest.add_argument("-d", "--detailed", action="store_true", help="Show categories and examples")
    _add_output_arg(suggest)

    generate = subparsers.add_parser("generate", help="Generate a Crossplane manifest")
    generate.add_argument("description", nargs="*", help="What to create, in plain language")
    generate.add_argument(
        "-p",
        "--provider",
        default="auto",
        help="Cloud provider: aws, gcp, azure or auto (default: auto)",
    )
    generate.add_argument(
        "-o",
        "--output",
        choices=["yaml", "json"],
        default="yaml",
        help="Manifest format (default: yaml)",
    )
    generate.add_argument(
        "-d",
        "--dir",
        default=None,
        help="Target directory for 'generate examples' (default: ./examples)",
    )
    generate.add_argument(
        "--list",
        action="store_true",
        help="With 'examples', list the example types instead of writing files",
    )

    interactive = subparsers.add_parser("interactive", help="Start an interactive session")
    interactive.add_argument(
        "-a",
        "--analyze",
        action="store_true",
        help="Run an analysis before the first prompt",
    )

    serve = subparsers.add_parser("serve", help="Run as an MCP server")
    serve.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default=None,
        help="Transport mode (default: from config or stdio)",
    )
    serve.add_argument("--host", default=None, help="Host to bind HTTP server to (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Port to bind HTTP server to (default: 8000)")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def build_config(args: argparse.Namespace) -> CrossplaneAIConfig:
    """Build config from args, falling back to the config file, environment and defaults.

    Raises:
        ConfigurationError: If the config file cannot be loaded.
    """
    overrides: dict[str, Any] = {
        "kubeconfig_path": args.kubeconfig,
        "kubeconfig_context": args.context,
        "request_timeout": args.timeout,
    }

    if args.mock:
        overrides["mode"] = "mock"

    if args.log_level:
        overrides["log_level"] = LogLevel(args.log_level)
    elif args.verbose:
        overrides["log_level"] = LogLevel.DEBUG

    if args.command == "serve":
        if args.transport:
            overrides["transport"] = TransportMode(args.transport)
        overrides["host"] = args.host
        overrides["port"] = args.port

    return CrossplaneAIConfig.from_file(args.config, **overrides)


def run_command(args: argparse.Namespace, config: CrossplaneAIConfig) -> int:
    """Dispatch a parsed command."""
    from crossplane_ai import commands
    from crossplane_ai.domains.assistant import AssistantService

    if args.command == "generate":
        return commands.run_generate(args, AssistantService(config))

    if args.command == "serve":
        return serve(config)

    session = commands.Session.open(config)
    try:
        if args.command == "ask":
            return commands.run_ask(args, session)
        if args.command == "analyze":
            return commands.run_analyze(args, session)
        if args.command == "suggest":
            return commands.run_suggest(args, session)

        from crossplane_ai.interactive import InteractiveShell

        return InteractiveShell(session).run(analyze_first=args.analyze)
    finally:
        session.close()


def serve(config: CrossplaneAIConfig) -> int:
    """Run the MCP server with the configured transport."""
    from crossplane_ai.server import create_server

    logger = logging.getLogger(__name__)
    mcp = create_server(config)

    if config.transport == TransportMode.STDIO:
        logger.info("Running with stdio transport")
    else:
        logger.info(f"Running with {config.transport.value} transport on {config.host}:{config.port}")
    mcp.run(transport=config.transport.value)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from crossplane_ai.utils.errors import (
        ConfigurationError,
        CrossplaneAIError,
        ValidationError,
    )

    args = parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)
    logger.debug(f"crossplane-ai v{__version__}, command={args.command}, mock={config.mock_mode}")

    try:
        return run_command(args, config)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_USAGE
    except ConfigurationError as e:
        print(f"failed to initialize cluster client: {e.message}", file=sys.stderr)
        return EXIT_FAILURE
    except CrossplaneAIError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
