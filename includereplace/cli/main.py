"""Main CLI entry point for includereplace."""

import argparse
import sys
from typing import Optional

from .commands import run_config


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='info',
        help='Set log level'
    )


def _add_globals_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--global',
        dest='globals',
        action='append',
        metavar='KEY=VALUE',
        help='Global variables (can be specified multiple times)'
    )
    parser.add_argument(
        '--globals-file',
        type=str,
        help='Path to JSON file containing global variables'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the includereplace CLI."""
    parser = argparse.ArgumentParser(
        prog='includereplace',
        description='Include files and replace variables'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Process the files listed in a config file')
    run_parser.add_argument(
        'config',
        type=str,
        help='Path to configuration YAML file'
    )
    _add_globals_arguments(run_parser)
    run_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate the configuration without processing files'
    )
    _add_logging_arguments(run_parser)

    # Render command
    render_parser = subparsers.add_parser('render', help='Expand a single file')
    render_parser.add_argument(
        'file',
        type=str,
        help='Path to the source file'
    )
    render_parser.add_argument(
        '--out',
        type=str,
        help='Output file (default: stdout)'
    )
    render_parser.add_argument(
        '--config',
        type=str,
        help='Configuration YAML file to take options from'
    )
    _add_globals_arguments(render_parser)
    render_parser.add_argument('--prefix', type=str, help='Placeholder prefix (default: @@)')
    render_parser.add_argument('--suffix', type=str, help='Placeholder suffix (default: empty)')
    render_parser.add_argument('--includes-dir', type=str, help='Base directory for relative includes')
    render_parser.add_argument('--docroot', type=str, help='Directory docroot values point to')
    render_parser.add_argument('--encoding', type=str, help='File encoding (default: utf-8)')
    render_parser.add_argument(
        '--no-mustache',
        action='store_true',
        help='Disable the Mustache templating pass'
    )
    render_parser.add_argument(
        '--unescaped',
        action='store_true',
        help='Do not HTML-escape Mustache values'
    )
    _add_logging_arguments(render_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'run':
        return run_config(parsed_args)
    elif parsed_args.command == 'render':
        from includereplace.cli.commands import render_file
        return render_file(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
