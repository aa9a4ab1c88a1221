"""Run command implementation."""

import json
import logging
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict

from includereplace.exceptions import ConfigValidationError, IncludeReplaceError
from includereplace.loader import ConfigLoader
from includereplace.runner import IncludeReplaceRunner


logger = logging.getLogger(__name__)


def setup_logging(args: Namespace) -> None:
    """Configure logging from the CLI verbosity flags."""
    level_name = 'warning' if args.log_level == 'warn' else args.log_level
    log_level = getattr(logging, level_name.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def parse_globals(args: Namespace) -> Dict[str, Any]:
    """Parse global variables from command line arguments."""
    variables: Dict[str, Any] = {}

    # Parse globals from JSON file
    if args.globals_file:
        globals_file = Path(args.globals_file)
        if not globals_file.exists():
            raise FileNotFoundError(f"Globals file not found: {globals_file}")

        with open(globals_file, 'r', encoding='utf-8') as f:
            file_globals = json.load(f)
            if not isinstance(file_globals, dict):
                raise ValueError(f"Globals file must contain a JSON object, got {type(file_globals).__name__}")
            variables.update(file_globals)

    # KEY=VALUE pairs override the file
    if args.globals:
        for item in args.globals:
            if '=' not in item:
                raise ValueError(f"Invalid global format: {item}. Expected KEY=VALUE")
            key, value = item.split('=', 1)
            variables[key] = value

    return variables


def run_config(args: Namespace) -> int:
    """
    Process every file mapping of a configuration file.

    Exit codes: 0 success, 2 invalid configuration or include syntax,
    1 any other failure.
    """
    setup_logging(args)

    try:
        config_path = Path(args.config).resolve()
        if not config_path.exists():
            logger.error(f"Configuration file not found: {config_path}")
            return 1

        logger.info(f"Loading configuration: {config_path}")
        try:
            config = ConfigLoader().load(config_path)
        except ConfigValidationError as e:
            for error in e.errors:
                location = f" at '{error.path}'" if error.path else ""
                logger.error(f"Validation error{location}: {error.message}")
            return e.exit_code

        config = config.with_globals(parse_globals(args))

        if not config.files:
            logger.warning("No files configured; nothing to do")

        if args.dry_run:
            logger.info("[DRY RUN] Configuration validation successful")
            return 0

        result = IncludeReplaceRunner(config).run()
        logger.info(f"Processed {len(result.processed)} file(s) with {len(result.warnings)} warning(s)")
        return 0

    except IncludeReplaceError as e:
        logger.error(str(e))
        return e.exit_code
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 2
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
