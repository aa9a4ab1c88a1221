"""Render command: expand a single file to stdout or an output file."""

import logging
import sys
from argparse import Namespace
from dataclasses import replace
from pathlib import Path

from includereplace.config import Configuration
from includereplace.exceptions import ConfigValidationError, IncludeReplaceError
from includereplace.fs import FileSystem
from includereplace.includes import DirectiveExpander
from includereplace.loader import ConfigLoader

from .run import parse_globals, setup_logging


logger = logging.getLogger(__name__)


def build_config(args: Namespace) -> Configuration:
    """Build the configuration from an optional config file plus CLI overrides."""
    config = ConfigLoader().load(Path(args.config)) if args.config else Configuration()

    overrides = {}
    for option in ('prefix', 'suffix', 'includes_dir', 'docroot', 'encoding'):
        value = getattr(args, option)
        if value is not None:
            overrides[option] = value
    if args.no_mustache:
        overrides['use_mustache'] = False
    if args.unescaped:
        overrides['always_unescaped'] = True

    return replace(config, **overrides).with_globals(parse_globals(args))


def render_file(args: Namespace) -> int:
    """Expand ``args.file`` and write it to ``args.out`` or stdout."""
    setup_logging(args)

    try:
        config = build_config(args)
        fs = FileSystem()

        if not fs.is_file(args.file):
            logger.error(f"Source file not found: {args.file}")
            return 1

        expander = DirectiveExpander(config, fs)
        rendered = expander.expand_document(fs.read(args.file, config.encoding), args.file)

        if args.out:
            fs.write(args.out, rendered, config.encoding)
            logger.info(f"Wrote {args.out}")
        else:
            sys.stdout.write(rendered)
        return 0

    except ConfigValidationError as e:
        for error in e.errors:
            location = f" at '{error.path}'" if error.path else ""
            logger.error(f"Validation error{location}: {error.message}")
        return e.exit_code
    except IncludeReplaceError as e:
        logger.error(str(e))
        return e.exit_code
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 2
