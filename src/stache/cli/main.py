# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the Stache command-line interface."""

import argparse
import importlib
import logging
import os
import sys
from pathlib import Path

from yachalk import chalk

from stache.compiler.cache import ReferenceCompiler
from stache.compiler.reference_compiler import CompileError
from stache.compiler.scanner import ReferenceSyntaxError, parse_reference
from stache.config.settings import CONFIG_FILE_NAME, CompilerConfig, ConfigError, load_compiler_config
from stache.presenter.inspector import describe

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the Stache CLI."""
    parser = argparse.ArgumentParser(
        prog="stache",
        description="Stache - statically checked presenter references",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log compiler activity to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Compile references against a presenter class",
        description=(
            "Compile each reference against the presenter class and report errors. "
            "References whose identifier ends with '?' are compiled as conditionals."
        ),
    )
    check_parser.add_argument(
        "presenter",
        help="Presenter class as 'package.module:ClassName'",
    )
    check_parser.add_argument(
        "references",
        nargs="+",
        metavar="REFERENCE",
        help="Reference tag text, e.g. 'i18n.home.welcome fallback=Hi'",
    )
    check_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Settings file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )

    # describe subcommand
    describe_parser = subparsers.add_parser(
        "describe",
        help="List the capabilities a presenter class exposes",
        description="Print the call shape of every method available to templates.",
    )
    describe_parser.add_argument(
        "presenter",
        help="Presenter class as 'package.module:ClassName'",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


class _PresenterLookupError(Exception):
    """Raised when a 'module:Class' argument cannot be resolved."""


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "describe":
        return _cmd_describe(args)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        presenter_class = _load_presenter(args.presenter)
    except _PresenterLookupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        config = _load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    compiler = ReferenceCompiler(config)
    failures = 0
    for text in args.references:
        try:
            reference = parse_reference(text)
            if reference.is_conditional:
                compiler.compile_conditional(presenter_class, reference)
            else:
                compiler.compile_reference(presenter_class, reference)
        except (ReferenceSyntaxError, CompileError) as exc:
            failures += 1
            print(chalk.red(f"  FAIL  {exc}"))
        else:
            print(chalk.green(f"  ok    {reference.text}"))

    total = len(args.references)
    if failures:
        print(chalk.red(f"{failures} of {total} reference(s) failed to compile."), file=sys.stderr)
        return 1
    print(f"All {total} reference(s) compiled.")
    return 0


def _cmd_describe(args: argparse.Namespace) -> int:
    """Handle the describe subcommand."""
    try:
        presenter_class = _load_presenter(args.presenter)
    except _PresenterLookupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    descriptor = describe(presenter_class)
    if not descriptor.identifiers:
        print(f"{presenter_class.__qualname__} exposes no methods.")
        return 0

    print(f"{presenter_class.__qualname__}:")
    for identifier in descriptor.identifiers:
        capability = descriptor.capability_of(identifier)
        shape = capability.call_shape()
        print(chalk.yellow(f"  {shape}") if capability.unsupported_arity else f"  {shape}")
    return 0


def _load_presenter(location: str) -> type:
    """Import a presenter class from a 'package.module:ClassName' string."""
    module_name, sep, class_name = location.partition(":")
    if not sep or not module_name or not class_name:
        raise _PresenterLookupError(f"expected 'module:ClassName', got '{location}'")
    # Console scripts do not put the working directory on the import path.
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise _PresenterLookupError(f"cannot import module '{module_name}': {exc}") from exc

    target: object = module
    for part in class_name.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise _PresenterLookupError(f"'{module_name}' has no attribute '{class_name}'") from None
    if not isinstance(target, type):
        raise _PresenterLookupError(f"'{location}' is not a class")
    return target


def _load_config(path: Path | None) -> CompilerConfig:
    """Load settings from *path*, or from the default file when it exists."""
    if path is not None:
        return load_compiler_config(path)
    default = Path.cwd() / CONFIG_FILE_NAME
    if default.exists():
        return load_compiler_config(default)
    return CompilerConfig()
