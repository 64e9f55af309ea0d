# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the ShapeQL command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from graphql import GraphQLSchema, print_schema

from shapeql.compiler.build import create_schema
from shapeql.compiler.errors import CompilerError
from shapeql.config.loader import ConfigError, load_config
from shapeql.config.options import CompileOptions

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the ShapeQL CLI."""
    parser = argparse.ArgumentParser(
        prog="shapeql",
        description="ShapeQL: compile TypeScript-style type declarations into a GraphQL schema",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log compiler progress to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # print subcommand
    print_parser = subparsers.add_parser(
        "print",
        help="Print the GraphQL schema of a declaration file",
        description="Compile a declaration file and print the resulting schema in SDL form.",
    )
    print_parser.add_argument("file", help="Declaration file to compile")
    print_parser.add_argument("--config", help="YAML file with compile options")
    print_parser.add_argument(
        "--output",
        "-o",
        help="Write the schema to this file instead of standard output",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that a declaration file compiles",
        description="Compile a declaration file and report errors without printing the schema.",
    )
    check_parser.add_argument("file", help="Declaration file to compile")
    check_parser.add_argument("--config", help="YAML file with compile options")

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


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "print":
        return _cmd_print(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _compile(args: argparse.Namespace) -> GraphQLSchema | None:
    """Load the options and compile the file, printing any error to stderr."""
    options = CompileOptions()
    if args.config is not None:
        try:
            options = load_config(Path(args.config))
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return None

    try:
        return create_schema(Path(args.file), options)
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _cmd_print(args: argparse.Namespace) -> int:
    """Handle the print subcommand."""
    schema = _compile(args)
    if schema is None:
        return 1

    sdl = print_schema(schema) + "\n"
    if args.output is None:
        sys.stdout.write(sdl)
        return 0

    output = Path(args.output)
    try:
        output.write_text(sdl, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1
    print(f"Wrote schema to '{output}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    schema = _compile(args)
    if schema is None:
        return 1

    type_count = sum(1 for name in schema.type_map if not name.startswith("__"))
    print(f"'{args.file}' compiles to a schema with {type_count} named type(s).")
    print("No issues found.")
    return 0
