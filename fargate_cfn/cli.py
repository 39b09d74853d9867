# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for fargate_cfn.
"""

import argparse
import logging
import sys

from fargate_cfn import __version__
from fargate_cfn.common.files import FileArtifact
from fargate_cfn.common.logging import LOG
from fargate_cfn.common.settings import FargateCfnSettings
from fargate_cfn.exceptions import FargateCfnBaseException, GenerationError
from fargate_cfn.template import generate_fragment, render_template

VALID_LEVELS = [
    "FATAL",
    "CRITICAL",
    "ERROR",
    "WARNING",
    "WARN",
    "INFO",
    "DEBUG",
]


class ArgparseHelper(argparse._HelpAction):
    """
    Used to help print top level '--help' arguments from argparse
    when used with subparsers
    """

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        print()
        subparsers_actions = [
            action
            for action in parser._actions
            if isinstance(action, argparse._SubParsersAction)
        ]
        for subparsers_action in subparsers_actions:
            for choice, subparser in list(subparsers_action.choices.items()):
                print(f"Command '{choice}'")
                print(subparser.format_usage())
        parser.exit()


def main_parser():
    """
    Console script for fargate_cfn.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action=ArgparseHelper,
        help="show this help message and exit",
    )
    parser.add_argument(
        "--loglevel", type=str, help="Log level. Defaults to INFO", required=False
    )

    cmd_parsers = parser.add_subparsers(
        dest=FargateCfnSettings.command_arg, help="Command to execute."
    )
    files_parser = argparse.ArgumentParser(add_help=False)
    render_parser = argparse.ArgumentParser(add_help=False)
    files_parser.add_argument(
        "-f",
        "--input-file",
        dest=FargateCfnSettings.input_file_arg,
        required=True,
        help="Path to the cluster and services definition file",
    )
    files_parser.add_argument(
        "--no-interpolate",
        dest=FargateCfnSettings.interpolate_arg,
        action="store_false",
        default=True,
        help="Do not replace environment variables in the input file",
    )
    render_parser.add_argument(
        "-d",
        "--output-dir",
        required=False,
        help="Output directory to write the template to. Defaults to stdout",
        type=str,
        dest=FargateCfnSettings.output_dir_arg,
        default=FargateCfnSettings.default_output_dir,
    )
    render_parser.add_argument(
        "--format",
        help="Defines the format you want to use.",
        type=str,
        dest=FargateCfnSettings.format_arg,
        choices=FargateCfnSettings.allowed_formats,
        default=FargateCfnSettings.default_format,
    )
    render_parser.add_argument(
        "-s",
        "--service",
        dest=FargateCfnSettings.services_arg,
        action="append",
        default=[],
        help="Name of a service to render. Defaults to all services",
    )
    render_parser.add_argument(
        "--description",
        dest=FargateCfnSettings.description_arg,
        required=False,
        help="Description of the template. Overrides the one from the input file",
    )
    for command in FargateCfnSettings.active_commands:
        cmd_parsers.add_parser(
            name=command["name"],
            help=command["help"],
            parents=[files_parser, render_parser],
        )
    for command in FargateCfnSettings.validation_commands:
        cmd_parsers.add_parser(
            name=command["name"], help=command["help"], parents=[files_parser]
        )
    for command in FargateCfnSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


def set_log_level(level: str) -> None:
    if level.upper() in VALID_LEVELS:
        LOG.setLevel(logging.getLevelName(level.upper()))
    else:
        LOG.warning(
            f"Log level value {level} is invalid. Must be one of {VALID_LEVELS}"
        )


def render(settings: FargateCfnSettings) -> str:
    """
    Generates the template for the selected services and writes it.

    :param FargateCfnSettings settings:
    :return: where the template was written to
    :rtype: str
    :raises GenerationError: when troposphere rejects a property value
    """
    services = settings.get_services()
    try:
        fragment = generate_fragment(settings.cluster, services)
    except (TypeError, ValueError) as error:
        raise GenerationError(
            f"Failed to generate {services}: {error}", error
        ) from error
    document = render_template(fragment, settings.description)
    artifact = FileArtifact(settings.file_name, document, settings.format)
    return artifact.write(settings.output_dir)


def main(args=None):
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    if args is None:
        args = sys.argv[1:]
    if not args:
        parser.print_help()
        return 0
    options = parser.parse_args(args)
    if options.loglevel:
        set_log_level(options.loglevel)
    LOG.debug(options)
    command = getattr(options, FargateCfnSettings.command_arg)
    if command == FargateCfnSettings.version_arg:
        print("fargate_cfn", __version__)
        return 0
    if command is None:
        parser.print_help()
        return 0
    try:
        settings = FargateCfnSettings(**vars(options))
        LOG.debug(settings)
        if command == FargateCfnSettings.validate_arg:
            LOG.info(f"{settings.input_file} is valid")
            return 0
        render(settings)
    except FargateCfnBaseException as error:
        LOG.error(error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
