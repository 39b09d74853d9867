# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the FargateCfnSettings class
"""

from __future__ import annotations

from json import loads
from os import path

import jsonschema
import yaml
from compose_x_common.compose_x_common import keyisset, set_else_none
from importlib_resources import files as pkg_files

from fargate_cfn.cluster import Cluster
from fargate_cfn.common.envsubst import expandvars
from fargate_cfn.common.logging import LOG
from fargate_cfn.exceptions import InvalidInputFile, ServiceNotFound
from fargate_cfn.service_options import ServiceOptions

SCHEMA_PATH = "specs/fargate-cfn.spec.json"


def load_input_schema() -> dict:
    """
    Loads the JSON schema the input files are validated against

    :rtype: dict
    """
    source = pkg_files("fargate_cfn").joinpath(SCHEMA_PATH)
    LOG.debug(f"Loading input schema {source}")
    return loads(source.read_text())


def validate_content(content: dict) -> None:
    """
    Validates the input content against the input schema

    :param dict content:
    :raises InvalidInputFile: when the content does not match the schema
    """
    try:
        jsonschema.validate(content, load_input_schema())
    except jsonschema.exceptions.ValidationError as error:
        location = ".".join(str(part) for part in error.absolute_path)
        raise InvalidInputFile(
            f"Invalid input at '{location}': {error.message}", error
        ) from error


def load_input_file(file_path: str, interpolate: bool = True) -> dict:
    """
    Reads and parses a YAML or JSON input file, after interpolating environment variables.

    :param str file_path:
    :param bool interpolate: whether to replace environment variables in the file
    :rtype: dict
    :raises InvalidInputFile: when the file cannot be read or parsed
    """
    try:
        with open(path.abspath(file_path), encoding="utf-8") as input_fd:
            raw_content = input_fd.read()
    except OSError as error:
        raise InvalidInputFile(f"Unable to read {file_path}", error) from error
    if interpolate:
        raw_content = expandvars(raw_content)
    try:
        content = yaml.safe_load(raw_content)
    except yaml.YAMLError as error:
        raise InvalidInputFile(f"Unable to parse {file_path}", error) from error
    if not isinstance(content, dict):
        raise InvalidInputFile(
            f"{file_path} - expected a mapping at the top level, got", type(content)
        )
    return content


class FargateCfnSettings:
    """
    Class to handle the settings of a fargate_cfn run.

    :ivar Cluster cluster: the cluster all services are generated for
    :ivar dict[str, ServiceOptions] services: the services to generate, by name, in file order
    :ivar str description: Description of the rendered template
    """

    command_arg = "command"
    input_file_arg = "InputFile"
    output_dir_arg = "OutputDirectory"
    format_arg = "TemplateFormat"
    services_arg = "Services"
    description_arg = "Description"
    interpolate_arg = "Interpolate"

    render_arg = "render"
    validate_arg = "validate"
    version_arg = "version"

    default_format = "json"
    allowed_formats = ["json", "yaml"]
    default_output_dir = "-"

    active_commands = [
        {
            "name": render_arg,
            "help": "Generates the services resources and writes the template",
        },
    ]
    validation_commands = [
        {"name": validate_arg, "help": "Validates the input file only"},
    ]
    neutral_commands = [{"name": version_arg, "help": "Print version"}]

    def __init__(self, content: dict = None, **kwargs):
        """
        :param dict content: input content to use instead of reading the input file
        :param dict kwargs: the command line arguments
        """
        self.command = set_else_none(self.command_arg, kwargs, self.render_arg)
        self.input_file = set_else_none(self.input_file_arg, kwargs)
        self.output_dir = set_else_none(
            self.output_dir_arg, kwargs, self.default_output_dir
        )
        self.format = set_else_none(self.format_arg, kwargs, self.default_format)
        if self.format not in self.allowed_formats:
            raise ValueError(
                "Format", self.format, "is not valid. Expected one of", self.allowed_formats
            )
        self.selected_services = set_else_none(self.services_arg, kwargs, [])
        self.interpolate = set_else_none(
            self.interpolate_arg, kwargs, True, eval_bool=True
        )
        self.cluster = None
        self.services = {}
        self.description = None
        if content is None:
            if not self.input_file:
                raise InvalidInputFile("No input file nor content given")
            content = load_input_file(self.input_file, self.interpolate)
        self.set_content(content)
        if keyisset(self.description_arg, kwargs):
            self.description = kwargs[self.description_arg]

    def __repr__(self):
        return f"{self.cluster} - {list(self.services.keys())}"

    @property
    def file_name(self) -> str:
        """Name of the output file, based on the input file name"""
        if not self.input_file:
            return f"fargate-services.{self.format}"
        stem = path.splitext(path.basename(self.input_file))[0]
        return f"{stem}.{self.format}"

    def set_content(self, content: dict) -> None:
        """
        Validates the content and sets the cluster and the services

        :param dict content:
        """
        validate_content(content)
        self.cluster = Cluster.from_dict(content["Cluster"])
        self.description = set_else_none(self.description_arg, content)
        self.services = {
            name: ServiceOptions.from_dict(name, definition)
            for name, definition in content["Services"].items()
        }
        LOG.debug(f"Loaded services {list(self.services.keys())} for {self.cluster}")

    def get_services(self) -> list:
        """
        Returns the services to render, all of them unless some were selected.

        :rtype: list[ServiceOptions]
        :raises ServiceNotFound: when a selected service is not in the input
        """
        if not self.selected_services:
            return list(self.services.values())
        services = []
        for name in self.selected_services:
            if name not in self.services:
                raise ServiceNotFound(
                    f"Service {name} not defined. Expected one of",
                    list(self.services.keys()),
                )
            services.append(self.services[name])
        return services
