#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille <john@compose-x.io>

"""
Functions to render a template document and write it to the local filesystem or stdout
"""

import json
import sys
from os import makedirs, path

import yaml
from cfn_flip.yaml_dumper import LongCleanDumper

from fargate_cfn.common.logging import LOG

JSON_MIME = "application/json"
YAML_MIME = "application/x-yaml"
STDOUT_PATH = "-"


class FileArtifact:
    """
    Class to handle the template file to render.

    :cvar str mime: MIME-type of the file
    :ivar dict content: the template document
    :ivar str file_name: name of the file, with its extension
    :ivar str body: the rendered content
    """

    mime = JSON_MIME

    def __init__(self, file_name: str, content: dict, file_format: str = "json"):
        if not isinstance(content, dict):
            raise TypeError("content must be of type", dict, "got", type(content))
        if file_format not in ["json", "yaml"]:
            raise ValueError("file_format must be one of json, yaml. Got", file_format)
        self.file_name = file_name
        self.content = content
        self.mime = YAML_MIME if file_format == "yaml" else JSON_MIME
        self.body = self.define_body()

    def __repr__(self):
        return self.file_name

    def define_body(self) -> str:
        if self.mime == YAML_MIME:
            return yaml.dump(self.content, Dumper=LongCleanDumper)
        return json.dumps(self.content, indent=4)

    def write(self, output_dir: str) -> str:
        """
        Writes the file into output_dir, or to stdout when output_dir is -

        :param str output_dir:
        :return: the path written to
        :rtype: str
        """
        if output_dir == STDOUT_PATH:
            sys.stdout.write(self.body)
            if not self.body.endswith("\n"):
                sys.stdout.write("\n")
            return STDOUT_PATH
        if not path.isdir(output_dir):
            makedirs(output_dir)
            LOG.debug(f"Created directory {output_dir} to store files")
        file_path = path.join(output_dir, self.file_name)
        with open(file_path, "w", encoding="utf-8") as template_fd:
            template_fd.write(self.body)
        LOG.info(
            f"Template {self.file_name} written successfully at {path.abspath(file_path)}"
        )
        return file_path
