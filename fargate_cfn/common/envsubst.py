#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille <john@compose-x.io>

"""
Module to interpolate environment variables into the input file content.
CloudFormation pseudo parameters, ${AWS::...}, are never interpolated.
"""

import os
import re

VARIABLE_RE = re.compile(r"(?<!\\)\$(\w+|\{(?!AWS::)([^}]*)\})")
MODIFIER_RE = re.compile(r"^(?P<name>[^:}]+):(?P<modifier>[-+])(?P<value>.*)$")
IF_UNDEFINED = "-"
IF_DEFINED = "+"


def expandvars(content: str, default: str = None) -> str:
    """
    Replaces $VAR, ${VAR}, ${VAR:-fallback} and ${VAR:+value} in content with the environment values.
    Escaped references, \\$VAR, are left as-is.

    :param str content: the text to interpolate
    :param str default: value for the undefined variables. If None, they are left unchanged.
    :return: the interpolated text
    :rtype: str
    """

    def replace_var(match):
        expression = match.group(2)
        if expression is not None:
            modified = MODIFIER_RE.match(expression)
            if modified:
                env_value = os.environ.get(modified.group("name"))
                if modified.group("modifier") == IF_UNDEFINED:
                    return env_value or expandvars(modified.group("value"), default)
                if env_value:
                    return expandvars(modified.group("value"), default)
                return ""
        return os.environ.get(
            expression or match.group(1),
            match.group(0) if default is None else default,
        )

    return VARIABLE_RE.sub(replace_var, content)
