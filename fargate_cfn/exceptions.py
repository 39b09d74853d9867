#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for fargate_cfn
"""


class FargateCfnBaseException(Exception):
    """
    Top class for fargate_cfn Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)


class InvalidInputFile(FargateCfnBaseException):
    """
    Exception when the input file cannot be read, parsed or does not match the input schema
    """


class ServiceNotFound(FargateCfnBaseException):
    """
    Exception when a service is selected for rendering but is not defined in the input file
    """


class GenerationError(FargateCfnBaseException):
    """
    Exception when the resources of a service cannot be generated from its settings
    """
