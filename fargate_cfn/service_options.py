# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module with the options of a Fargate service and of the protocols it is exposed with.

Optional settings are stored as given, ``None`` meaning not set, and defaults are only
applied when the value is read.
"""

from __future__ import annotations

from compose_x_common.compose_x_common import set_else_none

from fargate_cfn.service_params import (
    DEFAULT_DESIRED_COUNT,
    DEFAULT_HEALTH_CHECK_PATH,
    DEFAULT_PATH_PATTERN,
    DEFAULT_PRIORITY,
)


class ServiceProtocol:
    """
    A protocol the service is exposed with through the load balancer.

    :ivar str protocol: the listener protocol, i.e. HTTP or HTTPS
    """

    protocol_key = "Protocol"
    uri_key = "HealthCheckUri"
    hc_protocol_key = "HealthCheckProtocol"

    def __init__(
        self,
        protocol: str,
        health_check_uri: str = None,
        health_check_protocol: str = None,
    ):
        self.protocol = protocol
        self._health_check_uri = health_check_uri
        self._health_check_protocol = health_check_protocol

    def __repr__(self):
        return self.protocol

    @classmethod
    def from_dict(cls, definition: dict) -> ServiceProtocol:
        return cls(
            definition[cls.protocol_key],
            health_check_uri=set_else_none(cls.uri_key, definition),
            health_check_protocol=set_else_none(cls.hc_protocol_key, definition),
        )

    @property
    def health_check_uri(self) -> str:
        if self._health_check_uri is None:
            return DEFAULT_HEALTH_CHECK_PATH
        return self._health_check_uri

    @property
    def health_check_protocol(self) -> str:
        """Health check protocol, same as the listener protocol unless overridden"""
        if self._health_check_protocol is None:
            return self.protocol
        return self._health_check_protocol


class ServiceOptions:
    """
    Class holding the settings of a Fargate service.

    :ivar str name: service name, also used as task family and container name. Unique in a template.
    :ivar str image_tag: tag of the image, prefixed by the service name.
    :ivar str image_repository: repository to use instead of the cluster one, if set.
    :ivar str cpu: task and container CPU units
    :ivar str memory: task and container memory
    :ivar list[str] entry_point: container entry point, if set.
    :ivar int port: the container port, target of the load balancer.
    :ivar str task_role_arn: IAM role the application runs with, if set.
    :ivar list[ServiceProtocol] protocols: the protocols to create target groups for.
    """

    image_tag_key = "ImageTag"
    repository_key = "ImageRepository"
    cpu_key = "Cpu"
    memory_key = "Memory"
    entry_point_key = "EntryPoint"
    port_key = "Port"
    count_key = "DesiredCount"
    task_role_key = "TaskRoleArn"
    path_key = "Path"
    priority_key = "Priority"
    protocols_key = "Protocols"

    def __init__(
        self,
        name: str,
        image_tag: str,
        port: int,
        protocols: list,
        cpu=None,
        memory=None,
        image_repository: str = None,
        entry_point: list = None,
        desired_count: int = None,
        task_role_arn: str = None,
        path: str = None,
        priority: int = None,
    ):
        if not isinstance(protocols, (list, tuple)):
            raise TypeError("protocols must be of type", list, "got", type(protocols))
        for protocol in protocols:
            if not isinstance(protocol, ServiceProtocol):
                raise TypeError(
                    f"{name} - protocols must be of type",
                    ServiceProtocol,
                    "got",
                    type(protocol),
                )
        self.name = name
        self.image_tag = image_tag
        self.image_repository = image_repository
        self.port = port
        self.protocols = list(protocols)
        self.cpu = str(cpu) if cpu is not None else None
        self.memory = str(memory) if memory is not None else None
        self.entry_point = list(entry_point) if entry_point is not None else None
        self.task_role_arn = task_role_arn
        self._desired_count = desired_count
        self._path = path
        self._priority = priority

    def __repr__(self):
        return self.name

    @classmethod
    def from_dict(cls, name: str, definition: dict) -> ServiceOptions:
        """
        Builds the service options from its definition in the Services section of the input file.

        :param str name: the service name, key of the definition
        :param dict definition:
        :rtype: ServiceOptions
        """
        return cls(
            name,
            str(definition[cls.image_tag_key]),
            definition[cls.port_key],
            [
                ServiceProtocol.from_dict(protocol)
                for protocol in definition[cls.protocols_key]
            ],
            cpu=set_else_none(cls.cpu_key, definition),
            memory=set_else_none(cls.memory_key, definition),
            image_repository=set_else_none(cls.repository_key, definition),
            entry_point=set_else_none(cls.entry_point_key, definition),
            desired_count=set_else_none(cls.count_key, definition, eval_bool=True),
            task_role_arn=set_else_none(cls.task_role_key, definition),
            path=set_else_none(cls.path_key, definition),
            priority=set_else_none(cls.priority_key, definition, eval_bool=True),
        )

    @property
    def desired_count(self) -> int:
        """Number of tasks to run. 0 is kept as given."""
        if self._desired_count is None:
            return DEFAULT_DESIRED_COUNT
        return self._desired_count

    @property
    def path(self) -> str:
        """The listener rule path pattern"""
        if self._path is None:
            return DEFAULT_PATH_PATTERN
        return self._path

    @property
    def priority(self) -> int:
        if self._priority is None:
            return DEFAULT_PRIORITY
        return self._priority

    def image(self, default_repository: str) -> str:
        """
        Returns the container image, <repository>:<service name>-<image tag>

        :param str default_repository: the repository to use when the service does not override it
        :rtype: str
        """
        repository = (
            self.image_repository if self.image_repository else default_repository
        )
        return f"{repository}:{self.name}-{self.image_tag}"
