# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to represent the ECS Cluster context the Fargate services are generated for.
The cluster and its VPC are defined by the enclosing template, only their names are used here.
"""

from __future__ import annotations

from compose_x_common.compose_x_common import set_else_none


class Vpc:
    """
    The VPC the services run in.

    :ivar list[str] subnet_names: logical names of the subnets, in the order they are attached.
    """

    def __init__(self, subnet_names: list = None):
        if subnet_names is None:
            subnet_names = []
        if not isinstance(subnet_names, (list, tuple)):
            raise TypeError(
                "subnet_names must be of type", list, "got", type(subnet_names)
            )
        self.subnet_names = list(subnet_names)

    def __repr__(self):
        return f"Vpc({self.subnet_names})"


class Cluster:
    """
    Class representing the ECS Cluster.

    :ivar str cluster_name: logical name of the cluster in the template, used with Ref
    :ivar str image_repository: default repository for the services images
    :ivar str execution_role_arn: ARN of an existing execution role, if any
    :ivar Vpc vpc: the cluster VPC
    """

    name_key = "ClusterName"
    repository_key = "ImageRepository"
    exec_role_key = "ExecutionRoleArn"
    subnets_key = "Subnets"

    def __init__(
        self,
        cluster_name: str,
        image_repository: str,
        vpc: Vpc = None,
        execution_role_arn: str = None,
    ):
        if vpc is None:
            vpc = Vpc()
        elif not isinstance(vpc, Vpc):
            raise TypeError("vpc must be of type", Vpc, "got", type(vpc))
        self.cluster_name = cluster_name
        self.image_repository = image_repository
        self.execution_role_arn = execution_role_arn
        self.vpc = vpc

    def __repr__(self):
        return self.cluster_name

    @classmethod
    def from_dict(cls, definition: dict) -> Cluster:
        """
        Builds the cluster from the Cluster section of the input file

        :param dict definition:
        :rtype: Cluster
        """
        return cls(
            definition[cls.name_key],
            definition[cls.repository_key],
            vpc=Vpc(set_else_none(cls.subnets_key, definition, [])),
            execution_role_arn=set_else_none(cls.exec_role_key, definition),
        )

    @property
    def has_execution_role(self) -> bool:
        """Whether the cluster already provides the tasks execution role"""
        return bool(self.execution_role_arn)
