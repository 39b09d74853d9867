# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to generate the CloudFormation resources of a Fargate service behind the shared
public load balancer listener: ECS Service, Task Definition, Target Groups, Listener Rule
and, when the cluster does not provide one, the tasks execution role.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fargate_cfn.cluster import Cluster
    from fargate_cfn.service_options import ServiceOptions, ServiceProtocol

from troposphere import NoValue, Ref
from troposphere.ecs import (
    AwsvpcConfiguration,
    ContainerDefinition,
    DeploymentConfiguration,
)
from troposphere.ecs import LoadBalancer as EcsLoadBalancer
from troposphere.ecs import NetworkConfiguration, PortMapping
from troposphere.ecs import Service as EcsService
from troposphere.ecs import TaskDefinition
from troposphere.elasticloadbalancingv2 import (
    Condition,
    ListenerRule,
    ListenerRuleAction,
    TargetGroup,
)
from troposphere.iam import Policy, Role

from fargate_cfn.common import NONALPHANUM
from fargate_cfn.common.logging import LOG
from fargate_cfn.service_params import (
    EXEC_ROLE_ACTIONS,
    EXEC_ROLE_POLICY_NAME,
    EXEC_ROLE_T,
    HEALTH_CHECK_INTERVAL,
    HEALTH_CHECK_TIMEOUT,
    HEALTHY_THRESHOLD,
    LAUNCH_TYPE,
    LB_RULE_T,
    LISTENER_T,
    MAXIMUM_PERCENT,
    MINIMUM_HEALTHY_PERCENT,
    NETWORK_MODE,
    SERVICE_T,
    SG_T,
    TARGET_GROUP_SUFFIX,
    TARGET_TYPE,
    TASK_T,
    UNHEALTHY_THRESHOLD,
    VPC_T,
)


def merge_resources(*fragments: dict) -> dict:
    """
    Merges resources mappings in the given order. When two mappings define the same
    resource name, the last one wins.

    :param dict fragments: mappings of resource name to resource definition
    :return: the merged mapping
    :rtype: dict
    """
    merged = {}
    for fragment in fragments:
        for name, definition in fragment.items():
            if name in merged:
                LOG.warning(f"Resource {name} is defined more than once. Overriding")
            merged[name] = definition
    return merged


def execution_role_trust_policy() -> dict:
    """
    Trust relationship allowing ECS tasks to assume the execution role

    :rtype: dict
    """
    return {
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": ["ecs-tasks.amazonaws.com"]},
                "Action": ["sts:AssumeRole"],
            }
        ]
    }


class FargateService:
    """
    Class to generate the resources for one Fargate service in a given cluster.

    :ivar Cluster cluster: the cluster the service runs in
    :ivar ServiceOptions options: the service settings
    """

    def __init__(self, cluster: Cluster, options: ServiceOptions):
        self.cluster = cluster
        self.options = options

    def __repr__(self):
        return f"{self.cluster}.{self.options}"

    @property
    def target_group_names(self) -> list:
        """
        Names of the target groups, one per protocol, in the protocols order.

        :rtype: list[str]
        """
        return [
            f"{protocol.protocol}{TARGET_GROUP_SUFFIX}"
            for protocol in self.options.protocols
        ]

    @property
    def execution_role_arn(self):
        """
        The ARN of the cluster execution role if it has one, otherwise a pointer to the role
        created along with the service.
        """
        if self.cluster.has_execution_role:
            return self.cluster.execution_role_arn
        return Ref(EXEC_ROLE_T)

    def generate(self) -> dict:
        """
        Generates the service resources

        :return: mapping of resource name to resource definition
        :rtype: dict
        """
        fragments = [
            self.generate_service(),
            self.generate_task_definition(),
            *self.generate_target_groups(),
            self.generate_load_balancer_rule(),
        ]
        if not self.cluster.has_execution_role:
            LOG.debug(f"{self} - No execution role in cluster. Creating {EXEC_ROLE_T}")
            fragments.append(self.generate_execution_role())
        else:
            LOG.debug(
                f"{self} - Using cluster execution role {self.cluster.execution_role_arn}"
            )
        return merge_resources(*fragments)

    def generate_service(self) -> dict:
        service = EcsService(
            SERVICE_T,
            DependsOn=LB_RULE_T,
            ServiceName=self.options.name,
            Cluster=Ref(self.cluster.cluster_name),
            LaunchType=LAUNCH_TYPE,
            DeploymentConfiguration=DeploymentConfiguration(
                MaximumPercent=MAXIMUM_PERCENT,
                MinimumHealthyPercent=MINIMUM_HEALTHY_PERCENT,
            ),
            DesiredCount=self.options.desired_count,
            NetworkConfiguration=NetworkConfiguration(
                AwsvpcConfiguration=AwsvpcConfiguration(
                    AssignPublicIp="ENABLED",
                    SecurityGroups=[Ref(SG_T)],
                    Subnets=[
                        Ref(subnet_name)
                        for subnet_name in self.cluster.vpc.subnet_names
                    ],
                )
            ),
            TaskDefinition=Ref(TASK_T),
            LoadBalancers=[
                EcsLoadBalancer(
                    ContainerName=self.options.name,
                    ContainerPort=self.options.port,
                    TargetGroupArn=Ref(target_group_name),
                )
                for target_group_name in self.target_group_names
            ],
        )
        return {SERVICE_T: service.to_dict()}

    def generate_task_definition(self) -> dict:
        compute_props = {}
        if self.options.cpu is not None:
            compute_props["Cpu"] = self.options.cpu
        if self.options.memory is not None:
            compute_props["Memory"] = self.options.memory
        container_props = {}
        if self.options.entry_point is not None:
            container_props["EntryPoint"] = self.options.entry_point
        container = ContainerDefinition(
            Name=self.options.name,
            Image=self.options.image(self.cluster.image_repository),
            PortMappings=[PortMapping(ContainerPort=self.options.port)],
            **container_props,
        )
        task_definition = TaskDefinition(
            TASK_T,
            Family=self.options.name,
            NetworkMode=NETWORK_MODE,
            RequiresCompatibilities=[LAUNCH_TYPE],
            ExecutionRoleArn=self.execution_role_arn,
            TaskRoleArn=(
                self.options.task_role_arn if self.options.task_role_arn else NoValue
            ),
            ContainerDefinitions=[container],
            **compute_props,
        )
        definition = task_definition.to_dict()
        # Container Cpu/Memory are integers for troposphere, Fargate notations are kept as-is
        definition["Properties"]["ContainerDefinitions"][0].update(compute_props)
        return {TASK_T: definition}

    def generate_target_group(self, name: str, protocol: ServiceProtocol) -> dict:
        target_group = TargetGroup(
            NONALPHANUM.sub("", name),
            HealthCheckIntervalSeconds=HEALTH_CHECK_INTERVAL,
            HealthCheckPath=protocol.health_check_uri,
            HealthCheckProtocol=protocol.health_check_protocol,
            HealthCheckTimeoutSeconds=HEALTH_CHECK_TIMEOUT,
            HealthyThresholdCount=HEALTHY_THRESHOLD,
            TargetType=TARGET_TYPE,
            Name=self.options.name,
            Port=self.options.port,
            Protocol=protocol.protocol,
            UnhealthyThresholdCount=UNHEALTHY_THRESHOLD,
            VpcId=Ref(VPC_T),
        )
        return {name: target_group.to_dict()}

    def generate_target_groups(self) -> list:
        """
        Generates one target group per protocol

        :return: the target groups mappings, in the protocols order
        :rtype: list[dict]
        """
        target_groups = [
            self.generate_target_group(name, protocol)
            for name, protocol in zip(self.target_group_names, self.options.protocols)
        ]
        LOG.debug(f"{self} - Target groups {self.target_group_names}")
        return target_groups

    def generate_load_balancer_rule(self) -> dict:
        rule = ListenerRule(
            LB_RULE_T,
            Actions=[
                ListenerRuleAction(
                    TargetGroupArn=Ref(target_group_name), Type="forward"
                )
                for target_group_name in self.target_group_names
            ],
            Conditions=[Condition(Field="path-pattern", Values=[self.options.path])],
            ListenerArn=Ref(LISTENER_T),
            Priority=self.options.priority,
        )
        return {LB_RULE_T: rule.to_dict()}

    def generate_execution_role(self) -> dict:
        role = Role(
            EXEC_ROLE_T,
            AssumeRolePolicyDocument=execution_role_trust_policy(),
            Path="/",
            Policies=[
                Policy(
                    PolicyName=EXEC_ROLE_POLICY_NAME,
                    PolicyDocument={
                        "Statement": [
                            {
                                "Effect": "Allow",
                                "Action": EXEC_ROLE_ACTIONS,
                                "Resource": "*",
                            }
                        ]
                    },
                )
            ],
        )
        return {EXEC_ROLE_T: role.to_dict()}
