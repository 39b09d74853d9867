# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Titles and fixed values shared by the Fargate service resources.
All the titles, marked `_T`, are the logical names used in the generated fragment and
the names other resources of the enclosing template are expected to carry.
Changing one of the values changes the contract with that template.
"""

SERVICE_T = "Service"
TASK_T = "TaskDefinition"
LB_RULE_T = "LoadBalancerRule"
EXEC_ROLE_T = "ECSServiceExecutionRole"
TARGET_GROUP_SUFFIX = "TargetGroup"

# Defined by the enclosing template
SG_T = "FargateContainerSecurityGroup"
LISTENER_T = "PublicLoadBalancerListener"
VPC_T = "VPC"

LAUNCH_TYPE = "FARGATE"
NETWORK_MODE = "awsvpc"
MAXIMUM_PERCENT = 200
MINIMUM_HEALTHY_PERCENT = 75

HEALTH_CHECK_INTERVAL = 6
HEALTH_CHECK_TIMEOUT = 5
HEALTHY_THRESHOLD = 2
UNHEALTHY_THRESHOLD = 2
TARGET_TYPE = "ip"

DEFAULT_DESIRED_COUNT = 1
DEFAULT_HEALTH_CHECK_PATH = "/"
DEFAULT_PATH_PATTERN = "*"
DEFAULT_PRIORITY = 1

EXEC_ROLE_POLICY_NAME = "AmazonECSTaskExecutionRolePolicy"
EXEC_ROLE_ACTIONS = [
    "ecr:GetAuthorizationToken",
    "ecr:BatchCheckLayerAvailability",
    "ecr:GetDownloadUrlForLayer",
    "ecr:BatchGetImage",
    "logs:CreateLogStream",
    "logs:PutLogEvents",
]
