#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

from pytest import raises

from fargate_cfn.cluster import Cluster, Vpc


def test_cluster_from_dict():
    cluster = Cluster.from_dict(
        {
            "ClusterName": "FargateCluster",
            "ImageRepository": "repo/apps",
            "Subnets": ["SubnetB", "SubnetA"],
        }
    )
    assert cluster.cluster_name == "FargateCluster"
    assert cluster.image_repository == "repo/apps"
    assert cluster.vpc.subnet_names == ["SubnetB", "SubnetA"]
    assert cluster.execution_role_arn is None
    assert not cluster.has_execution_role


def test_cluster_with_execution_role():
    cluster = Cluster.from_dict(
        {
            "ClusterName": "FargateCluster",
            "ImageRepository": "repo/apps",
            "ExecutionRoleArn": "arn:aws:iam::123456789012:role/exec",
        }
    )
    assert cluster.has_execution_role
    assert cluster.vpc.subnet_names == []


def test_invalid_vpc():
    with raises(TypeError):
        Vpc("SubnetA")
    with raises(TypeError):
        Cluster("FargateCluster", "repo/apps", vpc=["SubnetA"])
