#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

import logging

import pytest

from fargate_cfn.cluster import Cluster, Vpc
from fargate_cfn.service import merge_resources
from fargate_cfn.service_options import ServiceOptions, ServiceProtocol
from fargate_cfn.template import generate_fragment, render_template


@pytest.fixture
def cluster():
    return Cluster("FargateCluster", "repo/apps", vpc=Vpc(["PublicSubnetOne"]))


def test_merge_resources_last_wins(caplog):
    with caplog.at_level(logging.WARNING):
        merged = merge_resources(
            {"Service": {"Type": "first"}, "TaskDefinition": {"Type": "task"}},
            {"Service": {"Type": "second"}},
        )
    assert merged == {
        "Service": {"Type": "second"},
        "TaskDefinition": {"Type": "task"},
    }
    assert "Service is defined more than once" in caplog.text


def test_merge_resources_keeps_order():
    merged = merge_resources({"A": 1}, {"C": 3}, {"B": 2})
    assert list(merged.keys()) == ["A", "C", "B"]


def test_generate_fragment(cluster):
    services = [
        ServiceOptions("web", "v1", 80, [ServiceProtocol("HTTP")]),
        ServiceOptions("api", "v2", 8080, [ServiceProtocol("HTTPS")]),
    ]
    fragment = generate_fragment(cluster, services)
    assert fragment["Service"]["Properties"]["ServiceName"] == "api"
    assert "HTTPTargetGroup" in fragment
    assert "HTTPSTargetGroup" in fragment


def test_generate_fragment_empty(cluster):
    assert generate_fragment(cluster, []) == {}


def test_render_template(cluster):
    fragment = generate_fragment(
        cluster, [ServiceOptions("web", "v1", 80, [ServiceProtocol("HTTP")])]
    )
    document = render_template(fragment, "Web service")
    assert document["AWSTemplateFormatVersion"] == "2010-09-09"
    assert document["Description"] == "Web service"
    assert document["Resources"] is fragment
    assert "Description" not in render_template(fragment)
