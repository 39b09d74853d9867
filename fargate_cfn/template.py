# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to assemble the resources of several services into a single template document.
"""

from __future__ import annotations

from fargate_cfn.common.logging import LOG
from fargate_cfn.service import FargateService, merge_resources

TEMPLATE_VERSION = "2010-09-09"


def generate_fragment(cluster, services: list) -> dict:
    """
    Generates the resources of all the services and merges them, in order.
    The services resources names are fixed, so generating more than one service
    leads to the last one overriding the others.

    :param fargate_cfn.cluster.Cluster cluster:
    :param list[fargate_cfn.service_options.ServiceOptions] services:
    :return: mapping of resource name to resource definition
    :rtype: dict
    """
    fragments = []
    for options in services:
        service = FargateService(cluster, options)
        LOG.debug(f"{service} - Generating service resources")
        fragments.append(service.generate())
    return merge_resources(*fragments)


def render_template(fragment: dict, description: str = None) -> dict:
    """
    Wraps the resources into a CloudFormation template document

    :param dict fragment: mapping of resource name to resource definition
    :param str description: the template description
    :rtype: dict
    """
    document = {"AWSTemplateFormatVersion": TEMPLATE_VERSION}
    if description:
        document["Description"] = description
    document["Resources"] = fragment
    return document
