#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

from copy import deepcopy
from os import path

import pytest

from fargate_cfn.common.settings import (
    FargateCfnSettings,
    load_input_file,
    validate_content,
)
from fargate_cfn.exceptions import InvalidInputFile, ServiceNotFound

HERE = path.abspath(path.dirname(__file__))


@pytest.fixture
def content():
    return {
        "Cluster": {
            "ClusterName": "FargateCluster",
            "ImageRepository": "repo/apps",
            "Subnets": ["PublicSubnetOne"],
        },
        "Services": {
            "web": {
                "ImageTag": "v1",
                "Port": 80,
                "Protocols": [{"Protocol": "HTTP"}],
            }
        },
    }


def test_load_file(monkeypatch):
    monkeypatch.setenv("BLOG_IMAGE_TAG", "1.2.3")
    settings = FargateCfnSettings(
        **{FargateCfnSettings.input_file_arg: f"{HERE}/use-cases/blog.yml"}
    )
    assert settings.description == "Blog services"
    assert settings.cluster.cluster_name == "FargateCluster"
    assert list(settings.services.keys()) == ["web", "admin"]
    web = settings.services["web"]
    assert web.image_tag == "1.2.3"
    assert web.cpu == "256"
    assert web.priority == 10
    assert settings.services["admin"].desired_count == 2
    assert settings.file_name == "blog.json"


def test_load_file_env_default(monkeypatch):
    monkeypatch.delenv("BLOG_IMAGE_TAG", raising=False)
    settings = FargateCfnSettings(
        **{FargateCfnSettings.input_file_arg: f"{HERE}/use-cases/blog.yml"}
    )
    assert settings.services["web"].image_tag == "latest"


def test_load_file_no_interpolation(monkeypatch):
    monkeypatch.setenv("BLOG_IMAGE_TAG", "1.2.3")
    content = load_input_file(f"{HERE}/use-cases/blog.yml", interpolate=False)
    assert content["Services"]["web"]["ImageTag"] == "${BLOG_IMAGE_TAG:-latest}"


def test_missing_file():
    with pytest.raises(InvalidInputFile):
        load_input_file(f"{HERE}/use-cases/not-there.yml")


def test_no_input():
    with pytest.raises(InvalidInputFile):
        FargateCfnSettings()


def test_empty_protocols_rejected():
    with pytest.raises(InvalidInputFile):
        FargateCfnSettings(
            **{FargateCfnSettings.input_file_arg: f"{HERE}/use-cases/no_protocols.yml"}
        )


@pytest.mark.parametrize(
    "service_update",
    [
        {"Port": 0},
        {"Port": "80"},
        {"DesiredCount": -1},
        {"Priority": 0},
        {"Unknown": True},
        {"Protocols": [{"HealthCheckUri": "/"}]},
    ],
)
def test_invalid_service(content, service_update):
    invalid = deepcopy(content)
    invalid["Services"]["web"].update(service_update)
    with pytest.raises(InvalidInputFile):
        validate_content(invalid)


def test_missing_cluster(content):
    del content["Cluster"]
    with pytest.raises(InvalidInputFile):
        FargateCfnSettings(content=content)


def test_settings_from_content(content):
    settings = FargateCfnSettings(
        content=content,
        **{
            FargateCfnSettings.format_arg: "yaml",
            FargateCfnSettings.description_arg: "Override",
        },
    )
    assert settings.format == "yaml"
    assert settings.description == "Override"
    assert settings.file_name == "fargate-services.yaml"
    assert [service.name for service in settings.get_services()] == ["web"]


def test_invalid_format(content):
    with pytest.raises(ValueError):
        FargateCfnSettings(content=content, **{FargateCfnSettings.format_arg: "xml"})


def test_selected_services():
    settings = FargateCfnSettings(
        **{
            FargateCfnSettings.input_file_arg: f"{HERE}/use-cases/blog.yml",
            FargateCfnSettings.services_arg: ["admin"],
        }
    )
    assert [service.name for service in settings.get_services()] == ["admin"]
    settings.selected_services = ["nope"]
    with pytest.raises(ServiceNotFound):
        settings.get_services()
