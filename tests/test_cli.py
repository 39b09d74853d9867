#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

import json
from os import path

import yaml

from fargate_cfn import __version__
from fargate_cfn.cli import main

HERE = path.abspath(path.dirname(__file__))


def test_render_to_directory(tmp_path):
    assert (
        main(
            [
                "render",
                "-f",
                f"{HERE}/use-cases/existing_role.yml",
                "-d",
                str(tmp_path),
            ]
        )
        == 0
    )
    with open(tmp_path / "existing_role.json") as template_fd:
        template = json.load(template_fd)
    resources = template["Resources"]
    assert set(resources.keys()) == {
        "Service",
        "TaskDefinition",
        "HTTPTargetGroup",
        "LoadBalancerRule",
    }
    assert (
        resources["TaskDefinition"]["Properties"]["ExecutionRoleArn"]
        == "arn:aws:iam::123:role/x"
    )


def test_render_yaml_selected_service(tmp_path, monkeypatch):
    monkeypatch.delenv("BLOG_IMAGE_TAG", raising=False)
    assert (
        main(
            [
                "render",
                "-f",
                f"{HERE}/use-cases/blog.yml",
                "-d",
                str(tmp_path),
                "--format",
                "yaml",
                "-s",
                "web",
                "--description",
                "Only the web service",
            ]
        )
        == 0
    )
    with open(tmp_path / "blog.yaml") as template_fd:
        template = yaml.safe_load(template_fd)
    assert template["Description"] == "Only the web service"
    resources = template["Resources"]
    assert resources["Service"]["Properties"]["ServiceName"] == "web"
    assert "ECSServiceExecutionRole" in resources
    container = resources["TaskDefinition"]["Properties"]["ContainerDefinitions"][0]
    assert container["Image"] == (
        "123456789012.dkr.ecr.eu-west-1.amazonaws.com/blog:web-latest"
    )


def test_render_to_stdout(capsys):
    assert main(["render", "-f", f"{HERE}/use-cases/existing_role.yml"]) == 0
    template = json.loads(capsys.readouterr().out)
    assert "Service" in template["Resources"]


def test_validate():
    assert main(["validate", "-f", f"{HERE}/use-cases/existing_role.yml"]) == 0


def test_invalid_input():
    assert main(["validate", "-f", f"{HERE}/use-cases/no_protocols.yml"]) == 1


def test_unknown_service(tmp_path):
    assert (
        main(
            [
                "render",
                "-f",
                f"{HERE}/use-cases/blog.yml",
                "-d",
                str(tmp_path),
                "-s",
                "nope",
            ]
        )
        == 1
    )


def test_version(capsys):
    assert main(["version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_generation_error(monkeypatch, capsys):
    def failing_generate(cluster, services):
        raise ValueError("'abc' is not a valid integer")

    monkeypatch.setattr("fargate_cfn.cli.generate_fragment", failing_generate)
    assert main(["render", "-f", f"{HERE}/use-cases/existing_role.yml"]) == 1
    assert capsys.readouterr().out == ""
