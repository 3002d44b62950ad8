"""Shared pytest fixtures for tests."""

from unittest.mock import Mock

import boto3
import pytest
from moto import mock_aws

OLD_TASK_DEF_ARN = "arn:aws:ecs:us-east-1:123456789012:task-definition/web-api:4"
NEW_TASK_DEF_ARN = "arn:aws:ecs:us-east-1:123456789012:task-definition/web-api:5"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def mock_paginated_client():
    def _create_client(pages: list[dict]) -> Mock:
        client = Mock()
        paginator = Mock()
        paginator.paginate.return_value = pages
        client.get_paginator.return_value = paginator
        return client

    return _create_client


@pytest.fixture
def mock_ecs_client():
    return Mock()


@pytest.fixture
def no_sleep():
    return Mock()


@pytest.fixture
def service_client():
    """Mock ECS client for a web-api service currently running OLD_TASK_DEF_ARN."""

    def _create_client(
        desired_count: int = 2,
        deployments: int = 1,
        tasks: list[dict] | None = None,
    ) -> Mock:
        client = Mock()
        client.describe_services.return_value = {
            "services": [
                {
                    "serviceName": "web-api",
                    "taskDefinition": OLD_TASK_DEF_ARN,
                    "desiredCount": desired_count,
                    "deployments": [{"id": f"ecs-svc/{i}"} for i in range(deployments)],
                }
            ],
            "failures": [],
        }
        task_list = tasks or []
        client.get_paginator.return_value.paginate.return_value = [
            {"taskArns": [task["taskArn"] for task in task_list]}
        ]
        client.describe_tasks.return_value = {"tasks": task_list}
        client.describe_task_definition.return_value = {
            "taskDefinition": {
                "taskDefinitionArn": OLD_TASK_DEF_ARN,
                "family": "web-api",
                "revision": 4,
                "containerDefinitions": [
                    {"name": "web", "image": "123456789012.dkr.ecr.us-east-1.amazonaws.com/web-api:1.0.0"}
                ],
                "volumes": [],
                "placementConstraints": [],
                "networkMode": "awsvpc",
            }
        }
        client.register_task_definition.return_value = {"taskDefinition": {"taskDefinitionArn": NEW_TASK_DEF_ARN}}
        return client

    return _create_client


@pytest.fixture
def ecs_client_with_service():
    with mock_aws():
        client = boto3.client("ecs", region_name="us-east-1")

        client.create_cluster(clusterName="production")

        client.register_task_definition(
            family="web-api",
            containerDefinitions=[
                {"name": "web", "image": "registry.example.com/team/web-api:1.0.0", "memory": 256},
                {"name": "proxy", "image": "nginx:1.25", "memory": 128},
            ],
            tags=[{"key": "team", "value": "platform"}],
        )

        client.create_service(
            cluster="production",
            serviceName="web-api",
            taskDefinition="web-api",
            desiredCount=0,
        )

        yield client
