"""Tests for task service."""

from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from ecs_deploy.core.errors import ApiError
from ecs_deploy.features.task.task import TaskService


def test_get_task_definition_by_family(ecs_client_with_service):
    definition, tags = TaskService(ecs_client_with_service).get_task_definition("web-api")

    assert definition["family"] == "web-api"
    assert definition["taskDefinitionArn"].endswith("task-definition/web-api:1")
    assert tags == []


def test_get_task_definition_requests_tags():
    mock_ecs_client = Mock()
    mock_ecs_client.describe_task_definition.return_value = {
        "taskDefinition": {"family": "web-api"},
        "tags": [{"key": "team", "value": "platform"}],
    }

    _, tags = TaskService(mock_ecs_client).get_task_definition("web-api", include_tags=True)

    mock_ecs_client.describe_task_definition.assert_called_once_with(taskDefinition="web-api", include=["TAGS"])
    assert tags == [{"key": "team", "value": "platform"}]


def test_get_task_definition_missing_raises_api_error():
    mock_ecs_client = Mock()
    mock_ecs_client.describe_task_definition.side_effect = ClientError(
        {"Error": {"Code": "ClientException", "Message": "Unable to describe task definition."}},
        "DescribeTaskDefinition",
    )

    with pytest.raises(ApiError, match="DescribeTaskDefinition failed"):
        TaskService(mock_ecs_client).get_task_definition("missing")


def test_list_running_tasks_filters_by_service(mock_paginated_client):
    client = mock_paginated_client([{"taskArns": ["arn:task/1"]}, {"taskArns": ["arn:task/2"]}])

    assert TaskService(client).list_running_tasks("production", "web-api") == ["arn:task/1", "arn:task/2"]
    client.get_paginator.assert_called_once_with("list_tasks")
    client.get_paginator.return_value.paginate.assert_called_once_with(
        cluster="production", serviceName="web-api", desiredStatus="RUNNING"
    )


def test_describe_tasks_batches_requests():
    mock_ecs_client = Mock()
    mock_ecs_client.describe_tasks.side_effect = lambda cluster, tasks: {"tasks": [{"taskArn": t} for t in tasks]}
    task_arns = [f"arn:task/{i}" for i in range(150)]

    tasks = TaskService(mock_ecs_client).describe_tasks("production", task_arns)

    assert len(tasks) == 150
    assert [len(c.kwargs["tasks"]) for c in mock_ecs_client.describe_tasks.call_args_list] == [100, 50]


def test_get_task_status_reads_first_container_exit_code():
    mock_ecs_client = Mock()
    mock_ecs_client.describe_tasks.return_value = {
        "tasks": [
            {
                "taskArn": "arn:task/1",
                "lastStatus": "STOPPED",
                "containers": [{"name": "app", "exitCode": 2}, {"name": "sidecar", "exitCode": 0}],
            }
        ]
    }

    status = TaskService(mock_ecs_client).get_task_status("production", "arn:task/1")

    assert status == {"task_arn": "arn:task/1", "last_status": "STOPPED", "exit_code": 2}


def test_get_task_status_unknown_when_not_found():
    mock_ecs_client = Mock()
    mock_ecs_client.describe_tasks.return_value = {"tasks": []}

    status = TaskService(mock_ecs_client).get_task_status("production", "arn:task/1")

    assert status["last_status"] == "UNKNOWN"
    assert status["exit_code"] is None
