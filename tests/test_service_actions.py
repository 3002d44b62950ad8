from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from ecs_deploy.core.errors import ApiError
from ecs_deploy.features.service.actions import ServiceActions


def test_update_service_points_service_at_revision(ecs_client_with_service):
    new_arn = ecs_client_with_service.register_task_definition(
        family="web-api",
        containerDefinitions=[{"name": "web", "image": "registry.example.com/team/web-api:2.0.0", "memory": 256}],
    )["taskDefinition"]["taskDefinitionArn"]

    ServiceActions(ecs_client_with_service).update_service("production", "web-api", new_arn)

    service = ecs_client_with_service.describe_services(cluster="production", services=["web-api"])["services"][0]
    assert service["taskDefinition"] == new_arn


def test_update_service_sends_only_given_options():
    mock_ecs_client = Mock()
    actions = ServiceActions(mock_ecs_client)

    actions.update_service("cluster", "web-api", "arn:td:5")
    actions.update_service(
        "cluster",
        "web-api",
        "arn:td:5",
        desired_count=3,
        deployment_configuration={"minimumHealthyPercent": 50, "maximumPercent": 200},
    )

    first, second = mock_ecs_client.update_service.call_args_list
    assert first.kwargs == {"cluster": "cluster", "service": "web-api", "taskDefinition": "arn:td:5"}
    assert second.kwargs["desiredCount"] == 3
    assert second.kwargs["deploymentConfiguration"] == {"minimumHealthyPercent": 50, "maximumPercent": 200}


def test_force_new_deployment_success():
    mock_ecs_client = Mock()
    mock_ecs_client.update_service.return_value = {"service": {"serviceName": "web-api"}}

    ServiceActions(mock_ecs_client).force_new_deployment("cluster", "web-api")

    mock_ecs_client.update_service.assert_called_once_with(cluster="cluster", service="web-api", forceNewDeployment=True)


def test_force_new_deployment_access_denied_raises_actionable_error():
    mock_ecs_client = Mock()
    mock_ecs_client.update_service.side_effect = ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "User is not authorized"}},
        "UpdateService",
    )

    with pytest.raises(ApiError) as exc_info:
        ServiceActions(mock_ecs_client).force_new_deployment("cluster", "web-api")

    assert str(exc_info.value) == "UpdateService failed - AccessDeniedException: User is not authorized"


def test_update_service_not_found_raises_actionable_error():
    mock_ecs_client = Mock()
    mock_ecs_client.update_service.side_effect = ClientError(
        {"Error": {"Code": "ServiceNotFoundException", "Message": "Service was not found"}},
        "UpdateService",
    )

    with pytest.raises(ApiError, match="ServiceNotFoundException: Service was not found"):
        ServiceActions(mock_ecs_client).update_service("cluster", "web-api", "arn:td:5")


def test_update_service_botocore_error_raises_api_error():
    mock_ecs_client = Mock()
    mock_ecs_client.update_service.side_effect = EndpointConnectionError(
        endpoint_url="https://ecs.us-east-1.amazonaws.com"
    )

    with pytest.raises(ApiError, match="Could not connect"):
        ServiceActions(mock_ecs_client).update_service("cluster", "web-api", "arn:td:5")
