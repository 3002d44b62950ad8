"""Tests for pruning outdated task definition revisions."""

from unittest.mock import call

from botocore.exceptions import ClientError

from ecs_deploy.features.task_definition.pruner import RevisionPruner

ARN_PREFIX = "arn:aws:ecs:us-east-1:123456789012:task-definition"


def _revisions(family: str, count: int) -> list[str]:
    return [f"{ARN_PREFIX}/{family}:{revision}" for revision in range(1, count + 1)]


def test_prune_deregisters_oldest_beyond_retention(mock_paginated_client):
    revisions = _revisions("web-api", 7)
    client = mock_paginated_client([{"taskDefinitionArns": revisions[:4]}, {"taskDefinitionArns": revisions[4:]}])

    deregistered = RevisionPruner(client).prune("web-api", 3, keep=revisions[-1])

    assert deregistered == revisions[:4]
    assert client.deregister_task_definition.call_args_list == [call(taskDefinition=arn) for arn in revisions[:4]]
    client.get_paginator.assert_called_once_with("list_task_definitions")
    client.get_paginator.return_value.paginate.assert_called_once_with(
        familyPrefix="web-api", status="ACTIVE", sort="ASC"
    )


def test_prune_within_retention_does_nothing(mock_paginated_client):
    client = mock_paginated_client([{"taskDefinitionArns": _revisions("web-api", 3)}])

    assert RevisionPruner(client).prune("web-api", 3) == []
    client.deregister_task_definition.assert_not_called()


def test_prune_disabled_when_retain_is_zero(mock_paginated_client):
    client = mock_paginated_client([{"taskDefinitionArns": _revisions("web-api", 5)}])

    assert RevisionPruner(client).prune("web-api", 0) == []
    client.get_paginator.assert_not_called()


def test_prune_ignores_families_sharing_the_prefix(mock_paginated_client):
    own = _revisions("web-api", 3)
    other = _revisions("web-api-worker", 4)
    client = mock_paginated_client([{"taskDefinitionArns": own + other}])

    deregistered = RevisionPruner(client).prune("web-api", 2)

    assert deregistered == own[:1]


def test_prune_never_deregisters_kept_revision(mock_paginated_client):
    revisions = _revisions("web-api", 4)
    client = mock_paginated_client([{"taskDefinitionArns": revisions}])

    deregistered = RevisionPruner(client).prune("web-api", 2, keep=revisions[0])

    assert deregistered == [revisions[1]]


def test_prune_continues_after_deregister_failure(mock_paginated_client, capsys):
    revisions = _revisions("web-api", 5)
    client = mock_paginated_client([{"taskDefinitionArns": revisions}])
    client.deregister_task_definition.side_effect = [
        ClientError({"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "DeregisterTaskDefinition"),
        {},
    ]

    deregistered = RevisionPruner(client).prune("web-api", 3)

    assert deregistered == [revisions[1]]
    assert client.deregister_task_definition.call_count == 2
    assert "AccessDeniedException" in capsys.readouterr().out
