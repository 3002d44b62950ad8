import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError, version

from rich.console import Console

from .aws_service import ECSService
from .core.app import run_deployment
from .core.config import DEFAULT_TIMEOUT, DeployConfig
from .core.errors import ArgumentError, DeployError, ExitCode
from .core.session import aws_session, create_ecs_client
from .core.utils import print_error

try:
    __version__ = version("ecs-deploy")
except PackageNotFoundError:
    __version__ = "dev"

console = Console()


def main() -> None:
    """Blue/green deployments for AWS ECS services and task definitions."""
    sys.exit(run(sys.argv[1:]))


def run(argv: list[str] | None = None) -> int:
    """Parse ``argv``, run the deployment and return the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _config_from_args(args)
        with aws_session(config) as session:
            ecs_service = ECSService(create_ecs_client(session))
            run_deployment(config, ecs_service)
    except DeployError as e:
        print_error(f"Error: {e}")
        if e.exit_code == ExitCode.BAD_ARGUMENTS:
            console.print("Run ecs-deploy --help for usage.", style="dim")
        elif e.exit_code == ExitCode.NO_CREDENTIALS:
            console.print("Make sure your AWS credentials are configured.", style="dim")
        return e.exit_code

    return ExitCode.OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecs-deploy",
        description="Blue/green deployments for AWS ECS services and task definitions",
        epilog=(
            "After a service update, ecs-deploy waits until the service reports a single deployment. "
            "Services that legitimately keep several deployments running must pass --skip-deployments-check."
        ),
    )
    parser.add_argument("--version", action="version", version=f"ecs-deploy {__version__}")

    target = parser.add_argument_group("target")
    target.add_argument("-c", "--cluster", help="Name of ECS cluster")
    target.add_argument("-n", "--service-name", help="Name of service to deploy")
    target.add_argument("-d", "--task-definition", help="Task definition family, family:revision or ARN to update")
    target.add_argument(
        "--task-definition-file", help="Base the new revision on a describe-task-definition JSON dump"
    )

    image = parser.add_argument_group("image")
    image.add_argument("-i", "--image", help="Image to deploy, e.g. registry.example.com:5000/repo/app:1.2.3")
    image.add_argument("-e", "--tag-env-var", help="Environment variable holding the tag when IMAGE has none")
    image.add_argument("-to", "--tag-only", help="New tag to apply to every image in the task definition")

    deploy = parser.add_argument_group("deployment")
    deploy.add_argument("-D", "--desired-count", type=int, help="Desired number of running tasks")
    deploy.add_argument("-m", "--min", dest="min_healthy_percent", type=int, help="minimumHealthyPercent")
    deploy.add_argument("-M", "--max", dest="max_percent", type=int, help="maximumPercent")
    deploy.add_argument(
        "-t", "--timeout", type=int, default=DEFAULT_TIMEOUT, help=f"Seconds to wait (default: {DEFAULT_TIMEOUT})"
    )
    deploy.add_argument("--enable-rollback", action="store_true", help="Roll back to the previous revision on timeout")
    deploy.add_argument(
        "--use-latest-task-def",
        dest="use_latest_task_definition",
        action="store_true",
        help="Base the new revision on the family's most recent revision instead of the running one",
    )
    deploy.add_argument("--force-new-deployment", action="store_true", help="Redeploy the current revision")
    deploy.add_argument(
        "--skip-deployments-check", action="store_true", help="Do not wait for old deployments to drain"
    )
    deploy.add_argument(
        "--max-definitions", type=int, default=0, help="Number of ACTIVE revisions to keep (0 keeps all)"
    )
    deploy.add_argument(
        "--copy-task-definition-tags", action="store_true", help="Register the new revision with the source's tags"
    )

    task = parser.add_argument_group("run task")
    task.add_argument("--run-task", action="store_true", help="Run the new revision as a one-off task")
    task.add_argument("--launch-type", help="FARGATE or EC2")
    task.add_argument("--platform-version", help="Fargate platform version")
    task.add_argument("--network-configuration", help="networkConfiguration as JSON")
    task.add_argument("--wait-for-success", action="store_true", help="Wait for the task to exit with code 0")

    aws = parser.add_argument_group("aws")
    aws.add_argument("-p", "--profile", help="AWS profile to use for authentication")
    aws.add_argument("-r", "--region", help="AWS region")
    aws.add_argument("-a", "--aws-assume-role", dest="assume_role", help="ARN of a role to assume for the run")
    aws.add_argument("--assume-role-session-name", default="ecs-deploy", help="Session name for the assumed role")
    return parser


def _config_from_args(args: argparse.Namespace) -> DeployConfig:
    options = vars(args)
    network_configuration = options.pop("network_configuration")
    if network_configuration:
        try:
            options["network_configuration"] = json.loads(network_configuration)
        except ValueError as e:
            raise ArgumentError(f"--network-configuration must be valid JSON: {e}") from e
    return DeployConfig(**options)


if __name__ == "__main__":
    main()
