#!/usr/bin/env python3
import os
import sys
import argparse
from dataclasses import replace

from release_reconciler.clients.github_client import GitHubClient, GitHubReferenceClient
from release_reconciler.clients.quay_client import QuayClient
from release_reconciler.models import GitRepository, TagReleaseOptions
from release_reconciler.repositories import ReleaseConfigRepository
from release_reconciler.services.tag_release_service import TagReleaseService
from release_reconciler.utils.cancellation import CancellationScope
from release_reconciler.utils.logging import setup_logger

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Tag a release in git and promote its images in the registry')
    parser.add_argument('--release-version', required=True, help='Release version to tag, e.g. 2.0.0-rc1')
    parser.add_argument('--branch', default='master', help='Branch whose head commit is being released')
    parser.add_argument('--wait', action='store_true', help='Wait until promoted image tags are visible')
    parser.add_argument('--quay-repos', default=None, help='Comma separated registry repositories, overrides the config file')
    parser.add_argument('--source-tag', default=None, help='Registry tag of the build to promote, defaults to the branch name')
    parser.add_argument('--owner', default=None, help='GitHub organisation owning the repository')
    parser.add_argument('--repo', default=None, help='GitHub repository name')
    parser.add_argument('--wait-timeout', type=float, default=None, help='Seconds to wait for each promoted tag')
    parser.add_argument('--timeout', type=float, default=None, help='Overall deadline for the run in seconds')
    parser.add_argument('--dry-run', action='store_true', help='Run in dry-run mode without making any changes')
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace, config) -> TagReleaseOptions:
    repositories = config.registry.repositories
    if args.quay_repos is not None:
        repositories = TagReleaseOptions.parse_repositories(args.quay_repos)
    wait_policy = config.wait
    if args.wait_timeout is not None:
        wait_policy = replace(wait_policy, timeout_seconds=args.wait_timeout)
    return TagReleaseOptions(
        release_version=args.release_version,
        branch=args.branch,
        wait=args.wait,
        registry_repositories=repositories,
        source_tag=args.source_tag,
        commit_label_key=config.registry.commit_label,
        wait_policy=wait_policy,
        dry_run=args.dry_run,
    )


def main(argv: list[str] | None = None):
    args = parse_args(argv)
    logger = setup_logger("TagRelease")

    try:
        config_file = os.environ.get("RELEASE_CONFIG_FILE", f"{ROOT_DIR}/release.yaml")
        config = ReleaseConfigRepository(config_file).load()
        options = build_options(args, config)
        git_repository = GitRepository(owner=args.owner or config.git.owner, name=args.repo or config.git.repository)
        logger.info(f"Starting tag release of {options.release_version} from {git_repository.full_name}@{options.branch}")

        quay = QuayClient(registry_url=config.registry.url)
        service = TagReleaseService(
            references=GitHubReferenceClient(GitHubClient()),
            tags=quay,
            labels=quay,
            git_repository=git_repository,
            options=options,
            scope=CancellationScope(timeout_seconds=args.timeout),
        )
        report = service.run()
        for result in report.repositories:
            logger.info(f"{result.repository}: {result.outcome.value}")
        logger.info("Tag release completed successfully")
        return 0
    except Exception as e:
        logger.error(f"Tag release failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
