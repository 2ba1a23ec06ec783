"""Command line entry point for ghops."""

import os
import sys
import json
import logging
import argparse

from dotenv import load_dotenv
from github import GithubException

from ghops.commands import GitHubCommands
from ghops.config import load_configuration, normalize_log_level
from ghops.github.errors import GitHubCommandError
from ghops.github.models import GitHubObject

logger = logging.getLogger(__name__)


def _add_repository_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--uri", help="Repository URI, e.g. https://github.com/owner/name")
    parser.add_argument("--owner", dest="owner_name", help="Repository owner")
    parser.add_argument("--repo", dest="repository_name", help="Repository name")


def _ref_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--tag", dest="tag_name")
    group.add_argument("--branch", dest="branch_name")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ghops", description="Run GitHub REST API commands")
    parser.add_argument("--config", type=str, help="Path to a YAML configuration file")
    parser.add_argument("--no-status", action="store_true", help="Log paging progress at debug level only")
    sub = parser.add_subparsers(dest="group", required=True)

    # users
    users = sub.add_parser("user", help="User commands").add_subparsers(dest="command", required=True)
    p = users.add_parser("get", help="Get a user, the current user, or all users")
    p.add_argument("user_name", nargs="?")
    p.add_argument("--current", action="store_true")
    p = users.add_parser("context", help="Get hovercard information for a user")
    p.add_argument("user_name")
    p.add_argument("--subject-type")
    p.add_argument("--subject-id")
    p = users.add_parser("update", help="Update the authenticated user's profile")
    for field in ("name", "email", "blog", "company", "location", "bio"):
        p.add_argument(f"--{field}")
    p.add_argument("--hireable", action=argparse.BooleanOptionalAction, default=None)

    # references
    refs = sub.add_parser("ref", help="Reference commands").add_subparsers(dest="command", required=True)
    p = refs.add_parser("get")
    _ref_arguments(p)
    p.add_argument("--match-prefix", action="store_true")
    _add_repository_arguments(p)
    p = refs.add_parser("new")
    _ref_arguments(p)
    p.add_argument("--sha", required=True)
    _add_repository_arguments(p)
    p = refs.add_parser("set")
    _ref_arguments(p)
    p.add_argument("--sha", required=True)
    p.add_argument("--force", action="store_true")
    _add_repository_arguments(p)
    p = refs.add_parser("remove")
    _ref_arguments(p)
    _add_repository_arguments(p)

    # branches
    branches = sub.add_parser("branch", help="Branch commands").add_subparsers(dest="command", required=True)
    p = branches.add_parser("list")
    p.add_argument("--protected", action=argparse.BooleanOptionalAction, default=None)
    _add_repository_arguments(p)
    p = branches.add_parser("get")
    p.add_argument("name")
    _add_repository_arguments(p)
    p = branches.add_parser("new")
    p.add_argument("name")
    p.add_argument("--origin", dest="origin_branch_name")
    p.add_argument("--sha")
    _add_repository_arguments(p)
    p = branches.add_parser("remove")
    p.add_argument("name")
    _add_repository_arguments(p)

    # pull requests
    prs = sub.add_parser("pr", help="Pull request commands").add_subparsers(dest="command", required=True)
    p = prs.add_parser("list")
    p.add_argument("--state", default="open")
    p.add_argument("--head")
    p.add_argument("--base")
    p.add_argument("--sort")
    p.add_argument("--direction")
    _add_repository_arguments(p)
    for name in ("get", "commits", "merged", "reviews", "review-requests"):
        p = prs.add_parser(name)
        p.add_argument("number", type=int)
        _add_repository_arguments(p)
    p = prs.add_parser("new")
    p.add_argument("--head", required=True)
    p.add_argument("--base", required=True)
    p.add_argument("--title")
    p.add_argument("--body")
    p.add_argument("--issue", type=int)
    p.add_argument("--draft", action="store_true")
    _add_repository_arguments(p)
    p = prs.add_parser("update")
    p.add_argument("number", type=int)
    p.add_argument("--title")
    p.add_argument("--body")
    p.add_argument("--state")
    p.add_argument("--base")
    p.add_argument("--maintainer-can-modify", action=argparse.BooleanOptionalAction, default=None)
    _add_repository_arguments(p)
    p = prs.add_parser("merge")
    p.add_argument("number", type=int)
    p.add_argument("--method", dest="merge_method", default="merge")
    p.add_argument("--title", dest="commit_title")
    p.add_argument("--message", dest="commit_message")
    p.add_argument("--sha")
    _add_repository_arguments(p)
    p = prs.add_parser("review")
    p.add_argument("number", type=int)
    p.add_argument("--event")
    p.add_argument("--body")
    _add_repository_arguments(p)
    for name in ("request-review", "remove-review-request"):
        p = prs.add_parser(name)
        p.add_argument("number", type=int)
        p.add_argument("--user", dest="user_names", action="append", default=[])
        p.add_argument("--team", dest="team_names", action="append", default=[])
        _add_repository_arguments(p)

    # reviews
    reviews = sub.add_parser("review", help="Review commands").add_subparsers(dest="command", required=True)
    for name in ("get", "submit", "update", "remove", "dismiss"):
        p = reviews.add_parser(name)
        p.add_argument("number", type=int)
        p.add_argument("review_id", type=int)
        if name == "submit":
            p.add_argument("--event", required=True)
            p.add_argument("--body")
        elif name == "update":
            p.add_argument("--body", required=True)
        elif name == "dismiss":
            p.add_argument("--message", required=True)
        _add_repository_arguments(p)

    # meta
    meta = sub.add_parser("meta", help="Instance information").add_subparsers(dest="command", required=True)
    meta.add_parser("info")
    meta.add_parser("rate-limit")
    meta.add_parser("emojis")
    p = meta.add_parser("markdown", help="Render markdown to HTML")
    p.add_argument("text")
    p.add_argument("--mode", default="markdown")
    p.add_argument("--context")

    return parser


def _repo(args) -> dict:
    return {"uri": args.uri, "owner_name": args.owner_name, "repository_name": args.repository_name}


def dispatch(commands, args):
    """Run the command selected by ``args`` and return its result."""
    group, command = args.group, args.command

    if group == "user":
        if command == "get":
            return commands.users.get_user(args.user_name, current=args.current)
        if command == "update":
            return commands.users.update_current_user(
                name=args.name, email=args.email, blog=args.blog, company=args.company,
                location=args.location, bio=args.bio, hireable=args.hireable,
            )
        return commands.users.get_contextual_information(args.user_name, args.subject_type, args.subject_id)

    if group == "ref":
        refs = commands.references
        names = {"tag_name": args.tag_name, "branch_name": args.branch_name}
        if command == "get":
            return refs.get_reference(match_prefix=args.match_prefix, **names, **_repo(args))
        if command == "new":
            return refs.new_reference(args.sha, **names, **_repo(args))
        if command == "set":
            return refs.set_reference(args.sha, force=args.force, **names, **_repo(args))
        return refs.remove_reference(**names, **_repo(args))

    if group == "branch":
        refs = commands.references
        if command == "list":
            return refs.list_branches(protected=args.protected, **_repo(args))
        if command == "get":
            return refs.get_branch(args.name, **_repo(args))
        if command == "new":
            return refs.new_branch(args.name, args.origin_branch_name, args.sha, **_repo(args))
        return refs.remove_branch(args.name, **_repo(args))

    if group == "pr":
        prs = commands.pull_requests
        if command == "list":
            return prs.list_pull_requests(
                state=args.state, head=args.head, base=args.base,
                sort=args.sort, direction=args.direction, **_repo(args),
            )
        if command == "get":
            return prs.get_pull_request(args.number, **_repo(args))
        if command == "commits":
            return prs.list_commits(args.number, **_repo(args))
        if command == "merged":
            return {"number": args.number, "merged": prs.is_merged(args.number, **_repo(args))}
        if command == "new":
            return prs.new_pull_request(
                args.head, args.base, title=args.title, body=args.body,
                issue=args.issue, draft=args.draft, **_repo(args),
            )
        if command == "update":
            return prs.update_pull_request(
                args.number, title=args.title, body=args.body, state=args.state, base=args.base,
                maintainer_can_modify=args.maintainer_can_modify, **_repo(args),
            )
        if command == "merge":
            return prs.merge_pull_request(
                args.number, merge_method=args.merge_method, commit_title=args.commit_title,
                commit_message=args.commit_message, sha=args.sha, **_repo(args),
            )
        if command == "reviews":
            return commands.reviews.list_reviews(args.number, **_repo(args))
        if command == "review":
            return commands.reviews.new_review(args.number, event=args.event, body=args.body, **_repo(args))
        if command == "review-requests":
            return commands.review_requests.get_review_requests(args.number, **_repo(args))
        if command == "remove-review-request":
            return commands.review_requests.remove_review_request(
                args.number, user_names=args.user_names, team_names=args.team_names, **_repo(args),
            )
        return commands.review_requests.new_review_request(
            args.number, user_names=args.user_names, team_names=args.team_names, **_repo(args),
        )

    if group == "review":
        reviews = commands.reviews
        if command == "get":
            return reviews.get_review(args.number, args.review_id, **_repo(args))
        if command == "submit":
            return reviews.submit_review(args.number, args.review_id, args.event, body=args.body, **_repo(args))
        if command == "update":
            return reviews.update_review(args.number, args.review_id, args.body, **_repo(args))
        if command == "remove":
            return reviews.remove_review(args.number, args.review_id, **_repo(args))
        return reviews.dismiss_review(args.number, args.review_id, args.message, **_repo(args))

    if command == "info":
        return commands.meta.get_meta()
    if command == "rate-limit":
        return commands.meta.get_rate_limit()
    if command == "markdown":
        return commands.meta.convert_markdown(args.text, mode=args.mode, context=args.context)
    return commands.meta.get_emojis()


def to_json(result):
    if isinstance(result, GitHubObject):
        return result.to_dict()
    if isinstance(result, list):
        return [to_json(item) for item in result]
    return result


def main(argv=None):
    """Run a GitHub command and print the result as JSON."""
    load_dotenv()

    logging.basicConfig(
        level=normalize_log_level(os.environ.get("LOG_LEVEL", "INFO")) or "INFO",
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    args = build_parser().parse_args(argv)

    config = load_configuration(args.config, use_dotenv=False)
    if args.no_status:
        config.default_no_status = True
    logging.getLogger().setLevel(config.log_level)

    commands = GitHubCommands(config)

    try:
        result = dispatch(commands, args)
    except GitHubCommandError as e:
        logger.error(str(e))
        sys.exit(1)
    except GithubException as e:
        logger.error(f"GitHub request failed ({e.status}): {e.data}")
        sys.exit(1)

    if result is not None:
        print(json.dumps(to_json(result), indent=2))

    sys.exit(0)


if __name__ == "__main__":
    main()
