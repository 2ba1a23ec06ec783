"""Tests for the command groups, with the REST client mocked out."""

import pytest
from unittest.mock import Mock

from github import GithubException

from ghops.commands import GitHubCommands
from ghops.config import Configuration
from ghops.github.client import RestClient
from ghops.github.errors import InvalidArgumentError
from ghops.github.models import PullRequest, Reference, ReviewRequest, User

REPO_URL = "https://github.com/octocat/hello-world"
REPO = "repos/octocat/hello-world"


@pytest.fixture
def config():
    return Configuration(default_owner_name="octocat", default_repository_name="hello-world")


@pytest.fixture
def client(config):
    client = Mock(spec=RestClient)
    client.config = config
    return client


@pytest.fixture
def gh(config, client):
    return GitHubCommands(config, client=client)


def ref_json(ref: str, sha: str = "abc123") -> dict:
    return {
        "ref": ref,
        "url": f"https://api.github.com/{REPO}/git/{ref}",
        "object": {"type": "commit", "sha": sha},
    }


class TestUserCommands:
    """Tests for user commands."""

    def test_get_user_by_name(self, gh, client):
        """Test fetching a user by name."""
        client.invoke.return_value = {"login": "octocat", "id": 1}

        user = gh.users.get_user("octocat")

        assert isinstance(user, User)
        assert user.user_name == "octocat"
        assert client.invoke.call_args.args == ("users/octocat",)

    def test_get_current_user(self, gh, client):
        """Test fetching the authenticated user."""
        client.invoke.return_value = {"login": "me", "id": 2}
        assert gh.users.get_user(current=True).user_name == "me"
        assert client.invoke.call_args.args == ("user",)

    def test_get_all_users(self, gh, client):
        """Test listing every user."""
        client.invoke_multi.return_value = [{"login": "a", "id": 1}, {"login": "b", "id": 2}]
        users = gh.users.get_user()
        assert [u.user_name for u in users] == ["a", "b"]

    def test_name_and_current_conflict(self, gh, client):
        """Test that a name and current together are rejected."""
        with pytest.raises(InvalidArgumentError):
            gh.users.get_user("octocat", current=True)
        client.invoke.assert_not_called()

    def test_contextual_information_requires_pair(self, gh, client):
        """Test that subject type and id must come together and be valid."""
        with pytest.raises(InvalidArgumentError):
            gh.users.get_contextual_information("octocat", subject_type="repository")
        with pytest.raises(InvalidArgumentError):
            gh.users.get_contextual_information("octocat", subject_type="planet", subject_id=1)
        client.invoke.assert_not_called()

    def test_contextual_information(self, gh, client):
        """Test that hovercard subject parameters are sent."""
        client.invoke.return_value = {"contexts": [{"message": "Owns this repository"}]}

        info = gh.users.get_contextual_information("octocat", "repository", 1296269)

        assert info.user_name == "octocat"
        assert len(info.contexts) == 1
        assert client.invoke.call_args.kwargs["parameters"] == {
            "subject_type": "repository", "subject_id": "1296269",
        }

    def test_update_current_user_sends_only_given_fields(self, gh, client):
        """Test that only supplied profile fields are sent."""
        client.invoke.return_value = {"login": "me", "id": 2}

        gh.users.update_current_user(bio="Hello", hireable=False)

        assert client.invoke.call_args.kwargs["body"] == {"bio": "Hello", "hireable": False}
        assert client.invoke.call_args.kwargs["method"] == "PATCH"

    def test_update_current_user_with_nothing(self, gh):
        """Test that an empty profile update is rejected."""
        with pytest.raises(InvalidArgumentError):
            gh.users.update_current_user()


class TestReferenceCommands:
    """Tests for reference and branch commands."""

    def test_get_branch_reference(self, gh, client):
        """Test fetching a branch reference from the default repository."""
        client.invoke.return_value = ref_json("refs/heads/release")

        ref = gh.references.get_reference(branch_name="release")

        assert isinstance(ref, Reference)
        assert ref.branch_name == "release"
        assert ref.repository_url == REPO_URL
        assert client.invoke.call_args.args == (f"{REPO}/git/ref/heads/release",)

    def test_get_tag_reference_by_uri(self, gh, client):
        """Test fetching a tag reference from a repository URI."""
        client.invoke.return_value = ref_json("refs/tags/v1")

        ref = gh.references.get_reference(tag_name="v1", uri="https://github.com/other/proj")

        assert ref.tag_name == "v1"
        assert ref.repository_url == "https://github.com/other/proj"
        assert client.invoke.call_args.args == ("repos/other/proj/git/ref/tags/v1",)

    def test_get_all_references(self, gh, client):
        """Test listing every reference."""
        client.invoke_multi.return_value = [ref_json("refs/heads/main"), ref_json("refs/tags/v1")]

        refs = gh.references.get_reference()

        assert [r.type_name for r in refs] == ["GitHub.Branch", "GitHub.Tag"]
        assert client.invoke_multi.call_args.args == (f"{REPO}/git/matching-refs/",)

    def test_get_matching_prefix(self, gh, client):
        """Test listing references that match a prefix."""
        client.invoke_multi.return_value = [ref_json("refs/heads/feature/a")]

        gh.references.get_reference(branch_name="feature", match_prefix=True)

        assert client.invoke_multi.call_args.args == (f"{REPO}/git/matching-refs/heads/feature",)

    def test_ambiguous_reference_fails_before_request(self, gh, client):
        """Test that an ambiguous reference fails before any request."""
        with pytest.raises(InvalidArgumentError):
            gh.references.get_reference(tag_name="v1", branch_name="main")
        client.invoke.assert_not_called()
        client.invoke_multi.assert_not_called()

    def test_new_reference(self, gh, client):
        """Test creating a branch reference."""
        client.invoke.return_value = ref_json("refs/heads/topic", sha="def456")

        ref = gh.references.new_reference("def456", branch_name="topic")

        assert ref.sha == "def456"
        kwargs = client.invoke.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["body"] == {"ref": "refs/heads/topic", "sha": "def456"}

    def test_new_reference_requires_name(self, gh, client):
        """Test that creating a reference needs a tag or branch."""
        with pytest.raises(InvalidArgumentError):
            gh.references.new_reference("def456")
        client.invoke.assert_not_called()

    def test_set_reference(self, gh, client):
        """Test moving a tag with force."""
        client.invoke.return_value = ref_json("refs/tags/v1", sha="fff")

        gh.references.set_reference("fff", tag_name="v1", force=True)

        assert client.invoke.call_args.args == (f"{REPO}/git/refs/tags/v1",)
        assert client.invoke.call_args.kwargs["body"] == {"sha": "fff", "force": True}

    def test_remove_reference(self, gh, client):
        """Test deleting a branch reference."""
        client.invoke.return_value = None

        assert gh.references.remove_reference(branch_name="old") is None
        assert client.invoke.call_args.kwargs["method"] == "DELETE"
        assert client.invoke.call_args.args == (f"{REPO}/git/refs/heads/old",)

    def test_list_branches(self, gh, client):
        """Test listing protected branches."""
        client.invoke_multi.return_value = [{"name": "main", "commit": {"sha": "abc"}, "protected": True}]

        branches = gh.references.list_branches(protected=True)

        assert branches[0].branch_name == "main"
        assert branches[0].sha == "abc"
        assert branches[0].repository_url == REPO_URL
        assert client.invoke_multi.call_args.kwargs["parameters"] == {"protected": "true"}

    def test_new_branch_from_default_branch(self, gh, client):
        """Test creating a branch from the repository's default branch."""
        client.invoke.side_effect = [
            {"default_branch": "main"},
            ref_json("refs/heads/main", sha="base"),
            ref_json("refs/heads/topic", sha="base"),
        ]

        ref = gh.references.new_branch("topic")

        assert ref.branch_name == "topic"
        calls = client.invoke.call_args_list
        assert calls[0].args == (REPO,)
        assert calls[1].args == (f"{REPO}/git/ref/heads/main",)
        assert calls[2].kwargs["body"] == {"ref": "refs/heads/topic", "sha": "base"}

    def test_new_branch_from_sha_skips_lookup(self, gh, client):
        """Test that a given SHA skips the origin lookup."""
        client.invoke.return_value = ref_json("refs/heads/topic", sha="given")

        gh.references.new_branch("topic", sha="given")

        assert client.invoke.call_count == 1

    def test_new_branch_missing_origin_propagates(self, gh, client):
        """Test that a missing origin branch error propagates."""
        client.invoke.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(GithubException):
            gh.references.new_branch("topic", origin_branch_name="nope")


class TestPullRequestCommands:
    """Tests for pull request commands."""

    def pr_json(self, number=1):
        return {
            "id": 100 + number,
            "number": number,
            "title": "Change",
            "state": "open",
            "user": {"login": "octocat", "id": 1},
            "head": {"ref": "feature"},
            "base": {"ref": "main", "repo": {"html_url": REPO_URL}},
        }

    def test_list_qualifies_head(self, gh, client):
        """Test that a bare head branch is qualified with the owner."""
        client.invoke_multi.return_value = [self.pr_json(1), self.pr_json(2)]

        prs = gh.pull_requests.list_pull_requests(state="all", head="feature")

        assert [p.pull_request_number for p in prs] == [1, 2]
        assert client.invoke_multi.call_args.kwargs["parameters"] == {
            "state": "all", "head": "octocat:feature",
        }

    def test_list_rejects_bad_state(self, gh, client):
        """Test that an unknown state is rejected."""
        with pytest.raises(InvalidArgumentError):
            gh.pull_requests.list_pull_requests(state="merged")
        client.invoke_multi.assert_not_called()

    def test_get(self, gh, client):
        """Test fetching a single pull request."""
        client.invoke.return_value = self.pr_json(5)

        pr = gh.pull_requests.get_pull_request(5)

        assert isinstance(pr, PullRequest)
        assert pr.pull_request_number == 5
        assert pr.repository_url == REPO_URL

    def test_new_requires_title_or_issue(self, gh, client):
        """Test that exactly one of title or issue is required."""
        with pytest.raises(InvalidArgumentError):
            gh.pull_requests.new_pull_request("feature", "main")
        with pytest.raises(InvalidArgumentError):
            gh.pull_requests.new_pull_request("feature", "main", title="x", issue=3)
        client.invoke.assert_not_called()

    def test_new_draft(self, gh, client):
        """Test opening a draft pull request."""
        client.invoke.return_value = self.pr_json(9)

        gh.pull_requests.new_pull_request("feature", "main", title="Add it", draft=True)

        assert client.invoke.call_args.kwargs["body"] == {
            "head": "feature", "base": "main", "title": "Add it", "draft": True,
        }

    def test_update(self, gh, client):
        """Test closing a pull request."""
        client.invoke.return_value = self.pr_json(5)

        gh.pull_requests.update_pull_request(5, state="closed")

        assert client.invoke.call_args.kwargs["body"] == {"state": "closed"}
        assert client.invoke.call_args.kwargs["method"] == "PATCH"

    def test_list_commits(self, gh, client):
        """Test listing the commits of a pull request."""
        client.invoke_multi.return_value = [{"sha": "a1", "commit": {"message": "m"}, "author": None}]

        commits = gh.pull_requests.list_commits(5)

        assert commits[0].sha == "a1"
        assert commits[0].author is None
        assert commits[0].repository_url == REPO_URL

    @pytest.mark.parametrize("status,merged", [(204, True), (404, False), (500, False)])
    def test_is_merged(self, gh, client, status, merged):
        """Test that only a 204 counts as merged."""
        client.invoke_status.return_value = status

        assert gh.pull_requests.is_merged(3) is merged
        assert client.invoke_status.call_args.args == (f"{REPO}/pulls/3/merge",)

    def test_merge(self, gh, client):
        """Test merging with a method and expected head SHA."""
        client.invoke.return_value = {"sha": "m1", "merged": True, "message": "Pull Request successfully merged"}

        result = gh.pull_requests.merge_pull_request(3, merge_method="squash", sha="head")

        assert result["merged"] is True
        assert client.invoke.call_args.kwargs["body"] == {"merge_method": "squash", "sha": "head"}

    def test_merge_rejects_unknown_method(self, gh):
        """Test that an unknown merge method is rejected."""
        with pytest.raises(InvalidArgumentError):
            gh.pull_requests.merge_pull_request(3, merge_method="octopus")


class TestReviewCommands:
    """Tests for review commands."""

    def review_json(self, review_id=80, state="APPROVED"):
        return {
            "id": review_id,
            "state": state,
            "user": {"login": "reviewer", "id": 2},
            "pull_request_url": f"https://api.github.com/{REPO}/pulls/12",
        }

    def test_list(self, gh, client):
        """Test listing reviews of a pull request."""
        client.invoke_multi.return_value = [self.review_json(1), self.review_json(2)]

        reviews = gh.reviews.list_reviews(12)

        assert [r.review_id for r in reviews] == [1, 2]
        assert all(r.pull_request_number == 12 for r in reviews)

    def test_new_pending_review(self, gh, client):
        """Test creating a pending review with no event."""
        client.invoke.return_value = self.review_json(state="PENDING")

        gh.reviews.new_review(12)

        assert client.invoke.call_args.kwargs["body"] == {}

    def test_new_review_with_comments(self, gh, client):
        """Test creating a comment review with inline comments."""
        client.invoke.return_value = self.review_json(state="COMMENTED")
        comments = [{"path": "a.py", "line": 3, "body": "nit"}]

        gh.reviews.new_review(12, event="comment", body="See inline", comments=comments)

        assert client.invoke.call_args.kwargs["body"] == {
            "event": "COMMENT", "body": "See inline", "comments": comments,
        }

    def test_request_changes_needs_body(self, gh, client):
        """Test that REQUEST_CHANGES needs a body."""
        with pytest.raises(InvalidArgumentError):
            gh.reviews.new_review(12, event="REQUEST_CHANGES")
        client.invoke.assert_not_called()

    def test_submit(self, gh, client):
        """Test submitting a pending review."""
        client.invoke.return_value = self.review_json()

        gh.reviews.submit_review(12, 80, "APPROVE")

        assert client.invoke.call_args.args == (f"{REPO}/pulls/12/reviews/80/events",)

    def test_dismiss_needs_message(self, gh):
        """Test that dismissing needs a message."""
        with pytest.raises(InvalidArgumentError):
            gh.reviews.dismiss_review(12, 80, "")

    def test_dismiss(self, gh, client):
        """Test dismissing a review."""
        client.invoke.return_value = self.review_json(state="DISMISSED")

        review = gh.reviews.dismiss_review(12, 80, "Outdated")

        assert review.state == "DISMISSED"
        assert client.invoke.call_args.kwargs["method"] == "PUT"


class TestReviewRequestCommands:
    """Tests for review request commands."""

    def test_get(self, gh, client):
        """Test fetching pending review requests."""
        client.invoke.return_value = {"users": [{"login": "a", "id": 1}], "teams": []}

        request = gh.review_requests.get_review_requests(4)

        assert isinstance(request, ReviewRequest)
        assert request.users[0].user_name == "a"
        assert request.repository_url == REPO_URL

    def test_new_requires_reviewer(self, gh, client):
        """Test that at least one reviewer is required."""
        with pytest.raises(InvalidArgumentError):
            gh.review_requests.new_review_request(4)
        client.invoke.assert_not_called()

    def test_new_and_remove(self, gh, client):
        """Test adding and removing review requests."""
        client.invoke.return_value = {"number": 4, "base": {"repo": {"html_url": REPO_URL}}}

        pr = gh.review_requests.new_review_request(4, user_names=["a"], team_names=["core"])
        assert pr.pull_request_number == 4
        assert client.invoke.call_args.kwargs["body"] == {"reviewers": ["a"], "team_reviewers": ["core"]}

        gh.review_requests.remove_review_request(4, user_names=["a"])
        assert client.invoke.call_args.kwargs["method"] == "DELETE"


class TestMetaCommands:
    """Tests for meta commands."""

    def test_get_meta(self, gh, client):
        """Test fetching meta information."""
        client.invoke.return_value = {"verifiable_password_authentication": True}
        assert gh.meta.get_meta()["verifiable_password_authentication"] is True
        assert client.invoke.call_args.args == ("meta",)

    def test_convert_markdown(self, gh, client):
        """Test rendering markdown to HTML."""
        client.invoke.return_value = {"data": "<p>Hello <strong>world</strong></p>"}

        html = gh.meta.convert_markdown("Hello **world**")

        assert html == "<p>Hello <strong>world</strong></p>"

    def test_context_only_with_gfm(self, gh):
        """Test that a context is only allowed in gfm mode."""
        with pytest.raises(InvalidArgumentError):
            gh.meta.convert_markdown("#1", context="octocat/hello-world")


class TestPipelineSupport:
    """Derived fields are skipped when pipeline support is disabled."""

    def test_disabled(self, client):
        """Test that derived fields are unset when pipeline support is off."""
        config = Configuration(
            default_owner_name="octocat", default_repository_name="hello-world",
            disable_pipeline_support=True,
        )
        client.config = config
        client.invoke.return_value = ref_json("refs/heads/release")

        ref = GitHubCommands(config, client=client).references.get_reference(branch_name="release")

        assert ref.branch_name is None
        assert ref.raw["ref"] == "refs/heads/release"
