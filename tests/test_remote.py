"""Tests for the gh fetch layer — subprocess is always mocked."""

import json
import subprocess
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from repolist.config import resolve_config
from repolist.errors import FetchError
from repolist.models import Visibility
from repolist.remote import fetch_repositories
from repolist.remote.decode import decode_repositories
from repolist.remote.gh import GH_FIELDS, build_argv, run_gh


def _completed(stdout="[]", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=["gh"], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def gh_on_path():
    with patch("repolist.remote.gh.shutil.which", return_value="/usr/bin/gh"):
        yield


def test_build_argv():
    argv = build_argv("octo", 5, ["--source"])
    assert argv[:4] == ["gh", "repo", "list", "octo"]
    assert argv[argv.index("--limit") + 1] == "5"
    assert argv[argv.index("--json") + 1].split(",") == list(GH_FIELDS)
    assert argv[-1] == "--source"


def test_decode_full_item(gh_item):
    repos = decode_repositories(json.dumps([gh_item(homepageUrl="https://x.dev", description="")]))
    assert len(repos) == 1
    r = repos[0]
    assert r.name == "hello"
    assert r.full_name == "octo/hello"
    assert r.owner == "octo"
    assert r.description is None
    assert r.homepage_url == "https://x.dev"
    assert r.visibility == Visibility.PUBLIC
    assert r.watchers_count == 2
    assert r.open_issues_count == 1
    assert r.default_branch.name == "main"
    assert r.license.spdx_id == "MIT"
    assert r.topics == ("infra-tools",)
    assert r.updated_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert r.updated_at >= r.created_at


def test_decode_absent_nested_fields(gh_item):
    item = gh_item(defaultBranchRef=None, licenseInfo=None, repositoryTopics=None)
    r = decode_repositories(json.dumps([item]))[0]
    assert r.default_branch is None
    assert r.license is None
    assert r.topics == ()


def test_decode_empty_branch_and_noassertion_license(gh_item):
    item = gh_item(
        defaultBranchRef={"name": ""},
        licenseInfo={"key": "other", "name": "Other", "spdxId": "NOASSERTION"},
    )
    r = decode_repositories(json.dumps([item]))[0]
    assert r.default_branch is None
    assert r.license.spdx_id is None
    assert r.license.name == "Other"


def test_decode_dedupes_topics_in_order(gh_item):
    item = gh_item(repositoryTopics=[{"name": "b"}, {"name": "a"}, {"name": "b"}])
    assert decode_repositories(json.dumps([item]))[0].topics == ("b", "a")


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        json.dumps({"name": "x"}),
        json.dumps(["x"]),
        json.dumps([{"name": "x"}]),
    ],
)
def test_decode_bad_shape(text):
    with pytest.raises(FetchError) as exc:
        decode_repositories(text)
    assert "could not decode" in str(exc.value)


def test_decode_unknown_visibility(gh_item):
    with pytest.raises(FetchError):
        decode_repositories(json.dumps([gh_item(visibility="SECRET")]))


def test_run_gh_missing_binary():
    with patch("repolist.remote.gh.shutil.which", return_value=None):
        with pytest.raises(FetchError) as exc:
            run_gh(["gh", "repo", "list"])
    assert "not found" in str(exc.value)


def test_run_gh_file_not_found(gh_on_path):
    with patch("repolist.remote.gh.subprocess.run", side_effect=FileNotFoundError):
        with pytest.raises(FetchError) as exc:
            run_gh(["gh", "repo", "list"])
    assert "not found" in str(exc.value)


def test_run_gh_unauthenticated(gh_on_path):
    stderr = "To get started with GitHub CLI, please run:  gh auth login\n"
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed("", stderr, 4)):
        with pytest.raises(FetchError) as exc:
            run_gh(["gh", "repo", "list"])
    assert "not authenticated" in str(exc.value)
    assert exc.value.stderr == stderr


def test_run_gh_other_failure(gh_on_path):
    stderr = "\nGraphQL: Could not resolve to a RepositoryOwner with the login of 'nobody'.\n"
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed("", stderr, 1)):
        with pytest.raises(FetchError) as exc:
            run_gh(["gh", "repo", "list"])
    assert "exit 1" in str(exc.value)
    assert "Could not resolve" in str(exc.value)


def test_run_gh_is_called_once_without_retry(gh_on_path):
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed("", "boom", 1)) as run:
        with pytest.raises(FetchError):
            run_gh(["gh", "repo", "list"])
    assert run.call_count == 1


def test_fetch_pushes_no_forks(gh_on_path, gh_item):
    """includeForks=false becomes --source; gh already dropped the fork."""
    config = resolve_config("octo", include_forks=False)
    payload = json.dumps([gh_item(name="a"), gh_item(name="b")])
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed(payload)) as run:
        repos = fetch_repositories(config)
    argv = run.call_args.args[0]
    assert "--source" in argv
    assert [r.name for r in repos] == ["a", "b"]


def test_fetch_pushes_visibility_and_source_once(gh_on_path):
    config = resolve_config("octo", visibility="private", include_forks=False, source_only=True)
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed("[]")) as run:
        assert fetch_repositories(config) == []
    argv = run.call_args.args[0]
    assert argv.count("--source") == 1
    assert argv[argv.index("--visibility") + 1] == "private"


def test_fetch_default_has_no_filter_flags(gh_on_path):
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed("[]")) as run:
        fetch_repositories(resolve_config("octo", topics="infra"))
    argv = run.call_args.args[0]
    assert "--source" not in argv
    assert "--visibility" not in argv
    assert "--topic" not in argv


def test_fetch_respects_limit(gh_on_path, gh_item):
    """limit=2 is sent to gh; an over-long response is still capped."""
    config = resolve_config("octo", limit=2)
    payload = json.dumps([gh_item(name=f"r{i}") for i in range(5)])
    with patch("repolist.remote.gh.subprocess.run", return_value=_completed(payload)) as run:
        repos = fetch_repositories(config)
    argv = run.call_args.args[0]
    assert argv[argv.index("--limit") + 1] == "2"
    assert [r.name for r in repos] == ["r0", "r1"]


def test_decode_inconsistent_item(gh_item):
    """isPrivate with PUBLIC visibility, or updatedAt before createdAt, is not a valid record."""
    with pytest.raises(FetchError):
        decode_repositories(json.dumps([gh_item(isPrivate=True)]))
    with pytest.raises(FetchError):
        decode_repositories(json.dumps([gh_item(updatedAt="2020-01-01T00:00:00Z")]))


@pytest.mark.parametrize("field, value", [("stargazerCount", -5), ("watchers", {"totalCount": -1}), ("issues", -2)])
def test_decode_negative_count_is_rejected(gh_item, field, value):
    """Negative counts are an invalid record, not silently clamped to zero."""
    with pytest.raises(FetchError) as exc:
        decode_repositories(json.dumps([gh_item(**{field: value})]))
    assert "negative count" in str(exc.value)
