"""Shared builders for descriptors and gh JSON items."""

from datetime import datetime, timezone

import pytest

from repolist.models import BranchRef, LicenseInfo, RepositoryDescriptor, Visibility


def _make_repo(**kwargs) -> RepositoryDescriptor:
    name = kwargs.pop("name", "hello")
    owner = kwargs.pop("owner", "octo")
    defaults = {
        "name": name,
        "full_name": f"{owner}/{name}",
        "visibility": Visibility.PUBLIC,
        "url": f"https://github.com/{owner}/{name}",
        "ssh_url": f"git@github.com:{owner}/{name}.git",
        "created_at": datetime(2023, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "default_branch": BranchRef("main"),
        "license": LicenseInfo(spdx_id="MIT", name="MIT License"),
    }
    return RepositoryDescriptor(**{**defaults, **kwargs})


def _gh_item(**kwargs) -> dict:
    name = kwargs.pop("name", "hello")
    item = {
        "name": name,
        "nameWithOwner": f"octo/{name}",
        "description": "A repo",
        "visibility": "PUBLIC",
        "isPrivate": False,
        "isFork": False,
        "isArchived": False,
        "sshUrl": f"git@github.com:octo/{name}.git",
        "url": f"https://github.com/octo/{name}",
        "homepageUrl": "",
        "defaultBranchRef": {"name": "main"},
        "updatedAt": "2024-05-01T10:00:00Z",
        "createdAt": "2022-01-01T00:00:00Z",
        "stargazerCount": 3,
        "watchers": {"totalCount": 2},
        "issues": {"totalCount": 1},
        "licenseInfo": {"key": "mit", "name": "MIT License", "spdxId": "MIT"},
        "repositoryTopics": [{"name": "infra-tools"}],
    }
    item.update(kwargs)
    return item


@pytest.fixture
def make_repo():
    return _make_repo


@pytest.fixture
def gh_item():
    return _gh_item
