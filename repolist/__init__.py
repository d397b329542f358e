"""repolist — query and report on an account's GitHub repositories."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("repolist")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
