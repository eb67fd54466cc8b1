"""Liferay Portal Nook: disposable Liferay stacks on a local Docker engine."""

from ._version import __version__

__all__ = ["__version__"]
