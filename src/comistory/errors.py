"""Exceptions raised by the commit discovery adapters and the CLI."""


class ComistoryError(Exception):
    """Base class for user-facing Comistory errors."""


class GitRepositoryError(ComistoryError):
    """The local repository is missing or git could not read it."""


class RemoteRepositoryError(ComistoryError):
    """The hosted repository could not be resolved or queried."""


class TokenError(ComistoryError):
    """No usable GitHub token is available."""


class OptionsError(ComistoryError):
    """The command line options are inconsistent or out of range."""
