"""gitlite error types.

Every user-facing precondition violation is a ``GitliteError``; the shell
prints its message and rejects the command. Subclasses only exist so code
and tests can tell failures apart.
"""


class GitliteError(Exception):
    """Raised when an operation is rejected.

    Attributes:
        message: Human readable reason, printed verbatim by the shell.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(GitliteError):
    """Raised when a named commit, branch or file does not exist."""


class ObjectNotFoundError(LookupError):
    """Raised when the object store holds no object with the given id.

    Snapshots only reference stored objects, so hitting this means the
    repository is corrupt; it is not a ``GitliteError``.
    """

    def __init__(self, object_id: str) -> None:
        self.object_id = object_id
        super().__init__(f'No object with id {object_id} exists.')


class CommitNotFoundError(NotFoundError):
    def __init__(self, commit_id: str) -> None:
        self.commit_id = commit_id
        super().__init__('No commit with that id exists.')


class BranchNotFoundError(NotFoundError):
    pass


class UntrackedFileError(GitliteError):
    """Raised by the validation pass when a write would clobber an untracked file.

    Attributes:
        filename: The first untracked file found in the way.
    """

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__('There is an untracked file in the way; '
                         'delete it, or add and commit it first.')


class MergeError(GitliteError):
    """Raised when a merge precondition does not hold."""
