import abc
import hashlib
import pickle
from datetime import datetime, timezone

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
INITIAL_COMMIT_MESSAGE = 'initial commit'


class GitliteObject(abc.ABC):
    @abc.abstractmethod
    def get_hash(self) -> str:
        pass

    @abc.abstractmethod
    def serialize(self) -> bytes:
        pass

    @staticmethod
    @abc.abstractmethod
    def deserialize(content: bytes) -> "GitliteObject":
        pass


class Blob(GitliteObject):
    '''Blob is a file container'''
    def __init__(self, content: bytes):
        self.content = content

    def serialize(self) -> bytes:
        return self.content

    @staticmethod
    def deserialize(content: bytes) -> "Blob":
        return Blob(content)

    def get_hash(self) -> str:
        return hash_content(self.content)


class Commit(GitliteObject):
    '''Commit is an immutable snapshot of every tracked file.

    ``parents`` holds zero ids for the root commit, one for a normal commit
    and two for a merge commit (current branch first, merged-in branch second).
    '''
    def __init__(self, message: str, timestamp: datetime, snapshot: dict[str, str],
                 parents: tuple[str, ...] = ()):
        if len(parents) > 2:
            raise ValueError(f'a commit has at most two parents, got {len(parents)}')
        self.message = message
        self.timestamp = timestamp
        self.snapshot = dict(snapshot)
        self.parents = tuple(parents)
        self._hash = None

    @staticmethod
    def initial() -> "Commit":
        return Commit(INITIAL_COMMIT_MESSAGE, EPOCH, {})

    @property
    def is_merge(self) -> bool:
        return len(self.parents) == 2

    def serialize(self) -> bytes:
        return pickle.dumps(self)

    @staticmethod
    def deserialize(content: bytes) -> "Commit":
        return pickle.loads(content)

    def get_hash(self) -> str:
        if self._hash is None:
            header = b'commit #\0'
            parts = [self.message, self.timestamp.isoformat(), *self.parents]
            for filename, blob_hash in sorted(self.snapshot.items()):
                parts.append(f'{filename}\0{blob_hash}')
            self._hash = hashlib.sha1(header + '\n'.join(parts).encode()).hexdigest()

        return self._hash

    def __eq__(self, other):
        return isinstance(other, Commit) and self.get_hash() == other.get_hash()

    def __hash__(self):
        return hash(self.get_hash())

    def __repr__(self):
        return f'Commit({self.get_hash()[:7]}, {self.message!r})'


def hash_content(content: bytes) -> str:
    header = b'blob #\0'

    return hashlib.sha1(header + content).hexdigest()
