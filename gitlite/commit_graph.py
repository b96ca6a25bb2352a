import logging
import os
from collections import deque
from datetime import datetime, timezone
from typing import Iterator

from gitlite.errors import CommitNotFoundError, GitliteError
from gitlite.objects import Commit
from gitlite.storage import ObjectStore, read_record, store_record

logger = logging.getLogger(__name__)


class CommitGraph:
    '''Immutable commits linked by parent ids, plus the index of every commit id.

    The index keeps creation order, so prefix resolution and ``global-log``
    scan commits from the oldest to the newest.
    '''
    def __init__(self, store: ObjectStore, index_path: str):
        self.store = store
        self.index_path = index_path
        self._cache: dict[str, Commit] = {}
        self._index: list[str] = None

    @property
    def index(self) -> list[str]:
        if self._index is None:
            self._index = read_record(self.index_path) if os.path.exists(self.index_path) else []

        return self._index

    def add(self, commit: Commit) -> Commit:
        commit_id = commit.get_hash()
        self.store.put_with_id(commit_id, commit.serialize())
        self._cache[commit_id] = commit
        if commit_id not in self.index:
            self.index.append(commit_id)
            store_record(self.index_path, self.index)
            logger.debug('created commit %s: %s', commit_id, commit.message)

        return commit

    def create(self, snapshot: dict[str, str], message: str, parents: list[str],
               timestamp: datetime = None) -> Commit:
        if len(parents) not in (1, 2):
            raise ValueError(f'a new commit needs one or two parents, got {len(parents)}')
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        return self.add(Commit(message, timestamp, snapshot, tuple(parents)))

    def get(self, commit_id: str) -> Commit:
        if commit_id not in self._cache:
            if not self.store.contains(commit_id):
                raise CommitNotFoundError(commit_id)
            self._cache[commit_id] = Commit.deserialize(self.store.get(commit_id))

        return self._cache[commit_id]

    def resolve(self, id_or_prefix: str) -> Commit:
        '''Exact id first, otherwise the oldest commit whose id contains the string'''
        if id_or_prefix and self.store.contains(id_or_prefix):
            return self.get(id_or_prefix)
        if id_or_prefix:
            for commit_id in self.index:
                if id_or_prefix in commit_id:
                    return self.get(commit_id)

        raise CommitNotFoundError(id_or_prefix)

    @staticmethod
    def parents_of(commit: Commit) -> tuple[str, ...]:
        return commit.parents

    def ancestor_depths(self, commit_id: str) -> dict[str, int]:
        '''Minimum number of parent edges from commit_id to each of its ancestors'''
        depths = {commit_id: 0}
        queue = deque([commit_id])
        while queue:
            current = queue.popleft()
            for parent in self.parents_of(self.get(current)):
                if parent not in depths:
                    depths[parent] = depths[current] + 1
                    queue.append(parent)

        return depths

    def split_point(self, current_id: str, given_id: str) -> str:
        depths = self.ancestor_depths(current_id)
        best, best_depth = None, None
        visited = {given_id}
        queue = deque([given_id])
        while queue:
            commit_id = queue.popleft()
            if commit_id in depths and (best_depth is None or depths[commit_id] < best_depth):
                best, best_depth = commit_id, depths[commit_id]
            for parent in self.parents_of(self.get(commit_id)):
                if parent not in visited:
                    visited.add(parent)
                    queue.append(parent)

        # every commit descends from the root commit
        assert best is not None, f'{current_id} and {given_id} share no ancestor'
        logger.debug('split point of %s and %s is %s', current_id, given_id, best)

        return best

    def history(self, commit_id: str) -> Iterator[Commit]:
        '''First-parent chain from commit_id back to the root commit'''
        commit = self.get(commit_id)
        yield commit
        while commit.parents:
            commit = self.get(commit.parents[0])
            yield commit

    def all_commits(self) -> Iterator[Commit]:
        for commit_id in self.index:
            yield self.get(commit_id)

    def find(self, message: str) -> list[str]:
        found = [commit.get_hash() for commit in self.all_commits() if commit.message == message]
        if not found:
            raise GitliteError('Found no commit with that message.')

        return found
