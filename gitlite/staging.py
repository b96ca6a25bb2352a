import os

from gitlite.storage import read_record, store_record


class StagingArea:
    '''Pending changes awaiting the next commit.

    ``added`` maps filenames to staged blob ids and ``removed`` holds filenames
    marked for removal; a filename is never in both.
    '''
    def __init__(self):
        self.added: dict[str, str] = {}
        self.removed: set[str] = set()

    def stage(self, filename: str, blob_id: str):
        self.added[filename] = blob_id
        self.removed.discard(filename)

    def unstage(self, filename: str):
        self.added.pop(filename, None)

    def mark_removed(self, filename: str):
        self.added.pop(filename, None)
        self.removed.add(filename)

    def is_staged(self, filename: str) -> bool:
        return filename in self.added

    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def clear(self):
        self.added = {}
        self.removed = set()

    def apply_to(self, snapshot: dict[str, str]) -> dict[str, str]:
        '''Snapshot of the next commit: snapshot overridden by added, minus removed'''
        result = dict(snapshot)
        result.update(self.added)
        for filename in self.removed:
            result.pop(filename, None)

        return result

    def save(self, path: str):
        store_record(path, {'added': self.added, 'removed': sorted(self.removed)})

    @staticmethod
    def load(path: str) -> "StagingArea":
        stage = StagingArea()
        if os.path.exists(path):
            record = read_record(path)
            stage.added = dict(record['added'])
            stage.removed = set(record['removed'])

        return stage
