import logging
import os

from gitlite.errors import NotFoundError, UntrackedFileError
from gitlite.objects import hash_content
from gitlite.storage import FolderStorage, ObjectStore

logger = logging.getLogger(__name__)


class WorkingTree:
    '''Plain files directly under the working root'''
    def __init__(self, root: str, ignore: set[str] = None):
        self.root = root
        self.ignore = ignore or set()

    def path_of(self, filename: str) -> str:
        return os.path.join(self.root, filename)

    def exists(self, filename: str) -> bool:
        return os.path.isfile(self.path_of(filename))

    def read(self, filename: str) -> bytes:
        if not self.exists(filename):
            raise NotFoundError('File does not exist.')

        return FolderStorage.get_file_content(self.path_of(filename))

    def write(self, filename: str, content: bytes):
        path = self.path_of(filename)
        FolderStorage.store(os.path.basename(path), content, os.path.dirname(path))
        logger.debug('wrote %s', filename)

    def delete(self, filename: str):
        if self.exists(filename):
            os.remove(self.path_of(filename))
            logger.debug('deleted %s', filename)

    def hash_of(self, filename: str) -> str:
        return hash_content(self.read(filename))

    def list_files(self) -> list[str]:
        return sorted(name for name in os.listdir(self.root)
                      if name not in self.ignore and os.path.isfile(self.path_of(name)))


class WorkingTreeSynchronizer:
    '''Applies snapshots to a working tree, validating before any mutation'''
    def __init__(self, working_tree: WorkingTree, objects: ObjectStore):
        self.working_tree = working_tree
        self.objects = objects

    def find_untracked(self, current: dict[str, str], target) -> list[str]:
        '''Files the target would write that exist in the working tree but are not tracked'''
        return [filename for filename in sorted(target)
                if filename not in current and self.working_tree.exists(filename)]

    def check_untracked(self, current: dict[str, str], target):
        in_the_way = self.find_untracked(current, target)
        if in_the_way:
            raise UntrackedFileError(in_the_way[0])

    def apply(self, current: dict[str, str], target: dict[str, str]):
        self.check_untracked(current, target)

        for filename in current:
            if filename not in target:
                self.working_tree.delete(filename)
        for filename, blob_id in target.items():
            self.write_blob(filename, blob_id)

    def restore_file(self, snapshot: dict[str, str], filename: str):
        if filename not in snapshot:
            raise NotFoundError('File does not exist in that commit.')
        self.write_blob(filename, snapshot[filename])

    def write_blob(self, filename: str, blob_id: str):
        self.working_tree.write(filename, self.objects.get(blob_id))
