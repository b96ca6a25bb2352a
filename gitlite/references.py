import abc
import logging
import os

from gitlite.errors import BranchNotFoundError, GitliteError
from gitlite.folders_enum import FoldersEnum
from gitlite.storage import FolderStorage

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = 'master'


class Reference(abc.ABC):
    @abc.abstractmethod
    def get_pointer(self) -> bytes:
        pass


class Branch(Reference):
    '''Branch is a movable reference to a commit'''
    def __init__(self, name: str, commit_id: str):
        self.name = name
        self.commit_id = commit_id

    def get_pointer(self) -> bytes:
        return self.commit_id.encode()

    def __repr__(self):
        return f'Branch({self.name!r}, {self.commit_id[:7]})'


class Head(Reference):
    '''Head is a reference to the active branch'''
    prefix = f'ref: {FoldersEnum.HEADS.value}'

    def __init__(self, branch_name: str):
        self.branch_name = branch_name

    def get_pointer(self) -> bytes:
        return f'{self.prefix}{self.branch_name}'.encode()

    @staticmethod
    def from_pointer(content: bytes) -> "Head":
        return Head(content.decode().strip()[len(Head.prefix):])


class References:
    '''Branch files under refs/heads/ and the HEAD file naming the active one'''
    def __init__(self, heads_path: str, head_path: str):
        self.heads_path = heads_path
        self.head_path = head_path

    def initialize(self, commit_id: str, branch_name: str = DEFAULT_BRANCH):
        os.makedirs(self.heads_path, exist_ok=True)
        self.store_branch(Branch(branch_name, commit_id))
        self.store_head(Head(branch_name))

    def exists(self, name: str) -> bool:
        return is_valid_branch_name(name) and os.path.isfile(os.path.join(self.heads_path, name))

    def get_branch(self, name: str) -> Branch:
        if not self.exists(name):
            raise BranchNotFoundError('A branch with that name does not exist.')
        commit_id = FolderStorage.read(name, self.heads_path).decode().strip()

        return Branch(name, commit_id)

    def branch_names(self) -> list[str]:
        return sorted(os.listdir(self.heads_path))

    def head(self) -> Head:
        return Head.from_pointer(FolderStorage.get_file_content(self.head_path))

    def active_branch(self) -> Branch:
        return self.get_branch(self.head().branch_name)

    def create_branch(self, name: str, commit_id: str) -> Branch:
        if not is_valid_branch_name(name):
            raise GitliteError(f'Invalid branch name: {name!r}.')
        if self.exists(name):
            raise GitliteError('A branch with that name already exists.')
        branch = Branch(name, commit_id)
        self.store_branch(branch)

        return branch

    def delete_branch(self, name: str):
        if not self.exists(name):
            raise BranchNotFoundError('A branch with that name does not exist.')
        if name == self.head().branch_name:
            raise GitliteError('Cannot remove the current branch.')
        os.remove(os.path.join(self.heads_path, name))
        logger.debug('deleted branch %s', name)

    def set_branch(self, name: str, commit_id: str) -> Branch:
        branch = Branch(name, commit_id)
        self.store_branch(branch)

        return branch

    def switch_active(self, name: str):
        if not self.exists(name):
            raise BranchNotFoundError('No such branch exists.')
        self.store_head(Head(name))

    def store_branch(self, branch: Branch):
        FolderStorage.store(branch.name, branch.get_pointer(), self.heads_path)
        logger.debug('branch %s -> %s', branch.name, branch.commit_id)

    def store_head(self, head: Head):
        FolderStorage.store(os.path.basename(self.head_path), head.get_pointer(),
                            os.path.dirname(self.head_path))


def is_valid_branch_name(name: str) -> bool:
    '''A branch is one file directly under refs/heads/'''
    if not name or name in ('.', '..') or name.startswith('.'):
        return False

    return '/' not in name and os.sep not in name and '\0' not in name
