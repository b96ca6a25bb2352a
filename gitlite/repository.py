import logging
import os

from gitlite.commit_graph import CommitGraph
from gitlite.errors import GitliteError, NotFoundError
from gitlite.folders_enum import RepositoryPaths
from gitlite.merge import MergeEngine, MergeResult
from gitlite.objects import Commit
from gitlite.references import Branch, References
from gitlite.staging import StagingArea
from gitlite.status import StatusReport, build_status
from gitlite.storage import ObjectStore
from gitlite.working_tree import WorkingTree, WorkingTreeSynchronizer

logger = logging.getLogger(__name__)


class Repository:
    '''Command-level operations over one working root and its data folder.

    Every operation reads persisted state, changes it in memory and writes it
    back before returning; nothing is cached between commands except commits,
    which never change.
    '''
    def __init__(self, path: str, paths: RepositoryPaths = None):
        self.path_to_repository = path
        self.paths = paths or RepositoryPaths(path)

        self.objects = ObjectStore(self.paths.objects)
        self.graph = CommitGraph(ObjectStore(self.paths.commits), self.paths.commit_index)
        self.refs = References(self.paths.heads, self.paths.head)
        self.working_tree = WorkingTree(path, ignore={self.paths.data_folder})
        self.synchronizer = WorkingTreeSynchronizer(self.working_tree, self.objects)
        self.merger = MergeEngine(self.graph, self.refs, self.synchronizer, self.paths.stage)

    @staticmethod
    def is_repository_exists(path_to_repository: str) -> bool:
        return os.path.isdir(RepositoryPaths(path_to_repository).data)

    def initialize_repository(self):
        if os.path.isdir(self.paths.data):
            raise GitliteError('A Gitlite version-control system already exists in the current directory.')

        os.makedirs(self.paths.objects)
        os.makedirs(self.paths.commits)
        os.makedirs(self.paths.heads)

        commit = self.graph.add(Commit.initial())
        self.refs.initialize(commit.get_hash())
        StagingArea().save(self.paths.stage)
        logger.info('initialized repository at %s', self.path_to_repository)

    # staging

    def load_stage(self) -> StagingArea:
        return StagingArea.load(self.paths.stage)

    def add(self, filename: str):
        content = self.working_tree.read(filename)
        blob_id = self.objects.put(content)
        stage = self.load_stage()
        stage.stage(filename, blob_id)
        if self.get_commit_from_head().snapshot.get(filename) == blob_id:
            stage.unstage(filename)
        stage.save(self.paths.stage)

    def remove(self, filename: str):
        stage = self.load_stage()
        snapshot = self.get_commit_from_head().snapshot
        if not stage.is_staged(filename) and filename not in snapshot:
            raise GitliteError('No reason to remove the file.')

        stage.unstage(filename)
        if filename in snapshot:
            self.working_tree.delete(filename)
            stage.mark_removed(filename)
        stage.save(self.paths.stage)

    def make_commit(self, message: str) -> Commit:
        if not message or not message.strip():
            raise GitliteError('Please enter a commit message.')
        stage = self.load_stage()
        if stage.is_empty():
            raise GitliteError('No changes added to the commit.')

        branch = self.refs.active_branch()
        head_commit = self.graph.get(branch.commit_id)
        commit = self.graph.create(stage.apply_to(head_commit.snapshot), message, [branch.commit_id])
        self.refs.set_branch(branch.name, commit.get_hash())
        stage.clear()
        stage.save(self.paths.stage)

        return commit

    # checkout and reset

    def checkout_file(self, filename: str):
        self.synchronizer.restore_file(self.get_commit_from_head().snapshot, filename)

    def checkout_file_from_commit(self, commit_id: str, filename: str):
        commit = self.graph.resolve(commit_id)
        self.synchronizer.restore_file(commit.snapshot, filename)

    def checkout_branch(self, branch_name: str):
        if not self.refs.exists(branch_name):
            raise NotFoundError('No such branch exists.')
        current = self.refs.active_branch()
        if current.name == branch_name:
            raise GitliteError('No need to checkout the current branch.')

        target = self.refs.get_branch(branch_name)
        self.synchronizer.apply(self.graph.get(current.commit_id).snapshot,
                                self.graph.get(target.commit_id).snapshot)
        self.refs.switch_active(branch_name)
        self._clear_stage()

    def reset(self, commit_id: str) -> Commit:
        commit = self.graph.resolve(commit_id)
        current = self.refs.active_branch()
        self.synchronizer.apply(self.graph.get(current.commit_id).snapshot, commit.snapshot)
        self.refs.set_branch(current.name, commit.get_hash())
        self._clear_stage()

        return commit

    def _clear_stage(self):
        StagingArea().save(self.paths.stage)

    # branches

    def create_branch(self, branch_name: str) -> Branch:
        return self.refs.create_branch(branch_name, self.refs.active_branch().commit_id)

    def delete_branch(self, branch_name: str):
        self.refs.delete_branch(branch_name)

    def get_branches_names(self) -> list[str]:
        return self.refs.branch_names()

    def get_branch_from_head(self) -> Branch:
        return self.refs.active_branch()

    def get_commit_from_head(self) -> Commit:
        return self.graph.get(self.refs.active_branch().commit_id)

    # merge

    def merge(self, branch_name: str) -> MergeResult:
        return self.merger.merge(self.load_stage(), branch_name)

    # reporting

    def status(self) -> StatusReport:
        stage = self.load_stage()
        report = build_status(self.refs.branch_names(), self.refs.head().branch_name, stage,
                              self.get_commit_from_head().snapshot, self.working_tree)
        stage.save(self.paths.stage)

        return report

    def log(self) -> list[Commit]:
        return list(self.graph.history(self.refs.active_branch().commit_id))

    def global_log(self) -> list[Commit]:
        return list(self.graph.all_commits())

    def find(self, message: str) -> list[str]:
        return self.graph.find(message)


def format_commit(commit: Commit) -> str:
    lines = ['===', f'commit {commit.get_hash()}']
    if commit.is_merge:
        lines.append('Merge: ' + ' '.join(parent[:7] for parent in commit.parents))
    lines.append('Date: ' + commit.timestamp.astimezone().strftime('%a %b %d %H:%M:%S %Y %z'))
    lines.append(commit.message)
    lines.append('')

    return '\n'.join(lines)
