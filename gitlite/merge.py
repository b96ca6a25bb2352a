import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from gitlite.commit_graph import CommitGraph
from gitlite.errors import MergeError
from gitlite.references import Branch, References
from gitlite.staging import StagingArea
from gitlite.working_tree import WorkingTreeSynchronizer

logger = logging.getLogger(__name__)

CONFLICT_HEAD = f'<<<<<<< HEAD{os.linesep}'.encode()
CONFLICT_SEPARATOR = f'======={os.linesep}'.encode()
CONFLICT_END = f'>>>>>>>{os.linesep}'.encode()


class Resolution(str, Enum):
    KEEP_CURRENT = 'keep current'
    TAKE_GIVEN = 'take given'
    REMOVE = 'remove'
    DELETE_UNTRACKED = 'delete untracked'
    CONFLICT = 'conflict'


def classify(base: str | None, current: str | None, given: str | None) -> Resolution:
    '''Three-way resolution of one file; arguments are blob ids, None when absent'''
    if current == given:
        return Resolution.KEEP_CURRENT
    if base == current:
        return Resolution.REMOVE if given is None else Resolution.TAKE_GIVEN
    if base == given:
        if current is None:
            # deleted on the current branch, untouched on the given one
            return Resolution.DELETE_UNTRACKED
        return Resolution.KEEP_CURRENT

    return Resolution.CONFLICT


def build_conflict(current: bytes, given: bytes) -> bytes:
    return CONFLICT_HEAD + current + CONFLICT_SEPARATOR + given + CONFLICT_END


@dataclass
class MergeResult:
    current_branch: str
    given_branch: str
    commit_id: str
    fast_forward: bool = False
    conflicted_files: list[str] = field(default_factory=list)

    @property
    def conflict(self) -> bool:
        return bool(self.conflicted_files)

    @property
    def message(self) -> str:
        return f'Merged {self.given_branch} into {self.current_branch}.'


class MergeEngine:
    def __init__(self, graph: CommitGraph, refs: References,
                 synchronizer: WorkingTreeSynchronizer, stage_path: str):
        self.graph = graph
        self.refs = refs
        self.synchronizer = synchronizer
        self.objects = synchronizer.objects
        self.working_tree = synchronizer.working_tree
        self.stage_path = stage_path

    def check_preconditions(self, stage: StagingArea, branch_name: str) -> tuple[Branch, Branch]:
        if not stage.is_empty():
            raise MergeError('You have uncommitted changes.')
        if not self.refs.exists(branch_name):
            raise MergeError('A branch with that name does not exist.')
        current = self.refs.active_branch()
        given = self.refs.get_branch(branch_name)
        if current.commit_id == given.commit_id:
            raise MergeError('Cannot merge a branch with itself.')

        return current, given

    def merge(self, stage: StagingArea, branch_name: str) -> MergeResult:
        current, given = self.check_preconditions(stage, branch_name)
        split = self.graph.split_point(current.commit_id, given.commit_id)
        if split == given.commit_id:
            raise MergeError('Given branch is an ancestor of the current branch.')

        current_commit = self.graph.get(current.commit_id)
        given_commit = self.graph.get(given.commit_id)
        if split == current.commit_id:
            return self._fast_forward(stage, current, given, current_commit.snapshot, given_commit.snapshot)

        base = self.graph.get(split).snapshot
        self.synchronizer.check_untracked(current_commit.snapshot, given_commit.snapshot)

        result = MergeResult(current.name, given.name, commit_id=None)
        for filename in sorted(set(base) | set(current_commit.snapshot) | set(given_commit.snapshot)):
            resolution = classify(base.get(filename),
                                  current_commit.snapshot.get(filename),
                                  given_commit.snapshot.get(filename))
            self._resolve(stage, filename, resolution,
                          current_commit.snapshot.get(filename), given_commit.snapshot.get(filename))
            if resolution is Resolution.CONFLICT:
                result.conflicted_files.append(filename)
        stage.save(self.stage_path)

        merge_commit = self.graph.create(stage.apply_to(current_commit.snapshot), result.message,
                                         [current.commit_id, given.commit_id])
        self.refs.set_branch(current.name, merge_commit.get_hash())
        stage.clear()
        stage.save(self.stage_path)
        result.commit_id = merge_commit.get_hash()

        return result

    def _fast_forward(self, stage: StagingArea, current: Branch, given: Branch,
                      current_snapshot: dict[str, str], given_snapshot: dict[str, str]) -> MergeResult:
        self.synchronizer.apply(current_snapshot, given_snapshot)
        self.refs.set_branch(current.name, given.commit_id)
        self.refs.switch_active(current.name)
        stage.clear()
        stage.save(self.stage_path)
        logger.debug('fast-forwarded %s to %s', current.name, given.commit_id)

        return MergeResult(current.name, given.name, given.commit_id, fast_forward=True)

    def _resolve(self, stage: StagingArea, filename: str, resolution: Resolution,
                 current_id: str | None, given_id: str | None):
        logger.debug('merge %s: %s', filename, resolution.value)
        if resolution is Resolution.TAKE_GIVEN:
            self.synchronizer.write_blob(filename, given_id)
            stage.stage(filename, given_id)
        elif resolution is Resolution.REMOVE:
            self.working_tree.delete(filename)
            stage.mark_removed(filename)
        elif resolution is Resolution.DELETE_UNTRACKED:
            self.working_tree.delete(filename)
        elif resolution is Resolution.CONFLICT:
            content = build_conflict(self._content_of(current_id), self._content_of(given_id))
            self.working_tree.write(filename, content)
            stage.stage(filename, self.objects.put(content))

    def _content_of(self, blob_id: str | None) -> bytes:
        return self.objects.get(blob_id) if blob_id is not None else b''
