from dataclasses import dataclass, field

from gitlite.staging import StagingArea
from gitlite.working_tree import WorkingTree


@dataclass
class StatusReport:
    active_branch: str
    branches: list[str] = field(default_factory=list)
    staged: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)


def build_status(branches: list[str], active_branch: str, stage: StagingArea,
                 snapshot: dict[str, str], working_tree: WorkingTree) -> StatusReport:
    modified = []
    for filename, blob_id in stage.added.items():
        if not working_tree.exists(filename):
            modified.append(f'{filename} (deleted)')
        elif working_tree.hash_of(filename) != blob_id:
            modified.append(f'{filename} (modified)')

    for filename, blob_id in snapshot.items():
        if filename in stage.added or filename in stage.removed:
            continue
        if not working_tree.exists(filename):
            modified.append(f'{filename} (deleted)')
        elif working_tree.hash_of(filename) != blob_id:
            modified.append(f'{filename} (modified)')

    untracked = [filename for filename in working_tree.list_files()
                 if filename not in stage.added and filename not in snapshot]

    return StatusReport(active_branch=active_branch,
                        branches=sorted(branches),
                        staged=sorted(stage.added),
                        removed=sorted(stage.removed),
                        modified=sorted(modified),
                        untracked=sorted(untracked))


def format_status(report: StatusReport) -> str:
    sections = [
        ('Branches', [f'*{name}' if name == report.active_branch else name for name in report.branches]),
        ('Staged Files', report.staged),
        ('Removed Files', report.removed),
        ('Modifications Not Staged For Commit', report.modified),
        ('Untracked Files', report.untracked),
    ]
    lines = []
    for title, entries in sections:
        lines.append(f'=== {title} ===')
        lines.extend(entries)
        lines.append('')

    return '\n'.join(lines)
