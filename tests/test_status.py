import os

import pytest

from gitlite.repository import Repository
from gitlite.status import StatusReport, format_status


def write(repo, name, content):
    with open(os.path.join(repo.path_to_repository, name), 'w') as f:
        f.write(content)


@pytest.fixture()
def repo(tmpdir):
    repo = Repository(str(tmpdir))
    repo.initialize_repository()
    for name in ('tracked.txt', 'edited.txt', 'deleted.txt', 'removed.txt'):
        write(repo, name, name)
        repo.add(name)
    repo.make_commit('first')

    return repo


def test_clean_repository(repo):
    report = repo.status()

    assert report == StatusReport(active_branch='master', branches=['master'])


def test_all_sections(repo):
    repo.create_branch('feature')
    write(repo, 'edited.txt', 'changed')
    os.remove(os.path.join(repo.path_to_repository, 'deleted.txt'))
    repo.remove('removed.txt')
    write(repo, 'staged.txt', 'staged')
    repo.add('staged.txt')
    write(repo, 'staged_then_edited.txt', 'v1')
    repo.add('staged_then_edited.txt')
    write(repo, 'staged_then_edited.txt', 'v2')
    write(repo, 'staged_then_deleted.txt', 'v1')
    repo.add('staged_then_deleted.txt')
    os.remove(os.path.join(repo.path_to_repository, 'staged_then_deleted.txt'))
    write(repo, 'untracked.txt', 'new')

    report = repo.status()

    assert report.branches == ['feature', 'master']
    assert report.staged == ['staged.txt', 'staged_then_deleted.txt', 'staged_then_edited.txt']
    assert report.removed == ['removed.txt']
    assert report.modified == [
        'deleted.txt (deleted)',
        'edited.txt (modified)',
        'staged_then_deleted.txt (deleted)',
        'staged_then_edited.txt (modified)',
    ]
    assert report.untracked == ['untracked.txt']


def test_status_leaves_stage_unchanged(repo):
    write(repo, 'staged.txt', 'staged')
    repo.add('staged.txt')
    before = repo.load_stage()

    repo.status()

    after = repo.load_stage()
    assert after.added == before.added
    assert after.removed == before.removed


def test_format_status():
    report = StatusReport(active_branch='master', branches=['feature', 'master'],
                          staged=['a.txt'], modified=['b.txt (deleted)'], untracked=['c.txt'])

    assert format_status(report) == '\n'.join([
        '=== Branches ===', 'feature', '*master', '',
        '=== Staged Files ===', 'a.txt', '',
        '=== Removed Files ===', '',
        '=== Modifications Not Staged For Commit ===', 'b.txt (deleted)', '',
        '=== Untracked Files ===', 'c.txt', '',
    ])
