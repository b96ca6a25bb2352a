import os

import pytest

from gitlite.errors import BranchNotFoundError, GitliteError
from gitlite.references import Branch, Head, References


@pytest.fixture()
def refs(tmpdir):
    refs = References(os.path.join(tmpdir, 'refs', 'heads'), os.path.join(tmpdir, 'HEAD'))
    refs.initialize('0' * 40)

    return refs


def test_initialize_creates_master_as_active(refs, tmpdir):
    assert refs.branch_names() == ['master']
    assert refs.active_branch().commit_id == '0' * 40
    with open(os.path.join(tmpdir, 'HEAD'), 'rb') as f:
        assert f.read() == b'ref: refs/heads/master'


def test_branch_file_holds_commit_id(refs, tmpdir):
    refs.create_branch('feature', '1' * 40)

    with open(os.path.join(tmpdir, 'refs', 'heads', 'feature'), 'rb') as f:
        assert f.read() == ('1' * 40).encode()


def test_create_existing_branch_throws(refs):
    with pytest.raises(GitliteError, match='A branch with that name already exists.'):
        refs.create_branch('master', '1' * 40)


def test_delete_branch(refs):
    refs.create_branch('feature', '1' * 40)
    refs.delete_branch('feature')

    assert not refs.exists('feature')
    assert refs.branch_names() == ['master']


def test_delete_non_existing_branch_throws(refs):
    with pytest.raises(BranchNotFoundError, match='A branch with that name does not exist.'):
        refs.delete_branch('do_not_exist')


def test_delete_active_branch_throws(refs):
    with pytest.raises(GitliteError, match='Cannot remove the current branch.'):
        refs.delete_branch('master')


def test_switch_active(refs):
    refs.create_branch('feature', '1' * 40)
    refs.switch_active('feature')

    assert refs.head().branch_name == 'feature'
    assert refs.active_branch().commit_id == '1' * 40


def test_switch_to_missing_branch_throws(refs):
    with pytest.raises(BranchNotFoundError):
        refs.switch_active('nope')


def test_set_branch_moves_pointer(refs):
    refs.set_branch('master', '2' * 40)

    assert refs.get_branch('master').commit_id == '2' * 40


def test_head_pointer_round_trip():
    head = Head('feature')

    assert Head.from_pointer(head.get_pointer()).branch_name == 'feature'


def test_branch_pointer():
    assert Branch('master', 'abc').get_pointer() == b'abc'


@pytest.mark.parametrize('name', ['', '.', '..', 'feature/x', '../escape', '.hidden'])
def test_create_branch_with_invalid_name_throws(refs, name):
    with pytest.raises(GitliteError, match='Invalid branch name'):
        refs.create_branch(name, '1' * 40)

    assert refs.branch_names() == ['master']


def test_exists_is_false_for_nested_names(refs):
    assert not refs.exists('feature/x')
    with pytest.raises(BranchNotFoundError):
        refs.delete_branch('feature/x')
