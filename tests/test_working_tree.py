import os

import pytest

from gitlite.errors import NotFoundError, UntrackedFileError
from gitlite.storage import ObjectStore
from gitlite.working_tree import WorkingTree, WorkingTreeSynchronizer


def write(tmpdir, name, content):
    with open(os.path.join(tmpdir, name), 'wb') as f:
        f.write(content)


def read(tmpdir, name):
    with open(os.path.join(tmpdir, name), 'rb') as f:
        return f.read()


def directory_state(tmpdir):
    return {name: read(tmpdir, name) for name in os.listdir(tmpdir)
            if os.path.isfile(os.path.join(tmpdir, name))}


@pytest.fixture()
def root(tmpdir):
    path = os.path.join(tmpdir, 'work')
    os.mkdir(path)
    os.mkdir(os.path.join(path, '.gitlite'))

    return path


@pytest.fixture()
def objects(tmpdir):
    return ObjectStore(os.path.join(tmpdir, 'objects'))


@pytest.fixture()
def working_tree(root):
    return WorkingTree(root, ignore={'.gitlite'})


@pytest.fixture()
def synchronizer(working_tree, objects):
    return WorkingTreeSynchronizer(working_tree, objects)


def test_list_files_skips_directories_and_ignored(root, working_tree):
    write(root, 'b.txt', b'b')
    write(root, 'a.txt', b'a')
    os.mkdir(os.path.join(root, 'folder'))

    assert working_tree.list_files() == ['a.txt', 'b.txt']


def test_read_missing_file_throws(working_tree):
    with pytest.raises(NotFoundError, match='File does not exist.'):
        working_tree.read('missing.txt')


def test_write_read_delete(working_tree):
    working_tree.write('a.txt', b'hello')

    assert working_tree.read('a.txt') == b'hello'
    working_tree.delete('a.txt')
    assert not working_tree.exists('a.txt')


def test_delete_missing_file_is_noop(working_tree):
    working_tree.delete('missing.txt')


def test_apply_deletes_writes_and_overwrites(root, objects, synchronizer):
    old_a, new_a, b = objects.put(b'old a'), objects.put(b'new a'), objects.put(b'b')
    gone = objects.put(b'gone')
    write(root, 'a.txt', b'old a')
    write(root, 'gone.txt', b'gone')

    synchronizer.apply({'a.txt': old_a, 'gone.txt': gone}, {'a.txt': new_a, 'b.txt': b})

    assert directory_state(root) == {'a.txt': b'new a', 'b.txt': b'b'}


def test_apply_leaves_untracked_files_not_in_target(root, objects, synchronizer):
    a = objects.put(b'a')
    write(root, 'notes.txt', b'mine')

    synchronizer.apply({}, {'a.txt': a})

    assert read(root, 'notes.txt') == b'mine'


def test_apply_with_untracked_file_in_the_way_mutates_nothing(root, objects, synchronizer):
    tracked = objects.put(b'tracked')
    theirs = objects.put(b'theirs')
    write(root, 'tracked.txt', b'tracked')
    write(root, 'untracked.txt', b'mine')
    before = directory_state(root)

    with pytest.raises(UntrackedFileError) as error:
        synchronizer.apply({'tracked.txt': tracked}, {'untracked.txt': theirs, 'z.txt': theirs})

    assert error.value.filename == 'untracked.txt'
    assert directory_state(root) == before


def test_find_untracked(root, synchronizer):
    write(root, 'a.txt', b'a')
    write(root, 'b.txt', b'b')

    assert synchronizer.find_untracked({'a.txt': '1' * 40}, {'a.txt': '1' * 40, 'b.txt': '2' * 40}) == ['b.txt']


def test_restore_file(root, objects, synchronizer):
    blob = objects.put(b'committed')
    write(root, 'a.txt', b'edited')

    synchronizer.restore_file({'a.txt': blob}, 'a.txt')

    assert read(root, 'a.txt') == b'committed'


def test_restore_file_missing_from_snapshot_throws(synchronizer):
    with pytest.raises(NotFoundError, match='File does not exist in that commit.'):
        synchronizer.restore_file({}, 'a.txt')
