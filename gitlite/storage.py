import abc
import logging
import os
import pickle

from gitlite.errors import ObjectNotFoundError
from gitlite.objects import Blob

logger = logging.getLogger(__name__)


class KVStorage(metaclass=abc.ABCMeta):
    @staticmethod
    @abc.abstractmethod
    def store(key, value, destination):
        pass

    @staticmethod
    @abc.abstractmethod
    def read(key, source):
        pass


class FolderStorage(KVStorage):
    @staticmethod
    def store(key: str, value: bytes, destination: str):
        os.makedirs(destination, exist_ok=True)
        with open(os.path.join(destination, key), 'wb') as f:
            f.write(value)

    @staticmethod
    def read(key: str, source: str) -> bytes:
        return FolderStorage.get_file_content(os.path.join(source, key))

    @staticmethod
    def get_file_content(path: str) -> bytes:
        with open(path, 'rb') as f:
            return f.read()


class ObjectStore(FolderStorage):
    '''Content-addressed storage, objects fanned out by the first two hex digits'''
    def __init__(self, path: str):
        self.path = path

    def put(self, content: bytes) -> str:
        blob = Blob(content)
        object_id = blob.get_hash()
        self.put_with_id(object_id, blob.serialize())

        return object_id

    def put_with_id(self, object_id: str, content: bytes):
        if self.contains(object_id):
            return
        self.store(object_id[2:], content, self.get_object_directory(object_id))
        logger.debug('stored object %s (%d bytes)', object_id, len(content))

    def get(self, object_id: str) -> bytes:
        if not self.contains(object_id):
            raise ObjectNotFoundError(object_id)

        return self.read(object_id[2:], self.get_object_directory(object_id))

    def contains(self, object_id: str) -> bool:
        if len(object_id) < 3:
            return False

        return os.path.isfile(os.path.join(self.get_object_directory(object_id), object_id[2:]))

    def get_object_directory(self, object_id: str) -> str:
        return os.path.join(self.path, object_id[:2])


def store_record(path: str, record):
    '''Persist a picklable record (staging area, commit index) in a single file'''
    FolderStorage.store(os.path.basename(path), pickle.dumps(record), os.path.dirname(path))


def read_record(path: str):
    return pickle.loads(FolderStorage.get_file_content(path))
