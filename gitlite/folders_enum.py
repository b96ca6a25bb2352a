import os
from dataclasses import dataclass
from enum import Enum


class FoldersEnum(str, Enum):
    DATA_FOLDER_NAME = '.gitlite'

    OBJECTS = 'objects'
    COMMITS = 'commits'
    HEADS = 'refs/heads/'
    HEAD = 'HEAD'
    STAGE = 'stage'
    COMMIT_INDEX = 'commit_index'


@dataclass(frozen=True)
class RepositoryPaths:
    '''Every persisted location of a repository, derived from its working root'''
    working_root: str
    data_folder: str = FoldersEnum.DATA_FOLDER_NAME.value

    @property
    def data(self) -> str:
        return os.path.join(self.working_root, self.data_folder)

    @property
    def objects(self) -> str:
        return self._in_data(FoldersEnum.OBJECTS)

    @property
    def commits(self) -> str:
        return self._in_data(FoldersEnum.COMMITS)

    @property
    def heads(self) -> str:
        return self._in_data(FoldersEnum.HEADS)

    @property
    def head(self) -> str:
        return self._in_data(FoldersEnum.HEAD)

    @property
    def stage(self) -> str:
        return self._in_data(FoldersEnum.STAGE)

    @property
    def commit_index(self) -> str:
        return self._in_data(FoldersEnum.COMMIT_INDEX)

    def _in_data(self, folder: FoldersEnum) -> str:
        return os.path.join(self.data, folder.value)
