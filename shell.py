import argparse
import cmd
import functools
import logging
import os
import shlex
import sys

from gitlite.errors import GitliteError
from gitlite.repository import Repository, format_commit
from gitlite.status import format_status

logger = logging.getLogger(__name__)


def requires_repository(method):
    @functools.wraps(method)
    def wrapper(self, arg):
        if self.repository is None:
            raise GitliteError('Not in an initialized Gitlite directory.')
        return method(self, arg)

    return wrapper


class GitliteShell(cmd.Cmd):
    intro = 'gitlite shell, type help or ? to list commands'
    prompt = None

    def __init__(self, working_directory: str = None, stdout=None):
        super(GitliteShell, self).__init__(stdout=stdout)
        self.repository: Repository = None
        self.working_directory = None
        self.failed = False

        self._commit_parser = None
        self._branch_parser = None
        self._log_parser = None
        self._initialize_argparsers()
        self.do_cd(working_directory or os.getcwd())

    def onecmd(self, line: str):
        try:
            return super(GitliteShell, self).onecmd(line)
        except GitliteError as error:
            self.failed = True
            logger.debug('command %r rejected: %s', line, error.message)
            self._print(error.message)

    def emptyline(self):
        pass

    def do_init(self, arg: str):
        '''Initialize repository'''
        repository = Repository(self.working_directory)
        repository.initialize_repository()
        self.repository = repository

        self._print(f'initialized repository at {self.working_directory}')

    @requires_repository
    def do_add(self, arg: str):
        '''Stage a file for the next commit
        add file'''
        self.repository.add(self._single_operand(arg))

    @requires_repository
    def do_rm(self, arg: str):
        '''Unstage a file, or stop tracking it and delete it from the working tree
        rm file'''
        self.repository.remove(self._single_operand(arg))

    @requires_repository
    def do_commit(self, arg: str):
        '''Create a new commit from the staged files
        commit -m message
        commit -i commit_id'''
        try:
            values = vars(self._commit_parser.parse_args(shlex.split(arg)))
        except SystemExit:
            self.failed = True
            return

        if values['i']:
            self._print(format_commit(self.repository.graph.resolve(values['i'])))
            return
        commit_message = ' '.join(values['m'] or values['message'])
        self.repository.make_commit(commit_message)

    @requires_repository
    def do_status(self, arg: str):
        '''Show branches, staged, removed, modified and untracked files'''
        self._print(format_status(self.repository.status()))

    @requires_repository
    def do_checkout(self, arg: str):
        '''Restore files or switch branches
        checkout -- file
        checkout commit_id -- file
        checkout branch'''
        args = shlex.split(arg)
        if len(args) == 2 and args[0] == '--':
            self.repository.checkout_file(args[1])
        elif len(args) == 3 and args[1] == '--':
            self.repository.checkout_file_from_commit(args[0], args[2])
        elif len(args) == 1:
            self.repository.checkout_branch(args[0])
        else:
            raise GitliteError('Incorrect operands.')

    @requires_repository
    def do_reset(self, arg: str):
        '''Move the current branch and the working tree to a commit
        reset commit_id'''
        self.repository.reset(self._single_operand(arg))

    @requires_repository
    def do_branch(self, arg: str):
        '''Create/Delete/List branch'''
        try:
            values = vars(self._branch_parser.parse_args(shlex.split(arg)))
        except SystemExit:
            self.failed = True
            return

        if values['c']:
            self.repository.create_branch(values['c'])
        elif values['d']:
            self.repository.delete_branch(values['d'])
        else:
            active = self.repository.get_branch_from_head().name
            for branch_name in self.repository.get_branches_names():
                self._print(f'*{branch_name}' if branch_name == active else branch_name)

    @requires_repository
    def do_merge(self, arg: str):
        '''Merge a branch into the current branch
        merge branch'''
        result = self.repository.merge(self._single_operand(arg))
        if result.fast_forward:
            self._print('Current branch fast-forwarded.')
        elif result.conflict:
            self._print('Encountered a merge conflict.')

    @requires_repository
    def do_log(self, arg: str):
        '''Show commits from the current one back to the first
        log [-g|--global]'''
        try:
            values = vars(self._log_parser.parse_args(shlex.split(arg)))
        except SystemExit:
            self.failed = True
            return

        commits = self.repository.global_log() if values['global'] else self.repository.log()
        for commit in commits:
            self._print(format_commit(commit))

    @requires_repository
    def do_find(self, arg: str):
        '''Print ids of all commits with the given message
        find message'''
        for commit_id in self.repository.find(' '.join(shlex.split(arg))):
            self._print(commit_id)

    def do_ls(self, arg: str):
        '''Show all files in the working directory'''
        for item in sorted(os.listdir(self.working_directory)):
            self._print(item)

    def do_cd(self, arg: str):
        '''Change working directory'''
        directory = os.path.abspath(os.path.join(self.working_directory or os.getcwd(), arg))
        if not os.path.isdir(directory):
            raise GitliteError(f'can not find directory: {directory}')

        self.working_directory = directory
        GitliteShell.prompt = f'{self.working_directory}$ '
        if Repository.is_repository_exists(directory):
            self.repository = Repository(directory)
        else:
            self.repository = None

    def do_exit(self, arg: str):
        '''Leave the shell'''
        return True

    do_EOF = do_exit

    def _initialize_argparsers(self):
        self._commit_parser = argparse.ArgumentParser(prog='commit')
        self._commit_parser.add_argument('message', nargs='*', help='commit message')
        self._commit_parser.add_argument('-m', nargs='*', help='commit message')
        self._commit_parser.add_argument('-i', help='get commit info')

        self._branch_parser = argparse.ArgumentParser(prog='branch')
        group = self._branch_parser.add_mutually_exclusive_group()
        group.add_argument('-c', type=str, help='create')
        group.add_argument('-d', type=str, help='delete')
        group.add_argument('-l', action='store_true', help='list')

        self._log_parser = argparse.ArgumentParser(prog='log')
        self._log_parser.add_argument('-g', '--global', action='store_true', help='every commit ever made')

    @staticmethod
    def _single_operand(arg: str) -> str:
        args = shlex.split(arg)
        if len(args) != 1:
            raise GitliteError('Incorrect operands.')

        return args[0]

    def _print(self, text: str):
        self.stdout.write(text + '\n')


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog='gitlite', description='local version control')
    parser.add_argument('-C', dest='directory', default=os.getcwd(), help='working root')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    parser.add_argument('command', nargs=argparse.REMAINDER, help='run one command and exit')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        shell = GitliteShell(args.directory)
    except GitliteError as error:
        print(error.message)
        return 1
    if not args.command:
        shell.cmdloop()
        return 0

    shell.onecmd(shlex.join(args.command))

    return 1 if shell.failed else 0


if __name__ == '__main__':
    sys.exit(main())
