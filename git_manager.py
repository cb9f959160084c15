import logging
from typing import Dict, List, Optional

import git
import git.exc
from git import GitCommandError

from commit_history_data import Commit


class GitManager:
    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self.repo: Optional[git.Repo] = None
        # SHA -> Commit, misses are cached as None
        self._commit_cache: Dict[str, Optional[Commit]] = {}

    def initialize(self) -> bool:
        """初始化 Git 仓库"""
        try:
            self.repo = git.Repo(self.repo_path)
            self._commit_cache.clear()
            return True
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            return False

    def get_branches(self) -> List[str]:
        """获取所有分支"""
        if not self.repo:
            return []
        return [branch.name for branch in self.repo.branches]

    def get_default_branch(self) -> Optional[str]:
        """获取默认分支"""
        if not self.repo:
            return None
        try:
            return self.repo.active_branch.name
        except TypeError:
            # HEAD 处于分离状态
            return None

    def get_remote_branches(self) -> List[str]:
        """获取所有远程分支的完整名称（例如 'origin/main'）"""
        if not self.repo:
            return []
        remote_branches = []
        for remote in self.repo.remotes:
            for ref in remote.refs:
                remote_branches.append(ref.name)
        return remote_branches

    def get_tags(self) -> List[str]:
        """获取所有标签"""
        if not self.repo:
            return []
        return [tag.name for tag in self.repo.tags]

    def get_head_commits(self, include_remotes: bool = False, include_tags: bool = False) -> List[Commit]:
        """获取需要处理的分支头提交

        顺序：HEAD、本地分支、远程分支、标签；按 SHA 去重。
        """
        if not self.repo:
            return []

        shas: List[str] = []
        try:
            shas.append(self.repo.head.commit.hexsha)
        except ValueError:
            # 空仓库，还没有提交
            logging.debug("仓库 %s 没有 HEAD 提交", self.repo_path)

        refs = list(self.repo.heads)
        if include_remotes:
            for remote in self.repo.remotes:
                refs.extend(remote.refs)
        if include_tags:
            refs.extend(self.repo.tags)

        for ref in refs:
            try:
                shas.append(ref.commit.hexsha)
            except (ValueError, GitCommandError) as e:
                logging.warning("无法解析引用 %s: %s", ref.name, e)

        heads = []
        seen = set()
        for sha in shas:
            if sha in seen:
                continue
            seen.add(sha)
            commit = self.lookup(sha)
            if commit is not None:
                heads.append(commit)
        return heads

    def lookup(self, sha: str) -> Optional[Commit]:
        """按 SHA 查找提交，找不到时返回 None"""
        if sha in self._commit_cache:
            return self._commit_cache[sha]
        if not self.repo:
            return None

        try:
            git_commit = self.repo.commit(sha)
            commit = Commit(
                sha=git_commit.hexsha,
                parent_shas=[parent.hexsha for parent in git_commit.parents],
                message=git_commit.summary,
                author_name=git_commit.author.name or "",
                author_date=git_commit.committed_datetime.strftime("%Y-%m-%d %H:%M:%S"),
            )
        except (git.exc.BadName, git.exc.BadObject, ValueError, GitCommandError) as e:
            logging.debug("提交 %s 不可用：%s", sha, e)
            commit = None

        self._commit_cache[sha] = commit
        return commit
