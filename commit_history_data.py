# commit_history_data.py

from typing import Dict, Iterable, List, NamedTuple, Optional, Protocol

from utils import short_sha


class Commit:
    def __init__(
        self,
        sha: str,
        parent_shas: Iterable[str] = (),
        message: str = "",
        author_name: str = "",
        author_date: str = "",
    ):
        if not sha:
            raise ValueError("Commit SHA must not be empty")
        self.sha: str = sha
        self.parent_shas: tuple[str, ...] = tuple(parent_shas)
        self.message: str = message
        self.author_name: str = author_name
        self.author_date: str = author_date

    @property
    def is_merge(self) -> bool:
        return len(self.parent_shas) > 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return self.sha == other.sha

    def __hash__(self) -> int:
        return hash(self.sha)

    def __repr__(self) -> str:
        return f"Commit(sha='{short_sha(self.sha)}', parents={[short_sha(p) for p in self.parent_shas]})"


class CommitConnection(NamedTuple):
    """A connection line between two commits in the history list."""

    parent_sha: str
    child_sha: str
    color_index: int


class CommitEntry:
    """One row of the history list."""

    def __init__(self, commit: Commit):
        self.commit: Commit = commit
        # Filled in by the lane pass, the lines to draw on this row
        self.connections: List[CommitConnection] = []
        self.incoming: int = 0

    @property
    def sha(self) -> str:
        return self.commit.sha

    def __eq__(self, other) -> bool:
        if not isinstance(other, CommitEntry):
            return NotImplemented
        return self.commit.sha == other.commit.sha

    def __hash__(self) -> int:
        return hash(self.commit.sha)

    def __repr__(self) -> str:
        return f"CommitEntry('{short_sha(self.sha)}', connections={len(self.connections)})"


class QueuedBranch(NamedTuple):
    """A secondary parent waiting to be processed, anchored after `after`."""

    commit: Commit
    after: Commit


class BranchSegment:
    """The result of processing one segment of a branch."""

    def __init__(self, entries: Optional[List[CommitEntry]] = None, queue: Optional[List[QueuedBranch]] = None):
        # The commit entries collected for this segment, newest first
        self.entries: List[CommitEntry] = entries if entries is not None else []
        # Other branches queued for processing
        self.queue: List[QueuedBranch] = queue if queue is not None else []

    def __str__(self) -> str:
        if not self.entries:
            return "empty"
        return f"{short_sha(self.entries[0].sha)}..{short_sha(self.entries[-1].sha)}"

    def __repr__(self) -> str:
        return f"BranchSegment({self}, queued={len(self.queue)})"


class CommitSource(Protocol):
    def lookup(self, sha: str) -> Optional[Commit]:
        """Return the commit for `sha`, or None when it is unknown or unreadable."""
        ...


class MemoryCommitSource:
    """A commit source backed by a plain dict, for fixtures and preloaded logs."""

    def __init__(self, commits: Iterable[Commit] = ()):
        self.commits: Dict[str, Commit] = {}
        for commit in commits:
            self.add(commit)

    def add(self, commit: Commit) -> Commit:
        self.commits[commit.sha] = commit
        return commit

    def lookup(self, sha: str) -> Optional[Commit]:
        return self.commits.get(sha)

    def __contains__(self, sha: str) -> bool:
        return sha in self.commits

    def __len__(self) -> int:
        return len(self.commits)
