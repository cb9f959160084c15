# commit_history.py

import threading
from typing import Callable, Dict, Iterable, List, Optional

from commit_history_data import (
    BranchSegment,
    Commit,
    CommitConnection,
    CommitEntry,
    CommitSource,
    QueuedBranch,
)
from utils import short_sha

DiagnosticsSink = Callable[[str], None]

# Work stack operations
_PROCESS = "process"
_SPLICE = "splice"


def assign_lanes(entries: List[CommitEntry], diagnostics: Optional[DiagnosticsSink] = None) -> List[CommitConnection]:
    """
    Creates the connections to be drawn between commits.

    Walks `entries` top to bottom keeping a list of open connections, lines
    whose parent row has not been reached yet. Each entry gets a snapshot of
    that list in `entry.connections`, in the order the lines should occupy
    horizontal slots. A line continues the color of the line that ended at
    its child; merge parents always start a new color.

    Returns the connections still open after the last entry. These lead to
    ancestors outside the processed range.
    """
    connections: List[CommitConnection] = []
    next_color_index = 0

    for entry in entries:
        commit_sha = entry.sha
        parent_shas = entry.commit.parent_shas

        incoming_index = next((i for i, c in enumerate(connections) if c.parent_sha == commit_sha), None)

        if parent_shas:
            if incoming_index is not None:
                color_index = connections[incoming_index].color_index
                insert_index = incoming_index + 1
            else:
                color_index = next_color_index
                next_color_index += 1
                insert_index = len(connections)
            connections.insert(insert_index, CommitConnection(parent_shas[0], commit_sha, color_index))

        # Merge parents get their own lines
        for parent_sha in parent_shas[1:]:
            connections.append(CommitConnection(parent_sha, commit_sha, next_color_index))
            next_color_index += 1

        entry.connections = list(connections)
        connections = [c for c in connections if c.parent_sha != commit_sha]

    if connections and diagnostics:
        diagnostics(
            "Unterminated parent lines: "
            + " ".join(f"{short_sha(c.child_sha)}>{short_sha(c.parent_sha)}" for c in connections)
        )
    return connections


class HistoryGraphBuilder:
    """
    Builds the ordered list of commits shown in the history view.

    `entries` is the render order, newest generally first. `index` maps each
    SHA in `entries` to its current position. Both only grow, through
    `process`, until `reset` clears them.
    """

    def __init__(self, source: CommitSource, diagnostics: Optional[DiagnosticsSink] = None):
        self.source = source
        self.diagnostics = diagnostics
        self.entries: List[CommitEntry] = []
        self.index: Dict[str, int] = {}
        self._lock = threading.RLock()

    def reset(self):
        with self._lock:
            self.index.clear()
            self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, sha: str) -> bool:
        return sha in self.index

    def entry_for(self, sha: str) -> Optional[CommitEntry]:
        position = self.index.get(sha)
        return self.entries[position] if position is not None else None

    def index_of(self, sha: str) -> Optional[int]:
        return self.index.get(sha)

    def snapshot(self) -> List[CommitEntry]:
        """A copy of the current entries, safe to read while processing goes on."""
        with self._lock:
            return list(self.entries)

    def _trace(self, message: str, *args):
        if self.diagnostics:
            self.diagnostics(message % args if args else message)

    def branch_entries(self, start_commit: Commit) -> BranchSegment:
        """
        Creates a list of commits for the branch starting at the given commit,
        and also a list of secondary parents that may start other branches. A
        branch segment ends when a commit has more than one parent, or its
        parent is already registered or can't be found.
        """
        commit = start_commit
        result = [CommitEntry(start_commit)]
        queue: List[QueuedBranch] = []

        while commit.parent_shas:
            first_parent_sha = commit.parent_shas[0]

            for parent_sha in commit.parent_shas[1:]:
                parent_commit = self.source.lookup(parent_sha)
                if parent_commit is not None:
                    queue.append(QueuedBranch(parent_commit, commit))
                else:
                    self._trace("missing parent %s of %s", short_sha(parent_sha), short_sha(commit.sha))

            if first_parent_sha in self.index:
                break
            parent_commit = self.source.lookup(first_parent_sha)
            if parent_commit is None:
                self._trace("history ends at %s", short_sha(commit.sha))
                break
            # The first parent of a merge starts the next segment
            if commit.is_merge:
                break

            result.append(CommitEntry(parent_commit))
            commit = parent_commit

        segment = BranchSegment(result, queue)
        if self.diagnostics:
            before = " ".join(short_sha(sha) for sha in self.entries[-1].commit.parent_shas) if self.entries else "-"
            queued = "".join(f" ({short_sha(q.commit.sha)} > {short_sha(q.after.sha)})" for q in queue)
            self._trace("%s < %s%s", segment, before, queued)
        return segment

    def _collect_segments(self, start_commit: Commit) -> List[BranchSegment]:
        results = []
        commit = start_commit
        while True:
            result = self.branch_entries(commit)
            results.append(result)
            next_sha = result.entries[-1].commit.parent_shas[0] if result.entries[-1].commit.parent_shas else None
            if next_sha is None or next_sha in self.index:
                break
            next_commit = self.source.lookup(next_sha)
            if next_commit is None:
                break
            commit = next_commit
        return results

    def process(
        self,
        start_commit: Commit,
        after_commit: Optional[Commit] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> bool:
        """
        Adds the commits reachable from `start_commit` to the list.

        Segments of a first-parent run are spliced oldest first, and each
        segment's queued branches are processed, most recently queued first,
        before the segment itself so that their commits are already placed
        when its position is chosen.

        `should_cancel` is checked between segments. Returns False if it
        stopped the work early; everything placed so far stays valid.
        """
        with self._lock:
            stack: list = [(_PROCESS, start_commit, after_commit)]
            while stack:
                if should_cancel is not None and should_cancel():
                    self._trace("cancelled with %d pending operations", len(stack))
                    return False

                operation, item, after = stack.pop()
                if operation == _SPLICE:
                    self.insert_branch_result(item, after)
                    continue

                if item.sha in self.index:
                    continue
                pending = []
                for result in reversed(self._collect_segments(item)):
                    for queued in reversed(result.queue):
                        pending.append((_PROCESS, queued.commit, queued.after))
                    pending.append((_SPLICE, result, after))
                stack.extend(reversed(pending))
            return True

    def process_heads(self, heads: Iterable[Commit], should_cancel: Optional[Callable[[], bool]] = None) -> bool:
        for head in heads:
            if not self.process(head, should_cancel=should_cancel):
                return False
        return True

    def insert_branch_result(self, result: BranchSegment, after_commit: Optional[Commit] = None):
        """Splices a segment into `entries` next to the commits it connects to."""
        if not result.entries:
            return

        with self._lock:
            after_index = self.index.get(after_commit.sha) if after_commit is not None else None
            last_parent_shas = result.entries[-1].commit.parent_shas
            parent_indices = [self.index[sha] for sha in last_parent_shas if sha in self.index]

            if parent_indices:
                insert_before_index = min(parent_indices)
                if after_index is not None and after_index < insert_before_index:
                    self._trace(" ** %s after %s", result, short_sha(after_commit.sha))
                    position = after_index + 1
                else:
                    self._trace(
                        " ** %s before %s", result, short_sha(self.entries[insert_before_index].sha)
                    )
                    position = insert_before_index
            elif result.queue and result.queue[-1].after.sha in self.index:
                self._trace(" ** %s at secondary %s", result, short_sha(result.queue[-1].after.sha))
                position = self.index[result.queue[-1].after.sha]
            elif after_index is not None:
                self._trace(" ** %s after %s", result, short_sha(after_commit.sha))
                position = after_index + 1
            else:
                self._trace(" ** appending %s", result)
                position = len(self.entries)

            self._insert_entries(position, result.entries)

    def _insert_entries(self, position: int, new_entries: List[CommitEntry]):
        self.entries[position:position] = new_entries
        # Everything from the insertion point on has moved
        for i in range(position, len(self.entries)):
            self.index[self.entries[i].sha] = i

    def connect_commits(self) -> List[CommitConnection]:
        """Assigns lane connections to every entry; returns the unterminated ones."""
        with self._lock:
            return assign_lanes(self.entries, self.diagnostics)
