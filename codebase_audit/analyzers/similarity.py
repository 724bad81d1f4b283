"""
Near-duplicate detection by token-set similarity.

Every unordered pair of files, and every cross-file pair of code blocks, is
compared with the Jaccard coefficient of their token sets. The scan is
quadratic in the number of items; with pruning enabled, pairs whose set
sizes alone bound the coefficient below the threshold are skipped, which
never changes the reported pairs.

Row ranges of the pair matrix are spread across a thread pool. Each worker
collects its own hits; they are merged and re-ordered by (i, j) afterwards,
so the output does not depend on scheduling.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from codebase_audit.analyzers.tokenizer import tokenize
from codebase_audit.models import DuplicateGroup, DuplicateKind, DuplicateMember

if TYPE_CHECKING:
    from typing import AbstractSet, Any, Callable, Sequence

    from codebase_audit.models import AnalysisSession, FileRecord

logger = logging.getLogger(__name__)


def jaccard(a: AbstractSet[Any], b: AbstractSet[Any]) -> float:
    """
    Jaccard similarity of two sets.

    Two empty sets are identical (1.0); exactly one empty set shares nothing
    with the other (0.0).
    """
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    return intersection / (len(a) + len(b) - intersection)


@dataclass(frozen=True)
class _Candidate:
    """One comparable item: a whole file or one of its blocks."""

    file_index: int
    token_set: frozenset[str]
    group_key: str
    member: DuplicateMember
    lines: int


class SimilarityDetector:
    """Find file and block pairs whose token sets are similar enough."""

    def __init__(
        self,
        threshold: float,
        min_tokens: int = 0,
        prune: bool = True,
        workers: int | None = None,
        log: logging.Logger | None = None,
    ):
        """
        Initialize the detector.

        Args:
            threshold: Minimum Jaccard similarity for a reported pair.
            min_tokens: Items with fewer distinct tokens than this are not compared.
            prune: Skip pairs whose set sizes rule out the threshold.
            workers: Thread pool size (default: executor default).
            log: Logger to use instead of the module logger.
        """
        self.threshold = threshold
        self.min_tokens = min_tokens
        self.prune = prune
        self.workers = workers
        self.log = log or logger

    def find_similar_files(self, records: Sequence[FileRecord], session: AnalysisSession) -> list[DuplicateGroup]:
        """
        Compare every pair of files that are not exact duplicates.

        Args:
            records: Analyzed files in discovery order.
            session: Current run, consulted for cancellation.

        Returns:
            ``similar-file`` groups ordered by pair position.
        """
        candidates = [
            _Candidate(
                file_index=index,
                token_set=record.token_set,
                group_key=record.content_hash,
                member=DuplicateMember.for_file(record),
                lines=record.lines,
            )
            for index, record in enumerate(records)
            if len(record.token_set) >= self.min_tokens
        ]

        def excluded(a: _Candidate, b: _Candidate) -> bool:
            return a.group_key == b.group_key

        return self._scan(candidates, excluded, DuplicateKind.SIMILAR_FILE, session)

    def find_similar_blocks(self, records: Sequence[FileRecord], session: AnalysisSession) -> list[DuplicateGroup]:
        """
        Compare every pair of blocks from different files.

        Pairs with identical block hashes are left to the exact detector.

        Args:
            records: Analyzed files in discovery order.
            session: Current run, consulted for cancellation.

        Returns:
            ``similar-block`` groups ordered by pair position.
        """
        candidates = []
        for index, record in enumerate(records):
            for block in record.blocks:
                token_set = frozenset(tokenize(block.content))
                if len(token_set) < self.min_tokens:
                    continue
                candidates.append(_Candidate(
                    file_index=index,
                    token_set=token_set,
                    group_key=block.hash,
                    member=DuplicateMember.for_block(record, block),
                    lines=block.line_count,
                ))

        def excluded(a: _Candidate, b: _Candidate) -> bool:
            return a.file_index == b.file_index or a.group_key == b.group_key

        return self._scan(candidates, excluded, DuplicateKind.SIMILAR_BLOCK, session)

    def _scan(
        self,
        candidates: list[_Candidate],
        excluded: Callable[[_Candidate, _Candidate], bool],
        kind: DuplicateKind,
        session: AnalysisSession,
    ) -> list[DuplicateGroup]:
        """Run the pair scan, partitioned by row across the pool."""
        if session.should_stop():
            session.truncated = True
            return []

        count = len(candidates)
        if count < 2:
            return []

        partitions = max(1, min(self.workers or 1, count - 1))
        self.log.debug("Comparing %d %s candidates in %d partition(s)", count, kind.value, partitions)

        # Rows are dealt round-robin since early rows hold the most pairs
        rows = [range(offset, count - 1, partitions) for offset in range(partitions)]
        hits: list[tuple[int, int, float]] = []
        stopped = False

        if partitions == 1:
            part_hits, stopped = self._scan_rows(rows[0], candidates, excluded, session)
            hits.extend(part_hits)
        else:
            with ThreadPoolExecutor(max_workers=partitions) as executor:
                futures = [
                    executor.submit(self._scan_rows, part, candidates, excluded, session)
                    for part in rows
                ]
                for future in futures:
                    part_hits, part_stopped = future.result()
                    hits.extend(part_hits)
                    stopped = stopped or part_stopped

        if stopped:
            self.log.warning("%s scan stopped early; results are partial", kind.value)
            session.truncated = True

        hits.sort(key=lambda hit: (hit[0], hit[1]))
        return [
            DuplicateGroup(
                kind=kind,
                members=(candidates[i].member, candidates[j].member),
                similarity=similarity,
                duplicate_lines=min(candidates[i].lines, candidates[j].lines),
            )
            for i, j, similarity in hits
        ]

    def _scan_rows(
        self,
        rows: range,
        candidates: list[_Candidate],
        excluded: Callable[[_Candidate, _Candidate], bool],
        session: AnalysisSession,
    ) -> tuple[list[tuple[int, int, float]], bool]:
        """
        Compare each row item against all later items.

        Returns:
            Tuple of (hits as (i, j, similarity), whether the scan was stopped).
        """
        hits = []
        for i in rows:
            if session.should_stop():
                return hits, True
            first = candidates[i]
            first_size = len(first.token_set)
            for j in range(i + 1, len(candidates)):
                second = candidates[j]
                if excluded(first, second):
                    continue
                if self.prune and self._cannot_reach(first_size, len(second.token_set)):
                    continue
                similarity = jaccard(first.token_set, second.token_set)
                if similarity >= self.threshold:
                    hits.append((i, j, similarity))
        return hits, False

    def _cannot_reach(self, size_a: int, size_b: int) -> bool:
        """Jaccard never exceeds min(|A|, |B|) / max(|A|, |B|)."""
        largest = max(size_a, size_b)
        if largest == 0:
            return False
        return min(size_a, size_b) / largest < self.threshold
