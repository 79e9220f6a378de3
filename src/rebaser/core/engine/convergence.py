"""Repeat propagation passes until a pass changes nothing."""

import logging
from dataclasses import dataclass

from rebaser.core.config import DEFAULT_MAX_PASSES
from rebaser.core.context import RebaserContext
from rebaser.core.engine.graph import build_graph
from rebaser.core.engine.propagate import RebaseOutcome, propagate, rewritten_branches
from rebaser.core.engine.safety import filter_safe_change_requests
from rebaser.core.errors import ConvergenceLimitError
from rebaser.core.git.abc import RebaseStatus
from rebaser.core.github.types import ChangeRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvergenceReport:
    """Outcomes of every pass, in order. The last pass changed nothing."""

    passes: list[list[RebaseOutcome]]

    @property
    def pass_count(self) -> int:
        return len(self.passes)

    @property
    def published_branches(self) -> list[str]:
        """Heads published in any pass, in first-publish order."""
        seen: dict[str, None] = {}
        for outcomes in self.passes:
            for outcome in outcomes:
                if outcome.published:
                    seen.setdefault(outcome.change_request.head_branch, None)
        return list(seen)

    @property
    def failed_branches(self) -> list[str]:
        """Heads whose rebase failed in the final pass."""
        if not self.passes:
            return []
        return [
            outcome.change_request.head_branch
            for outcome in self.passes[-1]
            if outcome.status is RebaseStatus.FAILED
        ]


def changed_branches(outcomes: list[RebaseOutcome]) -> list[str]:
    return [outcome.change_request.head_branch for outcome in outcomes if outcome.changed]


def run_until_converged(
    ctx: RebaserContext,
    change_requests: list[ChangeRequest],
    root: str,
    *,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> ConvergenceReport:
    """Run propagation passes from root until one publishes nothing.

    Safety is re-evaluated at the start of every pass, so a branch reset to
    its remote in one pass can take part again in the next. Remotes are not
    re-fetched between passes.

    Raises:
        ConvergenceLimitError: If pass number max_passes still changed something
        UnsupportedRebaseOperationError: If a replay plan is not linear
    """
    passes: list[list[RebaseOutcome]] = []
    changed: list[str] = []
    for pass_number in range(1, max_passes + 1):
        safe = filter_safe_change_requests(ctx, change_requests)
        outcomes = propagate(ctx, build_graph(safe), root)
        passes.append(outcomes)

        changed = changed_branches(outcomes)
        logger.info(
            "Pass %d: %d of %d change requests safe, %d rebased, %d published",
            pass_number,
            len(safe),
            len(change_requests),
            len(rewritten_branches(outcomes)),
            sum(1 for outcome in outcomes if outcome.published),
        )
        if not changed:
            return ConvergenceReport(passes=passes)

    raise ConvergenceLimitError(max_passes, changed)
