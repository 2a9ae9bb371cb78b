"""Custom evaluators for filter pipeline evals."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_evals.evaluators import Evaluator, EvaluatorContext


@dataclass
class OrderedIdsMatch(Evaluator):
    """Checks that the listed event ids equal the expected ids, in order."""

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        if ctx.expected_output is None:
            return True
        return ctx.output == ctx.expected_output


@dataclass
class NoPastEvents(Evaluator):
    """Checks that nothing dated before the reference day is listed."""

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        by_id = {e.id: e for e in ctx.inputs.events}
        today = ctx.inputs.now.date().isoformat()
        return all(by_id[eid].date[:10] >= today for eid in ctx.output)
