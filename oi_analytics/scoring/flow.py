from __future__ import annotations

from typing import List, Tuple

from .base import ScoreContext


def net_oi_changes(context: ScoreContext) -> Tuple[float, float]:
    strikes = context.snapshot.strikes
    return (
        sum(row.call_oi_change for row in strikes),
        sum(row.put_oi_change for row in strikes),
    )


class OIFlowScorer:
    key = "flow"
    default_weight = 1.0

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        net_call, net_put = net_oi_changes(context)
        delta = float(context.section(self.key).get("delta", 15.0))

        if net_call > net_put and net_call > 0:
            return (
                delta,
                f"Net call OI {net_call:+,.0f} > net put OI {net_put:+,.0f} -> money flowing into calls",
                [f"Call OI is building faster than put OI (+{net_call - net_put:,.0f} contracts)"],
            )
        if net_put > net_call and net_put > 0:
            return (
                -delta,
                f"Net put OI {net_put:+,.0f} > net call OI {net_call:+,.0f} -> money flowing into puts",
                [f"Put OI is building faster than call OI (+{net_put - net_call:,.0f} contracts)"],
            )
        return 0.0, "OI flow balanced -> neutral", []


__all__ = ["OIFlowScorer", "net_oi_changes"]
