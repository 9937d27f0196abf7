# utils/field_activity/metrics.py
"""
Sales Leaderboard Calculations for Field Activity

Turns the flat activity log stream into:
- Per-salesperson summaries (grouped by user_email)
- Special sales leader (Mosquito / Tree and Shrub tag occurrences)
- Top overall salesmen (logs tagged Sold)

Everything here is a pure function of the log snapshot. Summaries are
rebuilt from scratch on every call.
"""

import logging
from typing import Dict, List, Sequence

import pandas as pd

from .constants import (
    NO_LEADER_EMAIL,
    SOLD,
    SPECIAL_SALES_ACTIVITIES,
    TOP_SALESMEN_LIMIT,
)
from .models import ActivityLog, SalesAnalysis, SalesmanSummary

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ['email', 'user_id', 'overall_sales', 'special_sales']


class ActivityMetrics:
    """
    Leaderboard calculations over one log snapshot.

    Usage:
        metrics = ActivityMetrics(logs)

        analysis = metrics.analyze()
        analysis.leader.email
        analysis.top_ten

        summary_df = metrics.summaries_frame()
    """

    def __init__(self, logs: Sequence[ActivityLog]):
        self.logs = list(logs)

    # =========================================================================
    # GROUPING
    # =========================================================================

    def build_summaries(self) -> List[SalesmanSummary]:
        """
        Group logs by user_email in first-seen order.

        The user_id of a summary is taken from the first log seen for that
        email. Two user ids sharing an email end up in one summary.
        """
        groups: Dict[str, dict] = {}

        for log in self.logs:
            group = groups.get(log.user_email)
            if group is None:
                group = {'user_id': log.user_id, 'overall_sales': 0, 'special_sales': 0}
                groups[log.user_email] = group

            if SOLD in log.activity_types:
                group['overall_sales'] += 1

            group['special_sales'] += sum(
                1 for tag in log.activity_types if tag in SPECIAL_SALES_ACTIVITIES
            )

        return [
            SalesmanSummary(email=email, **totals)
            for email, totals in groups.items()
        ]

    # =========================================================================
    # RANKINGS
    # =========================================================================

    @staticmethod
    def select_leader(summaries: Sequence[SalesmanSummary]) -> SalesmanSummary:
        """
        Pick the special sales leader.

        Left-to-right reduction: a candidate wins on more special sales, or
        on equal special sales and more overall sales. Full ties keep the
        earlier summary. With no summaries the -1 seed is returned.
        """
        leader = SalesmanSummary(email=NO_LEADER_EMAIL, overall_sales=-1, special_sales=-1)

        for candidate in summaries:
            if candidate.special_sales > leader.special_sales:
                leader = candidate
            elif (candidate.special_sales == leader.special_sales
                  and candidate.overall_sales > leader.overall_sales):
                leader = candidate

        return leader

    @staticmethod
    def select_top_salesmen(
        summaries: Sequence[SalesmanSummary],
        limit: int = TOP_SALESMEN_LIMIT
    ) -> List[SalesmanSummary]:
        """Salesmen with at least one sale, most sales first, ties in input order."""
        sellers = [s for s in summaries if s.overall_sales > 0]
        # sorted() is stable, so equal totals keep first-seen order
        ranked = sorted(sellers, key=lambda s: s.overall_sales, reverse=True)
        return ranked[:limit]

    def analyze(self) -> SalesAnalysis:
        """Build the leader card and top ten list."""
        if not self.logs:
            return SalesAnalysis(leader=SalesmanSummary.placeholder(), top_ten=[])

        summaries = self.build_summaries()
        leader = self.select_leader(summaries)
        top_ten = self.select_top_salesmen(summaries)

        logger.info(
            f"Analyzed {len(self.logs)} logs: {len(summaries)} salespeople, "
            f"leader={leader.email} ({leader.special_sales} special)"
        )

        return SalesAnalysis(leader=leader, top_ten=top_ten)

    # =========================================================================
    # DATAFRAME VIEWS
    # =========================================================================

    def summaries_frame(self) -> pd.DataFrame:
        """Per-salesperson summary table, most overall sales first."""
        if not self.logs:
            return pd.DataFrame(columns=SUMMARY_COLUMNS)

        df = pd.DataFrame([s.to_dict() for s in self.build_summaries()], columns=SUMMARY_COLUMNS)
        return df.sort_values('overall_sales', ascending=False, kind='stable').reset_index(drop=True)

    def activity_counts(self) -> pd.DataFrame:
        """Tag occurrence counts across all logs (one row per tag seen)."""
        tags = [tag for log in self.logs for tag in log.activity_types]
        if not tags:
            return pd.DataFrame(columns=['activity', 'count'])

        counts = pd.Series(tags).value_counts(sort=False)
        return counts.rename_axis('activity').reset_index(name='count')


def aggregate(logs: Sequence[ActivityLog]) -> SalesAnalysis:
    """Leader and top ten for a log snapshot."""
    return ActivityMetrics(logs).analyze()


def summaries_frame(logs: Sequence[ActivityLog]) -> pd.DataFrame:
    return ActivityMetrics(logs).summaries_frame()
