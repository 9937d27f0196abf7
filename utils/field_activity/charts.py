# utils/field_activity/charts.py
"""
Altair Chart Builders for Field Activity

- Top overall salesmen bar chart (podium colored)
- Activity mix bar chart (tag occurrences)
"""

import logging
from typing import Sequence

import altair as alt
import pandas as pd

from .constants import ACTIVITY_COLORS, ACTIVITY_TYPES, CHART_HEIGHT, COLORS
from .models import SalesmanSummary

logger = logging.getLogger(__name__)


class ActivityCharts:
    """
    Chart builders for the field activity dashboard.

    All methods are static - can be called without instantiation.

    Usage:
        chart = ActivityCharts.build_top_salesmen_chart(analysis.top_ten)
        st.altair_chart(chart, use_container_width=True)
    """

    @staticmethod
    def build_top_salesmen_chart(
        top_ten: Sequence[SalesmanSummary],
        title: str = "🏆 Top Overall Salesmen"
    ) -> alt.Chart:
        """Horizontal bars of Sold counts, gold for the top three."""
        if not top_ten:
            return ActivityCharts._empty_chart("No sales recorded yet")

        df = pd.DataFrame([s.to_dict() for s in top_ten])
        df['rank'] = range(1, len(df) + 1)
        df['tier'] = ['Podium' if r <= 3 else 'Other' for r in df['rank']]

        color_scale = alt.Scale(
            domain=['Podium', 'Other'],
            range=[COLORS['podium'], COLORS['rank']]
        )

        bars = alt.Chart(df).mark_bar().encode(
            y=alt.Y('email:N', sort=list(df['email']), title=None),
            x=alt.X('overall_sales:Q', title='Sales', axis=alt.Axis(tickMinStep=1)),
            color=alt.Color('tier:N', scale=color_scale, legend=None),
            tooltip=[
                alt.Tooltip('rank:Q', title='Rank'),
                alt.Tooltip('email:N', title='Salesman'),
                alt.Tooltip('overall_sales:Q', title='Sales'),
                alt.Tooltip('special_sales:Q', title='Special Sales'),
            ]
        )

        labels = alt.Chart(df).mark_text(
            align='left', baseline='middle', dx=4, fontSize=11
        ).encode(
            y=alt.Y('email:N', sort=list(df['email'])),
            x=alt.X('overall_sales:Q'),
            text=alt.Text('overall_sales:Q'),
            color=alt.value(COLORS['text_dark'])
        )

        return alt.layer(bars, labels).properties(
            height=CHART_HEIGHT,
            title=title
        )

    @staticmethod
    def build_activity_mix_chart(
        counts_df: pd.DataFrame,
        title: str = "📋 Activity Mix"
    ) -> alt.Chart:
        """Bars of tag occurrences, in vocabulary order."""
        if counts_df.empty:
            return ActivityCharts._empty_chart("No activities logged")

        domain = [a for a in ACTIVITY_TYPES if a in set(counts_df['activity'])]
        domain += [a for a in counts_df['activity'] if a not in domain]
        color_scale = alt.Scale(
            domain=domain,
            range=[ACTIVITY_COLORS.get(a, COLORS['text_light']) for a in domain]
        )

        return alt.Chart(counts_df).mark_bar().encode(
            x=alt.X('activity:N', sort=domain, title=None),
            y=alt.Y('count:Q', title='Occurrences'),
            color=alt.Color('activity:N', scale=color_scale, legend=None),
            tooltip=[
                alt.Tooltip('activity:N', title='Activity'),
                alt.Tooltip('count:Q', title='Occurrences'),
            ]
        ).properties(
            height=CHART_HEIGHT,
            title=title
        )

    @staticmethod
    def _empty_chart(message: str) -> alt.Chart:
        """Placeholder chart with a centered message."""
        return alt.Chart(pd.DataFrame({'text': [message]})).mark_text(
            size=14, color=COLORS['text_light']
        ).encode(
            text='text:N'
        ).properties(height=120)
