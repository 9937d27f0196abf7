"""Tests for the special sales leader and top salesmen rankings."""

from utils.field_activity.metrics import ActivityMetrics, aggregate, summaries_frame
from utils.field_activity.models import SalesmanSummary


def emails(summaries):
    return [s.email for s in summaries]


def test_empty_input_returns_placeholder():
    analysis = aggregate([])

    assert analysis.leader.email == 'N/A'
    assert analysis.leader.special_sales == 0
    assert analysis.leader.overall_sales == 0
    assert analysis.top_ten == []


def test_same_email_different_user_ids_grouped(make_log):
    logs = [
        make_log('a@x.com', ['Sold'], user_id='u1'),
        make_log('a@x.com', ['Sold'], user_id='u2'),
    ]

    summaries = ActivityMetrics(logs).build_summaries()

    assert len(summaries) == 1
    assert summaries[0].overall_sales == 2
    # first log seen supplies the user id
    assert summaries[0].user_id == 'u1'


def test_special_tie_broken_by_overall_sales(make_log):
    logs = []
    # A: 2 special, 5 overall
    logs += [make_log('a@x.com', ['Sold', 'Mosquito Sale'])] * 2
    logs += [make_log('a@x.com', ['Sold'])] * 3
    # B: 2 special, 7 overall
    logs += [make_log('b@x.com', ['Sold', 'Tree and Shrub Sale'])] * 2
    logs += [make_log('b@x.com', ['Sold'])] * 5

    leader = aggregate(logs).leader

    assert leader.email == 'b@x.com'
    assert (leader.special_sales, leader.overall_sales) == (2, 7)


def test_full_tie_keeps_earliest():
    summaries = [
        SalesmanSummary('first@x.com', overall_sales=3, special_sales=1),
        SalesmanSummary('second@x.com', overall_sales=3, special_sales=1),
    ]
    assert ActivityMetrics.select_leader(summaries).email == 'first@x.com'


def test_zero_overall_sales_excluded_from_top_ten(make_log):
    logs = [
        make_log('special@x.com', ['Mosquito Sale', 'Mosquito Sale']),
        make_log('seller@x.com', ['Sold']),
    ]

    analysis = aggregate(logs)

    assert emails(analysis.top_ten) == ['seller@x.com']
    # still eligible to lead on special sales
    assert analysis.leader.email == 'special@x.com'
    assert analysis.leader.special_sales == 2


def test_special_tags_count_every_occurrence(make_log):
    logs = [make_log('a@x.com', ['Mosquito Sale', 'Tree and Shrub Sale', 'Mosquito Sale'])]
    assert ActivityMetrics(logs).build_summaries()[0].special_sales == 3


def test_sold_counts_once_per_log(make_log):
    logs = [make_log('a@x.com', ['Sold', 'Sold', 'Mosquito Sale'])]
    assert ActivityMetrics(logs).build_summaries()[0].overall_sales == 1


def test_two_salesmen_scenario(make_log):
    logs = [
        make_log('a@x.com', ['Sold', 'Mosquito Sale']),
        make_log('a@x.com', ['Sold']),
        make_log('b@x.com', ['Sold', 'Mosquito Sale']),
        make_log('b@x.com', ['Sold', 'Tree and Shrub Sale']),
    ]

    analysis = aggregate(logs)

    assert analysis.leader.email == 'b@x.com'
    assert (analysis.leader.special_sales, analysis.leader.overall_sales) == (2, 2)
    assert [(s.email, s.overall_sales) for s in analysis.top_ten] == [
        ('a@x.com', 2),
        ('b@x.com', 2),
    ]


def test_top_ten_limit_and_order(make_log):
    logs = []
    for i in range(12):
        logs += [make_log(f'rep{i:02d}@x.com', ['Sold'])] * (i + 1)

    top_ten = aggregate(logs).top_ten

    assert len(top_ten) == 10
    assert top_ten[0].email == 'rep11@x.com'
    assert [s.overall_sales for s in top_ten] == list(range(12, 2, -1))


def test_logs_without_tags_contribute_nothing(make_log):
    analysis = aggregate([make_log('idle@x.com')])

    assert analysis.top_ten == []
    assert analysis.leader.email == 'idle@x.com'
    assert analysis.leader.special_sales == 0


def test_summaries_frame_sorted_by_overall(make_log):
    logs = [
        make_log('a@x.com', ['Sold']),
        make_log('b@x.com', ['Sold']),
        make_log('b@x.com', ['Sold']),
    ]

    df = summaries_frame(logs)

    assert list(df['email']) == ['b@x.com', 'a@x.com']
    assert list(df.columns) == ['email', 'user_id', 'overall_sales', 'special_sales']


def test_activity_counts(make_log):
    logs = [
        make_log('a@x.com', ['Sold', 'Not Home']),
        make_log('b@x.com', ['Sold']),
    ]

    counts = ActivityMetrics(logs).activity_counts()

    assert dict(zip(counts['activity'], counts['count'])) == {'Sold': 2, 'Not Home': 1}
    assert ActivityMetrics([]).activity_counts().empty
