"""Activity queries and summary statistics."""

import math
from datetime import date, timedelta

from tracket.models import Activity
from tracket.time_utils import date_key, format_minutes, start_of_week

_MONTH_ABBR = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
               'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def _round_half_up(value, digits=0):
    """Round like the dashboard does: halves go up, not to even."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def _newest_first(query):
    return query.order_by(Activity.date.desc(), Activity.id.asc())


def list_activities():
    return _newest_first(Activity.query).all()


def list_activities_by_sport(sport):
    sport = str(sport or '').strip().lower()
    return _newest_first(
        Activity.query.filter(Activity.sport == sport)
    ).all()


def list_activities_by_date_range(start_date, end_date):
    """Activities whose day falls within ``[start_date, end_date]``."""
    start_key = date_key(start_date)
    end_key = date_key(end_date)
    return [
        activity for activity in list_activities()
        if start_key <= date_key(activity.date) <= end_key
    ]


def stats_overview(activities):
    total_activities = len(activities)
    total_minutes = sum(a.duration or 0 for a in activities)

    ratings = [a.session_rating for a in activities if a.session_rating and a.session_rating > 0]
    average_rating = _round_half_up(sum(ratings) / len(ratings), 1) if ratings else 0

    training = sum(1 for a in activities if a.activity_type == 'training')
    tournaments = sum(1 for a in activities if a.activity_type == 'tournament')
    if tournaments:
        ratio = _round_half_up(training / tournaments, 1)
    else:
        ratio = training

    sport_stats = {}
    for activity in activities:
        sport_stats[activity.sport] = sport_stats.get(activity.sport, 0) + 1

    return {
        'totalActivities': total_activities,
        'totalHours': _round_half_up(total_minutes / 60),
        'averageDuration': _round_half_up(total_minutes / total_activities) if total_activities else 0,
        'averageRating': average_rating,
        'trainingTournamentRatio': ratio,
        'sportStats': sport_stats,
    }


def weekly_stats(activities, weeks=12, today=None):
    """Per-week totals for the last ``weeks`` Monday-started weeks, oldest first."""
    today = today or date.today()
    current_monday = start_of_week(today)
    results = []
    for offset in range(weeks):
        week_start = current_monday - timedelta(weeks=offset)
        week_end = week_start + timedelta(days=6)
        start_key = week_start.isoformat()
        end_key = week_end.isoformat()

        in_week = [a for a in activities if start_key <= date_key(a.date) <= end_key]
        total_minutes = sum(a.duration or 0 for a in in_week)
        results.append({
            'weekStart': start_key,
            'weekEnd': end_key,
            'label': f'{_MONTH_ABBR[week_start.month - 1]} {week_start.day}',
            'sessions': len(in_week),
            'totalMinutes': total_minutes,
            'totalHours': _round_half_up(total_minutes / 60, 1),
            'totalTime': format_minutes(total_minutes),
        })
    results.reverse()
    return results
