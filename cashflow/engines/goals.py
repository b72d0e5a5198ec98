"""
Goal Engine

Progress and deadline flags for savings goals. Each flag is computed on its
own; a goal can be completed and overdue at the same time, and the UI
decides which one to show (completed wins by convention).
"""

from datetime import date
from typing import Iterable, Optional

from cashflow.config import get_settings
from cashflow.models.finance import FinancialGoal
from cashflow.models.reports import GoalOverview, GoalStatus


def goal_progress(goal: FinancialGoal) -> float:
    """Percent of target saved. Not capped at 100."""
    return goal.current_amount / goal.target_amount * 100


def goal_status(
    goal: FinancialGoal,
    today: Optional[date] = None,
    near_deadline_days: Optional[int] = None,
) -> GoalStatus:
    if today is None:
        today = date.today()
    if near_deadline_days is None:
        near_deadline_days = get_settings().app.goal_near_deadline_days

    progress = goal_progress(goal)
    days_remaining = (goal.deadline - today).days

    return GoalStatus(
        goal=goal,
        progress=progress,
        days_left=abs(days_remaining),
        is_overdue=days_remaining < 0,
        is_near_deadline=0 <= days_remaining <= near_deadline_days,
        is_completed=progress >= 100,
    )


def goal_overview(
    goals: Iterable[FinancialGoal],
    today: Optional[date] = None,
    near_deadline_days: Optional[int] = None,
) -> GoalOverview:
    goals = list(goals)
    total_target = sum(g.target_amount for g in goals)
    total_current = sum(g.current_amount for g in goals)
    return GoalOverview(
        statuses=[goal_status(g, today, near_deadline_days) for g in goals],
        total_target=total_target,
        total_current=total_current,
        overall_progress=(total_current / total_target * 100) if total_target > 0 else 0.0,
    )
