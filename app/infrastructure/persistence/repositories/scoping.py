"""Translate a VisibilityScope into a SQL WHERE clause."""

from typing import Any

from sqlalchemy import ColumnElement, and_, false, or_

from app.application.dtos.scope import VisibilityScope


def scope_clause(model: Any, scope: VisibilityScope) -> ColumnElement[bool]:
    """WHERE clause selecting the rows of model visible under scope.

    model must carry the ScopeMixin columns, plus assignee_user_id, status or
    is_active when the scope restricts on them.
    """
    if scope.matches_nothing:
        return false()
    if scope.business_id is not None:
        clauses: list[ColumnElement[bool]] = [model.business_id == scope.business_id]
    else:
        clauses = [model.user_email == scope.user_email]
    if scope.assignee_user_id is not None:
        clauses.append(
            or_(
                model.assignee_user_id == scope.assignee_user_id,
                model.assignee_user_id.is_(None),
            )
        )
    if scope.statuses is not None:
        clauses.append(model.status.in_(sorted(s.value for s in scope.statuses)))
    if scope.active_only:
        clauses.append(model.is_active.is_(True))
    return and_(*clauses)
