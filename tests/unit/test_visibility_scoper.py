"""Unit tests for VisibilityScoper and the in-memory visibility predicate."""

from types import SimpleNamespace

import pytest

from app.application.services.visibility_scoper import (
    VisibilityScoper,
    scope_discriminator,
    shares_tenancy,
)
from app.domain.enums import KnowledgeStatus, ResourceClass, UserRole
from app.domain.exceptions import AuthorizationException
from tests.factories import make_identity, make_user

scoper = VisibilityScoper()


def _ticket(business_id=None, user_email=None, assignee_user_id=None):
    return SimpleNamespace(
        business_id=business_id, user_email=user_email, assignee_user_id=assignee_user_id
    )


class TestTicketScope:
    def test_business_admin_sees_whole_business(self) -> None:
        """Admins see every ticket of their business."""
        scope = scoper.scope_for(make_identity(business_id="biz-1"), ResourceClass.TICKETS)
        assert scope.business_id == "biz-1"
        assert scope.user_email is None
        assert scope.assignee_user_id is None

    def test_manager_is_not_restricted_by_assignee(self) -> None:
        """Managers are not limited to their own tickets."""
        identity = make_identity(role=UserRole.MANAGER, business_id="biz-1")
        assert scoper.scope_for(identity, ResourceClass.TICKETS).assignee_user_id is None

    def test_agent_restricted_to_own_or_unassigned(self) -> None:
        """Agents see only tickets assigned to them or unassigned."""
        identity = make_identity(user_id="agent-1", role=UserRole.AGENT, business_id="biz-1")
        scope = scoper.scope_for(identity, ResourceClass.TICKETS)
        assert scope.assignee_user_id == "agent-1"
        assert VisibilityScoper.is_visible(scope, _ticket("biz-1", assignee_user_id="agent-1"))
        assert VisibilityScoper.is_visible(scope, _ticket("biz-1"))
        assert not VisibilityScoper.is_visible(scope, _ticket("biz-1", assignee_user_id="agent-2"))

    def test_personal_user_scoped_by_email(self) -> None:
        """Personal users are scoped by their email."""
        scope = scoper.scope_for(make_identity(), ResourceClass.TICKETS)
        assert scope.business_id is None
        assert scope.user_email == "alice@example.com"
        assert VisibilityScoper.is_visible(scope, _ticket(user_email="alice@example.com"))
        assert not VisibilityScoper.is_visible(scope, _ticket(user_email="bob@example.com"))

    def test_other_business_not_visible(self) -> None:
        """Rows of another business are hidden."""
        scope = scoper.scope_for(make_identity(business_id="biz-1"), ResourceClass.TICKETS)
        assert not VisibilityScoper.is_visible(scope, _ticket("biz-2"))

    def test_business_scope_ignores_personal_rows_of_same_email(self) -> None:
        """Business scope hides personal rows of the same email."""
        scope = scoper.scope_for(make_identity(business_id="biz-1"), ResourceClass.TICKETS)
        assert not VisibilityScoper.is_visible(scope, _ticket(user_email="alice@example.com"))

    def test_empty_identity_matches_nothing(self) -> None:
        """An identity with neither business nor email sees nothing."""
        scope = scoper.scope_for(make_identity(email=""), ResourceClass.TICKETS)
        assert scope.matches_nothing
        assert not VisibilityScoper.is_visible(scope, _ticket(user_email=""))


class TestKnowledgeScope:
    def test_published_only_by_default(self) -> None:
        """Knowledge lists only published items by default."""
        identity = make_identity(role=UserRole.AGENT, business_id="biz-1")
        scope = scoper.scope_for(identity, ResourceClass.KNOWLEDGE)
        assert scope.statuses == frozenset({KnowledgeStatus.PUBLISHED})
        pending = SimpleNamespace(business_id="biz-1", status=KnowledgeStatus.PENDING)
        assert not VisibilityScoper.is_visible(scope, pending)

    def test_include_all_for_manager(self) -> None:
        """Managers may include drafts."""
        identity = make_identity(role=UserRole.MANAGER, business_id="biz-1")
        scope = scoper.scope_for(identity, ResourceClass.KNOWLEDGE, include_all=True)
        assert scope.statuses is None

    def test_include_all_rejected_for_agent(self) -> None:
        """Agents may not include drafts."""
        identity = make_identity(role=UserRole.AGENT, business_id="biz-1")
        with pytest.raises(AuthorizationException):
            scoper.scope_for(identity, ResourceClass.KNOWLEDGE, include_all=True)


class TestDepartmentScope:
    def test_active_only(self) -> None:
        """Departments scope hides inactive rows."""
        scope = scoper.scope_for(make_identity(business_id="biz-1"), ResourceClass.DEPARTMENTS)
        assert scope.active_only is True
        inactive = SimpleNamespace(business_id="biz-1", is_active=False)
        assert not VisibilityScoper.is_visible(scope, inactive)


class TestScopeDiscriminator:
    def test_business_wins(self) -> None:
        """Business identities are keyed by business id."""
        owner = scope_discriminator(make_identity(business_id="biz-1"))
        assert owner.business_id == "biz-1"
        assert owner.user_email is None

    def test_personal_uses_email(self) -> None:
        """Personal identities are keyed by email."""
        owner = scope_discriminator(make_identity())
        assert owner.business_id is None
        assert owner.user_email == "alice@example.com"


class TestSharesTenancy:
    def test_business_members_share(self) -> None:
        """Members of the caller's business are in the tenancy."""
        identity = make_identity(business_id="biz-1")
        assert shares_tenancy(identity, make_user("user-2", business_id="biz-1"))
        assert not shares_tenancy(identity, make_user("user-3", business_id="biz-2"))

    def test_personal_rows_of_same_email_are_not_members(self) -> None:
        """A business never reaches a personal row, even of the same email."""
        identity = make_identity(business_id="biz-1")
        assert not shares_tenancy(identity, make_user("user-2", business_id=None))

    def test_personal_tenancy_is_only_the_caller(self) -> None:
        """Personal accounts only reach themselves."""
        identity = make_identity()
        assert shares_tenancy(identity, make_user("user-1"))
        assert not shares_tenancy(identity, make_user("user-2"))
