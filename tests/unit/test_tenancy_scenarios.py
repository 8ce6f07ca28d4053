"""End-to-end tenancy scenarios over the in-memory stores.

Registration, upgrade, downgrade and identity resolution run against the same
fake stores, so every step sees the state the previous one left behind.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos import UserCreate
from app.application.services import (
    AccountResolver,
    AuthService,
    IdentityService,
    InvitationService,
    PermissionChecker,
    TeamService,
    TenancyMigrator,
    VisibilityScoper,
)
from app.domain.enums import AccountType, UserRole
from app.domain.exceptions import AccountAlreadyExistsException, TeammatesExistException
from tests.fakes import (
    InMemoryBusinessStore,
    InMemoryInvitationStore,
    InMemorySessionStore,
    InMemoryTokenStore,
    InMemoryUserStore,
)


class World:
    def __init__(self) -> None:
        self.users = InMemoryUserStore()
        self.businesses = InMemoryBusinessStore()
        self.sessions = InMemorySessionStore()
        self.tokens = InMemoryTokenStore()
        hasher = MagicMock()
        hasher.hash.side_effect = lambda pw: f"hashed:{pw}"
        hasher.verify.side_effect = lambda pw, h: h == f"hashed:{pw}"
        self.resolver = AccountResolver(self.users)
        self.migrator = TenancyMigrator(self.users, self.businesses, self.sessions, self.tokens)
        self.identities = IdentityService(self.sessions, self.users, self.migrator)
        self.auth = AuthService(self.resolver, self.users, self.sessions, hasher)
        self.invitations = InMemoryInvitationStore()
        permissions = PermissionChecker(self.users)
        self.team = TeamService(self.users, self.businesses, permissions, self.resolver)
        self.inviter = InvitationService(
            self.invitations,
            self.users,
            self.businesses,
            AsyncMock(),
            permissions,
            VisibilityScoper(),
            hasher,
            self.auth,
        )

    async def register(self, email: str = "a@x.com", name: str = "Ann"):
        result = await self.auth.register_personal(name, email, "password123")
        return await self.identities.resolve(result.session.token)


@pytest.fixture
def world() -> World:
    return World()


async def test_upgrade_then_downgrade(world: World) -> None:
    """Upgrade makes the user a business admin; downgrade returns them to personal."""
    identity = await world.register()
    business = await world.migrator.upgrade(identity)

    identity = await world.identities.resolve(identity.session_token)
    assert identity.business_id == business.id
    assert identity.role == UserRole.ADMIN
    assert identity.account_type == AccountType.BUSINESS

    await world.migrator.downgrade(identity)

    identity = await world.identities.resolve(identity.session_token)
    assert identity.business_id is None
    assert identity.role == UserRole.AGENT
    assert await world.businesses.get_by_id(business.id) is None


async def test_downgrade_then_upgrade_gets_fresh_business(world: World) -> None:
    """A business deleted by downgrade is not resurrected by the next upgrade."""
    identity = await world.register()
    first = await world.migrator.upgrade(identity)
    await world.migrator.downgrade(await world.identities.resolve(identity.session_token))

    second = await world.migrator.upgrade(await world.identities.resolve(identity.session_token))

    assert second.id != first.id
    user = await world.users.get_by_id(identity.user_id)
    assert user.role == UserRole.ADMIN
    assert user.business_id == second.id


async def test_second_user_with_same_email_reuses_business(world: World) -> None:
    """Upgrading a second row of the same email joins the existing business."""
    ann = await world.register()
    business = await world.migrator.upgrade(ann)

    # A second personal row for the same email (e.g. an older Google sign-in).
    other = await world.users.create_user(
        UserCreate(email="A@X.com", name="Ann G", role=UserRole.AGENT, is_email_verified=True)
    )
    session = await world.auth.open_session(other)
    other_identity = await world.identities.resolve(session.token)

    reused = await world.migrator.upgrade(other_identity)

    assert reused.id == business.id
    assert len(world.businesses.rows) == 1


async def test_upgrade_moves_only_unassigned_tokens(world: World) -> None:
    """Upgrade claims personal mailbox tokens and leaves other businesses alone."""
    identity = await world.register()
    personal = world.tokens.add("a@x.com")
    elsewhere = world.tokens.add("a@x.com", business_id="biz-other")
    stranger = world.tokens.add("b@x.com")

    business = await world.migrator.upgrade(identity)

    assert world.tokens.rows[personal.id].business_id == business.id
    assert world.tokens.rows[elsewhere.id].business_id == "biz-other"
    assert world.tokens.rows[stranger.id].business_id is None


async def test_downgrade_clears_every_token_of_the_email(world: World) -> None:
    """Downgrade detaches every mailbox token of the email."""
    identity = await world.register()
    world.tokens.add("a@x.com")
    world.tokens.add("a@x.com", business_id="biz-other")
    await world.migrator.upgrade(identity)

    await world.migrator.downgrade(await world.identities.resolve(identity.session_token))

    assert all(t.business_id is None for t in await world.tokens.list_by_email("a@x.com"))


async def test_teammate_blocks_downgrade_until_deactivated(world: World) -> None:
    """Active teammates block downgrade; deactivating them unblocks it."""
    identity = await world.register()
    business = await world.migrator.upgrade(identity)
    identity = await world.identities.resolve(identity.session_token)
    mate = await world.team.add_member(identity, "mate@x.com", "Mate")

    with pytest.raises(TeammatesExistException):
        await world.migrator.downgrade(identity)
    assert await world.businesses.get_by_id(business.id) is not None
    assert world.businesses.locked[-1] == business.id

    await world.team.update_member(identity, mate.id, is_active=False)
    await world.migrator.downgrade(identity)
    assert await world.businesses.get_by_id(business.id) is None


async def test_stale_session_is_resynced_from_user(world: World) -> None:
    """A session opened before upgrade picks up the business on next resolve."""
    identity = await world.register()
    business = await world.migrator.upgrade(identity)
    # A second session opened before the upgrade still says personal.
    stale = await world.sessions.create_session(
        identity.user_id, identity.email, None, next(iter(world.sessions.rows.values())).expires_at
    )

    resolved = await world.identities.resolve(stale.token)

    assert resolved.business_id == business.id
    assert world.sessions.rows[stale.token].business_id == business.id


async def test_login_prefers_business_row(world: World) -> None:
    """Login checks the business row password, not the newer personal one."""
    ann = await world.register()
    business = await world.migrator.upgrade(ann)
    await world.users.create_user(
        UserCreate(
            email="a@x.com",
            name="Ann personal",
            role=UserRole.AGENT,
            password_hash="hashed:other-password",
            is_email_verified=True,
        )
    )

    info = await world.resolver.resolve("A@x.com")
    assert info.user_id == ann.user_id
    assert info.business_id == business.id

    result = await world.auth.login("a@x.com", "password123")
    assert result.session.business_id == business.id


async def _business_admin(world: World):
    ann = await world.register()
    await world.migrator.upgrade(ann)
    return await world.identities.resolve(ann.session_token)


async def test_invited_personal_user_joins_with_own_password(world: World) -> None:
    """An invitee with a personal account accepts and signs in with the password they chose."""
    admin = await _business_admin(world)
    await world.register("b@x.com", "Bob")
    invitation = await world.inviter.invite(admin, "b@x.com", "Bob")

    accepted = await world.inviter.accept(invitation.token, "bobs-new-password")

    assert accepted.user.business_id == admin.business_id
    result = await world.auth.login("b@x.com", "bobs-new-password")
    assert result.session.business_id == admin.business_id
    assert result.user.id == accepted.user.id


async def test_add_member_leaves_personal_password_login_intact(world: World) -> None:
    """Direct add refuses a personal password account, so its login keeps working."""
    admin = await _business_admin(world)
    bob = await world.register("b@x.com", "Bob")

    with pytest.raises(AccountAlreadyExistsException):
        await world.team.add_member(admin, "b@x.com", "Bob")

    result = await world.auth.login("b@x.com", "password123")
    assert result.user.id == bob.user_id
    assert result.session.business_id is None
