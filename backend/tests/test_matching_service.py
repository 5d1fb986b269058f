from datetime import date

import pytest
from sqlalchemy import select, func

from app.models import Like, Match
from app.services import matching
from app.services.accounts import UserNotFoundError


async def _edge_counts(db):
    likes = (await db.execute(select(func.count(Like.id)))).scalar()
    matches = (await db.execute(select(func.count(Match.id)))).scalar()
    return likes, matches


async def test_first_like_is_pending_and_counts_inbound(db, make_member, load_user):
    alice = await make_member()
    bob = await make_member()

    result = await matching.like(db, alice.id, bob.id)

    assert result.is_match is False
    assert result.message == "Profile liked"
    assert result.likes_count == 1
    assert (await load_user(bob.id)).likes_count == 1
    assert (await load_user(alice.id)).likes_count == 0
    assert await _edge_counts(db) == (1, 0)


async def test_reciprocated_like_becomes_match(db, make_member, load_user):
    alice = await make_member()
    bob = await make_member()

    await matching.like(db, alice.id, bob.id)
    result = await matching.like(db, bob.id, alice.id)

    assert result.is_match is True
    assert result.message == "Match created!"
    assert await matching.is_matched(db, alice.id, bob.id)
    assert await matching.is_matched(db, bob.id, alice.id)
    # Both like edges are gone, one match row per side
    assert await _edge_counts(db) == (0, 2)
    # The pending like Bob had received was consumed by the match
    assert result.likes_count == 0
    assert (await load_user(bob.id)).likes_count == 0
    assert (await load_user(alice.id)).likes_count == 0


async def test_liking_twice_is_rejected(db, make_member):
    alice = await make_member()
    bob = await make_member()
    await matching.like(db, alice.id, bob.id)

    with pytest.raises(matching.AlreadyLikedError):
        await matching.like(db, alice.id, bob.id)


async def test_liking_a_match_is_rejected(db, make_member):
    alice = await make_member()
    bob = await make_member()
    await matching.like(db, alice.id, bob.id)
    await matching.like(db, bob.id, alice.id)

    with pytest.raises(matching.AlreadyMatchedError):
        await matching.like(db, alice.id, bob.id)
    with pytest.raises(matching.AlreadyMatchedError):
        await matching.like(db, bob.id, alice.id)


async def test_self_like_and_unknown_target(db, make_member):
    alice = await make_member()

    with pytest.raises(matching.SelfLikeError):
        await matching.like(db, alice.id, alice.id)
    with pytest.raises(UserNotFoundError):
        await matching.like(db, alice.id, alice.id + 999)
    assert await _edge_counts(db) == (0, 0)


async def test_potential_matches_excludes_self_liked_and_matched(db, make_member):
    me = await make_member()
    liked = await make_member()
    matched = await make_member()
    fresh = await make_member()
    admirer = await make_member()

    await matching.like(db, me.id, liked.id)
    await matching.like(db, matched.id, me.id)
    await matching.like(db, me.id, matched.id)
    # An inbound pending like does not hide the admirer
    await matching.like(db, admirer.id, me.id)

    candidates = await matching.potential_matches(db, me)

    assert [c.id for c in candidates] == [fresh.id, admirer.id]


async def test_potential_matches_age_bounds_are_inclusive(db, make_member):
    today = date(2026, 10, 19)
    me = await make_member()
    exactly_25 = await make_member(date_of_birth=date(2001, 10, 19))
    turns_25_tomorrow = await make_member(date_of_birth=date(2001, 10, 20))
    exactly_30 = await make_member(date_of_birth=date(1996, 10, 19))
    turns_31_tomorrow = await make_member(date_of_birth=date(1995, 10, 20))
    already_31 = await make_member(date_of_birth=date(1995, 10, 19))

    candidates = await matching.potential_matches(db, me, min_age=25, max_age=30, today=today)
    ids = {c.id for c in candidates}

    assert exactly_25.id in ids
    assert exactly_30.id in ids
    assert turns_31_tomorrow.id in ids
    assert turns_25_tomorrow.id not in ids
    assert already_31.id not in ids


async def test_potential_matches_religion_filter(db, make_member):
    me = await make_member(religion="Hindu")
    hindu = await make_member(religion="Hindu")
    await make_member(religion="Sikh")
    await make_member(religion=None)

    candidates = await matching.potential_matches(db, me, religion="Hindu")

    assert [c.id for c in candidates] == [hindu.id]


async def test_liked_and_matched_listings(db, make_member):
    me = await make_member()
    first = await make_member()
    second = await make_member()
    partner = await make_member()

    await matching.like(db, me.id, first.id)
    await matching.like(db, me.id, second.id)
    await matching.like(db, partner.id, me.id)
    await matching.like(db, me.id, partner.id)

    liked = await matching.liked_profiles(db, me)
    matched = await matching.matched_profiles(db, me)

    assert [u.id for u in liked] == [first.id, second.id]
    assert [u.id for u in matched] == [partner.id]
    assert [u.id for u in await matching.matched_profiles(db, partner)] == [me.id]


async def test_max_age_boundary_keeps_member_whose_birthday_was_yesterday(db, make_member):
    today = date(2026, 10, 19)
    me = await make_member()
    # Thirty years and one day old: derived age is still 30
    born_yesterday_30_years_ago = await make_member(date_of_birth=date(1996, 10, 18))

    candidates = await matching.potential_matches(db, me, min_age=0, max_age=30, today=today)

    assert born_yesterday_30_years_ago.id in [c.id for c in candidates]
