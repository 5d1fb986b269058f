from datetime import datetime, timedelta, timezone

from app.models import AccountStatus, Like
from app.services import matching

from conftest import ADMIN_PASSWORD

ADMIN_KEY = "bandhan-admin-onboarding-key"


def _admin_payload(**overrides):
    payload = {
        "email": "ops@bandhan.example",
        "password": ADMIN_PASSWORD,
        "firstName": "Farah",
        "lastName": "Khan",
        "adminKey": ADMIN_KEY,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Admin authentication
# =============================================================================

async def test_admin_register_and_login(client):
    registered = await client.post("/api/admin-auth/register", json=_admin_payload())

    assert registered.status_code == 201
    admin = registered.json()["admin"]
    assert admin["role"] == "admin"
    assert admin["permissions"] == ["manage_users", "view_statistics"]
    assert registered.json()["token"]

    login = await client.post(
        "/api/admin-auth/login",
        json={"email": "ops@bandhan.example", "password": ADMIN_PASSWORD},
    )
    assert login.status_code == 200
    assert login.json()["success"] is True
    assert login.json()["admin"]["lastLogin"] is not None

    me = await client.get(
        "/api/admin-auth/me",
        headers={"Authorization": f"Bearer {login.json()['token']}"},
    )
    assert me.status_code == 200
    assert me.json()["email"] == "ops@bandhan.example"


async def test_admin_register_requires_key_and_strong_password(client, make_admin):
    wrong_key = await client.post("/api/admin-auth/register", json=_admin_payload(adminKey="guess"))
    assert wrong_key.status_code == 403
    assert wrong_key.json()["message"] == "Invalid admin registration key"

    weak = await client.post("/api/admin-auth/register", json=_admin_payload(password="short"))
    assert weak.status_code == 400
    assert "at least 12 characters" in weak.json()["message"]

    await make_admin(email="taken@bandhan.example")
    duplicate = await client.post("/api/admin-auth/register", json=_admin_payload(email="taken@bandhan.example"))
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "Email already registered"


async def test_admin_login_failures(client, make_admin):
    await make_admin(email="lead@bandhan.example")
    await make_admin(email="gone@bandhan.example", status=AccountStatus.INACTIVE)

    wrong = await client.post("/api/admin-auth/login", json={"email": "lead@bandhan.example", "password": "Wrong!Pass#123"})
    inactive = await client.post("/api/admin-auth/login", json={"email": "gone@bandhan.example", "password": ADMIN_PASSWORD})

    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid credentials"
    assert inactive.status_code == 403


async def test_admin_routes_reject_member_tokens(client, make_member, auth_for):
    member = await make_member()

    for path in ("/api/admin/stats", "/api/admin/users", "/api/admin-auth/me"):
        response = await client.get(path, headers=auth_for(member))
        assert response.status_code == 401, path


async def test_admin_routes_check_permissions(client, make_admin, admin_auth_for):
    viewer = await make_admin(permissions=["view_statistics"])
    editor = await make_admin(permissions=["manage_users"])

    assert (await client.get("/api/admin/stats", headers=admin_auth_for(viewer))).status_code == 200
    denied = await client.get("/api/admin/users", headers=admin_auth_for(viewer))
    assert denied.status_code == 403
    assert denied.json()["message"] == "You do not have permission to perform this action"

    assert (await client.get("/api/admin/users", headers=admin_auth_for(editor))).status_code == 200
    assert (await client.get("/api/admin/stats", headers=admin_auth_for(editor))).status_code == 403


# =============================================================================
# Statistics
# =============================================================================

async def test_stats_on_empty_store(client, make_admin, admin_auth_for):
    admin = await make_admin()

    response = await client.get("/api/admin/stats", headers=admin_auth_for(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["totalUsers"] == 0
    assert body["usersByStatus"] == {"active": 0, "inactive": 0, "suspended": 0}
    assert len(body["dailyTrends"]) == 7
    assert all(day["count"] == 0 for day in body["dailyTrends"])
    dates = [day["date"] for day in body["dailyTrends"]]
    assert dates == sorted(dates)
    assert dates[-1] == datetime.now(timezone.utc).date().isoformat()


async def test_stats_counts_members(client, make_member, make_admin, admin_auth_for):
    admin = await make_admin()
    await make_member()
    await make_member()
    await make_member(status=AccountStatus.SUSPENDED)
    await make_member(created_at=datetime.utcnow() - timedelta(days=30))

    body = (await client.get("/api/admin/stats", headers=admin_auth_for(admin))).json()

    assert body["totalUsers"] == 4
    assert body["usersByStatus"] == {"active": 3, "inactive": 0, "suspended": 1}
    assert sum(day["count"] for day in body["dailyTrends"]) == 3
    assert body["dailyTrends"][-1]["count"] == 3


# =============================================================================
# Member management
# =============================================================================

async def test_list_users_paginates_newest_first(client, make_member, make_admin, admin_auth_for):
    admin = await make_admin()
    base = datetime.utcnow() - timedelta(hours=1)
    members = [await make_member(created_at=base + timedelta(minutes=i)) for i in range(12)]

    response = await client.get("/api/admin/users?page=2&limit=5", headers=admin_auth_for(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["totalUsers"] == 12
    assert body["totalPages"] == 3
    assert body["currentPage"] == 2
    newest_first = [m.id for m in reversed(members)]
    assert [u["id"] for u in body["users"]] == newest_first[5:10]


async def test_list_users_search_is_case_insensitive(client, make_member, make_admin, admin_auth_for):
    admin = await make_admin()
    iyer = await make_member(last_name="Iyer")
    anita = await make_member(first_name="Anita")
    by_email = await make_member(email="cricket.fan@example.com")
    await make_member()

    async def search(term):
        response = await client.get("/api/admin/users", params={"search": term}, headers=admin_auth_for(admin))
        return {u["id"] for u in response.json()["users"]}

    assert await search("IYE") == {iyer.id}
    assert await search("anita") == {anita.id}
    assert await search("Cricket") == {by_email.id}
    assert await search("nobody-matches-this") == set()
    # Wildcard characters are matched literally
    assert await search("%") == set()


async def test_get_user_detail_lists_matches(client, db, make_member, make_admin, admin_auth_for):
    admin = await make_admin()
    member = await make_member()
    partner = await make_member(first_name="Dev", last_name="Malhotra")
    await matching.like(db, member.id, partner.id)
    await matching.like(db, partner.id, member.id)

    response = await client.get(f"/api/admin/users/{member.id}", headers=admin_auth_for(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == member.email
    assert body["matches"] == [
        {"id": partner.id, "email": partner.email, "firstName": "Dev", "lastName": "Malhotra"}
    ]
    assert "hashedPassword" not in body

    missing = await client.get("/api/admin/users/987654", headers=admin_auth_for(admin))
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"


async def test_update_user_merges_fields(client, make_member, make_admin, admin_auth_for, auth_for, load_user):
    admin = await make_admin()
    member = await make_member(location="Delhi", pref_religion="Hindu")

    response = await client.put(
        f"/api/admin/users/{member.id}",
        json={
            "email": "New.Address@Example.com",
            "status": "suspended",
            "profile": {"occupation": "Doctor"},
            "preferences": {"ageRange": {"max": 40}},
        },
        headers=admin_auth_for(admin),
    )

    assert response.status_code == 200
    stored = await load_user(member.id)
    assert stored.email == "new.address@example.com"
    assert stored.status == AccountStatus.SUSPENDED
    assert stored.occupation == "Doctor"
    assert stored.location == "Delhi"
    assert stored.pref_age_min == 18
    assert stored.pref_age_max == 40
    assert stored.pref_religion == "Hindu"

    # Suspended members are locked out of member routes
    blocked = await client.get("/api/auth/me", headers=auth_for(member))
    assert blocked.status_code == 403


async def test_update_user_rejects_bad_email(client, make_member, make_admin, admin_auth_for):
    admin = await make_admin()
    member = await make_member()
    other = await make_member()

    invalid = await client.put(
        f"/api/admin/users/{member.id}", json={"email": "not-an-email"}, headers=admin_auth_for(admin)
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid email format"

    taken = await client.put(
        f"/api/admin/users/{member.id}", json={"email": other.email}, headers=admin_auth_for(admin)
    )
    assert taken.status_code == 400
    assert taken.json()["message"] == "Email already exists"

    bad_status = await client.put(
        f"/api/admin/users/{member.id}", json={"status": "banned"}, headers=admin_auth_for(admin)
    )
    assert bad_status.status_code == 400


async def test_delete_user_cleans_up_likes_and_matches(
    client, db, make_member, make_admin, admin_auth_for, auth_for, load_user
):
    admin = await make_admin()
    leaving = await make_member()
    admired = await make_member()
    partner = await make_member()
    admirer = await make_member()

    await matching.like(db, leaving.id, admired.id)
    await matching.like(db, leaving.id, partner.id)
    await matching.like(db, partner.id, leaving.id)
    await matching.like(db, admirer.id, leaving.id)

    response = await client.delete(f"/api/admin/users/{leaving.id}", headers=admin_auth_for(admin))

    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully"
    assert await load_user(leaving.id) is None
    assert (await load_user(admired.id)).likes_count == 0

    mutual = await client.get("/api/matches/mutual", headers=auth_for(partner))
    assert mutual.json()["totalMatches"] == 0
    liked = await client.get("/api/matches/liked", headers=auth_for(admirer))
    assert liked.json()["totalLikes"] == 0

    again = await client.delete(f"/api/admin/users/{leaving.id}", headers=admin_auth_for(admin))
    assert again.status_code == 404
    assert again.json()["message"] == "User not found"


async def test_update_user_rejects_inverted_age_range(client, make_member, make_admin, admin_auth_for, load_user):
    admin = await make_admin()
    member = await make_member(pref_age_min=24, pref_age_max=30)

    both = await client.put(
        f"/api/admin/users/{member.id}",
        json={"preferences": {"ageRange": {"min": 50, "max": 30}}},
        headers=admin_auth_for(admin),
    )
    assert both.status_code == 400
    assert both.json()["message"] == "Validation error"

    min_only = await client.put(
        f"/api/admin/users/{member.id}",
        json={"preferences": {"ageRange": {"min": 35}}},
        headers=admin_auth_for(admin),
    )
    assert min_only.status_code == 400
    assert min_only.json()["message"] == "Minimum age cannot be greater than maximum age"

    stored = await load_user(member.id)
    assert (stored.pref_age_min, stored.pref_age_max) == (24, 30)
