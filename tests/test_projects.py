"""
tests.test_projects

Project listing, detail and custom field endpoints.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import ALICE_TOKEN, BOB_TOKEN, Seed, auth


@pytest.mark.asyncio
async def test_list_projects_defaults(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get("/api/v1/projects", headers=auth(ALICE_TOKEN))
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Projects loaded successfully"

    # Only active projects alice is a member of, sorted by name.
    assert [p["identifier"] for p in body["projects"]] == ["alpha", "epsilon"]
    assert body["pagination"] == {"page": 1, "per_page": 25, "total_count": 2, "total_pages": 1}

    alpha, epsilon = body["projects"]
    assert len(alpha["description"]) == 200
    assert alpha["description"].endswith("...")
    assert alpha["issues_count"] == 5
    assert alpha["open_issues_count"] == 3
    assert alpha["members_count"] == 2
    assert alpha["homepage"] == "https://alpha.example.com"
    assert epsilon["parent_id"] == seeded.alpha.id
    assert epsilon["parent_name"] == "Alpha"
    assert epsilon["issues_count"] == 0


@pytest.mark.asyncio
async def test_list_projects_filters_sorting_and_paging(
    client: httpx.AsyncClient, seeded: Seed
) -> None:
    headers = auth(ALICE_TOKEN)

    r = await client.get("/api/v1/projects", params={"search": "eps"}, headers=headers)
    assert [p["identifier"] for p in r.json()["projects"]] == ["epsilon"]

    # Listing is restricted to active projects; other statuses match nothing.
    r = await client.get("/api/v1/projects", params={"status": 5}, headers=headers)
    assert r.json()["projects"] == []

    r = await client.get(
        "/api/v1/projects",
        params={"sort_by": "name", "sort_direction": "desc"},
        headers=headers,
    )
    assert [p["identifier"] for p in r.json()["projects"]] == ["epsilon", "alpha"]

    r = await client.get("/api/v1/projects", params={"page": 2, "per_page": 1}, headers=headers)
    body = r.json()
    assert [p["identifier"] for p in body["projects"]] == ["epsilon"]
    assert body["pagination"] == {"page": 2, "per_page": 1, "total_count": 2, "total_pages": 2}

    r = await client.get("/api/v1/projects", params={"per_page": 500}, headers=headers)
    assert r.json()["pagination"]["per_page"] == 100


@pytest.mark.asyncio
async def test_list_projects_rejects_unknown_sort(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get(
        "/api/v1/projects",
        params={"sort_by": "lft; DROP TABLE projects", "sort_direction": "sideways"},
        headers=auth(ALICE_TOKEN),
    )
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["message"] == "Validation failed"
    assert len(body["details"]) == 2


@pytest.mark.asyncio
async def test_list_projects_rejects_bad_page(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get("/api/v1/projects", params={"page": 0}, headers=auth(ALICE_TOKEN))
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"][0].startswith("page:")


@pytest.mark.asyncio
async def test_list_projects_requires_api_key(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get("/api/v1/projects")
    assert r.status_code == 401
    assert r.json()["error"] == "MISSING_API_KEY"


@pytest.mark.asyncio
async def test_show_project(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get("/api/v1/projects/alpha", headers=auth(ALICE_TOKEN))
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Project loaded successfully"

    project = body["project"]
    assert project["identifier"] == "alpha"
    assert project["description"] == "x" * 250
    assert project["issues_count"] == 5
    assert project["open_issues_count"] == 3
    assert project["closed_issues_count"] == 2
    assert project["members_count"] == 2
    assert sorted(t["name"] for t in project["trackers"]) == ["Bug", "Feature"]
    assert [c["name"] for c in project["issue_categories"]] == ["Backend"]
    assert project["versions"] == [
        {
            "id": project["versions"][0]["id"],
            "name": "1.0",
            "status": "open",
            "due_date": seeded.today.isoformat(),
        }
    ]
    # Hidden project fields are only shown to admins.
    assert [(f["name"], f["value"]) for f in project["custom_fields"]] == [("Budget", "1000")]


@pytest.mark.asyncio
async def test_show_project_admin_sees_hidden_custom_fields(
    client: httpx.AsyncClient, seeded: Seed
) -> None:
    r = await client.get("/api/v1/projects/alpha", headers=auth(BOB_TOKEN))
    names = [f["name"] for f in r.json()["project"]["custom_fields"]]
    assert names == ["Budget", "Secret"]


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["beta", "missing"])
async def test_show_project_not_found(
    client: httpx.AsyncClient, seeded: Seed, identifier: str
) -> None:
    # beta exists but alice is not a member.
    r = await client.get(f"/api/v1/projects/{identifier}", headers=auth(ALICE_TOKEN))
    assert r.status_code == 404
    assert r.json() == {
        "success": False,
        "message": "Project not found",
        "error": "PROJECT_NOT_FOUND",
    }


@pytest.mark.asyncio
async def test_custom_fields_lists_mandatory_fields(
    client: httpx.AsyncClient, seeded: Seed
) -> None:
    r = await client.get("/api/v1/projects/alpha/custom_fields", headers=auth(ALICE_TOKEN))
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Custom fields loaded successfully"

    fields = body["mandatory_fields"]
    # Notes is optional; Due is only enabled on beta.
    assert [f["name"] for f in fields] == ["Severity", "Customer", "Rating"]

    severity, customer, rating = fields
    assert severity["field_type_info"] == {"type": "select", "options": ["S1", "S2"]}
    assert severity["possible_values"] == ["S1", "S2"]
    assert customer["field_type_info"] == {"type": "text_input"}
    assert customer["max_length"] == 64
    assert rating["field_type_info"] == {"type": "rating"}
    assert all(f["is_required"] for f in fields)


@pytest.mark.asyncio
async def test_custom_fields_project_not_found(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get("/api/v1/projects/beta/custom_fields", headers=auth(ALICE_TOKEN))
    assert r.status_code == 404
    assert r.json()["error"] == "PROJECT_NOT_FOUND"


@pytest.mark.asyncio
async def test_listing_renders_parent_outside_the_page(
    client: httpx.AsyncClient, seeded: Seed
) -> None:
    # Each request has its own session, so alpha is never already loaded here.
    headers = auth(ALICE_TOKEN)

    r = await client.get("/api/v1/projects", params={"search": "eps"}, headers=headers)
    assert r.status_code == 200
    (epsilon,) = r.json()["projects"]
    assert (epsilon["parent_id"], epsilon["parent_name"]) == (seeded.alpha.id, "Alpha")

    r = await client.get(
        "/api/v1/projects",
        params={"sort_by": "name", "sort_direction": "desc", "per_page": 1},
        headers=headers,
    )
    assert r.status_code == 200
    assert [(p["identifier"], p["parent_name"]) for p in r.json()["projects"]] == [
        ("epsilon", "Alpha")
    ]


@pytest.mark.asyncio
async def test_show_subproject(client: httpx.AsyncClient, seeded: Seed) -> None:
    r = await client.get("/api/v1/projects/epsilon", headers=auth(ALICE_TOKEN))
    assert r.status_code == 200
    project = r.json()["project"]
    assert project["identifier"] == "epsilon"
    assert project["parent_id"] == seeded.alpha.id
    assert project["parent_name"] == "Alpha"
    assert project["issues_count"] == 0
    assert project["trackers"] == []


@pytest.mark.asyncio
async def test_show_top_level_project_has_no_parent(
    client: httpx.AsyncClient, seeded: Seed
) -> None:
    r = await client.get("/api/v1/projects/alpha", headers=auth(ALICE_TOKEN))
    project = r.json()["project"]
    assert project["parent_id"] is None
    assert project["parent_name"] is None
