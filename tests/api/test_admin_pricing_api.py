"""Admin pricing catalog endpoints and the public pricing matrix."""

import pytest

pytestmark = pytest.mark.integration


async def test_plan_crud(client):
    created = await client.post("/api/admin/plans", json={"name": "Team", "position": 2, "isPopular": True})
    assert created.status_code == 201
    plan = created.json()["data"]
    assert plan["name"] == "Team"
    assert plan["isPopular"] is True

    updated = await client.put(f"/api/admin/plans/{plan['id']}", json={"description": "For teams"})
    assert updated.json()["data"]["description"] == "For teams"
    assert updated.json()["data"]["name"] == "Team"

    listed = await client.get("/api/admin/plans")
    assert [p["name"] for p in listed.json()["data"]] == ["Team"]

    deleted = await client.delete(f"/api/admin/plans/{plan['id']}")
    assert deleted.json() == {"success": True, "data": None, "message": "Plan deleted"}
    assert (await client.get(f"/api/admin/plans/{plan['id']}")).status_code == 404


async def test_plan_in_pricing_section_cannot_be_deleted(client, pricing_catalog):
    response = await client.delete(f"/api/admin/plans/{pricing_catalog['starter']}")

    assert response.status_code == 409
    assert "Main" in response.json()["message"]


async def test_single_default_billing_cycle(client, pricing_catalog):
    response = await client.post("/api/admin/billing-cycles", json={"label": "Quarterly", "multiplier": 3, "isDefault": True})
    assert response.status_code == 201
    quarterly = response.json()["data"]
    assert quarterly["isDefault"] is True

    cycles = (await client.get("/api/admin/billing-cycles")).json()["data"]
    assert [c["label"] for c in cycles] == ["Monthly", "Quarterly", "Yearly"]
    assert [c["label"] for c in cycles if c["isDefault"]] == ["Quarterly"]

    response = await client.post(f"/api/admin/billing-cycles/{pricing_catalog['yearly']}/default")
    assert response.json()["data"]["isDefault"] is True
    cycles = (await client.get("/api/admin/billing-cycles")).json()["data"]
    assert [c["label"] for c in cycles if c["isDefault"]] == ["Yearly"]

    assert (await client.post("/api/admin/billing-cycles/missing/default")).status_code == 404


async def test_plan_pricing_upsert(client, pricing_catalog):
    body = {"planId": pricing_catalog["pro"], "billingCycleId": pricing_catalog["yearly"], "priceCents": 79000}
    first = (await client.post("/api/admin/plan-pricing", json=body)).json()["data"]
    second = (await client.post("/api/admin/plan-pricing", json={**body, "priceCents": 75000})).json()["data"]

    assert first["id"] == second["id"]
    assert second["priceCents"] == 75000

    prices = (await client.get("/api/admin/plan-pricing", params={"planId": pricing_catalog["pro"]})).json()["data"]
    assert sorted(p["priceCents"] for p in prices) == [7900, 75000]


async def test_plan_pricing_rejects_negative_price(client, pricing_catalog):
    body = {"planId": pricing_catalog["pro"], "billingCycleId": pricing_catalog["yearly"], "priceCents": -1}
    assert (await client.post("/api/admin/plan-pricing", json=body)).status_code == 400


async def test_feature_limit_upsert(client, pricing_catalog):
    body = {"planId": pricing_catalog["starter"], "featureTypeId": pricing_catalog["storage"], "value": "10"}
    created = (await client.post("/api/admin/plan-feature-limits", json=body)).json()["data"]
    assert created["value"] == "10"

    body["isUnlimited"] = True
    updated = (await client.post("/api/admin/plan-feature-limits", json=body)).json()["data"]
    assert updated["id"] == created["id"]
    assert updated["isUnlimited"] is True


async def test_basic_feature_link_is_idempotent(client, pricing_catalog):
    body = {"planId": pricing_catalog["starter"], "basicFeatureId": pricing_catalog["sso"]}
    first = (await client.post("/api/admin/plan-basic-features", json=body)).json()["data"]
    second = (await client.post("/api/admin/plan-basic-features", json=body)).json()["data"]
    assert first["id"] == second["id"]

    removed = await client.delete("/api/admin/plan-basic-features", params=body)
    assert removed.status_code == 200
    again = await client.delete("/api/admin/plan-basic-features", params=body)
    assert again.status_code == 404


async def test_pricing_section_plans(client, pricing_catalog):
    section = (await client.post("/api/admin/pricing-sections", json={"name": "Enterprise"})).json()["data"]
    assert section["heading"] == "Pricing Plans"

    body = {"pricingSectionId": section["id"], "planId": pricing_catalog["pro"], "sortOrder": 1}
    link = await client.post("/api/admin/pricing-section-plans", json=body)
    assert link.status_code == 201
    assert link.json()["data"]["plan"]["name"] == "Pro"

    duplicate = await client.post("/api/admin/pricing-section-plans", json=body)
    assert duplicate.status_code == 409

    links = (await client.get("/api/admin/pricing-section-plans", params={"pricingSectionId": section["id"]})).json()
    assert [x["plan"]["name"] for x in links["data"]] == ["Pro"]


async def test_pricing_section_default(client, pricing_catalog):
    other = (await client.post("/api/admin/pricing-sections", json={"name": "Other", "isDefault": True})).json()["data"]
    assert other["isDefault"] is True

    await client.post(f"/api/admin/pricing-sections/{pricing_catalog['section']}/default")
    sections = (await client.get("/api/admin/pricing-sections")).json()["data"]
    assert {s["name"]: s["isDefault"] for s in sections} == {"Main": True, "Other": False}


async def test_public_pricing_matrix(client, pricing_catalog):
    response = await client.get(
        f"/api/pricing-sections/{pricing_catalog['section']}",
        params={"billingCycleId": pricing_catalog["yearly"]},
    )

    assert response.status_code == 200
    matrix = response.json()
    assert matrix["state"] == "ok"
    assert matrix["selectedBillingCycleId"] == pricing_catalog["yearly"]
    assert [p["name"] for p in matrix["plans"]] == ["Starter", "Pro"]
    assert matrix["plans"][0]["price"]["display"] == "$290"
    assert {c["label"]: c["savingsPercent"] for c in matrix["billingCycles"]} == {"Monthly": 0, "Yearly": 17}


async def test_public_pricing_unknown_section_is_empty(client):
    response = await client.get("/api/pricing-sections/999")
    assert response.status_code == 200
    assert response.json()["state"] == "empty"
