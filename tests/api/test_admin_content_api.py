"""Admin content blocks: features, feature groups, media sections, FAQs."""

import pytest

pytestmark = pytest.mark.integration


async def _create(client, path: str, body: dict) -> dict:
    response = await client.post(f"/api/admin/{path}", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_feature_group_items(client):
    fast = await _create(client, "features", {"name": "Fast", "description": "Very fast"})
    safe = await _create(client, "features", {"name": "Safe"})

    group = await _create(
        client,
        "feature-groups",
        {
            "name": "Why us",
            "items": [{"featureId": safe["id"], "sortOrder": 2}, {"featureId": fast["id"], "sortOrder": 1}],
        },
    )
    assert sorted((i["sortOrder"], i["feature"]["name"]) for i in group["items"]) == [(1, "Fast"), (2, "Safe")]

    response = await client.put(
        f"/api/admin/feature-groups/{group['id']}",
        json={"items": [{"featureId": fast["id"]}]},
    )
    assert [i["feature"]["name"] for i in response.json()["data"]["items"]] == ["Fast"]


async def test_feature_group_rejects_unknown_features(client):
    response = await client.post(
        "/api/admin/feature-groups",
        json={"name": "Broken", "items": [{"featureId": 404}]},
    )
    assert response.status_code == 400
    assert "404" in response.json()["message"]


async def test_media_section_badges_replaced(client):
    media = await _create(
        client,
        "media-sections",
        {
            "headline": "See it",
            "mediaUrl": "/demo.mp4",
            "features": [{"label": "Fast", "sortOrder": 0}, {"label": "Secure", "sortOrder": 1}],
        },
    )
    assert [f["label"] for f in media["features"]] == ["Fast", "Secure"]

    response = await client.put(f"/api/admin/media-sections/{media['id']}", json={"features": [{"label": "New"}]})
    assert [f["label"] for f in response.json()["data"]["features"]] == ["New"]


async def test_faq_section_categories(client):
    billing = await _create(client, "faq-categories", {"name": "Billing"})
    general = await _create(client, "faq-categories", {"name": "General"})
    await _create(client, "faqs", {"categoryId": billing["id"], "question": "Refunds?", "answer": "Yes."})

    section = await _create(
        client,
        "faq-sections",
        {"name": "Help", "categoryIds": [general["id"], billing["id"], general["id"]]},
    )

    links = section["sectionCategories"]
    assert [(link["category"]["name"], link["sortOrder"]) for link in links] == [("General", 0), ("Billing", 1)]
    assert [f["question"] for f in links[1]["category"]["faqs"]] == ["Refunds?"]

    missing = await client.post("/api/admin/faq-sections", json={"name": "Bad", "categoryIds": [999]})
    assert missing.status_code == 400


async def test_hero_with_buttons(client):
    primary = await _create(client, "cta-buttons", {"text": "Start", "url": "/signup"})
    hero = await _create(client, "hero-sections", {"headline": "Hello", "ctaPrimaryId": primary["id"]})

    assert hero["ctaPrimary"]["text"] == "Start"
    assert hero["ctaSecondary"] is None
