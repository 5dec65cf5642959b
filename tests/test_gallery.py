import re

import pytest


@pytest.fixture
def day(client, teacher_headers):
    r = client.post(
        "/gallery",
        json={"title": "Día de Playa!", "date": "2026-03-08", "coverImageKey": "1/gallery/cover.jpg"},
        headers=teacher_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_day_gets_slug_and_share_url(day):
    assert re.fullmatch(r"dia-de-playa-2026-03-08-[0-9a-f]{6}", day["slug"])
    assert day["shareUrl"] == f"http://localhost:5173/gallery/{day['slug']}"
    assert day["coverImageUrl"] == "/uploads/files/1/gallery/cover.jpg"
    assert day["itemCount"] == 0


def test_same_title_gets_distinct_slugs(client, teacher_headers, day):
    again = client.post("/gallery", json={"title": "Día de Playa!", "date": "2026-03-08"}, headers=teacher_headers)
    assert again.json()["slug"] != day["slug"]


def test_items_are_appended_in_order(client, teacher_headers, day):
    for key in ("a.jpg", "b.mp4"):
        media = "video" if key.endswith("mp4") else "image"
        r = client.post(
            f"/gallery/{day['id']}/items",
            json={"mediaType": media, "fileKey": f"1/gallery/{key}"},
            headers=teacher_headers,
        )
        assert r.status_code == 201, r.text

    items = client.get(f"/gallery/{day['id']}/items", headers=teacher_headers).json()
    assert [i["fileKey"] for i in items] == ["1/gallery/a.jpg", "1/gallery/b.mp4"]
    assert [i["sortOrder"] for i in items] == [0, 1]

    r = client.post(
        f"/gallery/{day['id']}/items", json={"mediaType": "gif", "fileKey": "1/gallery/c.gif"}, headers=teacher_headers
    )
    assert r.status_code == 422


def test_public_gallery_needs_no_login(client, teacher_headers, day):
    client.post(
        f"/gallery/{day['id']}/items",
        json={"mediaType": "image", "fileKey": "1/gallery/a.jpg", "caption": "Corriendo"},
        headers=teacher_headers,
    )
    r = client.get(f"/public/gallery/{day['slug']}")
    assert r.status_code == 200
    body = r.json()
    assert body["businessName"] == "Happy Paws"
    assert body["items"][0]["caption"] == "Corriendo"
    assert body["items"][0]["url"] == "/uploads/files/1/gallery/a.jpg"

    assert client.get("/public/gallery/nope").status_code == 404


def test_delete_item_and_day(client, teacher_headers, day):
    item = client.post(
        f"/gallery/{day['id']}/items",
        json={"mediaType": "image", "fileKey": "1/gallery/a.jpg"},
        headers=teacher_headers,
    ).json()
    assert client.delete(f"/gallery/items/{item['id']}", headers=teacher_headers).status_code == 200
    assert client.get(f"/gallery/{day['id']}/items", headers=teacher_headers).json() == []

    assert client.delete(f"/gallery/{day['id']}", headers=teacher_headers).status_code == 200
    assert client.get(f"/public/gallery/{day['slug']}").status_code == 404


def test_gallery_is_tenant_scoped(client, other_admin_headers, day):
    assert client.get(f"/gallery/{day['id']}", headers=other_admin_headers).status_code == 404
    assert client.get("/gallery", headers=other_admin_headers).json() == []


def test_captions_are_stripped_of_markup(client, teacher_headers, day):
    r = client.post(
        f"/gallery/{day['id']}/items",
        json={"mediaType": "image", "fileKey": "1/gallery/a.jpg", "caption": "<img src=x onerror=alert(1)><b>Corriendo</b>"},
        headers=teacher_headers,
    )
    assert r.status_code == 201
    assert r.json()["caption"] == "Corriendo"
    public = client.get(f"/public/gallery/{day['slug']}").json()
    assert public["items"][0]["caption"] == "Corriendo"


def test_media_keys_must_belong_to_the_business(client, teacher_headers, day):
    r = client.post(
        f"/gallery/{day['id']}/items",
        json={"mediaType": "image", "fileKey": "2/gallery/theirs.jpg"},
        headers=teacher_headers,
    )
    assert r.status_code == 400
    r = client.post(
        "/gallery",
        json={"title": "Otro", "date": "2026-03-09", "coverImageKey": "2/gallery/cover.jpg"},
        headers=teacher_headers,
    )
    assert r.status_code == 400
    assert client.get(f"/gallery/{day['id']}/items", headers=teacher_headers).json() == []
