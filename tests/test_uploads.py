import pytest

from pawtrack.main import app
from pawtrack.utils.storage import R2StorageBackend, StorageService, get_storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class StubS3:
    def __init__(self):
        self.objects = {}
        self.deleted = []

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[Key] = (Body, ContentType)

    def delete_object(self, Bucket, Key):
        self.deleted.append(Key)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://r2.test/{Params['Bucket']}/{Params['Key']}?op={operation}"


@pytest.fixture
def r2():
    stub = StubS3()
    app.dependency_overrides[get_storage] = lambda: StorageService(R2StorageBackend(client=stub, bucket="b"))
    yield stub
    app.dependency_overrides.pop(get_storage, None)


def test_local_upload_and_fetch(client, teacher_headers):
    r = client.post(
        "/uploads/evidence",
        files={"file": ("sit.png", PNG, "image/png")},
        headers=teacher_headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["key"].startswith("1/evidence/")
    assert body["key"].endswith(".png")
    assert body["url"] == f"/uploads/files/{body['key']}"

    fetched = client.get(body["url"])
    assert fetched.status_code == 200
    assert fetched.content == PNG
    assert fetched.headers["cache-control"] == "public, max-age=86400"


@pytest.mark.parametrize(
    "category,filename,content,content_type,status",
    [
        ("avatars", "a.png", PNG, "image/png", 400),
        ("receipts", "r.pdf", b"%PDF-1.4", "application/pdf", 415),
        ("dog-images", "empty.png", b"", "image/png", 400),
    ],
)
def test_upload_rejections(client, teacher_headers, category, filename, content, content_type, status):
    r = client.post(
        f"/uploads/{category}",
        files={"file": (filename, content, content_type)},
        headers=teacher_headers,
    )
    assert r.status_code == status


def test_upload_requires_staff(client, portal_headers):
    r = client.post("/uploads/evidence", files={"file": ("a.png", PNG, "image/png")}, headers=portal_headers)
    assert r.status_code == 403


def test_missing_and_unsafe_files(client):
    assert client.get("/uploads/files/1/evidence/missing.png").status_code == 404
    assert client.get("/uploads/files/1/..%2F..%2Fetc/passwd").status_code in (400, 404)


def test_presign_with_local_storage_falls_back(client, teacher_headers):
    r = client.post(
        "/uploads/gallery/presign",
        json={"filename": "clip.mp4", "contentType": "video/mp4", "size": 2048},
        headers=teacher_headers,
    )
    assert r.status_code == 200
    assert r.json() == {"useLocalUpload": True, "uploadUrl": "/uploads/gallery", "key": None}


def test_presign_rejects_oversized_video(client, teacher_headers):
    r = client.post(
        "/uploads/gallery/presign",
        json={"filename": "clip.mp4", "contentType": "video/mp4", "size": 200 * 1024 * 1024},
        headers=teacher_headers,
    )
    assert r.status_code == 413


def test_direct_upload_over_the_limit_is_rejected(client, teacher_headers, monkeypatch):
    monkeypatch.setattr("pawtrack.utils.storage.MAX_IMAGE_SIZE_BYTES", 32)
    r = client.post(
        "/uploads/evidence",
        files={"file": ("big.png", PNG, "image/png")},
        headers=teacher_headers,
    )
    assert r.status_code == 413

    r = client.post(
        "/uploads/evidence",
        files={"file": ("small.png", PNG[:16], "image/png")},
        headers=teacher_headers,
    )
    assert r.status_code == 201


def test_r2_upload_presign_and_redirect(client, teacher_headers, r2):
    r = client.post(
        "/uploads/dog-images",
        files={"file": ("rocky.jpg", b"\xff\xd8\xff" + b"\x00" * 32, "image/jpeg")},
        headers=teacher_headers,
    )
    assert r.status_code == 201, r.text
    key = r.json()["key"]
    assert key in r2.objects
    assert r2.objects[key][1] == "image/jpeg"
    assert r.json()["url"].startswith(f"https://r2.test/b/{key}")

    r = client.post(
        "/uploads/receipts/presign",
        json={"filename": "ticket.png", "contentType": "image/png", "size": 1000},
        headers=teacher_headers,
    )
    presigned = r.json()
    assert presigned["useLocalUpload"] is False
    assert presigned["key"].startswith("1/receipts/")
    assert "op=put_object" in presigned["uploadUrl"]

    r = client.get(f"/uploads/files/{key}", follow_redirects=False)
    assert r.status_code == 307
    assert "op=get_object" in r.headers["location"]
