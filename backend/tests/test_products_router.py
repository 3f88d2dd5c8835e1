import inspect

import pytest

import routers.products_router as products_router
from main import app
from models import Product, ProductImage
from services.cloudinary_service import get_cloudinary_service
from services.errors import InternalError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


class FakeCloudinary:
    def __init__(self):
        self.uploaded = []
        self.deleted = []

    def upload_product_image(self, file_content, product_id):
        public_id = f"products/product_{product_id}_{len(self.uploaded)}"
        self.uploaded.append(public_id)
        return {
            "public_id": public_id,
            "url": f"https://res.cloudinary.com/demo/image/upload/{public_id}.jpg",
            "width": 800, "height": 800, "format": "jpg", "bytes": len(file_content),
        }

    def delete_image(self, public_id):
        self.deleted.append(public_id)
        return True


@pytest.fixture
def cloudinary_fake(client):
    fake = FakeCloudinary()
    app.dependency_overrides[get_cloudinary_service] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_cloudinary_service, None)


def _upload(client, headers, product_id=7, filename="shirt.png", content=PNG_BYTES):
    return client.post(
        f"/api/products/{product_id}/images",
        headers=headers,
        files={"image": (filename, content, "image/png")},
    )


class TestCatalog:
    def test_list_is_public(self, client, seeded):
        response = client.get("/api/products")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Linen Shirt"]

    def test_search(self, client, seeded):
        assert len(client.get("/api/products", params={"search": "linen"}).json()) == 1
        assert client.get("/api/products", params={"search": "boots"}).json() == []

    def test_get_missing(self, client, seeded):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}


class TestAdminProducts:
    def test_create_requires_admin(self, client, seeded, owner_headers):
        body = {"name": "Canvas Tote", "price": 12.5}

        assert client.post("/api/products", json=body).status_code == 401
        assert client.post("/api/products", json=body, headers=owner_headers).status_code == 403

    def test_create(self, client, seeded, admin_headers):
        response = client.post(
            "/api/products",
            headers=admin_headers,
            json={"name": "Canvas Tote", "price": 12.5, "stock": 3},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Canvas Tote"
        assert body["price"] == 12.5
        assert body["images"] == []

    def test_create_rejects_negative_price(self, client, seeded, admin_headers):
        response = client.post("/api/products", headers=admin_headers, json={"name": "x", "price": -1})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_partial_update(self, client, seeded, admin_headers):
        response = client.put("/api/products/7", headers=admin_headers, json={"stock": 0})

        assert response.status_code == 200
        assert response.json()["stock"] == 0
        assert response.json()["name"] == "Linen Shirt"

    def test_soft_delete(self, client, seeded, admin_headers, db_session):
        response = client.delete("/api/products/7", headers=admin_headers)

        assert response.status_code == 204
        assert client.get("/api/products/7").status_code == 404
        db_session.expire_all()
        product = db_session.get(Product, 7)
        assert product is not None
        assert product.is_active is False


class TestProductImages:
    def test_cloudinary_not_configured(self, client, seeded, admin_headers):
        response = _upload(client, admin_headers)

        assert response.status_code == 503
        assert response.json() == {"error": "Cloudinary service not available"}

    def test_first_upload_is_primary(self, client, seeded, admin_headers, cloudinary_fake):
        first = _upload(client, admin_headers)
        second = _upload(client, admin_headers, filename="shirt-back.jpg", content=JPEG_BYTES)

        assert first.status_code == 201
        assert first.json()["is_primary"] is True
        assert second.json()["is_primary"] is False
        assert len(cloudinary_fake.uploaded) == 2

    @pytest.mark.parametrize("filename,content", [
        ("notes.txt", PNG_BYTES),
        ("shirt.png", b"definitely not an image"),
    ])
    def test_rejects_non_images(self, client, seeded, admin_headers, cloudinary_fake, filename, content):
        response = _upload(client, admin_headers, filename=filename, content=content)

        assert response.status_code == 400
        assert cloudinary_fake.uploaded == []

    def test_upload_requires_admin(self, client, seeded, owner_headers, cloudinary_fake):
        assert _upload(client, owner_headers).status_code == 403

    def test_deleting_primary_promotes_next(self, client, seeded, admin_headers, cloudinary_fake, db_session):
        first = _upload(client, admin_headers).json()
        second = _upload(client, admin_headers).json()

        response = client.delete(f"/api/products/7/images/{first['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Image deleted successfully"}
        assert cloudinary_fake.deleted == [first["public_id"]]
        db_session.expire_all()
        assert db_session.get(ProductImage, first["id"]) is None
        assert db_session.get(ProductImage, second["id"]).is_primary is True

    def test_set_primary(self, client, seeded, admin_headers, cloudinary_fake):
        first = _upload(client, admin_headers).json()
        second = _upload(client, admin_headers).json()

        response = client.put(f"/api/products/7/images/{second['id']}/primary", headers=admin_headers)

        assert response.status_code == 200
        images = {i["id"]: i["is_primary"] for i in client.get("/api/products/7").json()["images"]}
        assert images == {first["id"]: False, second["id"]: True}

    def test_image_of_other_product(self, client, seeded, admin_headers, cloudinary_fake):
        image = _upload(client, admin_headers).json()

        response = client.put(f"/api/products/8/images/{image['id']}/primary", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Image not found"}

    def test_asset_kept_when_delete_is_not_committed(
        self, client, seeded, admin_headers, cloudinary_fake, db_session, monkeypatch
    ):
        image = _upload(client, admin_headers).json()

        def failing_commit(db, action):
            db.rollback()
            raise InternalError(f"Failed {action}")

        monkeypatch.setattr(products_router, "_commit", failing_commit)

        response = client.delete(f"/api/products/7/images/{image['id']}", headers=admin_headers)

        assert response.status_code == 500
        assert cloudinary_fake.deleted == []
        db_session.expire_all()
        assert db_session.get(ProductImage, image["id"]).public_id == image["public_id"]

    def test_upload_runs_off_the_event_loop(self, client, seeded, admin_headers, cloudinary_fake):
        # FastAPI sends sync endpoints to the threadpool
        assert not inspect.iscoroutinefunction(products_router.upload_product_image)

        response = _upload(client, admin_headers, content=PNG_BYTES + b"\x01\x02")

        assert response.status_code == 201
        assert cloudinary_fake.uploaded == ["products/product_7_0"]
