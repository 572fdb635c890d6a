"""Tests for catalog API endpoints."""

from fastapi.testclient import TestClient

from storefront.main import create_app
from tests.fakes import FakeCatalogProvider


class TestListBrands:
    """Tests for GET /catalog/brands."""

    def test_brand_forest(self, client: TestClient) -> None:
        """Brands are returned with nested motorcycles."""
        response = client.get("/catalog/brands")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["empty"] is False
        assert data["degraded"] is False
        honda = data["brands"][0]
        assert honda["name"] == "Honda"
        assert honda["product_count"] == 120
        assert [c["name"] for c in honda["children"]] == ["CB150R", "CBR150"]

    def test_empty_catalog(self) -> None:
        """No categories is reported as the empty state."""
        with TestClient(create_app(provider=FakeCatalogProvider(categories=[]))) as client:
            data = client.get("/catalog/brands").json()
        assert data["brands"] == []
        assert data["empty"] is True

    def test_degraded_catalog(self, provider: FakeCatalogProvider) -> None:
        """Provider failure serves placeholder brands marked degraded."""
        provider.fail_categories = True
        with TestClient(create_app(provider=provider)) as client:
            data = client.get("/catalog/brands").json()
        assert data["degraded"] is True
        assert data["brands"][0]["id"] == "placeholder-honda"


class TestListCategories:
    """Tests for GET /catalog/categories."""

    def test_flattened(self, client: TestClient) -> None:
        """Categories are listed in pre-order with parent ids."""
        data = client.get("/catalog/categories").json()

        assert data["total"] == 6
        assert [(c["name"], c["parent_id"]) for c in data["categories"]] == [
            ("Honda", None),
            ("CB150R", "1"),
            ("CBR150", "1"),
            ("Yamaha", None),
            ("NMAX", "4"),
            ("R15", "4"),
        ]
        assert data["categories"][0]["children"] == []


class TestSearch:
    """Tests for GET /catalog/search."""

    def test_buckets(self, client: TestClient) -> None:
        """Each entity type lands in its own bucket."""
        data = client.get("/catalog/search", params={"q": "Honda"}).json()

        assert data["term"] == "honda"
        assert [b["name"] for b in data["brands"]] == ["Honda"]
        assert data["motorcycles"] == []
        assert [p["name"] for p in data["products"]] == ["Oil Filter"]
        assert data["total"] == 2

    def test_motorcycle_parent(self, client: TestClient) -> None:
        """Motorcycle matches carry their brand."""
        data = client.get("/catalog/search", params={"q": "r15"}).json()
        assert data["motorcycles"][0]["parent_name"] == "Yamaha"

    def test_empty_term(self, client: TestClient) -> None:
        """An empty term returns no results."""
        data = client.get("/catalog/search").json()
        assert data["total"] == 0
        assert data["brands"] == [] and data["motorcycles"] == [] and data["products"] == []


class TestCategoryProducts:
    """Tests for GET /catalog/categories/{id}/products."""

    def test_products(self, client: TestClient) -> None:
        """Products of the category are listed with string prices."""
        response = client.get("/catalog/categories/2/products")

        assert response.status_code == 200
        data = response.json()
        assert data["category"]["name"] == "CBR150"
        assert data["total"] == 1
        assert data["products"][0]["price"] == "12.50"

    def test_unknown_category(self, client: TestClient) -> None:
        """Unknown categories return 404 in the error envelope."""
        response = client.get("/catalog/categories/nope/products")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "CATEGORY_NOT_FOUND"
        assert data["details"]["category_id"] == "nope"
        assert data["request_id"] == response.headers["X-Request-ID"]


class TestRefresh:
    """Tests for POST /catalog/refresh."""

    def test_refresh_picks_up_new_data(
        self, client: TestClient, provider: FakeCatalogProvider
    ) -> None:
        """Refreshing republishes the provider's current categories."""
        provider.categories = provider.categories[:2]

        data = client.post("/catalog/refresh").json()

        assert data["total"] == 1
        assert client.get("/catalog/categories").json()["total"] == 2

    def test_refresh_failure_keeps_data(
        self, client: TestClient, provider: FakeCatalogProvider
    ) -> None:
        """A failed refresh keeps serving the last catalog."""
        provider.fail_categories = True

        data = client.post("/catalog/refresh").json()

        assert data["degraded"] is True
        assert data["total"] == 2
