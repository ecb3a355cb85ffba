"""Unit tests for the in-memory ProductStore."""

import pytest

from app.application.services import ProductStore
from app.domain.entities import DEFAULT_VARIANT, NEW_PRODUCT_HTML, Product
from app.domain.exceptions import EmptyIdError, EntityNotFoundError, IdConflictError


def _ids(products: list[Product]) -> list[str]:
    return [p.id for p in products]


# ── create ───────────────────────────────────────────────────────────

def test_create_returns_template_product(store: ProductStore):
    product = store.create()

    assert product.id.startswith("product-")
    assert product.content == NEW_PRODUCT_HTML
    assert product.variants is None
    assert product.updated_at is None
    assert store.get(product.id) is product


def test_rapid_creates_never_share_an_id(store: ProductStore):
    ids = [store.create().id for _ in range(200)]

    assert len(set(ids)) == 200
    assert len(store) == 200


def test_create_skips_ids_already_taken(store: ProductStore):
    first = store.create()
    stamp = int(first.id.split("-")[1])
    store.replace_all([*store.snapshot(), Product(id=f"product-{stamp + 1}")])

    created = store.create()

    assert created.id not in {first.id, f"product-{stamp + 1}"}
    assert len(set(_ids(store.list_all()))) == 3


def test_creates_and_id_changes_keep_ids_unique(store: ProductStore):
    a = store.create()
    b = store.create()
    c = store.create()

    store.change_id(a.id, "shared")
    with pytest.raises(IdConflictError):
        store.change_id(b.id, "shared")
    store.change_id(c.id, "other")
    store.create()

    ids = _ids(store.list_all())
    assert len(ids) == len(set(ids)) == 4


# ── change_id ────────────────────────────────────────────────────────

def test_change_id_to_empty_is_rejected(store: ProductStore):
    product = store.create()
    before = store.snapshot()

    with pytest.raises(EmptyIdError):
        store.change_id(product.id, "   ")

    assert store.snapshot() == before


def test_change_id_to_existing_id_is_rejected(store: ProductStore):
    a = store.create()
    b = store.create()
    before = store.snapshot()

    with pytest.raises(IdConflictError) as excinfo:
        store.change_id(a.id, b.id)

    assert excinfo.value.current_id == a.id
    assert store.snapshot() == before


def test_change_id_to_same_id_is_a_no_op(store: ProductStore):
    product = store.create()

    result = store.change_id(product.id, product.id)

    assert result is product
    assert product.updated_at is None


def test_change_id_rekeys_and_stamps(store: ProductStore):
    product = store.create()
    old_id = product.id

    store.change_id(old_id, "  banner-1  ")

    assert store.get(old_id) is None
    assert store.get("banner-1") is product
    assert product.id == "banner-1"
    assert product.updated_at is not None
    assert product.updated_at >= product.created_at


def test_change_id_unknown_product(store: ProductStore):
    with pytest.raises(EntityNotFoundError):
        store.change_id("missing", "new")


# ── content, rename, delete ──────────────────────────────────────────

def test_set_content_default_variant(store: ProductStore):
    product = store.create()

    store.set_content(product.id, DEFAULT_VARIANT, "<h1>x</h1>")

    assert product.content == "<h1>x</h1>"
    assert product.variants is None
    assert product.updated_at is not None


def test_set_content_named_variant_creates_mapping(store: ProductStore):
    product = store.create()

    store.set_content(product.id, "mobile", "<p>small</p>")

    assert product.variants == {"mobile": "<p>small</p>"}
    assert product.content == NEW_PRODUCT_HTML
    assert store.get_content(product.id, "mobile") == "<p>small</p>"
    assert store.get_content(product.id, "desktop") == ""
    assert store.variant_names(product.id) == ["default", "mobile"]


def test_set_content_accepts_empty_body(store: ProductStore):
    product = store.create()

    store.set_content(product.id, DEFAULT_VARIANT, "")

    assert product.content == ""


def test_rename_allows_duplicate_names(store: ProductStore):
    a = store.create()
    b = store.create()

    store.rename(a.id, "Same")
    store.rename(b.id, "Same")

    assert a.name == b.name == "Same"
    assert a.updated_at is not None


def test_delete_is_idempotent(store: ProductStore):
    product = store.create()

    assert store.delete(product.id) is True
    assert store.delete(product.id) is False
    assert store.get(product.id) is None


# ── ordering & search ────────────────────────────────────────────────

def test_list_orders_ids_numerically():
    store = ProductStore([Product(id="product-10"), Product(id="product-2"), Product(id="product-1")])

    assert _ids(store.list_all()) == ["product-1", "product-2", "product-10"]


def test_list_mixes_text_and_numbers():
    store = ProductStore([Product(id="b"), Product(id="A-3"), Product(id="a-20"), Product(id="7")])

    assert _ids(store.list_all()) == ["7", "A-3", "a-20", "b"]


def test_search_matches_id_or_name_case_insensitively():
    store = ProductStore([
        Product(id="product-10", name="Summer Banner"),
        Product(id="product-2", name="winter"),
        Product(id="promo-banner", name="Other"),
    ])

    assert _ids(store.search("BANNER")) == ["product-10", "promo-banner"]
    assert _ids(store.search("duct-2")) == ["product-2"]
    assert _ids(store.search("")) == ["product-2", "product-10", "promo-banner"]
    assert store.search("nothing") == []
