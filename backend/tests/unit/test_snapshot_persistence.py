"""Unit tests for SnapshotPersistence and the snapshot codec."""

import json
from datetime import datetime, timezone

import pytest

from app.application.services import ProductService, ProductStore, SnapshotPersistence
from app.application.services.snapshot_persistence import decode, encode
from app.domain.entities import DEFAULT_VARIANT, Product
from app.domain.exceptions import ParseFailureError, PersistenceFailureError


def _collection() -> list[Product]:
    created = datetime(2024, 5, 1, 9, 30, 15, 123456, tzinfo=timezone.utc)
    return [
        Product(id="product-1", name="Plain", content="<p>a</p>", created_at=created),
        Product(
            id="product-2",
            name="With variants",
            content="<h1>b</h1>",
            variants={"mobile": "<h2>b</h2>", "sale": ""},
            created_at=created,
            updated_at=datetime(2024, 5, 2, tzinfo=timezone.utc),
        ),
        Product(id="product-3", name="", content="", variants={}, created_at=created),
    ]


# ── Codec ────────────────────────────────────────────────────────────

def test_round_trip_preserves_every_field():
    collection = _collection()

    restored = decode(encode(collection))

    assert restored == collection
    assert restored[0].updated_at is None
    assert restored[0].variants is None
    assert restored[2].variants == {}


def test_wire_format_uses_storage_field_names():
    data = json.loads(encode(_collection()))

    assert set(data[0]) == {"id", "name", "html", "createdAt"}
    assert set(data[1]) == {"id", "name", "html", "versions", "createdAt", "updatedAt"}
    assert data[1]["html"] == "<h1>b</h1>"
    assert data[1]["versions"] == {"mobile": "<h2>b</h2>", "sale": ""}


def test_decode_rejects_garbage():
    with pytest.raises(ParseFailureError):
        decode("{not json")
    with pytest.raises(ParseFailureError):
        decode('{"id": "x"}')
    with pytest.raises(ParseFailureError):
        decode('[{"id": "x", "name": "n"}]')


# ── save / load ──────────────────────────────────────────────────────

async def test_save_then_load(persistence: SnapshotPersistence, slot):
    await persistence.save(_collection())

    loaded = await persistence.load()

    assert loaded.warning is None
    assert loaded.products == _collection()
    assert slot.writes == 1


async def test_load_absent_slot_is_empty(persistence: SnapshotPersistence):
    loaded = await persistence.load()

    assert loaded.products == []
    assert loaded.warning is None


async def test_load_corrupt_slot_starts_empty_and_keeps_a_copy(
    persistence: SnapshotPersistence, slot
):
    slot.data[persistence.key] = "[{broken"

    loaded = await persistence.load()

    assert loaded.products == []
    assert loaded.warning is not None
    backups = [k for k in slot.data if k.startswith(f"{persistence.key}.corrupt-")]
    assert len(backups) == 1
    assert slot.data[backups[0]] == "[{broken"
    assert backups[0] in loaded.warning


async def test_load_read_error_is_a_persistence_failure(persistence, slot):
    slot.fail_reads = True

    with pytest.raises(PersistenceFailureError) as excinfo:
        await persistence.load()

    assert excinfo.value.operation == "read"


async def test_save_write_error_is_a_persistence_failure(persistence, slot):
    slot.fail_writes = True

    with pytest.raises(PersistenceFailureError) as excinfo:
        await persistence.save(_collection())

    assert excinfo.value.operation == "write"
    assert persistence.key not in slot.data


async def test_save_is_bounded_by_timeout(slot):
    slot.write_delay = 1.0
    persistence = SnapshotPersistence(slot, key="products", timeout_seconds=0.05)

    with pytest.raises(PersistenceFailureError, match="timed out"):
        await persistence.save(_collection())


async def test_last_write_wins(persistence: SnapshotPersistence):
    first, second = _collection()[:1], _collection()

    await persistence.save(first)
    await persistence.save(second)

    assert (await persistence.load()).products == second


# ── Restart scenario ─────────────────────────────────────────────────

async def test_content_survives_a_restart(persistence: SnapshotPersistence):
    service = ProductService(ProductStore(), persistence)
    product = await service.create_product()
    assert product.content != "<h1>x</h1>"

    await service.set_product_content(product.id, DEFAULT_VARIANT, "<h1>x</h1>")

    restarted = await ProductService.open(persistence)
    reloaded = restarted.get_product(product.id)
    assert reloaded.content == "<h1>x</h1>"
    assert reloaded == service.get_product(product.id)


# ── Decoding stored records ──────────────────────────────────────────

def test_decode_reads_offsetless_timestamps_as_utc():
    restored = decode(
        '[{"id": "a", "name": "A", "html": "x",'
        ' "createdAt": "2024-01-01T00:00:00", "updatedAt": "2024-01-02T00:00:00"}]'
    )

    assert restored[0].created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert restored[0].updated_at == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_decode_restores_record_invariants():
    restored = decode(
        '[{"id": "a", "name": "A", "html": "main",'
        ' "versions": {"default": "shadow", "mobile": "m"},'
        ' "createdAt": "2024-03-01T00:00:00Z", "updatedAt": "2024-01-01T00:00:00Z"}]'
    )[0]

    assert restored.variants == {"mobile": "m"}
    assert restored.read(DEFAULT_VARIANT) == "main"
    assert restored.updated_at == restored.created_at
