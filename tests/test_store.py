from __future__ import annotations

import pytest

from pystatetree import MemoryTreeStore, NodeDescriptor, TreeStoreError, ValueType


@pytest.mark.asyncio
async def test_container_is_set_if_missing() -> None:
    store = MemoryTreeStore()
    await store.create_or_update_node("car", NodeDescriptor.container("Car"))
    await store.create_or_update_node("car", NodeDescriptor.container("Other"))

    assert store.nodes["car"].name == "Car"
    assert store.created == ["car"]
    assert store.updated == []


@pytest.mark.asyncio
async def test_leaf_update_extends_labels() -> None:
    store = MemoryTreeStore()
    await store.create_or_update_node("car.gear", NodeDescriptor.leaf("gear", ValueType.STRING, labels={"P": "Park"}))
    await store.create_or_update_node(
        "car.gear", NodeDescriptor.leaf("gear", ValueType.STRING, labels={"P": "Parked", "D": "Drive"})
    )

    assert store.nodes["car.gear"].labels == {"P": "Park", "D": "Drive"}
    assert store.updated == ["car.gear"]


@pytest.mark.asyncio
async def test_empty_path_is_rejected() -> None:
    store = MemoryTreeStore()
    with pytest.raises(TreeStoreError):
        await store.create_or_update_node("", NodeDescriptor.container())


@pytest.mark.asyncio
async def test_write_requires_existing_node() -> None:
    store = MemoryTreeStore()
    with pytest.raises(TreeStoreError) as excinfo:
        await store.write_value("car.speed", 5)
    assert excinfo.value.path == "car.speed"


@pytest.mark.asyncio
async def test_written_values_are_copies() -> None:
    store = MemoryTreeStore()
    await store.create_or_update_node("car.raw", NodeDescriptor.leaf("raw", ValueType.MIXED))
    value = {"a": 1}
    await store.write_value("car.raw", value, ack=False)
    value["a"] = 2

    assert store.get_value("car.raw") == {"a": 1}
    assert store.writes[0].ack is False


@pytest.mark.asyncio
async def test_delete_subtree_respects_segment_boundaries() -> None:
    store = MemoryTreeStore()
    for path in ("car", "car.speed", "car.climate.temp", "carport.door"):
        await store.create_or_update_node(path, NodeDescriptor.leaf(path, ValueType.NUMBER))

    await store.delete_subtree("car")

    assert sorted(store.nodes) == ["carport.door"]
    assert store.deleted == ["car"]
    assert not await store.node_exists("car.speed")


@pytest.mark.asyncio
async def test_children_and_nested_view() -> None:
    store = MemoryTreeStore()
    await store.create_or_update_node("car", NodeDescriptor.container())
    await store.create_or_update_node("car.climate", NodeDescriptor.container())
    for path, value in (("car.speed", 12), ("car.climate.temp", 21.5)):
        await store.create_or_update_node(path, NodeDescriptor.leaf(path, ValueType.NUMBER))
        await store.write_value(path, value)

    assert store.children("") == ["car"]
    assert store.children("car") == ["car.climate", "car.speed"]
    assert store.leaves() == {"car.climate.temp": 21.5, "car.speed": 12}
    assert store.as_nested() == {"car": {"climate": {"temp": 21.5}, "speed": 12}}
