from __future__ import annotations

import threading

import numpy as np
import pytest

from voxgen.buffers import BufferSlot, material_buffer, voxel_buffer
from voxgen.errors import ConfigurationError
from voxgen.scene import build_cornell_box_scene


def test_material_buffer_layout() -> None:
    scene = build_cornell_box_scene()
    buf = material_buffer(scene.palette)
    assert buf.dtype == np.float32
    assert buf.shape == (16,)
    assert buf[:4].tolist() == [255.0, 0.0, 0.0, 255.0]
    assert buf[12:].tolist() == [128.0, 128.0, 128.0, 255.0]


def test_material_buffer_rejects_rgb() -> None:
    with pytest.raises(ConfigurationError):
        material_buffer([(1, 2, 3)])


def test_voxel_buffer_copies() -> None:
    obj = build_cornell_box_scene().object("sphere")
    buf = voxel_buffer(obj.voxels)
    assert buf.dtype == np.uint8
    assert buf.shape == (32 * 32 * 32,)
    buf[0] = 9
    assert obj.voxels[0] == 0


def test_slot_drops_stale_versions() -> None:
    slot: BufferSlot[str] = BufferSlot()
    assert slot.get() is None
    assert slot.publish("v2", version=2)
    assert not slot.publish("v1", version=1)
    assert slot.get() == "v2"
    assert slot.publish("v2-again", version=2)
    assert slot.serial == 2
    assert slot.latest() == (2, "v2-again")


def test_slot_concurrent_publish_keeps_newest() -> None:
    slot: BufferSlot[int] = BufferSlot()
    threads = [threading.Thread(target=slot.publish, args=(v,), kwargs={"version": v}) for v in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert slot.get() == 31
    assert slot.version == 31


def test_slot_keeps_newer_result_when_older_finishes_last() -> None:
    slot: BufferSlot[str] = BufferSlot()
    assert slot.publish("second request", version=2)
    assert not slot.publish("first request", version=1)
    assert slot.latest() == (1, "second request")
