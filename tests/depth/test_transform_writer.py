from __future__ import annotations

import numpy as np

from spritelayer.core.scene import SceneGraph
from spritelayer.core.transform import GlobalTransform, Transform
from spritelayer.depth.assigner import DepthMap
from spritelayer.depth.writer import DepthManaged, TransformWriter


def _depths(pairs) -> DepthMap:
    entities = [e for e, _ in pairs]
    return DepthMap(entities, np.array([z for _, z in pairs], dtype=np.float32))


def test_writes_only_depth_component(scene: SceneGraph) -> None:
    m = Transform(translation=(4, 8, 1), rotation=0.5, scale=(2, 3, 1)).compute_matrix()
    e = scene.spawn(GlobalTransform(m))
    report = TransformWriter().apply(_depths([(e, 12.5)]), scene)

    gt = scene.get(e, GlobalTransform)
    assert gt is not None
    expected = m.copy()
    expected[2, 3] = 12.5
    np.testing.assert_array_equal(gt.matrix, expected)
    assert report.written == 1
    assert scene.has(e, DepthManaged)


def test_write_bypasses_change_detection(scene: SceneGraph) -> None:
    e = scene.spawn(GlobalTransform())
    scene.clear_changed()
    TransformWriter().apply(_depths([(e, 3.0)]), scene)
    assert scene.changed(GlobalTransform) == frozenset()


def test_missing_transform_is_skipped(scene: SceneGraph) -> None:
    bare = scene.spawn()
    gone = scene.spawn(GlobalTransform())
    scene.despawn(gone)
    report = TransformWriter().apply(_depths([(bare, 1.0), (gone, 2.0)]), scene)
    assert report.written == 0
    assert report.skipped == 2
    assert not scene.has(bare, DepthManaged)


def test_stale_depth_is_cleared(scene: SceneGraph) -> None:
    a = scene.spawn(GlobalTransform())
    b = scene.spawn(GlobalTransform())
    writer = TransformWriter()
    writer.apply(_depths([(a, 5.0), (b, 6.0)]), scene)

    report = writer.apply(_depths([(b, 7.0)]), scene)
    gt_a = scene.get(a, GlobalTransform)
    gt_b = scene.get(b, GlobalTransform)
    assert gt_a is not None and gt_b is not None
    assert gt_a.z == 0.0
    assert gt_b.z == 7.0
    assert not scene.has(a, DepthManaged)
    assert report.cleared == 1


def test_custom_baseline(scene: SceneGraph) -> None:
    a = scene.spawn(GlobalTransform())
    writer = TransformWriter(baseline=-1.0)
    writer.apply(_depths([(a, 5.0)]), scene)
    writer.apply(_depths([]), scene)
    gt = scene.get(a, GlobalTransform)
    assert gt is not None and gt.z == -1.0
