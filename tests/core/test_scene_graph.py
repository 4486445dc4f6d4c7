from __future__ import annotations

import pytest

from spritelayer.core.scene import Entity, HierarchySnapshot, SceneGraph
from spritelayer.core.transform import GlobalTransform, Transform


def test_spawn_reuses_index_with_new_generation(scene: SceneGraph) -> None:
    a = scene.spawn()
    scene.despawn(a)
    b = scene.spawn()
    assert b.index == a.index
    assert b.generation == a.generation + 1
    assert not scene.is_alive(a)
    assert scene.is_alive(b)
    with pytest.raises(KeyError):
        scene.insert(a, Transform())


def test_components_by_type(scene: SceneGraph) -> None:
    e = scene.spawn(Transform.from_xyz(1, 2))
    assert scene.has(e, Transform)
    assert scene.get(e, GlobalTransform) is None
    removed = scene.remove(e, Transform)
    assert isinstance(removed, Transform)
    assert not scene.has(e, Transform)
    assert [ent for ent, _ in scene.query(Transform)] == []


def test_get_mut_marks_changed_but_bypass_does_not(scene: SceneGraph) -> None:
    e = scene.spawn(GlobalTransform())
    scene.clear_changed()

    gt = scene.bypass_change_detection(e, GlobalTransform)
    assert gt is not None
    gt.set_depth(3.0)
    assert scene.changed(GlobalTransform) == frozenset()

    scene.get_mut(e, GlobalTransform)
    assert scene.changed(GlobalTransform) == frozenset({e})


def test_set_parent_rejects_cycles(scene: SceneGraph) -> None:
    a = scene.spawn()
    b = scene.spawn(parent=a)
    c = scene.spawn(parent=b)
    with pytest.raises(ValueError):
        scene.set_parent(a, c)
    assert scene.children_of(a) == (b,)
    assert scene.roots() == (a,)


def test_reparent_moves_child(scene: SceneGraph) -> None:
    a = scene.spawn()
    b = scene.spawn()
    c = scene.spawn(parent=a)
    scene.set_parent(c, b)
    assert scene.children_of(a) == ()
    assert scene.children_of(b) == (c,)
    assert scene.parent_of(c) == b
    scene.set_parent(c, None)
    assert c in scene.roots()


def test_despawn_recursive_and_orphaning(scene: SceneGraph) -> None:
    a = scene.spawn()
    b = scene.spawn(parent=a)
    c = scene.spawn(parent=b)
    scene.despawn(b, recursive=False)
    assert scene.is_alive(c)
    assert scene.parent_of(c) is None
    assert scene.children_of(a) == ()

    d = scene.spawn(parent=a)
    scene.despawn(a)
    assert not scene.is_alive(d)
    assert len(scene) == 1


def test_snapshot_ignores_later_structural_changes(scene: SceneGraph) -> None:
    a = scene.spawn()
    b = scene.spawn(parent=a)
    snap = scene.snapshot_hierarchy()
    c = scene.spawn(parent=a)
    scene.set_parent(b, None)
    assert snap.children_of(a) == (b,)
    assert c not in snap
    assert snap.roots == (a,)


def test_snapshot_from_edges() -> None:
    a, b, c = Entity(0, 0), Entity(1, 0), Entity(2, 0)
    snap = HierarchySnapshot.from_edges([a, b, c], [(a, b), (b, c)])
    assert snap.roots == (a,)
    assert snap.children_of(b) == (c,)
    assert snap.children_of(c) == ()
