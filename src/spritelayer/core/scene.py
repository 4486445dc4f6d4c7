"""
どこで: `spritelayer.core` のシーンストア（ホスト側）。
何を: エンティティのアリーナ割り当て、型別コンポーネント格納、親子階層、変更検知を提供する。
なぜ: 深度エンジンが読むデータ（階層/レイヤー/ワールド変換）を 1 か所で所有し、
      エンジン側はスナップショット経由の読み取りと「変更検知を通さない直接書き込み」だけを行うため。

設計メモ:
- `Entity` は `(index, generation)`。despawn 後に index は再利用されるが generation が進むため、
  古いハンドルが新しいエンティティを指すことはない。
- コンポーネントは Python の型をキーに格納する（1 エンティティにつき型ごとに 1 個）。
- `get_mut` は変更マークを付ける。`bypass_change_detection` は付けない（描画専用の書き込み向け）。
- 構造変更は `snapshot_hierarchy()` 以降のスナップショットには反映されない。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, NamedTuple, TypeVar

T = TypeVar("T")


class Entity(NamedTuple):
    """シーン内オブジェクトの不透明ハンドル。"""

    index: int
    generation: int

    def __repr__(self) -> str:
        return f"Entity({self.index}v{self.generation})"


@dataclass(frozen=True)
class HierarchySnapshot:
    """1 フレーム分の親子関係の読み取り専用ビュー。"""

    parents: Mapping[Entity, Entity]
    children: Mapping[Entity, tuple[Entity, ...]]
    roots: tuple[Entity, ...]
    alive: frozenset[Entity]

    def children_of(self, entity: Entity) -> tuple[Entity, ...]:
        return self.children.get(entity, ())

    def __contains__(self, entity: object) -> bool:
        return entity in self.alive

    @classmethod
    def from_edges(
        cls,
        entities: "list[Entity] | tuple[Entity, ...]",
        edges: "list[tuple[Entity, Entity]] | tuple[tuple[Entity, Entity], ...]",
    ) -> "HierarchySnapshot":
        """(parent, child) の辺リストから組み立てる。整合性は検査しない。"""
        parents: dict[Entity, Entity] = {}
        children: dict[Entity, list[Entity]] = {}
        for parent, child in edges:
            parents[child] = parent
            children.setdefault(parent, []).append(child)
        roots = tuple(e for e in entities if e not in parents)
        return cls(
            parents=parents,
            children={k: tuple(v) for k, v in children.items()},
            roots=roots,
            alive=frozenset(entities),
        )


class SceneGraph:
    """エンティティ・コンポーネント・階層を保持する最小のシーンストア。"""

    def __init__(self) -> None:
        self._generations: list[int] = []
        self._alive: list[bool] = []
        self._free: list[int] = []
        self._components: dict[type, dict[Entity, Any]] = {}
        self._changed: dict[type, set[Entity]] = {}
        self._parent: dict[Entity, Entity] = {}
        self._children: dict[Entity, list[Entity]] = {}

    # ---- entities ------------------------------------------------------
    def spawn(self, *components: Any, parent: Entity | None = None) -> Entity:
        """新規エンティティを割り当て、コンポーネントと親を設定して返す。"""
        if self._free:
            index = self._free.pop()
            self._alive[index] = True
        else:
            index = len(self._generations)
            self._generations.append(0)
            self._alive.append(True)
        entity = Entity(index, self._generations[index])
        if components:
            self.insert(entity, *components)
        if parent is not None:
            self.set_parent(entity, parent)
        return entity

    def despawn(self, entity: Entity, *, recursive: bool = True) -> None:
        """エンティティを破棄する。

        `recursive=False` の場合、子は親を失ってルートになる。
        """
        self._require(entity)
        if recursive:
            for child in list(self._children.get(entity, ())):
                self.despawn(child, recursive=True)
        else:
            for child in list(self._children.get(entity, ())):
                self._parent.pop(child, None)
        self._children.pop(entity, None)
        old_parent = self._parent.pop(entity, None)
        if old_parent is not None:
            siblings = self._children.get(old_parent)
            if siblings is not None and entity in siblings:
                siblings.remove(entity)
        for store in self._components.values():
            store.pop(entity, None)
        for changed in self._changed.values():
            changed.discard(entity)
        self._alive[entity.index] = False
        self._generations[entity.index] += 1
        self._free.append(entity.index)

    def is_alive(self, entity: Entity) -> bool:
        i = entity.index
        return (
            0 <= i < len(self._generations)
            and self._alive[i]
            and self._generations[i] == entity.generation
        )

    def entities(self) -> Iterator[Entity]:
        """生存中のエンティティを index 昇順で返す。"""
        for i, alive in enumerate(self._alive):
            if alive:
                yield Entity(i, self._generations[i])

    def __len__(self) -> int:
        return sum(1 for a in self._alive if a)

    def _require(self, entity: Entity) -> None:
        if not self.is_alive(entity):
            raise KeyError(f"Unknown or despawned entity: {entity!r}")

    # ---- components ----------------------------------------------------
    def insert(self, entity: Entity, *components: Any) -> None:
        """コンポーネントを追加/置換し、型ごとに変更マークを付ける。"""
        self._require(entity)
        for comp in components:
            ctype = type(comp)
            self._components.setdefault(ctype, {})[entity] = comp
            self._changed.setdefault(ctype, set()).add(entity)

    def remove(self, entity: Entity, component_type: type[T]) -> T | None:
        self._require(entity)
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.pop(entity, None)

    def get(self, entity: Entity, component_type: type[T]) -> T | None:
        """コンポーネントを返す（無い/破棄済みなら None）。"""
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.get(entity)

    def has(self, entity: Entity, component_type: type) -> bool:
        store = self._components.get(component_type)
        return store is not None and entity in store

    def get_mut(self, entity: Entity, component_type: type[T]) -> T | None:
        """可変参照として取得し、変更マークを付ける。"""
        comp = self.get(entity, component_type)
        if comp is not None:
            self._changed.setdefault(component_type, set()).add(entity)
        return comp

    def bypass_change_detection(self, entity: Entity, component_type: type[T]) -> T | None:
        """変更マークを付けずにコンポーネントを取得する（直接書き込み用）。

        描画専用の値（深度など）を書き換える際に、下流の変更監視へ「意味のある移動」
        として伝わらないようにするための明示的な経路。
        """
        return self.get(entity, component_type)

    def query(self, component_type: type[T]) -> Iterator[tuple[Entity, T]]:
        store = self._components.get(component_type)
        if not store:
            return iter(())
        return iter(list(store.items()))

    def changed(self, component_type: type) -> frozenset[Entity]:
        return frozenset(self._changed.get(component_type, ()))

    def clear_changed(self, component_type: type | None = None) -> None:
        if component_type is None:
            self._changed.clear()
        else:
            self._changed.pop(component_type, None)

    # ---- hierarchy -----------------------------------------------------
    def set_parent(self, child: Entity, parent: Entity | None) -> None:
        """親を付け替える。循環を作る付け替えは `ValueError`。"""
        self._require(child)
        if parent is not None:
            self._require(parent)
            cur: Entity | None = parent
            while cur is not None:
                if cur == child:
                    raise ValueError(f"Parenting {child!r} under {parent!r} would create a cycle")
                cur = self._parent.get(cur)
        old = self._parent.pop(child, None)
        if old is not None:
            siblings = self._children.get(old)
            if siblings is not None and child in siblings:
                siblings.remove(child)
        if parent is not None:
            self._parent[child] = parent
            self._children.setdefault(parent, []).append(child)

    def parent_of(self, entity: Entity) -> Entity | None:
        return self._parent.get(entity)

    def children_of(self, entity: Entity) -> tuple[Entity, ...]:
        return tuple(self._children.get(entity, ()))

    def roots(self) -> tuple[Entity, ...]:
        return tuple(e for e in self.entities() if e not in self._parent)

    def snapshot_hierarchy(self) -> HierarchySnapshot:
        """現時点の親子関係を不変ビューとして切り出す。"""
        alive = frozenset(self.entities())
        return HierarchySnapshot(
            parents=dict(self._parent),
            children={p: tuple(cs) for p, cs in self._children.items() if cs},
            roots=self.roots(),
            alive=alive,
        )


__all__ = ["Entity", "HierarchySnapshot", "SceneGraph"]
