"""
どこで: `spritelayer.depth` のレイヤー解決。
何を: 明示レイヤー値を親子階層に沿って子孫へ継承させ、実効レイヤー表 `EffectiveLayerMap` を作る。
なぜ: 子に個別のレイヤーを付けなくても、最も近い祖先のレイヤーで描画されるようにするため。

アルゴリズム:
- 各ルートから、`(entity, inherited)` の明示スタックで前順 DFS（再帰なし）。
- 明示値があればそれが自分と部分木の値になる。無ければ親から受け取った値を使う。
- 値が定まったノードはすべて登録する（変換を持たないノードも含む。継承はそこを通過する）。
- ルートに値が無ければ何も伝播しない。
- スナップショットに存在しないエンティティへの辺はスキップ（DEBUG ログ）。
- 2 度目に到達したノード（循環や共有された子）は部分木ごとスキップ（ERROR ログ）。
"""

from __future__ import annotations

import logging
from typing import Generic, Iterable, Iterator, Mapping, TypeVar

from ..core.scene import Entity, HierarchySnapshot, SceneGraph

L = TypeVar("L")

logger = logging.getLogger(__name__)


class EffectiveLayerMap(Generic[L]):
    """エンティティ → 実効レイヤー の表（DFS 到達順を保持）。"""

    __slots__ = ("entities", "layers", "_index")

    def __init__(self, entities: list[Entity], layers: list[L]) -> None:
        if len(entities) != len(layers):
            raise ValueError("entities and layers must have the same length")
        self.entities = entities
        self.layers = layers
        self._index: dict[Entity, int] = {e: i for i, e in enumerate(entities)}

    def __len__(self) -> int:
        return len(self.entities)

    def __contains__(self, entity: object) -> bool:
        return entity in self._index

    def __getitem__(self, entity: Entity) -> L:
        return self.layers[self._index[entity]]

    def get(self, entity: Entity, default: L | None = None) -> L | None:
        i = self._index.get(entity)
        return default if i is None else self.layers[i]

    def items(self) -> Iterator[tuple[Entity, L]]:
        return zip(self.entities, self.layers)

    def as_dict(self) -> dict[Entity, L]:
        return dict(self.items())


class LayerResolver(Generic[L]):
    """フレームごとに実効レイヤー表を作り直す。前フレームの件数を容量ヒントとして保持する。"""

    def __init__(self) -> None:
        self._capacity_hint = 0

    @property
    def capacity_hint(self) -> int:
        return self._capacity_hint

    def resolve(
        self,
        roots: Iterable[Entity],
        hierarchy: HierarchySnapshot,
        explicit_layers: Mapping[Entity, L],
    ) -> EffectiveLayerMap[L]:
        hint = self._capacity_hint
        entities: list = [None] * hint
        layers: list = [None] * hint
        count = 0

        visited: set[Entity] = set()
        missing = 0
        revisited = 0
        stack: list[tuple[Entity, L | None]] = [(r, None) for r in reversed(tuple(roots))]
        while stack:
            entity, inherited = stack.pop()
            if entity not in hierarchy:
                missing += 1
                continue
            if entity in visited:
                if revisited == 0:
                    logger.error(
                        "entity %r reached twice while propagating layers "
                        "(hierarchy cycle or shared child); skipping its subtree",
                        entity,
                    )
                revisited += 1
                continue
            visited.add(entity)

            current = explicit_layers.get(entity)
            if current is None:
                current = inherited
            if current is not None:
                if count < hint:
                    entities[count] = entity
                    layers[count] = current
                else:
                    entities.append(entity)
                    layers.append(current)
                count += 1

            for child in reversed(hierarchy.children_of(entity)):
                stack.append((child, current))

        del entities[count:]
        del layers[count:]
        self._capacity_hint = count
        if missing:
            logger.debug("skipped %d hierarchy edge(s) to unknown entities", missing)
        if revisited > 1:
            logger.debug("skipped %d repeated visit(s) in total", revisited)
        return EffectiveLayerMap(entities, layers)


def resolve_layers(
    scene: SceneGraph,
    layer_type: type[L],
    resolver: LayerResolver[L] | None = None,
) -> EffectiveLayerMap[L]:
    """`SceneGraph` から入力を組み立てて解決する便利関数。"""
    if resolver is None:
        resolver = LayerResolver()
    hierarchy = scene.snapshot_hierarchy()
    explicit = dict(scene.query(layer_type))
    return resolver.resolve(hierarchy.roots, hierarchy, explicit)


__all__ = ["EffectiveLayerMap", "LayerResolver", "resolve_layers"]
