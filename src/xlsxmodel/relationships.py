from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from xml.etree import ElementTree as ET

from .errors import InvalidRelationshipError
from .parser.namespaces import PACKAGE_REL_NS, qn
from .primitives import TARGET_MODE, TargetMode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Relationship:
    id: str
    type: str
    target: str
    mode: TargetMode = TargetMode.INTERNAL


def rels_path_for(part_path: str) -> str:
    parent, file_name = posixpath.split(part_path)
    return f"{parent}/_rels/{file_name}.rels"


class RelationshipTable:
    """Relationships of one package part, in document order.

    ``add_link`` never checks for an existing target: callers look up with
    ``get_id_by_target`` first and only create when nothing matches.
    """

    def __init__(self, part_path: str) -> None:
        self.part_path = part_path
        self._items: list[Relationship] = []
        self._next_id = 1

    @classmethod
    def from_element(cls, part_path: str, root: ET.Element) -> RelationshipTable:
        table = cls(part_path)
        for rel in root.findall(qn("Relationship", PACKAGE_REL_NS)):
            rel_id = rel.attrib.get("Id")
            target = rel.attrib.get("Target")
            if not rel_id or target is None:
                raise InvalidRelationshipError(part_path, ET.tostring(rel, encoding="unicode").strip())
            table._append(
                Relationship(
                    id=rel_id,
                    type=rel.attrib.get("Type", ""),
                    target=target,
                    mode=TARGET_MODE.get_attr(rel, "TargetMode"),
                )
            )
        return table

    @property
    def path(self) -> str:
        return rels_path_for(self.part_path)

    def get_id_by_target(self, target: str, rel_type: str | None = None) -> str | None:
        for rel in self._items:
            if rel.target == target and (rel_type is None or rel.type == rel_type):
                return rel.id
        return None

    def get_target_by_id(self, rel_id: str) -> str | None:
        for rel in self._items:
            if rel.id == rel_id:
                return rel.target
        return None

    def get(self, rel_id: str) -> Relationship | None:
        for rel in self._items:
            if rel.id == rel_id:
                return rel
        return None

    def add_link(self, rel_type: str, target: str) -> str:
        return self._add(rel_type, target, TargetMode.EXTERNAL)

    def add_relation(self, rel_type: str, target: str) -> str:
        return self._add(rel_type, target, TargetMode.INTERNAL)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def to_element(self) -> ET.Element:
        root = ET.Element(qn("Relationships", PACKAGE_REL_NS))
        for rel in self._items:
            elem = ET.SubElement(root, qn("Relationship", PACKAGE_REL_NS), Id=rel.id, Type=rel.type, Target=rel.target)
            TARGET_MODE.set_attr(elem, "TargetMode", rel.mode)
        return root

    def _add(self, rel_type: str, target: str, mode: TargetMode) -> str:
        rel = Relationship(id=f"rId{self._next_id}", type=rel_type, target=target, mode=mode)
        self._append(rel)
        logger.debug("Added relationship %s -> %s (%s) to %s", rel.id, target, rel_type, self.part_path)
        return rel.id

    def _append(self, rel: Relationship) -> None:
        self._items.append(rel)
        if rel.id.startswith("rId") and rel.id[3:].isdigit():
            self._next_id = max(self._next_id, int(rel.id[3:]) + 1)
