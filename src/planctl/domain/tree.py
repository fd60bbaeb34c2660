"""Tree mutation engine over a project's ``structure`` and ``task_list``.

Every structural edit keeps three things consistent: the shape of the
tree, the materialized-path ID of every node, and the keys (and
``Task.id`` values) of the parallel ``task_list``. A task belongs to the
node whose ID equals its key; tasks with no such node are orphans and are
left untouched by structural edits.

All public operations return ``(value, DomainError | None)``.

INVARIANT: Renaming a set of nodes always stages their tasks first (pop
every affected key, then reinsert under the new keys). Renaming in place,
one node at a time, collides whenever two nodes trade IDs.
"""

from __future__ import annotations

from typing import NamedTuple

from planctl.domain.errors import DomainError
from planctl.domain.filters import JobFilter, should_hide
from planctl.domain.ids import child_id, is_within, last_segment, parent_of, rebase_id, sorted_ids
from planctl.domain.models import Estimation, Project, StructureNode, Task, empty_details
from planctl.domain.types import Direction, NodeType

INDENT = "  "


class NodeLocation(NamedTuple):
    """Where a node lives: the node, the map holding it, and its parent's ID."""

    node: StructureNode
    parent_map: dict[str, StructureNode]
    parent_id: str | None


class PlanTree:
    """Structural operations on a tree of :class:`StructureNode`.

    The tree mutates the containers it was given, so wrapping a project's
    ``structure`` and ``task_list`` edits the project in place::

        tree = PlanTree.of(project)
        new_id, err = tree.add_node(None, "Area", "Platform")
    """

    def __init__(self, structure: dict[str, StructureNode], task_list: dict[str, Task]) -> None:
        self.structure = structure
        self.task_list = task_list

    @classmethod
    def of(cls, project: Project) -> PlanTree:
        return cls(project.structure, project.task_list)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_node(self, node_id: str) -> tuple[NodeLocation | None, DomainError | None]:
        """Depth-first search for *node_id*."""
        location = self._search(self.structure, node_id, None)
        if location is None:
            return None, DomainError.not_found(f"Node not found: {node_id}", id=node_id)
        return location, None

    def _search(
        self,
        level: dict[str, StructureNode],
        node_id: str,
        parent_id: str | None,
    ) -> NodeLocation | None:
        for key in sorted_ids(level):
            node = level[key]
            if key == node_id:
                return NodeLocation(node, level, parent_id)
            found = self._search(node.subtasks, node_id, key)
            if found is not None:
                return found
        return None

    @staticmethod
    def next_sibling_number(parent_map: dict[str, StructureNode]) -> int:
        """One more than the highest trailing segment among *parent_map*'s keys."""
        return max((last_segment(key) for key in parent_map), default=0) + 1

    def subtree_ids(self, node_id: str, node: StructureNode) -> list[str]:
        """*node_id* and every descendant ID, in pre-order."""
        ids = [node_id]
        for key in sorted_ids(node.subtasks):
            ids.extend(self.subtree_ids(key, node.subtasks[key]))
        return ids

    # ------------------------------------------------------------------
    # Internal renaming
    # ------------------------------------------------------------------

    def _stage_tasks(self, node_id: str, node: StructureNode, staged: dict[str, Task]) -> None:
        for key in self.subtree_ids(node_id, node):
            task = self.task_list.pop(key, None)
            if task is not None:
                staged[key] = task

    def _rebase(self, node: StructureNode, old_id: str, new_id: str, staged: dict[str, Task]) -> None:
        """Rename *node* from *old_id* to *new_id*, carrying its subtree along."""
        node.id = new_id
        task = staged.pop(old_id, None)
        if task is not None:
            task.id = new_id
            self.task_list[new_id] = task

        children: dict[str, StructureNode] = {}
        for key in sorted_ids(node.subtasks):
            assert parent_of(key) == old_id, f"child {key} is not under {old_id}"
            new_key = rebase_id(key, old_id, new_id)
            child = node.subtasks[key]
            self._rebase(child, key, new_key, staged)
            children[new_key] = child
        node.subtasks = children

    def _renumber_level(
        self,
        level: dict[str, StructureNode],
        parent_id: str | None,
        staged: dict[str, Task],
        changes: dict[str, str],
    ) -> dict[str, StructureNode]:
        result: dict[str, StructureNode] = {}
        for position, old_id in enumerate(sorted_ids(level), start=1):
            node = level[old_id]
            new_id = child_id(parent_id, position)
            if new_id != old_id:
                changes[old_id] = new_id
            node.id = new_id
            task = staged.pop(old_id, None)
            if task is not None:
                task.id = new_id
                self.task_list[new_id] = task
            node.subtasks = self._renumber_level(node.subtasks, new_id, staged, changes)
            result[new_id] = node
        return result

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_node(
        self,
        parent_id: str | None,
        node_type: NodeType | str,
        name: str = "",
    ) -> tuple[str | None, DomainError | None]:
        """Append a node under *parent_id* (root when None) and return its ID.

        A non-empty *name* also creates the node's task, with empty details
        of the matching variant.
        """
        try:
            kind = NodeType(node_type)
        except ValueError:
            return None, DomainError.invalid(f"Invalid node type: {node_type}", type=str(node_type))

        if parent_id is None:
            parent_map = self.structure
        else:
            location, _ = self.find_node(parent_id)
            if location is None:
                return None, DomainError.not_found(f"Parent not found: {parent_id}", id=parent_id)
            parent_map = location.node.subtasks

        new_id = child_id(parent_id, self.next_sibling_number(parent_map))
        parent_map[new_id] = StructureNode(id=new_id, type=kind)
        if name:
            self.task_list[new_id] = Task(
                id=new_id,
                name=name,
                details=empty_details(kind),
                estimation=Estimation() if kind is NodeType.JOB else None,
            )
        return new_id, None

    def remove_node(self, node_id: str) -> tuple[list[str] | None, DomainError | None]:
        """Delete *node_id*, its descendants, and all their tasks.

        Returns the removed IDs in pre-order.
        """
        location, err = self.find_node(node_id)
        if location is None:
            return None, err
        removed = self.subtree_ids(node_id, location.node)
        for key in removed:
            self.task_list.pop(key, None)
        del location.parent_map[node_id]
        return removed, None

    def move_node(self, node_id: str, new_parent_id: str | None) -> tuple[str | None, DomainError | None]:
        """Re-parent *node_id* under *new_parent_id* (root when None).

        The node takes the next free sibling number at its destination and
        every descendant keeps its path relative to the moved node.
        """
        location, err = self.find_node(node_id)
        if location is None:
            return None, err

        if new_parent_id is None:
            dest_map = self.structure
        else:
            if is_within(new_parent_id, node_id):
                return None, DomainError.invalid(
                    f"Cannot move {node_id} into its own subtree", id=node_id, parent=new_parent_id
                )
            dest, _ = self.find_node(new_parent_id)
            if dest is None:
                return None, DomainError.not_found(
                    f"New parent not found: {new_parent_id}", id=new_parent_id
                )
            dest_map = dest.node.subtasks

        new_id = child_id(new_parent_id, self.next_sibling_number(dest_map))
        node = location.node
        del location.parent_map[node_id]

        staged: dict[str, Task] = {}
        self._stage_tasks(node_id, node, staged)
        self._rebase(node, node_id, new_id, staged)
        dest_map[new_id] = node
        return new_id, None

    def renumber_structure(self) -> tuple[dict[str, str], None]:
        """Close numbering gaps at every level, preserving sibling order.

        Returns an ``old_id -> new_id`` map for the IDs that changed; an
        already-normalized tree yields an empty map.
        """
        staged: dict[str, Task] = {}
        for key, node in self.structure.items():
            self._stage_tasks(key, node, staged)
        changes: dict[str, str] = {}
        renumbered = self._renumber_level(self.structure, None, staged, changes)
        self.structure.clear()
        self.structure.update(renumbered)
        return changes, None

    def swap_siblings(
        self,
        node_id: str,
        direction: Direction | str,
    ) -> tuple[str | None, DomainError | None]:
        """Exchange *node_id* with its previous (``up``) or next (``down``) sibling.

        All siblings are restaged and reinserted at contiguous positions, so
        the level ends up renumbered. Returns the node's new ID.
        """
        location, err = self.find_node(node_id)
        if location is None:
            return None, err
        try:
            way = Direction(direction)
        except ValueError:
            return None, DomainError.invalid(f"Invalid direction: {direction}", direction=str(direction))

        siblings = sorted_ids(location.parent_map)
        index = siblings.index(node_id)
        if way is Direction.UP:
            if index == 0:
                return None, DomainError.boundary("Cannot move up: already at the top", id=node_id)
            target = index - 1
        else:
            if index == len(siblings) - 1:
                return None, DomainError.boundary("Cannot move down: already at the bottom", id=node_id)
            target = index + 1

        order = list(siblings)
        order[index], order[target] = order[target], order[index]
        nodes = {key: location.parent_map[key] for key in siblings}

        staged: dict[str, Task] = {}
        for key, node in nodes.items():
            self._stage_tasks(key, node, staged)
        location.parent_map.clear()

        for position, old_id in enumerate(order, start=1):
            new_id = child_id(location.parent_id, position)
            self._rebase(nodes[old_id], old_id, new_id, staged)
            location.parent_map[new_id] = nodes[old_id]
        return child_id(location.parent_id, target + 1), None

    def indent_node(self, node_id: str) -> tuple[str | None, DomainError | None]:
        """Make *node_id* the last child of its previous sibling, then renumber."""
        location, err = self.find_node(node_id)
        if location is None:
            return None, err
        siblings = sorted_ids(location.parent_map)
        index = siblings.index(node_id)
        if index == 0:
            return None, DomainError.boundary("Cannot indent: no previous sibling", id=node_id)

        moved_id, err = self.move_node(node_id, siblings[index - 1])
        if moved_id is None:
            return None, err
        changes, _ = self.renumber_structure()
        return changes.get(moved_id, moved_id), None

    def outdent_node(self, node_id: str) -> tuple[str | None, DomainError | None]:
        """Make *node_id* a sibling of its parent, then renumber."""
        location, err = self.find_node(node_id)
        if location is None:
            return None, err
        if location.parent_id is None:
            return None, DomainError.boundary("Cannot outdent: already at root level", id=node_id)

        moved_id, err = self.move_node(node_id, parent_of(location.parent_id))
        if moved_id is None:
            return None, err
        changes, _ = self.renumber_structure()
        return changes.get(moved_id, moved_id), None

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def get_tree_display(self, job_filter: JobFilter | None = None) -> tuple[str, None]:
        """One ``<indent><id> <type>: <name>`` line per node.

        With a *job_filter*, hidden Job nodes are omitted together with
        their subtrees.
        """
        lines: list[str] = []
        self._display_level(self.structure, 0, job_filter, lines)
        return "\n".join(lines), None

    def _display_level(
        self,
        level: dict[str, StructureNode],
        depth: int,
        job_filter: JobFilter | None,
        lines: list[str],
    ) -> None:
        for key in sorted_ids(level):
            node = level[key]
            task = self.task_list.get(key)
            if job_filter is not None and should_hide(node, task, job_filter):
                continue
            name = task.name if task is not None else ""
            lines.append(f"{INDENT * depth}{key} {node.type.value}: {name}")
            self._display_level(node.subtasks, depth + 1, job_filter, lines)
