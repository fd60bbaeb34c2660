"""Structure outlines: the tree as indented ``<id> <Type>: <name>`` lines.

Nesting is read from the IDs, not the indentation. A line whose parent
has not appeared earlier in the outline, or whose type is unknown, is
skipped.
"""

from __future__ import annotations

import re

from planctl.domain.ids import is_valid_id, parent_of
from planctl.domain.models import Estimation, StructureNode, Task, empty_details
from planctl.domain.tree import PlanTree
from planctl.domain.types import NodeType
from planctl.formats.markdown import split_lines

OUTLINE_RE = re.compile(r"^\s*(\S+)\s+(\w+):\s*(.*?)\s*$")
NODE_TYPES = {member.value for member in NodeType}


def structure_to_text(structure: dict[str, StructureNode], task_list: dict[str, Task]) -> str:
    text, _ = PlanTree(structure, task_list).get_tree_display()
    return text


def text_to_structure(text: str) -> tuple[dict[str, StructureNode], dict[str, Task]]:
    """Rebuild ``(structure, task_list)`` from an outline.

    Named lines get a task with empty details of the node's type.
    """
    structure: dict[str, StructureNode] = {}
    task_list: dict[str, Task] = {}
    index: dict[str, StructureNode] = {}

    for line in split_lines(text):
        match = OUTLINE_RE.match(line)
        if match is None:
            continue
        node_id, type_name, name = match.groups()
        if not is_valid_id(node_id) or type_name not in NODE_TYPES:
            continue
        node_type = NodeType(type_name)

        parent_id = parent_of(node_id)
        if parent_id is None:
            siblings = structure
        elif parent_id in index:
            siblings = index[parent_id].subtasks
        else:
            continue

        node = StructureNode(id=node_id, type=node_type)
        siblings[node_id] = node
        index[node_id] = node
        if name:
            task_list[node_id] = Task(
                id=node_id,
                name=name,
                details=empty_details(node_type),
                estimation=Estimation() if node_type is NodeType.JOB else None,
            )
    return structure, task_list
