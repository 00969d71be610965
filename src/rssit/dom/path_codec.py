# src/rssit/dom/path_codec.py
"""
Structural addresses ("paths") of nodes relative to an ancestor context.

A path is the `>`-joined chain of tag signatures from just below the context
down to the node, e.g. `DIV>UL>LI>A`, optionally decorated with class names
(`LI.entry>A`). The same string is resolvable against any element that shares
the context's shape, with child-combinator semantics only.
"""
import logging
import re
from typing import List, Optional, Tuple

from bs4 import Tag

from rssit.dom.builder import DocumentBuilder, Node

logger = logging.getLogger(__name__)

STEP_SEPARATOR = ">"
CLASS_SEPARATOR = "."

_DIGIT = re.compile(r"[0-9]")

Step = Tuple[str, Tuple[str, ...]]


def _class_list(tag: Tag) -> List[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def _is_structural_class(cn: str) -> bool:
    # Digits usually mark per-item ids; separators would break the path grammar.
    return not _DIGIT.search(cn) and STEP_SEPARATOR not in cn and CLASS_SEPARATOR not in cn


def tag_signature(tag: Tag, with_class_names: bool = False) -> str:
    """
    Upper-case tag name, optionally followed by the tag's class names.
    Class names containing a digit are usually per-item ids and are left out,
    as are class names containing '>' or '.', which a path cannot encode.
    """
    name = tag.name.upper()
    if not with_class_names:
        return name
    classes = [cn for cn in _class_list(tag) if _is_structural_class(cn)]
    if classes:
        return CLASS_SEPARATOR.join([name] + classes)
    return name


def get_relative_path(node: Node, context: Tag, with_class_names: bool = False) -> str:
    """
    Computes the path of `node` relative to its ancestor `context`.

    Text leaves contribute no signature, so their path ends at their nearest
    element ancestor; a text leaf sitting directly in `context` has the empty
    path, as has `context` itself.

    Raises:
        ValueError: If `context` is not an ancestor of `node`.
    """
    if node is context:
        return ""
    signatures: List[str] = []
    if isinstance(node, Tag):
        signatures.append(tag_signature(node, with_class_names))
    while node.parent is not context:
        node = node.parent
        if node is None:
            raise ValueError("Context element is not an ancestor of the given node.")
        signatures.append(tag_signature(node, with_class_names))
    return STEP_SEPARATOR.join(reversed(signatures))


def parse_path(path: str) -> List[Step]:
    """Splits a path into (TAG, classes) steps."""
    steps: List[Step] = []
    if not path:
        return steps
    for raw in path.split(STEP_SEPARATOR):
        name, *classes = raw.strip().split(CLASS_SEPARATOR)
        steps.append((name.upper(), tuple(cn for cn in classes if cn)))
    return steps


def _matches_step(tag: Tag, step: Step) -> bool:
    name, classes = step
    if tag.name.upper() != name:
        return False
    if not classes:
        return True
    present = set(_class_list(tag))
    return all(cn in present for cn in classes)


def _matches_chain(tag: Tag, steps: List[Step], root: Tag) -> bool:
    node = tag
    for step in reversed(steps):
        if node is None or node is root or not isinstance(node, Tag):
            return False
        if not _matches_step(node, step):
            return False
        node = node.parent
    return True


def select_all(path: str, root: Tag) -> List[Tag]:
    """
    Returns every element below `root`, in document order, whose ancestor
    chain ends with the steps of `path`. The chain must lie entirely below
    `root`. The empty path selects nothing.
    """
    steps = parse_path(path)
    if not steps:
        return []
    return [tag for tag in root.find_all(True) if _matches_chain(tag, steps, root)]


def select_one(path: str, root: Tag) -> Optional[Tag]:
    """Returns the first element matched by `select_all`, or None."""
    steps = parse_path(path)
    if not steps:
        return None
    for tag in root.find_all(True):
        if _matches_chain(tag, steps, root):
            return tag
    return None


def text_of(tag: Optional[Tag]) -> str:
    """Full text content of an element, '' for a failed resolution."""
    if tag is None:
        return ""
    return tag.get_text()


def text_node_paths(container: Tag, with_class_names: bool = False) -> List[str]:
    """Paths of all non-blank text leaves below `container`, in document order."""
    return [
        get_relative_path(node, container, with_class_names)
        for node in DocumentBuilder.text_nodes_under(container)
    ]
