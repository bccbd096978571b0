"""
Relation population tree.

A [`PopulateNode`][strapiclient.models.query.populate.PopulateNode] describes
which relations (and which of their fields) the API must inline in the
response. The tree is built incrementally and serialized into one canonical
wire object:

| Tree | Wire object |
| --- | --- |
| `populate("category")` | `["category"]` |
| `populate("category")`, `populate("author")` | `["category", "author"]` |
| `populate("category.author")` | `{"category": {"populate": {"author": "*"}}}` |
| `populate("category").select_fields("name", "slug")` | `{"category": {"fields": "name,slug"}}` |
| `populate("blocks").deep()` | `{"blocks": {"populate": "*"}}` |

Field lists are always emitted as a single comma-joined string. The
indexed-array form (`fields[0]=name&fields[1]=slug` under a populate key) is
never produced.
"""

from typing import Any, Dict, List, Optional, Union

from ...errors import ArgumentError


WILDCARD = "*"

WireObject = Union[str, List[str], Dict[str, Any]]


class PopulateNode:
    """
    One relation in the populate tree.

    The root node has an empty name; every other node is keyed by its relation
    name in its parent's `children` mapping (insertion ordered).

    Attributes:
        name: The relation key (empty only at the root).
        fields: The selected field names, `["*"]` for populate-all, or `None`.
        is_deep: Whether the relation is populated together with everything one
            level below it.
        children: Mapping from child relation name to child node.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.fields: Optional[List[str]] = None
        self.is_deep = False
        self.children: Dict[str, "PopulateNode"] = {}
        self._frozen = False

    # --- Building ---

    def _check_mutable(self):
        if self._frozen:
            raise ArgumentError(
                f"Populate node '{self.name or '<root>'}' has already been serialized and cannot be modified"
            )

    def populate(self, path: str) -> "PopulateNode":
        """
        Adds (or reuses) the relation at `path` and returns its innermost node.

        The path is split on its first `.`: the head segment becomes a child of
        this node and the remainder is resolved recursively below it.

        Example:
            ```python
            root = PopulateNode()
            author = root.populate("category.author")   # creates 'category' and 'author'
            author.select_fields("name")
            ```

        Raises:
            ArgumentError: If the path, or any of its segments, is empty.
        """
        if path is None or not path.strip():
            raise ArgumentError("Relation cannot be null or empty")
        self._check_mutable()

        head, _, rest = path.strip().partition(".")
        if not head:
            raise ArgumentError(f"Invalid relation path '{path}'")

        child = self.children.get(head)
        if child is None:
            child = PopulateNode(head)
            self.children[head] = child

        if rest:
            return child.populate(rest)
        return child

    def select_fields(self, *fields: str) -> "PopulateNode":
        """
        Restricts the relation to the given field names.

        A list containing `"*"` selects every field, whatever else it holds.

        Raises:
            ArgumentError: If no field (or a blank one) is given, or if named
                fields are selected on the root (use `with_fields()` for
                top-level fields).
        """
        if not fields or any(f is None or not str(f).strip() for f in fields):
            raise ArgumentError("Fields cannot be null or empty")
        self._check_mutable()
        fields = [str(f).strip() for f in fields]
        if WILDCARD in fields:
            fields = [WILDCARD]
        elif self.is_root:
            raise ArgumentError("Named fields cannot be selected on the populate root")
        self.fields = fields
        return self

    def populate_all(self) -> "PopulateNode":
        """Selects every field of the relation (wildcard marker)."""
        self._check_mutable()
        self.fields = [WILDCARD]
        return self

    def deep(self) -> "PopulateNode":
        """Populates the relation and everything nested one level beneath it."""
        self._check_mutable()
        self.is_deep = True
        return self

    # --- Introspection ---

    @property
    def is_root(self) -> bool:
        return self.name == ""

    def is_empty(self) -> bool:
        """True when nothing has been requested on this node."""
        return not self.children and self.fields is None and not self.is_deep

    def is_wildcard_leaf(self) -> bool:
        """True when the node reduces to the bare `*` populate directive."""
        if self.is_deep or self.children:
            return False
        return self.fields is None or WILDCARD in self.fields

    # --- Serialization ---

    def _node_object(self) -> WireObject:
        if self.is_deep:
            return {"populate": WILDCARD}
        if self.is_wildcard_leaf():
            return WILDCARD

        result: Dict[str, Any] = {}
        if self.fields and WILDCARD not in self.fields:
            result["fields"] = ",".join(self.fields)
        if self.children:
            result["populate"] = {
                key: child._node_object() for key, child in self.children.items()
            }
        return result

    def to_wire_object(self) -> Optional[WireObject]:
        """
        Produces the canonical nested structure for this node.

        At the root, returns an ordered list of relation names when every child
        is a simple wildcard populate, otherwise a mapping from relation name to
        `"*"` or to the child's nested object. A childless root returns `"*"`
        after `populate_all()` or `deep()`, and `None` otherwise.
        Serializing freezes the whole subtree.
        """
        self._freeze()

        if not self.is_root:
            return self._node_object()

        if not self.children:
            if self.is_deep or (self.fields is not None and WILDCARD in self.fields):
                return WILDCARD
            return None

        if all(child.is_wildcard_leaf() for child in self.children.values()):
            return list(self.children.keys())

        return {key: child._node_object() for key, child in self.children.items()}

    def _freeze(self):
        self._frozen = True
        for child in self.children.values():
            child._freeze()

    def __repr__(self) -> str:
        return (
            f"PopulateNode(name={self.name!r}, fields={self.fields!r}, "
            f"deep={self.is_deep}, children={list(self.children)})"
        )
