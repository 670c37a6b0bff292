# travel/serialization.py
"""
Helpers for the JSON the backend API produces.

The API serializes object graphs with reference preservation: every object
carries an ``$id``, repeated objects are replaced by ``{"$ref": "<id>"}`` and
collections are wrapped as ``{"$id": "<id>", "$values": [...]}``.
``resolve_references`` rebuilds plain Python structures from that format.
"""

from .exceptions import SerializationError

MAX_DEPTH = 64

ID_KEY = '$id'
REF_KEY = '$ref'
VALUES_KEY = '$values'


def resolve_references(payload, max_depth=MAX_DEPTH):
    """
    Rebuild a reference-preserved JSON document.

    ``$ref`` nodes resolve to the very same object registered under the
    matching ``$id``, so cycles in the original graph stay cycles.
    Raises SerializationError for unknown references or when nesting goes
    deeper than ``max_depth``.
    """
    seen = {}

    def walk(node, depth):
        if depth > max_depth:
            raise SerializationError(
                f"The JSON payload exceeds the maximum allowed depth of {max_depth}."
            )

        if isinstance(node, list):
            return [walk(item, depth + 1) for item in node]

        if not isinstance(node, dict):
            return node

        if REF_KEY in node:
            ref = node[REF_KEY]
            if ref not in seen:
                raise SerializationError(f"Unresolved JSON reference '{ref}'.")
            return seen[ref]

        ref_id = node.get(ID_KEY)

        if VALUES_KEY in node:
            values = []
            if ref_id is not None:
                seen[ref_id] = values
            values.extend(walk(item, depth + 1) for item in node[VALUES_KEY] or [])
            return values

        obj = {}
        if ref_id is not None:
            seen[ref_id] = obj
        for key, value in node.items():
            if key == ID_KEY:
                continue
            obj[key] = walk(value, depth + 1)
        return obj

    return walk(payload, 0)

