"""
Decoding of url-encoded booking forms.

The booking widget posts nested fields in bracket notation, e.g.
``additional_persons[first_name][0]=Ann``. These are expanded into the same
nested dict/list shape a JSON body carries, so the rest of the service only
ever sees one submission format.
"""

import re
from typing import Any, Iterable

_KEY_PART = re.compile(r"\[([^\]]*)\]")


def _split_key(key: str) -> list[str]:
    head, _, rest = key.partition("[")
    if not rest:
        return [key]
    return [head] + _KEY_PART.findall("[" + rest)


def _listify(node: Any) -> Any:
    """Turn dicts keyed by consecutive integers into ordered lists."""
    if not isinstance(node, dict):
        return node
    converted = {k: _listify(v) for k, v in node.items()}
    if converted and all(k.isdigit() for k in converted):
        indices = sorted(int(k) for k in converted)
        if indices == list(range(len(indices))):
            return [converted[str(i)] for i in indices]
    return converted


def decode_form(items: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Expand ``(key, value)`` pairs with bracket notation into a nested dict."""
    root: dict[str, Any] = {}
    for key, value in items:
        parts = _split_key(key)
        node = root
        for position in range(len(parts) - 1):
            part = parts[position]
            next_part = parts[position + 1]
            if next_part == "":
                # `field[]=a&field[]=b` appends in arrival order
                child = node.setdefault(part, {})
                if not isinstance(child, dict):
                    break
                node = child
                parts[position + 1] = str(len(child))
                continue
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        else:
            node[parts[-1]] = value
    return {k: _listify(v) for k, v in root.items()}
