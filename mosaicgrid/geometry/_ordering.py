"""
Cyclic ordering of intersecting edges.

The edges where a cell crosses the sphere come out of the topology tables in
canonical index order. To trace the boundary loop they must be rearranged so
that every consecutive pair (including last -> first) lies on a common face;
the boundary arc between them then lives on that face.
"""

from typing import Sequence

from mosaicgrid._errors import OrderingFailureError


def _shares_face(a, b) -> bool:
    return any(f in b.faces for f in a.faces)


def _search_from(edges, start):
    """Depth-first search for a closed ordering beginning at ``edges[start]``.

    Candidates are tried in the original array order, which makes the result
    deterministic. Returns the ordering as a list of indices, or None.
    """
    n = len(edges)
    used = [False] * n
    used[start] = True
    order = [start]
    # stack[k] is the next candidate to try for position k + 1
    stack = [0]

    while stack:
        if len(order) == n:
            if _shares_face(edges[order[-1]], edges[order[0]]):
                return order
            # dead end; backtrack the last placement
            used[order.pop()] = False
            stack.pop()
            continue

        last = edges[order[-1]]
        i = stack[-1]
        while i < n and (used[i] or not _shares_face(last, edges[i])):
            i += 1

        if i == n:
            stack.pop()
            if len(order) > 1:
                used[order.pop()] = False
            else:
                break
            continue

        stack[-1] = i + 1
        used[i] = True
        order.append(i)
        stack.append(0)

    return None


def reorder_edges(edges: Sequence) -> list:
    """Reorder edges so each cyclically adjacent pair shares a face.

    Parameters
    ----------
    edges : sequence of Edge
        Anything exposing a ``faces`` tuple works.

    Returns
    -------
    list
        The same objects in loop order. Empty input gives an empty list.

    Raises
    ------
    OrderingFailureError
        If no starting edge admits a closed ordering.
    """
    edges = list(edges)
    if not edges:
        return []
    for start in range(len(edges)):
        order = _search_from(edges, start)
        if order is not None:
            return [edges[i] for i in order]
    raise OrderingFailureError(
        f"Cannot order {len(edges)} edges into a closed loop with common faces."
    )
