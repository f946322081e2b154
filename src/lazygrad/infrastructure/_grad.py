"""
Symbolic reverse-mode differentiation.

`grad(y, xs)` walks the graph backward from `y` and returns, for each Node in
`xs`, a new Node representing the derivative of `y` with respect to it. The
derivatives are ordinary graph steps built from the operators' gradient
rules, so nothing is evaluated here, and a gradient Node can be passed back
to `grad` to obtain higher-order derivatives.

Algorithm
---------
1. Mark every step `y` transitively depends on by scanning step indices from
   `y` down to 0, following inputs of steps already marked.
2. Seed the accumulator with ones of `y`'s shape (dy/dy = 1).
3. Visit marked steps in descending index order (a valid reverse-topological
   order of an append-only graph). For each step with an accumulated
   gradient, call its operator's gradient rule and add each returned Node
   into the accumulator of the matching input. A value reached along several
   paths therefore receives the sum of its contributions.
4. Return the accumulated gradient of each requested Node, or a zero-filled
   constant when it was not reached.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from ._graph import NodeAddress
from ._node import Node

logger = logging.getLogger(__name__)


def grad(y: Node, xs: Sequence[Node]) -> List[Node]:
    """
    Build gradient Nodes of `y` with respect to each Node of `xs`.

    Parameters
    ----------
    y : Node
        Output to differentiate. Any shape; the seed gradient is filled with
        ones of that shape.
    xs : Sequence[Node]
        Variables, in the caller's order. Duplicates are preserved in
        the result.

    Returns
    -------
    list[Node]
        One gradient Node per entry of `xs`, each shaped like that entry.

    Raises
    ------
    InvalidGraphError
        If any Node belongs to a different graph than `y`.
    ValueError
        If an operator's gradient rule returns the wrong number of Nodes.
    """
    xs = list(xs)
    graph = y.check_graph(*xs)
    steps_before = graph.num_steps()
    last = y.address.step

    reachable = [False] * (last + 1)
    reachable[last] = True
    for index in range(last, -1, -1):
        if reachable[index]:
            for a in graph.get_step(index).inputs:
                reachable[a.step] = True

    gys: Dict[NodeAddress, Node] = {
        y.address: Node.fill(y.hardware, graph, y.shape, 1.0)
    }

    for index in range(last, -1, -1):
        if not reachable[index]:
            continue
        step = graph.get_step(index)
        if not step.inputs:
            continue
        outputs = [NodeAddress(index, i) for i in range(len(step.output_shapes))]
        if not any(a in gys for a in outputs):
            continue

        x_nodes = [Node(graph, a) for a in step.inputs]
        y_nodes = [Node(graph, a) for a in outputs]
        gy_nodes = [
            gys[a] if a in gys else Node.fill(step.hardware, graph, shape, 0.0)
            for a, shape in zip(outputs, step.output_shapes)
        ]

        gxs = step.operator.gradient(x_nodes, y_nodes, gy_nodes)
        if len(gxs) != len(step.inputs):
            raise ValueError(
                f"{step.operator.name()} returned {len(gxs)} gradients "
                f"for {len(step.inputs)} inputs."
            )

        for a, gx in zip(step.inputs, gxs):
            if a in gys:
                gys[a] = gys[a] + gx
            else:
                gys[a] = gx

    result = [
        gys[x.address]
        if x.address in gys
        else Node.fill(x.hardware, graph, x.shape, 0.0)
        for x in xs
    ]

    logger.debug(
        "grad of %s w.r.t. %d nodes: %d reachable steps, %d steps appended",
        y.address,
        len(xs),
        sum(reachable),
        graph.num_steps() - steps_before,
    )
    return result
