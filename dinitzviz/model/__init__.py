"""Graph model package.

Defines the caller-side flow network (`FlowNetwork`, `Edge`) that supplies the
Dinitz engine with nodes and edges and receives the computed flows.
"""

from dinitzviz.model.network import Edge, FlowNetwork, check_capacity

__all__ = [
    "Edge",
    "FlowNetwork",
    "check_capacity",
]
