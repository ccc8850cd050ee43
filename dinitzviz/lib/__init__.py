"""Library modules for dinitzviz.

Contains the max-flow engine (``algorithms``) and integration modules for
serialization and NetworkX.
"""

from dinitzviz.lib.nx import EdgeMap, apply_flows, from_networkx, to_networkx

__all__ = [
    "EdgeMap",
    "apply_flows",
    "from_networkx",
    "to_networkx",
]
