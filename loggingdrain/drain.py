"""The Drain prefix-tree clustering algorithm for log templates."""

from __future__ import annotations

import struct
import threading
from collections import OrderedDict
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable

from .cluster import LogCluster, TreeNode
from .errors import InternalError, internal_error
from .tokens import get_string_tokens, has_number

DEFAULT_MAX_DEPTH = 4
DEFAULT_SIM = 0.4
DEFAULT_MAX_CHILDREN = 100
DEFAULT_MAX_CLUSTERS = 1000
WILDCARD = "[*]"


def _f32(value: float) -> float:
    """Round a float to single precision, as similarity scores are kept."""
    return struct.unpack("f", struct.pack("f", value))[0]


class SearchStrategy(IntEnum):
    """When ``Drain.match`` falls back to a linear search of all clusters."""

    NEVER = 0
    FALLBACK = 1
    ALWAYS = 2


class ClusterUpdateType(IntEnum):
    """What adding a log message did to the set of clusters."""

    NONE = 0
    NEW_CLUSTER = 1
    UPDATE_CLUSTER = 2


@dataclass
class DrainConfig:
    """Tuning parameters of the Drain algorithm."""

    similarity: float = DEFAULT_SIM
    depth: int = DEFAULT_MAX_DEPTH
    max_children: int = DEFAULT_MAX_CHILDREN
    max_clusters: int = DEFAULT_MAX_CLUSTERS


class ClusterCache:
    """A bounded least-recently-used map from cluster id to cluster."""

    def __init__(self, capacity: int = DEFAULT_MAX_CLUSTERS):
        if capacity <= 0:
            raise ValueError("cache capacity must be positive")
        self.capacity = capacity
        self._items: OrderedDict[int, LogCluster] = OrderedDict()

    def add(self, cluster_id: int, cluster: LogCluster) -> bool:
        """Insert or refresh an entry; return True if an old entry was evicted."""
        if cluster_id in self._items:
            self._items.move_to_end(cluster_id)
            self._items[cluster_id] = cluster
            return False
        self._items[cluster_id] = cluster
        if len(self._items) > self.capacity:
            self._items.popitem(last=False)
            return True
        return False

    def get(self, cluster_id: int) -> LogCluster | None:
        """Return the cluster and mark it as most recently used."""
        cluster = self._items.get(cluster_id)
        if cluster is not None or cluster_id in self._items:
            self._items.move_to_end(cluster_id)
        return cluster

    def __contains__(self, cluster_id: object) -> bool:
        return cluster_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def keys(self) -> list[int]:
        """Ids from least to most recently used."""
        return list(self._items.keys())

    def values(self) -> list[LogCluster]:
        """Clusters from least to most recently used."""
        return list(self._items.values())

    def purge(self) -> None:
        self._items.clear()


class Drain:
    """Clusters log messages into templates using a fixed-depth prefix tree."""

    def __init__(self, config: DrainConfig | None = None):
        config = config if config is not None else DrainConfig()
        self.max_depth = config.depth
        self.sim = config.similarity
        self.max_children = config.max_children
        self.max_clusters = config.max_clusters
        capacity = config.max_clusters if config.max_clusters > 0 else DEFAULT_MAX_CLUSTERS
        self.id_to_cluster = ClusterCache(capacity)
        self.cluster_counter = 0
        self.root_node = TreeNode.root()
        self._lock = threading.RLock()

    @property
    def max_node_depth(self) -> int:
        return self.max_depth - 2

    def add_log_message(self, message: str) -> tuple[LogCluster, ClusterUpdateType]:
        """Place a message in a cluster, creating or generalising one as needed."""
        tokens = get_string_tokens(message)
        with self._lock:
            cluster = self.tree_search(self.root_node, tokens, self.sim, False)
            if cluster is None:
                self.cluster_counter += 1
                cluster = LogCluster(self.cluster_counter, tokens)
                self.id_to_cluster.add(cluster.id, cluster)
                self.add_seq_to_prefix_tree(self.root_node, cluster)
                return cluster, ClusterUpdateType.NEW_CLUSTER
            try:
                updated = self.update_template(tokens, cluster.template_tokens)
            except InternalError:
                return cluster, ClusterUpdateType.NONE
            if not updated:
                return cluster, ClusterUpdateType.NONE
            self.id_to_cluster.get(cluster.id)
            return cluster, ClusterUpdateType.UPDATE_CLUSTER

    def match(
        self, content: str, strategy: SearchStrategy = SearchStrategy.NEVER
    ) -> LogCluster | None:
        """Find an existing cluster matching ``content`` exactly, without changes.

        NEVER only searches the tree; FALLBACK searches all clusters of the same
        token count when the tree search fails; ALWAYS searches them directly.
        """
        with self._lock:
            tokens = get_string_tokens(content)
            require_sim = 1.0

            def full_match() -> LogCluster | None:
                clusters = self.clusters_for_seq_len(len(tokens))
                return self.fast_match(clusters, tokens, require_sim, True)

            if strategy == SearchStrategy.ALWAYS:
                return full_match()
            found = self.tree_search(self.root_node, tokens, require_sim, True)
            if found is not None:
                return found
            if strategy == SearchStrategy.FALLBACK:
                return full_match()
            return None

    def status(self) -> str:
        """Describe the cluster count and every known template."""
        count_line = "cluster count %d" % len(self.id_to_cluster)
        with self._lock:
            lines = []
            for key in self.id_to_cluster.keys():
                cluster = self.id_to_cluster.get(key)
                template = cluster.template() if cluster is not None else ""
                lines.append(template + "\n")
        return "%s\n%s" % (count_line, "\n".join(lines))

    def total_cluster_size(self) -> int:
        return len(self.id_to_cluster)

    def tree_search(
        self,
        root: TreeNode,
        tokens: list[str],
        require_sim: float,
        include_params: bool,
    ) -> LogCluster | None:
        """Descend the tree along ``tokens`` and pick the best cluster at the leaf."""
        token_count = len(tokens)
        length_node = root.length_children.get(token_count)
        if length_node is None:
            return None
        if token_count == 0:
            return length_node.clusters[0] if length_node.clusters else None

        current: TreeNode | None = length_node
        depth = 1
        for token in tokens:
            if depth >= self.max_node_depth or depth == token_count:
                break
            child = current.token_children.get(token)
            current = child if child is not None else current.token_children.get(WILDCARD)
            if current is None:
                return None
            depth += 1
        return self.fast_match(current.clusters, tokens, require_sim, include_params)

    def update_template(self, seq: list[str], template: list[str]) -> bool:
        """Replace differing template tokens with wildcards, in place."""
        if len(seq) != len(template):
            raise internal_error(
                detail="seq1 length %d not equals to template length %d"
                % (len(seq), len(template))
            )
        updated = False
        for position, (token, template_token) in enumerate(zip(seq, template)):
            if token != template_token and template_token != WILDCARD:
                template[position] = WILDCARD
                updated = True
        return updated

    def add_seq_to_prefix_tree(self, root: TreeNode, cluster: LogCluster) -> None:
        """Insert ``cluster`` into the tree below ``root``."""
        tokens = cluster.template_tokens
        token_count = len(tokens)
        length_node = root.length_children.get(token_count)
        if length_node is None:
            length_node = TreeNode.length_node(token_count)
            root.length_children[token_count] = length_node

        current = length_node
        depth = 1
        if token_count == 0:
            current.clusters = [cluster]

        for token in tokens:
            if depth >= self.max_node_depth or depth >= token_count:
                kept = [c for c in current.clusters if c.id in self.id_to_cluster]
                kept.append(cluster)
                current.clusters = kept
                break

            children = current.token_children
            if token in children:
                current = children[token]
            else:
                wildcard_node = children.get(WILDCARD)
                if has_number(token):
                    if wildcard_node is None:
                        wildcard_node = TreeNode.token_node()
                        children[WILDCARD] = wildcard_node
                    current = wildcard_node
                elif wildcard_node is not None:
                    if len(children) < self.max_children:
                        current = children.setdefault(token, TreeNode.token_node())
                    else:
                        current = wildcard_node
                elif len(children) + 1 < DEFAULT_MAX_CHILDREN:
                    current = children.setdefault(token, TreeNode.token_node())
                elif len(children) + 1 == DEFAULT_MAX_CHILDREN:
                    current = children.setdefault(WILDCARD, TreeNode.token_node())
                else:
                    current = children[WILDCARD]
            depth += 1

    def fast_match(
        self,
        clusters: Iterable[LogCluster],
        tokens: list[str],
        require_sim: float,
        include_params: bool,
    ) -> LogCluster | None:
        """Return the most similar live cluster, if it reaches ``require_sim``."""
        best_sim = -1.0
        best_params = -1
        best: LogCluster | None = None
        for cluster in clusters:
            if cluster.id not in self.id_to_cluster:
                continue
            try:
                sim, params = self.seq_distance(
                    cluster.template_tokens, tokens, include_params
                )
            except InternalError:
                continue
            if sim > best_sim or (sim == best_sim and params > best_params):
                best_sim, best_params, best = sim, params, cluster
        if best_sim >= _f32(require_sim):
            return best
        return None

    def clusters_for_seq_len(self, length: int) -> list[LogCluster]:
        """Collect every cluster stored under the node for ``length`` tokens."""
        length_node = self.root_node.length_children.get(length)
        if length_node is None:
            return []
        found: list[LogCluster] = []
        stack = [length_node]
        while stack:
            node = stack.pop()
            found.extend(node.clusters)
            stack.extend(node.token_children.values())
        return found

    def seq_distance(
        self, seq1: list[str], seq2: list[str], include_params: bool
    ) -> tuple[float, int]:
        """Return (similarity, wildcard count) of template ``seq1`` against ``seq2``."""
        if len(seq1) != len(seq2):
            raise internal_error(
                detail="seq1 length %d not equals to seq2 length %d"
                % (len(seq1), len(seq2))
            )
        if not seq1:
            return 1.0, 0
        similar = 0
        params = 0
        for token1, token2 in zip(seq1, seq2):
            if token1 == WILDCARD:
                params += 1
            elif token1 == token2:
                similar += 1
        if include_params:
            similar += params
        return _f32(_f32(similar) / _f32(len(seq1))), params

    def to_dict(self) -> dict[str, Any]:
        return {
            "MaxDepth": self.max_depth,
            "Sim": self.sim,
            "MaxChildren": self.max_children,
            "MaxClusters": self.max_clusters,
            "ClusterCounter": self.cluster_counter,
            "Clusters": [cluster.to_dict() for cluster in self.id_to_cluster.values()],
            "RootNode": self.root_node.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Drain:
        config = DrainConfig(
            similarity=float(data.get("Sim", 0.0)),
            depth=int(data.get("MaxDepth", 0)),
            max_children=int(data.get("MaxChildren", 0)),
            max_clusters=int(data.get("MaxClusters", 0)),
        )
        drain = cls(config)
        drain.cluster_counter = int(data.get("ClusterCounter", 0))
        for item in data.get("Clusters") or []:
            cluster = LogCluster.from_dict(item)
            drain.id_to_cluster.add(cluster.id, cluster)
        root_data = data.get("RootNode")
        drain.root_node = TreeNode.from_dict(root_data) if root_data else TreeNode.root()
        drain._relink(drain.root_node)
        return drain

    def _relink(self, root: TreeNode) -> None:
        """Make tree nodes share the cluster objects held in the cache."""
        live = {cluster.id: cluster for cluster in self.id_to_cluster.values()}
        stack = [root]
        while stack:
            node = stack.pop()
            node.clusters = [live.get(c.id, c) for c in node.clusters]
            stack.extend(node.token_children.values())
            stack.extend(node.length_children.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Drain):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return "Drain(depth=%d, sim=%r, max_children=%d, max_clusters=%d, clusters=%d)" % (
            self.max_depth,
            self.sim,
            self.max_children,
            self.max_clusters,
            len(self.id_to_cluster),
        )