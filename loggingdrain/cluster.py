"""Log clusters and the prefix tree nodes that index them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


@dataclass
class LogCluster:
    """A group of log lines sharing one template."""

    id: int
    template_tokens: list[str] = field(default_factory=list)

    def template(self) -> str:
        """Return the template as a single space-joined string."""
        return " ".join(self.template_tokens)

    def __str__(self) -> str:
        return "LogCluster{id: %d, logTemplateTokens: [%s]}" % (
            self.id,
            " ".join(self.template_tokens),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"ID": self.id, "LogTemplateTokens": list(self.template_tokens)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogCluster:
        return cls(
            id=int(data.get("ID", 0)),
            template_tokens=list(data.get("LogTemplateTokens") or []),
        )


class NodeType(IntEnum):
    ROOT = 0
    LENGTH = 1
    TOKEN = 2


@dataclass
class TreeNode:
    """A node of the prefix tree: root, token-count level or token level."""

    node_type: NodeType
    length: int = 0
    token_children: dict[str, TreeNode] = field(default_factory=dict)
    length_children: dict[int, TreeNode] = field(default_factory=dict)
    clusters: list[LogCluster] = field(default_factory=list)

    @classmethod
    def root(cls) -> TreeNode:
        return cls(NodeType.ROOT)

    @classmethod
    def length_node(cls, length: int) -> TreeNode:
        return cls(NodeType.LENGTH, length=length)

    @classmethod
    def token_node(cls) -> TreeNode:
        return cls(NodeType.TOKEN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "NodeType": int(self.node_type),
            "Length": self.length,
            "TokenNodeChildren": {
                token: child.to_dict() for token, child in self.token_children.items()
            },
            "LengthNodeChildren": {
                str(length): child.to_dict()
                for length, child in self.length_children.items()
            },
            "Clusters": [cluster.to_dict() for cluster in self.clusters],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TreeNode:
        return cls(
            node_type=NodeType(int(data.get("NodeType", 0))),
            length=int(data.get("Length", 0)),
            token_children={
                token: cls.from_dict(child)
                for token, child in (data.get("TokenNodeChildren") or {}).items()
            },
            length_children={
                int(length): cls.from_dict(child)
                for length, child in (data.get("LengthNodeChildren") or {}).items()
            },
            clusters=[
                LogCluster.from_dict(cluster) for cluster in data.get("Clusters") or []
            ],
        )