"""The template miner: masking followed by Drain clustering."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .cluster import LogCluster
from .drain import ClusterUpdateType, Drain, DrainConfig, SearchStrategy
from .errors import internal_error
from .masking import LogMasker, MaskConfig


@dataclass
class MinerConfig:
    """Settings of a template miner: clustering and masking."""

    drain: DrainConfig = field(default_factory=DrainConfig)
    mask: MaskConfig = field(default_factory=MaskConfig)


@dataclass
class LogMessageResponse:
    """The outcome of adding one log message to a miner."""

    change_type: ClusterUpdateType
    cluster: LogCluster
    template_id: str
    template_mined: str
    cluster_count: int


class TemplateMiner:
    """Mines log templates from a stream of log messages."""

    def __init__(self, config: MinerConfig | None = None):
        config = config if config is not None else MinerConfig()
        self.drain = Drain(config.drain)
        self.masker = LogMasker.from_config(config.mask)

    def add_log_message(self, message: str) -> LogMessageResponse:
        """Mask and cluster a message, reporting what changed."""
        masked = self.masker.mask(message)
        cluster, change = self.drain.add_log_message(masked)
        return LogMessageResponse(
            change_type=change,
            cluster=cluster,
            template_id=str(cluster.id),
            template_mined=cluster.template(),
            cluster_count=len(self.drain.id_to_cluster),
        )

    def load_miner_data(self, data: str | bytes) -> None:
        """Replace the clusters with those of a serialised miner, keeping the config."""
        loaded = TemplateMiner.from_json(data)
        drain = self.drain
        with drain._lock:
            drain.id_to_cluster.purge()
            drain.root_node = type(drain.root_node).root()
            drain.cluster_counter = 0
            for cluster in loaded.drain.id_to_cluster.values():
                drain.cluster_counter += 1
                drain.id_to_cluster.add(cluster.id, cluster)
                drain.add_seq_to_prefix_tree(drain.root_node, cluster)

    def match(self, message: str) -> LogCluster | None:
        """Find the existing cluster that ``message`` matches exactly, if any."""
        masked = self.masker.mask(message)
        return self.drain.match(masked, SearchStrategy.NEVER)

    def status(self) -> str:
        return self.drain.status()

    def to_dict(self) -> dict[str, Any]:
        return {"Drain": self.drain.to_dict(), "Masker": self.masker.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemplateMiner:
        drain_data = data.get("Drain")
        if not drain_data:
            raise internal_error(detail="drain is missing from miner data")
        miner = cls.__new__(cls)
        miner.drain = Drain.from_dict(drain_data)
        masker_data = data.get("Masker")
        miner.masker = LogMasker.from_dict(masker_data) if masker_data else LogMasker()
        return miner

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: str | bytes) -> TemplateMiner:
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise internal_error(detail="miner data is not an object")
        return cls.from_dict(parsed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemplateMiner):
            return NotImplemented
        return self.drain == other.drain and self.masker == other.masker

    def __repr__(self) -> str:
        return "TemplateMiner(drain=%r, masker=%r)" % (self.drain, self.masker)