"""Regular-expression masking of variable parts of log lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .errors import mask_pattern_error

DEFAULT_MASKING_PREFIX = "[:"
DEFAULT_MASKING_SUFFIX = ":]"


@dataclass
class MaskConfig:
    """Masking settings: prefix, suffix and (pattern, mask_with) pairs."""

    prefix: str = DEFAULT_MASKING_PREFIX
    suffix: str = DEFAULT_MASKING_SUFFIX
    instructions: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class MaskInstruction:
    """A named pattern whose matches are replaced by a mask."""

    mask_with: str
    pattern: str
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            self.regex = re.compile(self.pattern)
        except re.error as exc:
            raise mask_pattern_error(exc) from exc

    def mask(self, content: str, prefix: str, suffix: str) -> str:
        """Replace every match in ``content`` with prefix + name + suffix."""
        replacement = prefix + self.mask_with + suffix
        return self.regex.sub(lambda _match: replacement, content)

    def to_dict(self) -> dict[str, Any]:
        return {"Pattern": self.pattern, "MaskWith": self.mask_with}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MaskInstruction:
        return cls(mask_with=data.get("MaskWith", ""), pattern=data.get("Pattern", ""))


class LogMasker:
    """Applies a set of mask instructions, keyed by mask name."""

    def __init__(
        self,
        prefix: str = DEFAULT_MASKING_PREFIX,
        suffix: str = DEFAULT_MASKING_SUFFIX,
    ):
        self.prefix = prefix
        self.suffix = suffix
        self._instructions: dict[str, MaskInstruction] = {}

    @classmethod
    def from_config(cls, config: MaskConfig) -> LogMasker:
        masker = cls(config.prefix, config.suffix)
        for pattern, mask_with in config.instructions:
            masker.add_instruction(mask_with, pattern)
        return masker

    def add_instruction(self, mask_with: str, pattern: str) -> None:
        """Add or replace the instruction named ``mask_with``."""
        self._instructions[mask_with] = MaskInstruction(mask_with, pattern)

    def mask(self, content: str) -> str:
        for instruction in self._instructions.values():
            content = instruction.mask(content, self.prefix, self.suffix)
        return content

    def mask_names(self) -> list[str]:
        return list(self._instructions)

    def instruction(self, name: str) -> MaskInstruction | None:
        return self._instructions.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Prefix": self.prefix,
            "Suffix": self.suffix,
            "MaskInstructions": [ins.to_dict() for ins in self._instructions.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogMasker:
        masker = cls(data.get("Prefix", ""), data.get("Suffix", ""))
        for item in data.get("MaskInstructions") or []:
            instruction = MaskInstruction.from_dict(item)
            masker._instructions[instruction.mask_with] = instruction
        return masker

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMasker):
            return NotImplemented
        return (
            self.prefix == other.prefix
            and self.suffix == other.suffix
            and self._instructions == other._instructions
        )

    def __repr__(self) -> str:
        return "LogMasker(prefix=%r, suffix=%r, instructions=%r)" % (
            self.prefix,
            self.suffix,
            list(self._instructions.values()),
        )