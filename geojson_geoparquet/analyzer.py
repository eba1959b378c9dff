from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List
import logging

from .inference import SemanticType, infer_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    type: SemanticType
    nullable: bool = True


def promote_type(recorded: SemanticType, observed: SemanticType) -> SemanticType:
    """
    Resolve the recorded type of a key against a newly observed one.

      - NULL observations never change the recorded type.
      - A NULL-only key adopts the first non-null type it sees.
      - Two distinct non-null types collapse to STRING, permanently.
    """
    if observed == recorded or observed == SemanticType.NULL:
        return recorded
    if recorded == SemanticType.NULL:
        return observed
    return SemanticType.STRING


class PropertyAnalyzer:
    """
    Accumulates one inferred type per property key across a feature set.

    Output order is independent of feature order: descriptors are sorted by
    key (code point order, which matches UTF-8 byte order).
    """

    def __init__(self) -> None:
        self._types: Dict[str, SemanticType] = {}
        self._features_seen = 0

    def observe(self, feature) -> None:
        self._features_seen += 1
        props = feature.properties
        if props is None:
            return
        for key, value in props.items():
            observed = infer_type(value)
            recorded = self._types.get(key)
            if recorded is None:
                self._types[key] = observed
                continue
            promoted = promote_type(recorded, observed)
            if promoted != recorded:
                if promoted == SemanticType.STRING and recorded != SemanticType.NULL:
                    logger.debug("Property '%s': %s conflicts with %s, promoting to string",
                                 key, observed, recorded)
                self._types[key] = promoted

    def observe_all(self, features: Iterable) -> "PropertyAnalyzer":
        for feature in features:
            self.observe(feature)
        return self

    def merge(self, other: "PropertyAnalyzer") -> "PropertyAnalyzer":
        for key, t in other._types.items():
            recorded = self._types.get(key)
            self._types[key] = t if recorded is None else promote_type(recorded, t)
        self._features_seen += other._features_seen
        return self

    @property
    def features_seen(self) -> int:
        return self._features_seen

    def descriptors(self) -> List[ColumnDescriptor]:
        out: List[ColumnDescriptor] = []
        for name in sorted(self._types):
            t = self._types[name]
            if t == SemanticType.NULL:
                t = SemanticType.STRING
            out.append(ColumnDescriptor(name=name, type=t, nullable=True))
        return out


def analyze_properties(features: Iterable) -> List[ColumnDescriptor]:
    analyzer = PropertyAnalyzer().observe_all(features)
    descriptors = analyzer.descriptors()
    logger.info("Analyzed %d features: %d property columns", analyzer.features_seen, len(descriptors))
    return descriptors
