"""Persist and load column synonym profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from auction_tracker.config.columns import build_synonym_table


@dataclass
class SynonymProfile:
    synonyms: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "SynonymProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        raw = data.get("synonyms", {})
        synonyms = {str(key): [str(value) for value in values] for key, values in raw.items()}
        # Fail fast on unknown canonical fields.
        build_synonym_table(synonyms)
        return cls(synonyms=synonyms)

    def save(self, path: Path) -> None:
        payload = {"synonyms": self.synonyms}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def table(self) -> Dict[str, tuple[str, ...]]:
        return build_synonym_table(self.synonyms)
