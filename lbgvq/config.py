"""Configuration for LBG codebook design."""

import yaml
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict


@dataclass
class LBGConfig:
    """Parameters of one codebook design run."""
    num_order: int = 25
    initial_codebook_size: int = 1
    target_codebook_size: int = 256
    min_num_vector_in_cluster: int = 1
    num_iteration: int = 1000
    convergence_threshold: float = 1e-5
    splitting_factor: float = 1e-5
    seed: int = 1
    distance: str = 'squared_euclidean'

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'LBGConfig':
        """Build from a mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown LBG config keys: {sorted(unknown)}")
        return cls(**values)

    @classmethod
    def from_yaml(cls, path) -> 'LBGConfig':
        """Load from a YAML file with the field names as keys."""
        with open(Path(path)) as f:
            values = yaml.safe_load(f) or {}
        if not isinstance(values, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(values).__name__}")
        return cls.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_yaml(self, path):
        """Write to a YAML file."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
