"""
Configuration for the algorithm drivers.

Defaults live on :class:`DriverConfig`; a JSON or YAML file can override
any subset of them::

    qaoa_iterations: 100
    qml_learning_rate: 0.05
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Union

import yaml


@dataclass(frozen=True)
class DriverConfig:
    """Tunable constants shared by the drivers."""

    # Factoring
    shor_num_qubits: int = 8
    shor_counting_qubits: int = 4
    shor_max_iterations: int = 10

    # Search
    grover_num_qubits: int = 3

    # Optimization
    qaoa_iterations: int = 50

    # Learning
    qml_learning_rate: float = 0.1
    qml_epochs: int = 100
    kmeans_max_iterations: int = 50

    def __post_init__(self) -> None:
        if self.shor_counting_qubits > self.shor_num_qubits:
            raise ValueError(
                f"shor_counting_qubits ({self.shor_counting_qubits}) cannot exceed "
                f"shor_num_qubits ({self.shor_num_qubits})"
            )
        for name in ('shor_num_qubits', 'shor_counting_qubits', 'grover_num_qubits',
                     'shor_max_iterations', 'qaoa_iterations', 'qml_epochs',
                     'kmeans_max_iterations'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DriverConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'DriverConfig':
        """Load overrides from a .json, .yaml or .yml file."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = path.suffix.lower()
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f)
            elif suffix == '.json':
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported config format: {suffix!r}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = DriverConfig()
