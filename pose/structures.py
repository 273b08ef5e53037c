"""
Joint and pose records produced by the decoders.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

from .skeleton import JointName, NUM_JOINTS

Point = Tuple[float, float]
Vector = Tuple[float, float]


class Cell(NamedTuple):
    """Integer (row, col) coordinate into the output grid."""
    row: int
    col: int

    @classmethod
    def zero(cls) -> "Cell":
        return cls(0, 0)


def add_vector(point: Point, vector: Vector) -> Point:
    """Element-wise point + vector."""
    return (point[0] + vector[0], point[1] + vector[1])


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


@dataclass
class Joint:
    """A single joint instance with position, grid cell and confidence."""
    name: JointName
    position: Point = (0.0, 0.0)  # x, y
    cell: Cell = field(default_factory=Cell.zero)
    confidence: float = 0.0
    is_valid: bool = False

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    def as_tuple(self) -> Point:
        """Return (x, y) tuple."""
        return (self.position[0], self.position[1])

    def as_int_tuple(self) -> Tuple[int, int]:
        """Return (x, y) as integers."""
        return (int(self.position[0]), int(self.position[1]))

    def distance_to(self, other: "Joint") -> float:
        return distance(self.position, other.position)

    def update(self, cell: Cell, position: Point, confidence: float, threshold: float) -> None:
        """Set cell, position and confidence; validity follows ``threshold``."""
        self.cell = cell
        self.position = position
        self.confidence = confidence
        self.is_valid = confidence >= threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name.label,
            "x": self.position[0],
            "y": self.position[1],
            "row": self.cell.row,
            "col": self.cell.col,
            "confidence": self.confidence,
            "valid": self.is_valid,
        }


def _default_joints() -> List[Joint]:
    return [Joint(name=name) for name in JointName]


@dataclass
class Pose:
    """
    One detected person: 17 joints indexed by JointName, plus a confidence.

    Each pose owns its joints; nothing is shared between poses.
    """
    joints: List[Joint] = field(default_factory=_default_joints)
    confidence: float = 0.0

    def __getitem__(self, name: JointName) -> Joint:
        return self.joints[name]

    def __iter__(self) -> Iterator[Joint]:
        return iter(self.joints)

    def __len__(self) -> int:
        return len(self.joints)

    def get_joint(self, name: JointName) -> Optional[Joint]:
        """Get joint by name if valid."""
        joint = self.joints[name]
        return joint if joint.is_valid else None

    def valid_joints(self) -> List[Joint]:
        return [joint for joint in self.joints if joint.is_valid]

    def mean_confidence(self, joints: Optional[List[Joint]] = None) -> float:
        """Sum of the given joints' confidences over the full joint count."""
        if joints is None:
            joints = self.joints
        return sum(joint.confidence for joint in joints) / NUM_JOINTS

    def scale(self, scale_x: float, scale_y: float) -> None:
        """Map every joint position through a uniform, non-rotated scale."""
        for joint in self.joints:
            joint.position = (joint.position[0] * scale_x, joint.position[1] * scale_y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence": self.confidence,
            "joints": [joint.to_dict() for joint in self.joints],
        }
