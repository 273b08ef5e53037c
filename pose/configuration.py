"""
Decoder configuration.
"""

from dataclasses import dataclass
from enum import Enum

from config import DecoderConfig


class Algorithm(Enum):
    """Pose decoding strategy."""
    SINGLE = "single"
    MULTIPLE = "multiple"


@dataclass
class PoseBuilderConfiguration:
    """
    Parameters the pose decoders use.

    Attributes:
        joint_confidence_threshold: Min confidence for a valid joint
        pose_confidence_threshold: Min confidence for an accepted pose
        matching_joint_distance: Max pixel distance between two joints of the
            same name to treat them as the same joint
        local_search_radius: Half-width (cells) of the local-maximum window
        max_pose_count: Max number of poses returned
        adjacent_joint_offset_refinement_steps: Offset refinement iterations
            per assembled joint
    """
    joint_confidence_threshold: float = 0.1
    pose_confidence_threshold: float = 0.5
    matching_joint_distance: float = 40.0
    local_search_radius: int = 3
    max_pose_count: int = 15
    adjacent_joint_offset_refinement_steps: int = 3

    def __post_init__(self):
        if self.matching_joint_distance < 0:
            raise ValueError(f"matching_joint_distance must be >= 0, got {self.matching_joint_distance}")
        if self.local_search_radius < 0:
            raise ValueError(f"local_search_radius must be >= 0, got {self.local_search_radius}")
        if self.max_pose_count < 1:
            raise ValueError(f"max_pose_count must be >= 1, got {self.max_pose_count}")
        if self.adjacent_joint_offset_refinement_steps < 0:
            raise ValueError(
                "adjacent_joint_offset_refinement_steps must be >= 0, "
                f"got {self.adjacent_joint_offset_refinement_steps}"
            )

    @classmethod
    def from_settings(cls) -> "PoseBuilderConfiguration":
        """Create a configuration from environment-backed settings."""
        return cls(
            joint_confidence_threshold=DecoderConfig.JOINT_CONFIDENCE_THRESHOLD,
            pose_confidence_threshold=DecoderConfig.POSE_CONFIDENCE_THRESHOLD,
            matching_joint_distance=DecoderConfig.MATCHING_JOINT_DISTANCE,
            local_search_radius=DecoderConfig.LOCAL_SEARCH_RADIUS,
            max_pose_count=DecoderConfig.MAX_POSE_COUNT,
            adjacent_joint_offset_refinement_steps=DecoderConfig.REFINEMENT_STEPS,
        )
