"""
Multi-pose decoding.

Locally-maximal joints become candidate roots. Each root not already covered
by an accepted pose is grown into a full pose by walking the skeleton graph
with the displacement maps, then scored on the joints it does not share with
earlier poses.
"""

from collections import deque
from dataclasses import replace
from typing import Deque, List

import numpy as np

from logger import get_logger
from .configuration import PoseBuilderConfiguration
from .output import PoseNetOutput
from .skeleton import Edge, JointName, edges_for
from .structures import Cell, Joint, Pose, add_vector, distance

logger = get_logger("pose.multiple")


class MultiPoseDecoder:
    """
    Greedy multi-person decoder over one model output.

    Attributes:
        output: Model output view
        configuration: Decoder parameters
    """

    def __init__(self, output: PoseNetOutput, configuration: PoseBuilderConfiguration):
        self.output = output
        self.configuration = replace(configuration)

    def decode(self, scale_x: float = 1.0, scale_y: float = 1.0) -> List[Pose]:
        """
        Decode up to ``max_pose_count`` poses.

        Args:
            scale_x: Model-to-input horizontal scale
            scale_y: Model-to-input vertical scale

        Returns:
            Accepted poses in acceptance order
        """
        config = self.configuration
        detected: List[Pose] = []

        candidates = self.candidate_roots()
        logger.debug(f"{len(candidates)} candidate roots")

        for candidate in candidates:
            # Skip roots near a same-named joint of an accepted pose
            if self._is_claimed(candidate, detected):
                continue

            pose = self.assemble_pose(candidate)
            pose.confidence = self.pose_confidence(pose, detected)

            if pose.confidence < config.pose_confidence_threshold:
                logger.debug(
                    f"Rejected pose rooted at {candidate.name.label} {tuple(candidate.cell)}: "
                    f"confidence {pose.confidence:.3f}"
                )
                continue

            detected.append(pose)
            logger.debug(
                f"Accepted pose {len(detected)} rooted at {candidate.name.label} "
                f"{tuple(candidate.cell)}: confidence {pose.confidence:.3f}"
            )

            if len(detected) >= config.max_pose_count:
                break

        # Overlap tests above run in model space; scale only the final list
        for pose in detected:
            pose.scale(scale_x, scale_y)

        return detected

    def candidate_roots(self) -> List[Joint]:
        """Return locally-maximal joints above the joint threshold, most confident first."""
        output = self.output
        threshold = self.configuration.joint_confidence_threshold
        candidates: List[Joint] = []

        for name in JointName:
            channel = output.heatmap[int(name)]
            for row, col in np.argwhere(channel >= threshold):
                cell = Cell(int(row), int(col))
                confidence = float(channel[cell.row, cell.col])

                if confidence < self._greatest_neighbor_confidence(name, cell):
                    continue

                candidates.append(Joint(
                    name=name,
                    position=output.position(name, cell),
                    cell=cell,
                    confidence=confidence,
                    is_valid=True,
                ))

        # sorted() is stable: ties stay in joint then row-major order
        return sorted(candidates, key=lambda joint: joint.confidence, reverse=True)

    def _greatest_neighbor_confidence(self, name: JointName, cell: Cell) -> float:
        """
        Greatest confidence in the local window around ``cell``.

        Window cells in the same row or the same column as ``cell`` are not
        compared.
        """
        radius = self.configuration.local_search_radius
        row_lo = max(cell.row - radius, 0)
        row_hi = min(cell.row + radius, self.output.height - 1)
        col_lo = max(cell.col - radius, 0)
        col_hi = min(cell.col + radius, self.output.width - 1)

        window = self.output.heatmap[int(name), row_lo:row_hi + 1, col_lo:col_hi + 1]
        window = np.delete(window, cell.row - row_lo, axis=0)
        window = np.delete(window, cell.col - col_lo, axis=1)
        window = window[~np.isnan(window)]

        return float(window.max(initial=0.0))

    def _is_claimed(self, candidate: Joint, poses: List[Pose]) -> bool:
        max_distance = self.configuration.matching_joint_distance
        for pose in poses:
            joint = pose[candidate.name]
            if joint.is_valid and joint.distance_to(candidate) <= max_distance:
                return True
        return False

    def assemble_pose(self, root: Joint) -> Pose:
        """Grow a pose from ``root`` by breadth-first traversal of the skeleton."""
        pose = Pose()
        pose[root.name].update(
            cell=root.cell,
            position=root.position,
            confidence=root.confidence,
            threshold=self.configuration.joint_confidence_threshold,
        )
        if not pose[root.name].is_valid:
            return pose

        queue: Deque[JointName] = deque([root.name])
        while queue:
            name = queue.popleft()

            for edge in edges_for(name):
                parent = pose[edge.parent]
                child = pose[edge.child]

                # Already resolved
                if parent.is_valid and child.is_valid:
                    continue

                source = parent if parent.is_valid else child
                target = pose[edge.other(source.name)]

                self._configure(target, source, edge)

                if target.is_valid:
                    queue.append(target.name)

        return pose

    def _configure(self, joint: Joint, source: Joint, edge: Edge) -> None:
        """Locate ``joint`` by following ``edge`` from ``source``."""
        output = self.output
        config = self.configuration

        if edge.parent == source.name:
            displacement = output.forward_displacement(edge.index, source.cell)
        else:
            displacement = output.backward_displacement(edge.index, source.cell)

        approximate = add_vector(source.position, displacement)

        for _ in range(config.adjacent_joint_offset_refinement_steps):
            cell = output.cell_for(approximate)
            if cell is None:
                break
            approximate = output.position(joint.name, cell)

        cell = output.cell_for(approximate)
        if cell is None:
            return

        joint.update(
            cell=cell,
            position=approximate,
            confidence=output.confidence(joint.name, cell),
            threshold=config.joint_confidence_threshold,
        )

    def non_overlapping_joints(self, pose: Pose, detected: List[Pose]) -> List[Joint]:
        """Valid joints of ``pose`` not within matching distance of the same joint in ``detected``."""
        max_distance = self.configuration.matching_joint_distance
        joints = []
        for joint in pose.valid_joints():
            overlaps = any(
                other[joint.name].is_valid
                and distance(joint.position, other[joint.name].position) <= max_distance
                for other in detected
            )
            if not overlaps:
                joints.append(joint)
        return joints

    def pose_confidence(self, pose: Pose, detected: List[Pose]) -> float:
        """Sum of non-overlapping joint confidences over the full joint count."""
        return pose.mean_confidence(self.non_overlapping_joints(pose, detected))


def decode_multiple_poses(
    output: PoseNetOutput,
    configuration: PoseBuilderConfiguration,
    scale_x: float = 1.0,
    scale_y: float = 1.0
) -> List[Pose]:
    """Decode up to ``configuration.max_pose_count`` poses from the model output."""
    return MultiPoseDecoder(output, configuration).decode(scale_x, scale_y)
