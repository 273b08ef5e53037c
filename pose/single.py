"""
Single-pose decoding: each joint independently takes its most confident cell.
"""

from dataclasses import replace

import numpy as np

from logger import get_logger
from .configuration import PoseBuilderConfiguration
from .output import PoseNetOutput
from .skeleton import JointName
from .structures import Cell, Joint, Pose

logger = get_logger("pose.single")


def _locate(joint: Joint, output: PoseNetOutput, configuration: PoseBuilderConfiguration) -> None:
    """Set the joint's properties from the cell with the greatest confidence."""
    channel = output.heatmap[int(joint.name)]
    # NaN cells never win
    channel = np.where(np.isnan(channel), -np.inf, channel)

    # argmax returns the first maximum in row-major order
    flat_index = int(np.argmax(channel))
    best_confidence = float(channel.flat[flat_index])
    if best_confidence > 0.0:
        row, col = np.unravel_index(flat_index, channel.shape)
        best_cell = Cell(int(row), int(col))
    else:
        best_cell = Cell.zero()
        best_confidence = 0.0

    joint.update(
        cell=best_cell,
        position=output.position(joint.name, best_cell),
        confidence=best_confidence,
        threshold=configuration.joint_confidence_threshold,
    )


def decode_single_pose(
    output: PoseNetOutput,
    configuration: PoseBuilderConfiguration,
    scale_x: float = 1.0,
    scale_y: float = 1.0
) -> Pose:
    """
    Decode exactly one pose from the model output.

    Args:
        output: Model output view
        configuration: Decoder parameters
        scale_x: Model-to-input horizontal scale
        scale_y: Model-to-input vertical scale

    Returns:
        Pose with all 17 joints populated, valid or not
    """
    configuration = replace(configuration)
    pose = Pose()

    for name in JointName:
        _locate(pose[name], output, configuration)

    # Invalid joints still contribute their raw confidence
    pose.confidence = pose.mean_confidence()

    pose.scale(scale_x, scale_y)

    logger.debug(
        f"Single pose: {len(pose.valid_joints())}/{len(pose)} valid joints, "
        f"confidence {pose.confidence:.3f}"
    )
    return pose
