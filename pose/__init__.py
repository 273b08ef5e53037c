"""
PoseNet output decoding.

Turns PoseNet heatmap, offset and displacement tensors into human poses of
17 named joints, either one pose (per-joint argmax) or several (greedy root
selection and skeleton-guided assembly).

Usage:
    from pose import PoseNetOutput, PoseBuilder, Algorithm

    output = PoseNetOutput.from_prediction(prediction)
    builder = PoseBuilder(output, input_image_size=(1280, 720))

    pose = builder.single_pose()
    poses = builder.multiple_poses()
"""

from .skeleton import JointName, Edge, EDGES, NUM_JOINTS, NUM_EDGES, edges_for, edge_between
from .structures import Cell, Joint, Pose
from .output import PoseNetOutput, OutputFeature
from .configuration import Algorithm, PoseBuilderConfiguration
from .single import decode_single_pose
from .multiple import MultiPoseDecoder, decode_multiple_poses
from .builder import PoseBuilder, decode

__all__ = [
    'JointName',
    'Edge',
    'EDGES',
    'NUM_JOINTS',
    'NUM_EDGES',
    'edges_for',
    'edge_between',
    'Cell',
    'Joint',
    'Pose',
    'PoseNetOutput',
    'OutputFeature',
    'Algorithm',
    'PoseBuilderConfiguration',
    'decode_single_pose',
    'MultiPoseDecoder',
    'decode_multiple_poses',
    'PoseBuilder',
    'decode',
]
