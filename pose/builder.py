"""
Pose builder: binds one model output to a configuration and the size of the
original image, and runs either decoding strategy.
"""

from dataclasses import replace
from typing import List, Optional, Tuple, Union

import numpy as np

from logger import get_logger
from .configuration import Algorithm, PoseBuilderConfiguration
from .multiple import decode_multiple_poses
from .output import PoseNetOutput
from .single import decode_single_pose
from .structures import Pose

logger = get_logger("pose.builder")


class PoseBuilder:
    """
    Decodes poses from a PoseNet output and maps them onto the input image.

    Attributes:
        output: Model output view
        configuration: Private copy of the decoder parameters
        scale: (x, y) model-to-input scale
    """

    def __init__(
        self,
        output: PoseNetOutput,
        configuration: Optional[PoseBuilderConfiguration] = None,
        input_image_size: Optional[Tuple[float, float]] = None
    ):
        """
        Initialize pose builder.

        Args:
            output: Model output view
            configuration: Decoder parameters (default: PoseBuilderConfiguration())
            input_image_size: (width, height) of the original image; None keeps
                positions in model input space
        """
        self.output = output
        # Copied so later changes by the caller do not affect this builder
        self.configuration = replace(configuration or PoseBuilderConfiguration())

        if input_image_size is None:
            input_image_size = output.model_input_size

        model_width, model_height = output.model_input_size
        self.scale = (
            input_image_size[0] / model_width,
            input_image_size[1] / model_height,
        )

    @classmethod
    def from_image(
        cls,
        output: PoseNetOutput,
        configuration: Optional[PoseBuilderConfiguration],
        image: np.ndarray
    ) -> "PoseBuilder":
        """Create a builder scaled to a (H, W[, C]) image array."""
        height, width = image.shape[:2]
        return cls(output, configuration, input_image_size=(width, height))

    def single_pose(self) -> Pose:
        """Decode exactly one pose."""
        return decode_single_pose(self.output, self.configuration, *self.scale)

    def multiple_poses(self) -> List[Pose]:
        """Decode up to ``max_pose_count`` poses."""
        return decode_multiple_poses(self.output, self.configuration, *self.scale)

    def build(self, algorithm: Union[Algorithm, str] = Algorithm.MULTIPLE) -> List[Pose]:
        """Run the given algorithm; the single-pose result is wrapped in a list."""
        algorithm = Algorithm(algorithm)
        if algorithm is Algorithm.SINGLE:
            poses = [self.single_pose()]
        else:
            poses = self.multiple_poses()

        logger.debug(f"{algorithm.value}: decoded {len(poses)} pose(s)")
        return poses


def decode(
    output: PoseNetOutput,
    input_image_size: Optional[Tuple[float, float]] = None,
    algorithm: Union[Algorithm, str] = Algorithm.MULTIPLE,
    configuration: Optional[PoseBuilderConfiguration] = None
) -> List[Pose]:
    """
    Decode poses from one model output.

    Args:
        output: Model output view
        input_image_size: (width, height) of the original image
        algorithm: Algorithm.SINGLE or Algorithm.MULTIPLE (or their values)
        configuration: Decoder parameters (default: PoseBuilderConfiguration())

    Returns:
        List of poses; exactly one for the single-pose algorithm
    """
    return PoseBuilder(output, configuration, input_image_size).build(algorithm)
