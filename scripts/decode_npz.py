#!/usr/bin/env python3
"""
Decode PoseNet outputs saved in an .npz file and print the poses as JSON.

The archive must hold the arrays "heatmap", "offsets", "displacementFwd" and
"displacementBwd", each shaped [channel][row][col].
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import numpy as np

from config import DecoderConfig, ModelConfig
from logger import get_logger
from pose import Algorithm, PoseBuilder, PoseBuilderConfiguration, PoseNetOutput

logger = get_logger("scripts.decode_npz")


def main(
    npz_path: str,
    image_width: float,
    image_height: float,
    algorithm: str = DecoderConfig.ALGORITHM,
    input_size: int = ModelConfig.INPUT_WIDTH,
    stride: int = ModelConfig.OUTPUT_STRIDE,
    output_path: str = None
) -> int:
    path = Path(npz_path)
    if not path.exists():
        logger.error(f"File not found: {path}")
        return 1

    with np.load(path) as archive:
        output = PoseNetOutput.from_prediction(
            archive,
            model_input_size=(input_size, input_size),
            output_stride=stride,
        )

    logger.info(f"Loaded {path.name}: grid {output.height}x{output.width}, stride {output.output_stride}")

    builder = PoseBuilder(
        output,
        PoseBuilderConfiguration.from_settings(),
        input_image_size=(image_width, image_height),
    )
    poses = builder.build(Algorithm(algorithm))

    logger.info(f"Decoded {len(poses)} pose(s) with the {algorithm} algorithm")
    result = json.dumps([pose.to_dict() for pose in poses], indent=2)
    if output_path:
        Path(output_path).write_text(result)
        logger.info(f"Saved poses to {output_path}")
    else:
        print(result)
    return 0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="PoseNet output decoder")
    parser.add_argument("npz", help="Path to .npz file with the model outputs")
    parser.add_argument("--image-width", type=float, required=True, help="Original image width")
    parser.add_argument("--image-height", type=float, required=True, help="Original image height")
    parser.add_argument(
        "--algorithm",
        choices=[a.value for a in Algorithm],
        default=DecoderConfig.ALGORITHM,
        help="Decoding strategy"
    )
    parser.add_argument("--input-size", type=int, default=ModelConfig.INPUT_WIDTH, help="Model input size")
    parser.add_argument("--stride", type=int, default=ModelConfig.OUTPUT_STRIDE, help="Model output stride")
    parser.add_argument("--output", default=None, help="Write JSON here instead of stdout")

    args = parser.parse_args()
    sys.exit(main(args.npz, args.image_width, args.image_height, args.algorithm, args.input_size, args.stride, args.output))
