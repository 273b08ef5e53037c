"""
Configuration module for the PoseNet output decoder.
Centralizes model geometry, decoder defaults and logging settings.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# PoseNet model geometry
class ModelConfig:
    """PoseNet model input size and output stride."""
    INPUT_WIDTH = int(os.getenv("POSENET_INPUT_SIZE", 513))
    INPUT_HEIGHT = int(os.getenv("POSENET_INPUT_SIZE", 513))
    OUTPUT_STRIDE = int(os.getenv("POSENET_OUTPUT_STRIDE", 16))

    # Model output feature names
    HEATMAP_FEATURE = "heatmap"
    OFFSETS_FEATURE = "offsets"
    FORWARD_DISPLACEMENT_FEATURE = "displacementFwd"
    BACKWARD_DISPLACEMENT_FEATURE = "displacementBwd"


# Pose decoding configuration
class DecoderConfig:
    """Thresholds and iteration counts for pose decoding."""
    JOINT_CONFIDENCE_THRESHOLD = float(os.getenv("JOINT_CONFIDENCE_THRESHOLD", 0.1))
    POSE_CONFIDENCE_THRESHOLD = float(os.getenv("POSE_CONFIDENCE_THRESHOLD", 0.5))
    MATCHING_JOINT_DISTANCE = float(os.getenv("MATCHING_JOINT_DISTANCE", 40.0))
    LOCAL_SEARCH_RADIUS = int(os.getenv("LOCAL_SEARCH_RADIUS", 3))
    MAX_POSE_COUNT = int(os.getenv("MAX_POSE_COUNT", 15))
    REFINEMENT_STEPS = int(os.getenv("REFINEMENT_STEPS", 3))
    ALGORITHM = os.getenv("POSE_ALGORITHM", "multiple").lower()


# Logging configuration
class LogConfig:
    """Logging settings."""
    LEVEL = os.getenv("LOG_LEVEL", "INFO")
    FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
    FILE = os.getenv("LOG_FILE", None)  # None = console only
