"""
PoseNet skeleton graph.

COCO Keypoint Format (17 keypoints):
    0: nose
    1: left_eye
    2: right_eye
    3: left_ear
    4: right_ear
    5: left_shoulder
    6: right_shoulder
    7: left_elbow
    8: right_elbow
    9: left_wrist
    10: right_wrist
    11: left_hip
    12: right_hip
    13: left_knee
    14: right_knee
    15: left_ankle
    16: right_ankle

The 16 edges below connect the joints into a tree rooted at the nose. Each
edge index selects a channel pair in the displacement maps: channel
``index`` holds the y component and ``index + NUM_EDGES`` the x component.
"""

from enum import IntEnum
from typing import Dict, NamedTuple, Optional, Tuple


class JointName(IntEnum):
    """Joint names, valued by their heatmap channel."""
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16

    @property
    def label(self) -> str:
        """snake_case name, e.g. ``left_shoulder``."""
        return self.name.lower()


NUM_JOINTS = len(JointName)


class Edge(NamedTuple):
    """A parent -> child connection between two joints."""
    parent: JointName
    child: JointName
    index: int

    def other(self, name: JointName) -> JointName:
        """Return the endpoint opposite ``name``."""
        return self.child if name == self.parent else self.parent


EDGES: Tuple[Edge, ...] = (
    Edge(JointName.NOSE, JointName.LEFT_EYE, 0),
    Edge(JointName.LEFT_EYE, JointName.LEFT_EAR, 1),
    Edge(JointName.NOSE, JointName.RIGHT_EYE, 2),
    Edge(JointName.RIGHT_EYE, JointName.RIGHT_EAR, 3),
    Edge(JointName.NOSE, JointName.LEFT_SHOULDER, 4),
    Edge(JointName.LEFT_SHOULDER, JointName.LEFT_ELBOW, 5),
    Edge(JointName.LEFT_ELBOW, JointName.LEFT_WRIST, 6),
    Edge(JointName.LEFT_SHOULDER, JointName.LEFT_HIP, 7),
    Edge(JointName.LEFT_HIP, JointName.LEFT_KNEE, 8),
    Edge(JointName.LEFT_KNEE, JointName.LEFT_ANKLE, 9),
    Edge(JointName.NOSE, JointName.RIGHT_SHOULDER, 10),
    Edge(JointName.RIGHT_SHOULDER, JointName.RIGHT_ELBOW, 11),
    Edge(JointName.RIGHT_ELBOW, JointName.RIGHT_WRIST, 12),
    Edge(JointName.RIGHT_SHOULDER, JointName.RIGHT_HIP, 13),
    Edge(JointName.RIGHT_HIP, JointName.RIGHT_KNEE, 14),
    Edge(JointName.RIGHT_KNEE, JointName.RIGHT_ANKLE, 15),
)

NUM_EDGES = len(EDGES)

# Edges touching each joint, in edge-index order
_ADJACENCY: Dict[JointName, Tuple[Edge, ...]] = {
    name: tuple(edge for edge in EDGES if name in (edge.parent, edge.child))
    for name in JointName
}


def edges_for(name: JointName) -> Tuple[Edge, ...]:
    """Return all edges that link from or to the given joint."""
    return _ADJACENCY[JointName(name)]


def edge_between(parent: JointName, child: JointName) -> Optional[Edge]:
    """Return the edge running from ``parent`` to ``child``, if any."""
    for edge in _ADJACENCY[JointName(parent)]:
        if edge.parent == parent and edge.child == child:
            return edge
    return None
