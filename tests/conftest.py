"""
Pytest configuration and fixtures for testing
"""

import pytest
from fastapi.testclient import TestClient

from swing_scoring.models import PhaseMarkers
from swing_scoring.pose_features import (
    LEFT_ANKLE,
    LEFT_HIP,
    LEFT_WRIST,
    NUM_LANDMARKS,
    RIGHT_HIP,
    RIGHT_WRIST,
)


def _com_x(i):
    if i < 5:
        return 0.50
    if i <= 12:
        return 0.47 - 0.01 * (i - 5)
    return 0.40 + 0.01 * (i - 12)


def _hip_drop(i):
    if i <= 20:
        return 0.0
    if i == 21:
        return 0.05
    return 0.06


_HAND_X = {21: 0.6, 22: 0.7, 23: 0.8, 24: 0.9}


def build_swing_frames(n=40):
    """
    Synthetic right-handed swing at 30 fps.

    Stance until frame 5, deepest load at 12, front foot plant at 18, hip
    rotation peak at 21 and full hand extension at 24.
    """
    frames = []
    for i in range(n):
        pts = [[0.5, 0.5] for _ in range(NUM_LANDMARKS)]
        cx, dy = _com_x(i), _hip_drop(i)
        pts[LEFT_HIP] = [cx - 0.05, 0.5 + dy]
        pts[RIGHT_HIP] = [cx + 0.05, 0.5 - dy]
        pts[LEFT_ANKLE] = [0.5, 0.9 if i >= 18 else 0.7]
        hand_x = _HAND_X.get(i, 0.5)
        pts[LEFT_WRIST] = [hand_x, 0.5]
        pts[RIGHT_WRIST] = [hand_x, 0.5]
        frames.append(pts)
    return frames


@pytest.fixture
def swing_frames():
    """Pose frames for one well-formed swing"""
    return build_swing_frames()


@pytest.fixture
def freeman_markers():
    """Markers from the Freddie Freeman example: 900/340ms, no pelvis peak"""
    return PhaseMarkers(load_start=900.0, fire_start=340.0)


@pytest.fixture
def judge_markers():
    """Markers inside every Aaron Judge window"""
    return PhaseMarkers(load_start=1050.0, fire_start=350.0, pelvis_peak=200.0)


@pytest.fixture
def client():
    """Create a test client for FastAPI app"""
    import api_server

    api_server.limiter.enabled = False
    return TestClient(api_server.app)
