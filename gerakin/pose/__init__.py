"""
Pose post-processing.

Model-agnostic Landmark/Pose types, a provider interface for the detector
(e.g., MediaPipe Pose), and the filter -> smoother -> classifier steps that
turn raw per-frame landmarks into posture status lines.
"""
