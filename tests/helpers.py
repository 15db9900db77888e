"""Pose builders and a fake detector shared by the tests."""
from gerakin.pose.base import PoseProvider
from gerakin.pose.types import Landmark, Pose


def lm(name, x, y, likelihood=0.9, z=0.0):
	return Landmark(name=name, x=float(x), y=float(y), z=float(z), likelihood=float(likelihood))


def pose(*landmarks):
	return Pose.from_landmarks(landmarks)


def standing_body(likelihood=0.9):
	"""A full upright skeleton in a 720x1280 portrait frame: arms down, legs long."""
	return pose(
		lm("left_ear", 380, 150, likelihood),
		lm("right_ear", 340, 152, likelihood),
		lm("left_shoulder", 420, 300, likelihood),
		lm("right_shoulder", 300, 300, likelihood),
		lm("left_elbow", 425, 450, likelihood),
		lm("right_elbow", 295, 450, likelihood),
		lm("left_wrist", 428, 600, likelihood),
		lm("right_wrist", 292, 600, likelihood),
		lm("left_hip", 400, 650, likelihood),
		lm("right_hip", 320, 650, likelihood),
		lm("left_knee", 402, 900, likelihood),
		lm("right_knee", 318, 900, likelihood),
	)


class FakeProvider(PoseProvider):
	"""Detector stand-in returning fixed poses; `on_infer` runs mid-inference."""

	def __init__(self, poses=None, on_infer=None, calls=None):
		self.poses = poses if poses is not None else [standing_body()]
		self.on_infer = on_infer
		self.calls = calls if calls is not None else []
		self.frame_shapes = []

	def name(self):
		return "fake"

	def infer_rgb(self, rgb):
		self.frame_shapes.append(rgb.shape)
		if self.on_infer is not None:
			self.on_infer()
		return self.poses

	def close(self):
		self.calls.append("detector")
