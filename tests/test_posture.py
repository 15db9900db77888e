import itertools
import math
import unittest
from unittest.mock import patch

from gerakin.config import ClassifierConfig
from gerakin.pose.posture import analyze_pose, calculate_angle, has_keypoints, standing_ratio
from gerakin.pose.types import FrameSize
from tests.helpers import lm, pose, standing_body

FRAME = FrameSize(width=720, height=1280)


def _arm_points(side, elbow, angle_deg):
	"""Shoulder to the right of the elbow, wrist rotated angle_deg from it."""
	ex, ey = elbow
	rad = math.radians(angle_deg)
	return [
		lm(f"{side}_elbow", ex, ey),
		lm(f"{side}_shoulder", ex + 100, ey),
		lm(f"{side}_wrist", ex + 100 * math.cos(rad), ey + 100 * math.sin(rad)),
	]


class TestCalculateAngle(unittest.TestCase):
	def test_right_angle(self):
		a, b, c = lm("a", 0, 10), lm("b", 0, 0), lm("c", 10, 0)
		self.assertAlmostEqual(calculate_angle(a, b, c), 90.0)

	def test_straight_line(self):
		a, b, c = lm("a", -10, 0), lm("b", 0, 0), lm("c", 10, 0)
		self.assertAlmostEqual(calculate_angle(a, b, c), 180.0)

	def test_reflex_folds_back(self):
		# Raw atan2 difference is 270 degrees; interior angle is 90.
		a, b, c = lm("a", 0, -10), lm("b", 0, 0), lm("c", -10, 0)
		self.assertAlmostEqual(calculate_angle(a, b, c), 90.0)

	def test_symmetry_and_range(self):
		coords = [-30, -7, 0, 12, 45]
		points = [lm("p", x, y) for x, y in itertools.product(coords, coords)]
		b = lm("b", 3, -2)
		for a in points[::3]:
			for c in points[1::4]:
				angle = calculate_angle(a, b, c)
				self.assertGreaterEqual(angle, 0.0)
				self.assertLessEqual(angle, 180.0)
				self.assertAlmostEqual(angle, calculate_angle(c, b, a))


class TestHasKeypoints(unittest.TestCase):
	def test_requires_presence_and_likelihood(self):
		p = pose(lm("left_ear", 0, 0, 0.5), lm("right_ear", 0, 0, 0.49))
		self.assertTrue(has_keypoints(p, ["left_ear"]))
		self.assertFalse(has_keypoints(p, ["left_ear", "right_ear"]))
		self.assertFalse(has_keypoints(p, ["left_ear", "nose"]))


class TestAnalyzePose(unittest.TestCase):
	def test_head_tilted_left(self):
		p = pose(lm("left_ear", 300, 100), lm("right_ear", 200, 80))
		self.assertEqual(analyze_pose(p, FRAME), ["Head: tilted left"])

	def test_head_tilted_right(self):
		p = pose(lm("left_ear", 300, 80), lm("right_ear", 200, 100))
		self.assertEqual(analyze_pose(p, FRAME), ["Head: tilted right"])

	def test_head_normal_at_threshold(self):
		p = pose(lm("left_ear", 300, 95), lm("right_ear", 200, 80))
		self.assertEqual(analyze_pose(p, FRAME), ["Head: normal"])

	def test_head_normal_at_negative_threshold(self):
		p = pose(lm("left_ear", 300, 80), lm("right_ear", 200, 95))
		self.assertEqual(analyze_pose(p, FRAME), ["Head: normal"])

	def test_left_elbow_bent(self):
		p = pose(*_arm_points("left", (100, 400), 90), *_arm_points("right", (500, 400), 150))
		statuses = analyze_pose(p, FRAME)
		self.assertIn("Elbow: left bent", statuses)

	def test_elbow_combinations(self):
		cases = [
			((60, 60), "Elbow: both bent"),
			((170, 100), "Elbow: right bent"),
			((170, 170), "Elbow: both straight"),
		]
		for (left, right), expected in cases:
			p = pose(*_arm_points("left", (100, 400), left), *_arm_points("right", (500, 400), right))
			self.assertEqual(analyze_pose(p, FRAME)[0], expected)

	def test_elbow_exactly_at_threshold_reads_straight(self):
		p = pose(*_arm_points("left", (100, 400), 170), *_arm_points("right", (500, 400), 170))
		with patch("gerakin.pose.posture.calculate_angle", side_effect=[120.0, 120.0]):
			self.assertEqual(analyze_pose(p, FRAME)[0], "Elbow: both straight")
		with patch("gerakin.pose.posture.calculate_angle", side_effect=[120.0, 119.9]):
			self.assertEqual(analyze_pose(p, FRAME)[0], "Elbow: right bent")

	def test_hand_raise(self):
		base = [lm("left_shoulder", 400, 300), lm("right_shoulder", 300, 300)]
		cases = [
			((200, 200), "Hand movement: both raised"),
			((200, 400), "Hand movement: left raised"),
			((400, 200), "Hand movement: right raised"),
			((400, 400), "Hand movement: normal"),
		]
		for (ly, ry), expected in cases:
			p = pose(*base, lm("left_wrist", 400, ly), lm("right_wrist", 300, ry))
			self.assertEqual(analyze_pose(p, FRAME), [expected])

	def test_standing_ratio_above_threshold(self):
		size = FrameSize(width=500, height=1000)
		p = pose(
			lm("left_hip", 0, 400), lm("right_hip", 0, 400),
			lm("left_knee", 0, 600), lm("right_knee", 0, 600),
		)
		self.assertAlmostEqual(standing_ratio(p, size), 0.20)
		self.assertEqual(analyze_pose(p, size), ["Position: Standing"])

	def test_low_ratio_emits_placeholder(self):
		size = FrameSize(width=500, height=1000)
		p = pose(
			lm("left_hip", 0, 400), lm("right_hip", 0, 400),
			lm("left_knee", 0, 450), lm("right_knee", 0, 450),
		)
		self.assertEqual(analyze_pose(p, size), [""])

	def test_ratio_exactly_at_threshold_emits_placeholder(self):
		size = FrameSize(width=500, height=1000)
		p = pose(
			lm("left_hip", 0, 400), lm("right_hip", 0, 400),
			lm("left_knee", 0, 550), lm("right_knee", 0, 550),
		)
		self.assertAlmostEqual(standing_ratio(p, size), 0.15)
		self.assertEqual(analyze_pose(p, size), [""])

	def test_fixed_rule_order(self):
		self.assertEqual(
			analyze_pose(standing_body(), FRAME),
			["Head: normal", "Elbow: both straight", "Hand movement: normal", "Position: Standing"],
		)

	def test_rule_gate_uses_half_likelihood(self):
		p = pose(lm("left_ear", 300, 100, 0.4), lm("right_ear", 200, 80, 0.9))
		self.assertEqual(analyze_pose(p, FRAME), ["move more to be better detected"])

	def test_fallback_when_nothing_fires(self):
		self.assertEqual(analyze_pose(pose(lm("nose", 1, 1)), FRAME), ["move more to be better detected"])

	def test_config_thresholds(self):
		p = pose(lm("left_ear", 300, 100), lm("right_ear", 200, 80))
		cfg = ClassifierConfig(head_tilt_px=30.0)
		self.assertEqual(analyze_pose(p, FRAME, cfg), ["Head: normal"])


if __name__ == "__main__":
	unittest.main()
