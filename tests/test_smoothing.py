import math
import unittest

from gerakin.pose.posture import analyze_pose
from gerakin.pose.smoothing import LandmarkHistory, apply_smoothing, weighted_average
from gerakin.pose.types import FrameSize
from tests.helpers import lm, pose


class TestLandmarkHistory(unittest.TestCase):
	def test_bounded_fifo(self):
		h = LandmarkHistory(size=5)
		for i in range(12):
			h.append(lm("nose", i, i))
			self.assertLessEqual(len(h.samples("nose")), 5)
		self.assertEqual([s.x for s in h.samples("nose")], [7.0, 8.0, 9.0, 10.0, 11.0])

	def test_clear(self):
		h = LandmarkHistory()
		h.append(lm("nose", 1, 1))
		self.assertIn("nose", h)
		h.clear()
		self.assertEqual(len(h), 0)
		self.assertEqual(h.samples("nose"), [])

	def test_invalid_size_falls_back(self):
		self.assertEqual(LandmarkHistory(size=0).size, 5)


class TestWeightedAverage(unittest.TestCase):
	def test_single_sample_unchanged(self):
		s = lm("nose", 123.4, 56.7, 0.8, z=-3.0)
		out = weighted_average([s])
		self.assertAlmostEqual(out.x, 123.4)
		self.assertAlmostEqual(out.y, 56.7)
		self.assertAlmostEqual(out.z, -3.0)
		self.assertEqual(out.likelihood, 0.8)

	def test_exponential_weights(self):
		samples = [lm("nose", 0, 0, 1.0), lm("nose", 10, 20, 1.0)]
		out = weighted_average(samples)
		w_old = math.exp(-0.5)
		self.assertAlmostEqual(out.x, 10.0 / (1.0 + w_old))
		self.assertAlmostEqual(out.y, 20.0 / (1.0 + w_old))

	def test_likelihood_scales_weight(self):
		samples = [lm("nose", 0, 0, 0.5), lm("nose", 10, 0, 1.0)]
		out = weighted_average(samples)
		w_old = math.exp(-0.5) * 0.5
		self.assertAlmostEqual(out.x, 10.0 / (1.0 + w_old))

	def test_keeps_current_likelihood(self):
		samples = [lm("nose", 0, 0, 1.0), lm("nose", 10, 0, 0.75)]
		self.assertEqual(weighted_average(samples).likelihood, 0.75)

	def test_non_finite_sample_gets_no_weight(self):
		samples = [lm("nose", float("nan"), 0, 1.0), lm("nose", 10, 20, 1.0)]
		out = weighted_average(samples)
		self.assertEqual((out.x, out.y), (10.0, 20.0))
		samples = [lm("nose", 0, 0, 1.0), lm("nose", float("inf"), 0, 1.0), lm("nose", 10, 0, 1.0)]
		out = weighted_average(samples)
		self.assertTrue(math.isfinite(out.x))
		self.assertAlmostEqual(out.x, 10.0 / (1.0 + math.exp(-1.0)))

	def test_zero_weight_falls_back_to_current(self):
		samples = [lm("nose", 0, 0, 0.0), lm("nose", 10, 5, 0.0)]
		out = weighted_average(samples)
		self.assertEqual(out, samples[-1])


class TestApplySmoothing(unittest.TestCase):
	def test_same_key_set_and_history_persistence(self):
		h = LandmarkHistory()
		apply_smoothing(pose(lm("nose", 0, 0), lm("left_ear", 5, 5)), h)
		out = apply_smoothing(pose(lm("nose", 10, 10)), h)
		self.assertEqual(set(out.landmarks), {"nose"})
		# left_ear missed this frame but its buffer stays for later frames.
		self.assertEqual(len(h.samples("left_ear")), 1)
		self.assertEqual(len(h.samples("nose")), 2)

	def test_reduces_jitter(self):
		h = LandmarkHistory()
		xs = [100, 110, 100, 110, 100]
		outs = [apply_smoothing(pose(lm("nose", x, 0, 1.0)), h).landmarks["nose"].x for x in xs]
		self.assertEqual(outs[0], 100.0)
		self.assertTrue(all(100.0 <= x <= 110.0 for x in outs))
		self.assertLess(max(outs[1:]) - min(outs[1:]), 10.0)

	def test_empty_pose_passthrough(self):
		h = LandmarkHistory()
		p = pose()
		self.assertIs(apply_smoothing(p, h), p)
		self.assertEqual(len(h), 0)

	def test_input_pose_not_mutated(self):
		h = LandmarkHistory()
		apply_smoothing(pose(lm("nose", 0, 0, 1.0)), h)
		p = pose(lm("nose", 10, 0, 1.0))
		apply_smoothing(p, h)
		self.assertEqual(p.landmarks["nose"].x, 10.0)

	def test_nan_frame_does_not_poison_later_frames(self):
		h = LandmarkHistory()
		apply_smoothing(pose(lm("left_ear", 300, float("nan")), lm("right_ear", 200, 80)), h)
		out = apply_smoothing(pose(lm("left_ear", 300, 100), lm("right_ear", 200, 80)), h)
		self.assertEqual(analyze_pose(out, FrameSize(width=720, height=1280)), ["Head: tilted left"])

	def test_separate_histories_do_not_interfere(self):
		h1, h2 = LandmarkHistory(), LandmarkHistory()
		apply_smoothing(pose(lm("nose", 0, 0, 1.0)), h1)
		out = apply_smoothing(pose(lm("nose", 50, 0, 1.0)), h2)
		self.assertAlmostEqual(out.landmarks["nose"].x, 50.0)


if __name__ == "__main__":
	unittest.main()
