"""
Status line vocabulary shared by the classifier and the overlay renderer.

Lines are either "Label: Value" pairs or a bare advisory. The renderer
highlights a value as good when it contains "normal" or is one of the
canonical good-posture values, and as a warning otherwise.
"""
from __future__ import annotations

from typing import Optional, Tuple

SEPARATOR = ": "

HEAD = "Head"
ELBOW = "Elbow"
HAND = "Hand movement"
POSITION = "Position"

HEAD_TILTED_LEFT = "tilted left"
HEAD_TILTED_RIGHT = "tilted right"
HEAD_NORMAL = "normal"

ELBOW_BOTH_BENT = "both bent"
ELBOW_LEFT_BENT = "left bent"
ELBOW_RIGHT_BENT = "right bent"
ELBOW_BOTH_STRAIGHT = "both straight"

HAND_BOTH_RAISED = "both raised"
HAND_LEFT_RAISED = "left raised"
HAND_RIGHT_RAISED = "right raised"
HAND_NORMAL = "normal"

POSITION_STANDING = "Standing"
# Non-standing stance is reported as an empty line, crouch is not labelled.
POSITION_PLACEHOLDER = ""

MOVE_MORE = "move more to be better detected"
NO_POSE = "No pose detected"
ERROR_PREFIX = "Error: "
ERROR_DETAIL_CHARS = 50

GOOD_VALUES = frozenset({POSITION_STANDING, ELBOW_BOTH_STRAIGHT})

TONE_GOOD = "good"
TONE_WARN = "warn"
TONE_INFO = "info"


def status_line(label: str, value: str) -> str:
	return f"{label}{SEPARATOR}{value}"


def error_line(exc: BaseException) -> str:
	return ERROR_PREFIX + str(exc)[:ERROR_DETAIL_CHARS]


def split_line(line: str) -> Tuple[Optional[str], str]:
	"""Split "Label: Value" into (label, value); advisories give (None, line)."""
	parts = line.split(SEPARATOR)
	if len(parts) != 2:
		return None, line
	return parts[0], parts[1]


def status_tone(line: str) -> str:
	label, value = split_line(line)
	if label is None:
		return TONE_INFO
	if "normal" in value or value in GOOD_VALUES:
		return TONE_GOOD
	return TONE_WARN
