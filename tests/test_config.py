"""Tests for configuration validation."""

from dataclasses import FrozenInstanceError, replace

import pytest

from box_rush.config import DEFAULT_CONFIG, FRAME_TIME, TARGET_FPS


def test_defaults():
    assert DEFAULT_CONFIG.box_size == 50
    assert DEFAULT_CONFIG.max_health == 4
    assert DEFAULT_CONFIG.immunity_duration == 0.0
    assert DEFAULT_CONFIG.spawn_milestone == 10
    assert DEFAULT_CONFIG.frame_time == pytest.approx(1 / TARGET_FPS) == FRAME_TIME
    assert DEFAULT_CONFIG.validate() is DEFAULT_CONFIG


def test_config_is_frozen():
    with pytest.raises(FrozenInstanceError):
        DEFAULT_CONFIG.box_size = 10


@pytest.mark.parametrize('field, value', [
    ('box_size', 0),
    ('player_speed', -1),
    ('max_health', 0),
    ('stun_duration', -0.1),
    ('immunity_duration', -1),
    ('spawn_milestone', 0),
    ('placement_max_attempts', 0),
    ('frame_time', 0),
])
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValueError):
        replace(DEFAULT_CONFIG, **{field: value}).validate()
