"""Tests for the simulation step and session lifecycle."""

import random
from dataclasses import replace

import pytest

from box_rush.components import (
    CollisionStun, EnemyTag, Health, Position, PlayerTag, RushPhase, RushState,
    Velocity
)
from box_rush.config import DEFAULT_CONFIG
from box_rush.enemies import BASIC, RUSHER
from box_rush.errors import PlacementError
from box_rush.geometry import distance
from box_rush.simulation import Simulation
from box_rush.systems import render_system

from conftest import CenterRandom, FillRecorder, make_session


def _positions(sim):
    return [(eid, pos.x, pos.y) for eid, pos in sim.world.query(Position)]


def _put_pickup_on_player(sim):
    sim.pickup_pos.x = sim.player_pos.x
    sim.pickup_pos.y = sim.player_pos.y


# --------------------------------------------------------------------------
# Session setup
# --------------------------------------------------------------------------

def test_new_session_layout():
    sim = Simulation(400, 600, rng=random.Random(3), now=1.0)

    assert sim.score == 0
    assert sim.player_pos == Position(200, 300)
    assert sim.health.current == sim.health.maximum == DEFAULT_CONFIG.max_health
    vel = sim.world.get_component(sim.player_id, Velocity)
    assert (vel.x, vel.y) == (DEFAULT_CONFIG.player_speed, 0.0)

    assert sim.enemy_count == 1
    enemy_id = sim.world.single(EnemyTag)
    assert sim.world.get_component(enemy_id, EnemyTag).enemy_type is BASIC
    assert distance(sim.world.get_component(enemy_id, Position), sim.player_pos) >= 200
    assert distance(sim.pickup_pos, sim.player_pos) >= 200


def test_reset_restores_everything():
    sim = Simulation(400, 400, rng=random.Random(3))
    sim.score = 17
    sim.health.current = 1
    sim.player_pos.x = 3

    sim.reset(300, 500)

    assert sim.score == 0
    assert sim.health.current == 4
    assert sim.player_pos == Position(150, 250)
    assert sim.enemy_count == 1
    assert (sim.width, sim.height) == (300, 500)


def test_failed_setup_raises_placement_error():
    config = replace(DEFAULT_CONFIG, placement_max_attempts=10)
    with pytest.raises(PlacementError):
        Simulation(400, 400, config, rng=CenterRandom())


def test_failed_reset_keeps_previous_session():
    sim = Simulation(400, 400, rng=random.Random(3))
    old_world = sim.world
    sim.rng = CenterRandom()
    with pytest.raises(PlacementError):
        sim.reset(400, 400)
    assert sim.world is old_world


def test_invalid_config_is_rejected():
    with pytest.raises(ValueError):
        Simulation(400, 400, replace(DEFAULT_CONFIG, box_size=0))


# --------------------------------------------------------------------------
# Step
# --------------------------------------------------------------------------

def test_follow_enemy_closes_in_after_one_tick():
    sim = make_session(player=(175, 175), enemies=[(BASIC, 0, 0)])
    enemy = sim.world.single(EnemyTag)
    before = distance(sim.world.get_component(enemy, Position), sim.player_pos)

    report = sim.step(0.016)

    after = distance(sim.world.get_component(enemy, Position), sim.player_pos)
    assert after < before
    assert before - after == pytest.approx(0.5)
    assert not report.frozen
    assert report.health_delta == 0


def test_player_moves_before_enemies_chase():
    sim = make_session(player=(175, 175), enemies=[(BASIC, 0, 175)])
    vel = sim.world.get_component(sim.player_id, Velocity)
    vel.x = 2.0
    sim.step(0.1)
    assert sim.player_pos == Position(177, 175)
    enemy = sim.world.single(EnemyTag)
    assert sim.world.get_component(enemy, Position).x == pytest.approx(0.5)


def test_damage_is_edge_triggered_across_ticks():
    sim = make_session(player=(100, 100), enemies=[(BASIC, 120, 100)])

    assert sim.step(0.0).health_delta == -1
    assert sim.health.current == 3

    enemy = sim.world.single(EnemyTag)
    pos = sim.world.get_component(enemy, Position)
    stuck_at = (pos.x, pos.y)
    for now in (0.5, 1.0, 1.5, 1.99):
        report = sim.step(now)
        assert report.health_delta == 0
        assert (pos.x, pos.y) == stuck_at

    # Recovers once the stun window is over and hits again
    assert sim.step(2.0).health_delta == -1
    assert sim.health.current == 2


def test_simultaneous_contacts_each_deal_damage():
    sim = make_session(player=(100, 100),
                       enemies=[(BASIC, 120, 100), (RUSHER, 80, 100)])
    report = sim.step(0.0)
    assert report.health_delta == -2
    assert sim.health.current == 2
    for eid, _ in sim.world.query(EnemyTag):
        assert sim.world.get_component(eid, CollisionStun).is_stunned


def test_immunity_window_is_opt_in():
    config = replace(DEFAULT_CONFIG, immunity_duration=0.5)
    sim = make_session(player=(100, 100),
                       enemies=[(BASIC, 120, 100), (RUSHER, 80, 100)],
                       config=config)
    assert sim.step(0.0).health_delta == -1
    # The rusher is still targeting in place and lands its hit once the window closes
    assert sim.step(0.25).health_delta == 0
    assert sim.step(0.5).health_delta == -1
    assert sim.health.current == 2


def test_health_never_increases_or_goes_negative():
    sim = make_session(player=(100, 100),
                       enemies=[(BASIC, 120, 100), (BASIC, 60, 100), (RUSHER, 100, 140)])
    previous = sim.health.current
    for tick in range(600):
        sim.step(tick * 0.05)
        assert 0 <= sim.health.current <= previous
        previous = sim.health.current
    assert sim.health.current == 0


def test_pickup_scores_and_relocates():
    sim = make_session(player=(175, 175))
    _put_pickup_on_player(sim)

    report = sim.step(0.0)

    assert report.score_delta == 1
    assert sim.score == 1
    assert distance(sim.pickup_pos, sim.player_pos) >= 200


def test_enemy_added_once_per_milestone():
    sim = make_session(player=(175, 175), enemies=[(BASIC, 0, 0)])
    counts = {}
    for expected_score in range(1, 22):
        _put_pickup_on_player(sim)
        report = sim.step(0.0)
        assert report.score_delta == 1
        counts[expected_score] = sim.enemy_count
        if expected_score in (10, 20):
            assert len(report.spawned) == 1
        else:
            assert report.spawned == []

    assert sim.score == 21
    assert counts[9] == 1
    assert all(counts[s] == 2 for s in range(10, 20))
    assert counts[20] == counts[21] == 3


def test_milestone_spawn_is_placed_and_initialized():
    sim = make_session(player=(175, 175), seed=11)
    sim.score = 9
    _put_pickup_on_player(sim)
    report = sim.step(4.0)

    (new_id,) = report.spawned
    enemy_type = sim.world.get_component(new_id, EnemyTag).enemy_type
    assert distance(sim.world.get_component(new_id, Position), sim.player_pos) >= 200
    if enemy_type is RUSHER:
        state = sim.world.get_component(new_id, RushState)
        assert state.phase == RushPhase.TARGETING
        assert state.phase_start == 4.0


def test_milestone_spawns_cover_both_kinds():
    kinds = set()
    for seed in range(30):
        sim = make_session(player=(175, 175), seed=seed)
        sim.score = 9
        _put_pickup_on_player(sim)
        (new_id,) = sim.step(0.0).spawned
        kinds.add(sim.world.get_component(new_id, EnemyTag).enemy_type.name)
    assert kinds == {'basic', 'rusher'}


def test_enemy_population_never_shrinks():
    sim = make_session(player=(175, 175), enemies=[(BASIC, 0, 0), (RUSHER, 350, 0)])
    count = sim.enemy_count
    for tick in range(300):
        if tick % 3 == 0:
            _put_pickup_on_player(sim)
        sim.step(tick / 60)
        assert sim.enemy_count >= count
        count = sim.enemy_count


# --------------------------------------------------------------------------
# Game over
# --------------------------------------------------------------------------

def test_last_hit_freezes_simulation():
    sim = make_session(player=(100, 100),
                       enemies=[(BASIC, 120, 100), (RUSHER, 300, 300)])
    sim.health.current = 1

    report = sim.step(0.0)
    assert report.game_over
    assert sim.health.current == 0
    assert sim.game_over

    vel = sim.world.get_component(sim.player_id, Velocity)
    vel.x = 2.0
    _put_pickup_on_player(sim)
    snapshot = _positions(sim)

    for tick in range(1, 300):
        report = sim.step(tick * 0.1)
        assert report.frozen
        assert not report.game_over
        assert report.health_delta == report.score_delta == 0

    assert _positions(sim) == snapshot
    assert sim.score == 0

    # Rendering still works on the frozen state
    recorder = FillRecorder()
    render_system(sim.world, recorder, 50)
    assert len(recorder.calls) == 4


def test_step_is_not_reentrant(monkeypatch):
    sim = make_session()

    def reenter(*args, **kwargs):
        sim.step(1.0)

    monkeypatch.setattr('box_rush.simulation.player_movement_system', reenter)
    with pytest.raises(RuntimeError):
        sim.step(0.0)
    # The guard is released afterwards
    monkeypatch.undo()
    assert not sim.step(0.1).frozen
