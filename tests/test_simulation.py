#!/usr/bin/env python3
"""
Integration tests for the simulation engine.

Tests cover:
1. Building the stock system
2. Stepping, running and stopping
3. Removal cascades and id stability
4. Display bridges (messages, status bars, highlights, planet reports)
5. Star and moon upkeep
6. Long seeded runs holding the global invariants
"""

import pytest

from solsim.config import SimulationConfig
from solsim.events import SimulationEventType
from solsim.orbit import OrbitPath
from solsim.physics import Vector
from solsim.registry import EntityKind, UNIT_KINDS
from solsim.rng import SequenceRandom
from solsim.scenarios import build_sol_system
from solsim.simulation import GLOW_SCALE, SolarSystemSimulation


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def sol():
    return build_sol_system(SimulationConfig(asteroid_spawn_rate=0), seed=42)


@pytest.fixture
def empty_sim():
    config = SimulationConfig(asteroid_spawn_rate=0, planets=[])
    return SolarSystemSimulation(config, rng=SequenceRandom())


def fixed_planet(sim, x, y, **params):
    return sim.spawn_entity(EntityKind.PLANET, Vector(x, y), mass=params.pop("mass", 1e13),
                            orbit=OrbitPath(rad_x=0, rad_y=0), **params)


# =============================================================================
# TEST: SYSTEM CONSTRUCTION
# =============================================================================

class TestBuildSystem:

    def test_entity_counts(self, sol):
        counts = sol.entity_counts()
        assert counts["STAR"] == 1
        assert counts["PLANET"] == 5
        assert counts["MOON"] == 4
        assert counts["ASTEROID"] == 0
        assert len(sol.get_events_by_type(SimulationEventType.ENTITY_SPAWNED)) == 10

    def test_star_at_world_center(self, sol):
        assert sol.star.position == Vector(480, 320)

    def test_planets_on_their_orbits(self, sol):
        first = sol.planets[0]
        expected = first.orbit.position(sol.star.position)
        assert first.position == expected
        assert first.supports_life
        assert not sol.planets[1].supports_life

    def test_planet_names_unique_format(self, sol):
        for planet in sol.planets:
            letters, digits = planet.name.split("-")
            assert len(letters) == 3 and letters.isupper()
            assert len(digits) == 4 and digits.isdigit()

    def test_moons_follow_owner(self, sol):
        for _ in range(25):
            sol.step()
        for moon in sol.registry.of_kind(EntityKind.MOON):
            owner = sol.get(moon.owner_id)
            assert moon.position.distance_to(owner.position) == pytest.approx(moon.orbit_radius)

    def test_second_moon_orbits_further_out(self, sol):
        moons = sol.registry.owned_by(sol.planets[3].id, [EntityKind.MOON])
        assert [m.orbit_radius for m in moons] == [30, 60]


# =============================================================================
# TEST: LOOP
# =============================================================================

class TestLoop:

    def test_step_advances_counter(self, sol):
        sol.step()
        sol.step()
        assert sol.current_step == 2

    def test_run_brackets_events(self, sol):
        events = sol.run(5)
        assert events[0].event_type == SimulationEventType.SIMULATION_STARTED
        assert events[-1].event_type == SimulationEventType.SIMULATION_ENDED
        assert sol.current_step == 5
        assert not sol.is_running

    def test_stop_from_callback(self, sol):
        def halt(event):
            if event.event_type == SimulationEventType.SIMULATION_STARTED:
                sol.stop()

        sol.add_event_callback(halt)
        sol.run(100)
        assert sol.current_step == 0

    def test_failing_callback_does_not_break_step(self, empty_sim, capsys):
        def broken(event):
            raise RuntimeError("display went away")

        empty_sim.add_event_callback(broken)
        empty_sim.report_event("hello")
        empty_sim.step()

        assert empty_sim.current_step == 1
        assert empty_sim.messages.lines == ["hello"]
        assert "[SIM] Event callback error: display went away" in capsys.readouterr().out

    def test_same_seed_same_run(self):
        config = SimulationConfig(asteroid_spawn_rate=30)
        a = build_sol_system(config, seed=7)
        b = build_sol_system(config, seed=7)
        a.run(400)
        b.run(400)
        assert [e.event_type for e in a.events] == [e.event_type for e in b.events]
        assert [p.name for p in a.planets] == [p.name for p in b.planets]
        assert [(p.position.x, p.position.y) for p in a.planets] == \
            [(p.position.x, p.position.y) for p in b.planets]

    def test_teardown(self, sol):
        sol.highlight(sol.planets[0].id)
        sol.teardown()
        assert len(sol.registry) == 0
        assert len(sol.status) == 0
        assert sol.glows() == []


# =============================================================================
# TEST: REMOVAL
# =============================================================================

class TestRemoval:

    def test_remove_is_idempotent(self, empty_sim):
        asteroid = empty_sim.spawn_entity("asteroid", Vector(10, 10))
        assert empty_sim.remove_entity(asteroid.id)
        assert not empty_sim.remove_entity(asteroid.id)
        assert not empty_sim.remove_entity(None)

    def test_planet_removal_cascades(self, empty_sim):
        planet = fixed_planet(empty_sim, 300, 300, moons=2)
        planet.civ_stage = 2
        for kind in UNIT_KINDS:
            empty_sim.spawn_entity(kind, planet.position, owner_id=planet.id)
        assert len(empty_sim.registry) == 6

        empty_sim.remove_entity(planet.id)

        assert len(empty_sim.registry) == 0
        assert planet.id not in empty_sim.status

    def test_ids_never_reused(self, empty_sim):
        first = empty_sim.spawn_entity(EntityKind.ASTEROID, Vector(0, 0))
        empty_sim.remove_entity(first.id)
        empty_sim.step()
        second = empty_sim.spawn_entity(EntityKind.ASTEROID, Vector(0, 0))
        assert second.id != first.id
        assert empty_sim.get(first.id) is None


# =============================================================================
# TEST: DISPLAY BRIDGES
# =============================================================================

class TestDisplayBridges:

    def test_message_log_keeps_last_three(self, empty_sim):
        for i in range(5):
            empty_sim.report_event(f"message {i}")
        assert empty_sim.messages.lines == ["message 2", "message 3", "message 4"]
        assert len(empty_sim.messages) == 5

    def test_status_push_pull(self, empty_sim):
        planet = fixed_planet(empty_sim, 300, 300)
        assert empty_sim.push_status(planet.id, 0, 10)
        assert empty_sim.pull_status(planet.id, 0) == 10
        assert empty_sim.pull_status(planet.id, 1) is None
        assert empty_sim.pull_status(9999, 0) is None

    def test_status_follows_health(self, empty_sim):
        planet = fixed_planet(empty_sim, 300, 300)
        planet.attack(100)
        empty_sim.step()
        assert empty_sim.pull_status(planet.id, 0) == pytest.approx(planet.health)

    def test_glow_tracks_entity(self, empty_sim):
        moon = empty_sim.spawn_entity(EntityKind.MOON, Vector(100, 100))
        assert empty_sim.highlight(moon.id)
        moon.position = Vector(150, 120)

        glows = empty_sim.glows()

        assert len(glows) == 1
        assert (glows[0].x, glows[0].y) == (150, 120)
        assert glows[0].radius == pytest.approx(moon.radius * GLOW_SCALE)

    def test_glow_dropped_with_entity(self, empty_sim):
        moon = empty_sim.spawn_entity(EntityKind.MOON, Vector(100, 100))
        empty_sim.highlight(moon.id)
        empty_sim.remove_entity(moon.id)
        assert empty_sim.glows() == []
        assert not empty_sim.unhighlight(moon.id)

    def test_highlight_unknown(self, empty_sim):
        assert not empty_sim.highlight(12345)

    def test_planet_report(self, sol):
        report = sol.planet_report(0)
        assert report[0].startswith(sol.planets[0].name)
        assert len(report) == 6
        assert sol.planet_report(5) == []
        assert sol.planet_report(-1) == []


# =============================================================================
# TEST: STAR AND MOON UPKEEP
# =============================================================================

class TestStar:

    def test_flare_hits_planets_in_radius(self, empty_sim):
        star = empty_sim.spawn_entity(EntityKind.STAR, Vector(480, 320))
        near = fixed_planet(empty_sim, 530, 320)
        far = fixed_planet(empty_sim, 700, 320)
        star.counter = 149

        star.update(empty_sim)

        assert near.health == near.max_health - 100
        assert far.health == far.max_health
        assert star.counter == 0
        assert len(empty_sim.get_events_by_type(SimulationEventType.STAR_FLARE)) == 1

    def test_star_grows(self, empty_sim):
        star = empty_sim.spawn_entity(EntityKind.STAR, Vector(480, 320))
        star.counter = 99
        star.update(empty_sim)
        assert star.attack_power == 101
        assert star.radiation_radius == 101

    def test_star_does_not_move(self, empty_sim):
        star = empty_sim.spawn_entity(EntityKind.STAR, Vector(480, 320))
        empty_sim.spawn_entity(EntityKind.MOON, Vector(490, 320))
        for _ in range(10):
            empty_sim.step()
        assert star.position == Vector(480, 320)


class TestMoon:

    def test_influence_and_level(self, empty_sim):
        moon = empty_sim.spawn_entity(EntityKind.MOON, Vector(100, 100))
        moon.counter = 9
        moon.update(empty_sim)
        assert moon.influence == 5
        assert moon.attack_power == pytest.approx(0.25)
        assert moon.level == 0

        moon.counter = 19
        moon.update(empty_sim)
        assert moon.influence == 10
        assert moon.level == 1

    def test_ownerless_moon_drifts(self):
        config = SimulationConfig(asteroid_spawn_rate=0, planets=[])
        sim = SolarSystemSimulation(config, rng=SequenceRandom(floats=[1.0]))
        moon = sim.spawn_entity(EntityKind.MOON, Vector(100, 100))

        moon.move(sim)

        assert moon.position == Vector(95, 95)


# =============================================================================
# TEST: LONG RUN INVARIANTS
# =============================================================================

class TestLongRun:

    def test_invariants_hold(self):
        config = SimulationConfig(asteroid_spawn_rate=20)
        sim = build_sol_system(config, seed=2024)

        for _ in range(1500):
            sim.step()

            for planet in sim.registry.of_kind(EntityKind.PLANET):
                assert 0 <= planet.health <= planet.max_health
                assert 0 <= planet.shield <= planet.max_shield
                assert planet.resource >= 0
                assert -1 <= planet.civ_stage <= 4
                assert planet.id in sim.status

            for kind in UNIT_KINDS:
                for unit in sim.registry.of_kind(kind):
                    assert sim.contains(unit.owner_id)
                    assert 0 < unit.health <= unit.max_health

            for moon in sim.registry.of_kind(EntityKind.MOON):
                if moon.owner_id is not None:
                    assert sim.contains(moon.owner_id)

        assert sim.current_step == 1500
        assert len(sim.get_events_by_type(SimulationEventType.ASTEROID_SPAWNED)) > 0
