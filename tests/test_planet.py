#!/usr/bin/env python3
"""
Comprehensive Test Suite for the Planet Civilization Model

Tests cover:
1. Construction (name, pools, evolution threshold)
2. Damage resolution (shield first, then health, clamping)
3. Evolution and stage transitions against the resource table
4. Growth and leeching
5. Stage skills (unit production, shields, independence)
6. Ascension, wipe-out and destruction
7. Status panel report
"""

import re

import pytest

from solsim.config import SimulationConfig
from solsim.events import SimulationEventType
from solsim.orbit import OrbitPath
from solsim.physics import Vector
from solsim.planet import (
    STAGE_RESOURCE_FLAGS,
    max_health_for_mass,
)
from solsim.registry import EntityKind
from solsim.rng import RandomSource, SequenceRandom
from solsim.simulation import SolarSystemSimulation


# =============================================================================
# FIXTURES
# =============================================================================

def fixed_orbit():
    """Degenerate orbit that pins a planet to its center."""
    return OrbitPath(rad_x=0, rad_y=0)


def spawn_planet(sim, x, y, **params):
    params.setdefault("mass", 1e13)
    return sim.spawn_entity(EntityKind.PLANET, Vector(x, y), orbit=fixed_orbit(), **params)


@pytest.fixture
def sim():
    """Empty simulation with scripted randomness and no asteroid spawning."""
    config = SimulationConfig(asteroid_spawn_rate=0, planets=[])
    return SolarSystemSimulation(config, rng=SequenceRandom())


@pytest.fixture
def planet(sim):
    """Life-supporting planet pinned at the world center."""
    return spawn_planet(sim, 480, 320, supports_life=True)


# =============================================================================
# TEST: CONSTRUCTION
# =============================================================================

class TestPlanetConstruction:

    def test_initial_state(self, planet):
        assert planet.resource == 100
        assert planet.civ_stage == -1
        assert not planet.has_civilization
        assert planet.max_health == max_health_for_mass(1e13)
        assert planet.health == planet.max_health
        assert planet.max_shield == 0
        assert 700 <= planet.max_evo < 1500

    def test_name_format(self, planet):
        assert re.fullmatch(r"[A-Z]{3}-\d{4}", planet.name)

    def test_health_bar_created(self, sim, planet):
        assert sim.pull_status(planet.id, 0) == planet.max_health
        assert sim.pull_status(planet.id, 1) is None


# =============================================================================
# TEST: DAMAGE
# =============================================================================

class TestPlanetDamage:

    def test_shield_absorbs_first(self, planet):
        """attack(150) on shield 100 / health 500 leaves 0 / 450."""
        planet.max_shield, planet.shield = 100, 100
        planet.max_health, planet.health = 500, 500
        planet.attack(150)
        assert planet.shield == 0
        assert planet.health == 450

    def test_no_shield_hits_health(self, planet):
        planet.attack(30)
        assert planet.health == planet.max_health - 30

    def test_negative_damage_treated_as_damage(self, planet):
        planet.attack(-30)
        assert planet.health == planet.max_health - 30

    def test_pools_stay_clamped(self, planet):
        planet.max_shield, planet.shield = 50, 50
        for damage in [10, 400, 3000, 99999, 1]:
            planet.attack(damage)
            assert 0 <= planet.shield <= planet.max_shield
            assert 0 <= planet.health <= planet.max_health
        assert planet.health == 0


# =============================================================================
# TEST: EVOLUTION AND STAGES
# =============================================================================

class TestEvolutionAndStages:

    def test_life_develops_at_max_evo(self, sim, planet):
        planet.max_evo = 3
        for _ in range(3):
            planet.evolve_life(sim)
        assert planet.civ_stage == 0
        assert planet.has_civilization
        assert f"{planet.name} has developed life." in sim.messages.lines

    def test_barren_planet_never_evolves(self, sim):
        barren = spawn_planet(sim, 100, 100, supports_life=False)
        barren.max_evo = 1
        barren.evolve_life(sim)
        assert barren.civ_stage == -1

    def test_promotion_after_one_step(self, sim, planet):
        """resource 2500 at stage 0 becomes stage 1 after one step."""
        planet.civ_stage = 0
        planet.resource = 2500
        sim.step()
        assert planet.civ_stage == 1
        assert f"{planet.name} is now Stage 1." in sim.messages.lines

    def test_demotion(self, sim, planet):
        planet.civ_stage = 2
        planet.resource = 100
        planet.check_stage(sim)
        assert planet.civ_stage == 1
        assert f"{planet.name} has been sent back to Stage 1." in sim.messages.lines

    def test_no_demotion_below_zero(self, sim, planet):
        planet.civ_stage = 0
        planet.resource = 0
        planet.check_stage(sim)
        assert planet.civ_stage == 0

    def test_one_change_per_step(self, sim, planet):
        planet.civ_stage = 0
        planet.resource = 10 ** 7
        planet.check_stage(sim)
        assert planet.civ_stage == 1

    def test_stage_four_is_final(self, sim, planet):
        planet.civ_stage = 4
        planet.resource = 0
        planet.check_stage(sim)
        assert planet.civ_stage == 4

    def test_monotonic_promotion(self, sim, planet):
        """With a non-decreasing resource the stage never goes down."""
        planet.civ_stage = 0
        stages = []
        for resource in range(0, 300000, 1000):
            planet.resource = resource
            planet.check_stage(sim)
            stages.append(planet.civ_stage)
        assert stages == sorted(stages)
        assert stages[-1] == len(STAGE_RESOURCE_FLAGS)


# =============================================================================
# TEST: GROWTH AND LEECHING
# =============================================================================

class TestGrowth:

    def test_civilized_growth(self, planet):
        planet.civ_stage = 1
        planet.health = planet.max_health - 3
        planet.grow()
        assert planet.resource == 100 + 16
        assert planet.health == planet.max_health

    def test_uncivilized_growth(self, planet):
        planet.grow()
        assert planet.resource == 101

    def test_shield_regenerates_to_max(self, planet):
        planet.max_shield, planet.shield = 10, 9
        planet.grow()
        planet.grow()
        assert planet.shield == 10


class TestLeech:

    def test_leech_from_lower_stage(self, sim):
        strong = spawn_planet(sim, 300, 300)
        weak = spawn_planet(sim, 320, 300)
        strong.civ_stage, strong.resource = 2, 10000
        weak.resource = 100

        gained = strong.leech(sim)

        assert gained == 8
        assert weak.resource == 92
        assert strong.resource == 10008

    def test_neighbor_floors_at_zero(self, sim):
        strong = spawn_planet(sim, 300, 300)
        weak = spawn_planet(sim, 320, 300)
        strong.civ_stage, strong.resource = 2, 10000
        weak.resource = 3

        strong.leech(sim)

        assert weak.resource == 0
        assert strong.resource == 10008

    def test_equal_stage_untouched(self, sim):
        a = spawn_planet(sim, 300, 300)
        b = spawn_planet(sim, 320, 300)
        a.civ_stage, b.civ_stage = 1, 1
        a.resource = b.resource = 5000
        assert a.leech(sim) == 0
        assert b.resource == 5000

    def test_out_of_range_untouched(self, sim):
        strong = spawn_planet(sim, 100, 100)
        weak = spawn_planet(sim, 800, 500)
        strong.civ_stage, strong.resource = 1, 10000
        assert strong.leech(sim) == 0
        assert weak.resource == 100


# =============================================================================
# TEST: SKILLS
# =============================================================================

class TestSkills:

    def test_probe_and_satellite_production(self, sim, planet):
        planet.civ_stage = 1
        planet.counter = 499
        planet.activate_skills(sim)
        probes = sim.owned_units(planet.id, EntityKind.PROBE)
        satellites = sim.owned_units(planet.id, EntityKind.SATELLITE)
        assert len(probes) == 1
        assert len(satellites) == 1
        assert probes[0].max_health == 120
        assert satellites[0].max_health == 500

    def test_probe_cap(self, sim, planet):
        planet.civ_stage = 1
        for _ in range(3):
            sim.spawn_entity(EntityKind.PROBE, planet.position, owner_id=planet.id)
        planet.counter = 499
        planet.activate_skills(sim)
        assert len(sim.owned_units(planet.id, EntityKind.PROBE)) == 3

    def test_destroyer_production_resets_counter(self, sim, planet):
        planet.civ_stage = 2
        planet.counter = 699
        planet.activate_skills(sim)
        destroyers = sim.owned_units(planet.id, EntityKind.DESTROYER)
        assert len(destroyers) == 1
        assert destroyers[0].max_health == 700
        assert planet.counter == 0

    def test_uncivilized_counter_stays_zero(self, sim, planet):
        planet.counter = 12
        planet.activate_skills(sim)
        assert planet.counter == 0

    def test_shield_raised_at_stage_three(self, sim, planet):
        planet.civ_stage = 3
        planet.resource = 10000
        planet.activate_skills(sim)
        assert planet.max_shield == 20 * 100 + 50
        assert planet.shield == planet.max_shield
        assert len(sim.status.get(planet.id)) == 2
        assert sim.pull_status(planet.id, 1) == planet.max_shield

    def test_independence_at_stage_four(self, sim, planet):
        planet.civ_stage = 4
        planet.max_shield = 1
        planet.activate_skills(sim)
        assert planet.independent_motion
        assert planet.velocity.magnitude == pytest.approx(5.0)

    def test_independence_after_broken_orbit_points_away_from_star(self, sim, planet):
        planet.position = Vector(580, 320)
        planet.break_orbit(sim)
        planet.become_independent()
        assert planet.velocity.direction == pytest.approx(0.0)

    def test_break_orbit_once(self, sim, planet):
        assert planet.break_orbit(sim)
        assert planet.gravity_enabled
        assert planet.velocity.magnitude == pytest.approx(5.0)
        assert not planet.break_orbit(sim)

    def test_break_orbit_logged(self, sim, planet):
        planet.break_orbit(sim)
        planet.break_orbit(sim)
        events = sim.get_events_by_type(SimulationEventType.ORBIT_BROKEN)
        assert len(events) == 1
        assert events[0].entity_id == planet.id
        assert events[0].data["speed"] == pytest.approx(5.0)


# =============================================================================
# TEST: ASCENSION AND DEATH
# =============================================================================

class TestAscensionAndDeath:

    def test_ascension(self, sim, planet):
        planet.civ_stage = 4
        planet.independent_motion = True
        planet.position = Vector(planet.center.x + 1000, planet.center.y)

        assert planet.check_ascension(sim)

        assert planet.has_ascended
        assert not sim.contains(planet.id)
        assert sim.planet_report(0) == ["Ascended beyond system."]
        assert f"{planet.name} has ascended beyond the system." in sim.messages.lines

    def test_no_ascension_inside_system(self, sim, planet):
        planet.civ_stage = 4
        planet.independent_motion = True
        planet.position = Vector(planet.center.x + 999, planet.center.y)
        assert not planet.check_ascension(sim)
        assert sim.contains(planet.id)

    def test_uncivilized_destruction(self, sim):
        """An uncivilized planet at health 0 is removed and bursts into asteroids."""
        planet = spawn_planet(sim, 480, 320, moons=1)
        moon = sim.registry.of_kind(EntityKind.MOON)[0]
        planet.health = 0

        sim.step()

        assert not sim.contains(planet.id)
        assert not sim.contains(moon.id)
        assert 4 <= sim.registry.count(EntityKind.ASTEROID) <= 7
        assert f"{planet.name} was destroyed." in sim.messages.lines
        assert sim.planet_report(0) == ["Destroyed."]

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5], ids=lambda s: f"seed{s}")
    def test_burst_size_range(self, seed):
        config = SimulationConfig(asteroid_spawn_rate=0, planets=[])
        sim = SolarSystemSimulation(config, rng=RandomSource(seed))
        planet = spawn_planet(sim, 480, 320)
        planet.health = 0
        planet.check_death(sim)
        assert 4 <= sim.registry.count(EntityKind.ASTEROID) <= 7

    def test_civilized_wipe_out(self, sim, planet):
        planet.civ_stage = 3
        planet.resource = 90000
        planet.activate_skills(sim)
        sim.spawn_entity(EntityKind.DESTROYER, planet.position, owner_id=planet.id)
        sim.spawn_entity(EntityKind.PROBE, planet.position, owner_id=planet.id)
        planet.health = 0

        planet.check_death(sim)

        assert sim.contains(planet.id)
        assert planet.civ_stage == -1
        assert planet.resource == 30000
        assert planet.max_shield == 0
        assert planet.health == planet.max_health
        assert planet.evolution == 0
        assert sim.owned_units(planet.id) == []
        assert len(sim.status.get(planet.id)) == 1
        assert f"All life was wiped out on {planet.name}." in sim.messages.lines


# =============================================================================
# TEST: STATUS REPORT
# =============================================================================

class TestStatusReport:

    def test_unevolved_report(self, sim, planet):
        lines = sim.planet_report(0)
        assert lines[0] == f"{planet.name}: "
        assert lines[1] == f"Evolved: 0/{planet.max_evo}"
        assert lines[2] == "100 EP"
        assert lines[3] == "Unevolved"
        assert lines[4] == f"Health: {planet.max_health}/{planet.max_health} HP"
        assert lines[5] == "Shielding: 0/0"

    @pytest.mark.parametrize("stage,label", [
        (0, "Kardashev Type 0"),
        (1, "Kardashev Type I"),
        (4, "Kardashev Type IV"),
    ], ids=["type0", "type1", "type4"])
    def test_kardashev_label(self, planet, stage, label):
        planet.civ_stage = stage
        assert planet.status_report()[3] == label

    def test_out_of_range_index(self, sim, planet):
        assert sim.planet_report(5) == []
