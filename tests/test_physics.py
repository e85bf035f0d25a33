import math

import pytest

from starsim.constants import G, SECONDS_PER_DAY
from starsim.data_models import Body
from starsim.physics import (
    CoincidentBodiesError,
    Integrator,
    NonFiniteStateError,
    center_of_mass,
    circular_orbit_velocity,
    compute_forces,
    orbital_period,
    potential_energy,
    step,
    total_energy,
    total_momentum,
)
from starsim.presets_loader import three_star_system, two_body_circular


def distance(a, b):
    return math.hypot(b.position[0] - a.position[0], b.position[1] - a.position[1])


def run(bodies, steps, dt):
    for _ in range(steps):
        bodies = step(bodies, dt)
    return bodies


def test_force_magnitude_and_direction():
    a = Body("A", 2e30, (0.0, 0.0), (0.0, 0.0))
    b = Body("B", 3e29, (1e11, 0.0), (0.0, 0.0))
    fa, fb = compute_forces([a, b])
    expected = G * 2e30 * 3e29 / 1e22
    assert fa[0] == pytest.approx(expected, rel=1e-12)
    assert fa[1] == 0.0
    assert fb[0] == pytest.approx(-expected, rel=1e-12)


def test_forces_sum_over_all_other_bodies():
    bodies = three_star_system()
    forces = compute_forces(bodies)
    fx = sum(f[0] for f in forces)
    fy = sum(f[1] for f in forces)
    scale = max(abs(f[0]) + abs(f[1]) for f in forces)
    assert abs(fx) < 1e-12 * scale
    assert abs(fy) < 1e-12 * scale


def test_position_update_uses_old_velocity():
    a = Body("A", 1e30, (0.0, 0.0), (0.0, 0.0))
    b = Body("B", 1e20, (1e11, 0.0), (0.0, 3e4))
    dt = SECONDS_PER_DAY
    new_a, new_b = step([a, b], dt)
    # Position moves by the velocity from the start of the step.
    assert new_b.position == (1e11, 3e4 * dt)
    # A started at rest: it keeps its position and only gains velocity.
    assert new_a.position == (0.0, 0.0)
    assert new_a.velocity[0] > 0
    accel = G * 1e30 / 1e22
    assert new_b.velocity[0] == pytest.approx(-accel * dt, rel=1e-12)
    assert new_b.velocity[1] == 3e4


def test_forces_read_only_the_previous_snapshot():
    bodies = three_star_system()
    forces = compute_forces(bodies)
    new_bodies = step(bodies, SECONDS_PER_DAY)
    for old, new, f in zip(bodies, new_bodies, forces):
        assert new.velocity[0] == old.velocity[0] + f[0] * (1.0 / old.mass) * SECONDS_PER_DAY
        assert new.velocity[1] == old.velocity[1] + f[1] * (1.0 / old.mass) * SECONDS_PER_DAY


def test_step_returns_new_snapshot_and_keeps_identity():
    bodies = three_star_system()
    before = tuple(bodies)
    new_bodies = step(bodies, SECONDS_PER_DAY)
    assert bodies == before
    assert new_bodies is not bodies
    assert [(b.name, b.mass, b.color, b.marker_radius) for b in new_bodies] == \
        [(b.name, b.mass, b.color, b.marker_radius) for b in bodies]


def test_empty_step_is_noop():
    assert step((), SECONDS_PER_DAY) == ()


@pytest.mark.parametrize("dt", [0.0, -1.0, float("nan")])
def test_step_rejects_non_positive_dt(dt):
    with pytest.raises(ValueError):
        step(three_star_system(), dt)


def test_coincident_bodies_raise():
    a = Body("A", 1e30, (5.0, 5.0), (0.0, 0.0))
    b = Body("B", 1e30, (5.0, 5.0), (1.0, 0.0))
    with pytest.raises(CoincidentBodiesError) as info:
        step([a, b], SECONDS_PER_DAY)
    assert {info.value.first, info.value.second} == {"A", "B"}


def test_softening_removes_singularity():
    a = Body("A", 1e30, (5.0, 5.0), (0.0, 0.0))
    b = Body("B", 1e30, (5.0, 5.0), (1.0, 0.0))
    new_a, new_b = step([a, b], SECONDS_PER_DAY, softening=1e9)
    assert new_a.velocity == (0.0, 0.0)
    assert new_b.position == (5.0 + SECONDS_PER_DAY, 5.0)


def test_non_finite_result_raises():
    a = Body("A", 1e30, (0.0, 0.0), (0.0, 0.0))
    b = Body("B", 1e30, (1e-130, 0.0), (0.0, 0.0))
    with pytest.raises(NonFiniteStateError):
        step([a, b], SECONDS_PER_DAY)


def test_determinism():
    first = run(three_star_system(), 200, SECONDS_PER_DAY)
    second = run(three_star_system(), 200, SECONDS_PER_DAY)
    assert first == second


def test_index_stability():
    initial = three_star_system()
    bodies = initial
    for _ in range(50):
        bodies = step(bodies, SECONDS_PER_DAY)
        assert [b.name for b in bodies] == [b.name for b in initial]


def test_momentum_drift_is_bounded():
    bodies = three_star_system()
    p0 = total_momentum(bodies)
    scale = sum(b.mass * math.hypot(*b.velocity) for b in bodies)
    bodies = run(bodies, 300, SECONDS_PER_DAY)
    p1 = total_momentum(bodies)
    assert abs(p1[0] - p0[0]) < 1e-9 * scale
    assert abs(p1[1] - p0[1]) < 1e-9 * scale


def test_two_body_kepler_returns_after_one_period():
    bodies = two_body_circular(1e30, 1e29, 1e11)
    period = orbital_period(1.1e30, 1e11)
    steps = 10000
    start = (bodies[1].position[0] - bodies[0].position[0], bodies[1].position[1] - bodies[0].position[1])
    bodies = run(bodies, steps, period / steps)
    end = (bodies[1].position[0] - bodies[0].position[0], bodies[1].position[1] - bodies[0].position[1])
    error = math.hypot(end[0] - start[0], end[1] - start[1])
    assert error < 0.05 * 1e11


def test_two_body_separation_over_one_hundred_days():
    bodies = two_body_circular(1e30, 1e29, 1e11)
    separations = []
    for _ in range(100):
        bodies = step(bodies, SECONDS_PER_DAY)
        separations.append(distance(bodies[0], bodies[1]))
    # The update rule adds energy every step, so the orbit slowly widens.
    assert min(separations) >= 1e11 * (1 - 1e-9)
    assert max(separations) < 1.1e11


def test_two_body_separation_with_hourly_steps():
    bodies = two_body_circular(1e30, 1e29, 1e11)
    for _ in range(100 * 24):
        bodies = step(bodies, 3600.0)
        assert abs(distance(bodies[0], bodies[1]) - 1e11) < 0.01 * 1e11


def test_energy_grows_under_fixed_step():
    bodies = two_body_circular()
    e0 = total_energy(bodies)
    e1 = total_energy(run(bodies, 50, SECONDS_PER_DAY))
    assert e0 < 0
    assert e1 > e0


def test_integrator_delegates_to_step():
    integrator = Integrator(dt=3600.0)
    bodies = three_star_system()
    assert integrator.step(bodies) == step(bodies, 3600.0)
    integrator.set_softening(-5)
    assert integrator.softening == 0.0
    with pytest.raises(ValueError):
        Integrator(dt=0)


def test_center_of_mass_and_potential_energy():
    a = Body("A", 1e30, (0.0, 0.0), (0.0, 0.0))
    b = Body("B", 3e30, (4e10, 0.0), (0.0, 0.0))
    assert center_of_mass([a, b]) == pytest.approx((3e10, 0.0))
    assert potential_energy([a, b]) == pytest.approx(-G * 3e60 / 4e10)
    assert center_of_mass([]) == (0.0, 0.0)


def test_orbital_helpers():
    v = circular_orbit_velocity(1e30, 1e11)
    assert v == pytest.approx(math.sqrt(G * 1e30 / 1e11))
    assert circular_orbit_velocity(1e30, 0) == 0.0
    period = orbital_period(1e30, 1e11)
    assert period == pytest.approx(2 * math.pi * 1e11 / v)
    assert orbital_period(0, 1e11) == 0.0
