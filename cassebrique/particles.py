"""Ring buffer of short-lived particles."""

from __future__ import annotations

from .mathutil import V2, XorShiftRandom
from .world import Particle

MAX_PARTICLES = 1024


class ParticleSystem:
    """Fixed pool of particles; new ones overwrite the oldest slot."""

    def __init__(self, rng: XorShiftRandom, capacity: int = MAX_PARTICLES) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.rng = rng
        self.particles = [Particle() for _ in range(capacity)]
        self.next_index = 0

    def spawn(
        self,
        p: V2,
        dp_scale: float,
        half_size: V2,
        angle: float,
        life: float,
        life_d: float,
        color: int,
    ) -> Particle:
        """Place a particle with a random velocity of up to dp_scale per axis."""
        particle = self.particles[self.next_index]
        self.next_index = (self.next_index + 1) % len(self.particles)
        dx = self.rng.bilateral() * dp_scale
        dy = self.rng.bilateral() * dp_scale
        particle.p = p
        particle.dp = V2(dx, dy)
        particle.half_size = half_size
        particle.life = life
        particle.life_d = life_d
        particle.color = color
        particle.angle = angle
        return particle

    def spawn_explosion(
        self,
        count: int,
        p: V2,
        dp_scale: float,
        base_size: float,
        base_life: float,
        color: int,
    ) -> list[Particle]:
        """Spawn count particles whose size and life drift randomly."""
        spawned = []
        for _ in range(count):
            base_size += self.rng.bilateral() * 0.1 * base_size
            base_life += self.rng.bilateral() * 0.1 * base_size
            angle = self.rng.float_in_range(0.0, 360.0)
            spawned.append(
                self.spawn(p, dp_scale, V2(base_size, base_size), angle, base_life, 1.0, color)
            )
        return spawned

    def update(self, dt: float) -> list[Particle]:
        """Age and move the live particles; return those to draw this frame."""
        moved = []
        for particle in self.particles:
            if particle.life <= 0.0:
                continue
            particle.life -= particle.life_d * dt
            particle.p = particle.p + particle.dp * dt
            moved.append(particle)
        return moved

    def clear(self) -> None:
        self.particles = [Particle() for _ in self.particles]
        self.next_index = 0