# wrsn_ga/sensor_node.py
import math
from typing import Dict

from .point import Point
from .constants import (
    SC_C, SC_V_MAX, SC_V_MIN, SC_V_CRITICAL, SC_V_INIT,
    V_SENSE, I_SENSE, I_IDLE, SENSE_CYCLE, IDLE_CYCLE,
    WEIGHT_LOW, WEIGHT_FULL, MAX_FAILS,
    ALPHA_MAT, EFF_ACOUS, ACOUS_FREQ, MAX_ACOUS_DIST,
    EFF_PIEZO, EFF_ACOUS2DC, ACOUS_ENERGY_SEND,
)


def acoustic_transfer(d: float) -> float:
    """
    Energy received by an end node at distance ``d`` [m] from the emitter.

    g = exp(-w^n * d * alpha), E_t = n_piezo * g * E_send,
    E_r = n_piezo * n_acous2dc * E_t. Out of range gives 0.
    """
    if d < 0 or d > MAX_ACOUS_DIST:
        return 0.0
    omega = 2 * math.pi * ACOUS_FREQ
    g = math.exp(-(omega ** EFF_ACOUS) * d * ALPHA_MAT)
    e_t = EFF_PIEZO * g * ACOUS_ENERGY_SEND
    return EFF_PIEZO * EFF_ACOUS2DC * e_t


class SensorNode:
    def __init__(self, x: float = 0.0, y: float = 0.0, v: float = SC_V_INIT,
                 p_sensor_type: bool = True):
        self.pos = Point(float(x), float(y))
        self.p_sensor_type = p_sensor_type
        self.capacitance = SC_C
        self.v_max = SC_V_MAX
        self.v_min = SC_V_MIN
        self.v_critical = SC_V_CRITICAL
        self.fails = 0
        self.skips = 0
        self.voltage = min(max(float(v), 0.0), self.v_max)
        self.energy = self.update_energy(self.voltage)
        self.weight = self.update_weight(self.voltage)
        self._v_init = self.voltage

    # --- capacitor relations ---
    def update_voltage(self, e: float) -> float:
        return math.sqrt(2 * max(e, 0.0) / self.capacitance)

    def update_energy(self, v: float) -> float:
        return 0.5 * self.capacitance * v ** 2

    def drain_energy(self, dt: float, e: float) -> float:
        """Energy left after ``dt`` seconds of sense/idle duty cycling."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        v = self.update_voltage(e)
        per_cycle = V_SENSE * I_SENSE * SENSE_CYCLE + v * I_IDLE * IDLE_CYCLE
        spent = per_cycle * dt / (SENSE_CYCLE + IDLE_CYCLE)
        return max(e - spent, 0.0)

    def update_weight(self, v: float) -> int:
        if v <= self.v_critical:
            return WEIGHT_LOW
        if v >= self.v_max:
            return WEIGHT_FULL
        span = self.v_max - self.v_critical
        return WEIGHT_LOW + int(math.floor((WEIGHT_FULL - WEIGHT_LOW) * (v - self.v_critical) / span))

    def calc_package(self) -> float:
        return 0.5 * self.capacitance * (self.v_max ** 2 - self.voltage ** 2)

    def calc_max_energy(self) -> float:
        return 0.5 * self.capacitance * self.v_max ** 2

    # --- fail counters ---
    def add_fail(self):
        self.fails += 1

    def mark_unreachable(self):
        """Count a batch that skipped this node as out of PDV range."""
        self.skips += 1

    def reset_fail(self):
        # a PDV serviced the node: both counters start over
        self.fails = 0
        self.skips = 0

    @property
    def is_escalated(self) -> bool:
        return self.fails > MAX_FAILS or self.skips > MAX_FAILS

    @property
    def needs_recharge(self) -> bool:
        return self.voltage < self.v_min

    # --- state updates ---
    def _set_energy(self, e: float):
        self.energy = min(max(e, 0.0), self.calc_max_energy())
        self.voltage = self.update_voltage(self.energy)
        self.weight = self.update_weight(self.voltage)

    def consume(self, dt: float):
        self._set_energy(self.drain_energy(dt, self.energy))
        if self.voltage <= self.v_critical:
            self.add_fail()
        else:
            self.fails = 0

    def receive_acoustic(self, d: float) -> float:
        before = self.energy
        self._set_energy(self.energy + acoustic_transfer(d))
        return self.energy - before

    def recharge_full(self) -> float:
        before = self.energy
        self._set_energy(self.calc_max_energy())
        return self.energy - before

    def reset(self):
        self.fails = 0
        self.skips = 0
        self.voltage = self._v_init
        self.energy = self.update_energy(self.voltage)
        self.weight = self.update_weight(self.voltage)

    def info(self) -> Dict[str, float]:
        return {
            "x": self.pos.x, "y": self.pos.y,
            "voltage": self.voltage, "energy": self.energy,
            "weight": self.weight, "fails": self.fails,
            "skips": self.skips,
            "p_sensor_type": self.p_sensor_type,
        }

    def __repr__(self):
        return f"SensorNode(x={self.pos.x:.2f}, y={self.pos.y:.2f}, v={self.voltage:.3f}, w={self.weight})"
