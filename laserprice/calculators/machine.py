from __future__ import annotations


def calc_machine_cost(machine_minutes: float, machine_hourly_cost: float) -> float:
    return (machine_minutes / 60) * machine_hourly_cost
