from .add_ons import calc_add_on_cost, calc_add_ons  # noqa
from .machine import calc_machine_cost  # noqa
from .material import (  # noqa
    MaterialCostResult,
    Resolved,
    Unpriceable,
    apply_waste,
    calc_material_cost,
    material_cost_amount,
)
