from laserprice.engine.context import TemplatePricingMetrics
from laserprice.rule_types.per_item import PerItemRule


def test_per_item_uses_metric_quantity(base_metrics):
    out = PerItemRule(rule_id="item", value=2).apply(
        TemplatePricingMetrics(quantity=5), base_metrics
    )

    assert out.decision == "APPLIED"
    assert out.delta == 10.0


def test_per_item_falls_back_to_order_quantity(base_metrics):
    out = PerItemRule(rule_id="item", value=2).apply(TemplatePricingMetrics(), base_metrics)

    assert out.delta == 6.0  # base quantity 3
