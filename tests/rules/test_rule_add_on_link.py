from laserprice.rule_types.add_on_link import AddOnLinkRule


def test_add_on_link_adds_value(metrics, base_metrics):
    out = AddOnLinkRule(rule_id="link", value=3.25).apply(metrics, base_metrics)

    assert out.decision == "APPLIED"
    assert out.delta == 3.25
    assert AddOnLinkRule.label == "Add-on"
