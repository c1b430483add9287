import pytest

from laserprice.errors import PriceValidationError, TemplateLookupError
from laserprice.services.pricing_service import preview_price


def _request(**kw):
    req = {"materialId": "plywood", "quantity": 1, "widthMm": 1000, "heightMm": 1000}
    req.update(kw)
    return req


def test_defaults_filled_from_settings(catalog):
    out = preview_price(_request(), catalog)

    # 1 m² at 20 with 15% waste, 40% margin
    assert out.material_cost == 23.0
    assert out.recommended_price == 38.33
    assert out.margin_percent == 40


def test_material_waste_default_used(catalog):
    out = preview_price(_request(materialId="acrylic"), catalog)

    assert out.material_cost == 50.0


def test_explicit_values_win(catalog):
    out = preview_price(_request(wastePercent=0, targetMarginPercent=50), catalog)

    assert out.material_cost == 20.0
    assert out.recommended_price == 40.0


def test_add_ons_resolved_from_catalog(catalog):
    out = preview_price(_request(materialId="acrylic", addOnIds=["wrap"]), catalog)

    assert [(a.id, a.name, a.cost) for a in out.add_ons] == [("wrap", "Gift wrap", 3.0)]
    assert out.total_cost == 53.0


def test_unknown_ids(catalog):
    with pytest.raises(TemplateLookupError):
        preview_price(_request(materialId="gold"), catalog)

    with pytest.raises(TemplateLookupError):
        preview_price(_request(addOnIds=["sparkles"]), catalog)


def test_missing_material_id(catalog):
    req = _request()
    del req["materialId"]

    with pytest.raises(PriceValidationError) as exc:
        preview_price(req, catalog)

    assert exc.value.fields == ["materialId"]


def test_invalid_dimensions_reported(catalog):
    with pytest.raises(PriceValidationError) as exc:
        preview_price(_request(widthMm=0), catalog)

    assert "widthMm" in exc.value.fields


def test_null_optional_values_take_defaults(catalog):
    out = preview_price(_request(materialId="acrylic", wastePercent=None, addOnIds=None), catalog)

    assert out.material_cost == 50.0
    assert out.add_ons == ()


def test_snake_case_request(catalog):
    req = {
        "material_id": "acrylic",
        "quantity": 1,
        "width_mm": 1000,
        "height_mm": 1000,
        "add_on_ids": ["wrap"],
    }

    out = preview_price(req, catalog)

    assert out.material_cost == 50.0
    assert out.labor_cost == 3.0


@pytest.mark.parametrize("add_on_ids", [5, [{"x": 1}], "wrap"])
def test_malformed_add_on_ids_rejected(catalog, add_on_ids):
    with pytest.raises(PriceValidationError) as exc:
        preview_price(_request(addOnIds=add_on_ids), catalog)

    assert any(f.startswith("addOnIds") for f in exc.value.fields)


def test_non_mapping_request_rejected(catalog):
    with pytest.raises(PriceValidationError) as exc:
        preview_price(["plywood"], catalog)

    assert exc.value.fields == ["input"]
