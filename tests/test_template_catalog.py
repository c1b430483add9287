import json
import os

import jsonschema
import pytest
import yaml

from laserprice.engine.template_catalog import SCHEMA_PATH, CatalogLoader, TemplateCatalog
from laserprice.errors import TemplateCatalogError, TemplateLookupError


def _write(path, data):
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


def _bump_mtime(path, seconds=5):
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 1_000_000_000))


def test_catalog_schema_is_valid_jsonschema():
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    jsonschema.Draft202012Validator.check_schema(schema)


def test_demo_catalog_loads(demo_catalog):
    assert demo_catalog.version == "v1"
    assert set(demo_catalog.templates) == {
        "name-ornament-circle",
        "door-name-sign",
        "engraved-gift-box",
    }
    assert demo_catalog.material("birch-3mm").cost_per_sheet == 12.0
    assert [a.id for a in demo_catalog.add_ons] == ["gift-wrap", "keyring", "rush"]


def test_from_dict_builds_models(catalog):
    tpl = catalog.template("tag")

    assert tpl.layers_count == 2
    assert [v.id for v in tpl.variants] == ["small", "clear"]
    assert tpl.find_variant("clear").default_material_id == "acrylic"
    assert tpl.find_variant("nope") is None
    red = [r for r in tpl.pricing_rules if r.id == "red-extra"][0]
    assert red.applies_when == {"color": "red"}
    assert red.value == 4.0


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d["materials"].append(dict(d["materials"][0])),
        lambda d: d["addOns"].append(dict(d["addOns"][0])),
        lambda d: d["templates"].append(dict(d["templates"][1])),
        lambda d: d["templates"][0]["variants"].append({"id": "small", "name": "Again"}),
        lambda d: d["templates"][0]["pricingRules"].append(
            {"id": "base", "ruleType": "FIXED_BASE", "value": 1}
        ),
    ],
)
def test_duplicate_ids_rejected(catalog_dict, mutate):
    mutate(catalog_dict)

    with pytest.raises(TemplateCatalogError):
        TemplateCatalog.from_dict(catalog_dict)


def test_rule_with_unknown_variant_rejected(catalog_dict):
    catalog_dict["templates"][0]["pricingRules"][2]["variantId"] = "huge"

    with pytest.raises(TemplateCatalogError) as exc:
        TemplateCatalog.from_dict(catalog_dict)

    assert "huge" in exc.value.message


def test_unknown_default_material_rejected(catalog_dict):
    catalog_dict["templates"][0]["variants"][1]["defaultMaterialId"] = "gold"

    with pytest.raises(TemplateCatalogError):
        TemplateCatalog.from_dict(catalog_dict)


def test_yaml_failing_schema_rejected(tmp_path, catalog_dict):
    catalog_dict["materials"][0]["unitType"] = "ROLL"
    path = tmp_path / "catalog.yaml"
    _write(path, catalog_dict)

    with pytest.raises(TemplateCatalogError) as exc:
        TemplateCatalog.from_yaml_file(str(path))

    assert exc.value.code == "CATALOG_INVALID"
    assert "materials.0.unitType" in exc.value.message


def test_broken_yaml_rejected(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("materials: [\n", encoding="utf-8")

    with pytest.raises(TemplateCatalogError):
        TemplateCatalog.from_yaml_file(str(path))


def test_lookups_raise_lookup_error(catalog):
    with pytest.raises(TemplateLookupError) as exc:
        catalog.template("nope")
    assert exc.value.kind == "template"
    assert isinstance(exc.value, LookupError)

    with pytest.raises(TemplateLookupError):
        catalog.material("gold")

    with pytest.raises(TemplateLookupError):
        catalog.variant(catalog.template("tag"), "huge")

    assert catalog.variant(catalog.template("tag"), None) is None


def test_resolve_add_ons(catalog):
    assert [a.id for a in catalog.resolve_add_ons(["wrap"])] == ["wrap"]
    assert catalog.resolve_add_ons([]) == ()

    with pytest.raises(TemplateLookupError) as exc:
        catalog.resolve_add_ons(["wrap", "sparkles"])
    assert exc.value.key == "sparkles"


def test_loader_reloads_on_change(tmp_path, catalog_dict):
    path = tmp_path / "catalog.yaml"
    _write(path, catalog_dict)
    loader = CatalogLoader(str(path))

    first = loader.get()
    assert loader.get() is first

    catalog_dict["catalogVersion"] = "next"
    _write(path, catalog_dict)
    _bump_mtime(path)

    assert loader.get().version == "next"


def test_loader_keeps_last_good_catalog(tmp_path, catalog_dict):
    path = tmp_path / "catalog.yaml"
    _write(path, catalog_dict)
    loader = CatalogLoader(str(path))

    path.write_text("materials: [\n", encoding="utf-8")
    _bump_mtime(path)
    assert loader.get().version == "test"

    path.unlink()
    assert loader.get().version == "test"


def test_loader_fails_fast_without_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CatalogLoader(str(tmp_path / "missing.yaml"))
