from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from jsonschema import ValidationError, validate

from ..core.logging_config import logger
from ..errors import TemplateCatalogError, TemplateLookupError
from .context import AddOnSnapshot, MaterialSnapshot
from .template_models import ProductTemplate, TemplateVariant

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "template_catalog.schema.json"


def _unique(kind: str, ids: Iterable[str]) -> None:
    seen = set()
    for x in ids:
        if x in seen:
            raise TemplateCatalogError(f"Duplicate {kind} id: {x}", {"kind": kind, "id": x})
        seen.add(x)


@dataclass(frozen=True)
class TemplateCatalog:
    version: str
    materials: Dict[str, MaterialSnapshot] = field(default_factory=dict)
    add_ons: Tuple[AddOnSnapshot, ...] = ()
    templates: Dict[str, ProductTemplate] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TemplateCatalog":
        """
        Build + cross-validate:
        - ids unique per kind (materials, add-ons, templates, variants, rules)
        - rule variantId must name a variant of the same template
        - default material ids must exist
        """
        materials = [MaterialSnapshot.from_dict(x) for x in d.get("materials") or []]
        add_ons = [AddOnSnapshot.from_dict(x) for x in d.get("addOns") or []]
        templates = [ProductTemplate.from_dict(x) for x in d.get("templates") or []]

        _unique("material", (m.id for m in materials))
        _unique("addOn", (a.id for a in add_ons))
        _unique("template", (t.id for t in templates))

        material_ids = {m.id for m in materials}
        for t in templates:
            _unique("variant", (v.id for v in t.variants))
            _unique("pricingRule", (r.id for r in t.pricing_rules))

            variant_ids = {v.id for v in t.variants}
            for r in t.pricing_rules:
                if r.variant_id and r.variant_id not in variant_ids:
                    raise TemplateCatalogError(
                        f"Rule {r.id} references unknown variant: {r.variant_id}",
                        {"template": t.id, "rule": r.id},
                    )

            defaults = [t.default_material_id] + [v.default_material_id for v in t.variants]
            for mid in defaults:
                if mid and mid not in material_ids:
                    raise TemplateCatalogError(
                        f"Template {t.id} references unknown material: {mid}",
                        {"template": t.id, "material": mid},
                    )

        return TemplateCatalog(
            version=str(d.get("catalogVersion") or ""),
            materials={m.id: m for m in materials},
            add_ons=tuple(add_ons),
            templates={t.id: t for t in templates},
        )

    @classmethod
    def from_yaml_file(cls, path: str) -> "TemplateCatalog":
        catalog_path = Path(path)

        try:
            with catalog_path.open("r", encoding="utf-8") as f:
                d = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise TemplateCatalogError(f"Invalid YAML in {catalog_path}: {e}") from e

        with SCHEMA_PATH.open("r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            validate(instance=d, schema=schema)
        except ValidationError as e:
            where = ".".join(str(p) for p in e.absolute_path) or "catalog"
            raise TemplateCatalogError(
                f"{where}: {e.message}", {"path": list(e.absolute_path)}
            ) from e

        return cls.from_dict(d)

    # -----------------
    # lookups
    # -----------------

    def template(self, template_id: str) -> ProductTemplate:
        t = self.templates.get(template_id)
        if t is None:
            raise TemplateLookupError("template", template_id)
        return t

    def variant(self, template: ProductTemplate, variant_id: Optional[str]) -> Optional[TemplateVariant]:
        if not variant_id:
            return None
        v = template.find_variant(variant_id)
        if v is None:
            raise TemplateLookupError("variant", variant_id)
        return v

    def material(self, material_id: str) -> MaterialSnapshot:
        m = self.materials.get(material_id)
        if m is None:
            raise TemplateLookupError("material", material_id)
        return m

    def resolve_add_ons(self, add_on_ids: Iterable[str]) -> Tuple[AddOnSnapshot, ...]:
        """Selected add-ons in catalog order; every id must exist."""
        wanted = set(add_on_ids)
        known = {a.id for a in self.add_ons}
        missing = sorted(wanted - known)
        if missing:
            raise TemplateLookupError("addOn", missing[0])
        return tuple(a for a in self.add_ons if a.id in wanted)


@dataclass(frozen=True)
class LoadedCatalog:
    catalog: TemplateCatalog
    mtime_ns: int


class CatalogLoader:
    """
    Hot reload the template catalog from disk (thread-safe).

    - Keeps last known-good catalog active
    - get() checks mtime_ns; if changed -> reload + validate
    - If reload fails: logs error and keeps old catalog
    """

    def __init__(self, yaml_path: str):
        self.yaml_path = yaml_path
        self._lock = threading.Lock()
        self._loaded: Optional[LoadedCatalog] = None

        # fail fast on a broken initial file
        self._loaded = self._load_from_disk_or_raise()

    def get(self) -> TemplateCatalog:
        try:
            current_mtime = self._stat_mtime_ns()
        except FileNotFoundError:
            if self._loaded is None:
                raise
            logger.warning("catalog_missing", path=self.yaml_path)
            return self._loaded.catalog

        loaded = self._loaded
        if loaded is not None and current_mtime == loaded.mtime_ns:
            return loaded.catalog

        with self._lock:
            loaded = self._loaded
            if loaded is not None and current_mtime == loaded.mtime_ns:
                return loaded.catalog

            try:
                new_loaded = self._load_from_disk_or_raise(expected_mtime_ns=current_mtime)
            except (OSError, TemplateCatalogError) as e:
                if loaded is None:
                    raise
                logger.error("catalog_reload_failed", path=self.yaml_path, error=repr(e))
                return loaded.catalog

            self._loaded = new_loaded
            logger.info(
                "catalog_reloaded",
                path=self.yaml_path,
                mtime_ns=new_loaded.mtime_ns,
                templates=len(new_loaded.catalog.templates),
            )
            return new_loaded.catalog

    def _stat_mtime_ns(self) -> int:
        return os.stat(self.yaml_path).st_mtime_ns

    def _load_from_disk_or_raise(self, expected_mtime_ns: Optional[int] = None) -> LoadedCatalog:
        if expected_mtime_ns is None:
            expected_mtime_ns = self._stat_mtime_ns()
        catalog = TemplateCatalog.from_yaml_file(self.yaml_path)
        return LoadedCatalog(catalog=catalog, mtime_ns=expected_mtime_ns)
