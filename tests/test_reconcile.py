import json

import pytest

from box_deployer.errors import SerializationError
from box_deployer.json_store import JsonCatalogStore
from box_deployer.models import CatalogDocument
from box_deployer.reconcile import (
    CatalogReconciler,
    CatalogState,
    build_version_entry,
    upsert_version,
)

OLD = "1" * 64
NEW = "2" * 64


def _entry(version, checksum=OLD, provider="virtualbox"):
    return build_version_entry(
        version, provider, f"http://x/boxes/app-{version}.img", checksum
    )


def test_upsert_appends_new_version():
    doc = CatalogDocument(name="app", versions=(_entry("1.0"),))
    merged = upsert_version(doc, _entry("2.0"))
    assert [v.version for v in merged.versions] == ["1.0", "2.0"]
    assert [v.version for v in doc.versions] == ["1.0"]


def test_upsert_replaces_in_place_and_discards_old_providers():
    libvirt = _entry("2.0", provider="libvirt")
    doc = CatalogDocument(
        name="app", versions=(_entry("1.0"), libvirt, _entry("3.0"))
    )
    merged = upsert_version(doc, _entry("2.0", checksum=NEW))
    assert [v.version for v in merged.versions] == ["1.0", "2.0", "3.0"]
    providers = merged.get_version("2.0").providers
    assert len(providers) == 1
    assert providers[0].name == "virtualbox"
    assert providers[0].checksum == NEW
    assert merged.versions[0] == doc.versions[0]
    assert merged.versions[2] == doc.versions[2]


def test_upsert_is_idempotent():
    doc = CatalogDocument(name="app", versions=(_entry("1.0"),))
    once = upsert_version(doc, _entry("2.0"))
    twice = upsert_version(once, _entry("2.0"))
    assert once == twice
    assert len(twice.versions) == 2


def test_reconcile_creates_absent_catalog(tmp_path):
    store = JsonCatalogStore(tmp_path / "app.json")
    reconciler = CatalogReconciler(store)
    doc = reconciler.reconcile("app", "An app", _entry("1.0"))
    assert reconciler.state is CatalogState.PERSISTED
    assert doc.name == "app"
    assert doc.description == "An app"
    assert store.load() == doc


def test_reconcile_twice_yields_single_entry(tmp_path):
    store = JsonCatalogStore(tmp_path / "app.json")
    first = CatalogReconciler(store).reconcile("app", None, _entry("1.0"))
    second = CatalogReconciler(store).reconcile("app", None, _entry("1.0"))
    assert first == second
    assert len(store.load().versions) == 1


def test_reconcile_preserves_other_versions(tmp_path):
    store = JsonCatalogStore(tmp_path / "app.json")
    CatalogReconciler(store).reconcile("app", None, _entry("1.0"))
    CatalogReconciler(store).reconcile("app", None, _entry("2.0"))
    doc = CatalogReconciler(store).reconcile("app", None, _entry("1.0", checksum=NEW))
    assert [v.version for v in doc.versions] == ["1.0", "2.0"]
    assert doc.get_version("1.0").providers[0].checksum == NEW
    assert doc.get_version("2.0").providers[0].checksum == OLD


def test_reconcile_keeps_existing_description(tmp_path):
    store = JsonCatalogStore(tmp_path / "app.json")
    CatalogReconciler(store).reconcile("app", "first", _entry("1.0"))
    doc = CatalogReconciler(store).reconcile("app", "second", _entry("2.0"))
    assert doc.description == "first"


def test_reconcile_fills_missing_description(tmp_path):
    store = JsonCatalogStore(tmp_path / "app.json")
    CatalogReconciler(store).reconcile("app", None, _entry("1.0"))
    doc = CatalogReconciler(store).reconcile("app", "now described", _entry("2.0"))
    assert doc.description == "now described"


def test_reconcile_corrupt_catalog_fails(tmp_path):
    path = tmp_path / "app.json"
    path.write_text("[]", encoding="utf-8")
    reconciler = CatalogReconciler(JsonCatalogStore(path))
    with pytest.raises(SerializationError):
        reconciler.reconcile("app", None, _entry("1.0"))
    assert reconciler.state is CatalogState.FAILED
    assert path.read_text(encoding="utf-8") == "[]"


def test_step_methods_track_state(tmp_path):
    reconciler = CatalogReconciler(JsonCatalogStore(tmp_path / "app.json"))
    assert reconciler.load() is None
    assert reconciler.state is CatalogState.ABSENT
    reconciler.merge("app", None, _entry("1.0"))
    assert reconciler.state is CatalogState.MERGED
    reconciler.persist()
    assert reconciler.state is CatalogState.PERSISTED
    assert reconciler.load() is not None
    assert reconciler.state is CatalogState.LOADED


def test_persist_requires_merge(tmp_path):
    reconciler = CatalogReconciler(JsonCatalogStore(tmp_path / "app.json"))
    with pytest.raises(RuntimeError):
        reconciler.persist()


def test_reconcile_keeps_legacy_entries_verbatim(tmp_path):
    legacy = "f" * 60
    path = tmp_path / "app.json"
    path.write_text(
        json.dumps(
            {
                "name": "app",
                "description": "Written by an earlier deployer",
                "versions": [
                    {
                        "version": "0.9",
                        "providers": [
                            {
                                "name": "virtualbox",
                                "url": "http://x/boxes/app-0.9.img",
                                "checksum_type": "sha256",
                                "checksum": legacy,
                            }
                        ],
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    reconciler = CatalogReconciler(JsonCatalogStore(path))
    doc = reconciler.reconcile("app", None, _entry("1.0"))
    assert [v.version for v in doc.versions] == ["0.9", "1.0"]
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["versions"][0]["providers"][0]["checksum"] == legacy
