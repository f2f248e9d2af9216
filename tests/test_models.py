import pytest
from pydantic import ValidationError

from box_deployer.models import CatalogDocument, ProviderEntry, VersionEntry

CHECKSUM = "a" * 64


def _provider(**overrides):
    data = {"url": "http://x/boxes/myapp-1.0.img", "checksum": CHECKSUM}
    data.update(overrides)
    return ProviderEntry(**data)


def test_provider_defaults():
    provider = _provider()
    assert provider.name == "virtualbox"
    assert provider.checksum_type == "sha256"


@pytest.mark.parametrize("checksum", ["A" * 64, "a" * 63, "g" * 64, ""])
def test_provider_rejects_bad_checksum(checksum):
    with pytest.raises(ValidationError):
        _provider(checksum=checksum)


def test_provider_rejects_relative_url():
    with pytest.raises(ValidationError):
        _provider(url="boxes/myapp-1.0.img")


def test_provider_keeps_url_verbatim():
    assert _provider(url="http://x").url == "http://x"


def test_provider_rejects_other_checksum_type():
    with pytest.raises(ValidationError):
        _provider(checksum_type="md5")


def test_catalog_rejects_duplicate_versions():
    entry = VersionEntry(version="1.0", providers=(_provider(),))
    with pytest.raises(ValidationError):
        CatalogDocument(name="myapp", versions=(entry, entry))


def test_catalog_is_frozen():
    doc = CatalogDocument(name="myapp")
    with pytest.raises(ValidationError):
        doc.name = "other"


def test_to_json_dict_omits_absent_description():
    entry = VersionEntry(version="1.0", providers=(_provider(),))
    data = CatalogDocument(name="myapp", versions=(entry,)).to_json_dict()
    assert list(data) == ["name", "versions"]
    assert data["versions"] == [
        {
            "version": "1.0",
            "providers": [
                {
                    "name": "virtualbox",
                    "url": "http://x/boxes/myapp-1.0.img",
                    "checksum_type": "sha256",
                    "checksum": CHECKSUM,
                }
            ],
        }
    ]


def test_to_json_dict_key_order_with_description():
    data = CatalogDocument(name="myapp", description="Base").to_json_dict()
    assert list(data) == ["name", "description", "versions"]


def test_from_json_dict_tolerates_missing_description_and_unknown_keys():
    doc = CatalogDocument.from_json_dict(
        {
            "name": "myapp",
            "versions": [
                {
                    "version": "1.0",
                    "providers": [
                        {
                            "name": "libvirt",
                            "url": "http://x/a.img",
                            "checksum_type": "sha256",
                            "checksum": CHECKSUM,
                            "extra": 1,
                        }
                    ],
                }
            ],
            "unrelated": True,
        }
    )
    assert doc.description is None
    assert doc.get_version("1.0").providers[0].name == "libvirt"
    assert doc.get_version("2.0") is None
    assert doc.version_index("1.0") == 0
    assert doc.version_index("2.0") == -1
    assert "unrelated" not in doc.to_json_dict()


def test_from_json_dict_accepts_unpadded_legacy_checksum():
    legacy = "3a7bd3e236a3d29eea436fcfb7e44c735d117c42d1c1835420b6b9942dd4f1b"[:62]
    doc = CatalogDocument.from_json_dict(
        {
            "name": "myapp",
            "versions": [
                {
                    "version": "0.9",
                    "providers": [{"url": "http://x/a.img", "checksum": legacy}],
                }
            ],
        }
    )
    assert doc.get_version("0.9").providers[0].checksum == legacy
    with pytest.raises(ValidationError):
        _provider(checksum=legacy)


def test_from_json_dict_still_rejects_non_hex_checksum():
    with pytest.raises(ValidationError):
        CatalogDocument.from_json_dict(
            {
                "name": "myapp",
                "versions": [
                    {
                        "version": "0.9",
                        "providers": [{"url": "http://x/a.img", "checksum": "z" * 40}],
                    }
                ],
            }
        )
