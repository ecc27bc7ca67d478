"""Tests for the canonical industry catalog and sub-industries."""

import json

from industry_interview.catalog import (
    DEFAULT_INDUSTRIES,
    GENERIC_SUB_INDUSTRIES,
    get_canonical_industries,
    load_canonical_industries,
    merge_sub_industries,
)
from industry_interview.models import SubIndustry


class TestLoadCanonicalIndustries:
    """Tests for load_canonical_industries."""

    def test_no_path_uses_defaults(self):
        """Without a path the built-in list is used."""
        assert load_canonical_industries(None) == DEFAULT_INDUSTRIES

    def test_missing_file_uses_defaults(self, tmp_path):
        """A missing file falls back to the defaults."""
        assert load_canonical_industries(str(tmp_path / "nope.json")) == DEFAULT_INDUSTRIES

    def test_invalid_json_uses_defaults(self, tmp_path):
        """An unreadable file falls back to the defaults."""
        path = tmp_path / "industries.json"
        path.write_text("{not json")
        assert load_canonical_industries(str(path)) == DEFAULT_INDUSTRIES

    def test_list_file(self, tmp_path):
        """A plain list is normalized and deduplicated."""
        path = tmp_path / "industries.json"
        path.write_text(
            json.dumps(
                [
                    {"key": "Pool Service", "label": "Pool Service"},
                    {"key": "pool-service", "label": "Duplicate"},
                    {"key": "pest_control"},
                    {"label": "no key"},
                    "junk",
                ]
            )
        )
        industries = load_canonical_industries(str(path))

        assert [(i.key, i.label) for i in industries] == [
            ("pool_service", "Pool Service"),
            ("pest_control", "Pest Control"),
        ]

    def test_wrapped_file(self, tmp_path):
        """An object with an "industries" list is accepted."""
        path = tmp_path / "industries.json"
        path.write_text(json.dumps({"industries": [{"key": "hvac", "label": "HVAC"}]}))
        assert [i.key for i in load_canonical_industries(str(path))] == ["hvac"]

    def test_empty_file_uses_defaults(self, tmp_path):
        """A file with no valid entries falls back to the defaults."""
        path = tmp_path / "industries.json"
        path.write_text(json.dumps({"industries": []}))
        assert load_canonical_industries(str(path)) == DEFAULT_INDUSTRIES

    def test_cached_accessor_reads_settings(self, tmp_path, mock_settings):
        """The cached accessor loads from the configured path."""
        path = tmp_path / "industries.json"
        path.write_text(json.dumps([{"key": "hvac", "label": "HVAC"}]))
        mock_settings(industries_json_path=str(path))
        get_canonical_industries.cache_clear()

        assert [i.key for i in get_canonical_industries()] == ["hvac"]


class TestMergeSubIndustries:
    """Tests for merge_sub_industries."""

    def test_platform_defaults(self):
        """Industries with platform defaults get them."""
        keys = [s.key for s in merge_sub_industries("Upholstery")]
        assert keys == ["auto", "marine", "motorcycle", "rv", "commercial"]

    def test_generic_defaults(self):
        """Other industries get the generic list."""
        assert merge_sub_industries("plumbing") == GENERIC_SUB_INDUSTRIES

    def test_tenant_entries_appended_and_override(self):
        """Tenant entries are added after defaults; same keys replace the label."""
        merged = merge_sub_industries(
            "landscaping",
            [
                SubIndustry(key="Commercial", label="Commercial Properties"),
                SubIndustry(key="tree care", label="Tree Care"),
            ],
        )
        keys = [s.key for s in merged]

        assert keys == ["residential", "commercial", "hoa", "hardscape", "maintenance", "tree_care"]
        assert merged[1].label == "Commercial Properties"

    def test_defaults_not_modified(self):
        """Merging never changes the shared defaults."""
        merged = merge_sub_industries("plumbing")
        merged[0].label = "changed"
        assert GENERIC_SUB_INDUSTRIES[0].label == "Residential"
