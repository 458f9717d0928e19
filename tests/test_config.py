"""Tests for settings loading and field tables."""

from __future__ import annotations

import pytest
import yaml

from academic_digest.config import (
    FIELD_PROFILES,
    AcademicField,
    Settings,
    are_related_fields,
    field_profile,
    load_settings,
    parse_field,
    validate_field_tables,
)
from academic_digest.errors import ConfigurationError


def write_config(tmp_path, data):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(data))
    return path


class TestFieldTables:
    def test_every_field_has_a_profile(self):
        assert set(FIELD_PROFILES) == set(AcademicField)
        validate_field_tables()

    def test_profiles_format_subfield(self):
        for fld in AcademicField:
            profile = field_profile(fld)
            assert "X-Sub" in profile.impact_applied.format(subfield="X-Sub")
            assert "X-Sub" in profile.impact_fundamental.format(subfield="X-Sub")

    def test_policy_impact_names_subfield(self):
        profile = field_profile(AcademicField.POLICY_GOVERNANCE)
        assert "Urban Policy" in profile.impact_applied.format(subfield="Urban Policy")

    def test_parse_field(self):
        assert parse_field(" AI-Computing ") is AcademicField.AI_COMPUTING
        assert parse_field(AcademicField.LIFE_SCIENCES) is AcademicField.LIFE_SCIENCES
        with pytest.raises(ConfigurationError, match="valid fields"):
            parse_field("alchemy")

    def test_relatedness_is_symmetric(self):
        for a in AcademicField:
            for b in AcademicField:
                assert are_related_fields(a, b) == are_related_fields(b, a)
        assert are_related_fields("ai-computing", "life-sciences")
        assert not are_related_fields("ai-computing", "humanities-culture")


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings == Settings()
        assert settings.content.max_articles_per_digest == 5
        assert settings.content.selection_buffer_minutes == 5
        assert [s["id"] for s in settings.sources] == ["arxiv", "crossref"]

    def test_sections_override_defaults(self, tmp_path):
        path = write_config(tmp_path, {
            "content": {"max_reading_time_minutes": 20},
            "summarizer": {"provider": "anthropic"},
            "fields": ["ai-computing"],
            "sources": [{"id": "arxiv", "mock": False}],
            "log_level": "debug",
            "random_seed": 42,
        })
        settings = load_settings(path)
        assert settings.content.max_reading_time_minutes == 20
        assert settings.content.min_articles_per_digest == 3
        assert settings.summarizer.provider == "anthropic"
        assert settings.fields == [AcademicField.AI_COMPUTING]
        assert settings.sources == [{"id": "arxiv", "mock": False}]
        assert settings.log_level == "DEBUG"
        assert settings.random_seed == 42

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, {"artifacts_dir": "out"})
        monkeypatch.setenv("ACADEMIC_DIGEST_CONFIG", str(path))
        assert load_settings().artifacts_dir == "out"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_settings(path) == Settings()

    @pytest.mark.parametrize(
        "data",
        [
            {"content": {"max_articles": 5}},
            {"content": "nope"},
            {"content": {"min_articles_per_digest": 0}},
            {"content": {"min_articles_per_digest": 6}},
            {"sources": [{"type": "arxiv"}]},
            {"fields": ["alchemy"]},
        ],
    )
    def test_invalid_settings(self, tmp_path, data):
        with pytest.raises(ConfigurationError):
            load_settings(write_config(tmp_path, data))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("content: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_settings(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_settings(path)
