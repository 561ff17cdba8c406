"""
Tests for configuration source validation.

This module tests the validation functionality that checks a source
for malformed lines and naming conflicts without mounting anything.
"""

from __future__ import annotations

from cfgfs.validation import validate_source


class TestValidateSource:
    """Tests for validate_source function."""

    def test_valid_source(self, create_config_file, sample_lines):
        """Test that a clean source passes validation."""
        path = create_config_file("mednafen-09x.cfg", sample_lines)

        result = validate_source(path)

        assert result.status == "valid"
        assert result.setting_count == 3
        assert result.errors == []
        assert result.warnings == []
        assert result.source_path == str(path)

    def test_reports_every_malformed_line(self, create_config_file):
        """Test that validation keeps going after a malformed line."""
        path = create_config_file(
            "bad.cfg",
            ["malformed1", "video.driver opengl", "malformed2", "a..b.c v"],
        )

        result = validate_source(path)

        assert result.status == "invalid"
        assert len(result.errors) == 2
        assert result.errors[0].startswith("line 1:")
        assert result.errors[1].startswith("line 3:")
        assert result.warnings == ["line 4: empty section name: 'a..b.c'; setting skipped"]
        assert result.setting_count == 1

    def test_conflicts_are_warnings(self, create_config_file):
        """Test that naming conflicts do not invalidate a source."""
        path = create_config_file("conflict.cfg", ["a.b.k v", "a.brc.c.k v"])

        result = validate_source(path)

        assert result.status == "valid"
        assert len(result.warnings) == 1
        assert "/a/brc" in result.warnings[0]
        assert "line 2" in result.warnings[0]

    def test_empty_section_name_is_warning(self, create_config_file):
        """Test that an empty section name leaves a source valid."""
        path = create_config_file("skip.cfg", [".key v", "  fullscreen 1"])

        result = validate_source(path)

        assert result.status == "valid"
        assert result.errors == []
        assert result.warnings == ["line 1: empty section name: '.key'; setting skipped"]
        assert result.setting_count == 1

    def test_missing_source(self, tmp_test_dir):
        """Test that an unreadable source is reported as an error."""
        result = validate_source(tmp_test_dir / "nonexistent.cfg")

        assert result.status == "invalid"
        assert len(result.errors) == 1
        assert "cannot read" in result.errors[0]
        assert result.setting_count == 0

    def test_root_file_name_used(self, create_config_file):
        """Test that the configured root file takes part in conflicts."""
        path = create_config_file("root.cfg", ["cfgrc.x.k v"])

        assert validate_source(path).warnings == []
        assert len(validate_source(path, root_file="cfgrc").warnings) == 1
