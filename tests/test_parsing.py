"""Tests for parsing.py module."""

import pytest
import yaml

from presentation_operator.config import OperatorSettings
from presentation_operator.exceptions import ManifestParsingError
from presentation_operator.parsing import parse_presentation_file, render_dependents


class TestParsePresentationFile:
    """Tests for manifest parsing."""

    def test_parse_valid_manifest(self, tmp_path, sample_presentation_yaml):
        """Test parsing a single Presentation document."""
        manifest = tmp_path / "talk.yaml"
        manifest.write_text(sample_presentation_yaml)

        presentation = parse_presentation_file(str(manifest))

        assert presentation.metadata.name == "talk"
        assert presentation.metadata.namespace == "slides"
        assert presentation.markdown.startswith("# Hello\n---\n")

    def test_parse_uses_default_namespace(self, tmp_path):
        """Test a manifest without namespace gets the default one."""
        manifest = tmp_path / "talk.yaml"
        manifest.write_text("kind: Presentation\nmetadata:\n  name: talk\nspec:\n  markdown: hi\n")

        presentation = parse_presentation_file(str(manifest), default_namespace="team")

        assert presentation.metadata.namespace == "team"

    def test_parse_missing_file(self, tmp_path):
        """Test a missing file raises ManifestParsingError."""
        with pytest.raises(ManifestParsingError) as exc_info:
            parse_presentation_file(str(tmp_path / "missing.yaml"))

        assert "does not exist" in str(exc_info.value)

    def test_parse_malformed_yaml(self, tmp_path):
        """Test malformed YAML raises ManifestParsingError."""
        manifest = tmp_path / "bad.yaml"
        manifest.write_text("metadata: [unclosed\n")

        with pytest.raises(ManifestParsingError) as exc_info:
            parse_presentation_file(str(manifest))

        assert "malformed YAML" in str(exc_info.value)

    def test_parse_multiple_documents(self, tmp_path, sample_presentation_yaml):
        """Test multi-document files are refused."""
        manifest = tmp_path / "many.yaml"
        manifest.write_text(f"{sample_presentation_yaml}---\n{sample_presentation_yaml}")

        with pytest.raises(ManifestParsingError) as exc_info:
            parse_presentation_file(str(manifest))

        assert "2 YAML documents" in str(exc_info.value)

    def test_parse_empty_file(self, tmp_path):
        """Test an empty file is refused."""
        manifest = tmp_path / "empty.yaml"
        manifest.write_text("")

        with pytest.raises(ManifestParsingError):
            parse_presentation_file(str(manifest))

    def test_parse_non_mapping(self, tmp_path):
        """Test a YAML list is refused."""
        manifest = tmp_path / "list.yaml"
        manifest.write_text("- a\n- b\n")

        with pytest.raises(ManifestParsingError) as exc_info:
            parse_presentation_file(str(manifest))

        assert "valid YAML mapping" in str(exc_info.value)

    def test_parse_wrong_kind(self, tmp_path):
        """Test other resource kinds are refused."""
        manifest = tmp_path / "cm.yaml"
        manifest.write_text("kind: ConfigMap\nmetadata:\n  name: x\n")

        with pytest.raises(ManifestParsingError) as exc_info:
            parse_presentation_file(str(manifest))

        assert "Expected kind" in str(exc_info.value)

    def test_parse_non_string_markdown(self, tmp_path):
        """Test a numeric markdown value is refused instead of coerced."""
        manifest = tmp_path / "talk.yaml"
        manifest.write_text("kind: Presentation\nmetadata:\n  name: talk\nspec:\n  markdown: 42\n")

        with pytest.raises(ManifestParsingError) as exc_info:
            parse_presentation_file(str(manifest))

        assert "spec.markdown must be a string" in str(exc_info.value)


class TestRenderDependents:
    """Tests for dependent rendering."""

    def test_render_without_uid_has_no_owner(self, tmp_path, sample_presentation_yaml):
        """Test a Presentation from a file renders without owner references."""
        manifest = tmp_path / "talk.yaml"
        manifest.write_text(sample_presentation_yaml)
        presentation = parse_presentation_file(str(manifest))

        config_map, pod = yaml.safe_load_all(render_dependents(presentation))

        assert config_map["metadata"]["name"] == "talk-config"
        assert config_map["data"]["slides.md"] == presentation.markdown
        assert pod["metadata"]["name"] == "talk-pod"
        assert "ownerReferences" not in pod["metadata"]

    def test_render_with_uid_has_owner(self, sample_presentation):
        """Test a stored Presentation renders owner references."""
        config_map, pod = yaml.safe_load_all(render_dependents(sample_presentation))

        assert config_map["metadata"]["ownerReferences"][0]["uid"] == "1234-abcd"
        assert pod["metadata"]["ownerReferences"][0]["kind"] == "Presentation"

    def test_render_uses_settings(self, sample_presentation):
        """Test the rendered Pod uses the configured image."""
        _, pod = yaml.safe_load_all(render_dependents(sample_presentation, OperatorSettings(image="slides:1")))

        assert pod["spec"]["containers"][0]["image"] == "slides:1"
