"""Tests for manager detection."""


from core.detect import identify


class TestManagerDetection:
    """Test manager detection from filenames and content."""

    def test_detect_pip_by_filename(self):
        assert identify("", "requirements.txt") == "pip_requirements"
        assert identify("", "requirements-dev.txt") == "pip_requirements"
        assert identify("", "deps/requirements.in") == "pip_requirements"

    def test_detect_conan_by_filename(self):
        assert identify("", "conanfile.txt") == "conan"
        assert identify("", "/src/project/conanfile.txt") == "conan"

    def test_detect_pip_by_content(self):
        """Should detect requirements content patterns."""
        assert identify("fastapi==0.85.0\nuvicorn>=0.18.0") == "pip_requirements"
        assert identify('uvloop>=0.17.0; sys_platform != "win32"') == "pip_requirements"
        assert identify("fastapi[all]>=0.85.0") == "pip_requirements"

    def test_detect_conan_by_content(self, sample_conanfile):
        assert identify(sample_conanfile) == "conan"

    def test_detect_kubernetes_by_content(self, sample_kubernetes):
        assert identify(sample_kubernetes, "deployment.yaml") == "kubernetes"

    def test_yaml_without_kind_is_unknown(self):
        assert identify("apiVersion: v1\nimage: nginx:1.19", "values.yaml") == "unknown"

    def test_detect_unknown_for_ambiguous(self):
        """Should return unknown for unclear content."""
        assert identify("", "unknown.txt") == "unknown"
        assert identify("some random text") == "unknown"
        assert identify("") == "unknown"

    def test_filename_takes_precedence(self):
        """Filename should take precedence over content when both present."""
        content = "[requires]\npoco/1.9.4"
        assert identify(content, "requirements.txt") == "pip_requirements"
