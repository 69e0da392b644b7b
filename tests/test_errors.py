"""
Tests for custom exception hierarchy.
"""

import pytest

from crsgraph.core.errors import (
    ConfigurationError,
    CRSError,
    CrsGraphException,
    NotConvertibleError,
    TransformationError,
    ValidationError,
)


class TestCrsGraphException:
    """Tests for base CrsGraphException class."""

    def test_basic_exception(self) -> None:
        """Test basic exception creation."""
        exc = CrsGraphException(message="Test error", error_code="TEST_ERROR")

        assert str(exc) == "TEST_ERROR: Test error"
        assert exc.message == "Test error"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {}
        assert exc.suggestions == []

    def test_to_dict(self) -> None:
        """Test conversion to dictionary."""
        exc = CrsGraphException(
            message="Test error",
            error_code="TEST_ERROR",
            details={"key": "value"},
            suggestions=["suggestion"],
        )

        assert exc.to_dict() == {
            "error_code": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
            "suggestions": ["suggestion"],
        }

    def test_repr(self) -> None:
        repr_str = repr(CrsGraphException(message="Test error", error_code="TEST_ERROR"))

        assert "CrsGraphException" in repr_str
        assert "TEST_ERROR" in repr_str
        assert "Test error" in repr_str


class TestValidationError:
    def test_field(self) -> None:
        exc = ValidationError("min_x must be <= max_x", field="min_x")

        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details == {"field": "min_x"}
        assert exc.suggestions


class TestCRSErrors:
    """Tests for the CRS error family."""

    def test_crs_error(self) -> None:
        exc = CRSError("Mismatched systems", source_crs="3857", target_crs="84")

        assert exc.error_code == "CRS_ERROR"
        assert exc.details == {"source_crs": "3857", "target_crs": "84"}
        assert len(exc.suggestions) == 2

    def test_not_convertible(self) -> None:
        exc = NotConvertibleError("No path", source_crs="plain", target_crs="84")

        assert isinstance(exc, CRSError)
        assert exc.error_code == "NOT_CONVERTIBLE"
        assert any("Register a conversion" in s for s in exc.suggestions)

    def test_transformation_error(self) -> None:
        exc = TransformationError("Failed", details={"x_count": 2})

        assert isinstance(exc, CRSError)
        assert exc.error_code == "TRANSFORMATION_ERROR"
        assert exc.details == {"x_count": 2}

    def test_custom_suggestions(self) -> None:
        exc = NotConvertibleError("No path", suggestions=["Use WGS84"])

        assert exc.suggestions == ["Use WGS84"]

    def test_default_suggestions_not_shared(self) -> None:
        """Mutating one instance's suggestions leaves the class defaults alone."""
        first = CRSError("a")
        first.suggestions.append("extra")

        assert "extra" not in CRSError("b").suggestions


class TestConfigurationError:
    def test_config_key(self) -> None:
        exc = ConfigurationError("Unknown strategy", config_key="discovery_strategy")

        assert exc.error_code == "CONFIGURATION_ERROR"
        assert exc.details["config_key"] == "discovery_strategy"
        assert any("CRSGRAPH_" in s for s in exc.suggestions)

    def test_catch_as_base(self) -> None:
        with pytest.raises(CrsGraphException):
            raise ConfigurationError("bad")
