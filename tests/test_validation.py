"""
Unit tests for settings validation.
"""

import pytest

from cligpt.domain.errors import ValidationError
from cligpt.domain.models import ChatModel
from cligpt.domain.validation import (
    check_api_key,
    check_model,
    check_temperature,
    mask_secret,
    validate_settings,
)

from conftest import VALID_API_KEY


@pytest.mark.unit
class TestApiKey:
    """Test API key shape checks."""

    @pytest.mark.parametrize("key", ["sk-" + "a" * 40, "sk-" + "Z9" * 25, VALID_API_KEY])
    def test_valid(self, key):
        assert check_api_key(key) is None

    @pytest.mark.parametrize(
        "key",
        [
            "",
            None,
            "sk-" + "a" * 39,
            "sk-" + "a" * 51,
            "pk-" + "a" * 45,
            "sk-" + "a" * 20 + "-" + "a" * 20,
            "sk-" + "é" * 45,
        ],
    )
    def test_invalid(self, key):
        violation = check_api_key(key)
        assert violation is not None
        assert violation.field == "api_key"
        assert "40-50" in violation.constraint
        assert "'sk-'" in violation.constraint

    def test_value_is_masked(self):
        key = "sk-" + "s3cret" * 3
        violation = check_api_key(key)
        assert violation.value.startswith("sk-s3c")
        assert "s3crets3cret" not in violation.value
        assert len(violation.value) == len(key)

    def test_mask_short(self):
        assert mask_secret("abc") == "***"


@pytest.mark.unit
class TestTemperature:
    """Test temperature range checks."""

    @pytest.mark.parametrize("value", [0.0, 1.0, "0.5", 0, 1])
    def test_valid(self, value):
        assert check_temperature(value) is None

    @pytest.mark.parametrize("value", [-0.01, 1.01, "hot", None, "nan", 2])
    def test_invalid(self, value):
        violation = check_temperature(value)
        assert violation.field == "temperature"
        assert violation.value == str(value)
        assert "0.0" in violation.constraint and "1.0" in violation.constraint


@pytest.mark.unit
class TestModel:
    """Test model name checks."""

    @pytest.mark.parametrize("value", ChatModel.choices() + [ChatModel.GPT_4])
    def test_valid(self, value):
        assert check_model(value) is None

    def test_invalid_lists_choices(self):
        violation = check_model("gpt-5-ultra")
        assert violation.field == "model"
        assert violation.value == "gpt-5-ultra"
        for name in ChatModel.choices():
            assert name in violation.constraint


@pytest.mark.unit
class TestValidateSettings:
    """Test the combined validator."""

    def test_returns_parsed_values(self):
        key, model, temperature = validate_settings(VALID_API_KEY, "gpt-4", "0.25")
        assert key == VALID_API_KEY
        assert model is ChatModel.GPT_4
        assert temperature == 0.25

    def test_collects_every_violation(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_settings("bad", "nope", "3")
        fields = [v.field for v in exc_info.value.violations]
        assert fields == ["api_key", "model", "temperature"]
        assert "invalid temperature '3'" in str(exc_info.value)
