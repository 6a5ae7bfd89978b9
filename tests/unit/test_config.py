"""Unit tests for ConverterSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from structbridge import ConverterSettings


class TestConverterSettings:
    def test_defaults(self) -> None:
        settings = ConverterSettings()
        assert settings.max_depth == 64
        assert settings.default_tag_name == ""
        assert settings.lossy_numeric is True
        assert settings.text_bytes is True
        assert settings.encoding == "utf-8"

    def test_frozen(self) -> None:
        settings = ConverterSettings()
        with pytest.raises(ValidationError):
            settings.max_depth = 3  # type: ignore[misc]

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConverterSettings(max_dpeth=3)  # type: ignore[call-arg]

    @pytest.mark.parametrize("depth", [0, -1])
    def test_max_depth_positive(self, depth: int) -> None:
        with pytest.raises(ValidationError):
            ConverterSettings(max_depth=depth)

    def test_unknown_encoding(self) -> None:
        with pytest.raises(ValidationError, match="Unknown encoding"):
            ConverterSettings(encoding="no-such-codec")

    def test_copy_with_update(self) -> None:
        settings = ConverterSettings().model_copy(update={"lossy_numeric": False})
        assert settings.lossy_numeric is False
        assert settings.max_depth == 64
