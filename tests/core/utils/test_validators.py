import pytest
from pydantic import BaseModel, StrictStr
from pydantic import ValidationError as PydanticValidationError

from core.utils.validators import sanitize_validation_errors, validate_request


class SampleModel(BaseModel):
    name: StrictStr
    count: int = 0


class TestValidateRequest:
    def test_returns_model(self) -> None:
        model = validate_request(SampleModel, {"name": "x", "count": 2})

        assert isinstance(model, SampleModel)
        assert model.count == 2

    def test_raises_pydantic_error(self) -> None:
        with pytest.raises(PydanticValidationError):
            validate_request(SampleModel, {"count": 1})


class TestSanitizeValidationErrors:
    def test_strips_internal_fields(self) -> None:
        errors = [
            {
                "loc": ("files", 0, "file_name"),
                "msg": "Field required",
                "input": {"secret": "value"},
                "url": "https://errors.pydantic.dev",
            }
        ]

        assert sanitize_validation_errors(errors) == [
            {"field": "files.0.file_name", "message": "This field is required"}
        ]

    def test_value_error_prefix_removed(self) -> None:
        errors = [{"loc": (), "msg": "Value error, Provide either a key or a path"}]

        assert sanitize_validation_errors(errors) == [
            {"field": "body", "message": "Provide either a key or a path"}
        ]

    def test_type_errors_rewritten(self) -> None:
        errors = [{"loc": ("size",), "msg": "Input should be a valid string"}]

        assert sanitize_validation_errors(errors)[0]["message"] == "Invalid value type"
