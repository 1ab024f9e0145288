"""Input schemas for the exposed tools."""

from typing import Annotated, List, Dict, Any, Optional, Type, TypeVar, Union, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, create_model
from pydantic import ValidationError as PydanticValidationError

from .models.diagnosis import RiskLevel
from .utils.config import LimitsConfig
from .utils.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class AnnotationInput(BaseModel):
    """A marker the user placed on a photo."""
    x: float
    y: float
    label: Optional[str] = None


class PhotoObjectInput(BaseModel):
    """Photo with an optional mime type and annotation overlay."""
    model_config = ConfigDict(extra="ignore")

    data: NonEmptyStr
    mimeType: Optional[str] = None
    annotations: List[AnnotationInput] = Field(default_factory=list)


# Bare base64, a data URI, or a structured photo object
PhotoInput = Union[NonEmptyStr, PhotoObjectInput]


class AnalyzeIssueInput(BaseModel):
    description: str = Field(min_length=10, max_length=600)
    photos: List[PhotoInput] = Field(min_length=1, max_length=5)

    def photo_payloads(self) -> List[Union[str, Dict[str, Any]]]:
        """Photos as plain strings and dicts, ready for the normalizer."""
        return [
            photo if isinstance(photo, str) else photo.model_dump()
            for photo in self.photos
        ]


def analyze_issue_schema(limits: LimitsConfig) -> Type[AnalyzeIssueInput]:
    """
    AnalyzeIssueInput with the description and photo bounds taken from config.

    Args:
        limits: Configured input limits

    Returns:
        Schema class used to validate analyze_issue arguments
    """
    return create_model(
        "AnalyzeIssueInput",
        __base__=AnalyzeIssueInput,
        description=(str, Field(min_length=limits.min_description, max_length=limits.max_description)),
        photos=(List[PhotoInput], Field(min_length=1, max_length=limits.max_photos)),
    )


class GeneratePlanInput(BaseModel):
    issue_type: str = Field(min_length=3, max_length=120)
    risk_level: RiskLevel


class GenerateBomInput(BaseModel):
    issue_type: str = Field(min_length=3, max_length=120)


class RequestQuotesInput(BaseModel):
    # ZIP format is checked after the confirmation gate
    zip: str
    scope: str = Field(min_length=20, max_length=1000)
    confirmed: bool = False


class SubmitOutcomeInput(BaseModel):
    diagnosis_id: str = Field(min_length=5)
    outcome: Literal["success", "partial", "failed", "hired_pro"]
    actual_time_minutes: Optional[float] = Field(default=None, ge=0)
    actual_cost: Optional[float] = Field(default=None, ge=0)
    difficulty_rating: Optional[int] = Field(default=None, ge=1, le=5)
    after_photos: Optional[List[PhotoInput]] = None
    tips: Optional[str] = Field(default=None, max_length=1000)
    would_recommend_diy: Optional[bool] = None


def validate_input(schema: Type[ModelT], arguments: Optional[Dict[str, Any]], tool_name: str) -> ModelT:
    """
    Validate tool arguments against a schema.

    Args:
        schema: Pydantic model for the tool input
        arguments: Raw arguments from the caller
        tool_name: Tool name, used in the error message

    Returns:
        Validated schema instance

    Raises:
        ValidationError: Listing every offending field
    """
    try:
        return schema.model_validate(arguments or {})
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"]
            }
            for error in e.errors()
        ]
        fields = ", ".join(error["field"] or "input" for error in errors)
        raise ValidationError.invalid(f"Invalid input for {tool_name}: {fields}", errors=errors)
