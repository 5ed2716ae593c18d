"""New idea form: client-side validation and the submission state machine."""
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError as SchemaValidationError

from .errors import ValidationError
from .models import IdeaCategory
from .schemas import FileUpload, IdeaFormData

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100
COMMENT_MAX_LENGTH = 1000

CATEGORY_LABELS = {
    IdeaCategory.PROCESS_IMPROVEMENT: "Process Improvement",
    IdeaCategory.PRODUCT_FEATURE: "Product Feature",
    IdeaCategory.EMPLOYEE_EXPERIENCE: "Employee Experience",
    IdeaCategory.CUSTOMER_EXPERIENCE: "Customer Experience",
    IdeaCategory.OTHER: "Other",
}

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "description": "Description is required",
    "category": "Category is required",
}


@dataclass
class FormValidation:
    """Result of validating the form: either a payload or field errors, never both."""
    payload: Optional[IdeaFormData] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.payload is not None and not self.errors

    def raise_for_errors(self) -> IdeaFormData:
        if not self.is_valid:
            raise ValidationError(self.errors)
        return self.payload


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _message_for(field_name: str, error: dict) -> str:
    if field_name in REQUIRED_MESSAGES and (
        error["type"] in ("missing", "string_too_short") or _is_blank(error.get("input"))
    ):
        return REQUIRED_MESSAGES[field_name]
    if field_name == "title" and error["type"] == "string_too_long":
        return f"Title must be at most {TITLE_MAX_LENGTH} characters"
    if field_name == "category":
        return "Choose one of the listed categories"
    if field_name == "attachments":
        return "Invalid attachment"
    return error["msg"]


def validate_idea_form(values: Mapping[str, Any], attachments: Optional[List[FileUpload]] = None) -> FormValidation:
    """
    Validate raw form input synchronously.

    Empty file inputs (no filename) are dropped before validation since
    browsers submit one for an untouched file picker.
    """
    data = {key: values.get(key) for key in ("title", "description", "category") if values.get(key) is not None}
    data["attachments"] = [upload for upload in (attachments or []) if upload.filename]

    try:
        payload = IdeaFormData.model_validate(data)
    except SchemaValidationError as e:
        errors: Dict[str, str] = {}
        for error in e.errors():
            field_name = str(error["loc"][0]) if error["loc"] else "__root__"
            errors.setdefault(field_name, _message_for(field_name, error))
        return FormValidation(errors=errors)
    return FormValidation(payload=payload)


def validate_comment(content: Optional[str]) -> Dict[str, str]:
    """Field errors for a comment body; empty dict when valid."""
    if _is_blank(content):
        return {"content": "Comment is required"}
    if len(content.strip()) > COMMENT_MAX_LENGTH:
        return {"content": f"Comment must be at most {COMMENT_MAX_LENGTH} characters"}
    return {}


class FormState(str, enum.Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"


SubmitHandler = Callable[[IdeaFormData], Awaitable[bool]]


class NewIdeaForm:
    """
    Form state for a new idea.

    editing → validating → editing (field errors)
                         → submitting → editing (cleared on success,
                                                 values kept on failure)
    """

    fields = ("title", "category", "description")

    def __init__(self):
        self.values: Dict[str, str] = {}
        self.attachments: List[FileUpload] = []
        self.errors: Dict[str, str] = {}
        self.state = FormState.EDITING

    @property
    def is_submitting(self) -> bool:
        return self.state == FormState.SUBMITTING

    def update(self, values: Mapping[str, Any], attachments: Optional[List[FileUpload]] = None):
        """Record what the user typed; clears errors of the fields that changed."""
        for name in self.fields:
            if name in values:
                new_value = values[name] if values[name] is not None else ""
                if new_value != self.values.get(name):
                    self.errors.pop(name, None)
                self.values[name] = new_value
        if attachments is not None:
            self.attachments = list(attachments)

    def reset(self):
        self.values = {}
        self.attachments = []
        self.errors = {}
        self.state = FormState.EDITING

    async def submit(self, on_submit: SubmitHandler) -> bool:
        """
        Validate and, when valid, hand the payload to ``on_submit``.

        ``on_submit`` returns True when the command succeeded. No remote
        call happens unless validation passes.
        """
        self.state = FormState.VALIDATING
        validation = validate_idea_form(self.values, self.attachments)
        if not validation.is_valid:
            self.errors = validation.errors
            self.state = FormState.EDITING
            logger.debug(f"Idea form rejected: {validation.errors}")
            return False

        self.errors = {}
        self.state = FormState.SUBMITTING
        try:
            succeeded = await on_submit(validation.payload)
        finally:
            self.state = FormState.EDITING

        if succeeded:
            self.reset()
        return succeeded
