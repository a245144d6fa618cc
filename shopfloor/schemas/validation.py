from pydantic import BaseModel


class FieldErrorOut(BaseModel):
    """One problem with one submitted shop floor value"""
    field: str
    code: str  # required, type, min, max, choice
    message: str

    @classmethod
    def from_error(cls, e) -> "FieldErrorOut":
        return cls(field=e.field, code=e.code, message=e.message)


class ValidationPreviewResponse(BaseModel):
    """Dry-run result for an entry submission"""
    valid: bool
    errors: list[FieldErrorOut]
    warnings: list[str]  # keys sent that the article schema does not know
