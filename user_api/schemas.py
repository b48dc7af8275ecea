from pydantic import BaseModel, Field, StrictInt, StrictStr

# Range of a signed 64-bit INTEGER column.
MIN_DB_INT = -(2**63)
MAX_DB_INT = 2**63 - 1


class UserIn(BaseModel):
    """Request body for create and update.

    Unknown keys are ignored, so an ``id`` sent by the client never reaches
    the database; the path (update) or the database (create) decides it.
    Types are strict: ``"30"`` or ``true`` is not an age.
    """

    name: StrictStr = Field(..., max_length=255)
    age: StrictInt = Field(..., ge=MIN_DB_INT, le=MAX_DB_INT)


class UserOut(BaseModel):
    id: int
    name: str
    age: int

    class Config:
        from_attributes = True  # Pydantic v2: enables ORM mode


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error description.")


class ResultResponse(BaseModel):
    result: str
