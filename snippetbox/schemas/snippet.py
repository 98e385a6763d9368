"""
Snippetbox — Snippet Schemas
=============================

What:  Pydantic models for snippet data crossing the service boundary and for
       the snippet-create form.
How:   `SnippetRead` is built from ORM rows (`from_attributes`), so templates
       never touch a live SQLAlchemy object. `SnippetCreateForm` is decoded
       from the posted form fields and validated by the handler.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from snippetbox.validator import Validator


class SnippetRead(BaseModel):
    """
    What:  A snippet as shown on the home and view pages.
    Who:   Returned by SnippetService.get() and SnippetService.latest().
    """
    id: int = Field(description="Store-assigned identifier")
    title: str = Field(description="Snippet title (at most 100 characters)")
    content: str = Field(description="Snippet body")
    created: datetime = Field(description="Creation time (UTC)")
    expires: datetime = Field(description="Expiry time (UTC)")

    model_config = {"from_attributes": True}


class SnippetCreateForm(Validator):
    """
    What:  Raw values of the snippet-create form plus their field errors.
    When:  Decoded from POST /snippet/create; also built empty (with the
           default expiry) for GET /snippet/create.

    Missing fields decode to their zero value so that validation, not
    decoding, reports them. Extra fields such as `csrf_token` are ignored.
    """
    title: str = ""
    content: str = ""
    expires: int = 0

    @field_validator("expires", mode="before")
    @classmethod
    def blank_expires_is_zero(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return 0
        return v
