# portfolio/routers/contact.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, field_validator, model_validator

from portfolio.services.contact import ForwardError, build_mailto, forward_message, is_valid_email
from portfolio.utils import slog
from portfolio.utils.metrics import record_contact

router = APIRouter(tags=["contact"])


class ContactRequest(BaseModel):
    """
    Contact form payload. All three fields are required (after trimming);
    the email must look like local@domain.tld.
    """
    name: str = Field("", max_length=120)
    email: str = Field("", max_length=254)
    message: str = Field("", max_length=5000)

    @field_validator("name", "email", "message")
    @classmethod
    def _trim(cls, v: str) -> str:
        return (v or "").strip()

    @model_validator(mode="after")
    def _check(self) -> "ContactRequest":
        if not self.name or not self.email or not self.message:
            raise ValueError("Please fill in all fields.")
        if not is_valid_email(self.email):
            raise ValueError("Please enter a valid email address.")
        return self


class ContactResponse(BaseModel):
    mailto: str
    forwarded: bool
    detail: str


@router.post("/contact", response_model=ContactResponse)
def post_contact(req: ContactRequest, request: Request) -> ContactResponse:
    mailto = build_mailto(req.name, req.email, req.message)
    slog.bind_context(request, qhash=slog.qhash(req.email))

    try:
        forwarded = forward_message(req.name, req.email, req.message)
    except ForwardError:
        record_contact(forward_failed=True)
        slog.bind_context(request, forward_failed=True)
        raise HTTPException(
            status_code=502,
            detail={
                "message": "Unable to deliver the message right now. Please use the email link instead.",
                "mailto": mailto,
            },
        )

    record_contact()
    slog.bind_context(request, forwarded=forwarded)
    detail = "Message sent." if forwarded else "Opening your email client to send the message."
    return ContactResponse(mailto=mailto, forwarded=forwarded, detail=detail)
