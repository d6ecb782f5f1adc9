"""Outcomes of a create (or reassign) request.

A create request ends in exactly one of three ways:

    Created:
        The confirmation tokens matched and a new version was appended.
    NeedsConfirmation:
        The tokens were missing or unequal. Nothing was written; the caller
        must hand `token` to the client both as a cookie and as a link.
    BadRequest:
        The request can't be honored (e.g. unparseable expiration directive).
"""

from dataclasses import dataclass

from urlshortener.models.short_url_model import ShortURLModel


@dataclass(frozen=True)
class Created:
    short_url: ShortURLModel


@dataclass(frozen=True)
class NeedsConfirmation:
    token: str


@dataclass(frozen=True)
class BadRequest:
    reason: str


type CreateOutcome = Created | NeedsConfirmation | BadRequest
