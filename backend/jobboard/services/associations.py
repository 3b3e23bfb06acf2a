"""
Poster Email Association - which postings a signed-in poster may manage

A poster is identified only by email. Postings belong together when they
share a submitter or contact email, so a poster who submitted one posting
and is the contact on another sees both, along with anything their
co-contacts submitted.

Algorithm (one hop):
    1. Seed: postings where the requester's email is the submitter or
       contact email
    2. Collect every submitter/contact email appearing in the seed
    3. Result: postings whose submitter or contact email is in that set

Postings linked only through a second posting (two hops away) are not
included unless full_closure=True, which iterates step 2-3 until the email
set stops growing.

All comparisons are case-insensitive.
"""

from typing import Iterable, List, Sequence, Set, TypeVar

from jobboard.utils import normalize_email

T = TypeVar("T")


def posting_emails(posting) -> Set[str]:
    """Lower-cased, non-empty submitter and contact emails of a posting."""
    emails = {
        normalize_email(getattr(posting, "submitter_email", None)),
        normalize_email(getattr(posting, "contact_email", None)),
    }
    emails.discard("")
    return emails


def _matching(postings: Iterable[T], emails: Set[str]) -> List[T]:
    return [p for p in postings if posting_emails(p) & emails]


def associated_postings(
    email: str,
    postings: Sequence[T],
    full_closure: bool = False,
) -> List[T]:
    """
    Return the postings associated with a requester's email.

    Args:
        email: The requester's verified email
        postings: Every posting, in the order results should keep
        full_closure: Follow links until no new email is found

    Returns:
        Associated postings in input order; empty when the requester
        has no posting of their own
    """
    requester = normalize_email(email)
    if not requester:
        return []

    seed = _matching(postings, {requester})
    if not seed:
        return []

    emails: Set[str] = set()
    for posting in seed:
        emails |= posting_emails(posting)

    result = _matching(postings, emails)
    if not full_closure:
        return result

    while True:
        grown = set(emails)
        for posting in result:
            grown |= posting_emails(posting)
        if grown == emails:
            return result
        emails = grown
        result = _matching(postings, emails)
