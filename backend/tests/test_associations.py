"""
Tests for Poster Email Association

Tests cover:
- Seeding by submitter or contact email
- One-hop expansion through shared emails
- Optional full closure
- Case-insensitive matching and ordering
"""

from types import SimpleNamespace

from jobboard.services.associations import associated_postings, posting_emails


def posting(pid, submitter, contact=None):
    return SimpleNamespace(id=pid, submitter_email=submitter, contact_email=contact)


def ids(postings):
    return [p.id for p in postings]


class TestPostingEmails:
    def test_collects_submitter_and_contact(self):
        assert posting_emails(posting("a", "Sub@Example.org", "hr@example.org")) == {
            "sub@example.org",
            "hr@example.org",
        }

    def test_ignores_missing_contact(self):
        assert posting_emails(posting("a", "sub@example.org", None)) == {"sub@example.org"}
        assert posting_emails(posting("a", "sub@example.org", "")) == {"sub@example.org"}


class TestAssociatedPostings:
    def test_no_seed_returns_empty(self):
        """A requester with no posting of their own sees nothing."""
        postings = [posting("a", "other@example.org", "hr@example.org")]
        assert associated_postings("me@example.org", postings) == []

    def test_empty_email_returns_empty(self):
        postings = [posting("a", "", None)]
        assert associated_postings("", postings) == []

    def test_seed_by_submitter_or_contact(self):
        postings = [
            posting("a", "me@example.org"),
            posting("b", "boss@example.org", "me@example.org"),
            posting("c", "stranger@example.org"),
        ]
        assert ids(associated_postings("me@example.org", postings)) == ["a", "b"]

    def test_one_hop_includes_co_contact_postings(self):
        """Postings submitted by someone who shares a posting with me are mine too."""
        postings = [
            posting("a", "me@example.org", "hr@example.org"),
            posting("b", "hr@example.org"),
            posting("c", "colleague@example.org", "hr@example.org"),
        ]
        assert ids(associated_postings("me@example.org", postings)) == ["a", "b", "c"]

    def test_two_hops_excluded_by_default(self):
        postings = [
            posting("a", "me@example.org", "hr@example.org"),
            posting("b", "colleague@example.org", "hr@example.org"),
            posting("c", "colleague@example.org", "far@example.org"),
            posting("d", "far@example.org"),
        ]
        # b shares hr@ with the seed; c only shares colleague@ with b
        assert ids(associated_postings("me@example.org", postings)) == ["a", "b"]

    def test_full_closure_follows_every_link(self):
        postings = [
            posting("a", "me@example.org", "hr@example.org"),
            posting("b", "colleague@example.org", "hr@example.org"),
            posting("c", "colleague@example.org", "far@example.org"),
            posting("d", "far@example.org"),
            posting("e", "unrelated@example.org"),
        ]
        result = associated_postings("me@example.org", postings, full_closure=True)
        assert ids(result) == ["a", "b", "c", "d"]

    def test_case_insensitive(self):
        postings = [
            posting("a", "Me@Example.ORG", "HR@example.org"),
            posting("b", "hr@EXAMPLE.org"),
        ]
        assert ids(associated_postings("  me@example.org ", postings)) == ["a", "b"]

    def test_preserves_input_order(self):
        postings = [
            posting("z", "hr@example.org"),
            posting("a", "me@example.org", "hr@example.org"),
        ]
        assert ids(associated_postings("me@example.org", postings)) == ["z", "a"]
