"""
Errors raised by the search server core.

Both error kinds are raised synchronously at the point where a precondition
is violated, before any index mutation happens. The HTTP layer maps them to
400 / 404 responses.
"""


class SearchServerError(Exception):
    """Base class for all search server errors"""


class InvalidArgumentError(SearchServerError, ValueError):
    """
    Rejected input: negative or duplicate document id, control characters in
    document text or stop words, malformed query word.
    """


class DocumentNotFoundError(SearchServerError, KeyError):
    """Lookup against a document id that is not indexed"""

    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(f"Document with id {document_id} not found")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]
