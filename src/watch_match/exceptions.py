"""Exceptions raised by the matching engine and its collaborators."""


class WatchMatchError(Exception):
    """Base class for all watch matching errors."""


class InvalidDescriptionError(WatchMatchError):
    """The watch description lacks the identity needed to search the library."""


class CandidateRetrievalError(WatchMatchError):
    """The reference library could not be searched.

    Never replaced by an empty candidate list: an empty result must mean
    the library genuinely had nothing to offer.
    """


class MatchingCancelled(WatchMatchError):
    """The caller's cancellation signal was set while candidates were scored."""
