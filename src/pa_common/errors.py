"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Account / balance
  3xxx: Question catalog
  4xxx: Ticket
  9xxx: System

Every error is terminal for the request that raised it. AlreadyClaimedError and
AlreadyVoidedError in particular must not be retried by callers.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    """Common base for missing ticket / question / user."""


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


# --- 2xxx: Account ---

class InsufficientTokensError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient tokens: required {required}, available {available}",
            422,
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"User not found: {user_id}", 404)


# --- 3xxx: Question catalog ---

class QuestionNotFoundError(NotFoundError):
    def __init__(self, question_id: str) -> None:
        super().__init__(3001, f"Question not found: {question_id}", 404)


class MarketClosedError(AppError):
    def __init__(self, question_id: str) -> None:
        super().__init__(3002, f"Question is locked for selection: {question_id}", 422)


# --- 4xxx: Ticket ---

class EmptySelectionError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, "Select at least one pick", 422)


class DuplicateLegError(AppError):
    def __init__(self, question_id: str) -> None:
        super().__init__(4002, f"Question picked more than once: {question_id}", 422)


class InvalidSelectionError(AppError):
    def __init__(self, option: str) -> None:
        super().__init__(4003, f"Invalid option: {option!r}, expected 'A' or 'B'", 422)


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(4004, f"Ticket not found: {ticket_id}", 404)


class NotOwnerError(AppError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(4005, f"Ticket {ticket_id} belongs to another user", 403)


class AlreadyClaimedError(AppError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(4006, f"Ticket already claimed: {ticket_id}", 409)


class AlreadyVoidedError(AppError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(4007, f"Ticket has been voided: {ticket_id}", 409)


class InvalidStateError(AppError):
    def __init__(self, ticket_id: str, state: str, required: str) -> None:
        super().__init__(
            4008,
            f"Ticket {ticket_id} is {state}, operation requires {required}",
            422,
        )


class WagerOutOfRangeError(AppError):
    def __init__(self, wager: int, min_wager: int, max_wager: int) -> None:
        super().__init__(
            4009,
            f"Wager must be between {min_wager} and {max_wager}, got {wager}",
            422,
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
