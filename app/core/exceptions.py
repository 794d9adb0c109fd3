class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    pass


class UserNotFound(LeaderboardException):
    """Raised when a user is not found."""
    pass


class GameNotFound(LeaderboardException):
    """Raised when a game is not found."""
    pass


class ScoreNotFound(LeaderboardException):
    """Raised when a score is not found."""
    pass


class FriendRequestNotFound(LeaderboardException):
    """Raised when a friend request does not exist or is not addressed to the caller."""
    pass


class InvalidResetToken(LeaderboardException):
    """Raised when a password reset token is unknown or expired."""
    pass


class ScoreNotHigher(LeaderboardException):
    """Raised when a submitted score does not beat the personal best."""
    pass


class NotScoreOwner(LeaderboardException):
    """Raised when a user tries to delete someone else's score."""
    pass


class SelfFriendRequest(LeaderboardException):
    """Raised when a user sends a friend request to themselves."""
    pass


class AlreadyFriends(LeaderboardException):
    """Raised when an accepted friendship already exists."""
    pass


class FriendRequestPending(LeaderboardException):
    """Raised when a pending friend request already exists."""
    pass


class LastAdminRemoval(LeaderboardException):
    """Raised when demoting the only remaining admin."""
    pass


class DuplicateAccount(LeaderboardException):
    """Raised when an email or username is already taken."""
    pass


class PermissionDenied(LeaderboardException):
    """Raised when the acting user may not perform an operation."""
    pass


class InvalidCredentials(LeaderboardException):
    """Raised on a failed login."""
    pass


class NotAuthenticated(LeaderboardException):
    """Raised when no valid session is present."""
    pass


class OperationFailed(LeaderboardException):
    """Raised when a store error aborts a mutation; carries a generic message."""
    pass
