from enum import Enum


class LostStatus(str, Enum):
    Reported = "Reported"
    Found = "Found"
    Matched = "Matched"
    Claimed = "Claimed"
    Unclaimed = "Unclaimed"
    Archived = "Archived"


class FoundStatus(str, Enum):
    Found = "Found"
    Matched = "Matched"
    Claimed = "Claimed"
    Unclaimed = "Unclaimed"
    Archived = "Archived"


class NotificationType(str, Enum):
    MatchFound = "MatchFound"
    ContactMessage = "ContactMessage"
    MarkedFound = "MarkedFound"
    Claimed = "Claimed"
    Archived = "Archived"


class NotificationStatus(str, Enum):
    unread = "unread"
    read = "read"


class Role(str, Enum):
    student = "student"
    staff = "staff"
    admin = "admin"
