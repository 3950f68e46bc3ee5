"""Convenience imports for all schema classes used by the API."""

from .child import (
    ChildCreate,
    ChildRead,
    ChildUpdate,
    ChildrenProgress,
    UnassignedCount,
)
from .department import DepartmentCreate, DepartmentRead, DepartmentLeaderboardEntry
from .donation import (
    DonationCreate,
    DonationRead,
    DonationAmountUpdate,
    DonationDetail,
    DonationPage,
    DonationTotals,
    LatestDonation,
)
from .stats import (
    GenderSplit,
    AgeGroup,
    AgeGroupSplit,
    DepartmentStat,
    TopDonor,
    TopDepartment,
    UnderperformingGroup,
)
from .gift_idea import GiftIdeaRead, GiftIdeaSuggestion
from .settings import SettingsRead, SettingsUpdate
from .backup import BackupInfo, BackupList, BackupResult, RestoreResult
from .user import UserLogin, UserResponse, TokenResponse, SessionStatus

__all__ = [
    "ChildCreate",
    "ChildRead",
    "ChildUpdate",
    "ChildrenProgress",
    "UnassignedCount",
    "DepartmentCreate",
    "DepartmentRead",
    "DepartmentLeaderboardEntry",
    "DonationCreate",
    "DonationRead",
    "DonationAmountUpdate",
    "DonationDetail",
    "DonationPage",
    "DonationTotals",
    "LatestDonation",
    "GenderSplit",
    "AgeGroup",
    "AgeGroupSplit",
    "DepartmentStat",
    "TopDonor",
    "TopDepartment",
    "UnderperformingGroup",
    "GiftIdeaRead",
    "GiftIdeaSuggestion",
    "SettingsRead",
    "SettingsUpdate",
    "BackupInfo",
    "BackupList",
    "BackupResult",
    "RestoreResult",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "SessionStatus",
]
