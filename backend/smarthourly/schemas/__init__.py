from smarthourly.schemas.production_entry import (
    ProductionEntryDraft,
    ProductionEntrySkipRequest,
    ProductionEntryResponse,
    SlotListResponse,
    SlotStateListResponse,
    CurrentShiftResponse,
    EntryOptionsResponse,
)
from smarthourly.schemas.review import (
    RejectRequest,
    EntryEditRequest,
    BulkApproveRequest,
    BulkRejectRequest,
    BulkReviewResult,
    AtlRosterResponse,
)
from smarthourly.schemas.report import ProductionReportSummary
from smarthourly.schemas.user import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
    AdminUserView,
    RoleUpdateRequest,
)
from smarthourly.schemas.factory import FactoryClient, MONumberListResponse
