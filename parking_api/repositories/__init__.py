# Parking API — per-entity stores
# Decision code depends on these, never on raw queries.

from parking_api.repositories.permits import PermitStore, PermitRequestStore, PermitTypeStore  # noqa
from parking_api.repositories.registry import TenantStore, VehicleStore, OfficerStore          # noqa
from parking_api.repositories.enforcement import (                                              # noqa
    ViolationStore, WarningStore, ActivityStore, ShiftStore,
)
from parking_api.repositories.offline import OfflineActionStore, SyncLockStore                 # noqa
