# Parking API — Database Models
# Import all models here for SQLAlchemy discovery

from parking_api.models.tenant import Tenant                            # noqa
from parking_api.models.vehicle import Vehicle                          # noqa
from parking_api.models.permit_type import PermitType                   # noqa
from parking_api.models.permit_request import PermitRequest             # noqa
from parking_api.models.permit import Permit                            # noqa
from parking_api.models.officer import EnforcementOfficer               # noqa
from parking_api.models.violation import Violation                      # noqa
from parking_api.models.warning import ParkingWarning                   # noqa
from parking_api.models.enforcement_activity import EnforcementActivity # noqa
from parking_api.models.shift_report import ShiftReport                 # noqa
from parking_api.models.offline_action import OfflineAction             # noqa
from parking_api.models.sync_lock import SyncLock                       # noqa
