"""Application models package."""

from tablebook.models.floor import Area, Table
from tablebook.models.maintenance import TableMaintenance
from tablebook.models.reservation import Reservation
from tablebook.models.restaurant import OperatingHour, Restaurant, RestaurantSetting
from tablebook.models.user import User

__all__ = [
    "Area", "Table", "TableMaintenance", "Reservation", "OperatingHour", "Restaurant", "RestaurantSetting", "User",
]
