from truckhub.models.user import User
from truckhub.models.organization import Organization, TeamMember, TeamRole
from truckhub.models.food_truck import FoodTruck
from truckhub.models.location import Location
from truckhub.models.inventory import InventoryItem, ProteinInventory, ProteinType
from truckhub.models.menu_item import MenuItem
from truckhub.models.order import Order, OrderStatus
from truckhub.models.review import Review

__all__ = [
    "User",
    "Organization",
    "TeamMember",
    "TeamRole",
    "FoodTruck",
    "Location",
    "InventoryItem",
    "ProteinInventory",
    "ProteinType",
    "MenuItem",
    "Order",
    "OrderStatus",
    "Review",
]
