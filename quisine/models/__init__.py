from quisine.models.shop import Shop
from quisine.models.staff_member import StaffMember
from quisine.models.menu import Menu
from quisine.models.menu_category import MenuCategory
from quisine.models.menu_item import MenuItem
from quisine.models.menu_item_modifier import MenuItemModifier
from quisine.models.order import Order
from quisine.models.order_item import OrderItem
from quisine.models.expense import Expense
