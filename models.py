import threading
import uuid
from datetime import date

from errors import InvalidOperation


def _new_sku():
    return uuid.uuid4().hex[:12]


def _check_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidOperation("Quantity must be a positive integer")


#product model
class Product:
    """Base product: name, unit price and units in stock.

    Variants answer three questions: is_expired, requires_shipping and weight.
    """

    def __init__(self, name, price, stock, sku=None):
        if not name or not str(name).strip():
            raise InvalidOperation("Product name must not be empty")
        if price < 0:
            raise InvalidOperation(f"Price of {name} must not be negative")
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise InvalidOperation(f"Stock of {name} must be a non-negative integer")

        self.sku = sku or _new_sku()
        self.name = name
        self.price = float(price)
        self.stock = stock
        # held by checkout from validation through settlement
        self.lock = threading.RLock()

    def reduce_stock(self, amount):
        _check_quantity(amount)
        if amount > self.stock:
            raise InvalidOperation("Cannot reduce quantity by more than available stock")
        self.stock -= amount

    def is_expired(self, today=None):
        return False

    def requires_shipping(self):
        return False

    @property
    def weight(self):
        return 0.0

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, price={self.price}, stock={self.stock})"


def _checked_weight(name, weight):
    if weight < 0:
        raise InvalidOperation(f"Weight of {name} must not be negative")
    return float(weight)


class PerishableProduct(Product):
    def __init__(self, name, price, stock, expiration_date, weight, sku=None):
        super().__init__(name, price, stock, sku=sku)
        self.expiration_date = expiration_date
        self._weight = _checked_weight(name, weight)

    def is_expired(self, today=None):
        today = today or date.today()
        return today > self.expiration_date

    def requires_shipping(self):
        return True

    @property
    def weight(self):
        return self._weight


class ShippableProduct(Product):
    def __init__(self, name, price, stock, weight, sku=None):
        super().__init__(name, price, stock, sku=sku)
        self._weight = _checked_weight(name, weight)

    def requires_shipping(self):
        return True

    @property
    def weight(self):
        return self._weight


class DigitalProduct(Product):
    # never expires, never ships, weighs nothing
    pass


#cart item model
class CartItem:
    def __init__(self, product, quantity):
        self.product = product
        self.quantity = quantity

    @property
    def total_price(self):
        return self.product.price * self.quantity

    def __repr__(self):
        return f"CartItem({self.product.name!r}, {self.quantity})"


#cart model
class Cart:
    """Ordered cart lines, one per product object.

    Every add is checked against the product's live stock. Adding a product
    that is already in the cart replaces its line with the merged quantity at
    the end of the list.
    """

    def __init__(self):
        self._items = []

    def add(self, product, quantity=1):
        _check_quantity(quantity)
        if quantity > product.stock:
            raise InvalidOperation("Requested quantity exceeds available stock")

        for item in self._items:
            if item.product is product:
                new_quantity = item.quantity + quantity
                if new_quantity > product.stock:
                    raise InvalidOperation("Total quantity in cart exceeds available stock")
                self._items.remove(item)
                self._items.append(CartItem(product, new_quantity))
                return

        self._items.append(CartItem(product, quantity))

    def remove(self, sku):
        self._items = [item for item in self._items if item.product.sku != sku]

    def quantity_of(self, sku):
        return sum(item.quantity for item in self._items if item.product.sku == sku)

    def items(self):
        return list(self._items)

    def is_empty(self):
        return not self._items

    def clear(self):
        self._items = []

    @property
    def subtotal(self):
        return sum(item.total_price for item in self._items)

    def __len__(self):
        return len(self._items)


#customer model
class Customer:
    def __init__(self, name, balance):
        if balance < 0:
            raise InvalidOperation(f"Balance of {name} must not be negative")
        self.name = name
        self.balance = float(balance)
        self.lock = threading.RLock()

    def debit(self, amount):
        if amount < 0:
            raise InvalidOperation("Amount must not be negative")
        if amount > self.balance:
            raise InvalidOperation("Insufficient balance")
        self.balance -= amount

    def __repr__(self):
        return f"Customer({self.name!r}, balance={self.balance})"


#one shipped unit, fed to the shipping calculator
class ShippingItem:
    __slots__ = ("name", "weight")

    def __init__(self, name, weight):
        self.name = name
        self.weight = weight

    def __eq__(self, other):
        if not isinstance(other, ShippingItem):
            return NotImplemented
        return (self.name, self.weight) == (other.name, other.weight)

    def __repr__(self):
        return f"ShippingItem({self.name!r}, {self.weight})"
