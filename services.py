import logging
import sys
import uuid
from contextlib import ExitStack, contextmanager
from datetime import date

import settings
from errors import InvalidOperation
from models import Cart, ShippingItem
from receipt import Receipt, ReceiptLine, render_receipt
from shipping import ShippingCalculator

LOGGER = logging.getLogger(__name__)


#Product catalog
class Catalog:
    """Products indexed by sku."""

    def __init__(self, products=()):
        self._products = {}
        for product in products:
            self.add(product)

    def add(self, product):
        if product.sku in self._products:
            raise InvalidOperation(f"Duplicate sku: {product.sku}")
        self._products[product.sku] = product
        return product

    def get(self, sku):
        try:
            return self._products[sku]
        except KeyError:
            raise InvalidOperation(f"Unknown product: {sku}") from None

    def find_by_name(self, name):
        for product in self._products.values():
            if product.name == name:
                return product
        return None

    def list(self):
        return sorted(self._products.values(), key=lambda p: p.name)

    def stock_report(self):
        return {p.name: p.stock for p in self._products.values()}

    def __contains__(self, sku):
        return sku in self._products

    def __len__(self):
        return len(self._products)


#Cart service
class CartService:
    def __init__(self, catalog):
        self.catalog = catalog
        self.cart = Cart()

    def add_to_cart(self, sku, quantity=1):
        self.cart.add(self.catalog.get(sku), quantity)

    def remove_from_cart(self, sku):
        self.cart.remove(sku)

    def clear_cart(self):
        self.cart.clear()

    def get_items(self):
        return self.cart.items()

    def get_total(self):
        return self.cart.subtotal


def _new_order_number(today):
    return f"ORD-{today.strftime('%Y%m%d')}-{uuid.uuid4().hex[:8]}"


#Check-out service
class CheckoutService:
    """Validates a cart against stock, expiry and balance, then settles it.

    Nothing is mutated until every check has passed: a rejected checkout
    leaves the customer balance, product stock and the cart as they were.
    The customer and every product in the cart stay locked from validation
    to settlement, products in sku order.
    """

    def __init__(self, shipping=None, clock=None, out=None,
                 lock_timeout=settings.CHECKOUT_LOCK_TIMEOUT):
        self.shipping = shipping or ShippingCalculator(out=out)
        self.clock = clock or date.today
        self.out = out
        self.lock_timeout = lock_timeout

    @contextmanager
    def _locked(self, customer, items):
        products = {id(item.product): item.product for item in items}
        ordered = sorted(products.values(), key=lambda p: (p.sku, id(p)))
        holders = [(customer.name, customer.lock)]
        holders += [(product.name, product.lock) for product in ordered]
        with ExitStack() as stack:
            for name, lock in holders:
                if not lock.acquire(timeout=self.lock_timeout):
                    raise InvalidOperation(f"Checkout timed out waiting for {name}")
                stack.callback(lock.release)
            yield

    def checkout(self, customer, cart):
        try:
            return self._checkout(customer, cart)
        except InvalidOperation as exc:
            LOGGER.warning("Checkout rejected for %s: %s", customer.name, exc)
            raise

    def _checkout(self, customer, cart):
        if cart.is_empty():
            raise InvalidOperation("Cart is empty")

        items = cart.items()
        with self._locked(customer, items):
            today = self.clock()
            for item in items:
                product = item.product
                if item.quantity > product.stock:
                    raise InvalidOperation(f"Product {product.name} is out of stock")
                if product.is_expired(today):
                    raise InvalidOperation(f"Product {product.name} has expired")

            subtotal = sum(item.total_price for item in items)

            shipping_items = []
            for item in items:
                if item.product.requires_shipping():
                    shipping_items.extend(
                        ShippingItem(item.product.name, item.product.weight)
                        for _ in range(item.quantity)
                    )

            shipping_fee = self.shipping.calculate_fee(shipping_items)
            total = subtotal + shipping_fee

            if customer.balance < total:
                raise InvalidOperation("Customer's balance is insufficient")

            # Settlement: every check above has passed
            customer.debit(total)
            for item in items:
                item.product.reduce_stock(item.quantity)

            receipt = Receipt(
                order_number=_new_order_number(today),
                customer_name=customer.name,
                issued_on=today,
                lines=[
                    ReceiptLine(item.product.name, item.quantity, item.product.price, item.total_price)
                    for item in items
                ],
                subtotal=subtotal,
                shipping_fee=shipping_fee,
                total=total,
                balance_after=customer.balance,
            )

            out = self.out or sys.stdout
            out.write(render_receipt(receipt))
            cart.clear()

        LOGGER.info("Order %s settled for %s: total %.2f, balance %.2f",
                    receipt.order_number, customer.name, total, customer.balance)
        return receipt
