import logging
from datetime import timedelta

from errors import InvalidOperation
from models import Cart, Customer, DigitalProduct, PerishableProduct, ShippableProduct
from receipt import ReceiptGenerator
from services import Catalog, CheckoutService
from shipping import ShippingCalculator

LOGGER = logging.getLogger(__name__)


class Fixture:
    """Catalog and customers every scenario run starts from."""

    def __init__(self, today):
        self.today = today
        self.catalog = Catalog([
            PerishableProduct("Cheese", 100, 10, today + timedelta(days=7), 0.2, sku="cheese"),
            PerishableProduct("Biscuits", 150, 5, today + timedelta(days=30), 0.7, sku="biscuits"),
            ShippableProduct("TV", 500, 3, 15.0, sku="tv"),
            ShippableProduct("Mobile", 800, 5, 0.3, sku="mobile"),
            DigitalProduct("Mobile Scratch Card", 25, 100, sku="scratch-card"),
            PerishableProduct("Expired Milk", 50, 2, today - timedelta(days=1), 1.0, sku="expired-milk"),
        ])
        self.john = Customer("John Doe", 2000)
        self.jane = Customer("Jane Smith", 100)

    def product(self, sku):
        return self.catalog.get(sku)


def build_fixture(today):
    return Fixture(today)


# (title, customer attribute, [(sku, quantity), ...])
SCENARIOS = [
    ("Successful Checkout", "john", [("cheese", 2), ("biscuits", 1), ("scratch-card", 1)]),
    ("Mixed Products with Shipping", "john", [("tv", 1), ("mobile", 2), ("scratch-card", 3)]),
    ("Empty Cart", "john", []),
    ("Insufficient Balance", "jane", [("tv", 2)]),
    ("Out of Stock", "john", [("cheese", 20)]),
    ("Expired Product", "john", [("expired-milk", 1)]),
    ("Digital Products Only (No Shipping)", "john", [("scratch-card", 5)]),
]

STOCK_CHECK = [
    ("Cheese", "cheese"),
    ("Biscuits", "biscuits"),
    ("TV", "tv"),
    ("Mobile", "mobile"),
    ("Scratch Card", "scratch-card"),
]


def run_scenarios(today, out, receipts_dir=None):
    """Run every scripted scenario against a fresh fixture and return it.

    A rejected scenario prints ``Error: <message>`` and the run moves on.
    """
    fixture = build_fixture(today)
    service = CheckoutService(
        shipping=ShippingCalculator(out=out),
        clock=lambda: today,
        out=out,
    )

    for number, (title, customer_attr, lines) in enumerate(SCENARIOS, start=1):
        if number > 1:
            out.write("\n")
        out.write(f"=== Test Case {number}: {title} ===\n")
        customer = getattr(fixture, customer_attr)
        try:
            cart = Cart()
            for sku, quantity in lines:
                cart.add(fixture.product(sku), quantity)
            receipt = service.checkout(customer, cart)
        except InvalidOperation as exc:
            out.write(f"Error: {exc}\n")
            continue

        if receipts_dir:
            ReceiptGenerator.generate(receipt, receipts_dir)

    out.write("\n=== Final Stock Check ===\n")
    for label, sku in STOCK_CHECK:
        out.write(f"{label} remaining: {fixture.product(sku).stock}\n")

    LOGGER.info("Ran %d scenarios", len(SCENARIOS))
    return fixture
