import os
import unittest
import sys
from datetime import date, timedelta
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from errors import InvalidOperation
from models import (
    Cart,
    CartItem,
    Customer,
    DigitalProduct,
    PerishableProduct,
    ShippableProduct,
    ShippingItem,
)

TODAY = date(2025, 6, 1)


class ProductTests(unittest.TestCase):
    def test_perishable_expiry_is_strictly_after_expiration_date(self):
        milk = PerishableProduct("Milk", 50, 2, TODAY, 1.0)
        self.assertFalse(milk.is_expired(TODAY))
        self.assertTrue(milk.is_expired(TODAY + timedelta(days=1)))
        self.assertFalse(milk.is_expired(TODAY - timedelta(days=3)))

    def test_perishable_defaults_to_current_date(self):
        old = PerishableProduct("Old", 1, 1, date.today() - timedelta(days=1), 0.1)
        fresh = PerishableProduct("Fresh", 1, 1, date.today() + timedelta(days=1), 0.1)
        self.assertTrue(old.is_expired())
        self.assertFalse(fresh.is_expired())

    def test_capabilities_per_variant(self):
        cheese = PerishableProduct("Cheese", 100, 10, TODAY, 0.2)
        tv = ShippableProduct("TV", 500, 3, 15.0)
        card = DigitalProduct("Card", 25, 100)

        self.assertTrue(cheese.requires_shipping())
        self.assertTrue(tv.requires_shipping())
        self.assertFalse(card.requires_shipping())

        self.assertAlmostEqual(cheese.weight, 0.2)
        self.assertAlmostEqual(tv.weight, 15.0)
        self.assertEqual(card.weight, 0.0)

        self.assertFalse(tv.is_expired(TODAY + timedelta(days=10000)))
        self.assertFalse(card.is_expired(TODAY + timedelta(days=10000)))

    def test_reduce_stock(self):
        tv = ShippableProduct("TV", 500, 3, 15.0)
        tv.reduce_stock(2)
        self.assertEqual(tv.stock, 1)
        tv.reduce_stock(1)
        self.assertEqual(tv.stock, 0)

    def test_reduce_stock_beyond_available_fails_without_change(self):
        tv = ShippableProduct("TV", 500, 3, 15.0)
        with self.assertRaises(InvalidOperation):
            tv.reduce_stock(4)
        self.assertEqual(tv.stock, 3)
        with self.assertRaises(InvalidOperation):
            tv.reduce_stock(0)
        self.assertEqual(tv.stock, 3)

    def test_reduce_stock_rejects_non_integer_amount(self):
        tv = ShippableProduct("TV", 500, 3, 15.0)
        for amount in (0.5, 1.0, True):
            with self.assertRaises(InvalidOperation):
                tv.reduce_stock(amount)
        self.assertEqual(tv.stock, 3)
        self.assertIsInstance(tv.stock, int)

    def test_constructor_rejects_bad_values(self):
        with self.assertRaises(InvalidOperation):
            DigitalProduct("", 1, 1)
        with self.assertRaises(InvalidOperation):
            DigitalProduct("Card", -1, 1)
        with self.assertRaises(InvalidOperation):
            DigitalProduct("Card", 1, -1)
        with self.assertRaises(InvalidOperation):
            DigitalProduct("Card", 1, 1.5)
        with self.assertRaises(InvalidOperation):
            ShippableProduct("TV", 1, 1, -0.5)
        with self.assertRaises(InvalidOperation):
            PerishableProduct("Milk", 1, 1, TODAY, -1)

    def test_sku_generated_when_missing(self):
        a = DigitalProduct("Card", 1, 1)
        b = DigitalProduct("Card", 1, 1)
        self.assertTrue(a.sku)
        self.assertNotEqual(a.sku, b.sku)
        self.assertEqual(DigitalProduct("Card", 1, 1, sku="card").sku, "card")


class CartTests(unittest.TestCase):
    def setUp(self):
        self.cheese = PerishableProduct("Cheese", 100, 10, TODAY, 0.2)
        self.tv = ShippableProduct("TV", 500, 3, 15.0)
        self.card = DigitalProduct("Card", 25, 100)
        self.cart = Cart()

    def test_add_and_line_totals(self):
        self.cart.add(self.cheese, 2)
        self.cart.add(self.card, 3)
        items = self.cart.items()
        self.assertEqual([(i.product.name, i.quantity) for i in items], [("Cheese", 2), ("Card", 3)])
        self.assertAlmostEqual(items[0].total_price, 200)
        self.assertAlmostEqual(self.cart.subtotal, 275)

    def test_add_rejects_non_positive_quantity(self):
        with self.assertRaises(InvalidOperation):
            self.cart.add(self.tv, 0)
        with self.assertRaises(InvalidOperation):
            self.cart.add(self.tv, -1)
        self.assertTrue(self.cart.is_empty())

    def test_add_rejects_non_integer_quantity(self):
        with self.assertRaises(InvalidOperation) as ctx:
            self.cart.add(self.tv, 1.5)
        self.assertEqual(str(ctx.exception), "Quantity must be a positive integer")
        with self.assertRaises(InvalidOperation):
            self.cart.add(self.tv, True)
        self.cart.add(self.tv, 1)
        with self.assertRaises(InvalidOperation):
            self.cart.add(self.tv, 0.5)
        self.assertEqual(self.cart.quantity_of(self.tv.sku), 1)

    def test_distinct_products_sharing_sku_stay_separate(self):
        first = DigitalProduct("Card", 25, 10, sku="card")
        second = DigitalProduct("Card", 25, 10, sku="card")
        self.cart.add(first, 2)
        self.cart.add(second, 3)
        items = self.cart.items()
        self.assertEqual(len(items), 2)
        self.assertIs(items[0].product, first)
        self.assertIs(items[1].product, second)
        self.assertEqual([i.quantity for i in items], [2, 3])

    def test_add_rejects_quantity_above_stock(self):
        with self.assertRaises(InvalidOperation) as ctx:
            self.cart.add(self.tv, 4)
        self.assertEqual(str(ctx.exception), "Requested quantity exceeds available stock")
        self.assertTrue(self.cart.is_empty())

    def test_repeat_add_merges_and_moves_line_to_end(self):
        self.cart.add(self.tv, 1)
        self.cart.add(self.card, 1)
        self.cart.add(self.tv, 2)
        items = self.cart.items()
        self.assertEqual(len(items), 2)
        self.assertEqual([(i.product.name, i.quantity) for i in items], [("Card", 1), ("TV", 3)])

    def test_merged_quantity_checked_against_stock(self):
        self.cart.add(self.tv, 2)
        with self.assertRaises(InvalidOperation) as ctx:
            self.cart.add(self.tv, 2)
        self.assertEqual(str(ctx.exception), "Total quantity in cart exceeds available stock")
        self.assertEqual(self.cart.quantity_of(self.tv.sku), 2)

    def test_items_returns_copy(self):
        self.cart.add(self.card, 1)
        items = self.cart.items()
        items.clear()
        self.assertEqual(len(self.cart.items()), 1)

    def test_remove_and_clear(self):
        self.cart.add(self.card, 1)
        self.cart.add(self.tv, 1)
        self.cart.remove(self.card.sku)
        self.assertEqual([i.product.name for i in self.cart.items()], ["TV"])
        self.cart.clear()
        self.assertTrue(self.cart.is_empty())
        self.assertEqual(len(self.cart), 0)

    def test_cart_item_total(self):
        self.assertAlmostEqual(CartItem(self.tv, 2).total_price, 1000)


class CustomerTests(unittest.TestCase):
    def test_debit(self):
        john = Customer("John", 2000)
        john.debit(386)
        self.assertAlmostEqual(john.balance, 1614)

    def test_debit_more_than_balance_fails(self):
        jane = Customer("Jane", 100)
        with self.assertRaises(InvalidOperation):
            jane.debit(100.01)
        self.assertAlmostEqual(jane.balance, 100)

    def test_debit_whole_balance(self):
        jane = Customer("Jane", 100)
        jane.debit(100)
        self.assertEqual(jane.balance, 0)

    def test_negative_values_rejected(self):
        with self.assertRaises(InvalidOperation):
            Customer("Nobody", -1)
        with self.assertRaises(InvalidOperation):
            Customer("Jane", 100).debit(-5)


class ShippingItemTests(unittest.TestCase):
    def test_equality(self):
        self.assertEqual(ShippingItem("TV", 15.0), ShippingItem("TV", 15.0))
        self.assertNotEqual(ShippingItem("TV", 15.0), ShippingItem("Mobile", 0.3))


if __name__ == '__main__':
    unittest.main()
