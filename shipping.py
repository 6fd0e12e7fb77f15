import logging
import sys

import settings
from errors import InvalidOperation
from receipt import ShipmentNotice, render_shipment_notice

LOGGER = logging.getLogger(__name__)


class ShippingCalculator:
    """Weight based shipping fee; prints a shipment notice for non-empty packages."""

    def __init__(self, rate_per_kg=settings.SHIPPING_RATE_PER_KG, out=None):
        if rate_per_kg < 0:
            raise InvalidOperation("Shipping rate must not be negative")
        self.rate_per_kg = rate_per_kg
        self.out = out

    def build_notice(self, items):
        lines = [(item.name, item.weight) for item in items]
        return ShipmentNotice(lines=lines, total_weight=sum(w for _, w in lines))

    def calculate_fee(self, items):
        items = list(items)
        if not items:
            return 0.0

        notice = self.build_notice(items)
        out = self.out or sys.stdout
        out.write(render_shipment_notice(notice))

        fee = notice.total_weight * self.rate_per_kg
        LOGGER.debug("Shipping %d unit(s), %.3fkg, fee %.2f", len(items), notice.total_weight, fee)
        return fee
