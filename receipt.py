import logging
import os
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

import qrcode
from PIL import Image, ImageDraw, ImageFont

from errors import InvalidOperation

LOGGER = logging.getLogger(__name__)

RECEIPT_RULE = "- ---------------------"


@dataclass(slots=True)
class ShipmentNotice:
    """Per-unit weights (kg) of everything leaving in one package."""

    lines: list = field(default_factory=list)  # [(name, weight)]
    total_weight: float = 0.0


@dataclass(slots=True)
class ReceiptLine:
    name: str
    quantity: int
    unit_price: float
    line_total: float


@dataclass(slots=True)
class Receipt:
    """Structured result of a settled checkout."""

    order_number: str
    customer_name: str
    issued_on: date
    lines: list
    subtotal: float
    shipping_fee: float
    total: float
    balance_after: float


def _round_half_up(value, places):
    # repr gives the shortest decimal that round-trips, so 0.15 stays 0.15
    return Decimal(repr(float(value))).quantize(places, rounding=ROUND_HALF_UP)


def format_whole(value):
    """Formats a number with no decimals, rounding halves up."""
    return str(_round_half_up(value, Decimal("1")))


def format_tenths(value):
    return str(_round_half_up(value, Decimal("0.1")))


def render_shipment_notice(notice):
    lines = ["** Shipment notice **"]
    for name, weight in notice.lines:
        lines.append(f"1x {name}        {format_whole(weight * 1000)}g")
    lines.append(f"Total package weight {format_tenths(notice.total_weight)}kg")
    return "\n".join(lines) + "\n"


def render_receipt(receipt):
    lines = ["** Checkout receipt **"]
    for line in receipt.lines:
        lines.append(f"{line.quantity}x {line.name}        {format_whole(line.line_total)}")
    lines.append(RECEIPT_RULE)
    lines.append(f"Subtotal         {format_whole(receipt.subtotal)}")
    lines.append(f"Shipping         {format_whole(receipt.shipping_fee)}")
    lines.append(f"Amount           {format_whole(receipt.total)}")
    lines.append(f"Customer balance after payment: {format_whole(receipt.balance_after)}")
    return "\n".join(lines) + "\n"


class ReceiptGenerator:
    WIDTH = 640
    HEADER_H = 190
    LINE_H = 26
    FOOTER_H = 170
    QR_SIZE = 120

    @staticmethod
    def _load_font(size):
        # Try common system fonts, fall back to Pillow's bundled default
        for candidate in ("DejaVuSans.ttf", "arial.ttf", "LiberationSans-Regular.ttf"):
            try:
                return ImageFont.truetype(candidate, size)
            except OSError:
                continue
        return ImageFont.load_default()

    @staticmethod
    def _text_width(draw, text, font):
        left, _, right, _ = draw.textbbox((0, 0), text, font=font)
        return right - left

    @staticmethod
    def _qr_image(order_number, size):
        qr = qrcode.QRCode(box_size=4, border=2)
        qr.add_data(order_number)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        return img.resize((size, size), Image.NEAREST)

    @classmethod
    def generate(cls, receipt, receipts_dir):
        """Draw a PNG receipt for a settled checkout and return its path.

        The order number is encoded as a QR code in the header.
        """
        if os.path.exists(receipts_dir) and not os.path.isdir(receipts_dir):
            raise InvalidOperation(f"Receipts path is not a directory: {receipts_dir}")
        os.makedirs(receipts_dir, exist_ok=True)
        png_path = os.path.join(receipts_dir, f"{receipt.order_number}.png")

        width = cls.WIDTH
        line_h = cls.LINE_H
        items_h = max(line_h * 3, line_h * len(receipt.lines) + 20)
        height = cls.HEADER_H + items_h + cls.FOOTER_H

        img = Image.new("RGB", (width, height), color=(255, 255, 255))
        draw = ImageDraw.Draw(img)

        f_head = cls._load_font(26)
        f_sub = cls._load_font(15)
        f_body = cls._load_font(14)

        x = 30
        y = 30
        right = width - x

        # Header
        draw.text((x, y), "Checkout receipt", font=f_head, fill=(20, 20, 20))
        y += 40
        draw.text((x, y), f"Order #: {receipt.order_number}", font=f_sub, fill=(0, 0, 0))
        y += 22
        draw.text((x, y), f"Date: {receipt.issued_on.isoformat()}", font=f_sub, fill=(0, 0, 0))
        y += 22
        draw.text((x, y), f"Customer: {receipt.customer_name}", font=f_sub, fill=(0, 0, 0))

        qr_img = cls._qr_image(receipt.order_number, cls.QR_SIZE)
        img.paste(qr_img, (width - cls.QR_SIZE - 20, 20))

        y = cls.HEADER_H - 30
        draw.line((x, y, right, y), fill=(200, 200, 200), width=1)
        y += 8

        # Column headers: item, qty, unit price, line total (amounts right-aligned)
        col_total = right
        col_price = right - 120
        col_qty = col_price - 110
        draw.text((x, y), "Item", font=f_body, fill=(0, 0, 0))
        for label, col in (("Qty", col_qty), ("Price", col_price), ("Total", col_total)):
            draw.text((col - cls._text_width(draw, label, f_body), y), label, font=f_body, fill=(0, 0, 0))
        y += line_h

        for line in receipt.lines:
            cells = (
                (str(line.quantity), col_qty),
                (format_whole(line.unit_price), col_price),
                (format_whole(line.line_total), col_total),
            )
            draw.text((x, y), line.name, font=f_body, fill=(20, 20, 20))
            for text, col in cells:
                draw.text((col - cls._text_width(draw, text, f_body), y), text, font=f_body, fill=(20, 20, 20))
            y += line_h

        y = cls.HEADER_H + items_h
        draw.line((x, y, right, y), fill=(230, 230, 230), width=1)
        y += 12

        totals = (
            f"Subtotal: {format_whole(receipt.subtotal)}",
            f"Shipping: {format_whole(receipt.shipping_fee)}",
            f"Amount: {format_whole(receipt.total)}",
            f"Balance after payment: {format_whole(receipt.balance_after)}",
        )
        for text in totals:
            fill = (0, 100, 0) if text.startswith("Amount") else (0, 0, 0)
            draw.text((right - cls._text_width(draw, text, f_body), y), text, font=f_body, fill=fill)
            y += line_h

        img.save(png_path)
        LOGGER.info("Receipt %s written to %s", receipt.order_number, png_path)
        return png_path
