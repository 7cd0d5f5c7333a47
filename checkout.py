import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional
from urllib.parse import quote

from cart import subtotal as cart_subtotal

WHATSAPP_KEY = "whatsapp_number"
WHATSAPP_URL = "https://wa.me/{phone}?text={text}"

GREETING = "¡Hola! Quiero realizar el siguiente pedido:"
CLOSING = "¿Cuál es el costo de envío a mi dirección?"


def money(value) -> str:
    return f"{Decimal(str(value)):.2f}"


def build_message(items, subtotal) -> str:
    lines = [GREETING, ""]
    for index, item in enumerate(items, start=1):
        lines += [
            f"{index}. {item.name}",
            f"   - Talle: {item.size}",
            f"   - Color: {item.color}",
            f"   - Cantidad: {item.quantity}",
            f"   - Precio: ${money(item.price * item.quantity)}",
            "",
        ]
    lines += [f"*Total: ${money(subtotal)}*", "", CLOSING]
    return "\n".join(lines)


def phone_digits(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def build_url(phone: str, message: str) -> str:
    # same escaping as JavaScript's encodeURIComponent
    text = quote(message, safe="-_.!~*'()")
    return WHATSAPP_URL.format(phone=phone_digits(phone), text=text)


@dataclass(frozen=True)
class CheckoutLink:
    text: str
    url: str


@dataclass(frozen=True)
class WhatsAppCheckout:
    """Checkout handoff to a configured WhatsApp number.

    Build it with ``from_configuration``; with no usable number there is no
    instance, so a caller has nothing to invoke.
    """
    phone: str

    @classmethod
    def from_configuration(cls, entries: Iterable[dict]) -> Optional["WhatsAppCheckout"]:
        for entry in entries:
            if entry.get("key") == WHATSAPP_KEY and phone_digits(entry.get("value", "")):
                return cls(phone=phone_digits(entry["value"]))
        return None

    def checkout(self, items, subtotal=None) -> CheckoutLink:
        items = list(items)
        if subtotal is None:
            subtotal = cart_subtotal(items)
        text = build_message(items, subtotal)
        return CheckoutLink(text=text, url=build_url(self.phone, text))
