from decimal import Decimal
from urllib.parse import parse_qs, urlparse

from cart import CartItem
from checkout import WhatsAppCheckout, build_message, build_url


def remera(quantity=2):
    return CartItem(product_id="p1", name="Remera", price=Decimal("10.00"), size="M",
                    color="Negro", quantity=quantity)


def test_message_format():
    text = build_message([remera()], Decimal("20.00"))
    assert text == (
        "¡Hola! Quiero realizar el siguiente pedido:\n\n"
        "1. Remera\n"
        "   - Talle: M\n"
        "   - Color: Negro\n"
        "   - Cantidad: 2\n"
        "   - Precio: $20.00\n\n"
        "*Total: $20.00*\n\n"
        "¿Cuál es el costo de envío a mi dirección?"
    )


def test_items_are_numbered_in_cart_order():
    buzo = CartItem(product_id="p2", name="Buzo", price=Decimal("30"), size="L",
                    color="Gris", quantity=1)
    text = build_message([remera(), buzo], Decimal("50"))
    assert text.index("1. Remera") < text.index("2. Buzo")
    assert "*Total: $50.00*" in text


def test_url_strips_phone_and_encodes_text():
    url = build_url("+54 9 (11) 5555-1234", "¡Hola! 1 & 2")
    parsed = urlparse(url)
    assert parsed.netloc == "wa.me"
    assert parsed.path == "/5491155551234"
    assert "%20" in parsed.query
    assert "%26" in parsed.query
    assert parse_qs(parsed.query)["text"] == ["¡Hola! 1 & 2"]


def test_checkout_disabled_without_number():
    assert WhatsAppCheckout.from_configuration([]) is None
    assert WhatsAppCheckout.from_configuration([{"key": "other", "value": "123"}]) is None
    assert WhatsAppCheckout.from_configuration([{"key": "whatsapp_number", "value": "n/a"}]) is None


def test_checkout_link():
    whatsapp = WhatsAppCheckout.from_configuration(
        [{"id": "x", "key": "whatsapp_number", "value": "+54 11 1234-5678"}])
    link = whatsapp.checkout([remera()])
    assert "*Total: $20.00*" in link.text
    assert link.url.startswith("https://wa.me/541112345678?text=")
    assert parse_qs(urlparse(link.url).query)["text"] == [link.text]
