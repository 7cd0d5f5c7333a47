# cli.py
import os
from decimal import Decimal

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cart import CartItem, CartStore
from catalog import facets
from checkout import WhatsAppCheckout
from client import StorefrontClient, StorefrontError

console = Console()

DEFAULT_CART_FILE = os.path.join(os.path.expanduser("~"), ".storefront", "cart.json")


class State:
    def __init__(self, api_url, cart_file, session_file=None):
        self.client = StorefrontClient(base_url=api_url)
        self.cart = CartStore(cart_file)
        self.session_file = session_file or os.path.join(
            os.path.dirname(os.path.abspath(cart_file)), "admin-session.json")
        self.client.load_cookies(self.session_file)


pass_state = click.make_pass_decorator(State)


def _fetch(call, *args, **kwargs):
    try:
        return call(*args, **kwargs)
    except StorefrontError as e:
        details = "".join(f"\n  {err['path'] or '(body)'}: {err['message']}" for err in e.errors)
        raise click.ClickException(e.message + details)


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return
    table = Table(title="Catalog", box=box.ROUNDED, header_style="bold cyan", show_lines=True)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    table.add_column("Stock", justify="right")
    table.add_column("Sizes")
    table.add_column("Colors")
    for p in products:
        name = f"★ {p['name']}" if p.get("featured") else p["name"]
        stock = str(p["stock"]) if p["stock"] > 0 else "[red]Sin stock[/red]"
        table.add_row(p["id"], name, p["category"], f"${p['price']}", stock,
                      ", ".join(p["sizes"]), ", ".join(p["colors"]))
    console.print(table)


def show_cart(store):
    if not store.items:
        console.print(Panel("Your cart is empty", style="blue"))
        return
    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Product", style="bold")
    table.add_column("Size")
    table.add_column("Color")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Subtotal", justify="right")
    for index, item in enumerate(store.items, start=1):
        table.add_row(str(index), f"{item.name}\n[dim]{item.product_id}[/dim]", item.size,
                      item.color, str(item.quantity), f"${item.price:.2f}",
                      f"${item.line_total:.2f}")
    console.print(table)
    console.print(f"[bold green]Subtotal: ${store.subtotal:.2f}[/bold green]")


# ---------------------------
# Commands
# ---------------------------
@click.group()
@click.option("--api-url", envvar="STOREFRONT_API_URL", default="http://localhost:5000",
              show_default=True)
@click.option("--cart-file", envvar="STOREFRONT_CART_FILE", default=DEFAULT_CART_FILE,
              type=click.Path(dir_okay=False))
@click.option("--session-file", envvar="STOREFRONT_SESSION_FILE", type=click.Path(dir_okay=False),
              help="Where the admin login is kept. Defaults to next to the cart file.")
@click.pass_context
def main(ctx, api_url, cart_file, session_file):
    """Browse the storefront and build a WhatsApp order."""
    ctx.obj = State(api_url, cart_file, session_file)


@main.command()
@click.option("--category")
@click.option("--search")
@click.option("--size", "sizes", multiple=True)
@click.option("--color", "colors", multiple=True)
@click.option("--min-price", type=float)
@click.option("--max-price", type=float)
@click.option("--featured", is_flag=True, help="Only featured products.")
@pass_state
def products(state, category, search, sizes, colors, min_price, max_price, featured):
    """List products, optionally filtered."""
    found = _fetch(state.client.list_products, category=category, search=search,
                   sizes=sizes, colors=colors, min_price=min_price,
                   max_price=max_price, featured=True if featured else None)
    show_products(found)
    if found:
        f = facets(found)
        console.print(f"[dim]Categories: {', '.join(f['categories'])} | "
                      f"Sizes: {', '.join(f['sizes'])} | Colors: {', '.join(f['colors'])}[/dim]")


@main.command()
@click.argument("product_id")
@pass_state
def product(state, product_id):
    """Show one product."""
    p = _fetch(state.client.get_product, product_id)
    show_products([p])
    console.print(p["description"])
    for url in p["images"]:
        console.print(f"[link={url}]{url}[/link]")


@main.group("cart")
def cart_group():
    """Manage the local cart."""


@cart_group.command("show")
@pass_state
def cart_show(state):
    show_cart(state.cart)


@cart_group.command("add")
@click.argument("product_id")
@click.option("--size", required=True)
@click.option("--color", required=True)
@click.option("--quantity", type=int, default=1, show_default=True)
@pass_state
def cart_add(state, product_id, size, color, quantity):
    """Add a product in a given size and color."""
    p = _fetch(state.client.get_product, product_id)
    if size not in p["sizes"]:
        raise click.BadParameter(f"available sizes: {', '.join(p['sizes'])}", param_hint="--size")
    if color not in p["colors"]:
        raise click.BadParameter(f"available colors: {', '.join(p['colors'])}", param_hint="--color")
    if p["stock"] <= 0:
        raise click.ClickException(f"{p['name']} is out of stock")

    existing = state.cart.find(product_id, size, color)
    in_cart = existing.quantity if existing else 0
    wanted = min(max(1, quantity), p["stock"] - in_cart)
    if wanted <= 0:
        raise click.ClickException(f"Only {p['stock']} in stock, all already in your cart")
    if wanted < quantity:
        console.print(f"[yellow]Only {wanted} more available, adding {wanted}[/yellow]")

    state.cart.add(CartItem(
        product_id=p["id"], name=p["name"], price=Decimal(p["price"]),
        size=size, color=color, quantity=wanted,
        image=p["images"][0] if p["images"] else "",
    ))
    show_cart(state.cart)


@cart_group.command("remove")
@click.argument("product_id")
@click.option("--size", required=True)
@click.option("--color", required=True)
@pass_state
def cart_remove(state, product_id, size, color):
    state.cart.remove(product_id, size, color)
    show_cart(state.cart)


@cart_group.command("update")
@click.argument("product_id")
@click.option("--size", required=True)
@click.option("--color", required=True)
@click.option("--quantity", type=int, required=True)
@pass_state
def cart_update(state, product_id, size, color, quantity):
    """Set a line's quantity, kept between 1 and the product's stock."""
    if state.cart.find(product_id, size, color) is None:
        raise click.ClickException("That item is not in your cart")
    p = _fetch(state.client.get_product, product_id)
    quantity = max(1, min(quantity, p["stock"]))
    state.cart.update_quantity(product_id, size, color, quantity)
    show_cart(state.cart)


@cart_group.command("clear")
@pass_state
def cart_clear(state):
    state.cart.clear()
    console.print("Cart cleared")


@main.command("checkout")
@click.option("--open", "open_link", is_flag=True, help="Open the WhatsApp link.")
@pass_state
def checkout_command(state, open_link):
    """Print the order message and its WhatsApp link."""
    if not state.cart.items:
        raise click.ClickException("Your cart is empty")
    whatsapp = WhatsAppCheckout.from_configuration(_fetch(state.client.configuration))
    if whatsapp is None:
        raise click.ClickException("Configuración de WhatsApp pendiente")
    link = whatsapp.checkout(state.cart.items, state.cart.subtotal)
    console.print(Panel(link.text, title="Pedido"))
    click.echo(link.url)
    if open_link:
        click.launch(link.url)


# ---------------------------
# Admin
# ---------------------------
PRODUCT_FIELDS = ("name", "description", "price", "category", "stock", "featured",
                  "images", "sizes", "colors")
OPTION_NAMES = {k: "--" + k for k in PRODUCT_FIELDS}
OPTION_NAMES.update(images="--image", sizes="--size", colors="--color")


def product_options(f):
    options = [
        click.option("--name"),
        click.option("--description"),
        click.option("--price", help="Decimal with up to two places, e.g. 15999.00"),
        click.option("--category"),
        click.option("--stock", type=int),
        click.option("--featured/--not-featured", default=None),
        click.option("--image", "images", multiple=True, help="Image URL, repeatable."),
        click.option("--size", "sizes", multiple=True, help="Repeatable."),
        click.option("--color", "colors", multiple=True, help="Repeatable."),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _given(fields):
    # unset options come back as None or an empty tuple
    return {k: list(v) if isinstance(v, tuple) else v
            for k, v in fields.items() if v not in (None, ())}


@main.group("admin")
def admin_group():
    """Manage the catalog and settings. Requires an admin login."""


@admin_group.command("login")
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
@pass_state
def admin_login(state, username, password):
    admin = _fetch(state.client.login, username, password)
    state.client.save_cookies(state.session_file)
    console.print(f"[green]Logged in as {admin['username']}[/green]")


@admin_group.command("logout")
@pass_state
def admin_logout(state):
    _fetch(state.client.logout)
    if os.path.exists(state.session_file):
        os.remove(state.session_file)
    console.print("Logged out")


@admin_group.command("whoami")
@pass_state
def admin_whoami(state):
    admin = _fetch(state.client.me)
    console.print(f"{admin['username']} [dim]{admin['id']}[/dim]")


@admin_group.group("product")
def admin_product():
    """Create, update and delete products."""


@admin_product.command("create")
@product_options
@pass_state
def admin_product_create(state, **fields):
    payload = {"featured": False, **_given(fields)}
    missing = [k for k in PRODUCT_FIELDS if k not in payload]
    if missing:
        raise click.UsageError("missing options: " + ", ".join(OPTION_NAMES[k] for k in missing))
    created = _fetch(state.client.create_product, payload)
    show_products([created])


@admin_product.command("update")
@click.argument("product_id")
@product_options
@pass_state
def admin_product_update(state, product_id, **fields):
    """Change the given fields of a product and keep the rest."""
    current = _fetch(state.client.get_product, product_id)
    payload = {k: current[k] for k in PRODUCT_FIELDS}
    payload.update(_given(fields))
    updated = _fetch(state.client.update_product, product_id, payload)
    show_products([updated])


@admin_product.command("delete")
@click.argument("product_id")
@click.confirmation_option(prompt="Delete this product?")
@pass_state
def admin_product_delete(state, product_id):
    _fetch(state.client.delete_product, product_id)
    console.print(f"Deleted {product_id}")


@admin_group.group("config")
def admin_config():
    """Store settings such as the WhatsApp number."""


@admin_config.command("set")
@click.argument("key")
@click.argument("value")
@pass_state
def admin_config_set(state, key, value):
    entry = _fetch(state.client.set_configuration, key, value)
    console.print(f"{entry['key']} = {entry['value']}")


if __name__ == "__main__":
    main()
