# cli.py
import logging
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from storefront.cart import (
    CartState, CartStore, add, checkout, clear, decrement, format_price, increment, remove
)
from storefront.client import DEFAULT_BASE_URL, InvalidProduct, ProductNotFound, StoreClient
from storefront.storage import FileStorage

console = Console()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


class Session:
    """What the menu loop works with: the API client, the cart and the product list."""

    def __init__(self, client: StoreClient, cart: CartStore):
        self.client = client
        self.cart = cart
        self.products: List[Dict[str, Any]] = []
        self.status_message = "Ready"

    def product_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        for p in self.products:
            if p.get("id") == product_id:
                return p
        return None


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Products Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=26)
    table.add_column("Title", style="bold", width=24)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=7)
    table.add_column("Category", width=14)

    for p in products:
        table.add_row(
            p.get("id", "N/A"),
            p.get("title", "N/A"),
            format_price(p.get("price", 0)),
            str(p.get("stock", 0)),
            p.get("category", "N/A")
        )
    console.print(table)


def show_cart(state: CartState):
    title = Text()
    title.append("🛒 Shopping Cart", style="bold")
    title.append(f" - Total: {format_price(state.total)}", style="bold green")

    if not state.items:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=26)
    table.add_column("Product", style="bold", width=24)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Subtotal", justify="right", width=10)

    for item in state.items:
        table.add_row(
            item.id,
            item.title or "Unknown",
            str(item.qty),
            format_price(item.price),
            format_price(item.line_total)
        )

    console.print(Panel(table, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(session: Session, fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after reporting the failure in the status panel.
    """
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except ProductNotFound as e:
        session.status_message = f"Error: product {e} not found"
    except InvalidProduct as e:
        session.status_message = f"Error: invalid product ({e})"
    except Exception as e:
        session.status_message = f"Error: {e}"
    else:
        if success_msg:
            session.status_message = success_msg
        return result
    console.print(show_status(session.status_message, False))
    return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer(session: Session):
    ids = [p.get("id", "") for p in session.products]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def get_cart_completer(session: Session):
    return WordCompleter([item.id for item in session.cart.get().items], ignore_case=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Storefront",
        "[bold blue]Catalog & Cart[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


# ---------------------------
# Main menu
# ---------------------------
def menu(session: Session):
    console.clear()
    console.print(create_header())

    # One fetch on load; a failure leaves the list empty
    session.products = try_api(session, session.client.list_products) or []

    def on_cart_change(state: CartState):
        session.status_message = f"Cart: {state.count} item(s), {format_price(state.total)}"

    session.cart.subscribe(on_cart_change)

    while True:
        if session.status_message:
            console.print(show_status(session.status_message, "Error" not in session.status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "6", "➕ Increase quantity"),
            ("2", "🔍 Search products", "7", "➖ Decrease quantity"),
            ("3", "🆕 Create product", "8", "🗑️ Remove from cart"),
            ("4", "ℹ️ Get product by ID", "9", "🧹 Clear cart"),
            ("5", "🛒 Add to cart", "10", "✅ Checkout"),
            ("c", "🧾 View cart", "q", "👋 Quit")
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 11)] + ["c", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            show_products(session.products)

        elif choice == "2":
            term = prompt_with_autocomplete("Enter search term")
            res = try_api(session, session.client.list_products, term,
                          success_msg=f"Search for '{term}' completed")
            if res is not None:
                show_products(res)

        elif choice == "3":
            title = prompt_with_autocomplete("Enter product title")
            price = ask_float("💰 Price in dollars", default=10.0)
            description = prompt_with_autocomplete("📝 Description")
            category = prompt_with_autocomplete("🏷️ Category", default="general")
            resp = try_api(
                session, session.client.create_product, title, round(price * 100),
                description=description, category=category,
                success_msg=f"Product '{title}' created"
            )
            if resp:
                console.print(Panel(f"Created product: [green]{resp['id']}[/green]"))
                session.products.insert(0, resp)

        elif choice == "4":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer(session))
            resp = try_api(session, session.client.get_product, pid, success_msg=f"Product {pid} details loaded")
            if resp:
                show_products([resp])

        elif choice == "5":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer(session))
            product = session.product_by_id(pid)
            if product is None:
                product = try_api(session, session.client.get_product, pid)
            if product:
                show_cart(session.cart.dispatch(add(product)))

        elif choice in ("6", "7", "8"):
            pid = prompt_with_autocomplete("Enter product ID", completer=get_cart_completer(session))
            action = {"6": increment, "7": decrement, "8": remove}[choice]
            show_cart(session.cart.dispatch(action(pid)))

        elif choice == "9":
            if Confirm.ask("Empty the cart?"):
                show_cart(session.cart.dispatch(clear()))

        elif choice == "10":
            if not session.cart.get().items:
                console.print("[italic yellow]Your cart is empty[/italic yellow]")
            else:
                notice = checkout(session.cart)
                console.print(Panel.fit(f"[green]{notice}[/green]", title="✅ Order Confirmation"))

        elif choice.lower() == "c":
            show_cart(session.cart.get())

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thanks for visiting! 👋[/bold green]", title="Goodbye"))
                return

        console.print()
        console.rule(style="dim")


def main():
    logging.basicConfig(level="WARNING", format="%(message)s", handlers=[RichHandler(console=console)])
    session = Session(StoreClient(base_url=DEFAULT_BASE_URL), CartStore(FileStorage()))
    menu(session)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
