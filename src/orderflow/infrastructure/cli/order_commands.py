"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json
from pathlib import Path
from uuid import UUID

import click

from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import CreateOrderCommand, OrderDTO, OrderItemCommand
from orderflow.application.get_order import GetOrderHandler
from orderflow.application.mark_order_available import MarkOrderAvailableHandler
from orderflow.application.mark_order_failed import MarkOrderFailedHandler
from orderflow.application.process_order import ProcessOrderHandler
from orderflow.config import get_settings
from orderflow.domain.exceptions import DomainException, OrderNotFound
from orderflow.domain.model.order import OrderStatus
from orderflow.infrastructure.bootstrap import order_repository, status_publisher
from orderflow.infrastructure.messaging.order_created_consumer import OrderCreatedConsumer

_STATUS_CHOICE = click.Choice([s.value for s in OrderStatus], case_sensitive=False)


def _parse_items(raw: str) -> list[OrderItemCommand]:
    """Parse 'SKU-1:Widget:50.00:2,SKU-2:Gadget:30.00:3:USD' into item commands."""
    commands: list[OrderItemCommand] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":")
        if len(parts) not in (4, 5):
            raise click.BadParameter(
                f"Invalid item format '{entry}'. "
                "Expected 'ProductId:Name:UnitPrice:Qty[:Currency]'."
            )
        product_id, name, price, qty_str = (p.strip() for p in parts[:4])
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        currency = parts[4].strip().upper() if len(parts) == 5 else None
        commands.append(
            OrderItemCommand(
                product_id=product_id,
                product_name=name,
                unit_price=price,
                quantity=qty,
                currency=currency,
            )
        )
    return commands


def _create_handler() -> CreateOrderHandler:
    return CreateOrderHandler(
        order_repo=order_repository(),
        publisher=status_publisher(),
        default_currency=get_settings().default_currency,
    )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"External id: {dto.external_order_id}")
    click.echo(f"Created:     {dto.created_at:%Y-%m-%d %H:%M UTC}")
    click.echo(f"Updated:     {dto.updated_at:%Y-%m-%d %H:%M UTC}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Name':<20} {'Qty':>5} {'Price':>10} {'Subtotal':>12}")
    click.echo(f"  {'-'*71}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<20} {item.product_name:<20} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.subtotal:>12}"
        )
    click.echo(f"  {'-'*71}")
    click.echo(f"  {'Order Total':<47} {dto.currency:>10} {dto.total_amount:>12}")


@click.command("create")
@click.option("--external-id", required=True, help="Order id assigned by the upstream system.")
@click.option(
    "--items", required=True, help="Items as 'ProductId:Name:UnitPrice:Qty[:Currency],...'."
)
@click.option("--correlation-id", default=None, help="Correlation id for notifications.")
def order_create(external_id: str, items: str, correlation_id: str | None) -> None:
    """Create a new order and calculate its total."""
    command = CreateOrderCommand(external_order_id=external_id, items=_parse_items(items))

    try:
        dto = _create_handler().handle(command, correlation_id=correlation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("ingest")
@click.option(
    "--file",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON 'order created' message from the upstream system.",
)
def order_ingest(file_path: Path) -> None:
    """Create an order from an upstream 'order created' message."""
    consumer = OrderCreatedConsumer(_create_handler())

    try:
        dto = consumer.handle(file_path.read_bytes())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} created from message  (status={dto.status})")


@click.command("process")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID to process.")
@click.option("--correlation-id", default=None, help="Correlation id for notifications.")
def order_process(order_id: UUID, correlation_id: str | None) -> None:
    """Process a received order (RECEIVED -> PROCESSING -> CALCULATED)."""
    handler = ProcessOrderHandler(order_repo=order_repository(), publisher=status_publisher())

    try:
        dto = handler.handle(order_id, correlation_id=correlation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} processed, total {dto.currency} {dto.total_amount}.")


@click.command("available")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID to release.")
@click.option("--correlation-id", default=None, help="Correlation id for notifications.")
def order_available(order_id: UUID, correlation_id: str | None) -> None:
    """Make a calculated order available downstream."""
    handler = MarkOrderAvailableHandler(order_repo=order_repository(), publisher=status_publisher())

    try:
        dto = handler.handle(order_id, correlation_id=correlation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} is now {dto.status}.")


@click.command("fail")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID to fail.")
@click.option("--reason", default=None, help="Why the order failed (logged only).")
@click.option("--correlation-id", default=None, help="Correlation id for notifications.")
def order_fail(order_id: UUID, reason: str | None, correlation_id: str | None) -> None:
    """Mark an order as failed (any status except AVAILABLE)."""
    handler = MarkOrderFailedHandler(order_repo=order_repository(), publisher=status_publisher())

    try:
        dto = handler.handle(order_id, reason=reason, correlation_id=correlation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} marked as {dto.status}.")


@click.command("show")
@click.option("--id", "order_id", default=None, type=click.UUID, help="Internal order ID.")
@click.option("--external-id", default=None, help="Upstream order id.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the JSON payload.")
def order_show(order_id: UUID | None, external_id: str | None, as_json: bool) -> None:
    """Show details of an existing order."""
    if (order_id is None) == (external_id is None):
        raise click.UsageError("Pass exactly one of --id or --external-id.")

    handler = GetOrderHandler(order_repo=order_repository())
    if order_id is not None:
        dto = handler.by_id(order_id)
    else:
        dto = handler.by_external_order_id(external_id)  # type: ignore[arg-type]

    if dto is None:
        raise click.ClickException(str(OrderNotFound(order_id or external_id)))

    if as_json:
        click.echo(json.dumps(dto.to_payload(), indent=2))
    else:
        _display_order(dto)


@click.command("list")
@click.option("--status", default=None, type=_STATUS_CHOICE, help="Only orders in this status.")
def order_list(status: str | None) -> None:
    """List orders, optionally filtered by status."""
    handler = GetOrderHandler(order_repo=order_repository())

    try:
        dtos = handler.by_status(status) if status else handler.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(f"  {'ID':<36} {'External id':<20} {'Status':<11} {'Total':>14}")
    click.echo(f"  {'-'*84}")
    for dto in dtos:
        total = f"{dto.currency} {dto.total_amount}"
        click.echo(f"  {dto.id:<36} {dto.external_order_id:<20} {dto.status:<11} {total:>14}")


@click.command("count")
@click.option("--status", required=True, type=_STATUS_CHOICE, help="Status to count.")
def order_count(status: str) -> None:
    """Count orders in a status."""
    handler = GetOrderHandler(order_repo=order_repository())

    try:
        count = handler.count_by_status(status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{status.upper()}: {count}")
