"""
Order models - order header, line items and breakfast option selections.

Orders are written once by order placement and only ever mutated by the
one-way staff approval.
"""

from decimal import Decimal

from django.db import models

from apps.cafe.restaurant.models import (
    Breakfast,
    BreakfastOption,
    MenuItem,
    Promotion,
    Supplement,
    Table,
)


class OrderType(models.TextChoices):
    """Order fulfillment type."""

    LOCAL = "local", "Local"
    DELIVERY = "delivery", "Delivery"


class Order(models.Model):
    """
    Customer order.

    total_price is the server-computed total after any promotion.
    table is set for local orders, delivery_address for delivery orders.
    """

    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    order_type = models.CharField(max_length=20, choices=OrderType.choices)
    delivery_address = models.CharField(max_length=500, null=True, blank=True)
    table = models.ForeignKey(
        Table,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
    )
    promotion = models.ForeignKey(
        Promotion,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    # Originating client session (realtime channel key)
    session_id = models.CharField(max_length=128, blank=True)

    # One-way staff approval
    approved = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["approved", "created_at"]),
            models.Index(fields=["session_id"]),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.order_type}, {self.total_price})"


class OrderItem(models.Model):
    """
    Line item in an order: either a menu item or a breakfast.

    unit_price is the validated price (base + supplement or options).
    supplement_price snapshots the supplement addition at order time.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="order_items",
    )
    breakfast = models.ForeignKey(
        Breakfast,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    supplement = models.ForeignKey(
        Supplement,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="order_items",
    )
    supplement_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )

    class Meta:
        ordering = ["pk"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(menu_item__isnull=False, breakfast__isnull=True)
                    | models.Q(menu_item__isnull=True, breakfast__isnull=False)
                ),
                name="order_item_menu_item_xor_breakfast",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_item_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        product = self.menu_item or self.breakfast
        return f"{self.quantity}x {product}"

    @property
    def is_breakfast(self) -> bool:
        return self.breakfast_id is not None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class BreakfastOrderOption(models.Model):
    """
    Option chosen on a breakfast line - one row per selected option.
    """

    order_item = models.ForeignKey(
        OrderItem,
        on_delete=models.CASCADE,
        related_name="selected_options",
    )
    option = models.ForeignKey(
        BreakfastOption,
        on_delete=models.PROTECT,
        related_name="order_selections",
    )

    class Meta:
        ordering = ["pk"]
        constraints = [
            models.UniqueConstraint(
                fields=["order_item", "option"],
                name="unique_option_per_order_item",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_item} / {self.option.option_name}"
