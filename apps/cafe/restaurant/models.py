"""
Restaurant models - Catalog, breakfasts, promotions and tables.

Order placement only reads these; staff maintain them through the admin.
"""

from datetime import datetime
from decimal import Decimal

from django.db import models
from django.utils import timezone

from apps.cafe.core.models import TimeStampedModel


class Category(TimeStampedModel):
    """
    Menu category (e.g., Coffee, Pastries, Breakfast).
    """

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    image_url = models.CharField(max_length=500, blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class MenuItem(TimeStampedModel):
    """
    Individual menu item.

    A sale price, when set, overrides the regular price.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="items",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    regular_price = models.DecimalField(max_digits=10, decimal_places=2)
    sale_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Overrides regular price when set",
    )
    image_url = models.CharField(max_length=500, blank=True)

    # Availability (off the menu when False)
    availability = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "availability"]),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def current_price(self) -> Decimal:
        """Price charged right now: sale price if set, else regular price."""
        if self.sale_price is not None:
            return self.sale_price
        return self.regular_price


class Supplement(TimeStampedModel):
    """
    An add-on (extra shot, oat milk, ...) that items may offer.
    """

    name = models.CharField(max_length=100)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class MenuItemSupplement(models.Model):
    """
    Supplement offered on a specific item, with its per-item price.
    """

    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.CASCADE,
        related_name="supplement_links",
    )
    supplement = models.ForeignKey(
        Supplement,
        on_delete=models.CASCADE,
        related_name="item_links",
    )
    additional_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["menu_item", "supplement"],
                name="unique_supplement_per_item",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.menu_item.name} + {self.supplement.name} (+{self.additional_price})"


class Breakfast(TimeStampedModel):
    """
    A breakfast formula with option groups the customer must choose from.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="breakfasts",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image_url = models.CharField(max_length=500, blank=True)
    availability = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class BreakfastOptionGroup(models.Model):
    """
    Group of mutually exclusive choices (e.g., "Eggs", "Drink").

    Exactly one option per group must be selected when ordering.
    """

    breakfast = models.ForeignKey(
        Breakfast,
        on_delete=models.CASCADE,
        related_name="option_groups",
    )
    title = models.CharField(max_length=100)

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self.breakfast.name} > {self.title}"


class BreakfastOption(models.Model):
    """
    Individual choice within an option group, with a price addition.
    """

    breakfast = models.ForeignKey(
        Breakfast,
        on_delete=models.CASCADE,
        related_name="options",
    )
    group = models.ForeignKey(
        BreakfastOptionGroup,
        on_delete=models.CASCADE,
        related_name="options",
    )
    option_name = models.CharField(max_length=100)
    additional_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        if self.additional_price:
            return f"{self.option_name} (+{self.additional_price})"
        return self.option_name


class Promotion(TimeStampedModel):
    """
    Percentage discount, optionally scoped to one menu item.

    Applies only while active and within its start/end window.
    """

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    item = models.ForeignKey(
        MenuItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="promotions",
        help_text="Blank = applies to the whole order",
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["-start_date"]

    def __str__(self) -> str:
        return f"{self.title} (-{self.discount_percentage}%)"

    def is_active_at(self, moment: datetime | None = None) -> bool:
        """Check the active flag and the start/end window."""
        moment = moment or timezone.now()
        return self.active and self.start_date <= moment <= self.end_date


class TableStatus(models.TextChoices):
    """Table occupancy status."""

    AVAILABLE = "available", "Available"
    OCCUPIED = "occupied", "Occupied"
    RESERVED = "reserved", "Reserved"


class Table(TimeStampedModel):
    """
    A dining table. Local orders flip it to occupied.
    """

    table_number = models.CharField(max_length=20, unique=True)
    capacity = models.PositiveIntegerField(default=2)
    status = models.CharField(
        max_length=20,
        choices=TableStatus.choices,
        default=TableStatus.AVAILABLE,
    )

    class Meta:
        ordering = ["table_number"]

    def __str__(self) -> str:
        return f"Table {self.table_number}"
