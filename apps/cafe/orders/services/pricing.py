"""
Price reconciliation - recomputes every cart price from the live catalog.

Handles:
1. Menu lines: availability, sale price override, per-item supplements
2. Breakfast lines: availability, one option per option group, option additions
3. Merging breakfast lines that reference the same breakfast
4. Promotion discount on matching lines
5. Comparing client-declared unit prices and total within one cent

Nothing here writes to the database; every failure is raised before the
order transaction starts.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from apps.cafe.orders.exceptions import CatalogViolation, PriceMismatch
from apps.cafe.orders.serializers import (
    BreakfastLineSchema,
    MenuLineSchema,
    OrderCreateRequest,
)
from apps.cafe.restaurant import selectors
from apps.cafe.restaurant.models import (
    Breakfast,
    BreakfastOption,
    MenuItem,
    Promotion,
    Supplement,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
PRICE_TOLERANCE = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(value: Decimal) -> Decimal:
    """Round a Decimal to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def prices_match(expected: Decimal, provided: Decimal) -> bool:
    """True when two prices differ by no more than one cent."""
    return abs(expected - provided) <= PRICE_TOLERANCE


@dataclass(frozen=True)
class PriceQuote:
    """Server-computed expected unit price for one cart line."""

    base_price: Decimal
    additions: Decimal
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return self.base_price + self.additions

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class ReconciledMenuLine:
    """A validated menu item line, ready to persist."""

    menu_item: MenuItem
    quote: PriceQuote
    supplement: Supplement | None = None
    supplement_price: Decimal | None = None

    @property
    def quantity(self) -> int:
        return self.quote.quantity


@dataclass
class ReconciledBreakfastLine:
    """
    A validated breakfast line.

    After merging, quantity is the sum over every cart line for this
    breakfast and options holds the union of their selections.
    """

    breakfast: Breakfast
    unit_price: Decimal
    quantity: int
    options: list[BreakfastOption] = field(default_factory=list)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Reconciliation:
    """Outcome of reconciling a cart against the catalog."""

    menu_lines: list[ReconciledMenuLine]
    breakfast_lines: list[ReconciledBreakfastLine]
    total: Decimal
    promotion: Promotion | None = None
    discount_applied: bool = False


def quote_menu_line(line: MenuLineSchema) -> ReconciledMenuLine:
    """
    Validate one menu line and check its declared unit price.

    Raises:
        CatalogViolation: Item missing or unavailable, or supplement not
            offered on this item.
        PriceMismatch: Declared unit price off by more than one cent.
    """
    menu_item = selectors.get_menu_item(line.item_id)
    if menu_item is None or not menu_item.availability:
        logger.warning("Item unavailable: item_id=%s", line.item_id)
        raise CatalogViolation(f"Item {line.item_id} is unavailable")

    supplement = None
    supplement_price = None
    if line.supplement_id is not None:
        offer = selectors.get_item_supplement(line.item_id, line.supplement_id)
        if offer is None:
            logger.warning(
                "Invalid supplement: item_id=%s supplement_id=%s",
                line.item_id,
                line.supplement_id,
            )
            raise CatalogViolation(
                f"Invalid supplement ID {line.supplement_id} for item {line.item_id}"
            )
        supplement = offer.supplement
        supplement_price = offer.additional_price

    quote = PriceQuote(
        base_price=menu_item.current_price,
        additions=supplement_price or Decimal("0"),
        quantity=line.quantity,
    )
    if not prices_match(quote.unit_price, line.unit_price):
        logger.warning(
            "Price mismatch: item_id=%s expected=%s provided=%s",
            line.item_id,
            quote.unit_price,
            line.unit_price,
        )
        raise PriceMismatch(
            f"Invalid unit_price for item {line.item_id}. "
            f"Expected {to_money(quote.unit_price)}, got {to_money(line.unit_price)}",
            expected=quote.unit_price,
            provided=line.unit_price,
        )

    return ReconciledMenuLine(
        menu_item=menu_item,
        quote=quote,
        supplement=supplement,
        supplement_price=supplement_price,
    )


def _selected_options(breakfast_id: int, option_ids: list[int]) -> list[BreakfastOption]:
    """Resolve option ids and check every option group is covered exactly."""
    group_ids = selectors.get_option_group_ids(breakfast_id)

    if not group_ids:
        if option_ids:
            raise CatalogViolation(
                f"No option groups defined for breakfast {breakfast_id}, "
                "but options provided"
            )
        return []

    coverage_error = CatalogViolation(
        f"Must select one option from each of the {len(group_ids)} option groups "
        f"for breakfast {breakfast_id}"
    )
    if not option_ids:
        raise coverage_error

    options = selectors.get_breakfast_options(breakfast_id, option_ids)
    if len(options) != len(set(option_ids)) or len(option_ids) != len(set(option_ids)):
        raise CatalogViolation(f"Invalid option IDs for breakfast {breakfast_id}")

    selected_groups = [option.group_id for option in options]
    if set(selected_groups) != group_ids or len(selected_groups) != len(group_ids):
        raise coverage_error

    position = {option_id: index for index, option_id in enumerate(option_ids)}
    return sorted(options, key=lambda option: position[option.pk])


def quote_breakfast_line(line: BreakfastLineSchema) -> ReconciledBreakfastLine:
    """
    Validate one breakfast line and check its declared unit price.

    Raises:
        CatalogViolation: Breakfast missing or unavailable, unknown options,
            or option groups not covered one-for-one.
        PriceMismatch: Declared unit price off by more than one cent.
    """
    breakfast = selectors.get_breakfast(line.breakfast_id)
    if breakfast is None or not breakfast.availability:
        logger.warning("Breakfast unavailable: breakfast_id=%s", line.breakfast_id)
        raise CatalogViolation(f"Breakfast {line.breakfast_id} is unavailable")

    try:
        options = _selected_options(line.breakfast_id, line.option_ids)
    except CatalogViolation as e:
        logger.warning(
            "Invalid breakfast options: breakfast_id=%s option_ids=%s (%s)",
            line.breakfast_id,
            line.option_ids,
            e.message,
        )
        raise

    quote = PriceQuote(
        base_price=breakfast.price,
        additions=selectors.option_price_total(options),
        quantity=line.quantity,
    )
    if not prices_match(quote.unit_price, line.unit_price):
        logger.warning(
            "Price mismatch: breakfast_id=%s expected=%s provided=%s",
            line.breakfast_id,
            quote.unit_price,
            line.unit_price,
        )
        raise PriceMismatch(
            f"Invalid unit_price for breakfast {line.breakfast_id}. "
            f"Expected {to_money(quote.unit_price)}, got {to_money(line.unit_price)}",
            expected=quote.unit_price,
            provided=line.unit_price,
        )

    return ReconciledBreakfastLine(
        breakfast=breakfast,
        unit_price=quote.unit_price,
        quantity=line.quantity,
        options=options,
    )


def merge_breakfast_lines(
    lines: list[ReconciledBreakfastLine],
) -> list[ReconciledBreakfastLine]:
    """
    Merge validated lines that reference the same breakfast.

    Quantities are summed and options unioned in first-seen order; the unit
    price of the first line for each breakfast is kept.
    """
    merged: dict[int, ReconciledBreakfastLine] = {}
    for line in lines:
        existing = merged.get(line.breakfast.pk)
        if existing is None:
            merged[line.breakfast.pk] = ReconciledBreakfastLine(
                breakfast=line.breakfast,
                unit_price=line.unit_price,
                quantity=line.quantity,
                options=list(line.options),
            )
            continue

        existing.quantity += line.quantity
        seen = {option.pk for option in existing.options}
        existing.options.extend(o for o in line.options if o.pk not in seen)

    return list(merged.values())


def resolve_promotion(promotion_id: int | None) -> Promotion | None:
    """
    Look up the referenced promotion.

    Raises:
        CatalogViolation: The promotion id does not exist.
    """
    if promotion_id is None:
        return None
    promotion = selectors.get_promotion(promotion_id)
    if promotion is None:
        logger.warning("Unknown promotion: promotion_id=%s", promotion_id)
        raise CatalogViolation(f"Promotion {promotion_id} does not exist")
    return promotion


def discounted_total(
    menu_lines: list[ReconciledMenuLine],
    breakfast_totals: list[Decimal],
    promotion: Promotion,
) -> Decimal:
    """
    Recompute the order total with a promotion's percentage discount.

    A promotion scoped to a menu item discounts only that item's lines;
    an unscoped promotion discounts every line, breakfasts included.
    """
    factor = (HUNDRED - promotion.discount_percentage) / HUNDRED
    total = Decimal("0")

    for line in menu_lines:
        if promotion.item_id is None or promotion.item_id == line.menu_item.pk:
            total += line.quote.line_total * factor
        else:
            total += line.quote.line_total

    for line_total in breakfast_totals:
        total += line_total * factor if promotion.item_id is None else line_total

    return total


def reconcile(cart: OrderCreateRequest, now: datetime) -> Reconciliation:
    """
    Reconcile a cart against current catalog state.

    Args:
        cart: Validated order request.
        now: Moment at which promotion activity is evaluated.

    Returns:
        Reconciliation with the validated lines and the authoritative total.

    Raises:
        CatalogViolation: Any referenced catalog entry is unusable.
        PriceMismatch: A unit price or the declared total is off by more
            than one cent.
    """
    menu_lines = [quote_menu_line(line) for line in cart.items]
    quoted_breakfasts = [quote_breakfast_line(line) for line in cart.breakfast_items]

    # Promotion math runs over cart lines, before merging
    breakfast_totals = [line.line_total for line in quoted_breakfasts]
    total = sum((line.quote.line_total for line in menu_lines), Decimal("0")) + sum(
        breakfast_totals, Decimal("0")
    )

    promotion = resolve_promotion(cart.promotion_id)
    discount_applied = False
    if promotion is not None and promotion.is_active_at(now):
        total = discounted_total(menu_lines, breakfast_totals, promotion)
        discount_applied = True
        logger.info(
            "Promotion %s applied (%s%%)", promotion.pk, promotion.discount_percentage
        )

    total = to_money(total)
    if not prices_match(total, cart.total_price):
        logger.warning(
            "Total price mismatch: expected=%s provided=%s", total, cart.total_price
        )
        raise PriceMismatch(
            f"Total price mismatch. Expected {total}, got {to_money(cart.total_price)}",
            expected=total,
            provided=cart.total_price,
        )

    return Reconciliation(
        menu_lines=menu_lines,
        breakfast_lines=merge_breakfast_lines(quoted_breakfasts),
        total=total,
        promotion=promotion,
        discount_applied=discount_applied,
    )
