"""Tests for catalog selectors."""

from decimal import Decimal

import pytest

from apps.cafe.restaurant import selectors

from .factories import (
    BreakfastFactory,
    BreakfastOptionFactory,
    BreakfastOptionGroupFactory,
    MenuItemSupplementFactory,
    SupplementFactory,
)


@pytest.mark.django_db
class TestCatalogSelectors:
    """Tests for catalog lookups used by order placement."""

    def test_missing_rows_return_none(self):
        assert selectors.get_menu_item(987654) is None
        assert selectors.get_breakfast(987654) is None
        assert selectors.get_promotion(987654) is None
        assert selectors.get_table(987654) is None

    def test_item_supplement_only_for_offering_item(self):
        offer = MenuItemSupplementFactory()
        other = SupplementFactory()

        found = selectors.get_item_supplement(offer.menu_item.pk, offer.supplement.pk)

        assert found == offer
        assert selectors.get_item_supplement(offer.menu_item.pk, other.pk) is None

    def test_option_group_ids(self):
        breakfast = BreakfastFactory()
        first = BreakfastOptionGroupFactory(breakfast=breakfast)
        second = BreakfastOptionGroupFactory(breakfast=breakfast)
        BreakfastOptionGroupFactory()

        assert selectors.get_option_group_ids(breakfast.pk) == {first.pk, second.pk}

    def test_option_group_ids_empty(self):
        breakfast = BreakfastFactory()

        assert selectors.get_option_group_ids(breakfast.pk) == set()

    def test_breakfast_options_drop_foreign_ids(self):
        own = BreakfastOptionFactory()
        foreign = BreakfastOptionFactory()

        options = selectors.get_breakfast_options(own.breakfast.pk, [own.pk, foreign.pk])

        assert options == [own]

    def test_option_price_total(self):
        options = [
            BreakfastOptionFactory(additional_price=Decimal("0.50")),
            BreakfastOptionFactory(additional_price=Decimal("1.25")),
        ]

        assert selectors.option_price_total(options) == Decimal("1.75")
        assert selectors.option_price_total([]) == Decimal("0")
