from __future__ import annotations

import pytest

from pricekit.pricing import (
    PriceQuote,
    Product,
    Promotion,
    format_amount,
    resolve_price,
    select_best_promotion,
)


def _variant(variant_id, amount, region_id="reg_pl", calculated=None):
    variant = {
        "id": variant_id,
        "prices": [{"amount": amount, "region_id": region_id}],
    }
    if calculated is not None:
        original, current = calculated
        variant["calculated_price"] = {
            "original_amount": original,
            "calculated_amount": current,
            "region_id": region_id,
        }
    return variant


def _promo(promo_id, kind, value, *, automatic=True):
    return {
        "id": promo_id,
        "code": promo_id.upper(),
        "is_automatic": automatic,
        "application_method": {
            "type": kind,
            "value": value,
            "target_type": "items",
            "allocation": "each",
        },
    }


def _product(variants, promotions=None, **extra):
    return {"id": "prod_1", "variants": variants, "promotions": promotions or [], **extra}


def test_fixed_promotion_beats_smaller_percentage():
    product = _product(
        [_variant("v1", 100)],
        [_promo("ten", "percentage", 10), _promo("twenty", "fixed", 20)],
    )

    quote = resolve_price(product, "reg_pl")

    assert quote.original_price == "100.00 zł"
    assert quote.promotional_price == "80.00 zł"
    assert quote.discount_percentage == 20
    assert quote.has_promotion is True


def test_single_automatic_percentage_promotion():
    product = _product([_variant("v1", 100)], [_promo("auto15", "percentage", 15)])

    quote = resolve_price(product)

    assert quote == PriceQuote(
        original_price="100.00 zł",
        promotional_price="85.00 zł",
        discount_percentage=15,
        has_promotion=True,
        original_amount=100.0,
        promotional_amount=85.0,
    )


def test_empty_variants_resolve_to_zero_quote():
    quote = resolve_price(_product([]))

    assert quote.original_price == "0.00 zł"
    assert quote.promotional_price == "0.00 zł"
    assert quote.discount_percentage == 0
    assert quote.has_promotion is False


def test_price_list_discount_takes_priority_over_promotions():
    product = _product(
        [_variant("v1", 100, calculated=(100, 70))],
        [_promo("half", "percentage", 50)],
    )

    quote = resolve_price(product, "reg_pl")

    assert quote.original_price == "100.00 zł"
    assert quote.promotional_price == "70.00 zł"
    assert quote.discount_percentage == 30


def test_price_list_percentage_rounds_half_up():
    product = _product([_variant("v1", 80, calculated=(80, 70))])

    quote = resolve_price(product)

    assert quote.discount_percentage == 13
    assert quote.promotional_price == "70.00 zł"


def test_price_list_for_other_region_is_ignored():
    variant = _variant("v1", 100, calculated=(100, 70))
    variant["calculated_price"]["region_id"] = "reg_de"

    quote = resolve_price(_product([variant]), "reg_pl")

    assert quote.has_promotion is False
    assert quote.promotional_price == "100.00 zł"


def test_equal_discounts_keep_first_promotion():
    best = select_best_promotion(
        [
            Promotion.model_validate(_promo("pct", "percentage", 25)),
            Promotion.model_validate(_promo("fix", "fixed", 25)),
        ],
        100.0,
    )

    assert best is not None
    assert best.promotion.id == "pct"
    assert best.percentage == 25


def test_fixed_equivalent_percentage_rounded_to_two_places():
    best = select_best_promotion(
        [Promotion.model_validate(_promo("fix", "fixed", 10))], 30.0
    )

    assert best is not None
    assert best.percentage == 33.33
    assert best.amount == 10


def test_fixed_discount_rounds_half_up_to_whole_percent():
    product = _product([_variant("v1", 100)], [_promo("fix", "fixed", 12.5)])

    quote = resolve_price(product)

    assert quote.discount_percentage == 13
    assert quote.promotional_price == "87.50 zł"


def test_cheapest_variant_in_region_is_selected():
    product = _product(
        [
            _variant("v1", 120),
            _variant("v2", 90),
            _variant("v3", 50, region_id="reg_de"),
        ]
    )

    assert resolve_price(product, "reg_pl").original_price == "90.00 zł"
    assert resolve_price(product, "reg_de").original_price == "50.00 zł"


def test_variant_without_region_price_never_beats_priced_variant():
    product = _product(
        [
            _variant("v1", 10, region_id="reg_de"),
            _variant("v2", 100),
        ]
    )

    assert resolve_price(product, "reg_pl").original_price == "100.00 zł"


def test_cheapest_tie_keeps_first_variant():
    product = _product(
        [
            _variant("v1", 100),
            _variant("v2", 100, calculated=(100, 80)),
        ]
    )

    quote = resolve_price(product, "reg_pl")

    assert quote.has_promotion is False
    assert quote.promotional_price == "100.00 zł"


def test_explicit_variant_is_used():
    product = _product(
        [
            _variant("v1", 50),
            _variant("v2", 100, calculated=(100, 80)),
        ]
    )

    quote = resolve_price(product, "reg_pl", "v2")

    assert quote.promotional_price == "80.00 zł"
    assert quote.discount_percentage == 20


def test_unknown_variant_resolves_to_zero_quote():
    quote = resolve_price(_product([_variant("v1", 50)]), "reg_pl", "missing")
    assert quote.original_price == "0.00 zł"
    assert quote.has_promotion is False


def test_selected_variant_without_region_price_resolves_to_zero_quote():
    quote = resolve_price(_product([_variant("v1", 50)]), "reg_de", "v1")
    assert quote.original_price == "0.00 zł"


def test_no_promotions_returns_undiscounted_quote():
    quote = resolve_price(_product([_variant("v1", 49.9)]))

    assert quote.original_price == "49.90 zł"
    assert quote.promotional_price == "49.90 zł"
    assert quote.discount_percentage == 0
    assert quote.has_promotion is False


def test_has_promotions_flag_false_disables_promotions():
    product = _product(
        [_variant("v1", 100)],
        [_promo("auto15", "percentage", 15)],
        has_promotions=False,
    )

    assert resolve_price(product).has_promotion is False


def test_legacy_promotion_shape_is_honored():
    product = _product(
        [_variant("v1", 100)],
        [{"id": "legacy", "type": "percentage", "value": 25}],
    )

    quote = resolve_price(product)

    assert quote.promotional_price == "75.00 zł"
    assert quote.discount_percentage == 25


def test_fixed_discount_larger_than_price_is_capped():
    product = _product([_variant("v1", 100)], [_promo("big", "fixed", 150)])

    quote = resolve_price(product)

    assert quote.promotional_price == "0.00 zł"
    assert quote.discount_percentage == 100


def test_discount_rounding_to_zero_percent_keeps_invariant():
    product = _product([_variant("v1", 100)], [_promo("tiny", "fixed", 0.2)])

    quote = resolve_price(product)

    assert quote.discount_percentage == 0
    assert quote.has_promotion is False
    assert quote.promotional_price == quote.original_price


def test_non_positive_and_unknown_promotions_are_skipped():
    product = _product(
        [_variant("v1", 100)],
        [
            _promo("neg", "percentage", -5),
            _promo("zero", "fixed", 0),
            _promo("odd", "buy_get", 50),
            {"id": "empty"},
        ],
    )

    quote = resolve_price(product)

    assert quote.has_promotion is False
    assert quote.discount_percentage == 0


def test_invalid_payload_never_raises():
    assert resolve_price({"variants": "nope"}).original_price == "0.00 zł"
    assert resolve_price(None).original_price == "0.00 zł"
    assert resolve_price({"variants": [{"prices": []}]}).original_price == "0.00 zł"


def test_model_input_and_custom_currency_suffix():
    product = Product.model_validate(
        _product([_variant("v1", 100)], [_promo("auto15", "percentage", 15)])
    )

    quote = resolve_price(product, currency_suffix="PLN")

    assert quote.promotional_price == "85.00 PLN"


def test_quotes_hold_price_invariants():
    products = [
        _product([_variant("v1", 100)], [_promo("p", "percentage", 10)]),
        _product([_variant("v1", 100)], [_promo("f", "fixed", 33)]),
        _product([_variant("v1", 100, calculated=(100, 99))]),
        _product([_variant("v1", 100, calculated=(100, 100))], [_promo("p", "percentage", 5)]),
        _product([_variant("v1", 0)], [_promo("f", "fixed", 5)]),
        _product([_variant("v1", 19.99)], [_promo("p", "percentage", 100)]),
        _product([]),
    ]

    for product in products:
        quote = resolve_price(product)
        assert quote.promotional_amount <= quote.original_amount
        assert quote.has_promotion == (quote.discount_percentage > 0)
        assert 0 <= quote.discount_percentage <= 100


def test_format_amount():
    assert format_amount(80) == "80.00 zł"
    assert format_amount(12.345, "PLN") == "12.35 PLN"
    assert format_amount(0) == "0.00 zł"


def test_non_finite_amounts_resolve_to_zero_quote():
    for amount in (float("inf"), "Infinity", float("nan"), "-inf"):
        quote = resolve_price(_product([_variant("v1", amount)]))
        assert quote.original_price == "0.00 zł"
        assert quote.has_promotion is False

    variant = _variant("v1", 100, calculated=(float("inf"), 80))
    assert resolve_price(_product([variant])).original_price == "0.00 zł"


def test_huge_amounts_are_formatted():
    quote = resolve_price(_product([_variant("v1", 1e30)]))
    assert quote.original_price == "1" + "0" * 30 + ".00 zł"

    quote = resolve_price(_product([_variant("v1", 1e40, calculated=(1e40, 5e39))]))
    assert quote.discount_percentage == 50
    assert quote.has_promotion is True
    assert quote.promotional_price.endswith(".00 zł")


def test_format_amount_rejects_non_finite():
    with pytest.raises(ValueError):
        format_amount(float("inf"))
