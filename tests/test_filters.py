from starlette.datastructures import QueryParams

from app.services.filters import (
    ContainsFilter, EqualityFilter, InFilter, ListingFilterParams, ListingScope, RangeFilter,
    build_predicates
)


def predicates_for(scope=ListingScope.PUBLIC, **params):
    return build_predicates(ListingFilterParams.from_query_params(params), scope)


def test_public_scope_only_published():
    assert predicates_for() == [InFilter("status", ("published",))]


def test_admin_scope_includes_drafts():
    assert predicates_for(ListingScope.ADMIN) == [InFilter("status", ("draft", "published"))]


def test_caller_status_is_ignored():
    assert predicates_for(status="draft") == [InFilter("status", ("published",))]


def test_camel_case_price_wins_over_snake_case():
    params = ListingFilterParams.from_query_params({"minPrice": "100", "min_price": "5", "max_price": "900"})
    assert params.min_price == "100"
    assert params.max_price == "900"


def test_repeated_keys_keep_first_value():
    params = ListingFilterParams.from_query_params(QueryParams("bedrooms=2&bedrooms=3&locationId=abc"))
    assert params.bedrooms == "2"
    assert params.location_id == "abc"


def test_list_values_keep_first_value():
    params = ListingFilterParams.from_query_params({"property_type": ["villa", "riad"]})
    assert params.property_type == "villa"


def test_equality_fields():
    predicates = predicates_for(availability_type="rent", property_type="villa", locationId="loc-1")
    assert EqualityFilter("availability_type", "rent") in predicates
    assert EqualityFilter("property_type", "villa") in predicates
    assert EqualityFilter("location_id", "loc-1") in predicates


def test_unknown_enum_value_is_passed_through():
    assert EqualityFilter("property_type", "castle") in predicates_for(property_type="castle")


def test_price_range_both_bounds():
    assert RangeFilter("price", lower=100.0, upper=500.0) in predicates_for(minPrice="100", maxPrice="500")


def test_price_range_one_sided():
    assert RangeFilter("price", lower=100.0) in predicates_for(min_price="100")
    assert RangeFilter("price", upper=500.0) in predicates_for(maxPrice="500")


def test_non_numeric_price_bound_is_dropped():
    assert RangeFilter("price", upper=500.0) in predicates_for(minPrice="cheap", maxPrice="500")
    predicates = predicates_for(minPrice="cheap", maxPrice="inf")
    assert not any(isinstance(p, RangeFilter) for p in predicates)


def test_room_counts():
    predicates = predicates_for(bedrooms="3", bathrooms="2.0")
    assert EqualityFilter("bedrooms", 3) in predicates
    assert EqualityFilter("bathrooms", 2) in predicates


def test_room_counts_any_or_malformed_mean_no_filter():
    for value in ("any", "abc", "2.5", ""):
        predicates = predicates_for(bedrooms=value, bathrooms=value)
        assert predicates == [InFilter("status", ("published",))]


def test_featured_only_literal_booleans():
    assert EqualityFilter("featured", True) in predicates_for(featured="true")
    assert EqualityFilter("featured", False) in predicates_for(featured="false")
    assert len(predicates_for(featured="yes")) == 1


def test_amenities_search():
    assert predicates_for(q="pool")[-1] == ContainsFilter("amenities", "pool")


def test_scope_predicate_comes_first():
    predicates = predicates_for(availability_type="sale", q="pool", bedrooms="2")
    assert isinstance(predicates[0], InFilter)
