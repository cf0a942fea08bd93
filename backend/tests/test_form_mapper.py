"""
test_form_mapper.py — Unit tests for intake form to labour quantity mapping.

Covers:
  - Plumbing point counts per bathroom type
  - Presence rules: zero / absent quantities are never emitted
  - Area aggregation (floor + shower floor, other walls + accent)
  - Upgrade flags mapped to fixed quantity-1 codes
  - Required-field validation per bathroom type

All tests are pure unit tests; no database or external services required.
"""

import pytest

from renoquote.errors import QuoteValidationError
from renoquote.services.form_mapper import (
    coerce_form,
    count_plumbing_points,
    map_form_to_quantities,
)


def _form(**overrides):
    base = {"bathroom_type": "tub_shower", "floor_sqft": 40, "wet_wall_sqft": 60}
    base.update(overrides)
    return base


# ---------------------------------------------------------------------------
# Plumbing points
# ---------------------------------------------------------------------------

class TestPlumbingPoints:
    """Tests for count_plumbing_points()."""

    def test_tub_shower(self):
        """pan/tub 3 + shower set 1 + sink 1 + toilet 1 = 6"""
        assert count_plumbing_points("tub_shower") == 6

    def test_tub_only(self):
        assert count_plumbing_points("tub_only") == 6

    def test_walk_in_has_no_toilet_point(self):
        """3 + 1 + sink 1 = 5"""
        assert count_plumbing_points("walk_in") == 5

    def test_powder_is_sink_and_toilet_only(self):
        assert count_plumbing_points("powder") == 2


# ---------------------------------------------------------------------------
# Quantity map
# ---------------------------------------------------------------------------

class TestQuantities:
    """Tests for map_form_to_quantities() presence and aggregation rules."""

    def test_demolition_always_present(self):
        q, _ = map_form_to_quantities(_form(bathroom_type="powder", wet_wall_sqft=None))
        assert q["DEM"] == 1

    def test_floor_area_includes_shower_floor(self):
        q, meta = map_form_to_quantities(_form(floor_sqft=40, shower_floor_sqft=9))
        assert q["TILE-FLR"] == 49
        assert q["DUMP"] == 49
        assert meta["total_floor_sqft"] == 49

    def test_wet_wall_codes_share_area(self):
        q, _ = map_form_to_quantities(_form(wet_wall_sqft=72))
        assert q["SUB-GRB"] == q["WPF-KER"] == q["TILE-WET"] == 72

    def test_zero_wet_wall_emits_no_wet_codes(self):
        q, _ = map_form_to_quantities(_form(wet_wall_sqft=0))
        for code in ("SUB-GRB", "WPF-KER", "TILE-WET"):
            assert code not in q

    def test_dry_wall_sums_other_walls_and_accent(self):
        """other walls 20 + accent 10 = 30 sqft of TILE-DRY"""
        q, meta = map_form_to_quantities(_form(
            tile_other_walls=True, tile_other_walls_sqft=20,
            add_accent_feature=True, accent_feature_sqft=10,
        ))
        assert q["TILE-DRY"] == 30
        assert meta["dry_wall_sqft"] == 30
        assert meta["accent_feature_sqft"] == 10

    def test_unticked_other_walls_are_ignored(self):
        q, _ = map_form_to_quantities(_form(tile_other_walls=False, tile_other_walls_sqft=20))
        assert "TILE-DRY" not in q

    def test_no_electrical_items_means_no_ele(self):
        q, _ = map_form_to_quantities(_form(electrical_items=0))
        assert "ELE" not in q

    def test_vanity_only_with_width(self):
        without, _ = map_form_to_quantities(_form(vanity_width_in=0))
        with_vanity, _ = map_form_to_quantities(_form(vanity_width_in=36))
        assert "VAN" not in without
        assert with_vanity["VAN"] == 1

    def test_recess_only_for_walk_in(self):
        walk_in, _ = map_form_to_quantities(_form(bathroom_type="walk_in"))
        tub, _ = map_form_to_quantities(_form())
        assert walk_in["RECESS"] == 1
        assert "RECESS" not in tub

    def test_asbestos_test_for_pre_1980(self):
        old, _ = map_form_to_quantities(_form(year_built="pre_1980"))
        new, _ = map_form_to_quantities(_form(year_built="post_1980"))
        assert old["ASB-T"] == 1
        assert "ASB-T" not in new

    def test_upgrades_map_to_codes(self):
        q, _ = map_form_to_quantities(_form(upgrades={
            "heated_floors": True, "built_in_niche": True, "shower_bench": True,
        }))
        assert q["HEATED-FLR"] == 1
        assert q["NICHE"] == 1
        assert q["BENCH"] == 1
        assert "GRAB-BARS" not in q

    def test_no_zero_quantities_emitted(self):
        q, _ = map_form_to_quantities(_form(
            shower_floor_sqft=0, electrical_items=0, vanity_width_in=0, upgrades=None,
        ))
        assert all(qty > 0 for qty in q.values())

    def test_meta_echoes_form(self):
        _, meta = map_form_to_quantities(_form(building_type="condo", ceiling_height=8.5))
        assert meta["bathroom_type"] == "tub_shower"
        assert meta["building_type"] == "condo"
        assert meta["plumbing_points"] == 6
        assert meta["ceiling_height"] == 8.5


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    """Tests for required-field checks and form coercion."""

    def test_floor_sqft_required(self):
        with pytest.raises(QuoteValidationError) as exc:
            map_form_to_quantities({"bathroom_type": "powder"})
        assert exc.value.field == "floor_sqft"

    @pytest.mark.parametrize("bathroom_type", ["walk_in", "tub_shower", "tub_only"])
    def test_wet_wall_required_for_wet_rooms(self, bathroom_type):
        with pytest.raises(QuoteValidationError) as exc:
            map_form_to_quantities({"bathroom_type": bathroom_type, "floor_sqft": 40})
        assert exc.value.field == "wet_wall_sqft"

    def test_powder_room_needs_no_wet_wall(self):
        q, _ = map_form_to_quantities({"bathroom_type": "powder", "floor_sqft": 20})
        assert "TILE-WET" not in q

    def test_unknown_bathroom_type_is_validation_error(self):
        with pytest.raises(QuoteValidationError) as exc:
            coerce_form({"bathroom_type": "sauna", "floor_sqft": 40})
        assert exc.value.field == "bathroom_type"

    def test_negative_area_rejected(self):
        with pytest.raises(QuoteValidationError):
            coerce_form(_form(floor_sqft=-5))

    def test_unknown_fields_ignored(self):
        form = coerce_form(_form(budget_range="10-20k"))
        assert form.floor_sqft == 40
