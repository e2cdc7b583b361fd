"""Tests for the area catalog."""

import pytest

from py_talispod.core.areas import (
    ATTRIBUTE_META,
    DEFAULT_CATALOG,
    NEUTRAL,
    Area,
    AreaCatalog,
    Attribute,
    ElementKey,
    SeaSide,
    coerce_attribute,
    element_key_for,
    is_land_area_id,
    is_sea_area_id,
)


class TestAreaCatalog:
    """Test the default area catalog."""

    def test_catalog_size(self):
        """Test that the catalog holds 16 land and 6 sea areas."""
        areas = list(DEFAULT_CATALOG)

        assert len(DEFAULT_CATALOG) == 22
        assert sum(1 for area in areas if area.is_sea) == 6
        assert sum(1 for area in areas if not area.is_sea) == 16

    def test_sea_areas_are_storm(self):
        """Test that every sea area carries the storm attribute."""
        for area in DEFAULT_CATALOG:
            if area.is_sea:
                assert area.attribute == Attribute.STORM
                assert area.side in (SeaSide.NORTH, SeaSide.SOUTH)
                assert area.depth is not None

    def test_land_areas_per_attribute(self):
        """Test that each attribute owns four land areas."""
        for attribute in (Attribute.VOLCANO, Attribute.TORNADO, Attribute.EARTHQUAKE):
            assert len(DEFAULT_CATALOG.by_attribute(attribute)) == 4
        # Four storm land areas plus six seas
        assert len(DEFAULT_CATALOG.by_attribute(Attribute.STORM)) == 10

    def test_lookups(self):
        """Test name and attribute lookups."""
        assert DEFAULT_CATALOG.name("V1") == "火山"
        assert DEFAULT_CATALOG.en_name("V1") == "volcano"
        assert DEFAULT_CATALOG.attribute("T2") == Attribute.TORNADO
        assert DEFAULT_CATALOG.is_sea("SN_DEEP")
        assert not DEFAULT_CATALOG.is_sea("E4")

    def test_unknown_lookups(self):
        """Test that unknown ids yield empty results."""
        assert DEFAULT_CATALOG.get("nope") is None
        assert DEFAULT_CATALOG.get(None) is None
        assert DEFAULT_CATALOG.name(NEUTRAL) is None
        assert DEFAULT_CATALOG.attribute("nope") == Attribute.NEUTRAL
        assert not DEFAULT_CATALOG.is_sea("nope")

    def test_catalog_is_read_only(self):
        """Test that the catalog mapping cannot be mutated."""
        catalog = AreaCatalog({"X1": Area("X1", "x", "x", Attribute.VOLCANO)})

        with pytest.raises(TypeError):
            catalog.areas["X2"] = Area("X2", "y", "y", Attribute.STORM)

        assert "X1" in catalog
        assert "X2" not in catalog


class TestAttributes:
    """Test attribute metadata and coercion."""

    def test_metadata(self):
        """Test display names and growth buckets."""
        assert ATTRIBUTE_META[Attribute.VOLCANO].key == ElementKey.FIRE
        assert ATTRIBUTE_META[Attribute.TORNADO].stat_label == "Counter"
        assert ATTRIBUTE_META[Attribute.STORM].en == "Storm"
        assert ATTRIBUTE_META[Attribute.NEUTRAL].key is None

    @pytest.mark.parametrize("value,expected", [
        (None, None),
        ("", None),
        ("tornado", Attribute.TORNADO),
        ("  Storm ", Attribute.STORM),
        (Attribute.VOLCANO, Attribute.VOLCANO),
        ("lightning", Attribute.NEUTRAL),
    ])
    def test_coerce_attribute(self, value, expected):
        """Test attribute normalization."""
        assert coerce_attribute(value) == expected

    def test_element_key_for(self):
        """Test growth bucket lookup."""
        assert element_key_for(Attribute.EARTHQUAKE) == ElementKey.EARTH
        assert element_key_for("storm") == ElementKey.WATER
        assert element_key_for(Attribute.NEUTRAL) is None
        assert element_key_for(None) is None

    def test_id_classifiers(self):
        """Test prefix-based id classification."""
        assert is_sea_area_id("SS_MID")
        assert is_sea_area_id("SN_SHALLOW")
        assert not is_sea_area_id("S1")
        assert is_land_area_id("S1")
        assert not is_land_area_id(NEUTRAL)
        assert not is_land_area_id(None)
