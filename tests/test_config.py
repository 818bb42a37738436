"""Tests for analysis parameters and presets."""

from __future__ import annotations

import dataclasses

import pytest

from stone_crack_analysis import PRESETS, AnalysisConfig, InvalidConfig


def test_default_is_strict_preset():
    assert AnalysisConfig() == AnalysisConfig.from_preset("strict")
    cfg = AnalysisConfig()
    assert cfg.edge_threshold == 50
    assert cfg.min_valid_points == 20
    assert cfg.min_linearity == 0.7
    assert cfg.max_cracks == 10


def test_sensitive_preset_values():
    cfg = AnalysisConfig.from_preset("sensitive")
    assert (cfg.edge_threshold, cfg.min_valid_points, cfg.min_length_fraction) == (25, 10, 0.05)
    assert (cfg.min_strength, cfg.min_linearity, cfg.max_cracks) == (50, 0.5, 15)


def test_shared_ceilings():
    for name in PRESETS:
        cfg = AnalysisConfig.from_preset(name)
        assert cfg.min_traced_points == 20
        assert cfg.max_points_per_crack == 1000
        assert cfg.max_stack_depth == 500
        assert cfg.max_visited == 100000
        assert cfg.wedge_min_spacing == 80
        assert cfg.max_wedge_points == 8
        assert cfg.intersection_threshold == 10


def test_overrides_and_immutability():
    cfg = AnalysisConfig.from_preset("sensitive", max_wedge_points=4)
    assert cfg.max_wedge_points == 4
    assert cfg.edge_threshold == 25
    assert cfg.with_overrides(edge_threshold=30).edge_threshold == 30
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.edge_threshold = 10
    assert cfg.to_dict()["max_wedge_points"] == 4


def test_unknown_preset_or_field():
    with pytest.raises(InvalidConfig):
        AnalysisConfig.from_preset("lenient")
    with pytest.raises(InvalidConfig):
        AnalysisConfig.from_preset("strict", colour="red")
    with pytest.raises(InvalidConfig):
        AnalysisConfig().with_overrides(max_cracks=0)


@pytest.mark.parametrize("value", [None, float("nan"), "25"])
def test_non_numeric_field_rejected(value):
    with pytest.raises(InvalidConfig):
        AnalysisConfig.from_preset("sensitive", edge_threshold=value)
    with pytest.raises(InvalidConfig):
        AnalysisConfig(min_linearity=value).validate()


def test_max_width_may_be_none():
    assert AnalysisConfig(max_width=None).validate().max_width is None
    with pytest.raises(InvalidConfig):
        AnalysisConfig(max_width=float("nan")).validate()
