"""Tests for cdnheaders.policy -- eligibility gate and rule resolution.

Covers:
- Disabled config, non-GET/HEAD methods, authenticated visitors
- Precedence: exclusion > exact route > route pattern > URL pattern
- Declaration order among wildcard patterns
- ``None`` durations falling back to ``default_duration``
- Requests without a route name
"""

from __future__ import annotations

import pytest

from cdnheaders.models import MatchKind, PolicyMatch
from cdnheaders.policy import is_eligible, is_route_excluded, resolve


# ------------------------------------------------------------------ #
# is_eligible
# ------------------------------------------------------------------ #


class TestIsEligible:
    @pytest.mark.parametrize("method", ["GET", "HEAD", "get", "head"])
    def test_safe_methods_are_eligible(self, make_config, make_request, method: str) -> None:
        assert is_eligible(make_config(), make_request(method=method)) is True

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    def test_other_methods_are_never_eligible(self, make_config, make_request, method: str) -> None:
        assert is_eligible(make_config(), make_request(method=method)) is False

    def test_disabled_config(self, make_config, make_request) -> None:
        assert is_eligible(make_config(enabled=False), make_request()) is False

    def test_authenticated_skipped_by_default(self, make_config, make_request) -> None:
        assert is_eligible(make_config(), make_request(is_authenticated=True)) is False

    def test_authenticated_allowed_when_not_skipping(self, make_config, make_request) -> None:
        config = make_config(skip_authenticated=False)
        assert is_eligible(config, make_request(is_authenticated=True)) is True


# ------------------------------------------------------------------ #
# resolve
# ------------------------------------------------------------------ #


class TestResolve:
    def test_exact_route_beats_earlier_wildcard(self, make_config, make_request) -> None:
        config = make_config(routes={"products.*": 3600, "products.show": 7200})
        match = resolve(config, make_request(route_name="products.show"))
        assert match == PolicyMatch(7200, MatchKind.ROUTE, "products.show")

    def test_route_pattern(self, make_config, make_request) -> None:
        config = make_config(routes={"products.*": 7200})
        match = resolve(config, make_request(route_name="products.index"))
        assert match is not None
        assert match.duration == 7200
        assert match.matched_by is MatchKind.ROUTE_PATTERN
        assert match.pattern == "products.*"

    def test_first_declared_pattern_wins(self, make_config, make_request) -> None:
        config = make_config(routes={"products.*": 100, "products.show.*": 200})
        match = resolve(config, make_request(route_name="products.show.full"))
        assert match is not None
        assert match.duration == 100

    def test_route_rules_beat_url_patterns(self, make_config, make_request) -> None:
        config = make_config(routes={"products.*": 3600}, patterns={"/products/*": 60})
        match = resolve(config, make_request(path="/products/1", route_name="products.show"))
        assert match is not None
        assert match.matched_by is MatchKind.ROUTE_PATTERN

    def test_url_pattern_when_route_unmatched(self, make_config, make_request) -> None:
        config = make_config(routes={"blog.*": 3600}, patterns={"/products/*": 60})
        match = resolve(config, make_request(path="/products/1", route_name="products.show"))
        assert match == PolicyMatch(60, MatchKind.URL_PATTERN, "/products/*")

    def test_url_pattern_without_route_name(self, make_config, make_request) -> None:
        config = make_config(patterns={"/api/*": 600})
        match = resolve(config, make_request(path="/api/users"))
        assert match is not None
        assert match.duration == 600

    def test_url_pattern_is_segment_bounded(self, make_config, make_request) -> None:
        config = make_config(patterns={"/api/*": 600})
        assert resolve(config, make_request(path="/api/users/1")) is None

    def test_path_without_leading_slash(self, make_config, make_request) -> None:
        config = make_config(patterns={"/api/*": 600})
        assert resolve(config, make_request(path="api/users")) is not None

    def test_no_rules_means_no_policy(self, make_config, make_request) -> None:
        assert resolve(make_config(), make_request(path="/", route_name="home")) is None

    def test_exclusion_overrides_inclusion(self, make_config, make_request) -> None:
        config = make_config(routes={"admin.*": 3600}, excluded_routes=["admin.*"])
        assert resolve(config, make_request(route_name="admin.dashboard")) is None

    def test_exclusion_overrides_exact_and_url_rules(self, make_config, make_request) -> None:
        config = make_config(
            routes={"admin.dashboard": 3600},
            patterns={"/admin": 3600},
            excluded_routes=["admin.*"],
        )
        request = make_request(path="/admin", route_name="admin.dashboard")
        assert resolve(config, request) is None

    def test_exclusion_needs_a_route_name(self, make_config, make_request) -> None:
        config = make_config(patterns={"/admin": 60}, excluded_routes=["*"])
        match = resolve(config, make_request(path="/admin"))
        assert match is not None
        assert match.duration == 60

    def test_none_duration_uses_default(self, make_config, make_request) -> None:
        config = make_config(default_duration=900, routes={"home": None})
        match = resolve(config, make_request(route_name="home"))
        assert match is not None
        assert match.duration == 900

    def test_none_duration_on_url_pattern(self, make_config, make_request) -> None:
        config = make_config(patterns={"/": None})
        match = resolve(config, make_request(path="/"))
        assert match is not None
        assert match.duration == 3600

    def test_zero_duration_is_kept(self, make_config, make_request) -> None:
        config = make_config(routes={"home": 0})
        match = resolve(config, make_request(route_name="home"))
        assert match is not None
        assert match.duration == 0


class TestIsRouteExcluded:
    def test_matches_any_pattern(self, make_config) -> None:
        config = make_config(excluded_routes=["admin.*", "dashboard.*"])
        assert is_route_excluded(config, "dashboard.home") is True
        assert is_route_excluded(config, "products.show") is False

    def test_missing_route_name(self, make_config) -> None:
        assert is_route_excluded(make_config(excluded_routes=["*"]), None) is False


class TestPolicyMatchDescribe:
    @pytest.mark.parametrize(
        ("kind", "label"),
        [
            (MatchKind.ROUTE, "Route: home"),
            (MatchKind.ROUTE_PATTERN, "Route Pattern: home"),
            (MatchKind.URL_PATTERN, "URL Pattern: home"),
        ],
    )
    def test_labels(self, kind: MatchKind, label: str) -> None:
        assert PolicyMatch(60, kind, "home").describe() == label
