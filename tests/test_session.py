"""Tests for the interactive terrain session."""

import pytest
import numpy as np

from py_terrapath.core.colouring import PATH_COLOUR
from py_terrapath.core.exceptions import ConfigurationError, OutOfBoundsError
from py_terrapath.core.grid import Connectivity
from py_terrapath.core.heightfield import HeightfieldConfig
from py_terrapath.core.pathfinding import SearchStatus
from py_terrapath.core.session import TerrainSession
from py_terrapath.core.terrain import TerrainCategory


class TestTerrainSession:
    """Test regeneration, selection and search."""

    @pytest.fixture
    def session(self, all_land_classifier):
        config = HeightfieldConfig(width=30, height=20, zoom=10.0)
        return TerrainSession(config, seed="session", height_scale=1.0,
                              classifier=all_land_classifier)

    def test_initial_grid(self, session):
        assert session.grid.size == (30, 20)
        assert np.all(session.grid.categories == TerrainCategory.LAND)
        assert session.start is None
        assert session.end is None

    def test_height_scale_applies(self, all_land_classifier):
        config = HeightfieldConfig(width=10, height=10, zoom=5.0)
        session = TerrainSession(config, seed="scale", height_scale=1000.0,
                                 classifier=all_land_classifier)
        assert np.allclose(session.grid.elevations, session.grid.samples * 1000.0)

    def test_default_classifier(self):
        session = TerrainSession(HeightfieldConfig(width=8, height=8), seed="plain")
        assert session.grid.category_counts()[TerrainCategory.WATER] >= 0
        assert session.classifier.classify(0.1) == TerrainCategory.WATER

    def test_click_cycle(self, session):
        """First click sets start, second sets end, third starts over."""
        session.select_point((1, 1))
        assert session.start == (1, 1)
        assert session.end is None

        session.select_point((5, 6))
        assert session.start == (1, 1)
        assert session.end == (5, 6)

        session.select_point((7, 7))
        assert session.start == (7, 7)
        assert session.end is None

    def test_select_out_of_bounds(self, session):
        with pytest.raises(OutOfBoundsError):
            session.select_point((30, 0))

    def test_no_path_until_both_points(self, session):
        assert session.current_path() is None
        session.select_point((0, 0))
        assert session.current_path() is None

    def test_current_path(self, session):
        session.select_point((0, 0))
        session.select_point((10, 5))

        result = session.current_path()
        assert result.status is SearchStatus.FOUND
        assert result.path[0] == (0, 0)
        assert result.path[-1] == (10, 5)
        assert session.last_result is result

    def test_regenerate_replaces_grid_and_drops_portals(self, session):
        old_grid = session.grid
        session.place_portal((0, 0), (29, 19))
        assert old_grid.portal_pairs()

        new_grid = session.regenerate(seed="other")
        assert new_grid is not old_grid
        assert session.grid is new_grid
        assert new_grid.portal_pairs() == []
        assert session.seed == "other"
        assert not np.array_equal(new_grid.samples, old_grid.samples)

    def test_regenerate_keeps_points_in_bounds(self, session):
        session.select_point((2, 2))
        session.select_point((25, 15))

        session.regenerate(width=20, height=20)
        assert session.start == (2, 2)
        assert session.end is None
        assert session.grid.size == (20, 20)

    def test_regenerate_changes_height_scale(self, session):
        session.regenerate(height_scale=50.0)
        assert session.height_scale == 50.0
        assert np.allclose(session.grid.elevations, session.grid.samples * 50.0)

    def test_regenerate_rejects_unknown_parameter(self, session):
        with pytest.raises(TypeError):
            session.regenerate(colour="blue")

    def test_portal_is_used(self, session):
        session.place_portal((0, 0), (29, 19))
        session.select_point((0, 0))
        session.select_point((29, 19))

        result = session.current_path()
        assert result.path == ((0, 0), (29, 19))

    def test_update_params(self, session):
        params = session.update_params(connectivity=4, snow_traversable=True)

        assert params.connectivity is Connectivity.FOUR
        assert params.policy.snow_traversable
        assert session.params is params

    def test_search_commits_points_and_params(self, session):
        result = session.search((0, 0), (4, 0), connectivity=4, teleport_cost=3.0)

        assert result.status is SearchStatus.FOUND
        assert session.start == (0, 0)
        assert session.end == (4, 0)
        assert session.params.connectivity is Connectivity.FOUR
        assert session.params.teleport_cost == 3.0
        assert session.last_result is result

    @pytest.mark.parametrize("start, end, changes", [
        ((1, 1), (50, 50), {"connectivity": 4, "teleport_cost": 9.0}),
        ((-1, 0), (2, 2), {"terrain_weight": 2.0}),
        ((1, 1), (2, 2), {"connectivity": 6}),
    ])
    def test_rejected_search_leaves_session_unchanged(self, session, start, end, changes):
        session.select_point((3, 3))
        session.select_point((5, 5))
        params = session.params

        with pytest.raises(ConfigurationError):
            session.search(start, end, **changes)

        assert session.params is params
        assert session.start == (3, 3)
        assert session.end == (5, 5)

    def test_render(self, session):
        session.regenerate(height_scale=0.0)
        session.select_point((0, 0))
        session.select_point((5, 0))
        assert tuple(session.render()[0, 3]) != PATH_COLOUR

        session.current_path()
        image = session.render()
        assert image.shape == (20, 30, 3)
        assert tuple(image[0, 3]) == PATH_COLOUR

    def test_render_explored(self, session):
        session.regenerate(height_scale=0.0)
        session.update_params(connectivity=4)
        session.select_point((0, 0))
        session.select_point((3, 3))
        session.current_path()

        plain = session.render()
        explored = session.render(show_explored=True)
        assert not np.array_equal(plain, explored)
