"""
Unit tests for the Gymnasium environment.
"""
import numpy as np

from msweep import BoardConfig, MinesweeperEnv


class TestMinesweeperEnv:
    """Test reset/step behaviour."""

    def test_reset_gives_hidden_board(self) -> None:
        """A fresh episode observes an all-hidden grid."""
        env = MinesweeperEnv(BoardConfig(6, 4, 5))
        obs, info = env.reset(seed=3)
        assert obs.shape == (4, 6)
        assert np.all(obs == -1)
        assert info["game_state"] == "PLAYING"
        assert info["total_safe"] == 19
        assert env.observation_space.contains(obs)

    def test_first_step_is_safe(self) -> None:
        """The first opened cell is never a mine."""
        env = MinesweeperEnv(BoardConfig(9, 9, 10))
        for seed in range(20):
            env.reset(seed=seed)
            _, reward, terminated, _, info = env.step(40)
            assert reward in (1.0, 10.0)
            assert info["revealed"] >= 1

    def test_same_seed_same_board(self) -> None:
        """Seeding reset makes mine layouts reproducible."""
        env = MinesweeperEnv(BoardConfig(9, 9, 10))
        env.reset(seed=11)
        env.step(0)
        first = env.board.all_mine_positions()
        env.reset(seed=11)
        env.step(0)
        assert env.board.all_mine_positions() == first

    def test_action_maps_to_x_y(self) -> None:
        """Action index is y * width + x."""
        env = MinesweeperEnv(BoardConfig(5, 3, 0))
        env.reset(seed=0)
        _, reward, terminated, _, info = env.step(7)
        assert env.board.get_cell(2, 1).is_open is True
        assert reward == 10.0
        assert terminated is True
        assert info["game_state"] == "WON"

    def test_blocked_step_is_penalised(self) -> None:
        """Opening an open cell costs a little and changes nothing."""
        env = MinesweeperEnv(BoardConfig(9, 9, 10))
        env.reset(seed=5)
        env.step(40)
        opened = env.board.opened_count
        _, reward, _, _, info = env.step(40)
        assert reward == -0.1
        assert info["revealed"] == opened

    def test_hitting_mine_ends_episode(self) -> None:
        """A mine costs -10, ends the episode and shows every mine."""
        env = MinesweeperEnv(BoardConfig(4, 4, 10))
        env.reset(seed=1)
        env.step(0)
        x, y = next(iter(env.board.all_mine_positions()))
        obs, reward, terminated, _, info = env.step(y * 4 + x)
        assert reward == -10.0
        assert terminated is True
        assert info["game_state"] == "LOST"
        assert np.count_nonzero(obs == 9) == 10

    def test_action_mask_tracks_hidden_cells(self) -> None:
        """Only hidden cells are valid actions."""
        env = MinesweeperEnv(BoardConfig(4, 4, 15))
        env.reset(seed=2)
        assert env.get_action_mask().sum() == 16
        env.step(5)
        mask = env.get_action_mask()
        assert mask.sum() == 15
        assert bool(mask[5]) is False

    def test_ansi_render(self) -> None:
        """ANSI mode returns one text row per board row."""
        env = MinesweeperEnv(BoardConfig(3, 2, 0), render_mode="ansi")
        env.reset(seed=0)
        assert env.render() == ". . .\n. . ."
        env.step(0)
        assert env.render() == "     \n     "
