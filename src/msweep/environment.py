"""
Gymnasium environment wrapper for Minesweeper.

Lets scripts and automated players drive a board through the standard
reset/step interface.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, OpenResult


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array indexed [y, x] where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = open cell with adjacent mine count
        - 9 = mine (only once the episode is lost)

    Actions:
        Discrete action space of size width * height.
        Action i opens the cell at (i % width, i // width).

    Rewards:
        - +1 for opening a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for a blocked action (already open)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 9 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode
        self._lost = False

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.total_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new episode on a fresh board.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        board_seed = int(self.np_random.integers(2**32))
        self.board = Board(self.config, rng=random.Random(board_seed))
        self._lost = False
        self._steps = 0

        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Open one cell.

        Args:
            action: Cell index (y * width + x).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        x, y = self._action_to_position(action)
        self._steps += 1

        result = self.board.open(x, y)
        if result == OpenResult.BLOCKED:
            reward = -0.1
        elif result == OpenResult.DETONATED:
            self._lost = True
            reward = -10.0
        elif self.board.has_won():
            reward = 10.0
        else:
            reward = 1.0

        terminated = self._lost or self.board.has_won()
        return self._get_observation(), reward, terminated, False, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (x, y) position."""
        return action % self.config.width, action // self.config.width

    def _get_observation(self) -> np.ndarray:
        return self.board.get_observation(show_mines=self._lost)

    @property
    def game_state(self) -> str:
        """PLAYING, WON or LOST."""
        if self._lost:
            return "LOST"
        if self.board.has_won():
            return "WON"
        return "PLAYING"

    def _get_info(self) -> Dict[str, Any]:
        return {
            "steps": self._steps,
            "revealed": self.board.opened_count,
            "total_safe": self.config.total_cells - self.config.num_mines,
            "game_state": self.game_state,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        symbols = {-1: ".", -2: "#", 9: "*", 0: " "}
        lines = []
        obs = self._get_observation()
        for y in range(self.config.height):
            lines.append(" ".join(
                symbols.get(int(val), str(val)) for val in obs[y]
            ))
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = cell can still be opened.
        """
        return (self._get_observation() == -1).flatten()
