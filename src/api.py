import logging
import random
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field, field_validator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import core
import terminality
from grid import Side, Tile

logger = logging.getLogger(__name__)

RATE_LIMIT = "100/minute"

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Rules API",
    description="A stateless rules service for the 2048 game. "\
                "Keep the game state (board, score, max_score, win_tile) on the client side "\
                "and send it with every request.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    size: int = Field(
        default=core.DEFAULT_BOARD_SIZE,
        gt=1, # Board size must be at least 2x2
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    win_tile: int = Field(
        default=terminality.MAX_PIECE,
        gt=0,
        description="The tile value that ends the game as a win (e.g., 2048)."
    )
    seed: Optional[int] = Field(default=None, description="Seed for the starting tiles, for reproducible games.")

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    board: List[List[int]] = Field(..., description="The N x N board, top row first, 0 for an empty cell.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    max_score: int = Field(..., ge=0, description="Best score so far, updated when a game ends.")
    progress: terminality.GameProgressState = Field(
        ...,
        description="Current progress state of the game (IN_PROGRESS, GAME_WON, GAME_OVER)."
    )
    game_over: bool = Field(..., description="True if the win tile was reached or no move is left.")
    win_tile: int = Field(..., gt=0, description="The tile value required to win this game instance.")
    board_size: int = Field(..., gt=0, description="The dimension N of the N x N board.")
    available_moves: List[Side] = Field(..., description="Sides toward which a tilt would change the board.")

class GameRequestData(BaseModel):
    """The client-held state sent with every mutating request."""
    board: List[List[int]] = Field(..., description="Current N x N board, top row first, 0 for an empty cell.")
    score: int = Field(..., ge=0, description="Current score.")
    max_score: int = Field(default=0, ge=0, description="Best score so far.")
    win_tile: int = Field(default=terminality.MAX_PIECE, gt=0, description="The win tile for this game instance.")

class MoveRequestData(GameRequestData):
    """Data required to make a move."""
    direction: Side = Field(
        ...,
        description="Side to tilt toward, by name (NORTH, EAST, SOUTH, WEST) or value (0 to 3)."
    )
    seed: Optional[int] = Field(default=None, description="Seed for the tile spawned after the move.")

    @field_validator("direction", mode="before")
    @classmethod
    def _side_from_name(cls, value):
        if isinstance(value, str):
            try:
                return Side[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown side {value!r}; expected one of {[s.name for s in Side]}.")
        return value

class AddTileRequestData(GameRequestData):
    """Data required to place a single tile."""
    col: int = Field(..., ge=0, description="Column of the cell, 0 being the left edge.")
    row: int = Field(..., ge=0, description="Row of the cell, 0 being the bottom edge.")
    value: int = Field(..., ge=2, description="Tile value, a power of two.")

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )

# --- Helpers ---

def _state_from_request(request_data: GameRequestData) -> core.GameState:
    try:
        return core.GameState.from_values(
            request_data.board,
            score=request_data.score,
            max_score=request_data.max_score,
            win_tile=request_data.win_tile,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid game state in request: {str(e)}")

def _state_fields(state: core.GameState) -> dict:
    return dict(
        board=state.values(),
        score=state.score,
        max_score=state.max_score,
        progress=state.progress(),
        game_over=state.game_over(),
        win_tile=state.win_tile,
        board_size=state.size,
        available_moves=state.available_moves(),
    )

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(RATE_LIMIT)
async def start_new_game(request: Request, settings: NewGameSettings):
    """
    Initializes a new 2048 game based on the provided settings (size and win_tile).

    - **size**: Dimension of the N x N board (e.g., 4 for 4x4). Default is 4.
    - **win_tile**: Tile value to reach to win (e.g., 2048). Default is 2048.
    - **seed**: Optional seed for the two starting tiles.

    Returns the initial game state with two random tiles and score 0.
    """
    try:
        state = core.GameState(settings.size, settings.win_tile)
        state.new_game(random.Random(settings.seed))
        return GameStateData(**_state_fields(state))
    except ValueError as e:
        # Invalid settings, e.g. a win tile that is not a power of two
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error in /game/new")
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(RATE_LIMIT)
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    The API will:
    1. Tilt the board toward `direction` (slide tiles, merge).
    2. If the tilt changed the board, add a new random tile (2 or 4).
    3. Report the new game status (IN_PROGRESS, GAME_WON, GAME_OVER).

    Returns the updated game state, whether the move was effective, and an optional message.
    """
    state = _state_from_request(request_data)
    message_for_client: Optional[str] = None

    try:
        move_was_effective = state.tilt(request_data.direction)

        if move_was_effective:
            state.add_random_tile(random.Random(request_data.seed))
        else:
            message_for_client = "Move was not effective; board state unchanged by tilt."

        current_progress = state.progress()
        if current_progress == terminality.GameProgressState.GAME_WON:
            message_for_client = "Congratulations! You won!"
        elif current_progress == terminality.GameProgressState.GAME_OVER:
            message_for_client = "Game Over. No more valid moves."

        return MoveResponseData(
            **_state_fields(state),
            move_was_effective=move_was_effective,
            message=message_for_client
        )
    except Exception as e:
        logger.exception("Unexpected error in /game/move")
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")


@app.post("/game/tile", response_model=GameStateData, summary="Place a Tile on the Board")
@limiter.limit(RATE_LIMIT)
async def add_tile(request: Request, request_data: AddTileRequestData):
    """
    Places a tile of `value` at (`col`, `row`), (0, 0) being the bottom-left cell.

    The cell must be empty and inside the board.
    """
    state = _state_from_request(request_data)
    try:
        state.add_tile(request_data.col, request_data.row, Tile(request_data.value))
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=400, detail=f"Cannot place tile: {str(e)}")
    return GameStateData(**_state_fields(state))
