from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from shadowbets.core.casino import Casino
from shadowbets.core.engine import WagerEngine
from shadowbets.core.exceptions import InvalidGuess, InvalidPhaseTransition
from shadowbets.core.games import VARIANTS, GameMode, get_variant, is_enabled
from shadowbets.core.logger import get_logger

logger = get_logger("api")

router = APIRouter()

# ==================== Request Models ====================

class GuessRequest(BaseModel):
    guess: str

class PreferencesRequest(BaseModel):
    selected_bot: Optional[str] = None
    sound_enabled: Optional[bool] = None
    haptics_enabled: Optional[bool] = None


# ==================== Helpers ====================

def get_casino(request: Request) -> Casino:
    return request.app.state.casino

def get_mode(casino: Casino, variant: str) -> GameMode:
    try:
        mode = GameMode.from_slug(variant)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown game: {variant}")
    if not is_enabled(mode, casino.config.games):
        raise HTTPException(status_code=404, detail=f"{mode.value} is disabled")
    return mode

def get_engine(request: Request, variant: str) -> WagerEngine:
    casino = get_casino(request)
    return casino.game(get_mode(casino, variant))

def preferences_payload(casino: Casino) -> dict:
    prefs = casino.preferences
    return {
        "selected_bot": prefs.selected_bot,
        "sound_enabled": prefs.sound_enabled,
        "haptics_enabled": prefs.haptics_enabled,
    }

# ==================== Profile Endpoints ====================

@router.get("/balance")
async def get_balance(request: Request):
    return {"balance": get_casino(request).wallet.balance}

@router.get("/history")
async def get_history(request: Request):
    casino = get_casino(request)
    return {
        "history": [
            record.model_dump(mode="json", by_alias=True)
            for record in casino.history.snapshot()
        ]
    }

@router.get("/stats")
async def get_stats(request: Request):
    return get_casino(request).stats()

@router.post("/reset")
async def reset_stats(request: Request):
    casino = get_casino(request)
    casino.reset_stats()
    return {"balance": casino.wallet.balance, "games_played": len(casino.history)}

@router.get("/preferences")
async def get_preferences(request: Request):
    return preferences_payload(get_casino(request))

@router.put("/preferences")
async def update_preferences(request: Request, data: PreferencesRequest):
    casino = get_casino(request)
    casino.update_preferences(
        selected_bot=data.selected_bot,
        sound_enabled=data.sound_enabled,
        haptics_enabled=data.haptics_enabled,
    )
    return preferences_payload(casino)

# ==================== Game Endpoints ====================

@router.get("/games")
async def list_games(request: Request):
    casino = get_casino(request)
    return {
        "games": [
            get_variant(mode, casino.config.games).catalogue()
            for mode in VARIANTS
            if is_enabled(mode, casino.config.games)
        ]
    }

@router.post("/games/{variant}/open")
async def open_game(request: Request, variant: str):
    casino = get_casino(request)
    engine = casino.open_game(get_mode(casino, variant))
    return engine.state()

@router.post("/games/{variant}/close")
async def close_game(request: Request, variant: str):
    casino = get_casino(request)
    casino.close_game(get_mode(casino, variant))
    return {"closed": True, "balance": casino.wallet.balance}

@router.get("/games/{variant}/state")
async def game_state(request: Request, variant: str):
    return get_engine(request, variant).state()

@router.post("/games/{variant}/bet")
async def place_bet(request: Request, variant: str):
    engine = get_engine(request, variant)
    try:
        placed = engine.place_bet()
    except InvalidPhaseTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"placed": placed, **engine.state()}

@router.post("/games/{variant}/guess")
async def make_guess(request: Request, variant: str, data: GuessRequest):
    engine = get_engine(request, variant)
    try:
        engine.make_guess(data.guess)
    except InvalidPhaseTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidGuess as e:
        raise HTTPException(status_code=400, detail=str(e))
    return engine.state()

@router.post("/games/{variant}/new-round")
async def new_round(request: Request, variant: str):
    engine = get_engine(request, variant)
    try:
        engine.new_round()
    except InvalidPhaseTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return engine.state()
