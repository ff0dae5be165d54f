"""
Wraith — Effects Registry
Post-processing passes applied to each rendered frame.
Every effect is a function: (frame: np.ndarray, **params) -> np.ndarray
"""

from effects.atmosphere import vignette, figure_grain, emotional_glow


EFFECTS = {
    "vignette": {
        "fn": vignette,
        "category": "atmosphere",
        "params": {"time": 0.0, "intensity": 0.75},
        "description": "Breathing radial darkening toward the canvas edges",
    },
    "grain": {
        "fn": figure_grain,
        "category": "atmosphere",
        "params": {"intensity": 0.75, "threshold": 180, "amount": 6.0, "seed": None},
        "description": "Uniform grain on dark (figure) pixels only",
    },
    "glow": {
        "fn": emotional_glow,
        "category": "atmosphere",
        "params": {"time": 0.0, "intensity": 0.75},
        "description": "Overlay-blended warm color wash",
    },
}


def get_effect(name: str):
    """Get an effect by name. Returns (fn, default_params).

    Raises ValueError if the effect doesn't exist.
    """
    if name not in EFFECTS:
        available = ", ".join(sorted(EFFECTS.keys()))
        raise ValueError(f"Unknown effect: {name}. Available: {available}")
    entry = EFFECTS[name]
    return entry["fn"], entry["params"].copy()


def list_effects(category: str = None) -> list[dict]:
    """List all available effects with descriptions."""
    results = []
    for name, entry in EFFECTS.items():
        if category and entry.get("category") != category:
            continue
        results.append({
            "name": name,
            "description": entry["description"],
            "params": entry["params"],
            "category": entry.get("category", "other"),
        })
    return results


def apply_effect(frame, effect_name: str, frame_index: int = 0, **params):
    """Apply a named effect to a frame, filling unset params from defaults."""
    fn, defaults = get_effect(effect_name)
    unknown = set(params) - set(defaults)
    if unknown:
        raise ValueError(f"Unknown params for {effect_name}: {', '.join(sorted(unknown))}")
    merged = {**defaults, **params}
    return fn(frame, frame_index=frame_index, **merged)


def apply_chain(frame, effects_list: list[dict], frame_index: int = 0):
    """Apply a chain of effects sequentially.

    effects_list: [{"name": "vignette", "params": {"time": 1.2}}, ...]
    """
    from core.safety import validate_chain_depth
    validate_chain_depth(effects_list)

    for effect in effects_list:
        frame = apply_effect(frame, effect["name"], frame_index=frame_index,
                             **effect.get("params", {}))
    return frame


def atmosphere_chain(time: float, intensity: float, seed: int | None = None) -> list[dict]:
    """The sketch's per-frame post chain for the given time and intensity."""
    return [
        {"name": "vignette", "params": {"time": time, "intensity": intensity}},
        {"name": "grain", "params": {"intensity": intensity, "seed": seed}},
        {"name": "glow", "params": {"time": time, "intensity": intensity}},
    ]
