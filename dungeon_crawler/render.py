"""Handlebars rendering of engine events for the terminal."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pybars

from dungeon_crawler.models import Event, Game, TreasureType


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class RenderError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


# ── ANSI palette ────────────────────────────────────────

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"

# type -> (display name, icon, colour)
TREASURE_STYLES: dict[TreasureType, tuple[str, str, str]] = {
    TreasureType.GOLD: ("Gold", "$", YELLOW),
    TreasureType.HEALTH_POTION: ("Health Potion", "+", RED),
    TreasureType.WEAPON: ("Weapon", "/", CYAN),
    TreasureType.ARTIFACT: ("Artifact", "*", MAGENTA),
}

MAP_GLYPHS: dict[str, str] = {
    "player": "[P]",
    "exit": "[X]",
    "monster": "[M]",
    "treasure": "[T]",
    "visited": "[O]",
    "adjacent": "[ ]",
    "hidden": " · ",
    "empty": "   ",
}

_KIND_COLORS: dict[str, str] = {
    "error": RED,
    "encounter": RED + BOLD,
    "defeat": RED + BOLD,
    "victory": GREEN + BOLD,
    "system": GREEN,
}


def paint(text: str, color: str, enabled: bool = True) -> str:
    return f"{color}{text}{RESET}" if enabled and text else text


# ── Custom Handlebars helpers ────────────────────────────


def _helper_join(this, items, separator=", "):
    """{{{join list ", "}}}: join a list into one string."""
    return str(separator).join(str(item) for item in items or [])


def _helper_pad(this, value, width):
    """{{{pad text 12}}}: left-align text in a fixed-width column."""
    return str(value).ljust(int(width))


_HELPERS: dict[str, Callable] = {
    "join": _helper_join,
    "pad": _helper_pad,
}


def render_template(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context, helpers=_HELPERS))
    except Exception as e:
        raise RenderError(f"Template error: {e}") from e


# ── Templates ───────────────────────────────────────────
# Every value is triple-stashed: output goes to a terminal, not HTML.

TEMPLATES: dict[str, str] = {
    "welcome": (
        "Welcome, {{{player}}}, to the dungeon (level {{level}}).\n"
        "Find the exit alive. Type 'help' for a list of commands."
    ),
    "room": (
        "=== {{{name}}} ===\n"
        "{{{description}}}\n"
        "{{#if monster}}A {{{monster.name}}} lurks here! (HP {{{monster.health}}})\n{{/if}}"
        "{{#each treasures}}You see: {{{this}}}\n{{/each}}"
        "Exits: {{{join exits \", \"}}}"
    ),
    "encounter": (
        "{{#if is_boss}}The ground trembles... {{/if}}"
        "A {{{monster}}} blocks your way! (HP {{{health}}})\n"
        "Type 'attack' to fight."
    ),
    "combat": (
        "You hit the {{{monster_name}}} for {{damage_dealt}} damage. ({{{monster_hp}}} left)"
        "{{#if monster_retaliated}}\nThe {{{monster_name}}} hits you for {{damage_taken}} damage."
        " (Your health: {{{player_hp}}}){{/if}}"
        "{{#if victory}}\nThe {{{monster_name}}} is defeated! You gain {{experience_gained}} experience.{{/if}}"
    ),
    "loot": "The {{{monster}}} dropped {{{treasure}}}. Type 'take' to pick it up.",
    "take": "You pick up: {{{join items \", \"}}}",
    "use": (
        "{{#if drink}}You drink the {{{item}}} and recover {{healed}} health. (Health: {{{health}}}){{/if}}"
        "{{#if equip}}You equip the {{{item}}} (+{{bonus}} attack)"
        "{{#if replaced}}, putting away the {{{replaced}}}{{/if}}. Attack power: {{attack_power}}.{{/if}}"
    ),
    "inventory": (
        "Health: {{{health}}}  Attack: {{attack_power}}  Experience: {{experience}}\n"
        "{{#if items}}Inventory:\n{{#each items}}  {{{this}}}\n{{/each}}"
        "Total treasure value: {{total_value}}"
        "{{else}}Your inventory is empty.{{/if}}"
    ),
    "map": (
        "{{#each rows}}{{{this}}}\n{{/each}}"
        "[P] you  [X] exit  [M] monster  [T] treasure  [O] visited  [ ] unexplored"
    ),
    "help": "Commands:\n{{#each commands}}  {{{pad usage 16}}}{{{description}}}\n{{/each}}",
    "info": "{{{message}}}",
    "error": "[!] {{{message}}}",
    "system": "{{{message}}}",
    "victory": (
        "*** You found the way out! ***\n"
        "{{{player}}} escapes after {{turns}} turns with {{experience}} experience"
        " and treasure worth {{treasure_value}}.\n"
        "Type 'restart' to play again or 'quit' to leave."
    ),
    "defeat": (
        "*** You have been slain by the {{{monster}}}. ***\n"
        "{{{player}}} fell after {{turns}} turns with {{experience}} experience.\n"
        "Type 'restart' to try again or 'quit' to leave."
    ),
}

STATUS_TEMPLATE = (
    "[{{{name}}} | HP {{{health}}} | ATK {{attack_power}} | XP {{experience}}"
    " | Loot {{treasure_value}} | Turn {{turn}}]"
)


# ── Context builders ────────────────────────────────────


def treasure_label(treasure: dict[str, Any], color: bool = True) -> str:
    """One-line label for a dumped Treasure, styled by its type."""
    display, icon, tint = TREASURE_STYLES[TreasureType(treasure["type"])]
    label = f"{icon} {treasure['name']} ({display}, worth {treasure['value']})"
    return paint(label, tint, color)


def _hp(health: dict[str, int]) -> str:
    return f"{health['current']}/{health['max']}"


def _context(event: Event, color: bool) -> dict[str, Any]:
    data = dict(event.data)
    if event.kind == "room":
        data["treasures"] = [treasure_label(t, color) for t in data.get("treasures", [])]
    elif event.kind == "combat":
        data["monster_hp"] = _hp(data["monster_health"])
        data["player_hp"] = _hp(data["player_health"])
        data["victory"] = data["outcome"] == "victory"
    elif event.kind == "loot":
        data["treasure"] = treasure_label(data["treasure"], color)
    elif event.kind == "take":
        data["items"] = [treasure_label(t, color) for t in data["items"]]
    elif event.kind == "use":
        data["drink"] = data.get("action") == "drink"
        data["equip"] = data.get("action") == "equip"
    elif event.kind == "inventory":
        data["items"] = [
            treasure_label(t, color) + (" [equipped]" if t.get("equipped") else "")
            for t in data["items"]
        ]
    elif event.kind == "map":
        data["rows"] = ["".join(MAP_GLYPHS[cell] for cell in row) for row in data["rows"]]
    return data


def render_event(event: Event, color: bool = True) -> str:
    template = TEMPLATES.get(event.kind)
    if template is None:
        raise RenderError(f"No template for event kind: {event.kind}")
    text = render_template(template, _context(event, color)).rstrip("\n")
    tint = _KIND_COLORS.get(event.kind)
    return paint(text, tint, color) if tint else text


def render_events(events: list[Event], color: bool = True) -> str:
    return "\n".join(render_event(e, color) for e in events)


def render_status(game: Game) -> str:
    """Compact status line shown above the prompt."""
    player = game.player
    return render_template(STATUS_TEMPLATE, {
        "name": player.name,
        "health": str(player.health),
        "attack_power": player.attack_power,
        "experience": player.experience,
        "treasure_value": player.treasure_value,
        "turn": game.turn,
    })
